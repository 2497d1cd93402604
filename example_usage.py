#!/usr/bin/env python3
"""
Basic usage examples for HMAC request encoder library.

This script shows how to encode a request by hand and how to attach the
encoder to a requests.Session so every outbound request is signed.
"""

import logging
import sys

import requests

from hmac_encoder import HMACAuth, HMACEncoderError, RequestEncoder, RequestView


def main():
    """Run basic usage examples."""

    # Credentials
    api_key = "client1"
    secret_key = "python-client-demo-secret"
    server_url = "http://localhost:8080"

    logging.basicConfig(level=logging.DEBUG)

    print("=== HMAC Request Encoder Usage Examples ===\n")

    # Example 1: Create the encoder
    print("1. Creating request encoder...")
    encoder = RequestEncoder(api_key, secret_key, use_url_safe_base64=True)
    print(f"   {encoder!r}")
    print(f"   Secret key: {secret_key[:8]}...\n")

    try:
        # Example 2: Encode a request representation directly
        print("2. Encoding a GET request...")
        request = RequestView("GET", f"{server_url}/api/protected/profile?fields=name")
        encoder.encode_request(request)
        print(f"   URL: {request.url}")
        for name, value in request.headers.items():
            print(f"   {name}: {value}")
        print()

        # Example 3: Custom header names
        print("3. Using custom header names...")
        custom = RequestEncoder(api_key, secret_key).configure(
            signature_header="X-Signature",
            timestamp_header="X-Timestamp"
        )
        request = custom.encode_request(RequestView("DELETE", f"{server_url}/api/protected/data/1"))
        print(f"   Headers: {dict(request.headers)}\n")

        # Example 4: Sign every request sent by a requests.Session
        print("4. Preparing a signed request with requests.Session...")
        with requests.Session() as session:
            session.auth = HMACAuth(encoder)
            prepared = session.prepare_request(
                requests.Request("POST", f"{server_url}/api/protected/data", json={"message": "hello"})
            )
            print(f"   URL: {prepared.url}")
            print(f"   Signature: {prepared.headers[encoder.config['signature_header']]}\n")

    except HMACEncoderError as e:
        print(f"   ✗ Encoding failed: {e}")
        return 1

    print("=== Examples completed ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
