"""
HMAC Request Encoder

A Python library that adds HMAC-SHA256 authentication (API key, timestamp,
version and signature) to outbound HTTP requests.

Example usage:
    from hmac_encoder import RequestEncoder, RequestView

    encoder = RequestEncoder("your-api-key", "your-secret-key")
    request = encoder.encode_request(RequestView("GET", "https://api.example.com/v1/items"))
"""

from .auth import HMACAuth
from .encoder import RequestEncoder, SigningContext
from .request import RequestView
from .exceptions import (
    HMACEncoderError,
    InvalidCredentialError,
    ConfigurationError,
    MalformedURLError,
    ClockUnavailableError
)
from .constants import (
    VERSION,
    QUERY_PARAM_API_KEY,
    HEADER_AUTH_SIGNATURE,
    HEADER_AUTH_TIMESTAMP,
    HEADER_AUTH_VERSION,
    HEADER_AUTH_NONCE,
    DEFAULT_CONFIG
)

__version__ = "1.0.0"
__all__ = [
    "HMACAuth",
    "RequestEncoder",
    "SigningContext",
    "RequestView",
    "HMACEncoderError",
    "InvalidCredentialError",
    "ConfigurationError",
    "MalformedURLError",
    "ClockUnavailableError",
    "VERSION",
    "QUERY_PARAM_API_KEY",
    "HEADER_AUTH_SIGNATURE",
    "HEADER_AUTH_TIMESTAMP",
    "HEADER_AUTH_VERSION",
    "HEADER_AUTH_NONCE",
    "DEFAULT_CONFIG"
]
