"""
HMAC-SHA256 request signature computation.

The signed message is built from the API key, the HTTP method, the
percent-decoded path and query, the timestamp and an optional nonce:

    api_key + method + "\\n" + path + "?" + query + "\\n" + timestamp + nonce

The digest is Base64 encoded. With URL-safe output, '/' and '+' are replaced
by '_' and '-'; '=' padding is kept so existing servers can still verify it.
"""

import base64
import hashlib
import hmac
import re
from typing import Optional, Union
from urllib.parse import unquote

from .constants import MESSAGE_DELIMITER
from .exceptions import MalformedURLError

# A '%' that does not start a two digit hex escape
_INVALID_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode('utf-8')
    return value


def decode_component(value: Optional[str], name: str) -> str:
    """
    Percent-decode a raw URL component.

    Args:
        value: Raw component text, or None when the URL has no such component
        name: Component name used in error messages ("path", "query")

    Returns:
        The decoded component

    Raises:
        MalformedURLError: If the component is missing or cannot be decoded
    """
    if value is None:
        raise MalformedURLError(f"URL has no {name}")

    if _INVALID_ESCAPE.search(value):
        raise MalformedURLError(f"URL {name} contains an invalid percent escape")

    try:
        return unquote(value, errors='strict')
    except UnicodeDecodeError:
        raise MalformedURLError(f"URL {name} is not valid UTF-8 once decoded") from None


def normalize_path(path: str) -> str:
    """Drop one trailing '/' from a decoded path, unless it is the root."""
    if len(path) > 1 and path.endswith('/'):
        return path[:-1]
    return path


def build_message(api_key: str, method: str, path: str, query: str,
                  timestamp: str, nonce: str = "") -> bytes:
    """Build the canonical message from already decoded components."""
    message = (
        f"{api_key}{method}{MESSAGE_DELIMITER}"
        f"{path}?{query}{MESSAGE_DELIMITER}"
        f"{timestamp}{nonce}"
    )
    return message.encode('utf-8')


def canonical_message(api_key: str, method: str, raw_path: Optional[str],
                      raw_query: Optional[str], timestamp: str, nonce: str = "") -> bytes:
    """
    Build the canonical message from the raw (percent-encoded) path and query.

    The path and query are decoded once. A trailing '/' on the path is not
    signed, so '/v1/items/' and '/v1/items' share a signature.

    Raises:
        MalformedURLError: If the path or query is missing or undecodable
    """
    path = normalize_path(decode_component(raw_path, "path"))
    query = decode_component(raw_query, "query")
    return build_message(api_key, method, path, query, timestamp, nonce)


def compute_digest(secret_key: Union[str, bytes], message: bytes,
                   body: Optional[bytes] = None) -> bytes:
    """
    Compute the 32-byte HMAC-SHA256 digest of a message.

    A non-empty body is folded in after an extra delimiter; an empty or
    missing body leaves the digest unchanged.
    """
    mac = hmac.new(_to_bytes(secret_key), message, hashlib.sha256)
    if body:
        mac.update(MESSAGE_DELIMITER.encode('utf-8'))
        mac.update(body)
    return mac.digest()


def encode_digest(digest: bytes, url_safe: bool = False) -> str:
    """Base64 encode a digest, optionally swapping '/' and '+' for URL use."""
    signature = base64.b64encode(digest).decode('ascii')
    if url_safe:
        signature = signature.replace('/', '_').replace('+', '-')
    return signature


def sign(secret_key: Union[str, bytes], message: bytes, url_safe: bool = False,
         body: Optional[bytes] = None) -> str:
    """Create a Base64 encoded HMAC-SHA256 signature."""
    return encode_digest(compute_digest(secret_key, message, body), url_safe)


def verify(secret_key: Union[str, bytes], message: bytes, signature: str,
           url_safe: bool = False, body: Optional[bytes] = None) -> bool:
    """Verify a signature in constant time."""
    expected = sign(secret_key, message, url_safe, body)
    return hmac.compare_digest(expected.encode('ascii'), signature.encode('utf-8'))
