"""
Constants for HMAC request encoder library.
Compatible with servers expecting the X-Auth HMAC scheme, version 1.
"""

# Protocol version sent in the version header
VERSION = "1"

# Query parameter and HTTP headers (default names, overridable per encoder)
QUERY_PARAM_API_KEY = "apiKey"
HEADER_AUTH_SIGNATURE = "X-Auth-Signature"
HEADER_AUTH_TIMESTAMP = "X-Auth-Timestamp"
HEADER_AUTH_VERSION = "X-Auth-Version"
HEADER_AUTH_NONCE = "X-Auth-Nonce"

# ISO-8601, UTC, second precision, literal Z suffix
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Separates method+path+query from timestamp+nonce in the signed message
MESSAGE_DELIMITER = "\n"

# Default configuration values
DEFAULT_CONFIG = {
    'api_key_query_parameter': QUERY_PARAM_API_KEY,
    'signature_header': HEADER_AUTH_SIGNATURE,
    'timestamp_header': HEADER_AUTH_TIMESTAMP,
    'version_header': HEADER_AUTH_VERSION,
    'nonce_header': HEADER_AUTH_NONCE,
    'use_nonce': False,   # append a UUID4 nonce to the signed message
    'sign_body': False,   # fold non-empty request bodies into the MAC
}

# Config keys holding header/parameter names
NAME_FIELDS = (
    'api_key_query_parameter',
    'signature_header',
    'timestamp_header',
    'version_header',
    'nonce_header',
)

# Config keys holding feature flags
FLAG_FIELDS = ('use_nonce', 'sign_body')
