"""
Custom exceptions for HMAC request encoder library.
"""


class HMACEncoderError(Exception):
    """Base exception for HMAC encoder errors."""
    pass


class InvalidCredentialError(HMACEncoderError):
    """Raised when the API key or secret key is empty or of the wrong type."""
    pass


class ConfigurationError(HMACEncoderError):
    """Raised when encoder configuration is invalid."""
    pass


class MalformedURLError(HMACEncoderError):
    """
    Raised when a request URL lacks a decodable path or query.

    When raised from ``RequestEncoder.encode_request`` the partially encoded
    request (no signature header) is available as ``request``.
    """

    def __init__(self, message, request=None):
        super().__init__(message)
        self.request = request


class ClockUnavailableError(HMACEncoderError):
    """Raised when the current UTC time cannot be obtained."""
    pass
