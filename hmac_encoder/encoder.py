"""
HMAC request encoder.

This module adds the API key, timestamp, version and HMAC-SHA256 signature
to an outbound request so that it can be authenticated by the receiving
server.
"""

import datetime
import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .constants import (
    DEFAULT_CONFIG,
    FLAG_FIELDS,
    NAME_FIELDS,
    TIMESTAMP_FORMAT,
    VERSION
)
from .exceptions import (
    ClockUnavailableError,
    ConfigurationError,
    InvalidCredentialError,
    MalformedURLError
)
from .request import RequestView
from .signature import canonical_message, sign

logger = logging.getLogger(__name__)


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass
class SigningContext:
    """Values captured once per encode call and shared by headers and signature."""
    timestamp: str
    nonce: str = ""


class RequestEncoder:
    """
    Encodes outbound requests with HMAC authentication credentials.

    After building a RequestView (with any query parameters already in the
    URL, but without the API key), ``encode_request`` adds the API key query
    parameter and the timestamp, signature and version headers.

    Header and query parameter names can be changed with ``configure``.
    """

    version = VERSION

    def __init__(self, api_key: str, secret_key: Union[str, bytes],
                 use_url_safe_base64: bool = False,
                 clock: Optional[Callable[[], datetime.datetime]] = None,
                 **config):
        """
        Initialize request encoder.

        Args:
            api_key: Public API key, sent as a query parameter
            secret_key: HMAC secret key (must match server)
            use_url_safe_base64: Replace '+' and '/' with '-' and '_' in signatures
            clock: Callable returning the current aware datetime
            **config: Configuration options (header names, use_nonce, sign_body)

        Raises:
            InvalidCredentialError: If api_key or secret_key is empty
            ConfigurationError: If an option is unknown or invalid
        """
        if not isinstance(api_key, str) or not api_key:
            raise InvalidCredentialError("api_key cannot be empty")
        if not isinstance(secret_key, (str, bytes)) or not secret_key:
            raise InvalidCredentialError("secret_key cannot be empty")

        self._api_key = api_key
        self._secret_key = secret_key.encode('utf-8') if isinstance(secret_key, str) else bytes(secret_key)
        self._use_url_safe_base64 = bool(use_url_safe_base64)
        self._clock = clock or _utc_now

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}
        self._validate_config(self.config)

        logger.debug("Request encoder created for API key %s", self._api_key)

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def secret_key(self) -> bytes:
        return self._secret_key

    @property
    def use_url_safe_base64(self) -> bool:
        return self._use_url_safe_base64

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(api_key={self._api_key!r}, "
            f"use_url_safe_base64={self._use_url_safe_base64})"
        )

    @staticmethod
    def _validate_config(config: dict):
        """Validate encoder configuration."""
        unknown = set(config) - set(DEFAULT_CONFIG)
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        for name in NAME_FIELDS:
            value = config[name]
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"{name} must be a non-empty string")

        for name in FLAG_FIELDS:
            if not isinstance(config[name], bool):
                raise ConfigurationError(f"{name} must be a boolean")

    def configure(self, **overrides) -> 'RequestEncoder':
        """
        Override query parameter/header names or the optional signing features.

        Credentials cannot be changed here. Not safe to call while another
        thread is encoding with this instance.

        Raises:
            ConfigurationError: If an override is unknown or invalid
        """
        config = {**self.config, **overrides}
        self._validate_config(config)
        self.config = config
        logger.debug("Request encoder reconfigured: %s", sorted(overrides))
        return self

    # Main method

    def encode_request(self, request: RequestView) -> RequestView:
        """
        Encode an outbound request.

        Any query parameters should already be in the URL, and the URL should
        NOT contain the API key as it is added here.

        Args:
            request: The outbound request, modified in place

        Returns:
            The same request with the API key and auth headers added

        Raises:
            MalformedURLError: If the URL cannot be signed. The API key,
                timestamp and version are still added but the signature
                header is not; the request is available as ``error.request``.
            ClockUnavailableError: If the current time cannot be read
        """
        context = self._signing_context()
        logger.debug("Encoding %s %s at %s", request.method, request.url, context.timestamp)

        self.add_api_key(request)
        self.add_timestamp(request, context.timestamp)

        error = None
        try:
            self.add_signature(request, context)
        except MalformedURLError as e:
            logger.warning("Signature omitted for %s %s: %s", request.method, request.url, e)
            error = e

        self.add_version(request)

        if error is not None:
            error.request = request
            raise error
        return request

    # Utility methods

    def current_timestamp(self) -> str:
        """
        Get the current UTC time formatted as yyyy-MM-ddTHH:mm:ssZ.

        Raises:
            ClockUnavailableError: If the clock fails or returns a naive time
        """
        try:
            now = self._clock()
        except (OSError, OverflowError, ValueError) as e:
            raise ClockUnavailableError(f"Cannot read the system clock: {e}") from e

        if now.tzinfo is None or now.utcoffset() is None:
            raise ClockUnavailableError("Clock returned a time without a UTC offset")

        return now.astimezone(datetime.timezone.utc).strftime(TIMESTAMP_FORMAT)

    def _signing_context(self) -> SigningContext:
        nonce = str(uuid.uuid4()) if self.config['use_nonce'] else ""
        return SigningContext(timestamp=self.current_timestamp(), nonce=nonce)

    def add_api_key(self, request: RequestView):
        """Append the API key as a query parameter to the request URL."""
        request.add_query_parameter(self.config['api_key_query_parameter'], self._api_key)

    def add_timestamp(self, request: RequestView, timestamp: str):
        request.add_header(self.config['timestamp_header'], timestamp)

    def add_version(self, request: RequestView):
        request.add_header(self.config['version_header'], self.version)

    def add_signature(self, request: RequestView, context: SigningContext):
        """
        Add the signature header (and the nonce header, when enabled).

        Raises:
            MalformedURLError: If the URL path or query cannot be decoded;
                no header is added in that case
        """
        signature = self.generate_signature(request, context.timestamp, context.nonce)
        request.add_header(self.config['signature_header'], signature)
        if self.config['use_nonce']:
            request.add_header(self.config['nonce_header'], context.nonce)

    def generate_signature(self, request: RequestView, timestamp: str, nonce: str = "") -> str:
        """
        Generate an authentication code using HMAC-SHA256.

        Args:
            request: The request to sign, with the API key already in its URL
            timestamp: The timestamp sent alongside the signature
            nonce: Optional nonce appended to the signed message

        Returns:
            The Base64 (optionally URL-safe) encoded signature

        Raises:
            MalformedURLError: If the URL path or query cannot be decoded
        """
        message = canonical_message(
            self._api_key, request.method, request.path, request.query, timestamp, nonce
        )
        body = request.body if self.config['sign_body'] else None
        return sign(self._secret_key, message, self._use_url_safe_base64, body)
