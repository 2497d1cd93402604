"""
Request representation consumed and produced by the encoder.

RequestView keeps the encoder independent of any HTTP client. Converters to
and from ``requests.PreparedRequest`` are provided for the common case.
"""

from dataclasses import dataclass, field
from typing import Optional, Union
from urllib.parse import quote, urlencode, urlsplit

from requests.structures import CaseInsensitiveDict

from .exceptions import MalformedURLError

# Characters left unescaped in appended query values, as URL query items do
_QUERY_SAFE = "/?:@!$'()*+,;"


@dataclass
class RequestView:
    """
    Mutable view of an outbound HTTP request.

    Attributes:
        method: HTTP method, upper-cased on creation
        url: Absolute request URL including any query string
        headers: Case-insensitive header mapping
        body: Optional request body (str bodies are UTF-8 encoded)
    """
    method: str
    url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: Optional[Union[str, bytes]] = None

    def __post_init__(self):
        self.method = (self.method or 'GET').upper()
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers or {})
        if isinstance(self.body, str):
            self.body = self.body.encode('utf-8')

    def _split_url(self):
        try:
            parts = urlsplit(self.url)
        except ValueError as e:
            raise MalformedURLError(f"URL cannot be parsed: {e}") from None

        if not parts.scheme or not parts.netloc:
            raise MalformedURLError("URL must be absolute (scheme and host)")
        return parts

    @property
    def path(self) -> str:
        """
        Raw (percent-encoded) URL path.

        Raises:
            MalformedURLError: If the URL cannot be parsed or has no scheme/host
        """
        return self._split_url().path

    @property
    def query(self) -> Optional[str]:
        """
        Raw URL query, or None when the URL has no query at all.

        An empty string is returned when the URL ends in a bare '?'.

        Raises:
            MalformedURLError: If the URL cannot be parsed or has no scheme/host
        """
        query = self._split_url().query
        if not query and '?' not in self.url.split('#', 1)[0]:
            return None
        return query

    def add_query_parameter(self, name: str, value: str):
        """
        Append a query parameter after any existing ones.

        Existing parameters, including one with the same name, are kept
        exactly as they are.
        """
        base, sep, fragment = self.url.partition('#')
        param = urlencode([(name, value)], safe=_QUERY_SAFE, quote_via=quote)

        if '?' not in base:
            base = f"{base}?{param}"
        elif base.endswith(('?', '&')):
            base = f"{base}{param}"
        else:
            base = f"{base}&{param}"

        self.url = base + sep + fragment

    def add_header(self, name: str, value: str):
        """Add a header value, joining it to any existing value with ','."""
        existing = self.headers.get(name)
        if existing:
            self.headers[name] = f"{existing},{value}"
        else:
            self.headers[name] = value

    @classmethod
    def from_prepared(cls, prepared) -> 'RequestView':
        """Build a view from a ``requests.PreparedRequest``."""
        body = prepared.body
        if not isinstance(body, (str, bytes)):
            # Streamed or absent bodies cannot take part in signing
            body = None
        return cls(
            method=prepared.method,
            url=prepared.url,
            headers=CaseInsensitiveDict(prepared.headers or {}),
            body=body,
        )

    def apply_to(self, prepared):
        """Write the URL and headers back onto a ``requests.PreparedRequest``."""
        prepared.url = self.url
        prepared.headers = CaseInsensitiveDict(self.headers)
        return prepared
