"""
Authentication hook for the ``requests`` library.

Example:
    session = requests.Session()
    session.auth = HMACAuth(RequestEncoder("api-key", "secret-key"))
"""

from requests.auth import AuthBase

from .encoder import RequestEncoder
from .request import RequestView


class HMACAuth(AuthBase):
    """Signs each prepared request with a RequestEncoder before it is sent."""

    def __init__(self, encoder: RequestEncoder):
        self.encoder = encoder

    def __call__(self, prepared):
        view = RequestView.from_prepared(prepared)
        # MalformedURLError propagates so that requests never sends it unsigned
        self.encoder.encode_request(view)
        return view.apply_to(prepared)

    def __eq__(self, other):
        return self.encoder is getattr(other, 'encoder', None)

    def __ne__(self, other):
        return not self == other
