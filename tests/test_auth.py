"""
Unit tests for the requests authentication hook.
"""

import datetime
import json
from unittest.mock import patch

import pytest
import requests

from hmac_encoder import HMACAuth, MalformedURLError, RequestEncoder
from hmac_encoder.constants import (
    HEADER_AUTH_SIGNATURE,
    HEADER_AUTH_TIMESTAMP,
    HEADER_AUTH_VERSION
)

SIGNATURE = "OsirdL0N+jfO0NGIr7tTwuILMh8U5EXlbOT/qOlau5A="


def fixed_clock():
    return datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)


class TestHMACAuth:
    """Test HMACAuth integration with requests."""

    @pytest.fixture
    def encoder(self):
        """Create test encoder with a fixed clock."""
        return RequestEncoder("abc", "secret", clock=fixed_clock)

    @pytest.fixture
    def auth(self, encoder):
        """Create auth hook."""
        return HMACAuth(encoder)

    def test_prepare_signs_request(self, auth):
        """Test preparing a request adds the API key and auth headers."""
        prepared = requests.Request("GET", "http://localhost:8080/v1/items", auth=auth).prepare()

        assert prepared.url == "http://localhost:8080/v1/items?apiKey=abc"
        assert prepared.headers[HEADER_AUTH_TIMESTAMP] == "2024-01-01T00:00:00Z"
        assert prepared.headers[HEADER_AUTH_VERSION] == "1"
        assert prepared.headers[HEADER_AUTH_SIGNATURE] == SIGNATURE

    def test_prepare_keeps_params(self, auth):
        """Test request params stay ahead of the API key."""
        prepared = requests.Request(
            "GET", "http://localhost:8080/v1/items", params={"limit": "5"}, auth=auth
        ).prepare()

        assert prepared.url == "http://localhost:8080/v1/items?limit=5&apiKey=abc"

    def test_prepare_keeps_headers_and_body(self, auth):
        """Test existing headers and body survive signing."""
        payload = {"name": "widget"}
        prepared = requests.Request(
            "POST", "http://localhost:8080/v1/items", json=payload, auth=auth
        ).prepare()

        assert prepared.headers["Content-Type"] == "application/json"
        assert json.loads(prepared.body) == payload
        assert HEADER_AUTH_SIGNATURE in prepared.headers

    def test_prepare_signs_body_when_enabled(self, encoder):
        """Test body binding through requests."""
        plain = requests.Request(
            "POST", "http://localhost:8080/v1/items", data=b"payload", auth=HMACAuth(encoder)
        ).prepare()
        encoder.configure(sign_body=True)
        bound = requests.Request(
            "POST", "http://localhost:8080/v1/items", data=b"payload", auth=HMACAuth(encoder)
        ).prepare()

        assert plain.headers[HEADER_AUTH_SIGNATURE] != bound.headers[HEADER_AUTH_SIGNATURE]

    def test_prepare_malformed_url(self, auth):
        """Test malformed URLs fail preparation instead of sending unsigned."""
        with pytest.raises(MalformedURLError) as exc_info:
            requests.Request("GET", "http://localhost:8080/caf%FF", auth=auth).prepare()

        assert HEADER_AUTH_SIGNATURE not in exc_info.value.request.headers

    def test_auth_equality(self, encoder):
        """Test auth hooks compare by encoder."""
        assert HMACAuth(encoder) == HMACAuth(encoder)
        assert HMACAuth(encoder) != HMACAuth(RequestEncoder("abc", "secret"))

    @patch('requests.adapters.HTTPAdapter.send')
    def test_session_sends_signed_request(self, mock_send, auth):
        """Test a session with the hook sends signed requests."""
        response = requests.Response()
        response.status_code = 200
        response._content = b"{}"
        mock_send.return_value = response

        with requests.Session() as session:
            session.auth = auth
            session.get("http://localhost:8080/v1/items")

        mock_send.assert_called_once()
        prepared = mock_send.call_args[0][0]
        assert prepared.url == "http://localhost:8080/v1/items?apiKey=abc"
        assert prepared.headers[HEADER_AUTH_SIGNATURE] == SIGNATURE
