# tests/test_identity_provider.py
"""Unit tests for resolving bearer tokens against the identity provider."""

import pytest
import requests
from unittest.mock import MagicMock, patch
from app.config import settings
from app.exceptions import AuthenticationRequiredError, ErrorKind, PersistenceError
from app.services.identity_provider import (
    Identity, SessionContext, ensure_authenticated, fetch_identity,
)

AUTH_URL = "https://id.example.com"


def _response(status_code, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = text
    return resp


class TestSessionContext:
    def test_from_identity(self):
        session = SessionContext.from_identity(Identity(id="v-1", email="v@example.com", role="vendor"))
        assert session.identity_id == "v-1"
        assert session.is_vendor

    def test_anonymous_caller_must_log_in(self):
        with pytest.raises(AuthenticationRequiredError):
            ensure_authenticated(None)


class TestFetchIdentity:
    def test_valid_token(self):
        payload = {"id": "u-1", "email": "carol@example.com", "user_metadata": {"role": "vendor"}}
        with patch.object(settings, "AUTH_URL", AUTH_URL), \
             patch("app.services.identity_provider.requests.get", return_value=_response(200, payload)) as get:
            identity = fetch_identity("token-1")

        assert identity == Identity(id="u-1", email="carol@example.com", role="vendor")
        assert get.call_args.args[0] == f"{AUTH_URL}/auth/v1/user"
        assert get.call_args.kwargs["headers"]["Authorization"] == "Bearer token-1"

    def test_role_defaults_to_customer(self):
        with patch.object(settings, "AUTH_URL", AUTH_URL), \
             patch("app.services.identity_provider.requests.get",
                   return_value=_response(200, {"id": "u-2", "email": "d@example.com"})):
            assert fetch_identity("token-2").role == "customer"

    def test_rejected_token_is_anonymous(self):
        with patch.object(settings, "AUTH_URL", AUTH_URL), \
             patch("app.services.identity_provider.requests.get", return_value=_response(401)):
            assert fetch_identity("expired") is None

    def test_provider_down(self):
        with patch.object(settings, "AUTH_URL", AUTH_URL), \
             patch("app.services.identity_provider.requests.get",
                   side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(PersistenceError) as exc_info:
                fetch_identity("token")
        assert exc_info.value.kind == ErrorKind.UNAVAILABLE

    def test_provider_server_error(self):
        with patch.object(settings, "AUTH_URL", AUTH_URL), \
             patch("app.services.identity_provider.requests.get", return_value=_response(502, text="bad gateway")):
            with pytest.raises(PersistenceError) as exc_info:
                fetch_identity("token")
        assert exc_info.value.kind == ErrorKind.UNAVAILABLE

    def test_not_configured(self):
        with patch.object(settings, "AUTH_URL", None):
            with pytest.raises(PersistenceError):
                fetch_identity("token")
