"""
Token Grant Tests
-----------------
Authorization code, refresh token and client credentials grants.
"""

import pytest

from appintheair_api_client import (
    AppInTheAirAuthError,
    AppInTheAirClient,
    ErrorKind,
    TokenResult,
    UserlessToken,
)

from conftest import FakeSession, make_response


class TestGetAccessToken:
    """Tests for the authorization code exchange."""

    def test_returns_access_token(self, client, session):
        session.queue(make_response(200, {"access_token": "T"}))

        token = client.get_access_token(code="code", redirect_uri="https://domain.test/oauth")

        assert isinstance(token, TokenResult)
        assert token.access_token == "T"
        assert token.refresh_token is None

    def test_full_token_fields(self, client, session):
        session.queue(make_response(200, {
            "access_token": "A",
            "refresh_token": "R",
            "expires_in": 3600,
            "token_type": "Bearer",
        }))

        token = client.get_access_token(code="code", redirect_uri="https://domain.test/oauth")

        assert token == TokenResult("A", "R", 3600, "Bearer")

    def test_request_url(self, client, session):
        session.queue(make_response(200, {"access_token": "T"}))

        client.get_access_token(code="a/b c", redirect_uri="https://domain.test/oauth")

        call = session.calls[0]
        assert call["method"] == "GET"
        assert call["url"] == (
            "https://iappintheair.appspot.com/oauth/token"
            "?client_id=client_id&client_secret=client_secret"
            "&grant_type=authorization_code&code=a%2Fb%20c"
            "&redirect_uri=https%3A%2F%2Fdomain.test%2Foauth"
        )
        assert call["headers"] is None

    def test_code_expired(self, client, session):
        session.queue(make_response(400, {"error_description": "Code expired"}))

        with pytest.raises(AppInTheAirAuthError) as excinfo:
            client.get_access_token(code="code", redirect_uri="https://domain.test/oauth")

        assert str(excinfo.value) == "Code expired"
        assert excinfo.value.kind == ErrorKind.DESCRIBED
        assert excinfo.value.status_code == 400

    def test_invalid_grant(self, client, session):
        session.queue(make_response(400, {"error": "invalid_grant"}))

        with pytest.raises(AppInTheAirAuthError) as excinfo:
            client.get_access_token(code="code", redirect_uri="https://domain.test/oauth")

        assert excinfo.value.message == (
            "Provided code is invalid, expired, or belongs to another client"
        )
        assert excinfo.value.error == "invalid_grant"

    def test_missing_access_token(self, client, session):
        session.queue(make_response(200, {"token_type": "Bearer"}))

        with pytest.raises(AppInTheAirAuthError) as excinfo:
            client.get_access_token(code="code", redirect_uri="https://domain.test/oauth")

        assert excinfo.value.kind == ErrorKind.MALFORMED_RESPONSE
        assert excinfo.value.payload == {"token_type": "Bearer"}


class TestRefreshAccessToken:
    """Tests for the refresh token grant."""

    def test_request_url(self, client, session):
        session.queue(make_response(200, {"access_token": "new", "refresh_token": "R2"}))

        token = client.refresh_access_token(
            refresh_token="R1", redirect_uri="https://domain.test/oauth"
        )

        assert token.access_token == "new"
        assert token.refresh_token == "R2"
        url = session.last_url
        assert url.startswith("https://iappintheair.appspot.com/oauth/token?")
        assert "grant_type=refresh_token" in url
        assert "refresh_token=R1" in url
        assert "client_secret=client_secret" in url
        assert "redirect_uri" not in url

    def test_invalid_client(self, client, session):
        session.queue(make_response(401, {"error": "invalid_client"}))

        with pytest.raises(AppInTheAirAuthError) as excinfo:
            client.refresh_access_token(refresh_token="R1")

        assert excinfo.value.message == "Provided client id or secret is invalid"
        assert excinfo.value.kind == ErrorKind.INVALID_CLIENT


class TestUserlessAccessToken:
    """Tests for the client credentials grant."""

    def test_request_url(self, client, session):
        session.queue(make_response(200, {"access_token": "U", "expires_in": 604800}))

        token = client.get_userless_access_token(scope="user_flights user_info")

        assert token == UserlessToken("U", 604800)
        assert session.last_url == (
            "https://iappintheair.appspot.com/oauth/token"
            "?client_id=client_id&client_secret=client_secret"
            "&grant_type=client_credentials&scope=user_flights%20user_info"
        )

    def test_expires_in_as_string(self, client, session):
        session.queue(make_response(200, {"access_token": "U", "expires_in": "604800"}))

        token = client.get_userless_access_token(scope="user_flights")

        assert token.expires_in == 604800

    def test_secret_encoded(self, session):
        session.queue(make_response(200, {"access_token": "U"}))
        client = AppInTheAirClient(client_id="id", client_secret="a&b=c!", session=session)

        client.get_userless_access_token(scope="user_flights")

        assert "client_secret=a%26b%3Dc%21" in session.last_url


class TestConstruction:
    """Tests for client configuration."""

    def test_requires_client_id(self):
        with pytest.raises(ValueError):
            AppInTheAirClient(client_id="", client_secret="secret")

    def test_requires_client_secret(self):
        with pytest.raises(ValueError):
            AppInTheAirClient(client_id="id", client_secret="")

    def test_credentials_are_read_only(self, client):
        with pytest.raises(AttributeError):
            client.client_secret = "other"

    def test_repr_hides_secret(self, client):
        assert "client_secret" not in repr(client)
        assert "client_id" in repr(client)

    def test_from_env(self):
        client = AppInTheAirClient.from_env({
            "APPINTHEAIR_CLIENT_ID": "env-id",
            "APPINTHEAIR_CLIENT_SECRET": "env-secret",
        })

        assert client.client_id == "env-id"
        assert client.client_secret == "env-secret"

    def test_from_env_missing(self):
        with pytest.raises(ValueError, match="APPINTHEAIR_CLIENT_SECRET"):
            AppInTheAirClient.from_env({"APPINTHEAIR_CLIENT_ID": "env-id"})

    def test_timeout_passed_through(self):
        session = FakeSession().queue(make_response(200, {"access_token": "T"}))
        client = AppInTheAirClient(
            client_id="id", client_secret="secret", session=session, timeout=5.0
        )

        client.get_userless_access_token(scope="user_info")

        assert session.calls[0]["timeout"] == 5.0

    def test_default_transport_is_requests(self, monkeypatch):
        calls = []

        def fake_request(**kwargs):
            calls.append(kwargs)
            return make_response(200, {"access_token": "T"})

        monkeypatch.setattr("requests.request", fake_request)
        client = AppInTheAirClient(client_id="id", client_secret="secret")

        token = client.get_userless_access_token(scope="user_info")

        assert token.access_token == "T"
        assert calls[0]["timeout"] is None
