"""
Client implementation for the App in the Air REST API.

This module defines the :class:`AppInTheAirClient` class which obtains
OAuth2 tokens from the App in the Air authorization server (via the
authorization code, refresh token and client credentials grants) and
reads user profiles and trips from the resource endpoints.  Every
method performs at most one HTTP request; the client keeps no state
besides its credentials, so storing and refreshing tokens is left to
the caller.

Usage
-----

.. code-block:: python

    from appintheair_api_client import AppInTheAirClient, scopes

    client = AppInTheAirClient(client_id="abc123", client_secret="shhsecret")

    # Send the user's browser here
    url = client.get_auth_url(
        scope=scopes.build_scope(scopes.USER_INFO, scopes.USER_FLIGHTS),
        redirect_uri="https://example.com/oauth",
    )

    # ...then exchange the code the redirect delivers
    token = client.get_access_token(code=code, redirect_uri="https://example.com/oauth")

    page = client.get_my_trips(token.access_token, limit=20)
    while True:
        for trip in page.trips:
            print(trip.id)
        if not page.more:
            break
        page = client.get_my_trips(token.access_token, url=page.next_url)

Note that a page may hold fewer trips than ``limit``, or none at all,
while ``more`` is still true.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Type, Union
from urllib.parse import quote, urlsplit

import requests

from .exceptions import (
    AppInTheAirAPIError,
    AppInTheAirAuthError,
    ErrorKind,
)
from .models import (
    ApiResponse,
    TokenResult,
    TripsPage,
    UserlessToken,
    UserProfile,
)

logger = logging.getLogger(__name__)

BASE_URL = "https://iappintheair.appspot.com"

INVALID_GRANT_MESSAGE = "Provided code is invalid, expired, or belongs to another client"
INVALID_CLIENT_MESSAGE = "Provided client id or secret is invalid"
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


def percent_encode(value: Any) -> str:
    """Percent-encode ``value`` for use inside a query or path component.

    Everything outside ``A-Z a-z 0-9 - _ . ~`` is escaped, including
    ``! * ( ) '`` which some OAuth redirect validators treat as reserved.
    Text is encoded as UTF-8 first; non-string values go through ``str``.

    >>> percent_encode("it's (really) *fine*!")
    'it%27s%20%28really%29%20%2Afine%2A%21'
    """
    text = value if isinstance(value, str) else str(value)
    return quote(text, safe="")


# ----------------------------------------------------------------------
# Response body decoding
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class JsonBody:
    data: Any


@dataclass(frozen=True)
class TextBody:
    text: str


DecodedBody = Union[JsonBody, TextBody]


def decode_body(response: requests.Response) -> DecodedBody:
    """Decode a response body according to its ``Content-Type``.

    ``application/json`` (with or without parameters such as
    ``charset``) yields :class:`JsonBody`; anything else, or JSON that
    fails to parse, yields :class:`TextBody`.
    """
    content_type = response.headers.get("Content-Type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == "application/json":
        try:
            return JsonBody(response.json())
        except ValueError:
            logger.debug("Response advertised JSON but did not parse; treating as text")
    return TextBody(response.text)


def build_error(
    status_code: int,
    body: DecodedBody,
    error_class: Type[AppInTheAirAPIError] = AppInTheAirAPIError,
) -> AppInTheAirAPIError:
    """Normalise an error response into an exception.

    The message is chosen in this order: the server's
    ``error_description``, a fixed message for ``invalid_grant``, a fixed
    message for ``invalid_client``, and finally a generic message.  The
    parsed body is attached as ``payload`` either way.
    """
    if isinstance(body, JsonBody) and isinstance(body.data, dict):
        payload: Dict[str, Any] = body.data
        text = None
    else:
        payload = {}
        text = body.text if isinstance(body, TextBody) else None

    if payload.get("error_description") is not None:
        message, kind = str(payload["error_description"]), ErrorKind.DESCRIBED
    elif payload.get("error") == "invalid_grant":
        message, kind = INVALID_GRANT_MESSAGE, ErrorKind.INVALID_GRANT
    elif payload.get("error") == "invalid_client":
        message, kind = INVALID_CLIENT_MESSAGE, ErrorKind.INVALID_CLIENT
    else:
        message, kind = UNKNOWN_ERROR_MESSAGE, ErrorKind.UNKNOWN

    return error_class(
        message,
        status_code=status_code,
        kind=kind,
        payload=payload,
        text=text,
    )


class AppInTheAirClient:
    """A client for the App in the Air REST API.

    Parameters
    ----------
    client_id : str
        Your App in the Air OAuth client identifier.
    client_secret : str
        Your App in the Air OAuth client secret.  It is only ever sent
        to the token endpoint and never appears in authorization URLs.
    session : requests.Session, optional
        Session used to send requests.  When omitted, each call goes
        through :func:`requests.request`.
    timeout : float, optional
        Timeout in seconds handed to ``requests``.  The default of
        ``None`` waits indefinitely.

    Notes
    -----
    The client caches nothing.  Tokens returned by the grant methods
    are the caller's to store, and expired tokens must be refreshed
    explicitly with :meth:`refresh_access_token`.
    """

    base_url = BASE_URL

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if not client_id:
            raise ValueError("client_id must be provided")
        if not client_secret:
            raise ValueError("client_secret must be provided")

        self._client_id = client_id
        self._client_secret = client_secret
        self.session = session
        self.timeout = timeout

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **kwargs: Any,
    ) -> "AppInTheAirClient":
        """Build a client from ``APPINTHEAIR_CLIENT_ID`` and ``APPINTHEAIR_CLIENT_SECRET``.

        Extra keyword arguments are passed to the constructor.
        """
        env = os.environ if environ is None else environ
        values = {}
        for name in ("APPINTHEAIR_CLIENT_ID", "APPINTHEAIR_CLIENT_SECRET"):
            value = env.get(name)
            if not value:
                raise ValueError(f"environment variable {name} is not set")
            values[name] = value
        return cls(
            client_id=values["APPINTHEAIR_CLIENT_ID"],
            client_secret=values["APPINTHEAIR_CLIENT_SECRET"],
            **kwargs,
        )

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def client_secret(self) -> str:
        return self._client_secret

    def __repr__(self) -> str:
        return f"{type(self).__name__}(client_id={self._client_id!r})"

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def get_auth_url(self, scope: str, redirect_uri: str) -> str:
        """Return the authorization URL to send the user's browser to.

        ``scope`` is a space separated list of scopes (see
        :mod:`appintheair_api_client.scopes`).  The result depends only on
        the arguments and the client id.
        """
        return (
            f"{BASE_URL}/oauth/authorize"
            f"?client_id={percent_encode(self._client_id)}"
            f"&response_type=code"
            f"&redirect_uri={percent_encode(redirect_uri)}"
            f"&scope={percent_encode(scope)}"
        )

    def _token_path(self, grant_type: str, **params: str) -> str:
        query = [
            f"client_id={percent_encode(self._client_id)}",
            f"client_secret={percent_encode(self._client_secret)}",
            f"grant_type={grant_type}",
        ]
        query.extend(f"{key}={percent_encode(value)}" for key, value in params.items())
        return "/oauth/token?" + "&".join(query)

    def _request_token(self, path: str) -> Dict[str, Any]:
        response = self._request("GET", path, error_class=AppInTheAirAuthError)
        token_info = response.data
        if not isinstance(token_info, dict) or not token_info.get("access_token"):
            raise AppInTheAirAuthError(
                "Authentication response did not contain an access_token",
                status_code=response.status,
                kind=ErrorKind.MALFORMED_RESPONSE,
                payload=token_info if isinstance(token_info, dict) else None,
                text=token_info if isinstance(token_info, str) else None,
            )
        return token_info

    def get_access_token(self, code: str, redirect_uri: str) -> TokenResult:
        """Exchange an authorization code for access and refresh tokens.

        Raises
        ------
        AppInTheAirAuthError
            If the code is invalid, expired or was issued to another
            client, or the credentials are wrong.
        """
        path = self._token_path(
            "authorization_code", code=code, redirect_uri=redirect_uri
        )
        return TokenResult.from_dict(self._request_token(path))

    def refresh_access_token(
        self, refresh_token: str, redirect_uri: Optional[str] = None
    ) -> TokenResult:
        """Obtain a new access token using a refresh token.

        ``redirect_uri`` is accepted to mirror :meth:`get_access_token`
        but is not part of the refresh request.
        """
        path = self._token_path("refresh_token", refresh_token=refresh_token)
        return TokenResult.from_dict(self._request_token(path))

    def get_userless_access_token(self, scope: str) -> UserlessToken:
        """Obtain a token that is not bound to any user.

        Userless tokens can only read data of users who have already
        authorized this client.  They currently last about seven days,
        but rely on ``expires_in`` rather than that figure.
        """
        path = self._token_path("client_credentials", scope=scope)
        return UserlessToken.from_dict(self._request_token(path))

    # ------------------------------------------------------------------
    # HTTP request helpers
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        error_class: Type[AppInTheAirAPIError] = AppInTheAirAPIError,
    ) -> ApiResponse[Any]:
        """Perform one HTTP request against the App in the Air API.

        Parameters
        ----------
        method : str
            The HTTP verb, such as ``"GET"``.
        path : str
            Path and query relative to :data:`BASE_URL`, already encoded.
        headers : dict, optional
            Extra HTTP headers, e.g. ``Authorization``.
        error_class : type, optional
            Exception class raised for error statuses.

        Returns
        -------
        ApiResponse
            ``data`` holds the parsed JSON when the server sent JSON,
            otherwise the text body.  ``error`` is always ``None``;
            error statuses raise instead.

        Raises
        ------
        AppInTheAirAPIError
            If the response status is 400 or above.
        requests.RequestException
            If the request could not be sent; never retried.
        """
        url = f"{BASE_URL}{path}"
        # The query may carry the client secret
        log_path = path.split("?", 1)[0]
        logger.debug("%s %s", method.upper(), log_path)

        send = self.session.request if self.session is not None else requests.request
        response = send(
            method=method.upper(),
            url=url,
            headers=headers,
            timeout=self.timeout,
        )
        logger.debug("%s %s -> %s", method.upper(), log_path, response.status_code)

        body = decode_body(response)
        if response.status_code >= 400:
            error = build_error(response.status_code, body, error_class)
            logger.warning(
                "App in the Air request %s %s failed with status %s (%s): %s",
                method.upper(),
                log_path,
                response.status_code,
                error.kind.value,
                error.message,
            )
            raise error

        data = body.data if isinstance(body, JsonBody) else body.text
        return ApiResponse(
            status=response.status_code,
            data=data,
            headers=dict(response.headers),
        )

    def _get_json(self, path: str, access_token: str) -> Dict[str, Any]:
        response = self._request(
            "GET", path, headers={"Authorization": f"Bearer {access_token}"}
        )
        if not isinstance(response.data, dict):
            raise AppInTheAirAPIError(
                "Expected a JSON object in the response",
                status_code=response.status,
                kind=ErrorKind.MALFORMED_RESPONSE,
                text=response.data if isinstance(response.data, str) else None,
            )
        return response.data

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------
    def get_my_profile(self, access_token: str) -> UserProfile:
        """Return the travel history of the token's user.

        ``email`` is filled in when the ``user_email`` scope is granted
        and loyalty programs when ``user_loyalty`` is.
        """
        return UserProfile.from_dict(self._get_json("/api/v1/me", access_token))

    def get_user_profile(self, access_token: str, user_id: str) -> UserProfile:
        """Return the same data as :meth:`get_my_profile` for ``user_id``.

        Intended for use with a userless token.
        """
        path = f"/api/v1/users/{percent_encode(user_id)}"
        return UserProfile.from_dict(self._get_json(path, access_token))

    def get_my_trips(
        self,
        access_token: str,
        limit: Optional[int] = None,
        url: Optional[str] = None,
    ) -> TripsPage:
        """Return one page of the user's trips, newest first.

        Requires the ``user_flights`` scope.  Pass the ``next_url`` of
        the previous page as ``url`` to continue; ``limit`` is ignored
        then.  Stop when ``more`` is false, not when a page is short or
        empty.
        """
        if url:
            path = self._continuation_path(url)
        elif limit is not None:
            path = f"/api/v1/me/trips?limit={percent_encode(limit)}"
        else:
            path = "/api/v1/me/trips"
        return TripsPage.from_dict(self._get_json(path, access_token))

    def _continuation_path(self, url: str) -> str:
        parts = urlsplit(url)
        if not parts.scheme and not parts.netloc and url.startswith("/"):
            return url
        if f"{parts.scheme}://{parts.netloc}".lower() == BASE_URL:
            path = parts.path or "/"
            return f"{path}?{parts.query}" if parts.query else path
        raise ValueError(f"continuation url must start with {BASE_URL}, got {url!r}")


APIClient = AppInTheAirClient
