"""
Custom exception types for the App in the Air API client.

These exceptions allow callers to distinguish between failures
occurring while obtaining tokens and those arising from resource
requests.  Transport failures (DNS, TLS, connection resets) are not
wrapped: they surface as the ``requests`` exceptions that caused them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    """How the message of an :class:`AppInTheAirAPIError` was chosen."""

    DESCRIBED = "described"
    INVALID_GRANT = "invalid_grant"
    INVALID_CLIENT = "invalid_client"
    UNKNOWN = "unknown"
    MALFORMED_RESPONSE = "malformed_response"


class AppInTheAirError(Exception):
    """Base exception for all App in the Air client errors."""


class AppInTheAirAPIError(AppInTheAirError):
    """Raised when the App in the Air API returns an error status.

    Parameters
    ----------
    message : str
        The normalised, human readable message.
    status_code : int
        HTTP status of the failed response.
    kind : ErrorKind
        Which branch of the error precedence produced ``message``.
    payload : dict, optional
        The parsed JSON error body.  Its fields can also be read as
        attributes, e.g. ``error.error_description``.
    text : str, optional
        The raw body when the server did not answer with JSON.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        kind: ErrorKind,
        payload: Optional[Dict[str, Any]] = None,
        text: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.kind = kind
        self.payload: Dict[str, Any] = dict(payload or {})
        self.text = text

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes not set in __init__
        payload = self.__dict__.get("payload") or {}
        if name in payload:
            return payload[name]
        raise AttributeError(
            f"{type(self).__name__!s} has no attribute {name!r}"
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, status_code={self.status_code}, "
            f"kind={self.kind.name})"
        )


class AppInTheAirAuthError(AppInTheAirAPIError):
    """Raised when a token request fails or returns no access token."""
