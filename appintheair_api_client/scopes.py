"""OAuth scopes recognised by the App in the Air API.

Scopes are sent as a single space separated string.  They are not
validated locally; the server decides what an unknown scope means.
"""

from __future__ import annotations

USER_EMAIL = "user_email"
USER_INFO = "user_info"
USER_FLIGHTS = "user_flights"
USER_HOTELS = "user_hotels"
USER_CAR_RENTALS = "user_car_rentals"
USER_LOYALTY = "user_loyalty"

ALL_SCOPES = (
    USER_EMAIL,
    USER_INFO,
    USER_FLIGHTS,
    USER_HOTELS,
    USER_CAR_RENTALS,
    USER_LOYALTY,
)


def build_scope(*scopes: str) -> str:
    """Join scopes into the space separated form, dropping duplicates.

    Each argument may itself hold several space separated scopes.

    >>> build_scope(USER_EMAIL, "user_flights user_email")
    'user_email user_flights'
    """
    seen = []
    for scope in scopes:
        for name in scope.split():
            if name not in seen:
                seen.append(name)
    return " ".join(seen)
