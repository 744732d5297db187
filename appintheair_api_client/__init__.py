"""
Python client for the App in the Air REST API.

This package provides an `AppInTheAirClient` class that obtains OAuth2
tokens from the App in the Air authorization server and reads user
profiles and trips from the API.  The client is stateless apart from
its credentials: it does not store, cache or refresh tokens on its own.

Examples
--------

```python
from appintheair_api_client import AppInTheAirClient

client = AppInTheAirClient(
    client_id="YOUR_CLIENT_ID",
    client_secret="YOUR_CLIENT_SECRET",
)

# A token that can read users who already authorized your app
token = client.get_userless_access_token(scope="user_flights")
profile = client.get_user_profile(token.access_token, user_id="123")
for flight in profile.flights:
    print(flight.carrier, flight.number)
```

Errors returned by the API are raised as `AppInTheAirAPIError` (or
`AppInTheAirAuthError` for token requests), carrying the status code,
the normalised message and the original error body as `payload`.
"""

from . import scopes
from .client import APIClient, AppInTheAirClient, BASE_URL, percent_encode
from .exceptions import (
    AppInTheAirAPIError,
    AppInTheAirAuthError,
    AppInTheAirError,
    ErrorKind,
)
from .models import (
    ApiResponse,
    TokenResult,
    TripsPage,
    UserAircraft,
    UserAirline,
    UserAirport,
    UserCountry,
    UserFlight,
    UserLoyaltyProgram,
    UserlessToken,
    UserProfile,
    UserTrip,
    UserTripCarRental,
    UserTripFlight,
    UserTripFlightAirport,
    UserTripFlightCarrier,
    UserTripHotel,
)

__all__ = [
    "APIClient",
    "AppInTheAirClient",
    "BASE_URL",
    "percent_encode",
    "scopes",
    "AppInTheAirError",
    "AppInTheAirAPIError",
    "AppInTheAirAuthError",
    "ErrorKind",
    "ApiResponse",
    "TokenResult",
    "UserlessToken",
    "UserProfile",
    "UserAirport",
    "UserCountry",
    "UserAirline",
    "UserAircraft",
    "UserFlight",
    "UserLoyaltyProgram",
    "UserTrip",
    "UserTripFlight",
    "UserTripFlightCarrier",
    "UserTripFlightAirport",
    "UserTripHotel",
    "UserTripCarRental",
    "TripsPage",
]
