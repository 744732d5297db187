"""
Typed records for App in the Air API responses.

Every record is a plain dataclass constructed from the decoded JSON
through its ``from_dict`` classmethod.  Keys the API adds later are
ignored, and keys that are missing become ``None`` (or an empty list for
collections), so a partially authorised scope never breaks parsing.

Timestamps are sent by the API as epoch seconds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar

T = TypeVar("T")


def _to_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _to_datetime(value: Optional[float]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


@dataclass
class ApiResponse(Generic[T]):
    """Envelope returned by the dispatch routine.

    Error statuses are raised as exceptions, so ``error`` is always
    ``None`` on an envelope the client returns.
    """

    status: int
    data: Optional[T] = None
    error: Optional[Any] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status < 400


# ----------------------------------------------------------------------
# OAuth tokens
# ----------------------------------------------------------------------
@dataclass
class TokenResult:
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None  # seconds
    token_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TokenResult":
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_in=_to_int(data.get("expires_in")),
            token_type=data.get("token_type"),
        )


@dataclass
class UserlessToken:
    """Client-credentials token, not bound to any user.

    The server currently issues these for about seven days, but
    ``expires_in`` is authoritative.
    """

    access_token: str
    expires_in: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserlessToken":
        return cls(
            access_token=data["access_token"],
            expires_in=_to_int(data.get("expires_in")),
        )


# ----------------------------------------------------------------------
# User profile
# ----------------------------------------------------------------------
@dataclass
class UserLoyaltyProgram:
    """Loyalty program membership; requires the ``user_loyalty`` scope.

    The API does not document the shape of these entries, so the full
    source mapping is kept in ``raw``.
    """

    id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserLoyaltyProgram":
        ident = data.get("id")
        return cls(id=None if ident is None else str(ident), raw=dict(data))


@dataclass
class UserAirport:
    count: int
    code: str  # three-letter airport code
    name: str
    city: Optional[str] = None
    country: Optional[str] = None  # two-letter country code

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserAirport":
        return cls(
            count=_to_int(data.get("count")) or 0,
            code=data.get("code", ""),
            name=data.get("name", ""),
            city=data.get("city"),
            country=data.get("country"),
        )


@dataclass
class UserCountry:
    count: int
    code: str  # two-letter country code
    name: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserCountry":
        return cls(
            count=_to_int(data.get("count")) or 0,
            code=data.get("code", ""),
            name=data.get("name", ""),
        )


@dataclass
class UserAirline:
    count: int
    code: str  # two-letter carrier code
    name: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserAirline":
        return cls(
            count=_to_int(data.get("count")) or 0,
            code=data.get("code", ""),
            name=data.get("name", ""),
        )


@dataclass
class UserAircraft:
    count: int
    code: str
    name: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserAircraft":
        return cls(
            count=_to_int(data.get("count")) or 0,
            code=data.get("code", ""),
            name=data.get("name", ""),
        )


@dataclass
class UserFlight:
    """A single leg from the user's flight history."""

    carrier: str
    number: str
    departure_code: str
    arrival_code: str
    departure_date: Optional[float] = None
    departure_utc: Optional[float] = None
    arrival_utc: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserFlight":
        return cls(
            carrier=data.get("carrier", ""),
            number=str(data.get("number", "")),
            departure_code=data.get("departure_code", ""),
            arrival_code=data.get("arrival_code", ""),
            departure_date=_to_float(data.get("departure_date")),
            departure_utc=_to_float(data.get("departure_utc")),
            arrival_utc=_to_float(data.get("arrival_utc")),
        )

    @property
    def departure_datetime(self) -> Optional[datetime]:
        return _to_datetime(self.departure_utc)

    @property
    def arrival_datetime(self) -> Optional[datetime]:
        return _to_datetime(self.arrival_utc)


@dataclass
class UserProfile:
    """Travel history of a user.

    ``email`` is only present when the ``user_email`` scope was granted.
    ``hours`` and ``kilometers`` are lifetime totals, the ``last_year_``
    variants cover the current year.  The collections hold entities with
    a ``count`` of how many times the user flew with or through them.
    ``loyalty_programs`` is filled when ``user_loyalty`` was granted, and
    ``raw`` keeps the whole response body for fields not modelled here.
    """

    id: str
    name: str
    email: Optional[str] = None
    hours: Optional[float] = None
    kilometers: Optional[float] = None
    last_year_hours: Optional[float] = None
    last_year_kilometers: Optional[float] = None
    airports: List[UserAirport] = field(default_factory=list)
    countries: List[UserCountry] = field(default_factory=list)
    airlines: List[UserAirline] = field(default_factory=list)
    aircraft: List[UserAircraft] = field(default_factory=list)
    flights: List[UserFlight] = field(default_factory=list)
    loyalty_programs: List[UserLoyaltyProgram] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserProfile":
        # The API has shipped both spellings
        aircraft = list(data.get("aircraft") or []) + list(data.get("aircrafts") or [])
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            email=data.get("email"),
            hours=_to_float(data.get("hours")),
            kilometers=_to_float(data.get("kilometers")),
            last_year_hours=_to_float(data.get("last_year_hours")),
            last_year_kilometers=_to_float(data.get("last_year_kilometers")),
            airports=[UserAirport.from_dict(a) for a in data.get("airports") or []],
            countries=[UserCountry.from_dict(c) for c in data.get("countries") or []],
            airlines=[UserAirline.from_dict(a) for a in data.get("airlines") or []],
            aircraft=[UserAircraft.from_dict(a) for a in aircraft],
            flights=[UserFlight.from_dict(f) for f in data.get("flights") or []],
            loyalty_programs=[
                UserLoyaltyProgram.from_dict(p)
                for p in data.get("loyalty_programs") or data.get("loyalty") or []
            ],
            raw=dict(data),
        )


# ----------------------------------------------------------------------
# Trips
# ----------------------------------------------------------------------
@dataclass
class UserTripFlightCarrier:
    icao: Optional[str] = None
    iata: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserTripFlightCarrier":
        return cls(icao=data.get("icao"), iata=data.get("iata"), name=data.get("name"))


@dataclass
class UserTripFlightAirport:
    code: str  # three-letter airport code
    name: Optional[str] = None
    country: Optional[str] = None  # two-letter country code
    country_full: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserTripFlightAirport":
        return cls(
            code=data.get("code", ""),
            name=data.get("name"),
            country=data.get("country"),
            country_full=data.get("country_full"),
        )


@dataclass
class UserTripFlight:
    carrier: UserTripFlightCarrier
    number: str
    origin: UserTripFlightAirport
    destination: UserTripFlightAirport
    distance_km: Optional[float] = None
    departure_local: Optional[float] = None
    departure_utc: Optional[float] = None
    arrival_local: Optional[float] = None
    arrival_utc: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserTripFlight":
        return cls(
            carrier=UserTripFlightCarrier.from_dict(data.get("carrier") or {}),
            number=str(data.get("number", "")),
            origin=UserTripFlightAirport.from_dict(data.get("origin") or {}),
            destination=UserTripFlightAirport.from_dict(data.get("destination") or {}),
            distance_km=_to_float(data.get("distance_km")),
            departure_local=_to_float(data.get("departure_local")),
            departure_utc=_to_float(data.get("departure_utc")),
            arrival_local=_to_float(data.get("arrival_local")),
            arrival_utc=_to_float(data.get("arrival_utc")),
        )

    @property
    def departure_datetime(self) -> Optional[datetime]:
        return _to_datetime(self.departure_utc)

    @property
    def arrival_datetime(self) -> Optional[datetime]:
        return _to_datetime(self.arrival_utc)


@dataclass
class UserTripHotel:
    """Hotel booking; requires the ``user_hotels`` scope.

    The API does not document the shape of these entries, so the full
    source mapping is kept in ``raw``.
    """

    id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserTripHotel":
        ident = data.get("id")
        return cls(id=None if ident is None else str(ident), raw=dict(data))


@dataclass
class UserTripCarRental:
    """Car rental; requires the ``user_car_rentals`` scope.  See :class:`UserTripHotel`."""

    id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserTripCarRental":
        ident = data.get("id")
        return cls(id=None if ident is None else str(ident), raw=dict(data))


@dataclass
class UserTrip:
    id: str
    flights: List[UserTripFlight] = field(default_factory=list)
    hotels: List[UserTripHotel] = field(default_factory=list)
    car_rentals: List[UserTripCarRental] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserTrip":
        return cls(
            id=str(data.get("id", "")),
            flights=[UserTripFlight.from_dict(f) for f in data.get("flights") or []],
            hotels=[UserTripHotel.from_dict(h) for h in data.get("hotels") or []],
            car_rentals=[
                UserTripCarRental.from_dict(c) for c in data.get("car_rentals") or []
            ],
        )


@dataclass
class TripsPage:
    """One page of the user's trips, newest first.

    The server may return fewer trips than requested, even none, while
    more remain.  Keep paging while ``more`` is true and pass
    ``next_url`` back to :meth:`AppInTheAirClient.get_my_trips`.
    """

    trips: List[UserTrip] = field(default_factory=list)
    more: bool = False
    next_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TripsPage":
        return cls(
            trips=[UserTrip.from_dict(t) for t in data.get("trips") or []],
            more=bool(data.get("more", False)),
            next_url=data.get("next_url") or None,
        )

    @property
    def has_more(self) -> bool:
        return self.more
