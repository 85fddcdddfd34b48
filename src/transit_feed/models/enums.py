"""Enumerations used by GTFS fields.

Declaration order matters: GTFS encodes these as integer indexes, and the
record builders decode an index ``i`` as ``list(EnumType)[i]``.
"""

from enum import Enum


class RouteType(str, Enum):
    """Vehicle type of a route (route_type 0-7)."""

    TRAM = "tram"
    SUBWAY = "subway"
    RAIL = "rail"
    BUS = "bus"
    FERRY = "ferry"
    CABLE_CAR = "cable_car"
    GONDOLA = "gondola"
    FUNICULAR = "funicular"


class WheelchairAccessibility(str, Enum):
    """0=no information, 1=some accessibility, 2=not accessible."""

    UNKNOWN = "unknown"
    ACCESSIBLE = "accessible"
    NOT_ACCESSIBLE = "not_accessible"


class BikeAccessibility(str, Enum):
    """0=no information, 1=at least one bike allowed, 2=no bikes allowed."""

    UNKNOWN = "unknown"
    ALLOWED = "allowed"
    NOT_ALLOWED = "not_allowed"


class PickupDropoffType(str, Enum):
    REGULARLY_SCHEDULED = "regularly_scheduled"
    NONE_AVAILABLE = "none_available"
    PHONE_AGENCY = "phone_agency"
    COORDINATE_WITH_DRIVER = "coordinate_with_driver"


class TransferType(str, Enum):
    RECOMMENDED = "recommended"
    TIMED = "timed"
    MINIMUM_TIME = "minimum_time"
    NOT_POSSIBLE = "not_possible"


class OverrideType(str, Enum):
    """calendar_dates exception_type: 1=service added, 2=service removed."""

    ADDED = "added"
    REMOVED = "removed"
