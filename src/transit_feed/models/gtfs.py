"""Pydantic models for GTFS entities.

All models are frozen: a feed is built once and then only read. Entities
refer to each other by identifier string, resolved through the owning
collection on the Feed.
"""

import datetime
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from transit_feed.models.enums import (
    BikeAccessibility,
    OverrideType,
    PickupDropoffType,
    RouteType,
    TransferType,
    WheelchairAccessibility,
)


class Agency(BaseModel):
    """GTFS agency entity."""

    model_config = ConfigDict(frozen=True)

    agency_id: str | None = None
    agency_name: str
    agency_url: str
    agency_timezone: str
    agency_lang: str | None = None
    agency_phone: str | None = None
    agency_fare_url: str | None = None
    agency_email: str | None = None


class TransferRule(BaseModel):
    """GTFS transfers entity."""

    model_config = ConfigDict(frozen=True)

    from_stop_id: str
    to_stop_id: str
    transfer_type: TransferType = TransferType.RECOMMENDED
    min_transfer_time: int | None = Field(default=None, description="Seconds, never negative")


class OrdinaryLocation(BaseModel):
    """Location kind of a stop or platform (location_type 0)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["stop"] = "stop"


class StationLocation(BaseModel):
    """Location kind of a station (location_type 1).

    ``children`` holds the ids of the stops that name this station as their
    parent. It is filled in when parent stations are linked.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["station"] = "station"
    children: frozenset[str] = frozenset()


class Stop(BaseModel):
    """GTFS stop entity, either an ordinary stop or a station."""

    model_config = ConfigDict(frozen=True)

    stop_id: str
    stop_name: str
    stop_lat: float
    stop_lon: float
    stop_code: str | None = None
    stop_desc: str | None = None
    stop_url: str | None = None
    zone_id: str | None = None
    parent_station: str | None = None  # always None for stations
    stop_timezone: str | None = None
    wheelchair_boarding: WheelchairAccessibility = WheelchairAccessibility.UNKNOWN
    location: OrdinaryLocation | StationLocation = Field(
        default_factory=OrdinaryLocation, discriminator="kind"
    )
    outgoing_transfers: tuple[TransferRule, ...] = ()
    incoming_transfers: tuple[TransferRule, ...] = ()

    @property
    def is_station(self) -> bool:
        return isinstance(self.location, StationLocation)

    @property
    def child_stop_ids(self) -> frozenset[str]:
        """Ids of the stops inside this station (empty for ordinary stops)."""
        if isinstance(self.location, StationLocation):
            return self.location.children
        return frozenset()


class Route(BaseModel):
    """GTFS route entity."""

    model_config = ConfigDict(frozen=True)

    route_id: str
    route_short_name: str
    route_long_name: str
    route_type: RouteType
    agency_id: str | None = None
    route_desc: str | None = None
    route_url: str | None = None
    route_color: str = "FFFFFF"
    route_text_color: str = "000000"


class Trip(BaseModel):
    """GTFS trip entity."""

    model_config = ConfigDict(frozen=True)

    trip_id: str
    route_id: str
    service_id: str
    trip_headsign: str | None = None
    trip_short_name: str | None = None
    direction_id: int | None = None  # 0, 1 or undefined
    block_id: str | None = None
    shape_id: str | None = None
    wheelchair_accessible: WheelchairAccessibility = WheelchairAccessibility.UNKNOWN
    bikes_allowed: BikeAccessibility = BikeAccessibility.UNKNOWN


class StopTime(BaseModel):
    """GTFS stop_times entity.

    Clock times are stored as signed seconds from local noon of the service
    day, so "25:30:00" (1:30 AM the next day) is 48600 and stays ordered after
    every earlier time of the same trip.
    """

    model_config = ConfigDict(frozen=True)

    trip_id: str
    stop_id: str
    stop_sequence: int
    arrival_offset: int | None = None
    departure_offset: int | None = None
    stop_headsign: str | None = None
    pickup_type: PickupDropoffType = PickupDropoffType.REGULARLY_SCHEDULED
    drop_off_type: PickupDropoffType = PickupDropoffType.REGULARLY_SCHEDULED
    shape_dist_traveled: float | None = None
    timepoint: bool = True
    record_number: int = Field(description="1-based row in stop_times.txt")


class ShapePoint(BaseModel):
    """GTFS shapes entity (one point)."""

    model_config = ConfigDict(frozen=True)

    shape_id: str
    shape_pt_lat: float
    shape_pt_lon: float
    shape_pt_sequence: int
    shape_dist_traveled: float | None = None


class TransitShape(BaseModel):
    """A shape and its points, ordered by shape_pt_sequence."""

    model_config = ConfigDict(frozen=True)

    shape_id: str
    points: tuple[ShapePoint, ...] = ()

    @property
    def point_count(self) -> int:
        return len(self.points)


class CalendarEntry(BaseModel):
    """GTFS calendar entity for weekly service patterns."""

    model_config = ConfigDict(frozen=True)

    service_id: str
    start_date: date
    end_date: date
    monday: bool
    tuesday: bool
    wednesday: bool
    thursday: bool
    friday: bool
    saturday: bool
    sunday: bool

    def covers(self, day: date) -> bool:
        """Return True if the day is within [start_date, end_date]."""
        return self.start_date <= day <= self.end_date

    def runs_on_weekday(self, weekday: int) -> bool:
        """Return the flag for a weekday (0=Monday, 6=Sunday)."""
        flags = (
            self.monday,
            self.tuesday,
            self.wednesday,
            self.thursday,
            self.friday,
            self.saturday,
            self.sunday,
        )
        return flags[weekday]


class CalendarOverride(BaseModel):
    """GTFS calendar_dates entity for service exceptions."""

    model_config = ConfigDict(frozen=True)

    service_id: str
    date: datetime.date
    override_type: OverrideType
