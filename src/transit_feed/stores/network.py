"""Collections for agencies, stops, routes and trips."""

import logging

from transit_feed.data.csv_table import CsvTable
from transit_feed.models.gtfs import Agency, Route, Stop, Trip
from transit_feed.records import agency as agency_records
from transit_feed.records import routes as route_records
from transit_feed.records import stops as stop_records
from transit_feed.records import trips as trip_records
from transit_feed.stores.base import EntityStore, build_unique

logger = logging.getLogger(__name__)


class AgencyStore(EntityStore[Agency]):
    """Agencies keyed by agency_id ("" for a single agency without one)."""

    @classmethod
    def from_table(cls, table: CsvTable) -> "AgencyStore":
        """Build agencies from agency.txt.

        agency_id is only dataset-unique when the file has more than one record.
        """
        required, _ = agency_records.agency_fields(table)
        return cls(
            build_unique(
                table,
                agency_records.FILENAME,
                required,
                agency_records.build_agency,
                "agency_id",
                lambda agency: agency.agency_id or "",
            )
        )

    def first(self) -> Agency | None:
        """Return the first agency in file order."""
        return next(iter(self.values()), None)


class StopStore(EntityStore[Stop]):
    """Stops and stations keyed by stop_id."""

    @classmethod
    def from_table(cls, table: CsvTable, *, zone_id_required: bool = False) -> "StopStore":
        """Build stops from stops.txt.

        Args:
            table: Decoded stops.txt.
            zone_id_required: True when the feed has fare_rules.txt.

        Raises:
            MissingRequiredFieldError: If a required column is absent.
            InvalidDataError: On the first invalid value.
            DatasetUniquenessError: If a stop_id repeats.
        """
        required, _ = stop_records.stop_fields(zone_id_required)
        stops = build_unique(
            table,
            stop_records.FILENAME,
            required,
            lambda t, record: stop_records.build_stop(t, record, zone_id_required=zone_id_required),
            "stop_id",
            lambda stop: stop.stop_id,
        )
        store = cls(stops)
        station_count = sum(1 for stop in store.values() if stop.is_station)
        logger.info(f"Loaded {len(store)} stops ({station_count} stations)")
        return store

    def stations(self) -> list[Stop]:
        return [stop for stop in self.values() if stop.is_station]


class RouteStore(EntityStore[Route]):
    """Routes keyed by route_id."""

    @classmethod
    def from_table(cls, table: CsvTable) -> "RouteStore":
        routes = build_unique(
            table,
            route_records.FILENAME,
            route_records.REQUIRED_FIELDS,
            route_records.build_route,
            "route_id",
            lambda route: route.route_id,
        )
        return cls(routes)


class TripStore(EntityStore[Trip]):
    """Trips keyed by trip_id."""

    @classmethod
    def from_table(cls, table: CsvTable) -> "TripStore":
        trips = build_unique(
            table,
            trip_records.FILENAME,
            trip_records.REQUIRED_FIELDS,
            trip_records.build_trip,
            "trip_id",
            lambda trip: trip.trip_id,
        )
        return cls(trips)

    def for_route(self, route_id: str) -> list[Trip]:
        """Trips serving a route, in file order."""
        return [trip for trip in self.values() if trip.route_id == route_id]
