"""Feed facade and the staged pipeline that builds it from an archive."""

import logging
import threading
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path

from transit_feed.data.archive import FeedArchive, ProgressCallback
from transit_feed.data.config import FeedConfig, get_feed_config
from transit_feed.data.csv_table import CsvTable
from transit_feed.errors import FeedError, MissingRequiredFileError
from transit_feed.models.enums import WheelchairAccessibility
from transit_feed.models.gtfs import Stop, StopTime, TransferRule, TransitShape
from transit_feed.services.calendar_service import ServiceCalendar
from transit_feed.services.linker import link_parent_stations, register_transfers
from transit_feed.services.schedule_service import StopTimeSchedule
from transit_feed.stores.calendar import CalendarEntryStore, CalendarOverrideStore
from transit_feed.stores.network import AgencyStore, RouteStore, StopStore, TripStore
from transit_feed.stores.schedule import ShapeStore, load_stop_times, load_transfer_rules

logger = logging.getLogger(__name__)

AGENCY_FILE = "agency.txt"
STOPS_FILE = "stops.txt"
ROUTES_FILE = "routes.txt"
TRIPS_FILE = "trips.txt"
STOP_TIMES_FILE = "stop_times.txt"
CALENDAR_FILE = "calendar.txt"
CALENDAR_DATES_FILE = "calendar_dates.txt"
SHAPES_FILE = "shapes.txt"
TRANSFERS_FILE = "transfers.txt"
FARE_RULES_FILE = "fare_rules.txt"

# Used only when agency.txt has no records
FALLBACK_TIMEZONE = "UTC"


class Feed:
    """Read-only model of a validated GTFS feed.

    Entities refer to each other by id; the lookups here resolve those ids
    through the owning collections.
    """

    def __init__(
        self,
        *,
        agencies: AgencyStore,
        stops: StopStore,
        routes: RouteStore,
        trips: TripStore,
        calendar: ServiceCalendar,
        schedule: StopTimeSchedule,
        shapes: ShapeStore | None,
        transfer_rules: tuple[TransferRule, ...],
        timezone: str,
        files: frozenset[str],
    ):
        self.agencies = agencies
        self.stops = stops
        self.routes = routes
        self.trips = trips
        self.calendar = calendar
        self.schedule = schedule
        self.shapes = shapes
        self.transfer_rules = transfer_rules
        self.timezone = timezone
        self._files = files

    def __repr__(self) -> str:
        counts = ", ".join(f"{name}={count}" for name, count in self.summary().items())
        return f"Feed({counts})"

    # Schedule queries

    def timetable(self, stop_id: str, day: date) -> list[StopTime]:
        """Visits at a stop on a date whose service is active, by departure."""
        return self.schedule.timetable(stop_id, day)

    def trip_schedule(self, trip_id: str) -> tuple[StopTime, ...] | None:
        return self.schedule.trip_schedule(trip_id)

    def resolved_departure_time(self, stop_time: StopTime, day: date) -> datetime | None:
        return self.schedule.resolved_departure_time(stop_time, day)

    def is_service_active(self, service_id: str, day: date) -> bool:
        return self.calendar.is_active_on(service_id, day)

    # Stop queries

    def parent_station(self, stop_id: str) -> Stop | None:
        """The station a stop belongs to, or None if it has none or it is unknown.

        Raises:
            KeyError: If stop_id is not in the feed.
        """
        stop = self.stops[stop_id]
        if stop.parent_station is None:
            return None
        parent = self.stops.get(stop.parent_station)
        if parent is None or not parent.is_station:
            return None
        return parent

    def child_stops(self, station_id: str) -> list[Stop]:
        """Stops that belong to a station, sorted by stop_id.

        Raises:
            KeyError: If station_id is not in the feed.
        """
        station = self.stops[station_id]
        return [self.stops[child_id] for child_id in sorted(station.child_stop_ids)]

    def effective_timezone(self, stop_id: str) -> str:
        """Timezone observed at a stop.

        The parent station's timezone wins, then the stop's own stop_timezone,
        then the feed timezone.

        Raises:
            KeyError: If stop_id is not in the feed.
        """
        parent = self.parent_station(stop_id)
        if parent is not None:
            return self.effective_timezone(parent.stop_id)
        return self.stops[stop_id].stop_timezone or self.timezone

    def effective_wheelchair_boarding(self, stop_id: str) -> WheelchairAccessibility:
        """Wheelchair boarding at a stop, inherited from its station when unknown.

        Raises:
            KeyError: If stop_id is not in the feed.
        """
        stop = self.stops[stop_id]
        if stop.wheelchair_boarding != WheelchairAccessibility.UNKNOWN:
            return stop.wheelchair_boarding
        parent = self.parent_station(stop_id)
        if parent is None:
            return WheelchairAccessibility.UNKNOWN
        return parent.wheelchair_boarding

    def shape(self, shape_id: str) -> TransitShape | None:
        if self.shapes is None:
            return None
        return self.shapes.get(shape_id)

    # Feed metadata

    def is_file_present(self, name: str) -> bool:
        """Return True if the archive contained the named file."""
        return name in self._files

    def summary(self) -> dict[str, int]:
        """Record counts per entity kind."""
        return {
            "agencies": len(self.agencies),
            "stops": len(self.stops),
            "routes": len(self.routes),
            "trips": len(self.trips),
            "services": len(self.calendar.service_ids()),
            "calendar_dates": len(self.calendar.overrides),
            "stop_times": self.schedule.stop_time_count,
            "shapes": len(self.shapes) if self.shapes is not None else 0,
            "transfers": len(self.transfer_rules),
        }


class FeedBuilder:
    """Builds a Feed from an open archive, one file at a time.

    Each stage depends only on the stages before it. Required files abort the
    build on any error; transfers and shapes are optional and an error in
    either is logged and the feature left out.
    """

    def __init__(self, archive: FeedArchive):
        self.archive = archive

    def _required_table(self, name: str) -> CsvTable:
        table = self.archive.read_table(name)
        if table is None:
            raise MissingRequiredFileError(name)
        logger.info(f"Loading {name} ({table.row_count:,} rows)")
        return table

    def _optional_table(self, name: str) -> CsvTable | None:
        table = self.archive.read_table(name)
        if table is None:
            logger.warning(f"Optional file {name} not found")
            return None
        logger.info(f"Loading {name} ({table.row_count:,} rows)")
        return table

    def build(self) -> Feed:
        """Run every stage and return the finished feed.

        Raises:
            FeedError: For any problem in a required file.
        """
        agencies = AgencyStore.from_table(self._required_table(AGENCY_FILE))
        first_agency = agencies.first()
        if first_agency is None:
            logger.warning(f"{AGENCY_FILE} has no records; using {FALLBACK_TIMEZONE}")
            timezone = FALLBACK_TIMEZONE
        else:
            timezone = first_agency.agency_timezone

        stops: Mapping[str, Stop] = StopStore.from_table(
            self._required_table(STOPS_FILE),
            zone_id_required=self.archive.has_entry(FARE_RULES_FILE),
        )
        stops = link_parent_stations(stops)

        routes = RouteStore.from_table(self._required_table(ROUTES_FILE))
        trips = TripStore.from_table(self._required_table(TRIPS_FILE))
        calendar = self._build_calendar()

        schedule = StopTimeSchedule(
            load_stop_times(self._required_table(STOP_TIMES_FILE)),
            timezone=timezone,
            trips=trips,
            calendar=calendar,
        )

        transfer_rules: tuple[TransferRule, ...] = ()
        try:
            table = self._optional_table(TRANSFERS_FILE)
            if table is not None:
                rules = load_transfer_rules(table)
                stops = register_transfers(stops, rules)
                transfer_rules = tuple(rules)
        except FeedError as e:
            logger.warning(f"Ignoring {TRANSFERS_FILE}: {e}")

        shapes: ShapeStore | None = None
        try:
            table = self._optional_table(SHAPES_FILE)
            if table is not None:
                shapes = ShapeStore.from_table(table)
        except FeedError as e:
            logger.warning(f"Ignoring {SHAPES_FILE}: {e}")

        feed = Feed(
            agencies=agencies,
            stops=StopStore(stops),
            routes=routes,
            trips=trips,
            calendar=calendar,
            schedule=schedule,
            shapes=shapes,
            transfer_rules=transfer_rules,
            timezone=timezone,
            files=frozenset(self.archive.entries),
        )
        logger.info(f"Feed loaded: {feed.summary()}")
        return feed

    def _build_calendar(self) -> ServiceCalendar:
        calendar_table = self.archive.read_table(CALENDAR_FILE)
        dates_table = self.archive.read_table(CALENDAR_DATES_FILE)
        entries = None
        if calendar_table is not None:
            entries = CalendarEntryStore.from_table(calendar_table)
        overrides = None
        if dates_table is not None:
            overrides = CalendarOverrideStore.from_table(dates_table)
        return ServiceCalendar.from_stores(entries, overrides)


def load_feed(
    path: Path | str,
    *,
    config: FeedConfig | None = None,
    progress: ProgressCallback | None = None,
    cancel_event: threading.Event | None = None,
) -> Feed:
    """Open a GTFS archive and build a validated feed.

    Args:
        path: GTFS ZIP file or directory of GTFS text files.
        config: Feed configuration; defaults to the environment configuration.
        progress: Optional callback receiving (entries_done, entries_total)
            while a ZIP file is extracted.
        cancel_event: Optional event checked between extracted entries.

    Returns:
        The built feed. Temporary files are removed before returning.

    Raises:
        FeedError: If the archive is unreadable, a required file is missing or
            invalid, or loading is cancelled.
    """
    if config is None:
        config = get_feed_config()

    logger.info(f"Loading GTFS feed from {path}")
    with FeedArchive(
        Path(path),
        progress=progress,
        cancel_event=cancel_event,
        encoding=config.encoding,
        case_sensitive=config.case_sensitive_headers,
    ) as archive:
        return FeedBuilder(archive).build()
