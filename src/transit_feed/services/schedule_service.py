"""Schedule resolution over stop times: trip schedules, stop timetables and
departure instants with timing-point back-fill."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from transit_feed.errors import TerminalTimepointError
from transit_feed.models.gtfs import StopTime, Trip
from transit_feed.records.base import SECONDS_TO_NOON
from transit_feed.services.calendar_service import ServiceCalendar

logger = logging.getLogger(__name__)

LOCAL_NOON = time(12, 0)


def format_offset(offset: int | None) -> str:
    """Format a noon-relative offset back to a GTFS clock string.

    Args:
        offset: Seconds from local noon, or None.

    Returns:
        Time string in HH:MM:SS format (hours can exceed 23), or "" for None.
    """
    if offset is None:
        return ""
    total = offset + SECONDS_TO_NOON
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def date_to_gtfs_format(d: date) -> str:
    """Convert a date to GTFS date format (YYYYMMDD)."""
    return d.strftime("%Y%m%d")


def parse_gtfs_date(date_str: str) -> date:
    """Parse a date given as YYYYMMDD or YYYY-MM-DD.

    Raises:
        ValueError: If the string is neither format.
    """
    value = date_str.strip()
    for fmt in ("%Y%m%d", "%Y-%m-%d"):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date: {date_str}")


def offset_to_datetime(offset: int, service_day: date, tz: ZoneInfo) -> datetime:
    """Turn a noon-relative offset into an aware instant.

    The offset is added as elapsed seconds to local noon of the service day, so
    a day with a DST transition still places each time at the right instant.
    """
    noon = datetime.combine(service_day, LOCAL_NOON, tzinfo=tz)
    return (noon.astimezone(UTC) + timedelta(seconds=offset)).astimezone(tz)


class StopTimeSchedule:
    """Stop times grouped by trip and by stop.

    Each trip's stop times are ordered by stop_sequence. Construction checks
    that the first and last stop time of every trip are timing points.
    """

    def __init__(
        self,
        stop_times: Iterable[StopTime],
        *,
        timezone: str,
        trips: Mapping[str, Trip],
        calendar: ServiceCalendar,
    ):
        """Group and check stop times.

        Args:
            stop_times: Stop times in file order.
            timezone: Feed timezone used to place clock times.
            trips: Trips keyed by trip_id, used to find each visit's service.
            calendar: Service calendar used to filter timetables.

        Raises:
            TerminalTimepointError: If a trip starts or ends on a stop time
                that is not a timing point.
        """
        self.timezone = timezone
        self._tz = ZoneInfo(timezone)
        self._trips = trips
        self._calendar = calendar

        by_trip: dict[str, list[StopTime]] = defaultdict(list)
        by_stop: dict[str, list[StopTime]] = defaultdict(list)
        count = 0
        for stop_time in stop_times:
            by_trip[stop_time.trip_id].append(stop_time)
            by_stop[stop_time.stop_id].append(stop_time)
            count += 1

        self._by_trip: dict[str, tuple[StopTime, ...]] = {}
        self._positions: dict[int, int] = {}
        for trip_id, trip_stop_times in by_trip.items():
            ordered = tuple(sorted(trip_stop_times, key=lambda st: st.stop_sequence))
            if not ordered[0].timepoint or not ordered[-1].timepoint:
                raise TerminalTimepointError(trip_id)
            self._by_trip[trip_id] = ordered
            for index, stop_time in enumerate(ordered):
                self._positions[stop_time.record_number] = index

        self._by_stop = {stop_id: tuple(visits) for stop_id, visits in by_stop.items()}
        self.stop_time_count = count
        logger.info(f"Indexed {count} stop times across {len(self._by_trip)} trips")

    def trip_ids(self) -> list[str]:
        return list(self._by_trip)

    def trip_schedule(self, trip_id: str) -> tuple[StopTime, ...] | None:
        """Stop times of a trip ordered by stop_sequence, or None if unknown."""
        return self._by_trip.get(trip_id)

    def trip_schedule_timepoints_only(
        self, trip_id: str, day: date | None = None
    ) -> list[StopTime] | None:
        """Timing points of a trip sorted by departure, or None if unknown.

        Args:
            trip_id: Trip to query.
            day: Service day used to place departures; defaults to today in
                the feed timezone.
        """
        schedule = self._by_trip.get(trip_id)
        if schedule is None:
            return None
        if day is None:
            day = datetime.now(self._tz).date()
        timepoints = [stop_time for stop_time in schedule if stop_time.timepoint]
        return sorted(timepoints, key=lambda st: self._sort_key(self.departure_time(st, day)))

    def stop_visits(self, stop_id: str) -> tuple[StopTime, ...]:
        """All stop times at a stop, in file order."""
        return self._by_stop.get(stop_id, ())

    def arrival_time(self, stop_time: StopTime, day: date) -> datetime | None:
        """Literal arrival instant of a stop time, or None if blank."""
        if stop_time.arrival_offset is None:
            return None
        return offset_to_datetime(stop_time.arrival_offset, day, self._tz)

    def departure_time(self, stop_time: StopTime, day: date) -> datetime | None:
        """Literal departure instant of a stop time, or None if blank."""
        if stop_time.departure_offset is None:
            return None
        return offset_to_datetime(stop_time.departure_offset, day, self._tz)

    def resolved_departure_time(self, stop_time: StopTime, day: date) -> datetime | None:
        """Departure instant of a stop time, back-filled from timing points.

        A timing point gives its own departure. Any other stop time gives the
        departure of the nearest earlier timing point of the same trip.

        Args:
            stop_time: A stop time belonging to this schedule.
            day: Service day.

        Returns:
            Aware datetime in the feed timezone, or None when the timing point
            used has a blank departure_time.

        Raises:
            ValueError: If the stop time is not part of this schedule.
            RuntimeError: If no earlier timing point exists.
        """
        if stop_time.timepoint:
            return self.departure_time(stop_time, day)

        schedule = self._by_trip.get(stop_time.trip_id)
        index = self._positions.get(stop_time.record_number)
        if schedule is None or index is None or schedule[index] != stop_time:
            raise ValueError(
                f"Stop time at record {stop_time.record_number} is not part of this schedule"
            )

        for i in range(index - 1, -1, -1):
            if schedule[i].timepoint:
                return self.departure_time(schedule[i], day)
        raise RuntimeError(f"No timing point before record {stop_time.record_number}")

    def timetable(self, stop_id: str, day: date) -> list[StopTime]:
        """Visits at a stop on a date, ordered by resolved departure.

        Only visits whose trip is known and whose service runs on the date are
        included. Visits without a departure sort last, in file order.
        """
        visits = []
        for stop_time in self.stop_visits(stop_id):
            trip = self._trips.get(stop_time.trip_id)
            if trip is None:
                continue
            if not self._calendar.is_active_on(trip.service_id, day):
                continue
            visits.append((self.resolved_departure_time(stop_time, day), stop_time))

        visits.sort(key=lambda pair: self._sort_key(pair[0]))
        return [stop_time for _, stop_time in visits]

    @staticmethod
    def _sort_key(departure: datetime | None) -> tuple[int, datetime]:
        if departure is None:
            return (1, datetime.min.replace(tzinfo=UTC))
        return (0, departure)
