"""Builders for calendar.txt and calendar_dates.txt records."""

from transit_feed.data.csv_table import CsvTable
from transit_feed.models.enums import OverrideType
from transit_feed.models.gtfs import CalendarEntry, CalendarOverride
from transit_feed.records.base import RecordReader

CALENDAR_FILENAME = "calendar.txt"
CALENDAR_DATES_FILENAME = "calendar_dates.txt"

WEEKDAY_FIELDS = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]

CALENDAR_REQUIRED_FIELDS = ["service_id", "start_date", "end_date", *WEEKDAY_FIELDS]
CALENDAR_DATES_REQUIRED_FIELDS = ["service_id", "date", "exception_type"]

# exception_type codes
EXCEPTION_TYPES = {
    "1": OverrideType.ADDED,
    "2": OverrideType.REMOVED,
}


def build_calendar_entry(table: CsvTable, record: int) -> CalendarEntry:
    """Build a CalendarEntry from one row of calendar.txt."""
    row = RecordReader(table, record, CALENDAR_FILENAME, CALENDAR_REQUIRED_FIELDS)

    service_id = row.identifier("service_id")
    start_date = row.gtfs_date("start_date")
    end_date = row.gtfs_date("end_date")
    flags = {day: row.flag(day) for day in WEEKDAY_FIELDS}

    return CalendarEntry(
        service_id=service_id,
        start_date=start_date,
        end_date=end_date,
        **flags,
    )


def build_calendar_override(table: CsvTable, record: int) -> CalendarOverride:
    """Build a CalendarOverride from one row of calendar_dates.txt."""
    row = RecordReader(table, record, CALENDAR_DATES_FILENAME, CALENDAR_DATES_REQUIRED_FIELDS)

    service_id = row.identifier("service_id")
    override_date = row.gtfs_date("date")
    override_type = EXCEPTION_TYPES.get(row.required_text("exception_type"))
    if override_type is None:
        raise row.invalid("exception_type")

    return CalendarOverride(
        service_id=service_id,
        date=override_date,
        override_type=override_type,
    )
