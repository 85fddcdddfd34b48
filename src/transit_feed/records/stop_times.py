"""Builder for stop_times.txt records."""

from transit_feed.data.csv_table import CsvTable
from transit_feed.models.enums import PickupDropoffType
from transit_feed.models.gtfs import StopTime
from transit_feed.records.base import RecordReader

FILENAME = "stop_times.txt"

REQUIRED_FIELDS = ["trip_id", "arrival_time", "departure_time", "stop_id", "stop_sequence"]
OPTIONAL_FIELDS = [
    "stop_headsign",
    "pickup_type",
    "drop_off_type",
    "shape_dist_traveled",
    "timepoint",
]


def build_stop_time(table: CsvTable, record: int) -> StopTime:
    """Build a StopTime from one row of stop_times.txt.

    arrival_time and departure_time columns must exist but may be blank;
    blank timepoint means the stop time is a timing point.
    """
    row = RecordReader(table, record, FILENAME, REQUIRED_FIELDS, OPTIONAL_FIELDS)

    return StopTime(
        trip_id=row.identifier("trip_id"),
        stop_id=row.identifier("stop_id"),
        stop_sequence=row.required_integer("stop_sequence", minimum=0),
        arrival_offset=row.clock_offset("arrival_time"),
        departure_offset=row.clock_offset("departure_time"),
        stop_headsign=row.text("stop_headsign"),
        pickup_type=row.enum_index(
            "pickup_type", PickupDropoffType, PickupDropoffType.REGULARLY_SCHEDULED
        ),
        drop_off_type=row.enum_index(
            "drop_off_type", PickupDropoffType, PickupDropoffType.REGULARLY_SCHEDULED
        ),
        shape_dist_traveled=row.decimal("shape_dist_traveled", minimum=0.0),
        timepoint=row.flag("timepoint", default=True),
        record_number=record,
    )
