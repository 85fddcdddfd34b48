"""Builder for trips.txt records."""

from transit_feed.data.csv_table import CsvTable
from transit_feed.models.enums import BikeAccessibility, WheelchairAccessibility
from transit_feed.models.gtfs import Trip
from transit_feed.records.base import RecordReader

FILENAME = "trips.txt"

REQUIRED_FIELDS = ["route_id", "service_id", "trip_id"]
OPTIONAL_FIELDS = [
    "trip_headsign",
    "trip_short_name",
    "direction_id",
    "block_id",
    "shape_id",
    "wheelchair_accessible",
    "bikes_allowed",
]


def build_trip(table: CsvTable, record: int) -> Trip:
    """Build a Trip from one row of trips.txt."""
    row = RecordReader(table, record, FILENAME, REQUIRED_FIELDS, OPTIONAL_FIELDS)

    direction_id = row.integer("direction_id")
    if direction_id is not None and direction_id not in (0, 1):
        raise row.invalid("direction_id")

    return Trip(
        trip_id=row.identifier("trip_id"),
        route_id=row.identifier("route_id"),
        service_id=row.identifier("service_id"),
        trip_headsign=row.text("trip_headsign"),
        trip_short_name=row.text("trip_short_name"),
        direction_id=direction_id,
        block_id=row.text("block_id"),
        shape_id=row.text("shape_id"),
        wheelchair_accessible=row.enum_index(
            "wheelchair_accessible", WheelchairAccessibility, WheelchairAccessibility.UNKNOWN
        ),
        bikes_allowed=row.enum_index("bikes_allowed", BikeAccessibility, BikeAccessibility.UNKNOWN),
    )
