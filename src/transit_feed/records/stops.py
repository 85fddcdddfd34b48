"""Builder for stops.txt records."""

from transit_feed.data.csv_table import CsvTable
from transit_feed.models.enums import WheelchairAccessibility
from transit_feed.models.gtfs import OrdinaryLocation, StationLocation, Stop
from transit_feed.records.base import RecordReader

FILENAME = "stops.txt"

REQUIRED_FIELDS = ["stop_id", "stop_name", "stop_lat", "stop_lon"]
OPTIONAL_FIELDS = [
    "stop_code",
    "stop_desc",
    "stop_url",
    "zone_id",
    "location_type",
    "parent_station",
    "stop_timezone",
    "wheelchair_boarding",
]


def stop_fields(zone_id_required: bool) -> tuple[list[str], list[str]]:
    """Return (required, optional) fields.

    zone_id becomes required when the feed contains fare_rules.txt.
    """
    if zone_id_required:
        optional = [name for name in OPTIONAL_FIELDS if name != "zone_id"]
        return [*REQUIRED_FIELDS, "zone_id"], optional
    return REQUIRED_FIELDS, OPTIONAL_FIELDS


def build_stop(table: CsvTable, record: int, *, zone_id_required: bool = False) -> Stop:
    """Build a Stop (ordinary stop or station) from one row of stops.txt.

    location_type blank or 0 gives an ordinary stop, 1 gives a station; any
    other value is invalid. A station never carries a parent_station.
    """
    required, optional = stop_fields(zone_id_required)
    row = RecordReader(table, record, FILENAME, required, optional)

    location_type = row.text("location_type")
    if location_type is None or location_type == "0":
        location: OrdinaryLocation | StationLocation = OrdinaryLocation()
        parent_station = row.text("parent_station")
    elif location_type == "1":
        location = StationLocation()
        parent_station = None
    else:
        raise row.invalid("location_type")

    return Stop(
        stop_id=row.identifier("stop_id"),
        stop_name=row.required_text("stop_name"),
        stop_lat=row.required_decimal("stop_lat", minimum=-90.0, maximum=90.0),
        stop_lon=row.required_decimal("stop_lon", minimum=-180.0, maximum=180.0),
        stop_code=row.text("stop_code"),
        stop_desc=row.text("stop_desc"),
        stop_url=row.text("stop_url"),
        zone_id=row.text("zone_id"),
        parent_station=parent_station,
        stop_timezone=row.timezone("stop_timezone"),
        wheelchair_boarding=row.enum_index(
            "wheelchair_boarding", WheelchairAccessibility, WheelchairAccessibility.UNKNOWN
        ),
        location=location,
    )
