"""Builder for routes.txt records."""

from transit_feed.data.csv_table import CsvTable
from transit_feed.models.enums import RouteType
from transit_feed.models.gtfs import Route
from transit_feed.records.base import RecordReader

FILENAME = "routes.txt"

REQUIRED_FIELDS = ["route_id", "route_short_name", "route_long_name", "route_type"]
OPTIONAL_FIELDS = ["agency_id", "route_desc", "route_url", "route_color", "route_text_color"]

DEFAULT_ROUTE_COLOR = "FFFFFF"
DEFAULT_ROUTE_TEXT_COLOR = "000000"


def build_route(table: CsvTable, record: int) -> Route:
    """Build a Route from one row of routes.txt."""
    row = RecordReader(table, record, FILENAME, REQUIRED_FIELDS, OPTIONAL_FIELDS)

    # route_type is required, so blank is not mapped to a default
    if row.text("route_type") is None:
        raise row.invalid("route_type")
    route_type = row.enum_index("route_type", RouteType, RouteType.BUS)

    return Route(
        route_id=row.identifier("route_id"),
        route_short_name=row.required_text("route_short_name"),
        route_long_name=row.required_text("route_long_name"),
        route_type=route_type,
        agency_id=row.text("agency_id"),
        route_desc=row.text("route_desc"),
        route_url=row.text("route_url"),
        route_color=row.hex_color("route_color") or DEFAULT_ROUTE_COLOR,
        route_text_color=row.hex_color("route_text_color") or DEFAULT_ROUTE_TEXT_COLOR,
    )
