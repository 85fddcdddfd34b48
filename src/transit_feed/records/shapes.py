"""Builder for shapes.txt records."""

from transit_feed.data.csv_table import CsvTable
from transit_feed.models.gtfs import ShapePoint
from transit_feed.records.base import RecordReader

FILENAME = "shapes.txt"

REQUIRED_FIELDS = ["shape_id", "shape_pt_lat", "shape_pt_lon", "shape_pt_sequence"]
OPTIONAL_FIELDS = ["shape_dist_traveled"]


def build_shape_point(table: CsvTable, record: int) -> ShapePoint:
    """Build a ShapePoint from one row of shapes.txt."""
    row = RecordReader(table, record, FILENAME, REQUIRED_FIELDS, OPTIONAL_FIELDS)

    return ShapePoint(
        shape_id=row.identifier("shape_id"),
        shape_pt_lat=row.required_decimal("shape_pt_lat", minimum=-90.0, maximum=90.0),
        shape_pt_lon=row.required_decimal("shape_pt_lon", minimum=-180.0, maximum=180.0),
        shape_pt_sequence=row.required_integer("shape_pt_sequence", minimum=0),
        shape_dist_traveled=row.decimal("shape_dist_traveled", minimum=0.0),
    )
