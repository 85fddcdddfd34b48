"""Builder for agency.txt records."""

from transit_feed.data.csv_table import CsvTable
from transit_feed.models.gtfs import Agency
from transit_feed.records.base import RecordReader

FILENAME = "agency.txt"

REQUIRED_FIELDS = ["agency_name", "agency_url", "agency_timezone"]
OPTIONAL_FIELDS = ["agency_lang", "agency_phone", "agency_fare_url", "agency_email"]


def agency_fields(table: CsvTable) -> tuple[list[str], list[str]]:
    """Return (required, optional) fields for this agency table.

    agency_id may be omitted only when the feed has a single agency.
    """
    if table.row_count > 1:
        return [*REQUIRED_FIELDS, "agency_id"], OPTIONAL_FIELDS
    return REQUIRED_FIELDS, ["agency_id", *OPTIONAL_FIELDS]


def build_agency(table: CsvTable, record: int) -> Agency:
    """Build an Agency from one row of agency.txt."""
    required, optional = agency_fields(table)
    row = RecordReader(table, record, FILENAME, required, optional)

    if "agency_id" in required:
        agency_id: str | None = row.identifier("agency_id")
    else:
        agency_id = row.text("agency_id")

    timezone = row.timezone("agency_timezone")
    if timezone is None:
        raise row.invalid("agency_timezone")

    return Agency(
        agency_id=agency_id,
        agency_name=row.required_text("agency_name"),
        agency_url=row.required_text("agency_url"),
        agency_timezone=timezone,
        agency_lang=row.text("agency_lang"),
        agency_phone=row.text("agency_phone"),
        agency_fare_url=row.text("agency_fare_url"),
        agency_email=row.text("agency_email"),
    )
