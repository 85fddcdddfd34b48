"""Builder for transfers.txt records."""

from transit_feed.data.csv_table import CsvTable
from transit_feed.models.enums import TransferType
from transit_feed.models.gtfs import TransferRule
from transit_feed.records.base import RecordReader

FILENAME = "transfers.txt"

REQUIRED_FIELDS = ["from_stop_id", "to_stop_id", "transfer_type"]
OPTIONAL_FIELDS = ["min_transfer_time"]


def build_transfer_rule(table: CsvTable, record: int) -> TransferRule:
    """Build a TransferRule from one row of transfers.txt.

    Blank transfer_type means a recommended transfer point.
    """
    row = RecordReader(table, record, FILENAME, REQUIRED_FIELDS, OPTIONAL_FIELDS)

    return TransferRule(
        from_stop_id=row.identifier("from_stop_id"),
        to_stop_id=row.identifier("to_stop_id"),
        transfer_type=row.enum_index("transfer_type", TransferType, TransferType.RECOMMENDED),
        min_transfer_time=row.integer("min_transfer_time", minimum=0),
    )
