"""Collections for stop times, shapes and transfer rules."""

import logging
from collections import defaultdict

from transit_feed.data.csv_table import CsvTable
from transit_feed.models.gtfs import ShapePoint, StopTime, TransferRule, TransitShape
from transit_feed.records import shapes as shape_records
from transit_feed.records import stop_times as stop_time_records
from transit_feed.records import transfers as transfer_records
from transit_feed.stores.base import EntityStore, build_all

logger = logging.getLogger(__name__)


def load_stop_times(table: CsvTable) -> list[StopTime]:
    """Build every stop time of stop_times.txt, in file order."""
    return build_all(
        table,
        stop_time_records.FILENAME,
        stop_time_records.REQUIRED_FIELDS,
        stop_time_records.build_stop_time,
    )


def load_transfer_rules(table: CsvTable) -> list[TransferRule]:
    """Build every transfer rule of transfers.txt, in file order."""
    return build_all(
        table,
        transfer_records.FILENAME,
        transfer_records.REQUIRED_FIELDS,
        transfer_records.build_transfer_rule,
    )


class ShapeStore(EntityStore[TransitShape]):
    """Shapes keyed by shape_id, each with its points sorted by sequence."""

    @classmethod
    def from_table(cls, table: CsvTable) -> "ShapeStore":
        points = build_all(
            table,
            shape_records.FILENAME,
            shape_records.REQUIRED_FIELDS,
            shape_records.build_shape_point,
        )

        by_shape: dict[str, list[ShapePoint]] = defaultdict(list)
        for point in points:
            by_shape[point.shape_id].append(point)

        shapes = {
            shape_id: TransitShape(
                shape_id=shape_id,
                points=tuple(sorted(shape_points, key=lambda p: p.shape_pt_sequence)),
            )
            for shape_id, shape_points in by_shape.items()
        }
        logger.info(f"Loaded {len(shapes)} shapes from {len(points)} points")
        return cls(shapes)
