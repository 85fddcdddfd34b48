"""Common machinery for entity collections."""

import logging
from collections.abc import Callable, Hashable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Generic, TypeVar

from transit_feed.data.csv_table import CsvTable
from transit_feed.errors import DatasetUniquenessError
from transit_feed.records.base import require_fields

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def build_all(
    table: CsvTable,
    filename: str,
    required: Sequence[str],
    builder: Callable[[CsvTable, int], T],
) -> list[T]:
    """Run a record builder over every data row of a table.

    The required columns are checked once, before any row is built.

    Raises:
        MissingRequiredFieldError: If a required column is absent.
        InvalidDataError: On the first row with an invalid value.
    """
    require_fields(table, filename, required)
    records = [builder(table, record) for record in range(1, table.row_count + 1)]
    logger.info(f"Built {len(records)} records from {filename}")
    return records


def build_unique(
    table: CsvTable,
    filename: str,
    required: Sequence[str],
    builder: Callable[[CsvTable, int], T],
    field_name: str,
    key: Callable[[T], K],
    describe: Callable[[K], str] = str,
) -> dict[K, T]:
    """Build every data row and index it by key in a single pass.

    Each key is checked as soon as its row is built, so the first problem in
    row order is the one reported.

    Args:
        table: Decoded source file.
        filename: File name used in error messages.
        required: Columns that must be present.
        builder: Builds one record from a data row.
        field_name: Name of the unique field (or field combination).
        key: Extracts the unique key from a record.
        describe: Renders a duplicated key for the error.

    Raises:
        MissingRequiredFieldError: If a required column is absent.
        InvalidDataError: If a row holds an invalid value.
        DatasetUniquenessError: If a row repeats an earlier row's key.
    """
    require_fields(table, filename, required)
    indexed: dict[K, T] = {}
    for record in range(1, table.row_count + 1):
        built = builder(table, record)
        value = key(built)
        if value in indexed:
            raise DatasetUniquenessError(filename, field_name, describe(value))
        indexed[value] = built
    logger.info(f"Built {len(indexed)} records from {filename}")
    return indexed


class EntityStore(Mapping[str, T], Generic[T]):
    """Immutable mapping from identifier to entity."""

    def __init__(self, items: Mapping[str, T]):
        self._items: Mapping[str, T] = MappingProxyType(dict(items))

    def __getitem__(self, key: str) -> T:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} entries)"

