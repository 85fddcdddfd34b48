"""CSV decoding and column/row access for GTFS text files."""

import csv
import io
import logging
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


class FieldNotFoundError(LookupError):
    """The requested column is not in the table header."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Field not found: {field_name}")


class RowOutOfRangeError(IndexError):
    """The requested data row does not exist."""

    def __init__(self, record: int, row_count: int):
        self.record = record
        self.row_count = row_count
        super().__init__(f"Row {record} out of range (table has {row_count} data rows)")


def _strip_bare_cr(text: str) -> str:
    """Drop carriage returns that sit outside quoted fields.

    A quote opens a quoted field only at the start of a field, and a doubled
    quote inside one is literal, matching how csv.reader reads the text.
    """
    if "\r" not in text:
        return text
    if '"' not in text:
        return text.replace("\r", "")

    out: list[str] = []
    in_quotes = False
    field_start = True
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < length and text[i + 1] == '"':
                    out.append('""')
                    i += 2
                    continue
                in_quotes = False
            out.append(ch)
        elif ch != "\r":
            if ch == '"' and field_start:
                in_quotes = True
            out.append(ch)
            field_start = ch in ",\n"
        i += 1
    return "".join(out)


def decode_csv(text: str) -> list[list[str]]:
    """Decode CSV text into a rectangular grid of strings.

    Quoted fields may hold commas, doubled quotes and line breaks. Only a line
    feed ends a row; carriage returns outside quotes are dropped. Blank lines
    produce no row, and short rows are padded with empty strings up to the
    widest row. Malformed quoting does not stop decoding: an unterminated
    quote absorbs the rest of the text into its field, and that field is left
    for row validation to reject.

    Args:
        text: Raw CSV text. Row 0 of the result is the header.

    Returns:
        List of rows, each a list of cell strings.
    """
    csv.field_size_limit(sys.maxsize)
    reader = csv.reader(io.StringIO(_strip_bare_cr(text), newline=""), strict=False)
    rows = [row for row in reader if row]

    width = max((len(row) for row in rows), default=0)
    for row in rows:
        if len(row) < width:
            row.extend([""] * (width - len(row)))
    return rows


def encode_csv(rows: Iterable[Sequence[str]]) -> str:
    """Encode rows as CSV text with every field quoted and CRLF row breaks."""
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerows(rows)
    return buffer.getvalue()


class CsvTable:
    """A decoded CSV file addressed by (column name, row number).

    Row 0 is the header; data rows are numbered from 1.
    """

    def __init__(
        self,
        rows: list[list[str]],
        *,
        filename: str | None = None,
        case_sensitive: bool = True,
    ):
        if not rows:
            rows = [[]]
        self.filename = filename
        self.case_sensitive = case_sensitive
        self._rows = rows
        self._header = [name.strip().lstrip("\ufeff").strip() for name in rows[0]]

        self._columns: dict[str, int] = {}
        for idx, name in enumerate(self._header):
            key = self._key(name)
            if key not in self._columns:
                self._columns[key] = idx

    @classmethod
    def from_text(
        cls, text: str, *, filename: str | None = None, case_sensitive: bool = True
    ) -> "CsvTable":
        """Decode CSV text into a table."""
        return cls(decode_csv(text), filename=filename, case_sensitive=case_sensitive)

    @classmethod
    def from_path(
        cls, path: Path, *, encoding: str = "utf-8-sig", case_sensitive: bool = True
    ) -> "CsvTable":
        """Read and decode a CSV file from disk."""
        path = Path(path)
        text = path.read_text(encoding=encoding)
        table = cls.from_text(text, filename=path.name, case_sensitive=case_sensitive)
        logger.debug(f"Decoded {path.name}: {table.row_count} data rows")
        return table

    def _key(self, name: str) -> str:
        name = name.strip()
        return name if self.case_sensitive else name.casefold()

    @property
    def field_names(self) -> list[str]:
        return list(self._header)

    @property
    def row_count(self) -> int:
        """Number of data rows (the header is not counted)."""
        return len(self._rows) - 1

    def field_exists(self, name: str) -> bool:
        return self._key(name) in self._columns

    def get_data(self, name: str, record: int) -> str:
        """Get the cell at a column and data row.

        Args:
            name: Column name as written in the header.
            record: Data row number, starting at 1.

        Returns:
            The raw cell text.

        Raises:
            RowOutOfRangeError: If the row does not exist.
            FieldNotFoundError: If the column does not exist.
        """
        if record < 1 or record > self.row_count:
            raise RowOutOfRangeError(record, self.row_count)
        col = self._columns.get(self._key(name))
        if col is None:
            raise FieldNotFoundError(name)
        return self._rows[record][col]
