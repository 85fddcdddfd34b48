"""Shared machinery for turning one CSV row into a typed record."""

import math
import re
from collections.abc import Sequence
from datetime import date
from enum import Enum
from typing import TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from transit_feed.data.csv_table import CsvTable, FieldNotFoundError
from transit_feed.errors import InvalidDataError, MissingRequiredFieldError

E = TypeVar("E", bound=Enum)

# Clock times are stored relative to local noon of the service day.
SECONDS_TO_NOON = 12 * 3600

CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2}):(\d{2})$")
DATE_PATTERN = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
HEX_COLOR_PATTERN = re.compile(r"^[0-9A-Fa-f]{6}$")


def require_fields(table: CsvTable, filename: str, fields: Sequence[str]) -> None:
    """Check that a table has every required column.

    Raises:
        MissingRequiredFieldError: For the first required column not in the header.
    """
    for name in fields:
        if not table.field_exists(name):
            raise MissingRequiredFieldError(filename, name)


class RecordReader:
    """Reads one row of a feed table against a required/optional field schema.

    Required fields must exist as columns (their values may still be blank);
    optional fields are read only when their column exists. The typed
    accessors raise InvalidDataError carrying file, field, row and raw text.
    """

    def __init__(
        self,
        table: CsvTable,
        record: int,
        filename: str,
        required: Sequence[str],
        optional: Sequence[str] = (),
    ):
        """Collect the raw values of one row.

        Args:
            table: Decoded feed file.
            record: Data row number, starting at 1.
            filename: Feed file name used in error reports.
            required: Columns that must exist.
            optional: Columns read only if present.

        Raises:
            MissingRequiredFieldError: If a required column is absent.
            RowOutOfRangeError: If the row does not exist (a caller bug).
        """
        self.filename = filename
        self.record = record
        self.values: dict[str, str] = {}

        for name in required:
            try:
                self.values[name] = table.get_data(name, record)
            except FieldNotFoundError as e:
                raise MissingRequiredFieldError(filename, name) from e

        for name in optional:
            if table.field_exists(name):
                self.values[name] = table.get_data(name, record)

    def invalid(self, name: str, raw: str | None = None) -> InvalidDataError:
        if raw is None:
            raw = self.values.get(name)
        return InvalidDataError(self.filename, name, self.record, raw)

    def raw(self, name: str) -> str | None:
        """Raw cell text, or None if the column is absent."""
        return self.values.get(name)

    def text(self, name: str) -> str | None:
        """Stripped cell text, or None if the column is absent or the cell blank."""
        value = self.values.get(name)
        if value is None or value.strip() == "":
            return None
        return value.strip()

    def required_text(self, name: str) -> str:
        """Stripped text of a required column (possibly empty)."""
        return self.values.get(name, "").strip()

    def identifier(self, name: str) -> str:
        """Stripped text of a required id or reference column; blank is invalid."""
        value = self.text(name)
        if value is None:
            raise self.invalid(name)
        return value

    def timezone(self, name: str) -> str | None:
        """Validate an IANA timezone name; blank or absent gives None."""
        value = self.text(name)
        if value is None:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise self.invalid(name) from e
        return value

    def integer(self, name: str, *, minimum: int | None = None) -> int | None:
        """Parse an integer cell; blank or absent gives None."""
        value = self.text(name)
        if value is None:
            return None
        try:
            number = int(value)
        except ValueError as e:
            raise self.invalid(name) from e
        if minimum is not None and number < minimum:
            raise self.invalid(name)
        return number

    def required_integer(self, name: str, *, minimum: int | None = None) -> int:
        number = self.integer(name, minimum=minimum)
        if number is None:
            raise self.invalid(name)
        return number

    def decimal(
        self,
        name: str,
        *,
        minimum: float | None = None,
        maximum: float | None = None,
    ) -> float | None:
        """Parse a finite floating-point cell; blank or absent gives None."""
        value = self.text(name)
        if value is None:
            return None
        try:
            number = float(value)
        except ValueError as e:
            raise self.invalid(name) from e
        if not math.isfinite(number):
            raise self.invalid(name)
        if minimum is not None and number < minimum:
            raise self.invalid(name)
        if maximum is not None and number > maximum:
            raise self.invalid(name)
        return number

    def required_decimal(
        self,
        name: str,
        *,
        minimum: float | None = None,
        maximum: float | None = None,
    ) -> float:
        number = self.decimal(name, minimum=minimum, maximum=maximum)
        if number is None:
            raise self.invalid(name)
        return number

    def enum_index(self, name: str, enum_type: type[E], default: E) -> E:
        """Decode an integer index into the declaration order of an enum.

        Blank or absent gives ``default``; an index outside
        [0, len(enum_type)) is invalid.
        """
        value = self.text(name)
        if value is None:
            return default
        try:
            index = int(value)
        except ValueError as e:
            raise self.invalid(name) from e
        variants = list(enum_type)
        if index < 0 or index >= len(variants):
            raise self.invalid(name)
        return variants[index]

    def flag(self, name: str, *, default: bool | None = None) -> bool:
        """Parse a "0"/"1" cell. Blank uses ``default`` when one is given."""
        value = self.text(name)
        if value is None and default is not None:
            return default
        if value == "1":
            return True
        if value == "0":
            return False
        raise self.invalid(name)

    def clock_offset(self, name: str) -> int | None:
        """Parse an H:MM:SS clock time into signed seconds from local noon.

        Hours may exceed 23 for service running past midnight. Blank gives None.
        """
        value = self.text(name)
        if value is None:
            return None
        match = CLOCK_PATTERN.fullmatch(value)
        if match is None:
            raise self.invalid(name)
        hours, minutes, seconds = (int(part) for part in match.groups())
        if minutes > 59 or seconds > 59:
            raise self.invalid(name)
        return hours * 3600 + minutes * 60 + seconds - SECONDS_TO_NOON

    def gtfs_date(self, name: str) -> date:
        """Parse a required YYYYMMDD date."""
        value = self.required_text(name)
        match = DATE_PATTERN.fullmatch(value)
        if match is None:
            raise self.invalid(name)
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError as e:
            raise self.invalid(name) from e

    def hex_color(self, name: str) -> str | None:
        """Validate a six-digit hex color; blank or absent gives None."""
        value = self.text(name)
        if value is None:
            return None
        if HEX_COLOR_PATTERN.fullmatch(value) is None:
            raise self.invalid(name, value)
        return value
