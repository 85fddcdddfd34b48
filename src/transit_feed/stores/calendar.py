"""Collections for calendar.txt and calendar_dates.txt."""

import datetime
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from transit_feed.data.csv_table import CsvTable
from transit_feed.models.gtfs import CalendarEntry, CalendarOverride
from transit_feed.records import calendar as calendar_records
from transit_feed.stores.base import EntityStore, build_unique


class CalendarEntryStore(EntityStore[CalendarEntry]):
    """Weekly service patterns keyed by service_id."""

    @classmethod
    def from_table(cls, table: CsvTable | None) -> "CalendarEntryStore":
        """Build entries from calendar.txt; an absent file gives an empty store."""
        if table is None:
            return cls({})
        entries = build_unique(
            table,
            calendar_records.CALENDAR_FILENAME,
            calendar_records.CALENDAR_REQUIRED_FIELDS,
            calendar_records.build_calendar_entry,
            "service_id",
            lambda entry: entry.service_id,
        )
        return cls(entries)


class CalendarOverrideStore:
    """Service exceptions keyed by (service_id, date)."""

    def __init__(self, overrides: Mapping[tuple[str, datetime.date], CalendarOverride]):
        self._overrides = MappingProxyType(dict(overrides))

    @classmethod
    def from_table(cls, table: CsvTable | None) -> "CalendarOverrideStore":
        """Build overrides from calendar_dates.txt; an absent file gives an empty store.

        Raises:
            DatasetUniquenessError: If a (service_id, date) pair repeats.
        """
        if table is None:
            return cls({})
        overrides = build_unique(
            table,
            calendar_records.CALENDAR_DATES_FILENAME,
            calendar_records.CALENDAR_DATES_REQUIRED_FIELDS,
            calendar_records.build_calendar_override,
            "service_id+date",
            lambda override: (override.service_id, override.date),
            lambda pair: f"{pair[0]}+{pair[1]:%Y%m%d}",
        )
        return cls(overrides)

    def get(self, service_id: str, day: datetime.date) -> CalendarOverride | None:
        return self._overrides.get((service_id, day))

    def service_ids(self) -> list[str]:
        """Distinct service ids in file order."""
        return list(dict.fromkeys(service_id for service_id, _ in self._overrides))

    def __iter__(self) -> Iterator[CalendarOverride]:
        return iter(self._overrides.values())

    def __len__(self) -> int:
        return len(self._overrides)
