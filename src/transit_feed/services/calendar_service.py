"""Service calendar: which service_ids run on which dates."""

import logging
from datetime import date

from transit_feed.errors import MissingRequiredFileError
from transit_feed.models.enums import OverrideType
from transit_feed.stores.calendar import CalendarEntryStore, CalendarOverrideStore

logger = logging.getLogger(__name__)


class ServiceCalendar:
    """Combines weekly patterns from calendar.txt with exceptions from calendar_dates.txt."""

    def __init__(self, entries: CalendarEntryStore, overrides: CalendarOverrideStore):
        self.entries = entries
        self.overrides = overrides

    @classmethod
    def from_stores(
        cls,
        entries: CalendarEntryStore | None,
        overrides: CalendarOverrideStore | None,
    ) -> "ServiceCalendar":
        """Build a calendar where either source may be missing, but not both.

        Raises:
            MissingRequiredFileError: If both calendar.txt and calendar_dates.txt
                are absent.
        """
        if entries is None and overrides is None:
            raise MissingRequiredFileError("calendar.txt")
        if entries is None:
            logger.warning("calendar.txt not found; using calendar_dates.txt only")
            entries = CalendarEntryStore({})
        if overrides is None:
            logger.info("calendar_dates.txt not found; no service exceptions")
            overrides = CalendarOverrideStore({})
        return cls(entries, overrides)

    def is_active_on(self, service_id: str, day: date) -> bool:
        """Return True if a service runs on a date.

        The weekly pattern applies within [start_date, end_date]; an exception
        for the exact date then forces the result either way.
        """
        active = False
        entry = self.entries.get(service_id)
        if entry is not None and entry.covers(day):
            active = entry.runs_on_weekday(day.weekday())

        override = self.overrides.get(service_id, day)
        if override is not None:
            active = override.override_type == OverrideType.ADDED
        return active

    def service_ids(self) -> list[str]:
        """All service ids: calendar.txt ids first, then exception-only ids."""
        ids = list(self.entries)
        known = set(ids)
        ids.extend(sid for sid in self.overrides.service_ids() if sid not in known)
        return ids

    def active_service_ids(self, day: date) -> set[str]:
        return {sid for sid in self.service_ids() if self.is_active_on(sid, day)}
