"""Read-only, identifier-keyed collections of feed entities."""

from transit_feed.stores.base import EntityStore
from transit_feed.stores.calendar import CalendarEntryStore, CalendarOverrideStore
from transit_feed.stores.network import AgencyStore, RouteStore, StopStore, TripStore
from transit_feed.stores.schedule import ShapeStore, load_stop_times, load_transfer_rules

__all__ = [
    # Base
    "EntityStore",
    # Network
    "AgencyStore",
    "StopStore",
    "RouteStore",
    "TripStore",
    # Calendar
    "CalendarEntryStore",
    "CalendarOverrideStore",
    # Schedule
    "ShapeStore",
    "load_stop_times",
    "load_transfer_rules",
]
