"""Validated, queryable in-memory model of a GTFS schedule feed."""

from transit_feed.errors import (
    DatasetUniquenessError,
    FeedArchiveError,
    FeedError,
    FeedLoadCancelled,
    InvalidDataError,
    MissingRequiredFieldError,
    MissingRequiredFileError,
    ParentStationNotStationError,
    TerminalTimepointError,
)
from transit_feed.feed import Feed, load_feed

__version__ = "0.1.0"

__all__ = [
    "DatasetUniquenessError",
    "Feed",
    "FeedArchiveError",
    "FeedError",
    "FeedLoadCancelled",
    "InvalidDataError",
    "MissingRequiredFieldError",
    "MissingRequiredFileError",
    "ParentStationNotStationError",
    "TerminalTimepointError",
    "__version__",
    "load_feed",
]
