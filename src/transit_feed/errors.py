"""Errors raised while building a feed model."""


class FeedError(Exception):
    """Base class for every error that aborts (or downgrades) feed construction."""


class MissingRequiredFieldError(FeedError):
    """A required column is absent from a feed file."""

    def __init__(self, filename: str, field_name: str):
        self.filename = filename
        self.field_name = field_name
        super().__init__(f"{filename} is missing required field '{field_name}'")


class InvalidDataError(FeedError):
    """A cell holds a value that cannot be interpreted for its field."""

    def __init__(self, filename: str, field_name: str, record: int, raw_value: str | None):
        self.filename = filename
        self.field_name = field_name
        self.record = record
        self.raw_value = raw_value
        super().__init__(
            f"{filename} record {record}: invalid value {raw_value!r} for field '{field_name}'"
        )


class DatasetUniquenessError(FeedError):
    """Two records share a value that must be unique across the dataset.

    For composite keys, ``field_name`` and ``duplicated_value`` join their parts
    with ``+`` (e.g. ``service_id+date`` / ``WEEKDAY+20240101``).
    """

    def __init__(self, filename: str, field_name: str, duplicated_value: str):
        self.filename = filename
        self.field_name = field_name
        self.duplicated_value = duplicated_value
        super().__init__(
            f"{filename}: duplicate value {duplicated_value!r} for unique field '{field_name}'"
        )


class ParentStationNotStationError(FeedError):
    """A stop names a parent station that exists but is not a station."""

    def __init__(self, stop_id: str, alleged_parent_id: str):
        self.stop_id = stop_id
        self.alleged_parent_id = alleged_parent_id
        super().__init__(
            f"Stop {stop_id!r} lists parent station {alleged_parent_id!r}, which is not a station"
        )


class TerminalTimepointError(FeedError):
    """The first or last stop time of a trip is not a timing point."""

    def __init__(self, trip_id: str):
        self.trip_id = trip_id
        super().__init__(f"Trip {trip_id!r} must begin and end with a timing point")


class MissingRequiredFileError(FeedError):
    """A file the feed cannot be built without is absent from the archive."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Required file {filename} not found in feed")


class FeedArchiveError(FeedError):
    """The archive could not be opened or extracted."""


class FeedLoadCancelled(FeedError):
    """Construction was aborted by an external cancellation request."""
