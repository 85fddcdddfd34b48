"""SQLite snapshot of a validated feed."""

import logging
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

import aiosqlite

from transit_feed.feed import Feed
from transit_feed.models.enums import OverrideType
from transit_feed.services.schedule_service import date_to_gtfs_format, format_offset

logger = logging.getLogger(__name__)

# Schema definitions
SCHEMA_SQL = """
-- agency
CREATE TABLE agency (
    agency_id TEXT PRIMARY KEY,
    agency_name TEXT NOT NULL,
    agency_url TEXT NOT NULL,
    agency_timezone TEXT NOT NULL,
    agency_lang TEXT,
    agency_phone TEXT,
    agency_fare_url TEXT,
    agency_email TEXT
);

-- stops
CREATE TABLE stops (
    stop_id TEXT PRIMARY KEY,
    stop_code TEXT,
    stop_name TEXT NOT NULL,
    stop_desc TEXT,
    stop_lat REAL NOT NULL,
    stop_lon REAL NOT NULL,
    zone_id TEXT,
    stop_url TEXT,
    location_type INTEGER NOT NULL,
    parent_station TEXT,
    stop_timezone TEXT,
    wheelchair_boarding INTEGER NOT NULL
);

-- routes
CREATE TABLE routes (
    route_id TEXT PRIMARY KEY,
    agency_id TEXT,
    route_short_name TEXT,
    route_long_name TEXT,
    route_desc TEXT,
    route_type INTEGER NOT NULL,
    route_url TEXT,
    route_color TEXT,
    route_text_color TEXT
);

-- trips
CREATE TABLE trips (
    trip_id TEXT PRIMARY KEY,
    route_id TEXT NOT NULL,
    service_id TEXT NOT NULL,
    trip_headsign TEXT,
    trip_short_name TEXT,
    direction_id INTEGER,
    block_id TEXT,
    shape_id TEXT,
    wheelchair_accessible INTEGER,
    bikes_allowed INTEGER
);

-- calendar
CREATE TABLE calendar (
    service_id TEXT PRIMARY KEY,
    monday INTEGER,
    tuesday INTEGER,
    wednesday INTEGER,
    thursday INTEGER,
    friday INTEGER,
    saturday INTEGER,
    sunday INTEGER,
    start_date TEXT,
    end_date TEXT
);

-- calendar_dates
CREATE TABLE calendar_dates (
    service_id TEXT,
    date TEXT,
    exception_type INTEGER,
    PRIMARY KEY (service_id, date)
);

-- stop_times
CREATE TABLE stop_times (
    trip_id TEXT NOT NULL,
    arrival_time TEXT,
    departure_time TEXT,
    stop_id TEXT NOT NULL,
    stop_sequence INTEGER NOT NULL,
    stop_headsign TEXT,
    pickup_type INTEGER,
    drop_off_type INTEGER,
    shape_dist_traveled REAL,
    timepoint INTEGER
);

-- shapes
CREATE TABLE shapes (
    shape_id TEXT NOT NULL,
    shape_pt_lat REAL NOT NULL,
    shape_pt_lon REAL NOT NULL,
    shape_pt_sequence INTEGER NOT NULL,
    shape_dist_traveled REAL,
    PRIMARY KEY (shape_id, shape_pt_sequence)
);

-- transfers
CREATE TABLE transfers (
    from_stop_id TEXT NOT NULL,
    to_stop_id TEXT NOT NULL,
    transfer_type INTEGER NOT NULL,
    min_transfer_time INTEGER
);
"""

INDEX_SQL = """
CREATE INDEX idx_stops_parent ON stops(parent_station);
CREATE INDEX idx_trips_route ON trips(route_id);
CREATE INDEX idx_trips_service ON trips(service_id);
CREATE INDEX idx_stop_times_trip ON stop_times(trip_id, stop_sequence);
CREATE INDEX idx_stop_times_stop ON stop_times(stop_id);
"""

# exception_type codes written to calendar_dates
EXCEPTION_TYPE_CODES = {
    OverrideType.ADDED: 1,
    OverrideType.REMOVED: 2,
}

# Chunk size for bulk inserts
CHUNK_SIZE = 10000


def enum_code(value: Enum) -> int:
    """GTFS integer code of an enum member (its declaration index)."""
    return list(type(value)).index(value)


def _flag(value: bool) -> int:
    return 1 if value else 0


def _agency_rows(feed: Feed) -> Iterable[tuple[Any, ...]]:
    for agency in feed.agencies.values():
        yield (
            agency.agency_id,
            agency.agency_name,
            agency.agency_url,
            agency.agency_timezone,
            agency.agency_lang,
            agency.agency_phone,
            agency.agency_fare_url,
            agency.agency_email,
        )


def _stop_rows(feed: Feed) -> Iterable[tuple[Any, ...]]:
    for stop in feed.stops.values():
        yield (
            stop.stop_id,
            stop.stop_code,
            stop.stop_name,
            stop.stop_desc,
            stop.stop_lat,
            stop.stop_lon,
            stop.zone_id,
            stop.stop_url,
            1 if stop.is_station else 0,
            stop.parent_station,
            stop.stop_timezone,
            enum_code(stop.wheelchair_boarding),
        )


def _route_rows(feed: Feed) -> Iterable[tuple[Any, ...]]:
    for route in feed.routes.values():
        yield (
            route.route_id,
            route.agency_id,
            route.route_short_name,
            route.route_long_name,
            route.route_desc,
            enum_code(route.route_type),
            route.route_url,
            route.route_color,
            route.route_text_color,
        )


def _trip_rows(feed: Feed) -> Iterable[tuple[Any, ...]]:
    for trip in feed.trips.values():
        yield (
            trip.trip_id,
            trip.route_id,
            trip.service_id,
            trip.trip_headsign,
            trip.trip_short_name,
            trip.direction_id,
            trip.block_id,
            trip.shape_id,
            enum_code(trip.wheelchair_accessible),
            enum_code(trip.bikes_allowed),
        )


def _calendar_rows(feed: Feed) -> Iterable[tuple[Any, ...]]:
    for entry in feed.calendar.entries.values():
        yield (
            entry.service_id,
            _flag(entry.monday),
            _flag(entry.tuesday),
            _flag(entry.wednesday),
            _flag(entry.thursday),
            _flag(entry.friday),
            _flag(entry.saturday),
            _flag(entry.sunday),
            date_to_gtfs_format(entry.start_date),
            date_to_gtfs_format(entry.end_date),
        )


def _calendar_date_rows(feed: Feed) -> Iterable[tuple[Any, ...]]:
    for override in feed.calendar.overrides:
        yield (
            override.service_id,
            date_to_gtfs_format(override.date),
            EXCEPTION_TYPE_CODES[override.override_type],
        )


def _stop_time_rows(feed: Feed) -> Iterable[tuple[Any, ...]]:
    for trip_id in feed.schedule.trip_ids():
        for stop_time in feed.schedule.trip_schedule(trip_id) or ():
            yield (
                stop_time.trip_id,
                format_offset(stop_time.arrival_offset) or None,
                format_offset(stop_time.departure_offset) or None,
                stop_time.stop_id,
                stop_time.stop_sequence,
                stop_time.stop_headsign,
                enum_code(stop_time.pickup_type),
                enum_code(stop_time.drop_off_type),
                stop_time.shape_dist_traveled,
                _flag(stop_time.timepoint),
            )


def _shape_rows(feed: Feed) -> Iterable[tuple[Any, ...]]:
    if feed.shapes is None:
        return
    for shape in feed.shapes.values():
        for point in shape.points:
            yield (
                point.shape_id,
                point.shape_pt_lat,
                point.shape_pt_lon,
                point.shape_pt_sequence,
                point.shape_dist_traveled,
            )


def _transfer_rows(feed: Feed) -> Iterable[tuple[Any, ...]]:
    for rule in feed.transfer_rules:
        yield (
            rule.from_stop_id,
            rule.to_stop_id,
            enum_code(rule.transfer_type),
            rule.min_transfer_time,
        )


TABLE_ROWS = {
    "agency": _agency_rows,
    "stops": _stop_rows,
    "routes": _route_rows,
    "trips": _trip_rows,
    "calendar": _calendar_rows,
    "calendar_dates": _calendar_date_rows,
    "stop_times": _stop_time_rows,
    "shapes": _shape_rows,
    "transfers": _transfer_rows,
}


class FeedSnapshotWriter:
    """Writes a validated feed into a SQLite database."""

    def __init__(self, db_path: Path):
        """Initialize the writer.

        Args:
            db_path: Path where the SQLite database will be created.
        """
        self.db_path = Path(db_path)

    async def write(self, feed: Feed) -> dict[str, int]:
        """Write every collection of a feed into SQLite.

        Uses atomic swap: writes into a temp DB, then replaces the target DB.

        Args:
            feed: A loaded feed.

        Returns:
            Dictionary with row counts per table.
        """
        # Ensure parent directory exists
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        temp_db = self.db_path.with_suffix(".tmp.db")

        try:
            # Remove temp db if it exists from a previous failed run
            temp_db.unlink(missing_ok=True)

            async with aiosqlite.connect(temp_db) as db:
                # Performance optimizations for bulk loading
                await db.execute("PRAGMA journal_mode=OFF")
                await db.execute("PRAGMA synchronous=OFF")

                await db.executescript(SCHEMA_SQL)
                row_counts: dict[str, int] = {}
                for table_name, rows in TABLE_ROWS.items():
                    row_counts[table_name] = await self._insert_rows(db, table_name, rows(feed))
                logger.info("Creating indexes...")
                await db.executescript(INDEX_SQL)
                await db.commit()

            # atomic swap
            temp_db.replace(self.db_path)

            logger.info(f"Feed snapshot complete: {self.db_path}")
            return row_counts

        except Exception:
            temp_db.unlink(missing_ok=True)
            raise

    async def _insert_rows(
        self,
        db: aiosqlite.Connection,
        table_name: str,
        rows: Iterable[Sequence[Any]],
    ) -> int:
        """Bulk insert rows into a table in chunks."""
        insert_sql: str | None = None
        total_rows = 0
        chunk: list[Sequence[Any]] = []

        for row in rows:
            if insert_sql is None:
                placeholders = ",".join(["?"] * len(row))
                insert_sql = f"INSERT INTO {table_name} VALUES ({placeholders})"
            chunk.append(row)
            if len(chunk) >= CHUNK_SIZE:
                await db.executemany(insert_sql, chunk)
                total_rows += len(chunk)
                chunk = []

        if chunk and insert_sql is not None:
            await db.executemany(insert_sql, chunk)
            total_rows += len(chunk)

        logger.info(f"  Wrote {total_rows:,} rows into {table_name}")
        return total_rows


async def get_table_counts(db_path: Path) -> dict[str, int]:
    """Get row counts for all tables in the database.

    Args:
        db_path: Path to the SQLite database.

    Returns:
        Dictionary mapping table names to row counts.
    """
    counts: dict[str, int] = {}
    async with aiosqlite.connect(db_path) as db:
        for table_name in TABLE_ROWS:
            async with db.execute(f"SELECT COUNT(*) FROM {table_name}") as cursor:
                row = await cursor.fetchone()
                counts[table_name] = row[0] if row else 0
    return counts
