"""Database connection helper for feed snapshots."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from transit_feed.data.config import get_feed_config


def get_db_path() -> Path:
    """Get the snapshot database path from configuration."""
    return get_feed_config().db_path


@asynccontextmanager
async def get_db(db_path: Path | None = None) -> AsyncIterator[aiosqlite.Connection]:
    """Async context manager for DB connections with Row factory.

    Args:
        db_path: Optional path to the database. If not provided, uses
                 TRANSIT_FEED_DB_PATH or defaults to 'data/transit_feed.db'.

    Yields:
        aiosqlite.Connection configured with Row factory for dict-like access.

    Raises:
        FileNotFoundError: If the database file doesn't exist.
    """
    if db_path is None:
        db_path = get_db_path()

    if not db_path.exists():
        raise FileNotFoundError(
            f"Database not found at {db_path}. Run 'transit-feed ingest <gtfs_path>' to create it."
        )

    async with aiosqlite.connect(db_path) as db:
        db.row_factory = aiosqlite.Row
        yield db
