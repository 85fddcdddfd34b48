from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedConfig(BaseSettings):
    """Configuration for reading GTFS feeds.

    Automatically loads from environment variables and .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    case_sensitive_headers: bool = Field(default=True, alias="TRANSIT_FEED_CASE_SENSITIVE_HEADERS")
    encoding: str = Field(default="utf-8-sig", alias="TRANSIT_FEED_ENCODING")

    # SQLite snapshot written by `transit-feed ingest`
    db_path: Path = Field(default=Path("data/transit_feed.db"), alias="TRANSIT_FEED_DB_PATH")


@lru_cache
def get_feed_config() -> FeedConfig:
    """Get feed configuration (cached singleton).

    Returns:
        FeedConfig with values from .env file or environment variables.
    """
    return FeedConfig()
