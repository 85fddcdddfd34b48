"""Tests for feed configuration."""

from pathlib import Path

import pytest

from transit_feed.data.config import FeedConfig, get_feed_config


class TestFeedConfig:
    """Tests for FeedConfig."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test default settings."""
        monkeypatch.chdir(tmp_path)
        for name in (
            "TRANSIT_FEED_CASE_SENSITIVE_HEADERS",
            "TRANSIT_FEED_ENCODING",
            "TRANSIT_FEED_DB_PATH",
        ):
            monkeypatch.delenv(name, raising=False)

        config = FeedConfig()

        assert config.case_sensitive_headers is True
        assert config.encoding == "utf-8-sig"
        assert config.db_path == Path("data/transit_feed.db")

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test settings read from environment variables."""
        monkeypatch.setenv("TRANSIT_FEED_CASE_SENSITIVE_HEADERS", "false")
        monkeypatch.setenv("TRANSIT_FEED_ENCODING", "latin-1")
        monkeypatch.setenv("TRANSIT_FEED_DB_PATH", "/tmp/feed.db")

        config = FeedConfig()

        assert config.case_sensitive_headers is False
        assert config.encoding == "latin-1"
        assert config.db_path == Path("/tmp/feed.db")

    def test_dotenv_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test settings read from a .env file."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("TRANSIT_FEED_ENCODING", raising=False)
        (tmp_path / ".env").write_text("TRANSIT_FEED_ENCODING=cp1252\n")

        assert FeedConfig().encoding == "cp1252"

    def test_cached_accessor(self) -> None:
        """Test that get_feed_config returns one shared instance."""
        get_feed_config.cache_clear()
        try:
            assert get_feed_config() is get_feed_config()
        finally:
            get_feed_config.cache_clear()
