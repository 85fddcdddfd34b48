"""Access to the files of a GTFS archive (ZIP file or directory)."""

import logging
import shutil
import tempfile
import threading
import zipfile
from collections.abc import Callable
from pathlib import Path

from transit_feed.data.csv_table import CsvTable
from transit_feed.errors import FeedArchiveError, FeedLoadCancelled

logger = logging.getLogger(__name__)

# Called after each extracted entry with (entries_done, entries_total)
ProgressCallback = Callable[[int, int], None]


class FeedArchive:
    """Files of a GTFS feed, extracted to a temporary directory when zipped.

    Use as a context manager; the temporary directory is removed on exit.
    Cancellation is honoured between entries only: once an entry has started
    extracting it is finished before the event is checked again.
    """

    def __init__(
        self,
        path: Path,
        *,
        progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
        encoding: str = "utf-8-sig",
        case_sensitive: bool = True,
    ):
        """Initialize the archive.

        Args:
            path: Path to a GTFS ZIP file or a directory of GTFS text files.
            progress: Optional callback receiving (entries_done, entries_total).
            cancel_event: Optional event; when set, extraction stops at the next
                entry boundary and FeedLoadCancelled is raised.
            encoding: Text encoding of the CSV files.
            case_sensitive: Whether column names are matched case-sensitively.
        """
        self.path = Path(path)
        self.encoding = encoding
        self.case_sensitive = case_sensitive
        self._progress = progress
        self._cancel_event = cancel_event
        self._tempdir: tempfile.TemporaryDirectory[str] | None = None
        self._entries: dict[str, Path] = {}

    def __enter__(self) -> "FeedArchive":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def open(self) -> None:
        """Enumerate the feed files, extracting them if the feed is zipped.

        Raises:
            FeedArchiveError: If the path is missing or not a readable ZIP file.
            FeedLoadCancelled: If the cancel event is set during extraction.
        """
        if not self.path.exists():
            raise FeedArchiveError(f"GTFS path not found: {self.path}")

        if self.path.is_dir():
            for file_path in sorted(self.path.iterdir()):
                if file_path.is_file():
                    self._entries[file_path.name] = file_path
            logger.info(f"Found {len(self._entries)} files in {self.path}")
            return

        try:
            self._extract_zip()
        except BaseException:
            self.close()
            raise

    def _extract_zip(self) -> None:
        self._tempdir = tempfile.TemporaryDirectory(prefix="transit_feed_")
        target_dir = Path(self._tempdir.name)

        try:
            with zipfile.ZipFile(self.path, "r") as zf:
                infos = [info for info in zf.infolist() if not info.is_dir()]
                total = len(infos)
                for count, info in enumerate(infos):
                    self._check_cancelled()
                    # Entries are stored under their index so that entry names
                    # never become filesystem paths.
                    disk_path = target_dir / str(count)
                    with zf.open(info) as src, open(disk_path, "wb") as dst:
                        shutil.copyfileobj(src, dst)
                    self._entries[info.filename] = disk_path
                    if self._progress is not None:
                        self._progress(count + 1, total)
        except (zipfile.BadZipFile, OSError) as e:
            raise FeedArchiveError(f"Cannot read GTFS archive {self.path}: {e}") from e

        self._check_cancelled()
        logger.info(f"Extracted {len(self._entries)} entries from {self.path.name}")

    def _check_cancelled(self) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            logger.info("Feed extraction cancelled")
            raise FeedLoadCancelled(f"Loading {self.path} was cancelled")

    def close(self) -> None:
        """Remove any temporary extraction directory."""
        if self._tempdir is not None:
            self._tempdir.cleanup()
            self._tempdir = None
        self._entries = {}

    @property
    def entries(self) -> list[str]:
        """Names of the entries in the archive, in archive order."""
        return list(self._entries)

    def has_entry(self, name: str) -> bool:
        return name in self._entries

    def entry_path(self, name: str) -> Path | None:
        return self._entries.get(name)

    def read_table(self, name: str) -> CsvTable | None:
        """Decode an entry as a CSV table.

        Args:
            name: Entry name, e.g. "stops.txt".

        Returns:
            The decoded table, or None if the entry is absent.

        Raises:
            FeedArchiveError: If the entry cannot be read or decoded as text.
        """
        path = self._entries.get(name)
        if path is None:
            return None
        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise FeedArchiveError(f"Cannot read {name}: {e}") from e
        return CsvTable.from_text(text, filename=name, case_sensitive=self.case_sensitive)
