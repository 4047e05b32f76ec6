"""
Thread-safe storage of already downloaded song titles.

The downloaded-songs list is a plain UTF-8 text file with one title per
line and no escaping. Titles are stored exactly as registered (stripped
of surrounding whitespace); comparison by similarity happens elsewhere.

Failure Policy:
    Reads and writes never raise. I/O and decoding errors are logged and
    surface as an empty result (load) or a no-op (append/clear), so a
    broken disk can at worst cause a song to be downloaded twice.

Usage:
    store = FlatFileTitleStore(music_dir / "downloaded_songs.txt")

    titles = store.load_all_titles()
    store.append_title("Artist - Song Name")
    store.clear_all()
"""

import threading
from abc import ABC, abstractmethod
from pathlib import Path

from song_filter.core.exceptions import StorageError
from song_filter.core.logger import get_logger

logger = get_logger(__name__)


class TitleStore(ABC):
    """
    Persistence contract consumed by the dedup cache.

    Implementations must be safe to call from several threads and must
    never propagate I/O errors.
    """

    @abstractmethod
    def load_all_titles(self) -> list[str]:
        """Return every stored title, or an empty list when none exist."""

    @abstractmethod
    def append_title(self, title: str) -> None:
        """Persist one more title (best effort)."""

    @abstractmethod
    def clear_all(self) -> None:
        """Forget every stored title (best effort)."""


class FlatFileTitleStore(TitleStore):
    """
    TitleStore backed by a one-title-per-line text file.

    Uses a lock so that appends from a download worker never interleave
    with a reload triggered by another thread.

    Attributes:
        path: Location of the songs file. Parent directories are created
              on first write.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = threading.Lock()

        if path.is_dir():
            raise StorageError(
                f"Songs file path is a directory: {path}",
                details={"path": str(path)}
            )

    def load_all_titles(self) -> list[str]:
        """
        Read all titles from the songs file.

        Returns:
            Titles in file order with surrounding whitespace stripped.
            Blank lines and repeated titles are skipped. A missing or
            unreadable file yields an empty list.
        """
        with self._lock:
            if not self.path.exists():
                logger.info(f"Songs file not found, starting empty: {self.path}")
                return []

            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    lines = f.readlines()
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Failed to read songs file {self.path}: {e}")
                return []

        titles: list[str] = []
        seen: set[str] = set()
        for line in lines:
            title = line.strip()
            if title and title not in seen:
                seen.add(title)
                titles.append(title)

        logger.debug(f"Loaded {len(titles)} titles from {self.path}")
        return titles

    def append_title(self, title: str) -> None:
        """
        Append a title to the songs file.

        Blank titles are ignored. Line breaks inside the title are
        replaced by spaces so the file keeps one title per line.
        """
        if title is None:
            return

        clean = " ".join(title.splitlines()).strip()
        if not clean:
            return

        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, "a", encoding="utf-8") as f:
                    f.write(f"{clean}\n")
            except OSError as e:
                logger.error(f"Failed to save song '{clean}' to {self.path}: {e}")
                return

        logger.debug(f"Song saved: {clean}")

    def clear_all(self) -> None:
        """Truncate the songs file, creating it if needed."""
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, "w", encoding="utf-8"):
                    pass
            except OSError as e:
                logger.error(f"Failed to clear songs file {self.path}: {e}")
                return

        logger.info(f"Songs file cleared: {self.path}")
