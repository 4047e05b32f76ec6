"""
Song filter service: the entry point the rest of the application uses.

SongFilterService puts the normalizer, the similarity scorer, the
duplicate finder and the downloaded-songs cache behind one object.
Callers pass raw titles or Song objects and never deal with normalized
forms.

Usage:
    from song_filter.core import load_config
    from song_filter.filter import SongFilterService

    service = SongFilterService.from_config(load_config())

    song = Song(title="Daft Punk - One More Time (Official Video)")
    if not service.song_exists(song):
        ...  # download it
        service.register_downloaded_song(song)
"""

from abc import ABC, abstractmethod
from typing import Iterable

from song_filter.core.config import Config
from song_filter.core.logger import get_logger
from song_filter.core.storage import FlatFileTitleStore
from song_filter.filter.cache import DedupCache
from song_filter.filter.duplicate_finder import DuplicateFinder, clamp_threshold
from song_filter.filter.models import CacheStatistics, SimilarityBreakdown, Song
from song_filter.filter.normalizer import normalize
from song_filter.filter.similarity import combined_similarity, similarity_breakdown
from song_filter.utils import is_valid_url

logger = get_logger(__name__)


def _title_of(song: Song | str | None) -> str | None:
    if isinstance(song, Song):
        return song.title
    return song


class FilterService(ABC):
    """Operations the download flow needs from a song filter."""

    @abstractmethod
    def filter_duplicates(self, songs: Iterable[Song | None] | None) -> list[Song]:
        """Drop songs repeated (by normalized title) within the batch."""

    @abstractmethod
    def find_similar_songs(
        self,
        songs: list[Song] | None,
        threshold: float
    ) -> list[list[Song]]:
        """Group songs with similar titles (key-anchored, see DuplicateFinder)."""

    @abstractmethod
    def load_downloaded_songs(self) -> list[Song]:
        """Return the already downloaded songs."""

    @abstractmethod
    def save_downloaded_songs(self, songs: Iterable[Song | str] | None) -> None:
        """Replace the in-memory list of downloaded songs."""

    @abstractmethod
    def update_cache(self, songs: Iterable[Song | str] | None) -> None:
        """Replace the in-memory list of downloaded songs."""

    @abstractmethod
    def song_exists(self, song: Song | str | None) -> bool:
        """Whether a song is (similar to) an already downloaded one."""

    @abstractmethod
    def is_valid_url(self, url: str | None) -> bool:
        """Whether url is an absolute http(s) URL."""


class SongFilterService(FilterService):
    """
    FilterService backed by a DedupCache.

    Args:
        cache: Downloaded-songs cache; its finder's threshold is used for
               every duplicate decision except find_similar_songs().
    """

    def __init__(self, cache: DedupCache) -> None:
        self._cache = cache

    @classmethod
    def from_config(cls, config: Config) -> "SongFilterService":
        """
        Build a service from the application configuration.

        Raises:
            StorageError: If the songs file path is a directory.
        """
        store = FlatFileTitleStore(config.output.songs_file)
        finder = DuplicateFinder(config.filter.similarity_threshold)
        cache = DedupCache(store, finder, ttl_seconds=config.filter.cache_ttl_seconds)

        logger.debug(
            f"Song filter ready: {config.output.songs_file} "
            f"(threshold {finder.similarity_threshold:.2f})"
        )
        return cls(cache)

    @property
    def cache(self) -> DedupCache:
        return self._cache

    @property
    def similarity_threshold(self) -> float:
        return self._cache.finder.similarity_threshold

    # =========================================================================
    # DUPLICATE CHECKS
    # =========================================================================

    def is_duplicate_song(self, song: Song | str | None) -> bool:
        """Check a title (or Song) against the downloaded songs."""
        return self._cache.is_duplicate_song(_title_of(song))

    def song_exists(self, song: Song | str | None) -> bool:
        return self.is_duplicate_song(song)

    def find_match(self, song: Song | str | None) -> str | None:
        """Downloaded title most similar to the song, or None below the threshold."""
        return self._cache.find_match(_title_of(song))

    def find_match_with_score(self, song: Song | str | None) -> tuple[str | None, float]:
        return self._cache.find_match_with_score(_title_of(song))

    def register_downloaded_song(self, song: Song | str | None) -> None:
        """
        Record a song as downloaded.

        A Song passed in is also marked as downloaded.
        """
        title = _title_of(song)
        if not title or not title.strip():
            return

        self._cache.register_downloaded_song(title)
        if isinstance(song, Song):
            song.downloaded = True

    # =========================================================================
    # BATCH OPERATIONS
    # =========================================================================

    def filter_duplicates(self, songs: Iterable[Song | None] | None) -> list[Song]:
        return self._cache.filter_duplicates(songs)

    def find_similar_songs(
        self,
        songs: list[Song] | None,
        threshold: float
    ) -> list[list[Song]]:
        """
        Group songs by title similarity at the given threshold.

        Uses the same combined score and key-anchored grouping as
        DuplicateFinder.group_similar_titles(). The threshold is clamped
        to [0, 1].
        """
        finder = DuplicateFinder(clamp_threshold(threshold))
        return finder.group_similar(songs, key=lambda song: song.title)

    def group_similar_songs(self, titles: list[str] | None) -> dict[str, list[str]]:
        """Group raw titles with the configured threshold."""
        return self._cache.finder.group_similar_titles(titles)

    # =========================================================================
    # DOWNLOADED SONGS
    # =========================================================================

    def load_downloaded_songs(self) -> list[Song]:
        """
        Reload the downloaded songs from storage.

        Returns:
            One Song per known title, marked as downloaded and sorted by
            title.
        """
        self._cache.clear_cache()
        titles = self._cache.get_downloaded_songs()
        logger.info(f"Loaded {len(titles)} downloaded songs")
        return [Song(title=title, downloaded=True) for title in sorted(titles)]

    def get_downloaded_songs(self) -> set[str]:
        return self._cache.get_downloaded_songs()

    def save_downloaded_songs(self, songs: Iterable[Song | str] | None) -> None:
        self._cache.save_downloaded_songs(songs)

    def update_cache(self, songs: Iterable[Song | str] | None) -> None:
        self._cache.update_cache(songs)

    def clear_cache(self) -> None:
        self._cache.clear_cache()

    def reset(self) -> None:
        """Delete every downloaded song record."""
        self._cache.reset()

    def get_statistics(self) -> CacheStatistics:
        return self._cache.get_statistics()

    # =========================================================================
    # SIMILARITY HELPERS
    # =========================================================================

    def calculate_similarity(self, title1: str | None, title2: str | None) -> float:
        """Combined similarity of two raw titles (0.0 if either is None)."""
        if title1 is None or title2 is None:
            return 0.0
        return combined_similarity(normalize(title1), normalize(title2))

    def are_similar(self, title1: str | None, title2: str | None) -> bool:
        """Whether two raw titles reach the configured threshold."""
        return self.calculate_similarity(title1, title2) >= self.similarity_threshold

    def similarity_breakdown(
        self,
        title1: str | None,
        title2: str | None
    ) -> SimilarityBreakdown:
        """Per-metric similarity of two raw titles."""
        if title1 is None or title2 is None:
            return similarity_breakdown(None, None)
        return similarity_breakdown(normalize(title1), normalize(title2))

    def is_valid_url(self, url: str | None) -> bool:
        return is_valid_url(url)
