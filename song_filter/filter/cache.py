"""
TTL cache of already downloaded songs.

DedupCache keeps the known titles of a TitleStore in memory and answers
duplicate checks against them, reloading from the store when the cached
copy gets too old.

Cache States:
    Unloaded  -> first access loads from the store (update_cache() counts as a load)
    Loaded    -> used as is while younger than the TTL
    Stale     -> next access reloads (TTL elapsed or clear_cache() called)

Consistency:
    register_downloaded_song() updates memory and appends to the store
    but does not renew the cache age, so a reload after the TTL reads the
    registered title back from the store. A check running concurrently
    with a registration may or may not see it.

Thread Safety:
    An RLock guards loading and every change to the in-memory set.
    Similarity scoring runs on a snapshot taken under the lock, so slow
    comparisons never block registrations.

Usage:
    store = FlatFileTitleStore(songs_file)
    cache = DedupCache(store, DuplicateFinder(0.70), ttl_seconds=30)

    if not cache.is_duplicate_song("Artist - Song (Official Video)"):
        download(...)
        cache.register_downloaded_song("Artist - Song (Official Video)")
"""

import threading
import time
from datetime import datetime
from typing import Callable, Iterable

from song_filter.core.config import DEFAULT_CACHE_TTL_SECONDS
from song_filter.core.logger import get_logger
from song_filter.core.storage import TitleStore
from song_filter.filter.duplicate_finder import DuplicateFinder
from song_filter.filter.models import CacheStatistics, Song
from song_filter.filter.normalizer import normalize

logger = get_logger(__name__)


class DedupCache:
    """
    Time-bounded view of the downloaded titles with duplicate queries.

    Args:
        store: Persistence collaborator holding the downloaded titles.
        finder: Duplicate index to query with. Defaults to a finder with
                the default threshold.
        ttl_seconds: Maximum age of the in-memory copy.
        clock: Returns the current time in seconds (time.time by default).
    """

    def __init__(
        self,
        store: TitleStore,
        finder: DuplicateFinder | None = None,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time
    ) -> None:
        self._store = store
        self._finder = finder if finder is not None else DuplicateFinder()
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.RLock()

        self._titles: set[str] | None = None
        # None until the first load, and again after clear_cache()
        self._last_refresh: float | None = None

    @property
    def finder(self) -> DuplicateFinder:
        return self._finder

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    # =========================================================================
    # CACHE MANAGEMENT
    # =========================================================================

    def _is_stale(self) -> bool:
        if self._titles is None or self._last_refresh is None:
            return True
        return self._clock() - self._last_refresh > self._ttl_seconds

    def _refresh_if_stale(self) -> None:
        with self._lock:
            if not self._is_stale():
                return

            titles = self._store.load_all_titles()
            self._titles = set(titles)
            self._last_refresh = self._clock()
            logger.debug(f"Downloaded songs cache reloaded: {len(self._titles)} titles")

    def _snapshot(self) -> list[str]:
        with self._lock:
            self._refresh_if_stale()
            return list(self._titles)

    def clear_cache(self) -> None:
        """Mark the cache stale so the next access reloads from the store."""
        with self._lock:
            self._last_refresh = None
        logger.debug("Downloaded songs cache cleared")

    def reset(self) -> None:
        """Forget every downloaded song, in the store and in memory."""
        with self._lock:
            self._store.clear_all()
            self._titles = set()
            self._last_refresh = None
        logger.info("Downloaded songs list reset")

    # =========================================================================
    # QUERIES
    # =========================================================================

    def is_duplicate_song(self, title: str | None) -> bool:
        """
        Check a title against the downloaded songs.

        Reloads first if the cache is stale. None/empty titles are never
        duplicates.
        """
        if not title:
            return False

        known_titles = self._snapshot()
        return self._finder.is_duplicate(title, known_titles)

    def find_match(self, title: str | None) -> str | None:
        """Return the downloaded title most similar to title, or None."""
        if not title:
            return None

        known_titles = self._snapshot()
        return self._finder.find_most_similar(title, known_titles)

    def find_match_with_score(self, title: str | None) -> tuple[str | None, float]:
        """Like find_match() but also return the combined score of the match."""
        if not title:
            return None, 0.0

        known_titles = self._snapshot()
        return self._finder.find_most_similar_with_score(title, known_titles)

    def get_downloaded_songs(self) -> set[str]:
        """Return a copy of the known titles (reloading if stale)."""
        return set(self._snapshot())

    def get_statistics(self) -> CacheStatistics:
        """Describe the cache without triggering a reload."""
        with self._lock:
            total = len(self._titles) if self._titles is not None else 0
            last_refresh = self._last_refresh

        return CacheStatistics(
            total_downloaded_songs=total,
            similarity_threshold=self._finder.similarity_threshold,
            cache_ttl_seconds=self._ttl_seconds,
            last_cache_update=(
                datetime.fromtimestamp(last_refresh) if last_refresh is not None else None
            ),
        )

    # =========================================================================
    # UPDATES
    # =========================================================================

    def register_downloaded_song(self, title: str | None) -> None:
        """
        Record a downloaded song.

        The title is stripped and line breaks become spaces, as the store
        writes it; blank titles are ignored. It is added to the in-memory
        set when that is loaded, and always appended to the store. The
        cache age is left unchanged.
        """
        if title is None:
            return

        clean = " ".join(title.splitlines()).strip()
        if not clean:
            return

        with self._lock:
            if self._titles is not None:
                self._titles.add(clean)
            self._store.append_title(clean)

        logger.info(f"Registered downloaded song: {clean}")

    def update_cache(self, songs: Iterable[Song | str] | None) -> None:
        """
        Replace the in-memory known titles with the given songs.

        Nothing is written to the store, so the next reload after the TTL
        restores the stored titles. On a cache that was never loaded (or
        was cleared) the replacement counts as a load and lasts one TTL.
        """
        titles: set[str] = set()
        for song in songs or []:
            title = song.title if isinstance(song, Song) else song
            if title and title.strip():
                titles.add(title.strip())

        with self._lock:
            self._titles = titles
            if self._last_refresh is None:
                self._last_refresh = self._clock()

        logger.debug(f"Downloaded songs cache replaced: {len(titles)} titles")

    def save_downloaded_songs(self, songs: Iterable[Song | str] | None) -> None:
        """Same as update_cache(); persisting is done by register_downloaded_song()."""
        self.update_cache(songs)

    def filter_duplicates(self, songs: Iterable[Song | None] | None) -> list[Song]:
        """
        Drop songs whose normalized title already appeared earlier in the batch.

        Only exact normalized matches count, and the downloaded songs are
        not consulted. None songs and songs without a title are dropped.
        The first occurrence of each title is kept, in input order.
        """
        seen: set[str] = set()
        unique: list[Song] = []

        for song in songs or []:
            if song is None or not song.title:
                continue

            normalized_title = normalize(song.title)
            if normalized_title in seen:
                logger.debug(f"Duplicate in batch dropped: {song.title}")
                continue

            seen.add(normalized_title)
            unique.append(song)

        return unique
