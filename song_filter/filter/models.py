"""
Data models for the duplicate song filter.

Design Decisions:
    - Song is mutable: registering a download flips its 'downloaded' flag
    - Song equality follows the normalized title, so "Song (Official Video)"
      and "SONG [Lyrics]" are the same Song for set/dict purposes
    - Result and statistics models are frozen dataclasses

Usage:
    from song_filter.filter.models import Song

    song = Song(title="Daft Punk - One More Time")
    song.artist       # "Daft Punk"
    song.song_name    # "One More Time"
"""

from dataclasses import dataclass, field
from datetime import datetime

from song_filter.filter.normalizer import normalize
from song_filter.utils import format_file_size

ARTIST_SEPARATOR = " - "


@dataclass(eq=False)
class Song:
    """
    A song as seen by the downloader.

    Attributes:
        title: Title as shown by the source, usually "Artist - Song Name".
               May be None for entries that could not be resolved.
        artist: Artist name. Extracted from title when not given and the
                title has the "Artist - Song Name" form.
        file_name: Name of the downloaded file, if any.
        file_path: Full path of the downloaded file, if any.
        url: Source URL the song was (or will be) downloaded from.
        file_size: Size of the downloaded file in bytes (0 if unknown).
        download_date: When the song was created/downloaded.
        downloaded: Whether the song is registered as downloaded.
    """

    title: str | None = None
    artist: str | None = None
    file_name: str | None = None
    file_path: str | None = None
    url: str | None = None
    file_size: int = 0
    download_date: datetime = field(default_factory=datetime.now)
    downloaded: bool = False

    def __post_init__(self) -> None:
        if self.artist is None and self.title and ARTIST_SEPARATOR in self.title:
            artist, _ = self.title.split(ARTIST_SEPARATOR, 1)
            self.artist = artist.strip()

    @property
    def song_name(self) -> str | None:
        """Title without the "Artist - " prefix."""
        if self.title and ARTIST_SEPARATOR in self.title:
            return self.title.split(ARTIST_SEPARATOR, 1)[1].strip()
        return self.title

    @property
    def normalized_title(self) -> str:
        return normalize(self.title)

    @property
    def formatted_file_size(self) -> str:
        return format_file_size(self.file_size)

    @property
    def display_name(self) -> str:
        """Short label for lists: "Artist - Song Name" or the bare title."""
        if self.artist:
            return f"{self.artist}{ARTIST_SEPARATOR}{self.song_name}"
        return self.title if self.title is not None else "Untitled song"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Song):
            return NotImplemented
        return self.normalized_title == other.normalized_title

    def __hash__(self) -> int:
        return hash(self.normalized_title)


@dataclass(frozen=True)
class SimilarityBreakdown:
    """
    Per-metric similarity between two normalized titles.

    Attributes:
        edit: Levenshtein similarity (0.0 - 1.0).
        jaccard: Token set Jaccard similarity (0.0 - 1.0).
        containment: Substring/token containment similarity (0.0 - 1.0).
        combined: Weighted fusion of the three, as used for decisions.
    """
    edit: float
    jaccard: float
    containment: float
    combined: float


@dataclass(frozen=True)
class DuplicateStats:
    """
    Duplicate statistics for a batch of titles.

    Attributes:
        total_titles: Number of titles examined.
        unique_titles: Titles left after removing duplicates.
        duplicate_groups: Number of similarity groups with 2+ members.
        duplicate_percentage: Share of titles that were duplicates (0 - 100).
        similarity_threshold: Threshold used for the computation.
    """
    total_titles: int
    unique_titles: int
    duplicate_groups: int
    duplicate_percentage: float
    similarity_threshold: float


@dataclass(frozen=True)
class CacheStatistics:
    """
    Snapshot of the downloaded-songs cache.

    Attributes:
        total_downloaded_songs: Titles currently held in memory.
        similarity_threshold: Threshold used for duplicate checks.
        cache_ttl_seconds: Age after which the cache reloads from disk.
        last_cache_update: Time of the last reload, None if never loaded
                           or invalidated since.
    """
    total_downloaded_songs: int
    similarity_threshold: float
    cache_ttl_seconds: float
    last_cache_update: datetime | None
