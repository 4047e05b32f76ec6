"""
song-filter: Skip songs you have already downloaded.

Downloaded songs often come back under a slightly different title:
"Artist - Song (Official Video)", "ARTIST - SONG [Lyrics]" or
"Song - Artist". This package decides whether an incoming title is the
same song as one already in the downloaded-songs list, and groups
batches of titles into clusters of similar songs.

Architecture:
    Data flows one way, leaves first:

    normalizer   raw title -> canonical form (lowercase, no noise words)
    similarity   pair of canonical titles -> combined score in [0, 1]
    duplicates   title + known titles -> duplicate? / best match / groups
    cache        TTL view of the downloaded-songs file with the checks above

Modules:
    core/       - Configuration, storage, logging, exceptions, progress bars
    filter/     - Normalization, similarity, duplicate detection, cache, service
    utils/      - URL validation and file name helpers
    cli.py      - Command-line interface

Usage:
    Command Line:
        songfilter check "Artist - Song Name (Official Video)"
        songfilter register "Artist - Song Name"
        songfilter import ~/Desktop/MUSICA
        songfilter dedupe playlist.txt --groups

    Python API:
        from song_filter import load_config, setup_logging, SongFilterService

        config = load_config()
        setup_logging(config.output.directory)
        service = SongFilterService.from_config(config)

        if not service.is_duplicate_song("Artist - Song Name [Lyrics]"):
            ...  # download
            service.register_downloaded_song("Artist - Song Name [Lyrics]")

Configuration:
    Optional config.yaml in the current directory:

        filter:
          similarity_threshold: 0.70
          cache_ttl_seconds: 30

        output:
          directory: "~/Desktop/MUSICA"
          songs_file: "downloaded_songs.txt"

Dependencies:
    - rapidfuzz: Levenshtein distance
    - click / rich-click: CLI framework and colors
    - rich: Progress bars
    - tqdm: Progress-safe console logging
    - pyyaml: Configuration file parsing
"""

__version__ = "0.1.0"
__author__ = "song-filter"
__license__ = "MIT"

# Convenience imports for common usage
from song_filter.core import (
    Config,
    ConfigError,
    FlatFileTitleStore,
    SongFilterError,
    StorageError,
    get_logger,
    load_config,
    setup_logging,
)
from song_filter.filter import (
    DedupCache,
    DuplicateFinder,
    Song,
    SongFilterService,
    combined_similarity,
    normalize,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "FlatFileTitleStore",
    "setup_logging",
    "get_logger",
    # Exceptions
    "SongFilterError",
    "ConfigError",
    "StorageError",
    # Filter
    "Song",
    "normalize",
    "combined_similarity",
    "DuplicateFinder",
    "DedupCache",
    "SongFilterService",
]
