"""
Utility functions for song-filter.

This module provides small helpers used across the application:
    - URL validation for download sources
    - Directory creation
    - Deriving song titles from downloaded file names
    - Human-readable file sizes

Usage:
    from song_filter.utils import (
        is_valid_url,
        ensure_directory,
        extract_song_title,
        list_audio_files
    )
"""

import re
from pathlib import Path
from urllib.parse import urlparse

from song_filter.core.logger import get_logger

logger = get_logger(__name__)


# File extensions produced by the downloader (and common audio formats)
AUDIO_EXTENSIONS = frozenset({
    "mp3", "m4a", "opus", "webm", "flac", "wav", "ogg", "aac",
})

_SEPARATORS_RE = re.compile(r"[_\-]+")
_WHITESPACE_RE = re.compile(r"\s+")


def is_valid_url(url: str | None) -> bool:
    """
    Check that a string is an absolute http(s) URL.

    Args:
        url: Candidate download URL.

    Returns:
        True if the URL parses, uses the http or https scheme and has a
        host. False for None, blank strings and anything else.

    Examples:
        is_valid_url("https://www.youtube.com/watch?v=abc")  # True
        is_valid_url("ftp://example.com/file")               # False
        is_valid_url("youtube.com/watch?v=abc")              # False
    """
    if url is None or not url.strip():
        return False

    try:
        parsed = urlparse(url.strip())
        # Accessing port validates it (raises ValueError when out of range)
        parsed.port
    except ValueError:
        return False

    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory.

    Returns:
        The same path (for chaining).

    Raises:
        OSError: If directory cannot be created (permissions, etc.)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_file_extension(file_name: str | None) -> str:
    """
    Lowercase extension of a file name without the dot ("" if none).

    Examples:
        get_file_extension("Song.MP3")   # "mp3"
        get_file_extension(".hidden")    # ""
    """
    if not file_name:
        return ""

    suffix = Path(file_name).suffix
    return suffix[1:].lower() if suffix else ""


def extract_song_title(file_name: str | None) -> str:
    """
    Derive a song title from a downloaded file name.

    Removes the extension and turns underscores/dashes into spaces.

    Example:
        extract_song_title("Daft_Punk-One_More_Time.m4a")
        # "Daft Punk One More Time"
    """
    if not file_name:
        return ""

    title = Path(file_name).stem if get_file_extension(file_name) else file_name
    title = _SEPARATORS_RE.sub(" ", title)
    return _WHITESPACE_RE.sub(" ", title).strip()


def list_audio_files(directory: Path) -> list[Path]:
    """
    List audio files directly inside a directory, sorted by name.

    Non-audio files and subdirectories are ignored.
    """
    files = [
        entry for entry in directory.iterdir()
        if entry.is_file() and get_file_extension(entry.name) in AUDIO_EXTENSIONS
    ]
    logger.debug(f"Found {len(files)} audio files in {directory}")
    return sorted(files, key=lambda p: p.name.lower())


def format_file_size(size_bytes: int) -> str:
    """
    Format a size in bytes for display.

    Examples:
        format_file_size(512)        # "512.00 B"
        format_file_size(3670016)    # "3.50 MB"
        format_file_size(0)          # "Unknown"
    """
    if size_bytes <= 0:
        return "Unknown"

    size = float(size_bytes)
    units = ("B", "KB", "MB", "GB")
    unit_index = 0

    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1

    return f"{size:.2f} {units[unit_index]}"
