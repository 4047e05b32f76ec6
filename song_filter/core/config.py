"""
Configuration management for song-filter.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml.

The configuration file contains:
    - Duplicate detection threshold
    - Time-to-live of the downloaded-songs cache
    - Music directory where downloads (and logs) live
    - Name of the flat file listing already downloaded songs

Configuration File Location:
    config.yaml is looked up in the current working directory unless an
    explicit path is given. When the working directory has no config.yaml,
    built-in defaults are used.

Example config.yaml:
    filter:
      similarity_threshold: 0.70
      cache_ttl_seconds: 30

    output:
      directory: "~/Desktop/MUSICA"
      songs_file: "downloaded_songs.txt"
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from song_filter.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

DEFAULT_SIMILARITY_THRESHOLD = 0.70
DEFAULT_CACHE_TTL_SECONDS = 30.0
DEFAULT_MUSIC_DIRECTORY = "~/Desktop/MUSICA"
DEFAULT_SONGS_FILENAME = "downloaded_songs.txt"


@dataclass(frozen=True)
class FilterConfig:
    """
    Duplicate detection configuration.

    Attributes:
        similarity_threshold: Minimum fused similarity score (0.0 - 1.0) at
                              which two titles are treated as the same song.
                              Default: 0.70.
        cache_ttl_seconds: Seconds after which the cached list of downloaded
                           songs is considered stale and reloaded from disk.
                           Default: 30.
    """
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS


@dataclass(frozen=True)
class OutputConfig:
    """
    Output location configuration.

    Attributes:
        directory: Absolute path of the music directory.
                   Path expansion is performed (~ is expanded to home directory).
                   The directory is created on first write, not at load time.
        songs_file: Absolute path of the downloaded-songs list.
                    Relative names in config.yaml are resolved against directory.
    """
    directory: Path
    songs_file: Path


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable (frozen dataclass).

    Attributes:
        filter: Duplicate detection settings.
        output: Output location settings.

    Example:
        config = load_config()
        print(f"Threshold: {config.filter.similarity_threshold}")
        print(f"Songs list: {config.output.songs_file}")
    """
    filter: FilterConfig
    output: OutputConfig


def default_config() -> Config:
    """Build a Config from the built-in defaults."""
    return Config(
        filter=FilterConfig(),
        output=_parse_output_config({}),
    )


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory
                     and falls back to the defaults when it is not there.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is not found, the file has
                     invalid YAML syntax, or contains invalid values.

    Behavior:
        1. Locate config file (explicit path or CWD/config.yaml)
        2. Read and parse YAML content
        3. Validate structure (sections are dictionaries)
        4. Validate filter settings with defaults
        5. Validate and expand output paths
        6. Create and return frozen Config object

    Thread Safety:
        This function is NOT thread-safe. It should be called once at
        application startup, before any threads are created.
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
        if not config_path.exists():
            return default_config()

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is a valid "all defaults" configuration
    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    _validate_config(raw_config)

    return Config(
        filter=_parse_filter_config(raw_config.get("filter")),
        output=_parse_output_config(raw_config.get("output") or {}),
    )


def _validate_config(raw_config: dict[str, Any]) -> None:
    """
    Validate that every known section present is a dictionary.

    Raises:
        ConfigError: If a section has the wrong type.
    """
    for section in ("filter", "output"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )


def _is_number(value: Any) -> bool:
    # bool is an int subclass; "true" is never a valid threshold
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_filter_config(filter_section: dict[str, Any] | None) -> FilterConfig:
    """
    Parse and validate the filter configuration section.

    Args:
        filter_section: The 'filter' section from config.yaml, or None.

    Returns:
        FilterConfig: Validated settings with defaults applied.

    Raises:
        ConfigError: If the threshold is not a number in [0, 1] or the
                     TTL is not a positive number.
    """
    threshold = DEFAULT_SIMILARITY_THRESHOLD
    ttl = DEFAULT_CACHE_TTL_SECONDS

    if filter_section is not None:
        raw_threshold = filter_section.get("similarity_threshold")
        if raw_threshold is not None:
            if not _is_number(raw_threshold) or not 0.0 <= raw_threshold <= 1.0:
                raise ConfigError(
                    "'filter.similarity_threshold' must be a number between 0 and 1",
                    details={"field": "filter.similarity_threshold", "value": raw_threshold}
                )
            threshold = float(raw_threshold)

        raw_ttl = filter_section.get("cache_ttl_seconds")
        if raw_ttl is not None:
            if not _is_number(raw_ttl) or raw_ttl <= 0:
                raise ConfigError(
                    "'filter.cache_ttl_seconds' must be a positive number",
                    details={"field": "filter.cache_ttl_seconds", "value": raw_ttl}
                )
            ttl = float(raw_ttl)

    return FilterConfig(similarity_threshold=threshold, cache_ttl_seconds=ttl)


def _parse_output_config(output_section: dict[str, Any]) -> OutputConfig:
    """
    Parse and validate the output configuration section.

    Expands ~ to home directory and converts to absolute Path.
    Does NOT create the directory (that happens on first write).

    Args:
        output_section: The 'output' section from config.yaml.

    Returns:
        OutputConfig: Validated output configuration with expanded paths.

    Raises:
        ConfigError: If directory or songs_file is present but not a
                     non-empty string.
    """
    directory = output_section.get("directory", DEFAULT_MUSIC_DIRECTORY)

    if not isinstance(directory, str) or not directory.strip():
        raise ConfigError(
            "'output.directory' must be a non-empty string",
            details={"field": "output.directory"}
        )

    path = Path(directory.strip()).expanduser().resolve()

    songs_file = output_section.get("songs_file", DEFAULT_SONGS_FILENAME)
    if not isinstance(songs_file, str) or not songs_file.strip():
        raise ConfigError(
            "'output.songs_file' must be a non-empty string",
            details={"field": "output.songs_file"}
        )

    # Relative names live inside the music directory
    songs_path = Path(songs_file.strip()).expanduser()
    if not songs_path.is_absolute():
        songs_path = path / songs_path

    return OutputConfig(directory=path, songs_file=songs_path.resolve())
