"""
Core module for song-filter.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - storage: Thread-safe flat-file store of downloaded titles
    - logger: Logging system with multiple outputs

Usage:
    from song_filter.core import (
        Config, load_config,
        FlatFileTitleStore,
        setup_logging, get_logger,
        SongFilterError, ConfigError, StorageError
    )
"""

from song_filter.core.config import (
    Config,
    FilterConfig,
    OutputConfig,
    default_config,
    load_config,
)
from song_filter.core.exceptions import (
    ConfigError,
    SongFilterError,
    StorageError,
)
from song_filter.core.logger import (
    get_logger,
    log_skipped_duplicate,
    setup_logging,
    shutdown_logging,
)
from song_filter.core.storage import FlatFileTitleStore, TitleStore

__all__ = [
    # Config
    "Config",
    "FilterConfig",
    "OutputConfig",
    "default_config",
    "load_config",
    # Storage
    "TitleStore",
    "FlatFileTitleStore",
    # Exceptions
    "SongFilterError",
    "ConfigError",
    "StorageError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_skipped_duplicate",
    "shutdown_logging",
]
