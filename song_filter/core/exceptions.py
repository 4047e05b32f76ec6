"""
Exception classes for song-filter.

This module defines the custom exceptions used by the application.
They only cover setup-time failures: the duplicate detection engine
itself never raises for malformed input (empty titles, missing
collections) and the title store absorbs its own I/O errors.

Exception Hierarchy:
    SongFilterError (base)
        ConfigError - Configuration file issues
        StorageError - Unusable title store location
"""


class SongFilterError(Exception):
    """
    Base exception for all song-filter errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all song-filter errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., field names, paths).

    Example:
        try:
            config = load_config()
        except SongFilterError as e:
            logger.error(f"Setup failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'field': Configuration field involved in the error
                     - 'path': File system path that caused the error
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(SongFilterError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - An explicitly requested config file does not exist
        - config.yaml has invalid YAML syntax
        - A section is not a dictionary
        - Invalid field values (e.g., threshold outside [0, 1], negative TTL)

    Example:
        raise ConfigError(
            "'filter.similarity_threshold' must be a number between 0 and 1",
            details={'field': 'filter.similarity_threshold', 'value': 1.5}
        )
    """
    pass


class StorageError(SongFilterError):
    """
    Raised when the downloaded-songs store cannot be used at all.

    This is a CRITICAL error raised only while wiring the application
    together. Once a store exists, read and write failures are logged
    and absorbed by the store instead of being raised.

    Common causes:
        - The songs file path points to a directory
        - The output directory cannot be created (permissions, read-only disk)

    Example:
        raise StorageError(
            "Songs file path is a directory",
            details={'path': '/home/user/Music/downloaded_songs.txt'}
        )
    """
    pass
