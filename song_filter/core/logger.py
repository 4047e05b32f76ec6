"""
Logging configuration for song-filter.

This module sets up the logging system with multiple outputs:
    - Console: Real-time messages with tqdm-compatible formatting
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - skipped_duplicates.log: Titles skipped because a known song matched

The logging system follows the principle: everything to screen is also saved
to file, then filtered into specialized files.

Log File Locations:
    All log files are created in a 'logs' subdirectory of the music
    directory specified in config.yaml, one set per run.

Usage:
    from song_filter.core.logger import setup_logging, get_logger

    setup_logging(output_dir)  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Checking titles")
    log_skipped_duplicate(logger, "Song (Lyrics)", "Song [Official Video]", 1.0)
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


# Log file name prefixes (a run timestamp is appended)
LOG_FULL_PREFIX = "log_full"
LOG_ERRORS_PREFIX = "log_errors"
SKIPPED_DUPLICATES_PREFIX = "skipped_duplicates"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Custom formatter that adds colors to console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        return f"{colored_levelname}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to console without breaking progress bars.

    Progress bars redraw themselves in place with carriage returns; plain
    writes to stderr would corrupt them. tqdm.write() prints the message
    above any active bar instead.

    Attributes:
        stream: The output stream (defaults to sys.stderr).
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        """
        Emit a log record using tqdm.write().

        Thread Safety:
            This method is thread-safe as tqdm.write() handles synchronization.
        """
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class SkippedDuplicateHandler(logging.Handler):
    """
    Handler that collects skipped duplicate titles into a report file.

    Writes one human-readable entry per skipped title:

        Song Name (Lyrics)
        Matches: Song Name [Official Video] (score: 1.00)

    The handler looks for specific extra fields in log records:
        - 'skipped_duplicate_title': The incoming title that was skipped
        - 'skipped_duplicate_match': The known title it matched (optional)
        - 'skipped_duplicate_score': The fused similarity score (optional)

    Only records containing these fields are written to the report.

    Attributes:
        report_path: Path to the skipped_duplicates log file.
        report_file: Open file handle (set by open()).

    Usage:
        log_skipped_duplicate(logger, title, matched_title, score)
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """
        Open the report file for writing.

        Called by setup_logging() after handler is created.
        File is opened in write mode (overwrites existing content).
        """
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "skipped_duplicate_title"):
            return

        if self.report_file is None:
            return

        try:
            title = getattr(record, "skipped_duplicate_title", "")
            match = getattr(record, "skipped_duplicate_match", None)
            score = getattr(record, "skipped_duplicate_score", None)

            self.acquire()
            try:
                self.report_file.write(f"{title}\n")
                if match is not None:
                    if score is not None:
                        self.report_file.write(f"Matches: {match} (score: {score:.2f})\n\n")
                    else:
                        self.report_file.write(f"Matches: {match}\n\n")
                else:
                    self.report_file.write("\n")
                self.report_file.flush()
            finally:
                self.release()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """
        Close the report file handle.

        Called automatically when logging is shut down.
        Safe to call multiple times.
        """
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """
    Filter that only allows ERROR and CRITICAL level records.

    Used by the error log file handler to exclude DEBUG, INFO, and WARNING.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(output_dir: Path, verbose: bool = False) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any other operations.

    Args:
        output_dir: Directory where log files will be created.
                    Logs are stored in a 'logs' subdirectory.
        verbose: If True, the console also shows DEBUG messages.

    Behavior:
        1. Create output_dir/logs if it doesn't exist
        2. Generate timestamp for this run's log files
        3. Configure root logger level to DEBUG
        4. Console handler (TqdmLoggingHandler), INFO or DEBUG, compact format
        5. Full log file handler: logs/log_full_{timestamp}.log, DEBUG
        6. Error log file handler: logs/log_errors_{timestamp}.log, ERROR+
        7. Skipped duplicates report: logs/skipped_duplicates_{timestamp}.log

    Thread Safety:
        This function is NOT thread-safe. Call it once from the main
        thread before starting any worker threads.
    """
    logs_dir = output_dir / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Close handlers left over from a previous setup before dropping them
    for handler in root_logger.handlers[:]:
        handler.close()
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    full_log_path = logs_dir / f"{LOG_FULL_PREFIX}_{timestamp}.log"
    full_handler = logging.FileHandler(full_log_path, mode="w", encoding="utf-8")
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_log_path = logs_dir / f"{LOG_ERRORS_PREFIX}_{timestamp}.log"
    error_handler = logging.FileHandler(error_log_path, mode="w", encoding="utf-8")
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    skipped_path = logs_dir / f"{SKIPPED_DUPLICATES_PREFIX}_{timestamp}.log"
    skipped_handler = SkippedDuplicateHandler(skipped_path)
    skipped_handler.open()
    root_logger.addHandler(skipped_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    This is a convenience wrapper around logging.getLogger() that ensures
    consistent logger naming throughout the application.

    Args:
        name: The logger name, typically __name__ of the calling module.
              This creates a hierarchy like 'song_filter.filter.cache'.

    Returns:
        logging.Logger: A logger instance configured by setup_logging().

    Note:
        Loggers obtained before setup_logging() is called will have no
        handlers and will not produce output. Library users who never call
        setup_logging() keep full control over their own logging setup.
    """
    return logging.getLogger(name)


def log_skipped_duplicate(
    logger: logging.Logger,
    title: str,
    matched_title: str | None = None,
    score: float | None = None
) -> None:
    """
    Log a title that was skipped because it duplicates a known song.

    Attaches the extra fields SkippedDuplicateHandler uses to write the
    skipped_duplicates report.

    Args:
        logger: The logger to use for the message.
        title: The incoming title that was skipped.
        matched_title: The already known title it matched, if known.
        score: The fused similarity score of the match, if known.
    """
    if matched_title is not None:
        message = f"Skipped duplicate: '{title}' matches '{matched_title}'"
    else:
        message = f"Skipped duplicate: '{title}'"

    logger.info(
        message,
        extra={
            "skipped_duplicate_title": title,
            "skipped_duplicate_match": matched_title,
            "skipped_duplicate_score": score,
        }
    )


def shutdown_logging() -> None:
    """
    Properly shut down the logging system.

    Flushes and closes every handler on the root logger and removes them.
    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
