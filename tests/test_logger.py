# tests/test_logger.py
"""Test logging setup and reports"""

import logging

import pytest

from song_filter.core.logger import (
    ErrorOnlyFilter,
    get_logger,
    log_skipped_duplicate,
    setup_logging,
    shutdown_logging,
)


@pytest.fixture
def logs_dir(temp_dir):
    """Run setup_logging() in a temporary directory and shut it down afterwards"""
    setup_logging(temp_dir)
    yield temp_dir / "logs"
    shutdown_logging()


class TestSetupLogging:
    """Test setup_logging() and shutdown_logging()"""

    def test_creates_log_files(self, logs_dir):
        """Test the per-run log files"""
        names = sorted(p.name.split("_2")[0] for p in logs_dir.iterdir())
        assert names == ["log_errors", "log_full", "skipped_duplicates"]

    def test_error_log_only_has_errors(self, logs_dir):
        """Test INFO goes to the full log only"""
        logger = get_logger("song_filter.tests")
        logger.info("just information")
        logger.error("something broke")
        shutdown_logging()

        full_log = next(logs_dir.glob("log_full_*.log")).read_text(encoding="utf-8")
        error_log = next(logs_dir.glob("log_errors_*.log")).read_text(encoding="utf-8")

        assert "just information" in full_log
        assert "something broke" in full_log
        assert "something broke" in error_log
        assert "just information" not in error_log

    def test_skipped_duplicates_report(self, logs_dir):
        """Test skipped titles are written to the report"""
        logger = get_logger("song_filter.tests")
        log_skipped_duplicate(logger, "Song (Lyrics)", "Song [Official Video]", 1.0)
        log_skipped_duplicate(logger, "Other Song")
        logger.info("not a skipped duplicate")
        shutdown_logging()

        report = next(logs_dir.glob("skipped_duplicates_*.log")).read_text(encoding="utf-8")

        assert report == (
            "Song (Lyrics)\n"
            "Matches: Song [Official Video] (score: 1.00)\n\n"
            "Other Song\n\n"
        )

    def test_shutdown_removes_handlers(self, logs_dir):
        """Test shutdown_logging() leaves the root logger without our handlers"""
        shutdown_logging()
        assert logging.getLogger().handlers == []


class TestErrorOnlyFilter:
    """Test ErrorOnlyFilter"""

    def test_levels(self):
        """Test only ERROR and above pass"""
        log_filter = ErrorOnlyFilter()

        def record(level):
            return logging.LogRecord("x", level, __file__, 1, "msg", None, None)

        assert not log_filter.filter(record(logging.WARNING))
        assert log_filter.filter(record(logging.ERROR))
        assert log_filter.filter(record(logging.CRITICAL))
