"""Tests for logging setup and timing helpers."""

import json
import logging

import pytest

from tree_clusters.clusters_logging import (
    LOGGER_NAME,
    JSONFormatter,
    get_logger,
    setup_logging,
)
from tree_clusters.timing import PerformanceTimer, timed


@pytest.fixture(autouse=True)
def reset_logger():
    """Restore the package logger after each test."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_handler(self):
        """Test that a console handler is installed at the requested level."""
        logger = setup_logging(level="WARNING")
        assert logger is get_logger()
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.WARNING

    def test_verbose(self):
        """Test that verbose mode logs debug output."""
        logger = setup_logging(verbose=True)
        assert logger.handlers[0].level == logging.DEBUG

    def test_quiet(self):
        """Test that quiet mode has no console handler."""
        logger = setup_logging(quiet=True)
        assert logger.handlers == []

    def test_file_handler(self, tmp_path):
        """Test that a log file receives messages."""
        log_file = tmp_path / "logs" / "clusters.log"
        logger = setup_logging(quiet=True, log_file=log_file)
        logger.info("clustered")
        for handler in logger.handlers:
            handler.flush()
        assert "clustered" in log_file.read_text()

    def test_json_file(self, tmp_path):
        """Test JSON output to a log file."""
        log_file = tmp_path / "clusters.log"
        logger = setup_logging(quiet=True, log_file=log_file, log_format="json")
        logger.info("done", extra={"num_clusters": 3})
        for handler in logger.handlers:
            handler.flush()
        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "done"
        assert entry["num_clusters"] == 3


class TestJSONFormatter:
    """Tests for the JSON formatter."""

    def test_fields(self):
        """Test the standard and extra fields."""
        record = logging.LogRecord(
            name=LOGGER_NAME,
            level=logging.DEBUG,
            pathname=__file__,
            lineno=10,
            msg="built %s",
            args=("matrix",),
            exc_info=None,
        )
        record.duration_ms = 1.5
        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "DEBUG"
        assert entry["message"] == "built matrix"
        assert entry["duration_ms"] == 1.5
        assert "num_nodes" not in entry


class TestTiming:
    """Tests for timing helpers."""

    def test_timed_returns_result(self):
        """Test that the decorator is transparent."""

        @timed("add")
        def add(a, b):
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"

    def test_timed_reraises(self):
        """Test that failures propagate."""

        @timed()
        def fail():
            raise KeyError("missing")

        with pytest.raises(KeyError):
            fail()

    def test_performance_timer(self):
        """Test that the timer records a duration."""
        with PerformanceTimer("block", auto_log=False) as timer:
            sum(range(1000))
        assert timer.duration_ms >= 0
        assert timer.end_time >= timer.start_time


class TestLogFile:
    """Tests for the rotating log file handler."""

    def test_file_records_debug_when_console_quiet(self, tmp_path):
        """Test that the file keeps DEBUG even when the console is silent."""
        log_file = tmp_path / "clusters.log"
        logger = setup_logging(level="ERROR", log_file=log_file)
        logger.debug("merged clusters")
        for handler in logger.handlers:
            handler.flush()
        assert [h.__class__.__name__ for h in logger.handlers] == [
            "StreamHandler",
            "RotatingFileHandler",
        ]
        assert "merged clusters" in log_file.read_text()
