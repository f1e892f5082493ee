"""Logging setup for tree-clusters.

Console output goes to stderr so that command output on stdout stays
parseable. A log file, when configured, always records DEBUG and rotates.
"""

import json
import logging
import logging.config
from datetime import UTC, datetime
from pathlib import Path

LOGGER_NAME = "tree_clusters"

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

# Record attributes copied into JSON entries when a caller passes them via extra=
CONTEXT_FIELDS = ("operation", "duration_ms", "num_nodes", "num_clusters")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with clustering context fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    level: str = "INFO",
    quiet: bool = False,
    verbose: bool = False,
    log_file: str | Path | None = None,
    log_format: str = "text",
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Console level when neither quiet nor verbose is set.
        quiet: Drop the console handler entirely.
        verbose: Log DEBUG to the console.
        log_file: Optional path for a rotating DEBUG log.
        log_format: "text" or "json", applied to every handler.

    Returns:
        The configured ``tree_clusters`` logger.
    """
    json_output = log_format == "json"
    handlers: dict = {}

    if not quiet:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "json" if json_output else "console",
            "level": "DEBUG" if verbose else level.upper(),
            "stream": "ext://sys.stderr",
        }

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json" if json_output else "file",
            "level": "DEBUG",
            "filename": str(log_file),
            "maxBytes": LOG_FILE_MAX_BYTES,
            "backupCount": LOG_FILE_BACKUPS,
            "encoding": "utf-8",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {"format": "%(levelname)s | %(message)s"},
                "file": {
                    "format": "%(asctime)s %(levelname)-8s %(name)s.%(funcName)s: %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {"()": JSONFormatter},
            },
            "handlers": handlers,
            "loggers": {
                LOGGER_NAME: {
                    "handlers": list(handlers),
                    "level": "DEBUG",
                    "propagate": False,
                }
            },
        }
    )
    return logging.getLogger(LOGGER_NAME)


def get_logger() -> logging.Logger:
    """Get the package logger instance."""
    return logging.getLogger(LOGGER_NAME)
