"""Logging configuration with JSON formatting."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from src.config import settings

# httpx logs every request at INFO; the REST clients log calls themselves
_QUIET_LOGGERS = ("httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    """
    Formatter that renders each record as a single JSON object.

    Fields: timestamp (UTC, ISO 8601), level, logger, message, plus
    correlation_id and any ``context`` dict passed through ``extra``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            log_data["correlation_id"] = correlation_id

        if hasattr(record, "context"):
            log_data.update(record.context)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.levelno == logging.DEBUG:
            log_data["file"] = record.pathname
            log_data["line"] = record.lineno
            log_data["function"] = record.funcName

        return json.dumps(log_data, default=str)


def configure_logging() -> None:
    """
    Configure the root logger to write JSON lines to stdout.

    The level comes from LOG_LEVEL; LOG_DEBUG forces DEBUG.
    """
    level_name = "DEBUG" if settings.log_debug else settings.log_level.upper()
    log_level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(console_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(
        "Logging configured",
        extra={"context": {"log_level": level_name}},
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: The name of the logger (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
