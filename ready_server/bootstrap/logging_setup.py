"""Logging configuration utilities for the readiness server."""

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from ready_server.bootstrap.config import DEFAULT_LOG_DESTINATION, DEFAULT_LOG_LEVEL
from ready_server.domain.probe_logger import NO_CLIENT, ProbeLoggerAdapter

LOGGER_NAME = "ready_server"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(client)s] %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

EXTRA_KEYS = (
    "host",
    "port",
    "route",
    "status_code",
    "bytes_in",
    "bytes_out",
    "error_type",
    "errno",
    "destination",
    "use_json",
)


class ClientFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Ensure the client field exists on records logged outside the adapter."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "client"):
            record.client = NO_CLIENT
        return True


class JsonFormatter(logging.Formatter):
    """JSON formatter with stable key ordering for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with stable key ordering."""
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "client": getattr(record, "client", NO_CLIENT),
            "component": getattr(record, "component", "unknown"),
            "message": record.getMessage(),
        }

        if hasattr(record, "event"):
            log_data["event"] = record.event

        for key in EXTRA_KEYS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, sort_keys=True)


def _resolve_level(level_name: str) -> int:
    """Translate text level names into logging module numeric levels."""
    level = getattr(logging, level_name.upper(), None)
    if isinstance(level, int):
        return level
    return logging.INFO


def _build_handler(
    destination: Optional[str], level: int, use_json: bool = True
) -> logging.Handler:
    """Create a stdout or rotating file handler for the configured logger."""
    if destination and destination.lower() != "stdout":
        target_path = Path(destination)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            target_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT
        )
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if use_json:
        handler.setFormatter(JsonFormatter(datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    handler.addFilter(ClientFilter())
    return handler


def configure_logging(
    level: str = DEFAULT_LOG_LEVEL,
    destination: Optional[str] = DEFAULT_LOG_DESTINATION,
    use_json: bool = True,
) -> ProbeLoggerAdapter:
    """Configure and return the package logger with the requested handler.

    Embedding processes that already own their logging setup can skip this
    and attach handlers to the ``ready_server`` logger themselves.
    """
    logger = logging.getLogger(LOGGER_NAME)
    numeric_level = _resolve_level(level)
    logger.setLevel(numeric_level)
    logger.propagate = False

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    handler = _build_handler(destination, numeric_level, use_json)
    logger.addHandler(handler)

    adapter = ProbeLoggerAdapter(logger, {})
    adapter.info(
        "Logging configured",
        extra={
            "event": "logging_configured",
            "destination": destination or "stdout",
            "use_json": use_json,
        },
    )
    return adapter
