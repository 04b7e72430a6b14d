"""
Structured JSON logging for Mindlog.

Every log line is a single JSON object so that server output can be shipped
to a log collector without extra parsing rules.
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any

# Fields bound for the current request or task (e.g. the signed-in uid)
_log_context: ContextVar[dict[str, Any] | None] = ContextVar("mindlog_log_context", default=None)


def bind_log_context(**fields: Any) -> None:
    """
    Attach fields to every log line written by the current request or task.

    Context is scoped with contextvars, so concurrent requests never see
    each other's fields.

    Example:
        >>> bind_log_context(uid="u1")
        >>> logger.info("Log created", extra={"context": {"log_id": "a1"}})
        # context: {"uid": "u1", "log_id": "a1"}
    """
    _log_context.set({**(_log_context.get() or {}), **fields})


def clear_log_context() -> None:
    """Drop all fields bound with bind_log_context."""
    _log_context.set(None)


def current_log_context() -> dict[str, Any]:
    """Return a copy of the fields bound for the current request or task."""
    return dict(_log_context.get() or {})


class JSONFormatter(logging.Formatter):
    """
    Formatter that renders log records as JSON.

    Each record becomes an object with the following fields:
    - timestamp: ISO 8601 formatted timestamp
    - level: Log level name
    - logger: Logger name
    - message: Log message
    - exception: Formatted traceback (only when exc_info is set)
    - context: Fields bound with bind_log_context, merged with the
      structured context passed via ``extra={"context": {...}}``
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as JSON.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        context = {**current_log_context(), **getattr(record, "context", {})}
        if context:
            log_data["context"] = context

        return json.dumps(log_data, ensure_ascii=False, default=str)


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Get or create a structured JSON logger.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Already configured by an earlier call
    if logger.handlers:
        return logger

    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))

    logger.addHandler(handler)
    logger.propagate = False

    return logger
