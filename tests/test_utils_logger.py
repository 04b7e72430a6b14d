"""Tests for utils.logger module."""

import json
import logging
import sys
from collections.abc import Iterator

import pytest

from mindlog.utils.logger import (
    JSONFormatter,
    bind_log_context,
    clear_log_context,
    current_log_context,
    get_logger,
)


def _record(msg: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="mindlog.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_basic(self) -> None:
        """Test getting logger with name."""
        logger = get_logger("test.module")

        assert logger.name == "test.module"
        assert isinstance(logger, logging.Logger)

    def test_logger_uses_json_formatter(self) -> None:
        """Test that the logger writes JSON to stderr without propagating."""
        logger = get_logger("test.handlers")

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.propagate is False

    def test_logger_same_name_returns_same_instance(self) -> None:
        """Test that repeated calls do not stack handlers."""
        logger1 = get_logger("same.name")
        logger2 = get_logger("same.name")

        assert logger1 is logger2
        assert len(logger2.handlers) == 1

    def test_logger_level(self) -> None:
        """Test logger level configuration."""
        logger = get_logger("test.level", level=logging.DEBUG)

        assert logger.level == logging.DEBUG


class TestJSONFormatter:
    """Tests for JSONFormatter class."""

    def test_basic_fields(self) -> None:
        """Test the fields of a plain record."""
        data = json.loads(JSONFormatter().format(_record("Log created")))

        assert data["level"] == "WARNING"
        assert data["logger"] == "mindlog.test"
        assert data["message"] == "Log created"
        assert "timestamp" in data
        assert "context" not in data

    def test_context(self) -> None:
        """Test that structured context is included."""
        record = _record("Log updated", context={"log_id": "a1", "count": 2})

        data = json.loads(JSONFormatter().format(record))

        assert data["context"] == {"log_id": "a1", "count": 2}

    def test_unserializable_context(self) -> None:
        """Test that non-JSON values are rendered as strings."""
        record = _record("Saved", context={"path": object()})

        data = json.loads(JSONFormatter().format(record))

        assert data["context"]["path"].startswith("<object object")

    def test_exception(self) -> None:
        """Test that tracebacks are included."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record("Failed")
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: boom" in data["exception"]


class TestLogContext:
    """Tests for bound log context."""

    @pytest.fixture(autouse=True)
    def clean_context(self) -> Iterator[None]:
        """Run every test without fields left over from other tests."""
        clear_log_context()
        yield
        clear_log_context()

    def test_bound_fields_are_logged(self) -> None:
        """Test that bound fields appear in every record's context."""
        bind_log_context(uid="ana")

        data = json.loads(JSONFormatter().format(_record("Log created")))

        assert data["context"] == {"uid": "ana"}

    def test_bound_fields_merge_with_extra(self) -> None:
        """Test that per-call context is merged over bound fields."""
        bind_log_context(uid="ana", log_id="old")
        record = _record("Log updated", context={"log_id": "a1"})

        data = json.loads(JSONFormatter().format(record))

        assert data["context"] == {"uid": "ana", "log_id": "a1"}

    def test_bind_accumulates_and_clear_resets(self) -> None:
        """Test repeated binds and clearing."""
        bind_log_context(uid="ana")
        bind_log_context(request="GET /api/logs")

        assert current_log_context() == {"uid": "ana", "request": "GET /api/logs"}

        clear_log_context()

        assert current_log_context() == {}
