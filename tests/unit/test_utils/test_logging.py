"""Unit tests for sqlkit logging helpers."""

import json
import logging
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

from sqlkit.utils.logging import (
    CorrelationIDFilter,
    StructuredFormatter,
    configure_logging,
    get_correlation_id,
    get_logger,
    log_with_context,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    root = logging.getLogger("sqlkit")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate
    set_correlation_id(None)


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def _record(message: str = "hello", **attributes: object) -> logging.LogRecord:
    record = logging.LogRecord("sqlkit.test", logging.INFO, __file__, 10, message, (), None)
    for key, value in attributes.items():
        setattr(record, key, value)
    return record


def test_get_logger_namespace() -> None:
    assert get_logger().name == "sqlkit"
    assert get_logger("base").name == "sqlkit.base"
    assert get_logger("sqlkit.adapters").name == "sqlkit.adapters"


def test_get_logger_adds_single_correlation_filter() -> None:
    logger = get_logger("test_filters")
    get_logger("test_filters")

    assert sum(isinstance(f, CorrelationIDFilter) for f in logger.filters) == 1


def test_correlation_id_roundtrip() -> None:
    assert get_correlation_id() is None
    set_correlation_id("req-1")
    assert get_correlation_id() == "req-1"


def test_correlation_filter_sets_attribute() -> None:
    set_correlation_id("req-2")
    record = _record()

    assert CorrelationIDFilter().filter(record) is True
    assert record.correlation_id == "req-2"  # type: ignore[attr-defined]


def test_structured_formatter() -> None:
    set_correlation_id("req-3")
    record = _record("connected", extra_fields={"host": "db.local", "port": 3306})

    entry = json.loads(StructuredFormatter().format(record))

    assert entry["message"] == "connected"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "sqlkit.test"
    assert entry["correlation_id"] == "req-3"
    assert entry["host"] == "db.local"
    assert entry["port"] == 3306


def test_structured_formatter_exception() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("sqlkit.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    entry = json.loads(StructuredFormatter().format(record))

    assert "ValueError: boom" in entry["exception"]


def test_configure_logging_replaces_handlers() -> None:
    extra = ListHandler()
    configure_logging(level="debug", format_style="simple", extra_handlers=[extra])
    configure_logging(level="DEBUG", extra_handlers=[extra])

    root = logging.getLogger("sqlkit")
    assert root.level == logging.DEBUG
    assert root.propagate is False
    assert len(root.handlers) == 2
    assert isinstance(root.handlers[0].formatter, StructuredFormatter)


def test_configure_logging_to_file(tmp_path: Path) -> None:
    path = tmp_path / "sqlkit.log"
    configure_logging(level="INFO", log_to_file=str(path))

    get_logger("file_test").info("written")
    for handler in logging.getLogger("sqlkit").handlers:
        handler.flush()

    lines = path.read_text().splitlines()
    assert json.loads(lines[-1])["message"] == "written"


def test_log_with_context() -> None:
    handler = ListHandler()
    configure_logging(level="DEBUG", extra_handlers=[handler])

    log_with_context(get_logger("context_test"), logging.INFO, "statement sent", rows=3)

    record = handler.records[-1]
    assert record.getMessage() == "statement sent"
    assert record.extra_fields == {"rows": 3}  # type: ignore[attr-defined]


def test_log_with_context_attaches_exception_and_drops_none() -> None:
    handler = ListHandler()
    configure_logging(level="DEBUG", extra_handlers=[handler])
    error = ValueError("boom")

    log_with_context(get_logger("context_test"), logging.ERROR, "failed", exc_info=error, sql=None, database="shop")

    record = handler.records[-1]
    assert record.exc_info is not None
    assert record.exc_info[1] is error
    assert record.extra_fields == {"database": "shop"}  # type: ignore[attr-defined]
    assert json.loads(StructuredFormatter().format(record))["database"] == "shop"


def test_structured_formatter_masks_credentials() -> None:
    record = _record("connecting", extra_fields={"username": "app", "password": "hunter2"})

    entry = json.loads(StructuredFormatter().format(record))

    assert entry["username"] == "app"
    assert entry["password"] == "********"
