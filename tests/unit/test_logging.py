from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator

import pytest

from sandbox_tasks.logging import UVICORN_LOGGERS, JsonFormatter, configure_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="sandbox_tasks.tasks.store",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Task %s",
        args=("created",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
    logging.getLogger("uvicorn.access").setLevel(logging.NOTSET)


def test_lifecycle_fields_are_top_level() -> None:
    line = json.loads(JsonFormatter().format(_record(task_id="abc", delay_seconds=3.0)))

    assert line["level"] == "INFO"
    assert line["logger"] == "sandbox_tasks.tasks.store"
    assert line["msg"] == "Task created"
    assert line["task_id"] == "abc"
    assert line["delay_seconds"] == 3.0
    assert "context" not in line
    assert "exc" not in line


def test_other_extras_go_under_context() -> None:
    line = json.loads(JsonFormatter().format(_record(task_id="abc", path="/task")))

    assert line["task_id"] == "abc"
    assert line["context"] == {"path": "/task"}


def test_exception_text_is_included() -> None:
    try:
        raise KeyError("t-1")
    except KeyError:
        record = _record(task_id="t-1")
        record.exc_info = sys.exc_info()

    line = json.loads(JsonFormatter().format(record))

    assert "KeyError" in line["exc"]


def test_configure_logging_is_idempotent_and_routes_uvicorn(restore_logging: None) -> None:
    stray = logging.StreamHandler()
    logging.getLogger("uvicorn.error").addHandler(stray)

    configure_logging("debug")
    configure_logging("debug")

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)
    assert root.level == logging.DEBUG
    for name in UVICORN_LOGGERS:
        assert logging.getLogger(name).handlers == []
        assert logging.getLogger(name).propagate is True
    assert logging.getLogger("uvicorn.access").level == logging.WARNING
