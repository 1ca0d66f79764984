"""One-JSON-object-per-line logging for the service and its uvicorn server.

Task lifecycle identifiers (``task_id``, ``username``, ...) passed through
``extra=`` are lifted to the top level of the line so a task's history can be
followed with a plain ``grep``/``jq`` on its id. Anything else passed through
``extra=`` is kept under ``context``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

LIFECYCLE_FIELDS: tuple[str, ...] = (
    "task_id",
    "delay_seconds",
    "username",
    "evicted",
    "cancelled",
)

# uvicorn installs its own handlers unless told otherwise; these are routed
# through the root handler instead.
UVICORN_LOGGERS: tuple[str, ...] = ("uvicorn", "uvicorn.error", "uvicorn.access")

_STANDARD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, None, None, None).__dict__) | {
    "asctime",
    "message",
    "taskName",
}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        line: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }

        context: dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS or key.startswith("_"):
                continue
            if key in LIFECYCLE_FIELDS:
                line[key] = value
            else:
                context[key] = value
        if context:
            line["context"] = context

        if record.exc_info:
            line["exc"] = self.formatException(record.exc_info)

        return json.dumps(line, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Send all service and uvicorn logs to stdout as JSON at ``level``.

    Safe to call more than once; each call replaces the previous handler.
    """

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in UVICORN_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True

    # One line per poll of /status would drown the task events.
    logging.getLogger("uvicorn.access").setLevel(max(root.level, logging.WARNING))
