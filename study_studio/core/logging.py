"""Logging for the task store.

Every locked store session gets an operation id, and both formatters print
it, so all lines written by one command can be grouped:

    setup_logging()                      # level/format from settings
    logger = get_logger(__name__)
    logger.info("Task created", extra={"task_id": 7})
"""

import json
import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from .config import settings

# Id of the store session the current task is running in ("" outside one)
operation_id_var: ContextVar[str] = ContextVar("operation_id", default="")

# Attributes every LogRecord carries; anything else came in through `extra=`
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


def record_extra(record: logging.LogRecord) -> dict[str, Any]:
    """Fields passed through ``extra=`` on the logging call."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    Output format:
    {
        "timestamp": "2026-01-22T12:00:00.000000+00:00",
        "level": "INFO",
        "logger": "study_studio.services.task",
        "message": "Task created",
        "operation_id": "3f0c...",
        "extra": {"task_id": 7}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        operation_id = operation_id_var.get()
        if operation_id:
            log_data["operation_id"] = operation_id

        extra = record_extra(record)
        if extra:
            log_data["extra"] = extra

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class SimpleFormatter(logging.Formatter):
    """
    Human-readable lines for development:

    2026-01-22 12:00:00 | INFO     | [3f0c1a2b] study_studio.services.task: Task created
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
        operation_id = operation_id_var.get()
        prefix = f"[{operation_id[:8]}] " if operation_id else ""

        line = f"{timestamp} | {record.levelname:8} | {prefix}{record.name}: {record.getMessage()}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def setup_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Configure the root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: settings.LOG_LEVEL)
        log_format: "json" or "simple" (default: settings.LOG_FORMAT)
    """
    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)
    use_json = (log_format or settings.LOG_FORMAT).lower() == "json"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if use_json else SimpleFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Driver chatter stays out unless SQL echo was asked for
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DATABASE_ECHO else logging.WARNING
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def generate_operation_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def operation_scope(operation_id: str | None = None) -> Iterator[str]:
    """Tag every log line inside the block with one operation id."""
    token = operation_id_var.set(operation_id or generate_operation_id())
    try:
        yield operation_id_var.get()
    finally:
        operation_id_var.reset(token)
