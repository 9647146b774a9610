"""Tests for settings and the log formatters."""

import json
import logging

from study_studio.core.config import Settings, sqlite_url
from study_studio.core.logging import JSONFormatter, SimpleFormatter, operation_id_var


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "study_studio.services.task", logging.INFO, __file__, 1, "Task created", None, None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "tasks.db"))
    monkeypatch.setenv("LOG_FORMAT", "simple")

    settings = Settings()

    assert settings.DATABASE_PATH == str(tmp_path / "tasks.db")
    assert settings.LOG_FORMAT == "simple"
    assert settings.database_url == f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}"


def test_sqlite_url_in_memory():
    assert sqlite_url(":memory:") == "sqlite+aiosqlite:///:memory:"


def test_json_formatter_includes_operation_id_and_extra():
    token = operation_id_var.set("op-123")
    try:
        output = json.loads(JSONFormatter().format(make_record(task_id=7)))
    finally:
        operation_id_var.reset(token)

    assert output["level"] == "INFO"
    assert output["logger"] == "study_studio.services.task"
    assert output["message"] == "Task created"
    assert output["operation_id"] == "op-123"
    assert output["extra"] == {"task_id": 7}


def test_simple_formatter():
    line = SimpleFormatter().format(make_record())

    assert "INFO" in line
    assert line.endswith("study_studio.services.task: Task created")
