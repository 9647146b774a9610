"""Tests for the error taxonomy."""

import pytest

from study_studio.errors import (
    DatabaseError,
    EmptyUpdate,
    EntityValidationError,
    InvalidColor,
    InvalidDate,
    InvalidName,
    InvalidPriority,
    InvalidStatus,
    InvalidTag,
    LockFailed,
    NotFoundError,
    StudioError,
)


@pytest.mark.parametrize(
    "error_class, field",
    [
        (InvalidName, "name"),
        (InvalidStatus, "status"),
        (InvalidPriority, "priority"),
        (InvalidDate, "date"),
        (InvalidColor, "color"),
        (InvalidTag, "tag"),
        (EmptyUpdate, "update"),
    ],
)
def test_validation_errors(error_class, field):
    error = error_class("task", "something is off")

    assert isinstance(error, EntityValidationError)
    assert isinstance(error, StudioError)
    assert error.code == "VALIDATION_ERROR"
    assert error.entity == "task"
    assert error.detail == "something is off"
    assert str(error) == f"Invalid task {field}: something is off"


def test_database_error_keeps_detail():
    error = DatabaseError("UNIQUE constraint failed: users.id")

    assert error.code == "DATABASE_ERROR"
    assert error.detail == "UNIQUE constraint failed: users.id"
    assert str(error) == "Database error: UNIQUE constraint failed: users.id"


def test_not_found_is_database_error():
    error = NotFoundError("Task", 42)

    assert isinstance(error, DatabaseError)
    assert error.code == "NOT_FOUND"
    assert error.resource == "Task"
    assert error.resource_id == 42
    assert str(error) == "Database error: Task with id=42 not found"


def test_lock_failed_default_message():
    error = LockFailed()

    assert error.code == "LOCK_FAILED"
    assert str(error) == "Database lock failed"
    assert not isinstance(error, DatabaseError)
