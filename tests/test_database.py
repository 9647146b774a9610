"""
Tests for engine setup and schema bootstrap.
"""

import pytest
from sqlalchemy import text

from study_studio.core import build_engine, create_session_factory, init_db
from study_studio.models import TaskPriority, TaskStatus
from study_studio.repositories import TaskRepository

LEGACY_SCHEMA = [
    """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name VARCHAR(200) NOT NULL,
        status VARCHAR(20) NOT NULL,
        created_at DATETIME NOT NULL
    )
    """,
    """
    CREATE TABLE tasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL REFERENCES users(id),
        name TEXT NOT NULL,
        description TEXT,
        status TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        due_date TEXT NOT NULL
    )
    """,
    "INSERT INTO users (name, status, created_at) VALUES ('Ada', 'active', '2024-01-01 10:00:00')",
    """
    INSERT INTO tasks (user_id, name, description, status, created_at, updated_at, due_date)
    VALUES (1, 'Old task', NULL, 'Backlog', '2024-01-01T10:00', '2024-01-01T10:00', '2024-01-02T09:00')
    """,
]


@pytest.mark.asyncio
async def test_foreign_keys_enabled(test_engine):
    async with test_engine.connect() as conn:
        result = await conn.execute(text("PRAGMA foreign_keys"))

        assert result.scalar_one() == 1


@pytest.mark.asyncio
async def test_legacy_schema_is_upgraded():
    """Test: name -> title, priority added, backlog -> paused."""
    engine = build_engine("sqlite+aiosqlite:///:memory:", echo=False)
    try:
        async with engine.begin() as conn:
            for statement in LEGACY_SCHEMA:
                await conn.execute(text(statement))

        await init_db(engine)
        # second run finds nothing to do
        await init_db(engine)

        async with create_session_factory(engine)() as db:
            task = await TaskRepository(db).get_by_id(1)

        assert task.title == "Old task"
        assert task.priority is TaskPriority.MEDIUM
        assert task.status is TaskStatus.PAUSED
        assert task.tags == []
    finally:
        await engine.dispose()
