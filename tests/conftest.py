"""
Pytest fixtures.

Provides:
- test_engine: isolated in-memory SQLite engine per test (foreign keys on)
- test_db: async session on that engine
- app_state: AppState sharing the engine (the service layer's entry point)
- user: an active user every task can belong to
"""

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from study_studio.core import AppState, build_engine, create_session_factory, drop_db, init_db
from study_studio.models import User
from study_studio.repositories import UserRepository

# Test database URL (SQLite in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """
    Async engine for the test database.

    StaticPool (set by build_engine) keeps one connection, which an in-memory
    database needs: a second connection would see an empty database.
    """
    engine = build_engine(TEST_DATABASE_URL, echo=False)
    await init_db(engine)

    yield engine

    await drop_db(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine) -> AsyncSession:
    """Session for repository tests; uncommitted changes are rolled back."""
    session_factory = create_session_factory(test_engine)

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def app_state(test_engine) -> AppState:
    return AppState(test_engine)


@pytest_asyncio.fixture
async def user(test_db) -> User:
    created = await UserRepository(test_db).create(User.new("Ada"))
    await test_db.commit()
    return created
