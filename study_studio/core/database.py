"""Engine construction and schema bootstrap."""

from sqlalchemy import Connection, event, inspect, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .config import settings
from .logging import get_logger

logger = get_logger(__name__)


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """
    Create the async engine for the store.

    StaticPool keeps exactly one SQLite connection for the whole process,
    which is what AppState serialises access to.
    """
    engine = create_async_engine(
        database_url or settings.database_url,
        echo=settings.DATABASE_ECHO if echo is None else echo,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def _upgrade_legacy_schema(conn: Connection) -> None:
    """
    Bring a database written by the earlier schema revision up to date.

    Earlier revision:
    - tasks.name instead of tasks.title
    - no tasks.priority column
    - "backlog" status (now "paused")
    """
    from ..models.task import LEGACY_STATUS_ALIASES

    columns = {column["name"] for column in inspect(conn).get_columns("tasks")}

    if "title" not in columns and "name" in columns:
        conn.execute(text("ALTER TABLE tasks RENAME COLUMN name TO title"))
        logger.info("Schema upgrade: renamed tasks.name to tasks.title")

    if "priority" not in columns:
        conn.execute(text("ALTER TABLE tasks ADD COLUMN priority TEXT NOT NULL DEFAULT 'medium'"))
        logger.info("Schema upgrade: added tasks.priority")

    for legacy, canonical in LEGACY_STATUS_ALIASES.items():
        result = conn.execute(
            text("UPDATE tasks SET status = :canonical WHERE lower(status) = :legacy"),
            {"canonical": canonical, "legacy": legacy},
        )
        if result.rowcount:
            logger.info(
                "Schema upgrade: rewrote legacy task status",
                extra={"legacy": legacy, "canonical": canonical, "rows": result.rowcount},
            )


async def init_db(engine: AsyncEngine) -> None:
    """Create missing tables and upgrade a legacy schema in place."""
    from ..models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.run_sync(_upgrade_legacy_schema)


async def drop_db(engine: AsyncEngine) -> None:
    """Drop all tables (use with caution!)."""
    from ..models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
