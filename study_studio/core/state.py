"""Process-wide application state: the single store connection and its lock."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from ..errors import DatabaseError, LockFailed
from .config import settings, sqlite_url
from .database import build_engine, create_session_factory, init_db
from .logging import get_logger, operation_scope

logger = get_logger(__name__)


class AppState:
    """
    Owner of the shared store connection.

    Every caller goes through ``session()``, which holds an exclusive lock for
    the whole operation and wraps it in one transaction:

        state = await AppState.open("/path/to/app.db")

        async with state.session() as db:
            task_id = await TaskRepository(db).insert(task)
            await TaskTagRepository(db).reconcile_by_name(task_id, tags)
        # committed here; rolled back if anything above raised

        await state.close()
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = create_session_factory(engine)
        self._lock = asyncio.Lock()
        self._owner: asyncio.Task | None = None
        self._closed = False

    @classmethod
    async def open(cls, database_path: str | None = None) -> "AppState":
        """
        Create the database directory, connect and initialise the schema.

        Errors here are start-up failures and propagate unwrapped.
        """
        path = database_path or settings.DATABASE_PATH
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)

        engine = build_engine(sqlite_url(path))
        await init_db(engine)

        logger.info(f"{settings.APP_NAME} store ready", extra={"database": path})
        return cls(engine)

    @property
    def closed(self) -> bool:
        return self._closed

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Acquire exclusive access and yield a session inside one transaction.

        Raises:
            LockFailed: state is closed, or the calling task already holds the lock
            DatabaseError: commit or another storage step failed
        """
        if self._closed:
            raise LockFailed("Application state is closed")

        current = asyncio.current_task()
        if current is not None and self._owner is current:
            raise LockFailed("Store lock is already held by this operation")

        async with self._lock:
            # close() may have run while we were waiting
            if self._closed:
                raise LockFailed("Application state is closed")

            self._owner = current
            try:
                with operation_scope():
                    async with self._session_factory() as db:
                        async with db.begin():
                            yield db
            except SQLAlchemyError as exc:
                logger.error(f"Store transaction failed: {exc}")
                raise DatabaseError(str(exc)) from exc
            finally:
                self._owner = None

    async def close(self) -> None:
        """
        Wait for the running operation, then release the connection.

        Raises:
            LockFailed: called from inside this task's own session
        """
        current = asyncio.current_task()
        if current is not None and self._owner is current:
            raise LockFailed("Cannot close the store from inside its own session")

        async with self._lock:
            if self._closed:
                return
            self._closed = True
            await self.engine.dispose()
        logger.info(f"{settings.APP_NAME} store closed")
