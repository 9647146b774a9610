"""Base repository with common CRUD operations."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..errors import DatabaseError, NotFoundError
from ..models.base import Base

# TypeVar for the Generic class - works with any model
ModelType = TypeVar("ModelType", bound=Base)

logger = get_logger(__name__)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """
    Wrap SQLAlchemy failures into DatabaseError.

    Usage:
        with storage_errors("inserting task"):
            await self.db.flush()
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(f"Storage failure while {action}: {exc}")
        raise DatabaseError(f"{action} failed: {exc}") from exc


class BaseRepository(Generic[ModelType]):
    """
    Base repository with CRUD operations.

    Generic[ModelType] means this class works with any model derived from Base.

    Example:
        tag_repo = BaseRepository[Tag](Tag, db_session)
        tag = await tag_repo.find_by_id(1)
    """

    resource_name = "Record"

    def __init__(self, model: type[ModelType], db: AsyncSession):
        """
        Args:
            model: SQLAlchemy model class (Task, Tag, User)
            db: Async database session
        """
        self.model = model
        self.db = db

    async def create(self, obj: ModelType) -> ModelType:
        """
        Store a new row.

        Args:
            obj: Model instance to persist

        Returns:
            The same object with its store-assigned id

        Example:
            tag = await repo.create(Tag.new("urgent", "red"))
            print(tag.id)  # 1 (assigned by the store)
        """
        with storage_errors(f"creating {self.resource_name.lower()}"):
            self.db.add(obj)
            await self.db.flush()  # flush() sends the INSERT, commit is up to the caller
            await self.db.refresh(obj)
        return obj

    async def find_by_id(self, id: int) -> ModelType | None:
        """
        Get object by id, or None.

        SQL equivalent:
            SELECT * FROM table WHERE id = {id} LIMIT 1;
        """
        with storage_errors(f"reading {self.resource_name.lower()}"):
            result = await self.db.execute(select(self.model).where(self.model.id == id))
            return result.scalar_one_or_none()

    async def get_by_id(self, id: int) -> ModelType:
        """
        Get object by id.

        Raises:
            NotFoundError: no row with this id
        """
        obj = await self.find_by_id(id)
        if obj is None:
            raise NotFoundError(self.resource_name, id)
        return obj

    async def get_all(self) -> list[ModelType]:
        """
        Get all rows ordered by id.

        SQL equivalent:
            SELECT * FROM table ORDER BY id;
        """
        with storage_errors(f"listing {self.resource_name.lower()}s"):
            result = await self.db.execute(select(self.model).order_by(self.model.id))
            return list(result.scalars().all())

    async def delete(self, id: int) -> bool:
        """
        Delete row by id.

        Returns:
            True if deleted, False if not found

        SQL equivalent:
            DELETE FROM table WHERE id={id};
        """
        with storage_errors(f"deleting {self.resource_name.lower()}"):
            result = await self.db.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0  # rowcount - number of affected rows

    async def exists(self, id: int) -> bool:
        """
        SQL equivalent:
            SELECT EXISTS(SELECT 1 FROM table WHERE id={id});
        """
        return await self.find_by_id(id) is not None

    async def count(self) -> int:
        """
        SQL equivalent:
            SELECT COUNT(*) FROM table;
        """
        with storage_errors(f"counting {self.resource_name.lower()}s"):
            result = await self.db.execute(select(func.count()).select_from(self.model))
            return result.scalar_one()
