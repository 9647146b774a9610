"""Tag repository with specific queries."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..errors import InvalidName, NotFoundError
from ..models import Tag
from .base import BaseRepository, storage_errors

logger = get_logger(__name__)


class TagRepository(BaseRepository[Tag]):
    """
    Repository for tags.

    Tags are shared between tasks. Deleting a tag does not touch the tasks
    using it: the store refuses the delete while associations exist, so
    callers reconcile those tasks first.
    """

    resource_name = "Tag"

    def __init__(self, db: AsyncSession):
        super().__init__(Tag, db)

    async def get_by_name(self, name: str) -> Tag | None:
        """
        Get tag by exact name.

        Older databases may hold several tags with one name; the oldest wins.

        SQL equivalent:
            SELECT * FROM tags WHERE tag_name = {name} ORDER BY id LIMIT 1;
        """
        with storage_errors("looking up tag by name"):
            result = await self.db.execute(
                select(Tag).where(Tag.name == name.strip()).order_by(Tag.id).limit(1)
            )
            return result.scalar_one_or_none()

    async def get_or_create(self, name: str, color: str) -> Tag:
        """
        Get tag by name, or store a new one with the given colour.

        Example:
            # Returns the existing "urgent" tag, or creates it
            tag = await repo.get_or_create("urgent", "red")
        """
        tag = await self.get_by_name(name)

        if tag is None:
            tag = await self.create(Tag.new(name, color))
            logger.debug("Created tag", extra={"tag_id": tag.id, "tag_name": tag.name})

        return tag

    async def get_existing_ids(self, ids: set[int]) -> set[int]:
        """Subset of ``ids`` that exist in the tags table."""
        if not ids:
            return set()
        with storage_errors("checking tag ids"):
            result = await self.db.execute(select(Tag.id).where(Tag.id.in_(ids)))
            return set(result.scalars().all())

    async def rename(self, tag_id: int, new_name: str) -> Tag:
        """
        Rename a tag. Every task carrying it sees the new name.

        Raises:
            InvalidName: new name is empty
            NotFoundError: no tag with this id
        """
        if not isinstance(new_name, str) or not new_name.strip():
            raise InvalidName("tag", "Tag name cannot be empty")

        with storage_errors("renaming tag"):
            result = await self.db.execute(
                update(Tag.__table__)
                .where(Tag.__table__.c.id == tag_id)
                .values(tag_name=new_name.strip())
            )
        if result.rowcount == 0:
            raise NotFoundError(self.resource_name, tag_id)

        with storage_errors("reading tag"):
            result = await self.db.execute(
                select(Tag).where(Tag.id == tag_id).execution_options(populate_existing=True)
            )
            return result.scalar_one()
