"""Tag service."""

from ..core.logging import get_logger
from ..core.state import AppState
from ..errors import NotFoundError
from ..models import Tag
from ..repositories import TagRepository

logger = get_logger(__name__)


class TagService:
    """
    Tags shared between tasks.

    Every method takes the store lock once and runs in one transaction.
    """

    def __init__(self, state: AppState):
        self.state = state

    async def create_tag(self, name: str, color: str) -> Tag:
        """
        Create a new tag.

        Args:
            name: Tag name (required, trimmed)
            color: "#RGB", "#RRGGBB" or a basic colour name

        Returns:
            Stored tag

        Raises:
            InvalidName: empty name
            InvalidColor: empty or unrecognised colour
        """
        tag = Tag.new(name, color)

        async with self.state.session() as db:
            tag = await TagRepository(db).create(tag)

        logger.info("Tag created", extra={"tag_id": tag.id, "tag_name": tag.name})
        return tag

    async def get_tag(self, tag_id: int) -> Tag | None:
        async with self.state.session() as db:
            return await TagRepository(db).find_by_id(tag_id)

    async def list_tags(self) -> list[Tag]:
        async with self.state.session() as db:
            return await TagRepository(db).get_all()

    async def rename_tag(self, tag_id: int, name: str) -> Tag:
        """
        Rename a tag; tasks carrying it see the new name.

        Raises:
            InvalidName: empty name
            NotFoundError: no tag with this id
        """
        async with self.state.session() as db:
            tag = await TagRepository(db).rename(tag_id, name)

        logger.info("Tag renamed", extra={"tag_id": tag_id, "tag_name": tag.name})
        return tag

    async def delete_tag(self, tag_id: int) -> None:
        """
        Delete a tag.

        Raises:
            NotFoundError: no tag with this id
            DatabaseError: the tag is still attached to a task
        """
        async with self.state.session() as db:
            deleted = await TagRepository(db).delete(tag_id)
            if not deleted:
                raise NotFoundError(TagRepository.resource_name, tag_id)

        logger.info("Tag deleted", extra={"tag_id": tag_id})
