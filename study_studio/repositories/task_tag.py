"""Reconciliation of a task's tag set."""

from collections.abc import Iterable

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..errors import InvalidTag
from ..models import Tag, task_tags
from .base import storage_errors
from .tag import TagRepository

logger = get_logger(__name__)


class TaskTagRepository:
    """
    Makes a task's stored tag set equal to a desired set.

    Two policies:
    - reconcile_by_name: desired tags are matched by name and created when
      missing (task creation, "set tags" from the tag picker)
    - reconcile_by_id: desired tags must already be stored (partial update)

    Both write only the difference: removed ids are deleted, new ids are
    inserted, unchanged ids are left alone. They run inside the caller's
    transaction, so a failure leaves the previous set untouched.

    Example:
        # task 7 has {A, B}
        await repo.reconcile_by_id(7, [tag_b, tag_c])
        # task 7 has {B, C}: one DELETE (A), one INSERT (C)
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tag_repo = TagRepository(db)

    async def get_tag_ids(self, task_id: int) -> set[int]:
        """
        SQL equivalent:
            SELECT tag_id FROM task_tags WHERE task_id = {task_id};
        """
        with storage_errors("reading task tags"):
            result = await self.db.execute(
                select(task_tags.c.tag_id).where(task_tags.c.task_id == task_id)
            )
            return set(result.scalars().all())

    async def get_tags(self, task_id: int) -> list[Tag]:
        """
        Tags attached to a task, ordered by id.

        SQL equivalent:
            SELECT t.id, t.tag_name, t.tag_color
            FROM tags t
            JOIN task_tags tt ON t.id = tt.tag_id
            WHERE tt.task_id = {task_id};
        """
        with storage_errors("reading task tags"):
            result = await self.db.execute(
                select(Tag)
                .join(task_tags, Tag.id == task_tags.c.tag_id)
                .where(task_tags.c.task_id == task_id)
                .order_by(Tag.id)
            )
            return list(result.scalars().all())

    async def reconcile_by_name(self, task_id: int, desired_tags: Iterable[Tag]) -> list[Tag]:
        """
        Replace the task's tags, creating tags that do not exist yet.

        Args:
            task_id: Task to update
            desired_tags: Tags identified by name; ids on them are ignored

        Returns:
            Stored tags now attached to the task

        Raises:
            InvalidColor: a tag that has to be created carries a bad colour
        """
        resolved: dict[int, Tag] = {}
        seen_names: set[str] = set()

        for tag in desired_tags:
            if tag.name in seen_names:
                continue
            seen_names.add(tag.name)

            stored = await self.tag_repo.get_or_create(tag.name, tag.color)
            resolved[stored.id] = stored

        await self._apply(task_id, set(resolved))
        return [resolved[tag_id] for tag_id in sorted(resolved)]

    async def reconcile_by_id(self, task_id: int, desired_tags: Iterable[Tag]) -> list[Tag]:
        """
        Replace the task's tags with already-stored tags.

        Raises:
            InvalidTag: a tag has no id, or its id is not in the store
        """
        desired_tags = list(desired_tags)

        for tag in desired_tags:
            if tag.id is None:
                raise InvalidTag("task", f"Tag '{tag.name}' has no id")

        desired_ids = {tag.id for tag in desired_tags}
        missing = desired_ids - await self.tag_repo.get_existing_ids(desired_ids)
        if missing:
            raise InvalidTag("task", f"Unknown tag ids: {sorted(missing)}")

        await self._apply(task_id, desired_ids)
        return await self.get_tags(task_id)

    async def _apply(self, task_id: int, desired_ids: set[int]) -> None:
        current_ids = await self.get_tag_ids(task_id)
        to_remove = current_ids - desired_ids
        to_add = desired_ids - current_ids

        with storage_errors("reconciling task tags"):
            if to_remove:
                await self.db.execute(
                    delete(task_tags).where(
                        task_tags.c.task_id == task_id,
                        task_tags.c.tag_id.in_(to_remove),
                    )
                )
            if to_add:
                await self.db.execute(
                    insert(task_tags),
                    [{"task_id": task_id, "tag_id": tag_id} for tag_id in sorted(to_add)],
                )

        logger.debug(
            "Reconciled task tags",
            extra={"task_id": task_id, "added": sorted(to_add), "removed": sorted(to_remove)},
        )
