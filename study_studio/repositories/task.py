"""Task repository with specific queries."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from sqlalchemy import Update, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.dates import day_bounds, truncate_to_minute, utc_now
from ..core.logging import get_logger
from ..errors import EmptyUpdate, InvalidTag, NotFoundError
from ..models import Tag, Task, TaskPriority, TaskStatus
from ..models.task import normalize_description, validate_title
from .base import BaseRepository, storage_errors
from .task_tag import TaskTagRepository

logger = get_logger(__name__)


@dataclass
class TaskChanges:
    """
    Ordered (column, value) pairs for a partial task update.

    Values are always sent as bound parameters:
        changes = TaskChanges().set("status", TaskStatus.DONE)
        changes.statement(7)
        # UPDATE tasks SET status=? WHERE tasks.id = ?
    """

    assignments: list[tuple[str, Any]] = field(default_factory=list)

    def set(self, column: str, value: Any) -> "TaskChanges":
        self.assignments = [(c, v) for c, v in self.assignments if c != column]
        self.assignments.append((column, value))
        return self

    @property
    def columns(self) -> list[str]:
        return [column for column, _ in self.assignments]

    def is_empty(self) -> bool:
        return not self.assignments

    def statement(self, task_id: int) -> Update:
        table = Task.__table__
        return (
            update(table)
            .where(table.c.id == task_id)
            .values({table.c[column]: value for column, value in self.assignments})
        )


class TaskRepository(BaseRepository[Task]):
    """
    Repository for tasks.

    Every read returns tasks with their tag set loaded. Timestamps are
    minute-truncated on every write path.
    """

    resource_name = "Task"

    def __init__(self, db: AsyncSession):
        super().__init__(Task, db)
        self.task_tags = TaskTagRepository(db)

    def _select(self):
        # populate_existing: association rows are written with Core statements,
        # so tasks already in the session must be reloaded
        return (
            select(Task)
            .options(selectinload(Task.tags))
            .execution_options(populate_existing=True)
        )

    async def insert(self, task: Task) -> int:
        """
        Store a new task.

        Args:
            task: Unsaved task (see Task.new)

        Returns:
            Store-assigned id (monotonic, never reused)
        """
        task.created_at = truncate_to_minute(task.created_at)
        task.updated_at = truncate_to_minute(task.updated_at)
        task.due_date = truncate_to_minute(task.due_date)

        with storage_errors("inserting task"):
            self.db.add(task)
            await self.db.flush()

        logger.debug("Inserted task", extra={"task_id": task.id})
        return task.id

    async def find_by_id(self, id: int) -> Task | None:
        with storage_errors("reading task"):
            result = await self.db.execute(self._select().where(Task.id == id))
            return result.scalar_one_or_none()

    async def get_all(self) -> list[Task]:
        """
        SQL equivalent:
            SELECT * FROM tasks ORDER BY id;
            SELECT ... FROM tags JOIN task_tags ... WHERE task_tags.task_id IN (...);
        """
        with storage_errors("listing tasks"):
            result = await self.db.execute(self._select().order_by(Task.id))
            return list(result.scalars().all())

    async def get_due_today(self, today: date | None = None) -> list[Task]:
        """
        Tasks due within the current day, bounds included.

        Args:
            today: Day to look at (defaults to the current UTC date)

        SQL equivalent:
            SELECT * FROM tasks
            WHERE due_date >= '{today}T00:00' AND due_date <= '{today}T23:59'
            ORDER BY due_date, id;
        """
        start_of_day, end_of_day = day_bounds(today or utc_now().date())

        with storage_errors("listing tasks due today"):
            result = await self.db.execute(
                self._select()
                .where(Task.due_date >= start_of_day, Task.due_date <= end_of_day)
                .order_by(Task.due_date, Task.id)
            )
            return list(result.scalars().all())

    async def update(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus | str | None = None,
        priority: TaskPriority | str | None = None,
        due_date: datetime | None = None,
        tags: Sequence[Tag] | None = None,
    ) -> Task:
        """
        Update only the supplied fields. None means "leave unchanged".

        Args:
            task_id: Task to update
            title: New title (validated like Task.new)
            description: New description; "" clears it
            status: New status (member or parseable string)
            priority: New priority (member or parseable string)
            due_date: New due date (truncated to the minute)
            tags: Full replacement tag set; every tag must already be stored

        Returns:
            Reloaded task

        Raises:
            EmptyUpdate: nothing supplied
            InvalidName / InvalidStatus / InvalidPriority / InvalidTag: bad input
            NotFoundError: no task with this id

        SQL equivalent (status only):
            UPDATE tasks SET status = ?, updated_at = ? WHERE id = ?;
        """
        changes = TaskChanges()

        if title is not None:
            changes.set("title", validate_title(title))
        if description is not None:
            changes.set("description", normalize_description(description))
        if status is not None:
            changes.set("status", TaskStatus.parse(status))
        if priority is not None:
            changes.set("priority", TaskPriority.parse(priority))
        if due_date is not None:
            changes.set("due_date", truncate_to_minute(due_date))

        if changes.is_empty() and tags is None:
            raise EmptyUpdate("task", "No fields to update")

        if tags is not None:
            tags = list(tags)
            for tag in tags:
                if tag.id is None:
                    raise InvalidTag("task", f"Tag '{tag.name}' has no id")

        changes.set("updated_at", truncate_to_minute(utc_now()))

        with storage_errors("updating task"):
            result = await self.db.execute(changes.statement(task_id))
        if result.rowcount == 0:
            raise NotFoundError(self.resource_name, task_id)

        if tags is not None:
            await self.task_tags.reconcile_by_id(task_id, tags)

        logger.debug("Updated task", extra={"task_id": task_id, "columns": changes.columns})
        return await self.get_by_id(task_id)
