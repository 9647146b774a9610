"""Task service: the task commands of the desktop app."""

from collections.abc import Sequence
from datetime import date, datetime

from ..core.dates import parse_due_date
from ..core.logging import get_logger
from ..core.state import AppState
from ..errors import NotFoundError
from ..models import Tag, Task, TaskPriority, TaskStatus
from ..repositories import TaskRepository, UserRepository
from ..schemas import TagRef

logger = get_logger(__name__)


def _due_date(value: str | datetime | None) -> datetime | None:
    # Raw strings come from the front end and go through the strict parser
    if value is None or isinstance(value, datetime):
        return value
    return parse_due_date(value)


class TaskService:
    """
    Task commands.

    Input is parsed into domain types before the store lock is taken, so a
    validation error never touches storage. Each command then runs as one
    locked transaction:

        service = TaskService(state)
        task = await service.create_task(
            "Read chapter 3",
            user_id=1,
            due_date="2026-01-19T09:00:00Z",
            tags=[TagRef(name="Exam", color="red")],
        )
    """

    def __init__(self, state: AppState):
        self.state = state

    async def create_task(
        self,
        title: str,
        user_id: int,
        description: str | None = None,
        due_date: str | datetime | None = None,
        priority: TaskPriority | str | None = None,
        tags: Sequence[TagRef] | None = None,
    ) -> Task:
        """
        Create a task and attach its tags.

        Args:
            title: Task title (required)
            user_id: Owning user (must exist)
            description: Optional free text
            due_date: ISO string from the front end or a datetime; defaults to now
            priority: Defaults to medium
            tags: Tags matched by name, created when missing

        Returns:
            Stored task with its tags

        Raises:
            InvalidName / InvalidDate / InvalidPriority / InvalidColor: bad input
            NotFoundError: unknown user
        """
        task = Task.new(
            title,
            user_id,
            description=description,
            priority=priority,
            due_date=_due_date(due_date),
        )
        desired_tags = [ref.to_tag() for ref in tags or []]

        async with self.state.session() as db:
            if not await UserRepository(db).exists(user_id):
                raise NotFoundError(UserRepository.resource_name, user_id)

            task_repo = TaskRepository(db)
            task_id = await task_repo.insert(task)
            await task_repo.task_tags.reconcile_by_name(task_id, desired_tags)
            task = await task_repo.get_by_id(task_id)

        logger.info(
            "Task created",
            extra={"task_id": task.id, "user_id": user_id, "tag_count": len(task.tags)},
        )
        return task

    async def get_all_tasks(self) -> list[Task]:
        async with self.state.session() as db:
            return await TaskRepository(db).get_all()

    async def get_task(self, task_id: int) -> Task:
        """
        Raises:
            NotFoundError: no task with this id
        """
        async with self.state.session() as db:
            return await TaskRepository(db).get_by_id(task_id)

    async def get_tasks_for_today(self, today: date | None = None) -> list[Task]:
        """Tasks due today (current UTC date unless given), earliest first."""
        async with self.state.session() as db:
            return await TaskRepository(db).get_due_today(today)

    async def update_task(
        self,
        task_id: int,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus | str | None = None,
        priority: TaskPriority | str | None = None,
        due_date: str | datetime | None = None,
        tags: Sequence[TagRef] | None = None,
    ) -> Task:
        """
        Partial update. Omitted (None) fields are left unchanged.

        Tags, when given, replace the task's whole tag set and must all be
        stored tags (carry an id).

        Raises:
            EmptyUpdate: nothing to change
            InvalidName / InvalidStatus / InvalidPriority / InvalidDate / InvalidTag
            NotFoundError: no task with this id
        """
        if status is not None:
            status = TaskStatus.parse(status)
        if priority is not None:
            priority = TaskPriority.parse(priority)
        parsed_due_date = _due_date(due_date)
        desired_tags = None if tags is None else [ref.to_tag() for ref in tags]

        async with self.state.session() as db:
            task = await TaskRepository(db).update(
                task_id,
                title=title,
                description=description,
                status=status,
                priority=priority,
                due_date=parsed_due_date,
                tags=desired_tags,
            )

        logger.info("Task updated", extra={"task_id": task_id})
        return task

    async def set_task_tags(self, task_id: int, tags: Sequence[TagRef]) -> list[Tag]:
        """
        Replace a task's tags by name, creating missing tags.

        Returns:
            Tags now attached to the task, ordered by id

        Raises:
            NotFoundError: no task with this id
            InvalidName / InvalidColor: a tag to create is invalid
        """
        desired_tags = [ref.to_tag() for ref in tags]

        async with self.state.session() as db:
            task_repo = TaskRepository(db)
            if not await task_repo.exists(task_id):
                raise NotFoundError(task_repo.resource_name, task_id)
            attached = await task_repo.task_tags.reconcile_by_name(task_id, desired_tags)

        logger.info("Task tags set", extra={"task_id": task_id, "tag_count": len(attached)})
        return attached

    async def complete_task(self, task_id: int) -> Task:
        """Mark a task as done."""
        return await self.update_task(task_id, status=TaskStatus.DONE)

    async def delete_task(self, task_id: int) -> None:
        """
        Delete a task and its tag associations.

        Raises:
            NotFoundError: no task with this id
        """
        async with self.state.session() as db:
            task_repo = TaskRepository(db)
            if not await task_repo.delete(task_id):
                raise NotFoundError(task_repo.resource_name, task_id)

        logger.info("Task deleted", extra={"task_id": task_id})
