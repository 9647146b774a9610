"""Task model."""

import enum
from datetime import datetime

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from ..core.dates import truncate_to_minute, utc_now
from ..errors import InvalidName, InvalidPriority, InvalidStatus
from .base import Base, parse_choice
from .types import CanonicalEnum, MinuteDateTime

# Statuses written by the earlier schema revision (squashed spelling -> canonical)
LEGACY_STATUS_ALIASES = {"backlog": "paused"}


class TaskStatus(str, enum.Enum):
    """Task status enum."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    PAUSED = "paused"
    DONE = "done"
    ARCHIVED = "archived"

    @classmethod
    def parse(cls, value: "str | TaskStatus") -> "TaskStatus":
        """
        Parse "todo", "In Progress", "IN_PROGRESS", "backlog" (legacy) ...

        Raises:
            InvalidStatus: unknown status
        """
        return parse_choice(cls, value, InvalidStatus, "task", LEGACY_STATUS_ALIASES)

    def __str__(self) -> str:
        return self.value


class TaskPriority(str, enum.Enum):
    """Task priority enum."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: "str | TaskPriority") -> "TaskPriority":
        return parse_choice(cls, value, InvalidPriority, "task")

    def __str__(self) -> str:
        return self.value


def _now_minute() -> datetime:
    return truncate_to_minute(utc_now())


class Task(Base):
    """
    Task owned by a user, with minute-resolution timestamps and a tag set.

    The tag set is read-only on the model: association rows are written by
    TaskTagRepository only.
    """

    __tablename__ = "tasks"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[TaskStatus] = mapped_column(
        CanonicalEnum(TaskStatus), default=TaskStatus.TODO, nullable=False
    )
    priority: Mapped[TaskPriority] = mapped_column(
        CanonicalEnum(TaskPriority),
        default=TaskPriority.MEDIUM,
        server_default=TaskPriority.MEDIUM.value,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(MinuteDateTime, default=_now_minute, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(MinuteDateTime, default=_now_minute, nullable=False)
    due_date: Mapped[datetime] = mapped_column(MinuteDateTime, default=_now_minute, nullable=False)

    # Tags relationship (many-to-many)
    tags: Mapped[list["Tag"]] = relationship(
        "Tag", secondary="task_tags", order_by="Tag.id", viewonly=True
    )

    @validates("title")
    def _validate_title(self, key: str, value: str) -> str:
        return validate_title(value)

    @validates("status")
    def _validate_status(self, key: str, value: "str | TaskStatus") -> TaskStatus:
        return TaskStatus.parse(value)

    @validates("priority")
    def _validate_priority(self, key: str, value: "str | TaskPriority") -> TaskPriority:
        return TaskPriority.parse(value)

    @classmethod
    def new(
        cls,
        title: str,
        user_id: int,
        description: str | None = None,
        priority: "str | TaskPriority | None" = None,
        due_date: datetime | None = None,
    ) -> "Task":
        """
        Build an unsaved task.

        Args:
            title: Task title (required, trimmed)
            user_id: Owning user
            description: Optional free text
            priority: Defaults to MEDIUM
            due_date: Defaults to now; truncated to the minute

        Raises:
            InvalidName: empty title
            InvalidPriority: unknown priority string
        """
        now = _now_minute()
        return cls(
            title=title,
            user_id=user_id,
            description=normalize_description(description),
            status=TaskStatus.TODO,
            priority=TaskPriority.MEDIUM if priority is None else priority,
            created_at=now,
            updated_at=now,
            due_date=now if due_date is None else truncate_to_minute(due_date),
        )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', status={self.status.value})>"


def validate_title(value: str) -> str:
    """Trimmed task title, or InvalidName when empty."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidName("task", "Task title cannot be empty")
    return value.strip()


def normalize_description(value: str | None) -> str | None:
    """Trimmed description; blank text is stored as no description."""
    if value is None:
        return None
    return value.strip() or None
