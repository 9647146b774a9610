"""SQLAlchemy models for the task store."""

from .base import Base
from .tag import NAMED_COLORS, Tag, is_valid_color
from .task import Task, TaskPriority, TaskStatus
from .task_tag import task_tags
from .user import User, UserStatus

__all__ = [
    "Base",
    "Tag",
    "NAMED_COLORS",
    "is_valid_color",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "task_tags",
    "User",
    "UserStatus",
]
