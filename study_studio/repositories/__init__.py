"""Repository layer for data access."""

from .base import BaseRepository, storage_errors
from .tag import TagRepository
from .task import TaskChanges, TaskRepository
from .task_tag import TaskTagRepository
from .user import UserRepository

__all__ = [
    "BaseRepository",
    "storage_errors",
    "TaskRepository",
    "TaskChanges",
    "TagRepository",
    "TaskTagRepository",
    "UserRepository",
]
