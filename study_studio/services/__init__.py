"""Service layer: the command surface over the shared store."""

from .tag import TagService
from .task import TaskService
from .user import UserService

__all__ = [
    "TaskService",
    "TagService",
    "UserService",
]
