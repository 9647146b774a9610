"""
Pydantic schemas for the command surface.

- TagRef: tag reference as the front end sends it (id only for stored tags)
- *View: display projection of stored entities

Views are built straight from the SQLAlchemy models:
    TaskView.model_validate(task).model_dump()
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .core.dates import format_for_display
from .models import Tag, TaskPriority, TaskStatus, UserStatus


class TagRef(BaseModel):
    """
    Inbound tag reference.

    Example:
    {"id": 3, "name": "Exam", "color": "#FFAA00"}
    {"name": "Reading", "color": "teal"}     # not stored yet
    """

    id: int | None = Field(None, description="Tag id, when the tag is already stored")
    name: str
    color: str

    def to_tag(self) -> Tag:
        """Validated Tag carrying this reference's id (never added to a session)."""
        tag = Tag.new(self.name, self.color)
        tag.id = self.id
        return tag


class TagView(BaseModel):
    id: int | None
    name: str
    color: str

    model_config = ConfigDict(from_attributes=True)


class TaskView(BaseModel):
    """
    Task as shown to the user.

    Example:
    {
        "id": 1,
        "user_id": 1,
        "title": "Read chapter 3",
        "description": null,
        "status": "in_progress",
        "priority": "medium",
        "created_at": "2026-01-18 12:00:00",
        "updated_at": "2026-01-18 12:05:00",
        "due_date": "2026-01-19 09:00:00",
        "tags": [{"id": 2, "name": "Exam", "color": "red"}]
    }
    """

    id: int | None
    user_id: int
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    created_at: datetime
    updated_at: datetime
    due_date: datetime
    tags: list[TagView] = []

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("status", "priority")
    def _serialize_choice(self, value: TaskStatus | TaskPriority) -> str:
        return value.value

    @field_serializer("created_at", "updated_at", "due_date")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_for_display(value)


class UserView(BaseModel):
    id: int | None
    name: str
    status: UserStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("status")
    def _serialize_status(self, value: UserStatus) -> str:
        return value.value

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return format_for_display(value)
