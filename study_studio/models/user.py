"""User model."""

import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from ..errors import InvalidName, InvalidStatus
from .base import Base, parse_choice, utc_now
from .types import CanonicalEnum


class UserStatus(str, enum.Enum):
    """User status enum."""

    ACTIVE = "active"
    INACTIVE = "inactive"

    @classmethod
    def parse(cls, value: "str | UserStatus") -> "UserStatus":
        return parse_choice(cls, value, InvalidStatus, "user")

    def __str__(self) -> str:
        return self.value


class User(Base):
    """Local user owning tasks."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive')", name="ck_users_status"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[UserStatus] = mapped_column(
        CanonicalEnum(UserStatus), default=UserStatus.ACTIVE, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise InvalidName("user", "Name cannot be empty")
        return value.strip()

    @validates("status")
    def _validate_status(self, key: str, value: "str | UserStatus") -> UserStatus:
        return UserStatus.parse(value)

    @classmethod
    def new(cls, name: str) -> "User":
        """Build an unsaved, active user."""
        return cls(name=name, status=UserStatus.ACTIVE, created_at=utc_now())

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}', status={self.status.value})>"
