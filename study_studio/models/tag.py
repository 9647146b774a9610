"""Tag model."""

import string

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, validates

from ..errors import InvalidColor, InvalidName
from .base import Base

# Basic named colours accepted in place of a hex code (case-insensitive)
NAMED_COLORS = frozenset(
    {
        "black",
        "silver",
        "gray",
        "white",
        "maroon",
        "red",
        "purple",
        "fuchsia",
        "green",
        "lime",
        "olive",
        "yellow",
        "navy",
        "blue",
        "teal",
        "aqua",
    }
)


def is_valid_color(color: str) -> bool:
    """
    Check a tag colour.

    Valid: "#F0A", "#FFAA00", "red", "Navy"
    Invalid: "#GGG", "#FFFF", "FFAA00", "notacolor"
    """
    trimmed = color.strip()

    if trimmed.startswith("#"):
        digits = trimmed[1:]
        return len(digits) in (3, 6) and all(c in string.hexdigits for c in digits)

    return trimmed.lower() in NAMED_COLORS


class Tag(Base):
    """
    Shared label attached to tasks.

    A tag gets its id when first stored; only stored tags can be attached.
    """

    __tablename__ = "tags"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column("tag_name", String(50), nullable=False)
    color: Mapped[str] = mapped_column("tag_color", String(20), nullable=False)

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise InvalidName("tag", "Tag name cannot be empty")
        return value.strip()

    @validates("color")
    def _validate_color(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise InvalidColor("tag", "Tag color cannot be empty")
        if not is_valid_color(value):
            raise InvalidColor("tag", f"Tag color '{value}' is invalid")
        return value.strip()

    @classmethod
    def new(cls, name: str, color: str) -> "Tag":
        """
        Build an unsaved tag.

        Raises:
            InvalidName: name is empty (checked before the colour)
            InvalidColor: colour is empty, malformed hex or an unknown name
        """
        return cls(name=name, color=color)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}', color='{self.color}')>"
