"""Base classes for SQLAlchemy models."""

import enum
import re
from collections.abc import Mapping
from typing import TypeVar

from sqlalchemy.orm import DeclarativeBase

from ..core.dates import utc_now
from ..errors import EntityValidationError

__all__ = ["Base", "parse_choice", "utc_now"]

EnumType = TypeVar("EnumType", bound=enum.Enum)

_SEPARATORS = re.compile(r"[\s_\-]+")


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


def _squash(value: str) -> str:
    # "In Progress", "in_progress", "IN-PROGRESS" -> "inprogress"
    return _SEPARATORS.sub("", value).lower()


def parse_choice(
    enum_class: type[EnumType],
    value: object,
    error: type[EntityValidationError],
    entity: str,
    aliases: Mapping[str, str] | None = None,
) -> EnumType:
    """
    Case- and separator-insensitive lookup of a str enum member.

    Args:
        enum_class: Enum with canonical lowercase values
        value: Member or raw string
        error: Error raised when nothing matches
        entity: Entity family reported in the error ("task", "user")
        aliases: Extra accepted spellings, squashed key -> canonical value

    Raises:
        error: value matches no member and no alias
    """
    if isinstance(value, enum_class):
        return value
    if not isinstance(value, str):
        raise error(entity, repr(value))

    key = _squash(value)
    for member in enum_class:
        if _squash(member.value) == key:
            return member

    if aliases and key in aliases:
        return enum_class(aliases[key])

    raise error(entity, value)
