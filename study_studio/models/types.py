"""Column types that store canonical text forms."""

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from ..core.dates import format_for_storage, parse_from_storage
from ..errors import DatabaseError, EntityValidationError, InvalidDate


class MinuteDateTime(TypeDecorator):
    """
    Timestamp stored as ``YYYY-MM-DDThh:mm`` text.

    Binding truncates to the minute; reading a value in any other form is a
    storage error.
    """

    impl = String(16)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> str | None:
        if value is None:
            return None
        return format_for_storage(value)

    def process_result_value(self, value: str | None, dialect) -> datetime | None:
        if value is None:
            return None
        try:
            return parse_from_storage(value)
        except InvalidDate as exc:
            raise DatabaseError(f"Malformed stored timestamp '{value}'") from exc


class CanonicalEnum(TypeDecorator):
    """
    Str enum stored as its canonical lowercase value.

    The enum class must provide ``parse(value)``. Writes accept members or
    parseable strings; reads that cannot be parsed fail instead of coercing.
    """

    impl = String(20)
    cache_ok = True

    def __init__(self, enum_class, length: int = 20):
        super().__init__(length)
        self.enum_class = enum_class

    def process_bind_param(self, value, dialect) -> str | None:
        if value is None:
            return None
        return self.enum_class.parse(value).value

    def process_result_value(self, value: str | None, dialect):
        if value is None:
            return None
        try:
            return self.enum_class.parse(value)
        except EntityValidationError as exc:
            raise DatabaseError(
                f"Unreadable stored {self.enum_class.__name__} value '{value}'"
            ) from exc
