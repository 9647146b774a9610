"""Minute-resolution timestamp handling.

All task timestamps are stored as text in one canonical form,
``YYYY-MM-DDThh:mm``. Anything finer than a minute is dropped on the way in.
"""

import re
from datetime import UTC, date, datetime, time

from ..errors import InvalidDate

STORAGE_FORMAT = "%Y-%m-%dT%H:%M"

# YYYY-MM-DDThh:mm[:ss[.fraction]][Z]
_DUE_DATE_PATTERN = re.compile(
    r"(?P<minute>\d{4}-\d{2}-\d{2}T\d{2}:\d{2})"
    r"(?::(?P<second>\d{2})(?:\.\d{1,9})?)?"
    r"Z?"
)


def utc_now() -> datetime:
    """Return current UTC datetime (naive, for SQLite compatibility)."""
    return datetime.now(UTC).replace(tzinfo=None)


def format_for_storage(value: datetime) -> str:
    """Render a timestamp in the canonical stored form (year always four digits)."""
    return f"{value.year:04d}-{value:%m-%dT%H:%M}"


def parse_from_storage(text: str) -> datetime:
    """
    Parse the canonical stored form back into a naive datetime.

    Raises:
        InvalidDate: text is not exactly ``YYYY-MM-DDThh:mm``
    """
    try:
        return datetime.strptime(text, STORAGE_FORMAT)
    except (TypeError, ValueError) as exc:
        raise InvalidDate("task", f"'{text}' is not in {STORAGE_FORMAT} form") from exc


def truncate_to_minute(value: datetime) -> datetime:
    """
    Drop seconds and microseconds by round-tripping through the stored form.

    Idempotent: truncate_to_minute(truncate_to_minute(x)) == truncate_to_minute(x).
    Zone information on aware inputs is discarded (treated as already-local).

    Example:
        truncate_to_minute(datetime(2023, 10, 15, 14, 30, 45))
        # datetime(2023, 10, 15, 14, 30)
    """
    return parse_from_storage(format_for_storage(value))


def parse_due_date(raw: str) -> datetime:
    """
    Parse a due date sent by the caller.

    Accepted forms (anything else is rejected):
        2024-03-01T09:15
        2024-03-01T09:15:42
        2024-03-01T09:15:42.123
        any of the above followed by "Z"

    The "Z" marker is treated as already-local. Seconds are range-checked and
    then dropped together with the fraction.

    Raises:
        InvalidDate: unsupported format or out-of-range field
    """
    if not isinstance(raw, str):
        raise InvalidDate("task", f"Expected a date string, got {raw!r}")

    match = _DUE_DATE_PATTERN.fullmatch(raw.strip())
    if match is None:
        raise InvalidDate("task", f"Unsupported date format: '{raw}'")

    second = match.group("second")
    if second is not None and int(second) > 59:
        raise InvalidDate("task", f"Seconds out of range in '{raw}'")

    try:
        return datetime.strptime(match.group("minute"), STORAGE_FORMAT)
    except ValueError as exc:
        raise InvalidDate("task", f"Out-of-range date '{raw}'") from exc


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Inclusive [00:00:00, 23:59:59] window of a calendar day."""
    start = datetime.combine(day, time(0, 0, 0))
    end = datetime.combine(day, time(23, 59, 59))
    return start, end


def format_for_display(value: datetime) -> str:
    return f"{value.year:04d}-{value:%m-%d %H:%M:%S}"
