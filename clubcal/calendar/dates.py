"""
Date-only helpers for calendar comparisons.

Events are compared by calendar day only. Stored values may be dates,
datetimes or the string forms the event forms produce:

    "2024-10-18"                 all-day event
    "2024-10-18 14:12:00"        local date and time
    "2024-10-18T14:12:00.000Z"   ISO 8601
"""

import calendar
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def date_only(value: DateLike) -> date:
    """
    Reduce a date-like value to its calendar day.

    Aware datetimes are read in the local calendar day; naive ones are
    taken as-is.

    Raises:
        ValueError: if the value is missing or cannot be parsed
    """
    if value is None:
        raise ValueError("Missing date")

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty date string")

        # Local datetime format: keep the date part as written
        if ' ' in text:
            return date.fromisoformat(text.split(' ')[0])

        if 'T' not in text:
            return date.fromisoformat(text)

        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        return date_only(datetime.fromisoformat(text))

    raise ValueError(f"Unsupported date value: {value!r}")


def try_date_only(value: DateLike) -> Optional[date]:
    """Like date_only() but returns None for missing or unparseable values."""
    try:
        return date_only(value)
    except (ValueError, TypeError):
        return None


def is_same_date(first: DateLike, second: DateLike) -> bool:
    return date_only(first) == date_only(second)


def is_date_in_range(value: DateLike, start: DateLike, end: DateLike) -> bool:
    """Inclusive date-only range check."""
    return date_only(start) <= date_only(value) <= date_only(end)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def day_of_week(value: date) -> int:
    """Column index in a Sunday-start week (0=Sun .. 6=Sat)."""
    return (value.weekday() + 1) % 7


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def shift_month(year: int, month: int, step: int) -> tuple[int, int]:
    """Move a (year, month) pair by step months, used by prev/next navigation."""
    index = year * 12 + (month - 1) + step
    return index // 12, index % 12 + 1
