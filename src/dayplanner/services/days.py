"""Calendar-day normalization shared by every planner component.

All planner dates are timezone-naive local calendar days. Anything that carries
a time component is truncated to its day before it is compared or stored.
Timestamps (creation, completion, reminders) are kept as aware UTC datetimes.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional, Union

DayLike = Union[date, datetime, str]


def normalize_to_day(value: DayLike) -> date:
    """Return the calendar day of ``value`` (a date, datetime or ISO string)."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text).date()
    raise TypeError(f"Cannot interpret {value!r} as a calendar day")


def as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Return ``moment`` as an aware UTC datetime.

    Naive values are taken to already be UTC, which is how SQLite hands stored
    timestamps back.
    """

    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def sunday_weekday(day: date) -> int:
    """Weekday index with Sunday = 0 and Saturday = 6."""

    return (day.weekday() + 1) % 7


def is_weekday(day: date) -> bool:
    """True for Monday through Friday."""

    return day.weekday() < 5


def iter_days(start: DayLike, end: DayLike) -> Iterator[date]:
    """Yield each day from ``start`` to ``end`` inclusive."""

    cursor = normalize_to_day(start)
    last = normalize_to_day(end)
    while cursor <= last:
        yield cursor
        cursor += timedelta(days=1)


__all__ = [
    "DayLike",
    "as_utc",
    "is_weekday",
    "iter_days",
    "normalize_to_day",
    "sunday_weekday",
]
