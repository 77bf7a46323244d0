"""Recurrence pattern matching for recurring task templates.

Each frequency measures distance from the anchor in its own unit (days,
weekdays, weeks, months) so that multi-week and multi-month intervals do not
drift when compared against plain calendar-day differences.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from ..errors import InvalidRepeatSpec
from ..models.task import REPEAT_FREQUENCIES, Task
from .days import DayLike, is_weekday, normalize_to_day, sunday_weekday


@dataclass(frozen=True)
class RepeatSpec:
    """How a template repeats. ``days_of_week`` uses Sunday = 0."""

    frequency: str
    interval: int = 1
    end_date: Optional[date] = None
    days_of_week: Optional[frozenset[int]] = None

    @classmethod
    def build(
        cls,
        frequency: str,
        interval: int = 1,
        end_date: DayLike | None = None,
        days_of_week: Iterable[int] | None = None,
    ) -> "RepeatSpec":
        """Build and validate a spec from loosely typed input."""

        spec = cls(
            frequency=frequency,
            interval=interval,
            end_date=normalize_to_day(end_date) if end_date is not None else None,
            days_of_week=frozenset(days_of_week) if days_of_week is not None else None,
        )
        validate_repeat_spec(spec)
        return spec

    def is_expired(self, day: date) -> bool:
        return self.end_date is not None and self.end_date < day


def validate_repeat_spec(spec: RepeatSpec) -> None:
    """Raise InvalidRepeatSpec unless ``spec`` can drive the matcher."""

    if spec.frequency not in REPEAT_FREQUENCIES:
        raise InvalidRepeatSpec(f"Unknown repeat frequency: {spec.frequency!r}")
    if isinstance(spec.interval, bool) or not isinstance(spec.interval, int) or spec.interval < 1:
        raise InvalidRepeatSpec(f"Repeat interval must be a positive integer, got {spec.interval!r}")
    if spec.days_of_week:
        bad = sorted(d for d in spec.days_of_week if not 0 <= d <= 6)
        if bad:
            raise InvalidRepeatSpec(f"Days of week must be between 0 (Sunday) and 6 (Saturday): {bad}")
    if spec.frequency == "weekly" and not spec.days_of_week:
        raise InvalidRepeatSpec("Weekly repeats need at least one day of week")


def repeat_spec_of(template: Task) -> RepeatSpec:
    """Read the repeat spec stored on a template row (not validated)."""

    days = template.repeat_days_of_week
    return RepeatSpec(
        frequency=template.repeat_frequency or "",
        interval=template.repeat_interval,
        end_date=template.repeat_end_date,
        days_of_week=frozenset(days) if days is not None else None,
    )


def count_weekdays_between(anchor: date, candidate: date) -> int:
    """Count Monday-Friday days in ``(anchor, candidate]``.

    Whole weeks contribute five weekdays each; only the trailing partial week
    is walked.
    """

    span = (candidate - anchor).days
    if span <= 0:
        return 0
    full_weeks, remainder = divmod(span, 7)
    count = full_weeks * 5
    cursor = anchor + timedelta(days=full_weeks * 7)
    for _ in range(remainder):
        cursor += timedelta(days=1)
        if is_weekday(cursor):
            count += 1
    return count


def _is_positive_multiple(distance: int, interval: int) -> bool:
    return distance > 0 and distance % interval == 0


def matches(candidate: DayLike, anchor: DayLike, spec: RepeatSpec) -> bool:
    """Return True when ``candidate`` is an occurrence of a template anchored at ``anchor``.

    Occurrences are strictly after the anchor; the anchor day belongs to the
    template itself. Unknown frequencies and non-positive intervals never match.

    ``weekdays`` does not require the weekday count to be a multiple of
    ``interval * 5``; that reading would skip the Tuesday after a Monday
    anchor. Instead the count is split into working weeks of five and every
    ``interval``-th working week is active.
    """

    candidate_day = normalize_to_day(candidate)
    anchor_day = normalize_to_day(anchor)
    if candidate_day <= anchor_day:
        return False

    interval = spec.interval
    if not isinstance(interval, int) or interval < 1:
        return False

    days_since_anchor = (candidate_day - anchor_day).days

    if spec.frequency == "daily":
        return _is_positive_multiple(days_since_anchor, interval)

    if spec.frequency == "weekdays":
        if not is_weekday(candidate_day):
            return False
        weekdays = count_weekdays_between(anchor_day, candidate_day)
        # Weekdays after the anchor form blocks of five (one working week);
        # every ``interval``-th block is active, starting with the first.
        return weekdays > 0 and ((weekdays - 1) // 5) % interval == 0

    if spec.frequency == "weekly":
        if not spec.days_of_week or sunday_weekday(candidate_day) not in spec.days_of_week:
            return False
        return _is_positive_multiple(days_since_anchor // 7, interval)

    if spec.frequency == "monthly":
        if candidate_day.day != anchor_day.day:
            return False
        months_since_anchor = (candidate_day.year - anchor_day.year) * 12 + (
            candidate_day.month - anchor_day.month
        )
        return _is_positive_multiple(months_since_anchor, interval)

    return False


__all__ = [
    "RepeatSpec",
    "count_weekdays_between",
    "matches",
    "repeat_spec_of",
    "validate_repeat_spec",
]
