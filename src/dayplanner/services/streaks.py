"""Streak calculation over a habit's completion history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from .days import DayLike, normalize_to_day


@dataclass(frozen=True)
class CompletionEntry:
    """One day on which the habit was checked off."""

    day: date
    completed: bool = True


@dataclass(frozen=True)
class StreakUpdate:
    """Result of toggling today's completion."""

    history: tuple[CompletionEntry, ...]
    completions: int
    current_streak: int
    longest_streak: int
    completed_today: bool


def _newest_first(entries: Iterable[CompletionEntry]) -> tuple[CompletionEntry, ...]:
    return tuple(sorted(entries, key=lambda entry: entry.day, reverse=True))


def current_streak(history: Iterable[CompletionEntry], today: DayLike) -> int:
    """Count consecutive completed days ending at ``today``.

    Walks the completed entries newest first and stops at the first gap, so a
    history without an entry for today yields 0.
    """

    cursor = normalize_to_day(today)
    streak = 0
    for entry in _newest_first(e for e in history if e.completed):
        if entry.day != cursor:
            break
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def toggle_completion(
    history: Iterable[CompletionEntry],
    today: DayLike,
    *,
    longest_streak: int = 0,
) -> StreakUpdate:
    """Toggle the entry for ``today`` and recompute the streak counters.

    The input history is left untouched; the returned history is a new tuple
    ordered newest first with at most one entry per day.

    Toggling off clears the current streak to 0 rather than recounting the
    days before today. ``longest_streak`` never decreases.
    """

    day = normalize_to_day(today)
    entries = _newest_first(history)

    if any(entry.day == day for entry in entries):
        new_history = tuple(entry for entry in entries if entry.day != day)
        streak = 0
        completed_today = False
    else:
        new_history = _newest_first((*entries, CompletionEntry(day=day)))
        streak = current_streak(new_history, day)
        completed_today = True

    return StreakUpdate(
        history=new_history,
        completions=len(new_history),
        current_streak=streak,
        longest_streak=max(longest_streak, streak),
        completed_today=completed_today,
    )


__all__ = ["CompletionEntry", "StreakUpdate", "current_streak", "toggle_completion"]
