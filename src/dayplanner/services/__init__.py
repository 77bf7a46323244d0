"""Service module exports."""

from . import (
    day_notes,
    days,
    habits,
    materializer,
    planner,
    recurrence,
    streaks,
    tasks,
)

__all__ = [
    "day_notes",
    "days",
    "habits",
    "materializer",
    "planner",
    "recurrence",
    "streaks",
    "tasks",
]
