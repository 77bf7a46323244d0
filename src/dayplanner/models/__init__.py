"""SQLModel table exports."""

from .day_note import DayNote
from .habit import Habit, HabitCompletion
from .task import Task
from .user import User

__all__ = [
    "DayNote",
    "Habit",
    "HabitCompletion",
    "Task",
    "User",
]
