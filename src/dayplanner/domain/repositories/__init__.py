"""Repository protocol definitions for domain layer."""

from .day_note import DayNoteRepository
from .habit import HabitRepository
from .task import TaskRepository
from .user import UserRepository

__all__ = [
    "DayNoteRepository",
    "HabitRepository",
    "TaskRepository",
    "UserRepository",
]
