"""Concrete repository implementations using SQLModel."""

from .day_note import SQLModelDayNoteRepository
from .habit import SQLModelHabitRepository
from .task import SQLModelTaskRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelDayNoteRepository",
    "SQLModelHabitRepository",
    "SQLModelTaskRepository",
    "SQLModelUserRepository",
]
