"""Habit tracking data structures."""

from __future__ import annotations

import datetime as dt
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

HABIT_FREQUENCIES = ("daily", "weekdays", "weekly")
HABIT_TIMES_OF_DAY = ("morning", "afternoon", "evening", "anytime")
HABIT_GOAL_TYPES = ("none", "monthly", "yearly", "custom")


class Habit(SQLModel, table=True):
    """A user-defined habit with cached streak counters."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: str = Field(default="", max_length=255)
    frequency: str = Field(default="daily", max_length=16)
    time_of_day: str = Field(default="anytime", max_length=16)
    goal_type: str = Field(default="none", max_length=16)
    goal_target: Optional[int] = Field(default=None)
    goal_date: Optional[dt.date] = Field(default=None)

    current_streak: int = Field(default=0, nullable=False)
    longest_streak: int = Field(default=0, nullable=False)
    completions: int = Field(default=0, nullable=False)
    # Bumped on every streak save; compared on write for optimistic locking.
    version: int = Field(default=1, nullable=False)

    created_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        nullable=False,
        index=True,
    )
    updated_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        nullable=False,
    )

    history: list["HabitCompletion"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "HabitCompletion", back_populates="habit", cascade="all, delete-orphan"
        ),
    )


class HabitCompletion(SQLModel, table=True):
    """Completion-history entry for a habit on one calendar day."""

    __tablename__: ClassVar[str] = "habit_completion"

    habit_id: int = Field(foreign_key="habit.id", primary_key=True)
    completed_on: dt.date = Field(primary_key=True, index=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    completed: bool = Field(default=True, nullable=False)

    habit: "Habit" = Relationship(
        back_populates="history",
        sa_relationship=relationship("Habit", back_populates="history"),
    )
