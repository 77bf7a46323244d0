"""Habit repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ...models.habit import Habit
from ...services.streaks import CompletionEntry


class HabitRepository(Protocol):
    """Repository for habits and their completion history."""

    def find_by_id(
        self, habit_id: int, *, user_id: int
    ) -> Optional[tuple[Habit, tuple[CompletionEntry, ...]]]:
        """Retrieve a habit together with its completion history."""
        ...

    def save(
        self,
        habit: Habit,
        history: Sequence[CompletionEntry],
        *,
        user_id: int,
        expected_version: int,
    ) -> Habit:
        """Persist streak counters and history; raise ConcurrentModification on a stale version."""
        ...

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List habits, newest first."""
        ...

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update descriptive fields of an existing habit."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit and its history; return False when it does not exist."""
        ...
