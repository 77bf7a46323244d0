"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from sqlalchemy import update
from sqlmodel import Session, select

from ...errors import ConcurrentModification, NotFound
from ...logging_config import get_logger
from ...models.habit import Habit, HabitCompletion
from ...services.streaks import CompletionEntry

logger = get_logger(__name__)


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def find_by_id(
        self, habit_id: int, *, user_id: int
    ) -> Optional[tuple[Habit, tuple[CompletionEntry, ...]]]:
        """Retrieve a habit and its completion history, newest entry first."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return None
            rows = session.exec(
                select(HabitCompletion)
                .where(HabitCompletion.user_id == user_id)
                .where(HabitCompletion.habit_id == habit_id)
                .order_by(HabitCompletion.completed_on.desc())  # type: ignore
            ).all()
            history = tuple(
                CompletionEntry(day=row.completed_on, completed=row.completed) for row in rows
            )
            session.expunge_all()
            return habit, history

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List habits, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(Habit.created_at.desc(), Habit.id.desc())  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update descriptive fields of an existing habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            habit.updated_at = datetime.now(timezone.utc)
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit and its completion history."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if not habit:
                return False
            session.delete(habit)
            session.commit()
            return True

    def save(
        self,
        habit: Habit,
        history: Sequence[CompletionEntry],
        *,
        user_id: int,
        expected_version: int,
    ) -> Habit:
        """Persist streak counters and the completion history in one transaction.

        The counter update only applies when the stored version still equals
        ``expected_version``; the version is bumped on success.

        Raises:
            NotFound: the habit no longer exists for this owner.
            ConcurrentModification: another writer saved the habit first.
        """
        with self.session_factory() as session:
            result = session.connection().execute(
                update(Habit)
                .where(Habit.id == habit.id)  # type: ignore[arg-type]
                .where(Habit.user_id == user_id)  # type: ignore[arg-type]
                .where(Habit.version == expected_version)  # type: ignore[arg-type]
                .values(
                    current_streak=habit.current_streak,
                    longest_streak=habit.longest_streak,
                    completions=habit.completions,
                    version=expected_version + 1,
                    updated_at=datetime.now(timezone.utc),
                )
            )
            if result.rowcount == 0:
                session.rollback()
                exists = session.exec(
                    select(Habit.id).where(Habit.id == habit.id, Habit.user_id == user_id)
                ).first()
                if exists is None:
                    raise NotFound("Habit", habit.id)
                logger.warning(
                    "Habit save lost optimistic lock",
                    extra={"habit_id": habit.id, "expected_version": expected_version},
                )
                raise ConcurrentModification("Habit", habit.id, expected_version)

            wanted = {entry.day: entry for entry in history}
            stored = session.exec(
                select(HabitCompletion)
                .where(HabitCompletion.user_id == user_id)
                .where(HabitCompletion.habit_id == habit.id)
            ).all()
            for row in stored:
                if row.completed_on not in wanted:
                    session.delete(row)
                else:
                    row.completed = wanted.pop(row.completed_on).completed
                    session.add(row)
            for entry in wanted.values():
                session.add(
                    HabitCompletion(
                        habit_id=habit.id,
                        user_id=user_id,
                        completed_on=entry.day,
                        completed=entry.completed,
                    )
                )
            session.commit()

            saved = session.exec(
                select(Habit).where(Habit.id == habit.id, Habit.user_id == user_id)
            ).one()
            session.refresh(saved)
            session.expunge(saved)
            return saved
