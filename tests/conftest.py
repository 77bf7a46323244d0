"""Pytest configuration and shared fixtures for DayPlanner tests.

This module provides database fixtures, test data factories, and repository
fixtures for testing the planner core without touching a real database.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from dayplanner.infra.repositories import (
    SQLModelDayNoteRepository,
    SQLModelHabitRepository,
    SQLModelTaskRepository,
)
from dayplanner.models import DayNote, Habit, Task, User

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the ``Callable[[], Session]`` repositories expect."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


@pytest.fixture
def task_repo(session_factory) -> SQLModelTaskRepository:
    return SQLModelTaskRepository(session_factory)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def note_repo(session_factory) -> SQLModelDayNoteRepository:
    return SQLModelDayNoteRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


def _make_user(db_session, username: str) -> User:
    u = User(username=username)
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def user(db_session) -> User:
    """Default owner for scoping data."""
    return _make_user(db_session, "tester")


@pytest.fixture
def other_user(db_session) -> User:
    """A second owner, used to check that rows never leak across owners."""
    return _make_user(db_session, "someone-else")


@pytest.fixture
def template_factory(db_session, user):
    """Factory for recurring templates.

    Returns:
        Callable: Function that creates and persists a recurring Task
    """

    def _create_template(
        anchor: date = date(2024, 1, 1),
        frequency: str = "daily",
        interval: int = 1,
        days_of_week: list[int] | None = None,
        end_date: date | None = None,
        title: str = "Stretch",
        owner: User | None = None,
        **extra,
    ) -> Task:
        owner = owner or user
        template = Task(
            user_id=owner.id,
            title=title,
            date=anchor,
            is_recurring=True,
            repeat_frequency=frequency,
            repeat_interval=interval,
            repeat_days_of_week=days_of_week,
            repeat_end_date=end_date,
            **extra,
        )
        db_session.add(template)
        db_session.commit()
        db_session.refresh(template)
        return template

    return _create_template


@pytest.fixture
def task_factory(db_session, user):
    """Factory for one-off tasks."""

    def _create_task(
        day: date = date(2024, 3, 10),
        title: str = "Pay rent",
        owner: User | None = None,
        **extra,
    ) -> Task:
        owner = owner or user
        task = Task(user_id=owner.id, title=title, date=day, **extra)
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)
        return task

    return _create_task


@pytest.fixture
def habit_factory(db_session, user):
    """Factory for habits with zeroed counters."""

    def _create_habit(name: str = "Exercise", owner: User | None = None, **extra) -> Habit:
        owner = owner or user
        habit = Habit(user_id=owner.id, name=name, **extra)
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def note_factory(db_session, user):
    """Factory for day notes."""

    def _create_note(day: date, note: str = "", reflection: str = "", owner: User | None = None) -> DayNote:
        owner = owner or user
        row = DayNote(user_id=owner.id, date=day, note=note, reflection=reflection)
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return _create_note
