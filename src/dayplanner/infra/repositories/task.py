"""SQLModel implementation of Task repository."""

from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ...errors import DuplicateInstance
from ...logging_config import get_logger
from ...models.task import Task

logger = get_logger(__name__)


def _is_unique_violation(exc: IntegrityError) -> bool:
    """True when the database rejected a row for breaking a unique constraint."""
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate" in message


class SQLModelTaskRepository:
    """SQLModel-based task repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, task_id: int, *, user_id: int) -> Optional[Task]:
        """Retrieve a task by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Task).where(Task.id == task_id, Task.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Task]:
        """List all tasks, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Task)
                .where(Task.user_id == user_id)
                .order_by(Task.date.desc(), Task.created_at.desc())  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, task: Task, *, user_id: int) -> Task:
        """Create a one-off task or recurring template."""
        with self.session_factory() as session:
            task.user_id = user_id
            session.add(task)
            session.commit()
            session.refresh(task)
            session.expunge(task)
            return task

    def update(self, task: Task, *, user_id: int) -> Task:
        """Update an existing task.

        Raises:
            DuplicateInstance: the edit moves an instance onto a day that
                already has an instance of the same template.
        """
        with self.session_factory() as session:
            task.user_id = user_id
            template_id, day = task.parent_template_id, task.date
            session.add(task)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if not _is_unique_violation(exc):
                    raise
                raise DuplicateInstance(user_id, template_id, day) from exc
            session.refresh(task)
            session.expunge(task)
            return task

    def delete(self, task_id: int, *, user_id: int) -> bool:
        """Delete a task by ID. Instances of a deleted template are kept."""
        with self.session_factory() as session:
            task = session.exec(
                select(Task).where(Task.id == task_id, Task.user_id == user_id)
            ).first()
            if not task:
                return False
            session.delete(task)
            session.commit()
            return True

    # Recurrence operations
    def find_templates(self, *, user_id: int, anchor_before: date) -> list[Task]:
        """Recurring templates anchored on or before ``anchor_before``."""
        with self.session_factory() as session:
            statement = (
                select(Task)
                .where(Task.user_id == user_id)
                .where(Task.is_recurring == True)  # noqa: E712
                .where(Task.date <= anchor_before)
                .order_by(Task.id)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def find_instance(self, template_id: int, day: date, *, user_id: int) -> Optional[Task]:
        """The instance of ``template_id`` dated ``day``, if any."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Task)
                .where(Task.user_id == user_id)
                .where(Task.parent_template_id == template_id)
                .where(Task.date == day)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create_instance(self, instance: Task, *, user_id: int) -> Task:
        """Insert a materialized instance.

        Raises:
            DuplicateInstance: another writer already created the same
                (owner, template, day) instance.
        """
        with self.session_factory() as session:
            instance.user_id = user_id
            session.add(instance)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if not _is_unique_violation(exc):
                    raise
                logger.debug(
                    "Instance uniqueness conflict",
                    extra={"template_id": instance.parent_template_id, "day": instance.date},
                )
                raise DuplicateInstance(user_id, instance.parent_template_id, instance.date) from exc
            session.refresh(instance)
            session.expunge(instance)
            return instance

    def find_in_range(self, start: date, end: date, *, user_id: int) -> list[Task]:
        """Tasks dated within ``[start, end]``, most recently created first."""
        with self.session_factory() as session:
            statement = (
                select(Task)
                .where(Task.user_id == user_id)
                .where(Task.date >= start)
                .where(Task.date <= end)
                .order_by(Task.created_at.desc(), Task.id.desc())  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
