"""Task repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.task import Task


class TaskRepository(Protocol):
    """Repository for tasks, recurring templates and their instances."""

    def get_by_id(self, task_id: int, *, user_id: int) -> Optional[Task]:
        """Retrieve a task by ID."""
        ...

    def list_all(self, *, user_id: int) -> list[Task]:
        """List all tasks, newest first."""
        ...

    def create(self, task: Task, *, user_id: int) -> Task:
        """Create a one-off task or recurring template."""
        ...

    def update(self, task: Task, *, user_id: int) -> Task:
        """Update an existing task."""
        ...

    def delete(self, task_id: int, *, user_id: int) -> bool:
        """Delete a task by ID; return False when it does not exist."""
        ...

    # Recurrence operations
    def find_templates(self, *, user_id: int, anchor_before: date) -> list[Task]:
        """Recurring templates whose anchor date is on or before ``anchor_before``."""
        ...

    def find_instance(self, template_id: int, day: date, *, user_id: int) -> Optional[Task]:
        """The instance of ``template_id`` dated ``day``, if any."""
        ...

    def create_instance(self, instance: Task, *, user_id: int) -> Task:
        """Insert an instance; raise DuplicateInstance on a uniqueness conflict."""
        ...

    def find_in_range(self, start: date, end: date, *, user_id: int) -> list[Task]:
        """Tasks dated within ``[start, end]``, most recently created first."""
        ...
