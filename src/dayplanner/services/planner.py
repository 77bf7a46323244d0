"""Daily planner: materialize the day's recurring work, then read it back."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Optional

from ..models.day_note import DayNote
from ..models.task import Task
from .days import DayLike, normalize_to_day
from .materializer import materialize

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories import DayNoteRepository, TaskRepository


@dataclass
class DayPlan:
    """Everything dated on one day: tasks (newest first) and the day's note."""

    day: date
    tasks: list[Task] = field(default_factory=list)
    note: Optional[DayNote] = None
    created: list[Task] = field(default_factory=list)


def materialize_and_list_day(
    task_repo: "TaskRepository",
    note_repo: "DayNoteRepository",
    user_id: int,
    day: DayLike,
) -> DayPlan:
    """Build the planner view for ``day``.

    Materialization has to happen before the read so that the returned list
    already contains the day's recurring instances.
    """

    target = normalize_to_day(day)
    created = materialize(task_repo, user_id, target)
    tasks = task_repo.find_in_range(target, target, user_id=user_id)
    note = note_repo.get_for_day(target, user_id=user_id)
    return DayPlan(day=target, tasks=tasks, note=note, created=created)
