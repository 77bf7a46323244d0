"""Task services: creation with payload validation, edits and completion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterable, Optional

from ..errors import InvalidOperation, InvalidTaskPayload, NotFound
from ..logging_config import get_logger
from ..models.task import TASK_KINDS, TASK_PRIORITIES, Task
from .days import DayLike, as_utc, normalize_to_day
from .recurrence import RepeatSpec, validate_repeat_spec

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories import TaskRepository

logger = get_logger(__name__)

_EDITABLE_FIELDS = (
    "title",
    "description",
    "priority",
    "tags",
    "reminder_enabled",
    "reminder_time",
    "duration",
)


@dataclass(frozen=True)
class TaskPayload:
    """Kind of a task and the payload that kind carries.

    ``binary`` carries nothing, ``count`` a positive quantity and ``value`` a
    number. Construction fails on any other combination.
    """

    kind: str = "binary"
    quantity: Optional[int] = None
    value: Optional[float] = None

    def __post_init__(self) -> None:
        if self.kind not in TASK_KINDS:
            raise InvalidTaskPayload(f"Unknown task kind: {self.kind!r}")
        if self.kind == "count":
            if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
                raise InvalidTaskPayload(
                    "Quantity is required and must be greater than 0 for count-based tasks"
                )
        elif self.quantity is not None:
            raise InvalidTaskPayload(f"{self.kind} tasks do not carry a quantity")

        if self.kind == "value":
            if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
                raise InvalidTaskPayload("Value is required for value-based tasks")
        elif self.value is not None:
            raise InvalidTaskPayload(f"{self.kind} tasks do not carry a value")

    @classmethod
    def of(cls, task: Task) -> "TaskPayload":
        return cls(kind=task.kind, quantity=task.quantity, value=task.value)


def _clean_title(title: str) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValueError("Task title is required")
    return cleaned


def _check_priority(priority: str) -> str:
    if priority not in TASK_PRIORITIES:
        raise ValueError(f"Invalid priority: {priority!r}")
    return priority


def _check_duration(duration: Optional[int]) -> Optional[int]:
    if duration is not None and duration < 0:
        raise ValueError("Duration must be zero or more minutes")
    return duration


def _apply_repeat_spec(task: Task, spec: RepeatSpec) -> None:
    validate_repeat_spec(spec)
    task.is_recurring = True
    task.repeat_frequency = spec.frequency
    task.repeat_interval = spec.interval
    task.repeat_end_date = spec.end_date
    task.repeat_days_of_week = sorted(spec.days_of_week) if spec.days_of_week else None


def create_task(
    repo: "TaskRepository",
    user_id: int,
    *,
    title: str,
    day: DayLike,
    payload: TaskPayload | None = None,
    repeat_spec: RepeatSpec | None = None,
    description: str = "",
    priority: str = "medium",
    tags: Iterable[str] = (),
    reminder_enabled: bool = False,
    reminder_time: datetime | None = None,
    duration: int | None = None,
) -> Task:
    """Create a one-off task, or a recurring template when ``repeat_spec`` is given.

    The template's own ``day`` is the anchor its occurrences are counted from.
    """

    payload = payload or TaskPayload()
    task = Task(
        user_id=user_id,
        title=_clean_title(title),
        description=(description or "").strip(),
        date=normalize_to_day(day),
        kind=payload.kind,
        quantity=payload.quantity,
        value=payload.value,
        priority=_check_priority(priority),
        tags=[t.strip() for t in tags if t and t.strip()],
        reminder_enabled=reminder_enabled,
        reminder_time=as_utc(reminder_time),
        duration=_check_duration(duration),
    )
    if repeat_spec is not None:
        _apply_repeat_spec(task, repeat_spec)

    created = repo.create(task, user_id=user_id)
    logger.info(
        "Created %s",
        "template" if created.is_recurring else "task",
        extra={"task_id": created.id, "user_id": user_id},
    )
    return created


def get_task(repo: "TaskRepository", user_id: int, task_id: int) -> Task:
    task = repo.get_by_id(task_id, user_id=user_id)
    if task is None:
        raise NotFound("Task", task_id)
    return task


def list_tasks(repo: "TaskRepository", user_id: int) -> list[Task]:
    return repo.list_all(user_id=user_id)


def list_tasks_for_day(repo: "TaskRepository", user_id: int, day: DayLike) -> list[Task]:
    """Tasks stored for ``day`` without materializing recurring templates first."""

    target = normalize_to_day(day)
    return repo.find_in_range(target, target, user_id=user_id)


def update_task(repo: "TaskRepository", user_id: int, task_id: int, **fields) -> Task:
    """Apply edits to a task.

    Besides the plain descriptive fields this accepts ``day``, ``payload``
    (a TaskPayload) and, for templates only, ``repeat_spec``. Completion is
    changed with ``toggle_task_completion``.
    """

    task = get_task(repo, user_id, task_id)

    for key in _EDITABLE_FIELDS:
        if key not in fields:
            continue
        val = fields[key]
        if key == "title":
            val = _clean_title(val)
        elif key == "description":
            val = (val or "").strip()
        elif key == "priority":
            val = _check_priority(val)
        elif key == "tags":
            val = [t.strip() for t in (val or []) if t and t.strip()]
        elif key == "duration":
            val = _check_duration(val)
        elif key == "reminder_time":
            val = as_utc(val)
        setattr(task, key, val)

    if "day" in fields:
        task.date = normalize_to_day(fields["day"])

    payload = fields.get("payload")
    if payload is not None:
        task.kind = payload.kind
        task.quantity = payload.quantity
        task.value = payload.value

    spec = fields.get("repeat_spec")
    if spec is not None:
        if not task.is_recurring:
            raise InvalidOperation("Only recurring templates carry a repeat spec")
        _apply_repeat_spec(task, spec)

    task.updated_at = datetime.now(timezone.utc)
    return repo.update(task, user_id=user_id)


def delete_task(repo: "TaskRepository", user_id: int, task_id: int) -> None:
    """Delete a task. Deleting a template keeps its materialized instances."""

    if not repo.delete(task_id, user_id=user_id):
        raise NotFound("Task", task_id)
    logger.info("Deleted task", extra={"task_id": task_id, "user_id": user_id})


def toggle_task_completion(
    repo: "TaskRepository", user_id: int, task_id: int, *, now: datetime | None = None
) -> Task:
    """Flip a task between done and not done.

    Raises:
        NotFound: no such task for this owner.
        InvalidOperation: the task is a recurring template.
    """

    task = get_task(repo, user_id, task_id)
    if task.is_recurring:
        raise InvalidOperation("Recurring templates cannot be completed; complete an instance")

    task.completed = not task.completed
    task.completed_at = (as_utc(now) or datetime.now(timezone.utc)) if task.completed else None
    task.updated_at = datetime.now(timezone.utc)
    return repo.update(task, user_id=user_id)


__all__ = [
    "TaskPayload",
    "create_task",
    "delete_task",
    "get_task",
    "list_tasks",
    "list_tasks_for_day",
    "toggle_task_completion",
    "update_task",
]
