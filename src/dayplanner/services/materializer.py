"""Turn recurring templates into concrete, dated task instances.

Materialization runs on demand (every planner read) and must be idempotent:
for a given owner, template and day at most one instance ever exists.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from ..errors import DuplicateInstance, InvalidRepeatSpec
from ..logging_config import get_logger
from ..models.task import Task
from .days import DayLike, as_utc, iter_days, normalize_to_day
from .recurrence import matches, repeat_spec_of, validate_repeat_spec

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories import TaskRepository

logger = get_logger(__name__)

DEFAULT_MAX_RANGE_DAYS = 366


def build_instance(template: Task, day: date) -> Task:
    """Copy a template's descriptive fields onto a fresh, incomplete instance."""

    return Task(
        user_id=template.user_id,
        title=template.title,
        description=template.description,
        date=day,
        kind=template.kind,
        quantity=template.quantity,
        value=template.value,
        completed=False,
        completed_at=None,
        is_recurring=False,
        parent_template_id=template.id,
        priority=template.priority,
        tags=list(template.tags or []),
        reminder_enabled=template.reminder_enabled,
        reminder_time=as_utc(template.reminder_time),
        duration=template.duration,
    )


def materialize(repo: "TaskRepository", user_id: int, target_day: DayLike) -> list[Task]:
    """Create the missing instances due on ``target_day`` and return only the new ones.

    A second call for the same owner and day creates nothing. A concurrent
    writer that wins the insert race surfaces as DuplicateInstance from the
    repository and is treated as "already there".
    """

    day = normalize_to_day(target_day)
    created: list[Task] = []

    for template in repo.find_templates(user_id=user_id, anchor_before=day):
        spec = repeat_spec_of(template)
        if spec.is_expired(day):
            continue
        try:
            validate_repeat_spec(spec)
        except InvalidRepeatSpec as exc:
            logger.warning(
                "Skipping template with unusable repeat spec: %s",
                exc,
                extra={"template_id": template.id, "user_id": user_id},
            )
            continue

        if not matches(day, template.date, spec):
            continue
        if repo.find_instance(template.id, day, user_id=user_id) is not None:
            continue

        try:
            instance = repo.create_instance(build_instance(template, day), user_id=user_id)
        except DuplicateInstance:
            logger.debug(
                "Instance created concurrently; skipping",
                extra={"template_id": template.id, "day": day.isoformat()},
            )
            continue
        created.append(instance)

    if created:
        logger.info(
            "Materialized %d instance(s) for %s",
            len(created),
            day.isoformat(),
            extra={"user_id": user_id},
        )
    return created


def materialize_range(
    repo: "TaskRepository",
    user_id: int,
    start: DayLike,
    end: DayLike,
    *,
    max_days: int = DEFAULT_MAX_RANGE_DAYS,
) -> list[Task]:
    """Materialize every day in ``[start, end]``; the span is capped at ``max_days``."""

    first = normalize_to_day(start)
    last = normalize_to_day(end)
    if last < first:
        raise ValueError(f"Range end {last} is before start {first}")
    span = (last - first).days + 1
    if span > max_days:
        raise ValueError(f"Range of {span} days exceeds the limit of {max_days}")

    created: list[Task] = []
    for day in iter_days(first, last):
        created.extend(materialize(repo, user_id, day))
    return created
