"""Exception types raised by the planner core and its repositories."""

from __future__ import annotations

from typing import Any


class DayPlannerError(Exception):
    """Base class for all DayPlanner errors."""


class NotFound(DayPlannerError):
    """A task, template, habit or note does not exist for the requesting owner.

    The message never distinguishes "missing" from "owned by someone else".
    """

    def __init__(self, entity: str, entity_id: Any = None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            super().__init__(f"{entity} not found")
        else:
            super().__init__(f"{entity} {entity_id} not found")


class InvalidRepeatSpec(DayPlannerError, ValueError):
    """Repeat specification is unusable (bad frequency, interval or weekdays)."""


class InvalidTaskPayload(DayPlannerError, ValueError):
    """Kind-specific payload does not match the task kind."""


class InvalidOperation(DayPlannerError):
    """Requested change is not allowed for this record, e.g. completing a template."""


class DuplicateInstance(DayPlannerError):
    """An instance already exists for (owner, template, day)."""

    def __init__(self, user_id: int, template_id: int | None, day: Any):
        self.user_id = user_id
        self.template_id = template_id
        self.day = day
        super().__init__(f"Instance of template {template_id} already exists on {day}")


class ConcurrentModification(DayPlannerError):
    """Optimistic-lock check failed while saving a habit; safe to retry."""

    retryable = True

    def __init__(self, entity: str, entity_id: Any, expected_version: int | None = None):
        self.entity = entity
        self.entity_id = entity_id
        self.expected_version = expected_version
        super().__init__(
            f"{entity} {entity_id} was modified concurrently "
            f"(expected version {expected_version})"
        )


__all__ = [
    "ConcurrentModification",
    "DayPlannerError",
    "DuplicateInstance",
    "InvalidOperation",
    "InvalidRepeatSpec",
    "InvalidTaskPayload",
    "NotFound",
]
