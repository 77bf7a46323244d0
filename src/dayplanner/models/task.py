"""Task table: one-off tasks, recurring templates and their dated instances."""

from __future__ import annotations

import datetime as dt
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel

TASK_KINDS = ("binary", "count", "value")
TASK_PRIORITIES = ("low", "medium", "high")
REPEAT_FREQUENCIES = ("daily", "weekdays", "weekly", "monthly")


class Task(SQLModel, table=True):
    """A dated unit of work.

    ``is_recurring`` rows are templates: ``date`` is the anchor the recurrence
    is measured from and the ``repeat_*`` columns hold the repeat spec.
    Instances point back to their template through ``parent_template_id``.
    """

    __tablename__: ClassVar[str] = "task"
    __table_args__ = (
        # At most one instance per template per day; NULL parents never collide.
        UniqueConstraint(
            "user_id", "parent_template_id", "date", name="ux_task_instance_per_day"
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=200)
    description: str = Field(default="")
    date: dt.date = Field(nullable=False, index=True)

    kind: str = Field(default="binary", max_length=16)
    quantity: Optional[int] = Field(default=None)
    value: Optional[float] = Field(default=None)

    completed: bool = Field(default=False, nullable=False, index=True)
    completed_at: Optional[dt.datetime] = Field(default=None)

    is_recurring: bool = Field(default=False, nullable=False, index=True)
    repeat_frequency: Optional[str] = Field(default=None, max_length=16)
    repeat_interval: int = Field(default=1, nullable=False)
    repeat_end_date: Optional[dt.date] = Field(default=None)
    repeat_days_of_week: Optional[list[int]] = Field(
        default=None, sa_column=Column(JSON, nullable=True)
    )
    # No FK: instances outlive their template.
    parent_template_id: Optional[int] = Field(default=None, index=True)

    priority: str = Field(default="medium", max_length=8, index=True)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    reminder_enabled: bool = Field(default=False, nullable=False)
    reminder_time: Optional[dt.datetime] = Field(default=None)
    duration: Optional[int] = Field(default=None, description="Duration in minutes")

    created_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        nullable=False,
        index=True,
    )
    updated_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        nullable=False,
    )

    @property
    def is_instance(self) -> bool:
        return self.parent_template_id is not None
