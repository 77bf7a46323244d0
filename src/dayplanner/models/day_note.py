"""Free-text note attached to one calendar day."""

from __future__ import annotations

import datetime as dt
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class DayNote(SQLModel, table=True):
    """One note and reflection per user per day."""

    __tablename__: ClassVar[str] = "day_note"
    __table_args__ = (UniqueConstraint("user_id", "date", name="ux_day_note_user_date"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    date: dt.date = Field(nullable=False, index=True)
    note: str = Field(default="")
    reflection: str = Field(default="")
    created_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        nullable=False,
    )
    updated_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        nullable=False,
    )
