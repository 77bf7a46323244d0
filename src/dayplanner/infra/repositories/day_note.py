"""SQLModel implementation of DayNote repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.day_note import DayNote


class SQLModelDayNoteRepository:
    """SQLModel-based day note repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_for_day(self, day: date, *, user_id: int) -> Optional[DayNote]:
        """Retrieve the note for ``day``."""
        with self.session_factory() as session:
            obj = session.exec(
                select(DayNote).where(DayNote.user_id == user_id, DayNote.date == day)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, note: DayNote, *, user_id: int) -> DayNote:
        """Create a note."""
        with self.session_factory() as session:
            note.user_id = user_id
            session.add(note)
            session.commit()
            session.refresh(note)
            session.expunge(note)
            return note

    def update(self, note: DayNote, *, user_id: int) -> DayNote:
        """Update a note."""
        with self.session_factory() as session:
            note.user_id = user_id
            note.updated_at = datetime.now(timezone.utc)
            session.add(note)
            session.commit()
            session.refresh(note)
            session.expunge(note)
            return note

    def delete_for_day(self, day: date, *, user_id: int) -> bool:
        """Delete the note for ``day``."""
        with self.session_factory() as session:
            note = session.exec(
                select(DayNote).where(DayNote.user_id == user_id, DayNote.date == day)
            ).first()
            if not note:
                return False
            session.delete(note)
            session.commit()
            return True
