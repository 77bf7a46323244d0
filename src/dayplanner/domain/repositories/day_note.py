"""Day note repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.day_note import DayNote


class DayNoteRepository(Protocol):
    """Repository for the one note per user per day."""

    def get_for_day(self, day: date, *, user_id: int) -> Optional[DayNote]:
        """Retrieve the note for ``day``."""
        ...

    def create(self, note: DayNote, *, user_id: int) -> DayNote:
        """Create a note."""
        ...

    def update(self, note: DayNote, *, user_id: int) -> DayNote:
        """Update a note."""
        ...

    def delete_for_day(self, day: date, *, user_id: int) -> bool:
        """Delete the note for ``day``; return False when there is none."""
        ...
