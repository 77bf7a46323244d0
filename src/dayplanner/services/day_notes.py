"""Day note services: one free-text note and reflection per user per day."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..errors import NotFound
from ..models.day_note import DayNote
from .days import DayLike, normalize_to_day

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories import DayNoteRepository


def get_day_note(repo: "DayNoteRepository", user_id: int, day: DayLike) -> Optional[DayNote]:
    return repo.get_for_day(normalize_to_day(day), user_id=user_id)


def upsert_day_note(
    repo: "DayNoteRepository",
    user_id: int,
    day: DayLike,
    *,
    note: str | None = None,
    reflection: str | None = None,
) -> tuple[DayNote, bool]:
    """Create the day's note or update it in place.

    ``None`` leaves a field untouched on update. Returns ``(note, created)``.
    """

    target = normalize_to_day(day)
    existing = repo.get_for_day(target, user_id=user_id)
    if existing is not None:
        if note is not None:
            existing.note = note.strip()
        if reflection is not None:
            existing.reflection = reflection.strip()
        return repo.update(existing, user_id=user_id), False

    created = repo.create(
        DayNote(
            user_id=user_id,
            date=target,
            note=(note or "").strip(),
            reflection=(reflection or "").strip(),
        ),
        user_id=user_id,
    )
    return created, True


def delete_day_note(repo: "DayNoteRepository", user_id: int, day: DayLike) -> None:
    target = normalize_to_day(day)
    if not repo.delete_for_day(target, user_id=user_id):
        raise NotFound("DayNote", target.isoformat())
