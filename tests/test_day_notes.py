"""Tests for per-day notes and reflections."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from dayplanner.errors import NotFound
from dayplanner.services.day_notes import delete_day_note, get_day_note, upsert_day_note


def test_upsert_creates_then_updates(note_repo, user):
    note, created = upsert_day_note(note_repo, user.id, date(2024, 3, 10), note=" Ship the release ")
    assert created is True
    assert note.note == "Ship the release"
    assert note.reflection == ""

    again, created = upsert_day_note(note_repo, user.id, "2024-03-10", reflection="Went well")
    assert created is False
    assert again.id == note.id
    assert again.note == "Ship the release"
    assert again.reflection == "Went well"


def test_one_note_per_day(note_repo, user):
    upsert_day_note(note_repo, user.id, date(2024, 3, 10), note="a")
    upsert_day_note(note_repo, user.id, datetime(2024, 3, 10, 22, 0), note="b")
    upsert_day_note(note_repo, user.id, date(2024, 3, 11), note="c")

    assert get_day_note(note_repo, user.id, date(2024, 3, 10)).note == "b"
    assert get_day_note(note_repo, user.id, date(2024, 3, 11)).note == "c"


def test_notes_are_scoped_to_owner(note_repo, note_factory, other_user):
    note_factory(date(2024, 3, 10), note="private")
    assert get_day_note(note_repo, other_user.id, date(2024, 3, 10)) is None


def test_delete(note_repo, note_factory, user):
    note_factory(date(2024, 3, 10), note="gone soon")

    delete_day_note(note_repo, user.id, date(2024, 3, 10))

    assert get_day_note(note_repo, user.id, date(2024, 3, 10)) is None
    with pytest.raises(NotFound):
        delete_day_note(note_repo, user.id, date(2024, 3, 10))
