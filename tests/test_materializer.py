"""Tests for recurring instance materialization."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from sqlmodel import select

from dayplanner.models import Task
from dayplanner.services.days import as_utc
from dayplanner.services.materializer import build_instance, materialize, materialize_range


def _instances(db_session, template_id: int) -> list[Task]:
    db_session.expire_all()
    return list(
        db_session.exec(select(Task).where(Task.parent_template_id == template_id)).all()
    )


class TestMaterialize:
    def test_creates_instance_on_matching_day(self, task_repo, template_factory, user, db_session):
        template = template_factory(anchor=date(2024, 1, 1), frequency="daily", interval=2)

        created = materialize(task_repo, user.id, date(2024, 1, 3))

        assert len(created) == 1
        instance = created[0]
        assert instance.parent_template_id == template.id
        assert instance.date == date(2024, 1, 3)
        assert instance.is_recurring is False
        assert instance.completed is False
        assert len(_instances(db_session, template.id)) == 1

    def test_non_matching_day_creates_nothing(self, task_repo, template_factory, user):
        template_factory(anchor=date(2024, 1, 1), frequency="daily", interval=2)
        assert materialize(task_repo, user.id, date(2024, 1, 2)) == []

    def test_anchor_day_creates_nothing(self, task_repo, template_factory, user):
        template_factory(anchor=date(2024, 1, 1))
        assert materialize(task_repo, user.id, date(2024, 1, 1)) == []

    def test_second_call_is_a_no_op(self, task_repo, template_factory, user, db_session):
        template = template_factory(anchor=date(2024, 3, 1))

        first = materialize(task_repo, user.id, date(2024, 3, 10))
        second = materialize(task_repo, user.id, date(2024, 3, 10))

        assert len(first) == 1
        assert second == []
        assert len(_instances(db_session, template.id)) == 1

    def test_accepts_datetime_target(self, task_repo, template_factory, user):
        template_factory(anchor=date(2024, 3, 1))
        created = materialize(task_repo, user.id, datetime(2024, 3, 10, 18, 30))
        assert [t.date for t in created] == [date(2024, 3, 10)]

    def test_expired_template_is_skipped(self, task_repo, template_factory, user):
        template_factory(anchor=date(2024, 1, 1), end_date=date(2024, 1, 5))
        assert len(materialize(task_repo, user.id, date(2024, 1, 5))) == 1
        assert materialize(task_repo, user.id, date(2024, 1, 6)) == []

    def test_template_anchored_after_target_is_ignored(self, task_repo, template_factory, user):
        template_factory(anchor=date(2024, 6, 1))
        assert materialize(task_repo, user.id, date(2024, 5, 1)) == []

    def test_invalid_stored_spec_is_skipped(self, task_repo, template_factory, user):
        template_factory(anchor=date(2024, 1, 1), frequency="weekly", days_of_week=None)
        template_factory(anchor=date(2024, 1, 1), frequency="daily", title="Water plants")

        created = materialize(task_repo, user.id, date(2024, 1, 8))

        assert [t.title for t in created] == ["Water plants"]

    def test_other_owners_templates_are_untouched(self, task_repo, template_factory, user, other_user):
        template_factory(anchor=date(2024, 1, 1), owner=other_user)
        assert materialize(task_repo, user.id, date(2024, 1, 2)) == []

    def test_one_off_tasks_are_not_templates(self, task_repo, task_factory, user):
        task_factory(day=date(2024, 1, 1))
        assert materialize(task_repo, user.id, date(2024, 1, 2)) == []

    def test_deleting_template_keeps_instances(self, task_repo, template_factory, user, db_session):
        template = template_factory(anchor=date(2024, 1, 1))
        materialize(task_repo, user.id, date(2024, 1, 2))

        assert task_repo.delete(template.id, user_id=user.id) is True

        assert len(_instances(db_session, template.id)) == 1


class TestInstanceFields:
    def test_descriptive_fields_are_copied(self, task_repo, template_factory, user):
        reminder = datetime(2024, 1, 1, 7, 30, tzinfo=timezone.utc)
        template_factory(
            anchor=date(2024, 1, 1),
            title="Push-ups",
            description="Before breakfast",
            kind="count",
            quantity=30,
            priority="high",
            tags=["fitness", "morning"],
            reminder_enabled=True,
            reminder_time=reminder,
            duration=10,
        )

        [instance] = materialize(task_repo, user.id, date(2024, 1, 2))

        assert instance.title == "Push-ups"
        assert instance.description == "Before breakfast"
        assert instance.kind == "count"
        assert instance.quantity == 30
        assert instance.value is None
        assert instance.priority == "high"
        assert instance.tags == ["fitness", "morning"]
        assert instance.reminder_enabled is True
        assert as_utc(instance.reminder_time) == reminder
        assert instance.duration == 10
        assert instance.completed_at is None

    def test_build_instance_copies_tags_list(self):
        template = Task(id=5, user_id=1, title="Read", date=date(2024, 1, 1), is_recurring=True, tags=["books"])
        instance = build_instance(template, date(2024, 1, 2))
        instance.tags.append("extra")
        assert template.tags == ["books"]


class _StaleReadTaskRepository:
    """Wraps a real repository but never sees existing instances.

    Reproduces two planner reads racing: both decide the instance is missing
    and both try to insert it.
    """

    def __init__(self, inner):
        self._inner = inner

    def find_templates(self, **kwargs):
        return self._inner.find_templates(**kwargs)

    def find_instance(self, template_id, day, *, user_id):
        return None

    def create_instance(self, instance, *, user_id):
        return self._inner.create_instance(instance, user_id=user_id)


class TestConcurrentMaterialization:
    def test_racing_writers_leave_one_instance(self, task_repo, template_factory, user, db_session):
        template = template_factory(anchor=date(2024, 3, 1))
        racing = _StaleReadTaskRepository(task_repo)

        first = materialize(racing, user.id, date(2024, 3, 10))
        second = materialize(racing, user.id, date(2024, 3, 10))

        assert len(first) == 1
        assert second == []
        assert len(_instances(db_session, template.id)) == 1


class TestMaterializeRange:
    def test_range_covers_each_day(self, task_repo, template_factory, user):
        template_factory(anchor=date(2024, 1, 1), frequency="weekly", days_of_week=[1, 3])

        created = materialize_range(task_repo, user.id, date(2024, 1, 1), date(2024, 1, 21))

        assert sorted(t.date for t in created) == [
            date(2024, 1, 8),
            date(2024, 1, 10),
            date(2024, 1, 15),
            date(2024, 1, 17),
        ]

    def test_range_is_capped(self, task_repo, user):
        with pytest.raises(ValueError):
            materialize_range(task_repo, user.id, date(2024, 1, 1), date(2024, 1, 31), max_days=10)

    def test_reversed_range_is_rejected(self, task_repo, user):
        with pytest.raises(ValueError):
            materialize_range(task_repo, user.id, date(2024, 1, 5), date(2024, 1, 1))
