"""Habit services: CRUD and the daily completion toggle."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

from ..errors import NotFound
from ..logging_config import get_logger
from ..models.habit import HABIT_FREQUENCIES, HABIT_GOAL_TYPES, HABIT_TIMES_OF_DAY, Habit
from .days import DayLike, normalize_to_day
from .streaks import toggle_completion

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories import HabitRepository

logger = get_logger(__name__)


def _check_choice(field: str, value: str, allowed: tuple[str, ...]) -> str:
    if value not in allowed:
        raise ValueError(f"Invalid {field}: {value!r}")
    return value


def _apply_goal(
    habit: Habit, goal_type: str, goal_target: Optional[int], goal_date: Optional[DayLike]
) -> None:
    habit.goal_type = _check_choice("goal_type", goal_type, HABIT_GOAL_TYPES)
    if goal_type == "none":
        habit.goal_target = None
        habit.goal_date = None
    else:
        habit.goal_target = goal_target
        habit.goal_date = normalize_to_day(goal_date) if goal_date is not None else None


def create_habit(
    repo: "HabitRepository",
    user_id: int,
    *,
    name: str,
    description: str = "",
    frequency: str = "daily",
    time_of_day: str = "anytime",
    goal_type: str = "none",
    goal_target: int | None = None,
    goal_date: DayLike | None = None,
) -> Habit:
    name_norm = (name or "").strip()
    if not name_norm:
        raise ValueError("Habit name is required")

    habit = Habit(
        user_id=user_id,
        name=name_norm,
        description=(description or "").strip(),
        frequency=_check_choice("frequency", frequency, HABIT_FREQUENCIES),
        time_of_day=_check_choice("time_of_day", time_of_day, HABIT_TIMES_OF_DAY),
    )
    _apply_goal(habit, goal_type, goal_target, goal_date)
    created = repo.create(habit, user_id=user_id)
    logger.info("Created habit", extra={"habit_id": created.id, "user_id": user_id})
    return created


def get_habit(repo: "HabitRepository", user_id: int, habit_id: int) -> Habit:
    habit = repo.get_by_id(habit_id, user_id=user_id)
    if habit is None:
        raise NotFound("Habit", habit_id)
    return habit


def list_habits(repo: "HabitRepository", user_id: int) -> list[Habit]:
    return repo.list_all(user_id=user_id)


def update_habit(repo: "HabitRepository", user_id: int, habit_id: int, **fields) -> Habit:
    """Edit a habit's descriptive fields. Streak counters are not editable here."""

    habit = get_habit(repo, user_id, habit_id)

    if fields.get("name"):
        name_norm = fields["name"].strip()
        if not name_norm:
            raise ValueError("Habit name is required")
        habit.name = name_norm
    if "description" in fields:
        habit.description = (fields["description"] or "").strip()
    if fields.get("frequency"):
        habit.frequency = _check_choice("frequency", fields["frequency"], HABIT_FREQUENCIES)
    if fields.get("time_of_day"):
        habit.time_of_day = _check_choice("time_of_day", fields["time_of_day"], HABIT_TIMES_OF_DAY)
    if "goal_type" in fields:
        _apply_goal(habit, fields["goal_type"], fields.get("goal_target"), fields.get("goal_date"))

    return repo.update(habit, user_id=user_id)


def delete_habit(repo: "HabitRepository", user_id: int, habit_id: int) -> None:
    if not repo.delete(habit_id, user_id=user_id):
        raise NotFound("Habit", habit_id)
    logger.info("Deleted habit", extra={"habit_id": habit_id, "user_id": user_id})


def toggle_habit_completion(
    repo: "HabitRepository",
    user_id: int,
    habit_id: int,
    today: DayLike | None = None,
) -> Habit:
    """Check today off for a habit, or undo today's check-off, and persist the streaks.

    Raises:
        NotFound: the habit does not exist for this owner.
        ConcurrentModification: another toggle saved the habit in between;
            the caller may retry.
    """

    found = repo.find_by_id(habit_id, user_id=user_id)
    if found is None:
        raise NotFound("Habit", habit_id)
    habit, history = found

    day = normalize_to_day(today) if today is not None else date.today()
    result = toggle_completion(history, day, longest_streak=habit.longest_streak)

    expected_version = habit.version
    habit.current_streak = result.current_streak
    habit.longest_streak = result.longest_streak
    habit.completions = result.completions

    saved = repo.save(habit, result.history, user_id=user_id, expected_version=expected_version)
    logger.info(
        "Habit %s for %s",
        "completed" if result.completed_today else "uncompleted",
        day.isoformat(),
        extra={
            "habit_id": habit_id,
            "user_id": user_id,
            "current_streak": saved.current_streak,
            "longest_streak": saved.longest_streak,
        },
    )
    return saved


__all__ = [
    "create_habit",
    "delete_habit",
    "get_habit",
    "list_habits",
    "toggle_habit_completion",
    "update_habit",
]
