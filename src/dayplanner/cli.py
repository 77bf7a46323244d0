"""Command-line entry point for DayPlanner."""

from __future__ import annotations

from datetime import date

import click

from .config import BaseConfig
from .errors import DayPlannerError
from .infra.database import bootstrap_database
from .infra.repositories import (
    SQLModelDayNoteRepository,
    SQLModelHabitRepository,
    SQLModelTaskRepository,
    SQLModelUserRepository,
)
from .logging_config import setup_logging
from .models import User
from .models.habit import HABIT_TIMES_OF_DAY
from .models.task import REPEAT_FREQUENCIES
from .services.habits import create_habit, toggle_habit_completion
from .services.materializer import materialize_range
from .services.planner import materialize_and_list_day
from .services.recurrence import RepeatSpec
from .services.tasks import create_task


class _Context:
    """Lazily bootstrapped config and session factory shared by commands."""

    def __init__(self) -> None:
        self.config = BaseConfig()
        setup_logging(self.config)
        _, self.session_factory = bootstrap_database(self.config)


def _parse_day(ctx, param, value: str | None) -> date:
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter("expected YYYY-MM-DD") from exc


def _parse_optional_day(ctx, param, value: str | None) -> date | None:
    if value is None:
        return None
    return _parse_day(ctx, param, value)


@click.group()
@click.pass_context
def main(ctx: click.Context) -> None:
    """Plan recurring tasks and track habit streaks."""

    ctx.obj = _Context()


@main.command("init-db")
@click.pass_obj
def init_db(obj: _Context) -> None:
    """Create the database schema."""

    click.echo(f"Database ready: {obj.config.DATABASE_URL}")


@main.command("add-user")
@click.argument("username")
@click.pass_obj
def add_user(obj: _Context, username: str) -> None:
    """Create an owner to attach tasks and habits to."""

    repo = SQLModelUserRepository(obj.session_factory)
    if repo.get_by_username(username):
        raise click.ClickException(f"User {username!r} already exists")
    user = repo.create(User(username=username))
    click.echo(f"Created user {user.username} (id={user.id})")


@main.command("plan")
@click.option("--user", "user_id", type=int, required=True, help="Owner id")
@click.option("--date", "day", callback=_parse_day, default=None, help="Day to plan (YYYY-MM-DD)")
@click.pass_obj
def plan(obj: _Context, user_id: int, day: date) -> None:
    """Materialize recurring tasks for a day and list everything due."""

    day_plan = materialize_and_list_day(
        SQLModelTaskRepository(obj.session_factory),
        SQLModelDayNoteRepository(obj.session_factory),
        user_id,
        day,
    )
    click.echo(f"{day_plan.day.isoformat()}: {len(day_plan.tasks)} task(s), {len(day_plan.created)} new")
    for task in day_plan.tasks:
        mark = "x" if task.completed else " "
        suffix = " (recurring)" if task.is_recurring else ""
        click.echo(f"  [{mark}] #{task.id} {task.title}{suffix}")
    if day_plan.note is not None:
        click.echo(f"Note: {day_plan.note.note}")


@main.command("materialize")
@click.option("--user", "user_id", type=int, required=True, help="Owner id")
@click.option("--from", "start", callback=_parse_day, default=None, help="First day (YYYY-MM-DD)")
@click.option("--to", "end", callback=_parse_optional_day, required=True, help="Last day (YYYY-MM-DD)")
@click.pass_obj
def materialize_cmd(obj: _Context, user_id: int, start: date, end: date) -> None:
    """Create recurring instances for every day in a range."""

    try:
        created = materialize_range(
            SQLModelTaskRepository(obj.session_factory),
            user_id,
            start,
            end,
            max_days=obj.config.MATERIALIZE_MAX_DAYS,
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Created {len(created)} instance(s) from {start.isoformat()} to {end.isoformat()}")


@main.command("add-task")
@click.option("--user", "user_id", type=int, required=True, help="Owner id")
@click.option("--title", required=True, help="Task title")
@click.option("--date", "day", callback=_parse_day, default=None, help="Due day, or anchor for repeats")
@click.option("--repeat", type=click.Choice(REPEAT_FREQUENCIES), default=None, help="Make a recurring template")
@click.option("--interval", type=int, default=1, show_default=True)
@click.option("--day-of-week", "days_of_week", type=click.IntRange(0, 6), multiple=True, help="0 = Sunday")
@click.option("--until", callback=_parse_optional_day, default=None, help="Last day a repeat may occur")
@click.pass_obj
def add_task(
    obj: _Context,
    user_id: int,
    title: str,
    day: date,
    repeat: str | None,
    interval: int,
    days_of_week: tuple[int, ...],
    until: date | None,
) -> None:
    """Add a one-off task or a recurring template."""

    try:
        spec = None
        if repeat:
            spec = RepeatSpec.build(
                repeat, interval=interval, end_date=until, days_of_week=days_of_week or None
            )
        task = create_task(
            SQLModelTaskRepository(obj.session_factory), user_id, title=title, day=day, repeat_spec=spec
        )
    except (DayPlannerError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    kind = "template" if task.is_recurring else "task"
    click.echo(f"Created {kind} #{task.id} {task.title} on {task.date.isoformat()}")


@main.command("add-habit")
@click.argument("name")
@click.option("--user", "user_id", type=int, required=True, help="Owner id")
@click.option("--time-of-day", type=click.Choice(HABIT_TIMES_OF_DAY), default="anytime", show_default=True)
@click.pass_obj
def add_habit(obj: _Context, name: str, user_id: int, time_of_day: str) -> None:
    """Start tracking a habit."""

    try:
        habit = create_habit(
            SQLModelHabitRepository(obj.session_factory), user_id, name=name, time_of_day=time_of_day
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Created habit #{habit.id} {habit.name}")


@main.command("toggle-habit")
@click.argument("habit_id", type=int)
@click.option("--user", "user_id", type=int, required=True, help="Owner id")
@click.option("--date", "day", callback=_parse_day, default=None, help="Day to toggle (YYYY-MM-DD)")
@click.pass_obj
def toggle_habit(obj: _Context, habit_id: int, user_id: int, day: date) -> None:
    """Toggle a habit's completion for a day and print the streaks."""

    try:
        habit = toggle_habit_completion(
            SQLModelHabitRepository(obj.session_factory), user_id, habit_id, day
        )
    except DayPlannerError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(
        f"{habit.name}: current streak {habit.current_streak}, "
        f"longest {habit.longest_streak}, completions {habit.completions}"
    )


if __name__ == "__main__":  # pragma: no cover
    main()
