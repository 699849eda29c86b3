"""Command line front end for HabitStreak."""

from __future__ import annotations

import functools
import time
from datetime import datetime
from typing import Optional

import click

from .context import AppContext, create_app_context
from .errors import HabitError
from .logging_config import setup_logging
from .models.habit import GoalType, Habit
from .services.habits import progress

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M"]


def _handle_errors(func):
    """Report domain errors as a one-line CLI failure."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HabitError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


def _short_id(habit: Habit) -> str:
    return habit.id[:8]


def _goal_label(habit: Habit) -> str:
    if habit.goal_type == GoalType.COUNT:
        return f"{habit.completion_count}/{habit.target_count} times"
    if habit.due_date is None:
        return "no due date"
    return f"due {habit.due_date:%Y-%m-%d %H:%M}"


def _parse_time(value: str) -> tuple[int, int]:
    try:
        parsed = datetime.strptime(value, "%H:%M")
    except ValueError as exc:
        raise click.BadParameter("Use HH:MM, e.g. 08:30", param_hint="--at") from exc
    return parsed.hour, parsed.minute


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track habits, check-ins and day streaks."""

    if ctx.obj is None:
        app = create_app_context()
        setup_logging(app.config)
        ctx.obj = app


pass_app = click.make_pass_decorator(AppContext)


@cli.command("add")
@click.argument("title")
@click.option("--count", "target_count", type=int, help="Goal: number of completions.")
@click.option("--due", "due_date", type=click.DateTime(DATE_FORMATS), help="Goal: deadline.")
@pass_app
@_handle_errors
def add_habit(app: AppContext, title: str, target_count: Optional[int], due_date) -> None:
    """Create a habit with a count goal or a deadline."""

    if (target_count is None) == (due_date is None):
        raise click.UsageError("Give exactly one of --count or --due.")
    goal_type = GoalType.COUNT if target_count is not None else GoalType.DATE
    habit = app.tracker.add(title, goal_type, target_count=target_count, due_date=due_date)
    click.echo(f"Added {_short_id(habit)} {habit.title} ({_goal_label(habit)})")


@cli.command("list")
@pass_app
@_handle_errors
def list_habits(app: AppContext) -> None:
    """List habits, newest first."""

    habits = app.tracker.list_habits()
    if not habits:
        click.echo("No habits yet. Add one with `habitstreak add`.")
        return
    now = app.clock.now()
    for habit in habits:
        pct = progress(habit, now=now, clock=app.clock) * 100
        click.echo(
            f"{_short_id(habit)}  {habit.title:<24} {habit.display_streak:>5}  "
            f"{pct:5.1f}%  {_goal_label(habit)}"
        )


@cli.command("check-in")
@click.argument("ref")
@click.option(
    "--no-streak",
    is_flag=True,
    default=False,
    help="Log the completion without touching the day streak.",
)
@pass_app
@_handle_errors
def check_in(app: AppContext, ref: str, no_streak: bool) -> None:
    """Record a completion for a habit."""

    result = app.tracker.check_in(ref, count_toward_streak=not no_streak)
    habit = result.habit
    click.echo(f"Checked in {habit.title}: streak {habit.display_streak}, {habit.completion_count} total")
    click.echo(result.message)
    if result.badge is not None:
        click.echo(f"Badge earned {result.badge.label}: {result.badge.title} {result.badge.subtitle}")


@cli.command("undo")
@click.argument("ref")
@pass_app
@_handle_errors
def undo(app: AppContext, ref: str) -> None:
    """Remove the most recent check-in of a habit."""

    habit, removed = app.tracker.undo(ref)
    if removed is None:
        click.echo(f"Nothing to undo for {habit.title}.")
        return
    click.echo(f"Removed check-in from {removed:%Y-%m-%d %H:%M} for {habit.title}.")


@cli.command("show")
@click.argument("ref")
@click.option("--days", default=None, type=click.IntRange(min=1), help="Window in days (default: HABITSTREAK_WINDOW_DAYS).")
@pass_app
@_handle_errors
def show(app: AppContext, ref: str, days: Optional[int]) -> None:
    """Show progress, completion rate and recent history."""

    days = days or app.config.WINDOW_DAYS
    summary = app.tracker.summary(ref, days)
    habit = summary.habit
    series = "".join("■" if flag else "·" for _, flag in summary.series)
    click.echo(f"{habit.title} [{_short_id(habit)}]")
    click.echo(f"  goal:      {_goal_label(habit)}")
    click.echo(f"  progress:  {summary.progress * 100:.1f}%")
    click.echo(f"  streak:    {summary.display_streak} (longest {summary.longest_streak})")
    click.echo(f"  today:     {summary.today_count} check-ins")
    click.echo(f"  last {days}d:  {series} {summary.completion_rate * 100:.0f}%")
    if summary.badges:
        click.echo("  badges:    " + " ".join(badge.label for badge in summary.badges))


@cli.command("edit")
@click.argument("ref")
@click.option("--title", default=None)
@click.option("--count", "target_count", type=int, default=None)
@click.option("--due", "due_date", type=click.DateTime(DATE_FORMATS), default=None)
@pass_app
@_handle_errors
def edit(app: AppContext, ref: str, title: Optional[str], target_count: Optional[int], due_date) -> None:
    """Rename a habit or change its goal."""

    if target_count is not None and due_date is not None:
        raise click.UsageError("Give at most one of --count or --due.")
    changes: dict = {"title": title}
    if target_count is not None:
        changes.update(goal_type=GoalType.COUNT, target_count=target_count)
    elif due_date is not None:
        changes.update(goal_type=GoalType.DATE, due_date=due_date)
    habit = app.tracker.edit(ref, **changes)
    click.echo(f"Updated {_short_id(habit)} {habit.title} ({_goal_label(habit)})")


@cli.command("delete")
@click.argument("ref")
@click.confirmation_option(prompt="Delete this habit and its history?")
@pass_app
@_handle_errors
def delete(app: AppContext, ref: str) -> None:
    """Delete a habit."""

    habit = app.tracker.delete(ref)
    click.echo(f"Deleted {habit.title}.")


@cli.command("remind")
@click.option("--on/--off", "enabled", default=None, help="Turn the daily reminder on or off.")
@click.option("--at", "at", default=None, help="Reminder time as HH:MM.")
@pass_app
@_handle_errors
def remind(app: AppContext, enabled: Optional[bool], at: Optional[str]) -> None:
    """Show or change the daily reminder."""

    current = app.reminders.current()
    if enabled is None and at is None:
        state = "on" if current.enabled else "off"
        click.echo(f"Daily reminder is {state} at {current.time_label}")
        return

    hour, minute = _parse_time(at) if at else (current.hour, current.minute)
    settings = app.reminders.update(
        current.enabled if enabled is None else enabled, hour, minute
    )
    state = "on" if settings.enabled else "off"
    click.echo(f"Daily reminder is {state} at {settings.time_label}")


@cli.command("run-reminders")
@pass_app
@_handle_errors
def run_reminders(app: AppContext) -> None:
    """Run the reminder scheduler in the foreground."""

    settings = app.reminders.start()
    click.echo(f"Reminder scheduler running ({'on' if settings.enabled else 'off'} at {settings.time_label}). Ctrl+C to stop.")
    try:
        while True:
            time.sleep(60)
    except KeyboardInterrupt:
        pass
    finally:
        app.reminders.stop()


def main() -> None:
    cli(prog_name="habitstreak")


if __name__ == "__main__":  # pragma: no cover
    main()
