"""Command-line interface for HabitLens."""

from __future__ import annotations

from datetime import date, datetime

import click

from .config import BaseConfig
from .domain.habits import InvalidHabitName, completion_dates
from .domain.periods import TimePeriod, day_key
from .domain.repositories.habit import HabitStoreError
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelHabitRepository
from .logging_config import setup_logging
from .services.tracker import HabitTracker

PERIOD_CHOICE = click.Choice([p.value for p in TimePeriod], case_sensitive=False)


def build_tracker(config: BaseConfig | None = None) -> HabitTracker:
    """Tracker wired to the configured database, with habits loaded."""

    cfg = config or BaseConfig()
    setup_logging(cfg)
    _engine, session_factory = bootstrap_database(cfg)
    tracker = HabitTracker(
        SQLModelHabitRepository(session_factory),
        cfg.calendar_settings(),
        default_color=cfg.HABIT_COLOR,
    )
    tracker.load()
    return tracker


def _parse_day(_ctx, _param, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise click.BadParameter("expected YYYY-MM-DD") from exc


def _find_habit_id(tracker: HabitTracker, ref: str) -> str:
    """Match a habit by id, id prefix or case-insensitive name."""

    for habit in tracker.habits:
        if habit.id == ref or habit.name.lower() == ref.lower():
            return habit.id
    matches = [habit.id for habit in tracker.habits if habit.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    raise click.ClickException(f"No habit matches {ref!r}")


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track daily habits and view completion stats."""

    if ctx.obj is None:
        ctx.obj = build_tracker()


@cli.command("add")
@click.argument("name")
@click.option("--color", default=None, help="Hex color, e.g. #34C759")
@click.pass_obj
def add_command(tracker: HabitTracker, name: str, color: str | None) -> None:
    """Create a habit."""

    try:
        habit = tracker.add_habit(name, color)
    except InvalidHabitName as exc:
        raise click.BadParameter(str(exc), param_hint="NAME") from exc
    except HabitStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Added {habit.name} ({habit.id[:8]})")


@cli.command("edit")
@click.argument("habit")
@click.option("--name", default=None, help="New name")
@click.option("--color", default=None, help="New hex color")
@click.pass_obj
def edit_command(tracker: HabitTracker, habit: str, name: str | None, color: str | None) -> None:
    """Rename or recolor a habit."""

    if name is None and color is None:
        raise click.UsageError("Pass --name and/or --color")
    habit_id = _find_habit_id(tracker, habit)
    try:
        updated = tracker.update_habit(habit_id, name, color)
    except InvalidHabitName as exc:
        raise click.BadParameter(str(exc), param_hint="--name") from exc
    except HabitStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    if updated is None:
        raise click.ClickException(f"No habit matches {habit!r}")
    click.echo(f"Updated {updated.name} ({updated.id[:8]}) {updated.color}")


@cli.command("remove")
@click.argument("habit")
@click.pass_obj
def remove_command(tracker: HabitTracker, habit: str) -> None:
    """Delete a habit and its history."""

    habit_id = _find_habit_id(tracker, habit)
    try:
        tracker.remove_habit(habit_id)
    except HabitStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Removed {habit_id[:8]}")


@cli.command("list")
@click.pass_obj
def list_command(tracker: HabitTracker) -> None:
    """List habits, oldest first."""

    if not tracker.habits:
        click.echo("No habits yet.")
        return
    today_key = day_key(tracker.state.reference, tracker.settings)
    for habit in tracker.habits:
        done = completion_dates(habit)
        mark = "x" if today_key in habit.completions else " "
        last = done[-1].isoformat() if done else "never"
        click.echo(f"[{mark}] {habit.id[:8]}  {habit.name}  {habit.color}  last: {last}")


@cli.command("toggle")
@click.argument("habit")
@click.option("--date", "day", callback=_parse_day, help="Day to toggle (default today)")
@click.pass_obj
def toggle_command(tracker: HabitTracker, habit: str, day: date | None) -> None:
    """Mark a habit done (or undone) for a day."""

    habit_id = _find_habit_id(tracker, habit)
    if not tracker.toggle_completion(habit_id, day):
        raise click.ClickException(tracker.last_error or "Toggle failed")
    updated = tracker.state.find(habit_id)
    target = day or tracker.state.reference
    state = "done" if updated and updated.is_completed_on(target, tracker.settings) else "not done"
    click.echo(f"{updated.name if updated else habit_id}: {state} on {target.isoformat()}")


@cli.command("summary")
@click.option("--period", type=PERIOD_CHOICE, default=TimePeriod.WEEK.value, show_default=True)
@click.option("--date", "day", callback=_parse_day, help="Reference day (default today)")
@click.option("--only", "only", multiple=True, help="Restrict the pie to these habits")
@click.pass_obj
def summary_command(
    tracker: HabitTracker, period: str, day: date | None, only: tuple[str, ...]
) -> None:
    """Print per-habit and combined completion for a period."""

    tracker.set_period(TimePeriod(period.lower()))
    if day is not None:
        tracker.set_reference(day)
    if only:
        ids = list(dict.fromkeys(_find_habit_id(tracker, ref) for ref in only))
        tracker.select_only(ids[0])
        for habit_id in ids[1:]:
            tracker.toggle_selection(habit_id)

    click.echo(tracker.period_label())
    for record in tracker.chart_records():
        click.echo(
            f"  {record.habit.name}: {record.completed_days}/{record.total_days}"
            f" ({record.completion_rate * 100:.1f}%)"
        )
    summary = tracker.pie_summary()
    names = ", ".join(summary.selected_habits) or "none"
    click.echo(
        f"Selected ({names}): {summary.completed_days}/{summary.total_days} "
        f"completed {summary.completed_percentage:.1f}%, "
        f"not completed {summary.not_completed_percentage:.1f}%"
    )


if __name__ == "__main__":  # pragma: no cover
    cli()
