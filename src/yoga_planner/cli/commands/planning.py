"""Planning commands: plan, today, progress, evolve, edit-day, archive."""

from dataclasses import replace
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.evolution import create_evolution_plan
from ...core.journey import (
    checkin_status,
    get_day_plan,
    get_todays_plan,
    replace_plan_day,
    week_index_for_date,
)
from ...core.models import PlanDay, TrainingPlan, UserPreferences
from ...core.progress import calculate_plan_progress
from ...io.practice_store import PracticeStore
from ...io.serializers import ValidationError, validate_date
from .. import views
from ..app import DataDirOption, UserOption, app, get_store
from ..views import DAY_NAMES


def _load_context(store: PracticeStore) -> tuple[UserPreferences, TrainingPlan]:
    """Load preferences and the active plan, exiting with an error if either is missing."""
    prefs = store.load_preferences()
    if prefs is None:
        views.print_error(f"Preferences not found: {store.profile_path}")
        views.print_info("Run 'init' first.")
        raise typer.Exit(1)

    plan = store.load_active_plan()
    if plan is None:
        views.print_error("No active plan.")
        views.print_info("Run 'init' or 'evolve' to create one.")
        raise typer.Exit(1)

    return prefs, plan


def _refresh_progress(store: PracticeStore, plan: TrainingPlan) -> TrainingPlan:
    """Recompute progress from history and persist it if anything changed."""
    try:
        history = store.load_history()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    updated = calculate_plan_progress(plan, history)
    if updated != plan:
        store.save_plan(updated)
    return updated


def _parse_day(raw: str) -> int:
    """Day of week from a name ("mon") or number (0 = Sunday)."""
    lookup = {name.lower(): i for i, name in enumerate(DAY_NAMES)}
    key = raw.strip().lower()[:3]
    if key in lookup:
        return lookup[key]
    value = int(raw)
    if not 0 <= value <= 6:
        raise ValueError
    return value


@app.command()
def plan(
    week: Annotated[
        Optional[int],
        typer.Option("--week", "-w", help="Show only this week (1–4)"),
    ] = None,
    user_id: UserOption = "local",
    data_dir: DataDirOption = None,
) -> None:
    """
    Show the active plan with its reasoning.
    """
    store = get_store(data_dir, user_id)
    _, active = _load_context(store)
    active = _refresh_progress(store, active)

    week_count = len(active.weeks) if active.weeks else 1
    if week is not None and not 1 <= week <= week_count:
        views.print_error(f"--week must be between 1 and {week_count}")
        raise typer.Exit(1)

    views.print_plan(active, week_index=None if week is None else week - 1)


@app.command()
def today(
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Date to look up (YYYY-MM-DD, default: today)"),
    ] = None,
    user_id: UserOption = "local",
    data_dir: DataDirOption = None,
) -> None:
    """
    Show the practice scheduled for today (or --date).
    """
    store = get_store(data_dir, user_id)
    prefs, active = _load_context(store)

    if date is None:
        date_str = datetime.now().strftime("%Y-%m-%d")
        day = get_todays_plan(active, prefs.start_date)
    else:
        date_str = date
        try:
            validate_date(date_str)
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        day = get_day_plan(active, date_str, prefs.start_date)

    views.print_day(day, date_str, week_index_for_date(active, date_str, prefs.start_date))

    status = checkin_status(prefs.start_date, date_str)
    if status == "checkin":
        views.print_info("Weekly check-in: set your intention for the week ahead.")
    elif status == "review":
        views.print_info("Weekly review: look back on how the week went.")


@app.command()
def progress(
    user_id: UserOption = "local",
    data_dir: DataDirOption = None,
) -> None:
    """
    Recompute progress of the active plan from the practice log.
    """
    store = get_store(data_dir, user_id)
    _, active = _load_context(store)
    active = _refresh_progress(store, active)

    views.console.print(views.format_plan_header(active))
    if active.status == "completed":
        views.print_success("Cycle complete! Run 'evolve' to start your next plan.")


@app.command()
def evolve(
    force: Annotated[
        bool,
        typer.Option("--force", help="Evolve even if the current plan is not completed"),
    ] = False,
    user_id: UserOption = "local",
    data_dir: DataDirOption = None,
) -> None:
    """
    Start the next cycle: level up, or rotate the goal at Advanced.

    The current plan is archived and the new one becomes active.
    """
    store = get_store(data_dir, user_id)
    prefs, active = _load_context(store)
    active = _refresh_progress(store, active)

    if active.status != "completed" and not force:
        views.print_error(
            f"Current plan is {active.progress}% complete. "
            "Finish it first or pass --force."
        )
        raise typer.Exit(1)

    new_plan = create_evolution_plan(active, prefs)
    new_prefs = replace(
        prefs,
        level=new_plan.level or prefs.level,
        goal=new_plan.goal or prefs.goal,
        start_date=datetime.now().strftime("%Y-%m-%d"),
    )

    store.save_plan(replace(active, status="archived"))
    store.save_plan(new_plan, make_active=True)
    store.save_preferences(new_prefs)

    views.print_success(f"New plan: {new_plan.name}")
    views.print_plan(new_plan, week_index=0)


@app.command("edit-day")
def edit_day(
    week: Annotated[
        int,
        typer.Option("--week", "-w", help="Week number (1–4)"),
    ],
    day: Annotated[
        str,
        typer.Option("--day", help="Day of week: sun..sat or 0 (Sunday)..6"),
    ],
    rest: Annotated[
        bool,
        typer.Option("--rest", help="Turn the day into a rest day"),
    ] = False,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Practice name for an active day"),
    ] = None,
    description: Annotated[
        Optional[str],
        typer.Option("--description", help="Free-text description"),
    ] = None,
    user_id: UserOption = "local",
    data_dir: DataDirOption = None,
) -> None:
    """
    Manually override one day of the active plan.

    Example:
        yoga-planner edit-day --week 2 --day sat --name "Sun Salutations"
    """
    store = get_store(data_dir, user_id)
    _, active = _load_context(store)

    try:
        day_of_week = _parse_day(day)
    except ValueError:
        views.print_error(f"Invalid day: {day!r}. Use sun..sat or 0..6")
        raise typer.Exit(1)

    if rest:
        new_day = PlanDay(
            day_of_week=day_of_week,
            activity_type="Rest",
            practice_name="Recovery",
            focus="Rest",
            description=description or "Free day for recovery.",
        )
    else:
        if not name:
            views.print_error("--name is required for an active day (or pass --rest)")
            raise typer.Exit(1)
        new_day = PlanDay(
            day_of_week=day_of_week,
            activity_type="Active",
            practice_name=name,
            focus=name,
            description=description or f"Custom session: {name}.",
        )

    try:
        edited = replace_plan_day(active, week - 1, new_day)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    edited = _refresh_progress(store, edited)
    store.save_plan(edited)
    views.print_success(f"Updated week {week}, {DAY_NAMES[day_of_week]}.")
    views.print_plan(edited, week_index=week - 1)


@app.command()
def archive(
    user_id: UserOption = "local",
    data_dir: DataDirOption = None,
) -> None:
    """
    Archive the active plan and clear the active marker.
    """
    store = get_store(data_dir, user_id)
    _, active = _load_context(store)

    store.save_plan(replace(active, status="archived"))
    store.set_active_plan(None)
    views.print_success(f"Archived {active.name}.")
