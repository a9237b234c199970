"""Session commands: log-session, complete-day, history."""

import uuid
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.adaptation import adjust_level_for_difficulty
from ...core.journey import get_day_plan
from ...core.models import SessionRecord
from ...core.progress import calculate_plan_progress
from ...io.practice_store import PracticeStore
from ...io.serializers import ValidationError
from .. import views
from ..app import DataDirOption, UserOption, app, get_store

DifficultyOption = Annotated[
    Optional[str],
    typer.Option("--difficulty", help="How the practice felt: easy, ok or hard"),
]


def _new_session_id() -> str:
    return uuid.uuid4().hex


def _apply_difficulty(store: PracticeStore, difficulty: str | None) -> None:
    """Move the stored level one step according to the session rating."""
    prefs = store.load_preferences()
    if prefs is None:
        return
    new_prefs, message = adjust_level_for_difficulty(prefs, difficulty)
    if message is not None:
        store.save_preferences(new_prefs)
        views.print_info(f"{message} Your next plan will reflect it.")


def _append_and_report(store: PracticeStore, record: SessionRecord) -> None:
    """Append a record, then recompute and report progress of its plan."""
    try:
        store.append_session(record)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Logged {record.routine_name} on {record.date} ({record.duration} min).")
    _apply_difficulty(store, record.difficulty)

    if record.plan_id is None:
        return
    plan = store.load_plan(record.plan_id)
    if plan is None:
        return

    updated = calculate_plan_progress(plan, store.load_history())
    store.save_plan(updated)
    views.print_info(
        f"{updated.name}: {updated.progress}% "
        f"({updated.completed_sessions}/{updated.total_planned_sessions} sessions)"
    )
    if updated.status == "completed" and plan.status != "completed":
        views.print_success("Cycle complete! Run 'evolve' to start your next plan.")


@app.command("log-session")
def log_session(
    routine: Annotated[
        str,
        typer.Option("--routine", "-r", help="Name of the routine you practiced"),
    ],
    duration: Annotated[
        int,
        typer.Option("--duration", "-m", help="Minutes practiced"),
    ],
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Date (YYYY-MM-DD, default: today)"),
    ] = None,
    mood: Annotated[
        Optional[str],
        typer.Option("--mood", help="happy, calm, tired or energized"),
    ] = None,
    feedback: Annotated[
        Optional[str],
        typer.Option("--feedback", help="Free-text notes"),
    ] = None,
    difficulty: DifficultyOption = None,
    no_plan: Annotated[
        bool,
        typer.Option("--no-plan", help="Do not link this session to the active plan"),
    ] = False,
    user_id: UserOption = "local",
    data_dir: DataDirOption = None,
) -> None:
    """
    Log a completed practice session.

    Sessions are linked to the active plan unless --no-plan is given.
    --difficulty hard lowers your level one step, easy raises it.
    """
    store = get_store(data_dir, user_id)
    if not store.exists():
        views.print_error(f"Preferences not found: {store.profile_path}")
        views.print_info("Run 'init' first.")
        raise typer.Exit(1)

    plan_id = None if no_plan else store.get_active_plan_id()

    try:
        record = SessionRecord(
            id=_new_session_id(),
            date=date or datetime.now().strftime("%Y-%m-%d"),
            routine_name=routine,
            duration=duration,
            user_id=user_id,
            mood=mood,
            plan_id=plan_id,
            feedback=feedback,
            difficulty=difficulty,
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    _append_and_report(store, record)


@app.command("complete-day")
def complete_day(
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Plan date to mark complete (default: today)"),
    ] = None,
    mood: Annotated[
        Optional[str],
        typer.Option("--mood", help="happy, calm, tired or energized"),
    ] = None,
    difficulty: DifficultyOption = None,
    user_id: UserOption = "local",
    data_dir: DataDirOption = None,
) -> None:
    """
    Mark the active plan's practice for a date as done.
    """
    store = get_store(data_dir, user_id)
    prefs = store.load_preferences()
    plan = store.load_active_plan()
    if prefs is None or plan is None:
        views.print_error("No active plan. Run 'init' first.")
        raise typer.Exit(1)

    date_str = date or datetime.now().strftime("%Y-%m-%d")
    try:
        day = get_day_plan(plan, date_str, prefs.start_date)
        record = SessionRecord(
            id=_new_session_id(),
            date=date_str,
            routine_name=day.practice_name or day.focus or "Practice",
            duration=prefs.duration,
            user_id=user_id,
            mood=mood,
            plan_id=plan.id,
            difficulty=difficulty,
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not day.is_active:
        views.print_warning(f"{date_str} is a rest day in your plan; logging it anyway.")

    _append_and_report(store, record)


@app.command()
def history(
    user_id: UserOption = "local",
    data_dir: DataDirOption = None,
) -> None:
    """
    Show the practice log.
    """
    store = get_store(data_dir, user_id)
    try:
        records = store.load_history()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_history(records)
