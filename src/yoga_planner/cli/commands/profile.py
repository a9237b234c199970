"""Onboarding command: init."""

from dataclasses import replace
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.models import DISCOMFORTS, UserPreferences
from ...core.planner import create_personalized_plan
from .. import views
from ..app import DataDirOption, UserOption, app, get_store


def parse_discomforts(raw: list[str] | None) -> list[str]:
    """
    Normalize --discomfort values.

    Accepts repeated options and comma-separated lists; "None" on its own
    means no discomforts.

    Raises:
        ValueError: On an unknown discomfort name
    """
    values: list[str] = []
    for item in raw or []:
        values.extend(part.strip() for part in item.split(",") if part.strip())

    lookup = {d.lower(): d for d in DISCOMFORTS}
    result: list[str] = []
    for v in values:
        canonical = lookup.get(v.lower())
        if canonical is None:
            raise ValueError(f"Unknown discomfort {v!r}. Choose from: {', '.join(DISCOMFORTS)}")
        if canonical not in result:
            result.append(canonical)
    return result


@app.command()
def init(
    level: Annotated[
        str,
        typer.Option("--level", "-l", help="Beginner, Intermediate or Advanced"),
    ] = "Beginner",
    goal: Annotated[
        str,
        typer.Option("--goal", "-g", help="Flexibility, Strength, Relaxation or PainRelief"),
    ] = "Flexibility",
    duration: Annotated[
        int,
        typer.Option("--duration", "-m", help="Session length in minutes (15, 30 or 45)"),
    ] = 30,
    frequency: Annotated[
        int,
        typer.Option("--frequency", "-f", help="Sessions per week (2–7)"),
    ] = 3,
    age: Annotated[
        Optional[int],
        typer.Option("--age", help="Age in years (optional)"),
    ] = None,
    weight: Annotated[
        Optional[int],
        typer.Option("--weight", help="Weight in kg (optional)"),
    ] = None,
    discomfort: Annotated[
        Optional[list[str]],
        typer.Option(
            "--discomfort", "-d",
            help="LowerBack, Knees, NeckShoulders, Wrists (repeat or comma-separate)",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite existing preferences without prompting"),
    ] = False,
    user_id: UserOption = "local",
    data_dir: DataDirOption = None,
) -> None:
    """
    Set up your preferences and generate a 4-week plan.

    Example:
        yoga-planner init --goal Strength --level Beginner --frequency 3 -d Knees
    """
    store = get_store(data_dir, user_id)

    if store.exists() and not force:
        if not views.confirm_action("Preferences already exist. Start over with a new plan?"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    if not 2 <= frequency <= 7:
        views.print_warning(f"Frequency {frequency} is outside 2–7; it will be clamped.")

    try:
        prefs = UserPreferences(
            level=level,
            goal=goal,
            duration=duration,
            frequency=frequency,
            age=age,
            weight=weight,
            discomforts=parse_discomforts(discomfort),
            start_date=datetime.now().strftime("%Y-%m-%d"),
            user_id=user_id,
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.init()
    plan = create_personalized_plan(prefs)

    # A fresh onboarding archives whatever plan was active before
    previous = store.load_active_plan()
    if previous is not None and previous.status != "archived":
        store.save_plan(replace(previous, status="archived"))

    store.save_preferences(prefs)
    store.save_plan(plan, make_active=True)

    views.print_success(f"Created plan: {plan.name}")
    views.print_plan(plan, week_index=0)
