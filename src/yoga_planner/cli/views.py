"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans and practice history.
"""

from rich.console import Console
from rich.table import Table

from ..core.adaptation import practice_totals
from ..core.config import WEEK_THEMES
from ..core.models import PlanDay, SessionRecord, TrainingPlan

DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

console = Console()


def format_week_table(week: list[PlanDay], week_index: int) -> Table:
    """
    Create a Rich table for one plan week.

    Args:
        week: 7 PlanDay entries
        week_index: 0-based week number (for the title)

    Returns:
        Rich Table object
    """
    theme = WEEK_THEMES[week_index % len(WEEK_THEMES)]
    table = Table(title=f"Week {week_index + 1} · {theme}")

    table.add_column("Day", style="cyan", width=4)
    table.add_column("Type", style="magenta")
    table.add_column("Practice", style="bold")
    table.add_column("Details")

    for day in week:
        style = None if day.is_active else "dim"
        table.add_row(
            DAY_NAMES[day.day_of_week],
            day.activity_type,
            day.practice_name or day.focus or "-",
            day.description,
            style=style,
        )

    return table


def format_plan_header(plan: TrainingPlan) -> str:
    """Plan name, status, and progress as a text block."""
    lines = [
        f"[bold cyan]{plan.name}[/bold cyan]  [dim]({plan.id})[/dim]",
        plan.description,
        (
            f"Status: {plan.status} · Progress: {plan.progress}% "
            f"({plan.completed_sessions}/{plan.total_planned_sessions} sessions)"
        ),
    ]
    return "\n".join(lines)


def print_plan(plan: TrainingPlan, week_index: int | None = None) -> None:
    """
    Print a plan: header, the requested week (or all weeks), and reasoning.

    Args:
        plan: Plan to display
        week_index: 0-based week to show, None for all
    """
    console.print()
    console.print(format_plan_header(plan))
    console.print()

    weeks = plan.weeks if plan.weeks is not None else [plan.schedule]
    indices = range(len(weeks)) if week_index is None else [week_index]
    for i in indices:
        console.print(format_week_table(weeks[i], i))

    if plan.reasoning:
        console.print()
        console.print("[bold]Why this plan[/bold]")
        for sentence in plan.reasoning:
            console.print(f"  • {sentence}")
    console.print()


def print_day(day: PlanDay, date_str: str, week_index: int) -> None:
    """Print the practice resolved for one date."""
    header = f"{date_str} ({DAY_NAMES[day.day_of_week]}, week {week_index + 1})"
    console.print()
    console.print(f"[bold]{header}[/bold]")
    if day.is_active:
        console.print(f"  [green]{day.practice_name}[/green]")
    else:
        console.print(f"  [yellow]{day.practice_name or day.focus or 'Rest'}[/yellow]")
    if day.description:
        console.print(f"  {day.description}")
    console.print()


def format_history_table(records: list[SessionRecord]) -> Table:
    """
    Create a Rich table displaying the practice log.

    Args:
        records: Records to display

    Returns:
        Rich Table object
    """
    table = Table(title="Practice History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Routine", style="bold")
    table.add_column("Min", justify="right")
    table.add_column("Mood", style="magenta")
    table.add_column("Plan", style="dim")

    for i, record in enumerate(records, 1):
        table.add_row(
            str(i),
            record.date,
            record.routine_name,
            str(record.duration),
            record.mood or "-",
            record.plan_id or "-",
        )

    return table


def print_history(records: list[SessionRecord]) -> None:
    """
    Print the practice log to console.

    Args:
        records: Records to display
    """
    if not records:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return

    console.print(format_history_table(records))

    sessions, minutes = practice_totals(records)
    console.print(f"[bold]Total:[/bold] {sessions} sessions, {minutes} minutes")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
