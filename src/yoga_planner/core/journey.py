"""
Calendar view of a plan: which practice falls on a given date, when the
weekly check-in and review are due, and manual day overrides from the plan
editor.
"""

from dataclasses import replace
from datetime import date, datetime
from typing import Literal

from .models import PlanDay, TrainingPlan
from .planner import count_active_days


def js_weekday(day: date) -> int:
    """Day of week with Sunday = 0 .. Saturday = 6."""
    return (day.weekday() + 1) % 7


def _as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # tolerate full ISO timestamps ("2026-03-02T08:15:00")
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def week_index_for_date(
    plan: TrainingPlan,
    day: date | str,
    start_date: date | str | None,
) -> int:
    """
    0-based plan week for a calendar date.

    Weeks cycle: index = floor(days since start / 7) mod number of weeks.
    Dates before the start, or a missing start date, map to week 0.
    """
    if not plan.weeks or start_date is None:
        return 0

    diff_days = (_as_date(day) - _as_date(start_date)).days
    if diff_days < 0:
        return 0
    return (diff_days // 7) % len(plan.weeks)


def get_day_plan(
    plan: TrainingPlan,
    day: date | str,
    start_date: date | str | None = None,
) -> PlanDay:
    """
    Resolve the PlanDay scheduled for a calendar date.

    Legacy plans without weeks use their single ``schedule``.
    """
    day_of_week = js_weekday(_as_date(day))
    if plan.weeks:
        week = plan.weeks[week_index_for_date(plan, day, start_date)]
    else:
        week = plan.schedule
    return week[day_of_week]


def get_todays_plan(plan: TrainingPlan, start_date: date | str | None = None) -> PlanDay:
    """PlanDay for today."""
    return get_day_plan(plan, date.today(), start_date)


def checkin_status(
    start_date: date | str | None,
    day: date | str | None = None,
) -> Literal["checkin", "review"] | None:
    """
    Weekly reflection due on a date, if any.

    The first day of each 7-day cycle since the start date is the check-in
    (set an intention), the last day is the review. Without a start date a
    new user is due a check-in; dates before the start have neither.
    """
    if start_date is None:
        return "checkin"

    diff_days = (_as_date(day or date.today()) - _as_date(start_date)).days
    if diff_days < 0:
        return None

    day_of_cycle = diff_days % 7
    if day_of_cycle == 0:
        return "checkin"
    if day_of_cycle == 6:
        return "review"
    return None


def replace_plan_day(plan: TrainingPlan, week_index: int, new_day: PlanDay) -> TrainingPlan:
    """
    Return a copy of the plan with one day overridden.

    ``schedule`` is kept equal to ``weeks[0]`` and the planned total is
    recounted.  Progress fields are left for calculate_plan_progress.

    Raises:
        ValueError: If the plan has no weeks or week_index is out of range
    """
    if not plan.weeks:
        raise ValueError(f"Plan {plan.id} has no weeks to edit")
    if not 0 <= week_index < len(plan.weeks):
        raise ValueError(
            f"Week index {week_index} out of range (0–{len(plan.weeks) - 1})"
        )

    weeks = [list(week) for week in plan.weeks]
    weeks[week_index][new_day.day_of_week] = new_day

    return replace(
        plan,
        weeks=weeks,
        schedule=weeks[0],
        total_planned_sessions=count_active_days(weeks),
    )
