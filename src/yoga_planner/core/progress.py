"""
Progress tracking: reconcile a plan with the practice log.

Only history records linked to the plan by ``plan_id`` count.  The planned
total is always recounted from the plan's weeks rather than trusted from
the stored value, since the plan editor may have changed active days.
"""

import math
from collections.abc import Iterable
from dataclasses import replace

from .config import COMPLETION_THRESHOLD
from .models import PlanStatus, SessionRecord, TrainingPlan
from .planner import count_active_days


def progress_percent(completed: int, total: int) -> int:
    """
    Completion percentage, capped at 100.

    progress = min(100, round(100 × completed / max(1, total)))

    Halves round up (12.5 → 13).
    """
    ratio = 100 * completed / max(1, total)
    return min(100, int(math.floor(ratio + 0.5)))


def sessions_for_plan(plan_id: str, history: Iterable[SessionRecord]) -> list[SessionRecord]:
    """History records linked to the given plan."""
    return [s for s in history if s.plan_id is not None and s.plan_id == plan_id]


def resolve_status(current: PlanStatus, progress: int) -> PlanStatus:
    """Archived plans stay archived; otherwise completed at the threshold."""
    if current == "archived":
        return "archived"
    return "completed" if progress >= COMPLETION_THRESHOLD else "active"


def calculate_plan_progress(
    plan: TrainingPlan,
    history: Iterable[SessionRecord],
) -> TrainingPlan:
    """
    Recompute a plan's progress fields from the practice log.

    Legacy plans without ``weeks`` are returned unchanged.

    Args:
        plan: Plan to evaluate (not mutated)
        history: Practice log, any order

    Returns:
        Copy of the plan with progress, completed_sessions,
        total_planned_sessions, and status updated
    """
    if plan.weeks is None:
        return plan

    completed = len(sessions_for_plan(plan.id, history))
    total = count_active_days(plan.weeks)
    progress = progress_percent(completed, total)

    return replace(
        plan,
        progress=progress,
        completed_sessions=completed,
        total_planned_sessions=total,
        status=resolve_status(plan.status, progress),
    )
