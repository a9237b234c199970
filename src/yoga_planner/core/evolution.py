"""
Evolution: derive the next plan cycle once the current one is completed.

Beginners and intermediates move up one level with the same goal.
Advanced practitioners keep their level and rotate the goal instead.
"""

import random
from dataclasses import replace

from .config import GOAL_LABELS
from .models import TrainingPlan, UserPreferences
from .planner import create_personalized_plan

NEXT_LEVEL: dict[str, str] = {
    "Beginner": "Intermediate",
    "Intermediate": "Advanced",
}

# Goal rotation for Advanced; goals not listed rotate to Relaxation
ADVANCED_GOAL_ROTATION: dict[str, str] = {
    "Strength": "Flexibility",
    "Flexibility": "Strength",
}


def evolve_preferences(prefs: UserPreferences) -> tuple[UserPreferences, str]:
    """
    Apply the progression rule once.

    Args:
        prefs: Current preferences

    Returns:
        (new preferences, human-readable reason).  All fields other than
        level and goal are carried over unchanged.
    """
    if prefs.level == "Beginner":
        return (
            replace(prefs, level=NEXT_LEVEL["Beginner"]),
            "You mastered the basics, intensifying.",
        )

    if prefs.level == "Intermediate":
        return (
            replace(prefs, level=NEXT_LEVEL["Intermediate"]),
            "Time to push limits with complex postures.",
        )

    new_goal = ADVANCED_GOAL_ROTATION.get(prefs.goal, "Relaxation")
    goal_label = GOAL_LABELS.get(new_goal, new_goal)
    return (
        replace(prefs, goal=new_goal),
        f"Balance is key, now focusing on {goal_label}.",
    )


def create_evolution_plan(
    current_plan: TrainingPlan,
    prefs: UserPreferences,
    rng: random.Random | None = None,
) -> TrainingPlan:
    """
    Build the next cycle's plan from a completed one.

    Args:
        current_plan: The plan being evolved from
        prefs: Current preferences (level/goal drive the progression)
        rng: Random source for focus draws

    Returns:
        New active TrainingPlan whose reasoning starts with the evolution reason
    """
    new_prefs, reason = evolve_preferences(prefs)
    plan = create_personalized_plan(new_prefs, rng)

    goal_label = GOAL_LABELS.get(new_prefs.goal, new_prefs.goal)
    return replace(
        plan,
        name=f"Evolution: {goal_label} {new_prefs.level}",
        description=f"Continuation of your journey after \"{current_plan.name}\". {reason}",
        reasoning=[reason] + plan.reasoning,
    )
