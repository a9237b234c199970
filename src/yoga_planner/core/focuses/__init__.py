"""
Focus catalog for yoga-planner.

Per-goal pools of active and restorative practice-focus labels, each
tagged with the body areas it loads.
"""

from .base import FocusEntry, GoalCatalog
from .registry import FOCUS_REGISTRY, get_goal_catalog

__all__ = [
    "FocusEntry",
    "GoalCatalog",
    "FOCUS_REGISTRY",
    "get_goal_catalog",
]
