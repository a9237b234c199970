"""
Adaptation rules: post-practice difficulty feedback and practice totals.

A session rated "hard" moves the stored level one step down, "easy" one
step up; the change takes effect for the next synthesized plan.
"""

from collections.abc import Iterable
from dataclasses import replace

from .models import LEVELS, SessionRecord, UserPreferences


def adjust_level_for_difficulty(
    prefs: UserPreferences,
    difficulty: str | None,
) -> tuple[UserPreferences, str | None]:
    """
    Apply one post-practice difficulty rating to the preferences.

    Levels are clamped at both ends: "hard" at Beginner and "easy" at
    Advanced leave the level unchanged, as does "ok" or no rating.

    Args:
        prefs: Current preferences (not mutated)
        difficulty: "easy", "ok", "hard" or None

    Returns:
        (preferences, message). The message is None when nothing changed.
    """
    step = {"hard": -1, "easy": 1}.get(difficulty or "", 0)
    if step == 0:
        return prefs, None

    index = LEVELS.index(prefs.level) + step
    if not 0 <= index < len(LEVELS):
        return prefs, None

    new_level = LEVELS[index]
    if step < 0:
        message = f"That felt hard: your level is now {new_level}."
    else:
        message = f"That felt easy: your level is now {new_level}."
    return replace(prefs, level=new_level), message


def practice_totals(history: Iterable[SessionRecord]) -> tuple[int, int]:
    """Total number of logged sessions and total minutes practiced."""
    sessions = 0
    minutes = 0
    for record in history:
        sessions += 1
        minutes += record.duration
    return sessions, minutes
