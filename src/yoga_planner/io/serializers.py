"""
JSON serialization for plan and practice-log models.

Handles conversion between dataclasses and JSON-compatible dicts.
"""

import json
import re
from datetime import datetime
from typing import Any

from ..core.models import (
    DIFFICULTIES,
    DISCOMFORTS,
    DURATIONS,
    GOALS,
    LEVELS,
    MOODS,
    PlanDay,
    SessionRecord,
    TrainingPlan,
    UserPreferences,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def validate_choice(value: Any, choices: tuple, name: str) -> Any:
    """
    Validate that a value is one of the allowed choices.

    Raises:
        ValidationError: If value is not allowed
    """
    if value not in choices:
        raise ValidationError(f"Invalid {name}: {value!r}. Must be one of {choices}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is not a number or is negative
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def _require_mapping(data: Any, what: str) -> None:
    if not isinstance(data, dict):
        raise ValidationError(f"Invalid {what}: expected an object, got {type(data).__name__}")


def _optional_int(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    return int(value) if value is not None else None


# =============================================================================
# Preferences
# =============================================================================


def preferences_to_dict(prefs: UserPreferences) -> dict[str, Any]:
    """Convert UserPreferences to JSON-compatible dict."""
    return {
        "user_id": prefs.user_id,
        "level": prefs.level,
        "goal": prefs.goal,
        "duration": prefs.duration,
        "frequency": prefs.frequency,
        "age": prefs.age,
        "weight": prefs.weight,
        "discomforts": list(prefs.discomforts),
        "start_date": prefs.start_date,
    }


def dict_to_preferences(data: dict[str, Any]) -> UserPreferences:
    """
    Convert dict to UserPreferences.

    Raises:
        ValidationError: If data is invalid
    """
    _require_mapping(data, "preferences")
    validate_choice(data.get("level"), LEVELS, "level")
    validate_choice(data.get("goal"), GOALS, "goal")
    validate_choice(data.get("duration"), DURATIONS, "duration")
    discomforts = data.get("discomforts") or []
    if not isinstance(discomforts, list):
        raise ValidationError(f"discomforts must be a list, got {discomforts!r}")
    discomforts = list(discomforts)
    for d in discomforts:
        validate_choice(d, DISCOMFORTS, "discomfort")
    start_date = data.get("start_date")
    if start_date is not None:
        # older profiles stored a full ISO timestamp
        start_date = validate_date(str(start_date)[:10])

    try:
        return UserPreferences(
            level=data["level"],
            goal=data["goal"],
            duration=int(data["duration"]),
            frequency=_optional_int(data, "frequency"),
            age=_optional_int(data, "age"),
            weight=_optional_int(data, "weight"),
            discomforts=discomforts,
            start_date=start_date,
            user_id=data.get("user_id"),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid preferences: {e}") from e


# =============================================================================
# Plans
# =============================================================================


def plan_day_to_dict(day: PlanDay) -> dict[str, Any]:
    """Convert PlanDay to JSON-compatible dict."""
    return {
        "day_of_week": day.day_of_week,
        "activity_type": day.activity_type,
        "practice_name": day.practice_name,
        "focus": day.focus,
        "description": day.description,
    }


def dict_to_plan_day(data: dict[str, Any]) -> PlanDay:
    """
    Convert dict to PlanDay.

    Raises:
        ValidationError: If data is invalid
    """
    _require_mapping(data, "plan day")
    validate_choice(data.get("activity_type"), ("Active", "Rest"), "activity_type")
    try:
        return PlanDay(
            day_of_week=int(data["day_of_week"]),
            activity_type=data["activity_type"],
            practice_name=data.get("practice_name"),
            focus=data.get("focus"),
            description=data.get("description") or "",
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid plan day: {e}") from e


def _week_to_list(week: list[PlanDay]) -> list[dict[str, Any]]:
    return [plan_day_to_dict(d) for d in week]


def _list_to_week(raw: list[dict[str, Any]]) -> list[PlanDay]:
    if not isinstance(raw, list):
        raise ValidationError(f"A plan week must be a list of days, got {raw!r}")
    week = [dict_to_plan_day(d) for d in raw]
    if sorted(d.day_of_week for d in week) != list(range(7)):
        raise ValidationError("A plan week must contain exactly one entry per day 0..6")
    return sorted(week, key=lambda d: d.day_of_week)


def plan_to_dict(plan: TrainingPlan) -> dict[str, Any]:
    """
    Convert TrainingPlan to JSON-compatible dict.

    ``schedule`` is only written for legacy plans; for plans with weeks it
    is always weeks[0] and is rebuilt on load.
    """
    d: dict[str, Any] = {
        "id": plan.id,
        "user_id": plan.user_id,
        "name": plan.name,
        "description": plan.description,
        "level": plan.level,
        "goal": plan.goal,
        "duration_weeks": plan.duration_weeks,
        "reasoning": list(plan.reasoning),
        "status": plan.status,
        "progress": plan.progress,
        "total_planned_sessions": plan.total_planned_sessions,
        "completed_sessions": plan.completed_sessions,
    }
    if plan.weeks is not None:
        d["weeks"] = [_week_to_list(w) for w in plan.weeks]
    else:
        d["schedule"] = _week_to_list(plan.schedule)
    return d


def dict_to_plan(data: dict[str, Any]) -> TrainingPlan:
    """
    Convert dict to TrainingPlan.

    Raises:
        ValidationError: If data is invalid
    """
    _require_mapping(data, "plan")
    if not data.get("id"):
        raise ValidationError("Plan is missing its id")
    validate_choice(data.get("status", "active"), ("active", "completed", "archived"), "status")

    weeks: list[list[PlanDay]] | None = None
    if data.get("weeks"):
        if not isinstance(data["weeks"], list):
            raise ValidationError(f"Plan {data['id']} weeks must be a list")
        weeks = [_list_to_week(w) for w in data["weeks"]]
        schedule = weeks[0]
    elif data.get("schedule"):
        schedule = _list_to_week(data["schedule"])
    else:
        raise ValidationError(f"Plan {data['id']} has neither weeks nor schedule")

    try:
        return TrainingPlan(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            schedule=schedule,
            weeks=weeks,
            duration_weeks=int(data.get("duration_weeks", len(weeks) if weeks else 1)),
            reasoning=list(data.get("reasoning") or []),
            status=data.get("status", "active"),
            progress=int(data.get("progress", 0)),
            total_planned_sessions=int(data.get("total_planned_sessions", 0)),
            completed_sessions=int(data.get("completed_sessions", 0)),
            level=data.get("level"),
            goal=data.get("goal"),
            user_id=data.get("user_id"),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid plan {data['id']}: {e}") from e


# =============================================================================
# Practice log
# =============================================================================


def session_record_to_dict(record: SessionRecord) -> dict[str, Any]:
    """
    Convert SessionRecord to JSON-compatible dict.

    Optional fields are omitted when unset to keep history lines short.
    """
    d: dict[str, Any] = {
        "id": record.id,
        "date": record.date,
        "routine_name": record.routine_name,
        "duration": record.duration,
    }
    for key in ("user_id", "mood", "plan_id", "feedback", "difficulty"):
        value = getattr(record, key)
        if value is not None:
            d[key] = value
    return d


def dict_to_session_record(data: dict[str, Any]) -> SessionRecord:
    """
    Convert dict to SessionRecord.

    Raises:
        ValidationError: If data is invalid
    """
    _require_mapping(data, "session record")
    validate_date(data.get("date"))
    validate_non_negative(data.get("duration", 0), "duration")
    if data.get("mood") is not None:
        validate_choice(data["mood"], MOODS, "mood")
    if data.get("difficulty") is not None:
        validate_choice(data["difficulty"], DIFFICULTIES, "difficulty")

    try:
        return SessionRecord(
            id=str(data["id"]),
            date=data["date"],
            routine_name=str(data["routine_name"]),
            duration=int(data["duration"]),
            user_id=data.get("user_id"),
            mood=data.get("mood"),
            plan_id=data.get("plan_id"),
            feedback=data.get("feedback"),
            difficulty=data.get("difficulty"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid session record: {e}") from e


def session_to_json_line(record: SessionRecord) -> str:
    """
    Serialize a session record to a single JSON line.

    Returns:
        JSON string (single line, no trailing newline)
    """
    return json.dumps(session_record_to_dict(record), separators=(",", ":"))


def json_line_to_session(line: str) -> SessionRecord:
    """
    Deserialize a JSON line to a SessionRecord.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"Expected a JSON object, got {type(data).__name__}")
    return dict_to_session_record(data)
