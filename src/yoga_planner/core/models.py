"""
Data models for yoga-planner.

All core dataclasses representing preferences, plans, and the practice log.
Enum-like fields are plain strings constrained by the Literal aliases below;
the engine trusts them, validation happens here at construction time.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, get_args

Level = Literal["Beginner", "Intermediate", "Advanced"]
Goal = Literal["Flexibility", "Strength", "Relaxation", "PainRelief"]
Duration = Literal[15, 30, 45]
Discomfort = Literal["LowerBack", "Knees", "NeckShoulders", "Wrists", "None"]
ActivityType = Literal["Active", "Rest"]
PlanStatus = Literal["active", "completed", "archived"]
Mood = Literal["happy", "calm", "tired", "energized"]
Difficulty = Literal["easy", "ok", "hard"]

LEVELS: tuple[str, ...] = get_args(Level)
GOALS: tuple[str, ...] = get_args(Goal)
DURATIONS: tuple[int, ...] = get_args(Duration)
DISCOMFORTS: tuple[str, ...] = get_args(Discomfort)
MOODS: tuple[str, ...] = get_args(Mood)
DIFFICULTIES: tuple[str, ...] = get_args(Difficulty)


def validate_iso_date(date_str: str) -> None:
    """Raise ValueError unless date_str is a real YYYY-MM-DD date."""
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


@dataclass
class UserPreferences:
    """
    Onboarding answers that drive plan synthesis.

    ``frequency`` is sessions per week. It is not range-checked here:
    the week pattern selector clamps it to [2, 7].
    ``start_date`` is set when a plan becomes active.
    """

    level: Level
    goal: Goal
    duration: Duration
    frequency: int | None = 3
    age: int | None = None
    weight: int | None = None
    discomforts: list[Discomfort] = field(default_factory=list)
    start_date: str | None = None
    user_id: str | None = None

    def __post_init__(self) -> None:
        """Validate preference values."""
        if self.level not in LEVELS:
            raise ValueError(f"Invalid level: {self.level!r}. Must be one of {LEVELS}")
        if self.goal not in GOALS:
            raise ValueError(f"Invalid goal: {self.goal!r}. Must be one of {GOALS}")
        if self.duration not in DURATIONS:
            raise ValueError(f"Invalid duration: {self.duration!r}. Must be one of {DURATIONS}")
        for d in self.discomforts:
            if d not in DISCOMFORTS:
                raise ValueError(f"Invalid discomfort: {d!r}. Must be one of {DISCOMFORTS}")
        if self.age is not None and self.age <= 0:
            raise ValueError("age must be positive")
        if self.weight is not None and self.weight <= 0:
            raise ValueError("weight must be positive")
        if self.start_date is not None:
            validate_iso_date(self.start_date)

    @property
    def active_discomforts(self) -> list[str]:
        """Discomforts other than the explicit "None" answer, in input order."""
        return [d for d in self.discomforts if d != "None"]


@dataclass
class PlanDay:
    """
    One day slot of a plan week.

    ``focus`` is the specific practice label on Active days and a category
    ("Rest", "Mindset", "Light Movement") on Rest days.
    """

    day_of_week: int  # 0 = Sunday .. 6 = Saturday
    activity_type: ActivityType
    practice_name: str | None = None
    focus: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(f"day_of_week must be in 0..6, got {self.day_of_week}")
        if self.activity_type not in ("Active", "Rest"):
            raise ValueError(f"Invalid activity_type: {self.activity_type!r}")

    @property
    def is_active(self) -> bool:
        return self.activity_type == "Active"


@dataclass
class TrainingPlan:
    """
    A multi-week practice plan.

    ``weeks`` holds ``duration_weeks`` lists of 7 PlanDay entries; it is None
    only for legacy single-week plans, in which case ``schedule`` is the
    whole plan. Otherwise ``schedule`` is always ``weeks[0]``.

    ``level`` and ``goal`` record the preferences the plan was built for.
    """

    id: str
    name: str
    description: str
    schedule: list[PlanDay]
    weeks: list[list[PlanDay]] | None = None
    duration_weeks: int = 4
    reasoning: list[str] = field(default_factory=list)
    status: PlanStatus = "active"
    progress: int = 0
    total_planned_sessions: int = 0
    completed_sessions: int = 0
    level: Level | None = None
    goal: Goal | None = None
    user_id: str | None = None

    def __post_init__(self) -> None:
        """Validate plan data."""
        if self.status not in ("active", "completed", "archived"):
            raise ValueError(f"Invalid status: {self.status!r}")
        if not 0 <= self.progress <= 100:
            raise ValueError("progress must be in 0..100")
        if self.completed_sessions < 0:
            raise ValueError("completed_sessions must be non-negative")


@dataclass
class SessionRecord:
    """
    A completed practice, appended to the history log.

    ``plan_id`` links the record to the plan that was active when it was
    completed; only linked records count towards that plan's progress.
    ``difficulty`` is the post-practice rating ("easy", "ok", "hard").
    """

    id: str
    date: str  # ISO format: YYYY-MM-DD
    routine_name: str
    duration: int  # minutes
    user_id: str | None = None
    mood: Mood | None = None
    plan_id: str | None = None
    feedback: str | None = None
    difficulty: Difficulty | None = None

    def __post_init__(self) -> None:
        """Validate session data."""
        validate_iso_date(self.date)

        if self.duration < 0:
            raise ValueError("duration must be non-negative")

        if self.mood is not None and self.mood not in MOODS:
            raise ValueError(f"Invalid mood: {self.mood!r}. Must be one of {MOODS}")

        if self.difficulty is not None and self.difficulty not in DIFFICULTIES:
            raise ValueError(
                f"Invalid difficulty: {self.difficulty!r}. Must be one of {DIFFICULTIES}"
            )
