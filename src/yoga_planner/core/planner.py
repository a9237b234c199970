"""
Plan generation for yoga-planner.

Synthesizes a 4-week practice plan from the user's preferences.  The
weekly day pattern is fixed by the requested frequency; the focus of each
practice day is drawn from the goal's catalog so that labels vary across
weeks and repeat only once the pool is exhausted.  Discomforts adapt the
content of days whose focus loads the affected body area.

Randomness only affects which labels land on which days.  Every entry point
accepts an optional ``random.Random`` so callers can make draws repeatable.
"""

import itertools
import random
import uuid
from collections.abc import Iterable, Sequence

from .config import (
    ACTIVE_RECOVERY_DAY,
    DAYS_PER_WEEK,
    DEFAULT_FREQUENCY,
    DISCOMFORT_BODY_AREAS,
    DISCOMFORT_LABELS,
    GOAL_LABELS,
    HEAVY_WEIGHT_THRESHOLD,
    INTENSITY_BY_LEVEL,
    INTENTION_DAY,
    MAX_FREQUENCY,
    MIN_FREQUENCY,
    PLAN_DURATION_WEEKS,
    SENIOR_AGE_THRESHOLD,
    WEEK_PATTERNS,
    WEEK_THEMES,
)
from .focuses.registry import get_goal_catalog
from .models import PlanDay, TrainingPlan, UserPreferences

GOAL_REASONS: dict[str, str] = {
    "Flexibility": (
        "The flexibility focus releases accumulated muscle stiffness "
        "and steadily improves your range of motion."
    ),
    "Strength": (
        "We prioritize isometric holds to build muscular strength "
        "without excessive impact on the joints."
    ),
    "Relaxation": (
        "We include more pauses and long exhalations to activate your "
        "parasympathetic (relaxation) nervous system."
    ),
    "PainRelief": (
        "The plan focuses on gentle mobility and postural correction "
        "to address the root cause of your pain."
    ),
}

# Order matters: reasons are emitted in this order
DISCOMFORT_REASONS: dict[str, str] = {
    "Knees": (
        "For your knees: we selected variations that avoid deep squats "
        "and direct pressure on the kneecap."
    ),
    "LowerBack": (
        "For your lower back: we emphasize core strengthening to support "
        "the spine and avoid extreme backbends."
    ),
    "NeckShoulders": (
        "For your neck and shoulders: we added trapezius stretches and "
        "avoid overloading the arms."
    ),
    "Wrists": (
        "For your wrists: many planks are replaced with forearm support "
        "to reduce pressure on the wrist joint."
    ),
}

WRIST_ADAPTATION_NOTE = "Reduced wrist load: use forearm support instead of full weight on the hands."
KNEE_ADAPTATION_NOTE = "Knee-safe variation: pad the back knee and avoid deep knee bends."


def clamp_frequency(frequency: int | None) -> int:
    """Return frequency clamped to [MIN_FREQUENCY, MAX_FREQUENCY] (None → default)."""
    if frequency is None:
        frequency = DEFAULT_FREQUENCY
    return max(MIN_FREQUENCY, min(MAX_FREQUENCY, frequency))


def get_week_pattern(frequency: int | None) -> list[bool]:
    """
    Map a weekly frequency to its 7-slot active-day pattern.

    Args:
        frequency: Requested sessions per week (clamped to [2, 7])

    Returns:
        List of 7 booleans indexed by day of week (0 = Sunday), True = Active
    """
    active_days = WEEK_PATTERNS[clamp_frequency(frequency)]
    return [day in active_days for day in range(DAYS_PER_WEEK)]


def get_intensity(level: str, week_index: int) -> str:
    """Return the intensity label for a level in the given 0-based week."""
    row = INTENSITY_BY_LEVEL.get(level, INTENSITY_BY_LEVEL["Beginner"])
    return row[week_index % len(row)]


def pick_unique(
    pool: Sequence[str],
    used: Iterable[str],
    count: int,
    rng: random.Random | None = None,
) -> list[str]:
    """
    Pick ``count`` labels, preferring ones not yet used.

    If fewer than ``count`` unused labels remain, the whole pool is drawn
    from instead (``used`` is bypassed, not reset).  The caller records the
    returned labels in its used set; this function never mutates ``used``.

    Args:
        pool: Candidate labels
        used: Labels already drawn earlier in the cycle
        count: Number of labels wanted
        rng: Random source (default: module-level ``random``)

    Returns:
        Up to ``count`` distinct labels in random order
    """
    if rng is None:
        rng = random  # type: ignore[assignment]

    unique_pool = list(dict.fromkeys(pool))
    used_set = set(used)
    available = [label for label in unique_pool if label not in used_set]

    source = available if len(available) >= count else unique_pool
    shuffled = list(source)
    rng.shuffle(shuffled)
    return shuffled[:count]


def _active_day(
    day: int,
    label: str,
    intensity: str,
    goal: str,
    discomforts: Sequence[str],
) -> PlanDay:
    """Build an Active day, adapting it to discomforts via catalog body-area tags."""
    entry = get_goal_catalog(goal).entry(label)

    def loads(discomfort: str) -> bool:
        return (
            entry is not None
            and discomfort in discomforts
            and entry.loads(DISCOMFORT_BODY_AREAS[discomfort])
        )

    name = label
    description = f"{intensity} intensity session focused on {label}."

    if loads("Wrists"):
        name = f"{label} (adapted)"
        description += f" {WRIST_ADAPTATION_NOTE}"
    if loads("Knees"):
        description += f" {KNEE_ADAPTATION_NOTE}"

    return PlanDay(
        day_of_week=day,
        activity_type="Active",
        practice_name=name,
        focus=name,
        description=description,
    )


def _rest_day(day: int, week_index: int, recovery_focus: str | None) -> PlanDay:
    """Build a Rest day, with the Sunday and Wednesday special slots."""
    if day == INTENTION_DAY:
        theme = WEEK_THEMES[week_index % len(WEEK_THEMES)]
        return PlanDay(
            day_of_week=day,
            activity_type="Rest",
            practice_name="Weekly Intention",
            focus="Mindset",
            description=(
                f"Week {week_index + 1}: {theme}. Take a quiet moment to set "
                f"your intention for the {theme.lower()} week ahead."
            ),
        )

    if day == ACTIVE_RECOVERY_DAY:
        description = "Light walk or free stretching to keep the body moving."
        if recovery_focus:
            description += f" Optional: a short {recovery_focus} practice."
        return PlanDay(
            day_of_week=day,
            activity_type="Rest",
            practice_name="Active Recovery",
            focus="Light Movement",
            description=description,
        )

    return PlanDay(
        day_of_week=day,
        activity_type="Rest",
        practice_name="Recovery",
        focus="Rest",
        description="Free day for recovery.",
    )


def generate_varied_week(
    week_index: int,
    goal: str,
    discomforts: Sequence[str],
    level: str,
    frequency: int | None,
    used_focuses: set[str],
    rng: random.Random | None = None,
) -> list[PlanDay]:
    """
    Build one week of the plan.

    Active slots come from the frequency pattern; their focus labels are
    drawn from the goal's active pool, preferring labels not yet in
    ``used_focuses``.  Drawn labels are added to ``used_focuses`` so the
    next week avoids them.

    Args:
        week_index: 0-based week within the cycle
        goal: Practice goal (selects the focus pool)
        discomforts: Reported discomforts
        level: Practice level (selects the intensity label)
        frequency: Sessions per week (clamped to [2, 7])
        used_focuses: Labels drawn earlier in this cycle (updated in place)
        rng: Random source

    Returns:
        7 PlanDay entries, index == day_of_week (0 = Sunday)
    """
    catalog = get_goal_catalog(goal)
    intensity = get_intensity(level, week_index)
    pattern = get_week_pattern(frequency)

    labels = pick_unique(catalog.active_labels, used_focuses, sum(pattern), rng)
    used_focuses.update(labels)

    recovery_focus: str | None = None
    if not pattern[ACTIVE_RECOVERY_DAY]:
        picked = pick_unique(catalog.restorative_labels, used_focuses, 1, rng)
        if picked:
            recovery_focus = picked[0]
            used_focuses.add(recovery_focus)

    week: list[PlanDay] = []
    # a pool smaller than the active-slot count repeats labels within the week
    next_label = itertools.cycle(labels)
    for day in range(DAYS_PER_WEEK):
        if pattern[day]:
            week.append(_active_day(day, next(next_label), intensity, goal, discomforts))
        else:
            week.append(_rest_day(day, week_index, recovery_focus))

    return week


def count_active_days(weeks: Iterable[Sequence[PlanDay]]) -> int:
    """Number of Active days across all given weeks."""
    return sum(1 for week in weeks for day in week if day.activity_type == "Active")


def build_plan_description(prefs: UserPreferences, weeks: int = PLAN_DURATION_WEEKS) -> str:
    """Summary sentence(s) for a plan synthesized from ``prefs``."""
    goal_label = GOAL_LABELS.get(prefs.goal, prefs.goal)
    description = (
        f"A balanced {weeks}-week plan focused on {goal_label.lower()} "
        f"for the {prefs.level.lower()} level."
    )

    discomforts = prefs.active_discomforts
    if discomforts:
        areas = ", ".join(DISCOMFORT_LABELS.get(d, d) for d in discomforts)
        description += f" Adapted to care for: {areas}."

    if prefs.age is not None and prefs.age > SENIOR_AGE_THRESHOLD:
        description += " Paced gently to protect your joints and balance."

    return description


def build_plan_reasoning(prefs: UserPreferences) -> list[str]:
    """
    Explain the choices behind a plan, one sentence per applicable rule.

    Order: goal, discomforts, age, weight, frequency/duration.
    The weight sentence is skipped for Strength plans.
    """
    reasoning: list[str] = []

    if prefs.goal in GOAL_REASONS:
        reasoning.append(GOAL_REASONS[prefs.goal])

    for discomfort, sentence in DISCOMFORT_REASONS.items():
        if discomfort in prefs.discomforts:
            reasoning.append(sentence)

    if prefs.age is not None and prefs.age > SENIOR_AGE_THRESHOLD:
        reasoning.append(
            f"Considering your age ({prefs.age}), the pace is steady to promote "
            "joint longevity and balance."
        )

    if (
        prefs.weight is not None
        and prefs.weight > HEAVY_WEIGHT_THRESHOLD
        and prefs.goal != "Strength"
    ):
        reasoning.append(
            "Transitions are softened to keep the practice comfortable and safe."
        )

    frequency = clamp_frequency(prefs.frequency)
    reasoning.append(
        f"{frequency} sessions per week of {prefs.duration} minutes keep you consistent; "
        "regular practice matters more than sporadic intensity."
    )

    return reasoning


def new_plan_id(goal: str) -> str:
    """Collision-resistant plan identifier."""
    return f"plan-{goal.lower()}-{uuid.uuid4().hex}"


def create_personalized_plan(
    prefs: UserPreferences,
    rng: random.Random | None = None,
) -> TrainingPlan:
    """
    Synthesize a 4-week practice plan.

    A fresh used-focus set is threaded through the four weeks so labels
    repeat only once the goal's pool is exhausted.

    Args:
        prefs: User preferences (frequency defaults to 3 when absent)
        rng: Random source for focus draws

    Returns:
        New active TrainingPlan with progress 0
    """
    used_focuses: set[str] = set()
    weeks = [
        generate_varied_week(
            week_index,
            prefs.goal,
            prefs.discomforts,
            prefs.level,
            prefs.frequency,
            used_focuses,
            rng,
        )
        for week_index in range(PLAN_DURATION_WEEKS)
    ]

    goal_label = GOAL_LABELS.get(prefs.goal, prefs.goal)
    return TrainingPlan(
        id=new_plan_id(prefs.goal),
        name=f"{goal_label} Journey ({prefs.level})",
        description=build_plan_description(prefs),
        schedule=weeks[0],
        weeks=weeks,
        duration_weeks=PLAN_DURATION_WEEKS,
        reasoning=build_plan_reasoning(prefs),
        status="active",
        progress=0,
        total_planned_sessions=count_active_days(weeks),
        completed_sessions=0,
        level=prefs.level,
        goal=prefs.goal,
        user_id=prefs.user_id,
    )
