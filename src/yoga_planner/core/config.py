"""
Configuration constants for the plan engine.

All adjustable rule tables are centralized here for easy tuning.
"""

from typing import Final

# =============================================================================
# PLAN CYCLE
# =============================================================================

PLAN_DURATION_WEEKS: Final[int] = 4
DAYS_PER_WEEK: Final[int] = 7

# =============================================================================
# WEEKLY FREQUENCY
# =============================================================================

DEFAULT_FREQUENCY: Final[int] = 3
MIN_FREQUENCY: Final[int] = 2
MAX_FREQUENCY: Final[int] = 7

# Active dayOfWeek slots per frequency (0 = Sunday).
# Single place to revise which weekdays carry a practice.
WEEK_PATTERNS: Final[dict[int, tuple[int, ...]]] = {
    2: (1, 4),                 # Mon, Thu
    3: (1, 3, 5),              # Mon, Wed, Fri
    4: (1, 2, 4, 6),           # Mon, Tue, Thu, Sat
    5: (1, 2, 3, 4, 5),        # Mon-Fri
    6: (1, 2, 3, 4, 5, 6),     # Mon-Sat
    7: (0, 1, 2, 3, 4, 5, 6),  # every day
}

# Fixed rest-day slots with their own semantics
INTENTION_DAY: Final[int] = 0       # Sunday
ACTIVE_RECOVERY_DAY: Final[int] = 3  # Wednesday

# =============================================================================
# INTENSITY PROGRESSION (level -> label per week index)
# =============================================================================

INTENSITY_BY_LEVEL: Final[dict[str, tuple[str, ...]]] = {
    "Beginner": ("Gentle", "Gentle", "Moderate", "Gentle"),
    "Intermediate": ("Moderate", "Moderate", "High", "Moderate"),
    "Advanced": ("Intense", "Intense", "Intense", "Flow"),
}

WEEK_THEMES: Final[tuple[str, ...]] = ("Foundation", "Deepening", "Challenge", "Integration")

# =============================================================================
# DISPLAY NAMES
# =============================================================================

GOAL_LABELS: Final[dict[str, str]] = {
    "Flexibility": "Flexibility",
    "Strength": "Strength",
    "Relaxation": "Relaxation",
    "PainRelief": "Pain Relief",
}

DISCOMFORT_LABELS: Final[dict[str, str]] = {
    "LowerBack": "lower back",
    "Knees": "knees",
    "NeckShoulders": "neck and shoulders",
    "Wrists": "wrists",
}

# =============================================================================
# PERSONALIZATION THRESHOLDS
# =============================================================================

SENIOR_AGE_THRESHOLD: Final[int] = 55    # age above this slows the pacing
HEAVY_WEIGHT_THRESHOLD: Final[int] = 90  # kg above this softens transitions

# =============================================================================
# BODY-AREA ADAPTATION
# =============================================================================

# Discomfort -> catalog body-area tag that triggers an adapted variation
DISCOMFORT_BODY_AREAS: Final[dict[str, str]] = {
    "Wrists": "wrists",
    "Knees": "knees",
    "LowerBack": "lower_back",
    "NeckShoulders": "neck_shoulders",
}

# Label keywords used to infer tags for catalog entries that carry none
BODY_AREA_KEYWORDS: Final[dict[str, tuple[str, ...]]] = {
    "wrists": ("Arm", "Plank"),
    "knees": ("Warrior", "Leg"),
}

# =============================================================================
# PROGRESS
# =============================================================================

COMPLETION_THRESHOLD: Final[int] = 95  # progress % at which a plan counts as completed
