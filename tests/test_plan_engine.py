"""
Tests for the plan engine: week patterns, unique picking, week generation,
and plan synthesis.

Label assignment is random, so tests assert structural properties
(counts, pool membership, fixed-slot semantics) and use a seeded
random.Random only where a repeatable draw is needed.

Every bundled goal has 6 active labels, so at 3 sessions/week the first two
weeks together use every label exactly once.
"""

import random

import pytest

from yoga_planner.core.config import WEEK_PATTERNS
from yoga_planner.core.focuses.registry import get_goal_catalog
from yoga_planner.core.models import UserPreferences
from yoga_planner.core.planner import (
    build_plan_reasoning,
    clamp_frequency,
    count_active_days,
    create_personalized_plan,
    generate_varied_week,
    get_intensity,
    get_week_pattern,
    pick_unique,
)


# ===========================================================================
# Helpers
# ===========================================================================

def _prefs(**overrides) -> UserPreferences:
    """Scenario A preferences with optional overrides."""
    base = dict(goal="Relaxation", level="Beginner", frequency=3, discomforts=[], duration=15)
    base.update(overrides)
    return UserPreferences(**base)


def _active_indices(week) -> list[int]:
    return [d.day_of_week for d in week if d.activity_type == "Active"]


def _base_label(name: str) -> str:
    return name.removesuffix(" (adapted)")


# ===========================================================================
# 1. Week pattern
# ===========================================================================

class TestWeekPattern:
    """Frequency → 7-slot pattern lookup."""

    @pytest.mark.parametrize(
        "frequency, expected",
        [
            (2, [1, 4]),
            (3, [1, 3, 5]),
            (4, [1, 2, 4, 6]),
            (5, [1, 2, 3, 4, 5]),
            (6, [1, 2, 3, 4, 5, 6]),
            (7, [0, 1, 2, 3, 4, 5, 6]),
        ],
    )
    def test_table(self, frequency, expected):
        pattern = get_week_pattern(frequency)
        assert len(pattern) == 7
        assert [i for i, active in enumerate(pattern) if active] == expected

    def test_out_of_range_is_clamped(self):
        """Frequencies outside [2, 7] never error."""
        assert get_week_pattern(0) == get_week_pattern(2)
        assert get_week_pattern(-5) == get_week_pattern(2)
        assert get_week_pattern(12) == get_week_pattern(7)

    def test_missing_frequency_defaults_to_three(self):
        assert clamp_frequency(None) == 3
        assert get_week_pattern(None) == get_week_pattern(3)

    def test_active_count_matches_frequency(self):
        for frequency, days in WEEK_PATTERNS.items():
            assert sum(get_week_pattern(frequency)) == frequency == len(days)


# ===========================================================================
# 2. Unique picker
# ===========================================================================

class TestPickUnique:
    """Selection that prefers unused labels."""

    POOL = ["a", "b", "c", "d", "e"]

    def test_prefers_unused(self):
        """With enough unused labels, only unused ones are returned."""
        used = {"a", "b"}
        for seed in range(20):
            picked = pick_unique(self.POOL, used, 3, random.Random(seed))
            assert sorted(picked) == ["c", "d", "e"]

    def test_falls_back_to_full_pool(self):
        """Too few unused labels: draw from the whole pool."""
        used = {"a", "b", "c", "d"}
        picked = pick_unique(self.POOL, used, 3, random.Random(1))
        assert len(picked) == 3
        assert len(set(picked)) == 3
        assert set(picked) <= set(self.POOL)

    def test_does_not_mutate_used(self):
        used = {"a"}
        pick_unique(self.POOL, used, 2, random.Random(0))
        assert used == {"a"}

    def test_no_duplicates_from_duplicated_pool(self):
        picked = pick_unique(["x", "x", "y", "y", "z"], set(), 3, random.Random(3))
        assert sorted(picked) == ["x", "y", "z"]

    def test_count_larger_than_pool(self):
        """Cannot return more distinct labels than the pool has."""
        picked = pick_unique(["x", "y"], set(), 5, random.Random(0))
        assert sorted(picked) == ["x", "y"]

    def test_seeded_draw_is_repeatable(self):
        first = pick_unique(self.POOL, set(), 3, random.Random(42))
        second = pick_unique(self.POOL, set(), 3, random.Random(42))
        assert first == second


# ===========================================================================
# 3. Week generator
# ===========================================================================

class TestGenerateVariedWeek:
    """One week of the plan."""

    def test_week_shape(self):
        """7 entries, one per day 0..6, in order."""
        week = generate_varied_week(0, "Strength", [], "Beginner", 3, set())
        assert len(week) == 7
        assert [d.day_of_week for d in week] == list(range(7))

    def test_active_days_use_goal_pool(self):
        week = generate_varied_week(0, "Flexibility", [], "Beginner", 5, set())
        pool = set(get_goal_catalog("Flexibility").active_labels)
        actives = [d for d in week if d.activity_type == "Active"]
        assert len(actives) == 5
        for d in actives:
            assert d.practice_name in pool
            assert d.focus == d.practice_name
            assert d.practice_name in d.description

    def test_used_focuses_updated(self):
        used: set[str] = set()
        week = generate_varied_week(0, "Strength", [], "Beginner", 3, used)
        drawn = {d.practice_name for d in week if d.activity_type == "Active"}
        assert drawn <= used

    def test_sunday_is_weekly_intention(self):
        week = generate_varied_week(1, "Relaxation", [], "Beginner", 3, set())
        sunday = week[0]
        assert sunday.activity_type == "Rest"
        assert sunday.practice_name == "Weekly Intention"
        assert sunday.focus == "Mindset"
        assert "Deepening" in sunday.description

    def test_wednesday_active_recovery_when_rest(self):
        """Frequency 2 (Mon, Thu) leaves Wednesday as a rest day."""
        week = generate_varied_week(0, "Strength", [], "Beginner", 2, set())
        wednesday = week[3]
        assert wednesday.activity_type == "Rest"
        assert wednesday.practice_name == "Active Recovery"
        assert wednesday.focus == "Light Movement"
        assert "walk" in wednesday.description

    def test_wednesday_is_practice_when_active(self):
        week = generate_varied_week(0, "Strength", [], "Beginner", 3, set())
        assert week[3].activity_type == "Active"

    def test_plain_rest_day(self):
        week = generate_varied_week(0, "Strength", [], "Beginner", 3, set())
        tuesday = week[2]
        assert tuesday.activity_type == "Rest"
        assert tuesday.practice_name == "Recovery"
        assert tuesday.focus == "Rest"
        assert tuesday.description == "Free day for recovery."

    def test_every_day_active_at_seven(self):
        week = generate_varied_week(0, "Strength", [], "Advanced", 7, set())
        assert all(d.activity_type == "Active" for d in week)

    def test_intensity_in_description(self):
        week = generate_varied_week(2, "Strength", [], "Intermediate", 3, set())
        for d in week:
            if d.activity_type == "Active":
                assert d.description.startswith("High intensity session")

    def test_wrist_adaptation(self):
        """Wrist-loading labels are marked adapted when wrists hurt."""
        catalog = get_goal_catalog("Strength")
        wrist_labels = {e.label for e in catalog.active if e.loads("wrists")}
        used: set[str] = set()
        days = []
        for week_index in range(2):
            days += generate_varied_week(week_index, "Strength", ["Wrists"], "Beginner", 3, used)
        actives = [d for d in days if d.activity_type == "Active"]

        adapted = [d for d in actives if _base_label(d.practice_name) in wrist_labels]
        assert adapted, "two weeks at frequency 3 cover the whole pool"
        for d in adapted:
            assert d.practice_name.endswith("(adapted)")
            assert "wrist" in d.description.lower()
        for d in actives:
            if _base_label(d.practice_name) not in wrist_labels:
                assert "(adapted)" not in d.practice_name

    def test_knee_note_on_leg_labels(self):
        """Every label with a knee keyword gets the knee-safe note."""
        used: set[str] = set()
        days = []
        for week_index in range(4):
            days += generate_varied_week(week_index, "PainRelief", ["Knees"], "Beginner", 7, used)

        leg_days = [d for d in days if d.activity_type == "Active" and "Leg" in d.practice_name]
        assert leg_days
        for d in leg_days:
            assert "Knee-safe variation" in d.description

    def test_no_adaptation_without_discomfort(self):
        week = generate_varied_week(0, "Strength", [], "Beginner", 7, set())
        for d in week:
            assert "(adapted)" not in (d.practice_name or "")
            assert "Knee-safe" not in d.description


class TestIntensity:
    """Level × week → intensity label."""

    @pytest.mark.parametrize(
        "level, expected",
        [
            ("Beginner", ["Gentle", "Gentle", "Moderate", "Gentle"]),
            ("Intermediate", ["Moderate", "Moderate", "High", "Moderate"]),
            ("Advanced", ["Intense", "Intense", "Intense", "Flow"]),
        ],
    )
    def test_table(self, level, expected):
        assert [get_intensity(level, i) for i in range(4)] == expected


# ===========================================================================
# 4. Plan synthesis
# ===========================================================================

class TestCreatePersonalizedPlan:
    """Full 4-week plan."""

    def test_plan_shape(self):
        plan = create_personalized_plan(_prefs())
        assert len(plan.weeks) == 4
        assert plan.schedule is plan.weeks[0]
        assert plan.duration_weeks == 4
        for week in plan.weeks:
            assert len(week) == 7
            assert {d.day_of_week for d in week} == set(range(7))

    def test_active_days_stable_across_weeks(self):
        """Frequency 3: the same 3 weekday slots are active every week."""
        plan = create_personalized_plan(_prefs(goal="Strength"))
        for week in plan.weeks:
            assert _active_indices(week) == [1, 3, 5]

    @pytest.mark.parametrize("frequency, total", [(2, 8), (3, 12), (5, 20), (7, 28), (None, 12)])
    def test_total_planned_sessions(self, frequency, total):
        plan = create_personalized_plan(_prefs(frequency=frequency))
        assert plan.total_planned_sessions == count_active_days(plan.weeks) == total

    def test_initial_tracking_fields(self):
        plan = create_personalized_plan(_prefs())
        assert plan.status == "active"
        assert plan.progress == 0
        assert plan.completed_sessions == 0

    def test_name_and_id(self):
        plan = create_personalized_plan(_prefs(goal="PainRelief", level="Intermediate"))
        assert plan.name == "Pain Relief Journey (Intermediate)"
        assert plan.id.startswith("plan-painrelief-")
        assert plan.goal == "PainRelief"
        assert plan.level == "Intermediate"

    def test_ids_unique(self):
        ids = {create_personalized_plan(_prefs()).id for _ in range(50)}
        assert len(ids) == 50

    def test_first_two_weeks_do_not_repeat(self):
        """Used-focus tracking: 6 draws from a 6-label pool are all distinct."""
        plan = create_personalized_plan(_prefs(goal="Flexibility"))
        labels = [
            d.practice_name
            for week in plan.weeks[:2]
            for d in week
            if d.activity_type == "Active"
        ]
        assert sorted(labels) == sorted(get_goal_catalog("Flexibility").active_labels)

    def test_seeded_plans_match(self):
        a = create_personalized_plan(_prefs(), rng=random.Random(7))
        b = create_personalized_plan(_prefs(), rng=random.Random(7))
        assert a.weeks == b.weeks
        assert a.id != b.id

    def test_description_mentions_discomforts(self):
        plain = create_personalized_plan(_prefs())
        adapted = create_personalized_plan(_prefs(discomforts=["Knees", "Wrists"]))
        assert "Adapted to care for" not in plain.description
        assert "knees, wrists" in adapted.description

    def test_none_discomfort_is_ignored(self):
        plan = create_personalized_plan(_prefs(discomforts=["None"]))
        assert "Adapted to care for" not in plan.description

    def test_senior_pacing_clause(self):
        plan = create_personalized_plan(_prefs(age=60))
        assert "Paced gently" in plan.description
        young = create_personalized_plan(_prefs(age=55))
        assert "Paced gently" not in young.description


class TestReasoning:
    """Ordered explanation sentences."""

    def test_scenario_a(self):
        """Goal sentence and frequency sentence, no discomfort sentence."""
        reasoning = build_plan_reasoning(_prefs())
        assert len(reasoning) == 2
        assert "parasympathetic" in reasoning[0]
        assert reasoning[-1].startswith("3 sessions per week of 15 minutes")
        assert not any(s.startswith("For your") for s in reasoning)

    def test_scenario_b(self):
        """Exactly one knee sentence, and knee-tagged sessions carry the note."""
        prefs = _prefs(discomforts=["Knees"])
        plan = create_personalized_plan(prefs)

        knee_sentences = [s for s in plan.reasoning if s.startswith("For your knees")]
        assert len(knee_sentences) == 1

        catalog = get_goal_catalog("Relaxation")
        knee_labels = {e.label for e in catalog.active if e.loads("knees")}
        knee_days = [
            d
            for week in plan.weeks
            for d in week
            if d.activity_type == "Active" and d.practice_name in knee_labels
        ]
        assert knee_days
        for d in knee_days:
            assert "Knee-safe variation" in d.description

    def test_discomfort_order(self):
        reasoning = build_plan_reasoning(
            _prefs(discomforts=["Wrists", "LowerBack", "Knees", "NeckShoulders"])
        )
        prefixes = [s.split(":")[0] for s in reasoning if s.startswith("For your")]
        assert prefixes == [
            "For your knees",
            "For your lower back",
            "For your neck and shoulders",
            "For your wrists",
        ]

    def test_age_and_weight(self):
        reasoning = build_plan_reasoning(_prefs(age=62, weight=95))
        assert any("62" in s for s in reasoning)
        assert any("Transitions are softened" in s for s in reasoning)

    def test_weight_sentence_skipped_for_strength(self):
        reasoning = build_plan_reasoning(_prefs(goal="Strength", weight=95))
        assert not any("Transitions are softened" in s for s in reasoning)

    def test_thresholds_are_exclusive(self):
        reasoning = build_plan_reasoning(_prefs(age=55, weight=90))
        assert len(reasoning) == 2

    def test_frequency_sentence_uses_clamped_value(self):
        reasoning = build_plan_reasoning(_prefs(frequency=10, duration=45))
        assert reasoning[-1].startswith("7 sessions per week of 45 minutes")
