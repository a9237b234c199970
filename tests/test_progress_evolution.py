"""
Tests for progress tracking and plan evolution.

Progress rule:
  progress = min(100, round_half_up(100 × completed / max(1, total)))
  status   = archived (kept) | completed (progress ≥ 95) | active
"""

import copy
import random

import pytest

from yoga_planner.core.adaptation import adjust_level_for_difficulty, practice_totals
from yoga_planner.core.evolution import create_evolution_plan, evolve_preferences
from yoga_planner.core.models import PlanDay, SessionRecord, TrainingPlan, UserPreferences
from yoga_planner.core.planner import create_personalized_plan
from yoga_planner.core.progress import calculate_plan_progress, progress_percent, resolve_status


# ===========================================================================
# Helpers
# ===========================================================================

def _prefs(**overrides) -> UserPreferences:
    base = dict(goal="Relaxation", level="Beginner", frequency=3, discomforts=[], duration=15)
    base.update(overrides)
    return UserPreferences(**base)


def _records(n: int, plan_id: str | None, start: int = 0) -> list[SessionRecord]:
    """n session records on consecutive March dates linked to plan_id."""
    return [
        SessionRecord(
            id=f"s{start + i}",
            date=f"2026-03-{(i % 28) + 1:02d}",
            routine_name="Gentle Flow",
            duration=15,
            plan_id=plan_id,
        )
        for i in range(n)
    ]


def _plan_with_active_days(active: int) -> TrainingPlan:
    """Hand-built plan with exactly `active` Active days, packed into full weeks."""
    weeks = []
    remaining = active
    while remaining > 0:
        weeks.append([
            PlanDay(day_of_week=d, activity_type="Active" if d < remaining else "Rest")
            for d in range(7)
        ])
        remaining -= 7
    return TrainingPlan(
        id="plan-handbuilt",
        name="Hand-built",
        description="",
        schedule=weeks[0],
        weeks=weeks,
        duration_weeks=len(weeks),
    )


# ===========================================================================
# 1. Progress
# ===========================================================================

class TestProgressPercent:
    """Rounding and capping."""

    @pytest.mark.parametrize(
        "completed, total, expected",
        [
            (0, 12, 0),
            (6, 12, 50),
            (1, 8, 13),     # 12.5 rounds up
            (12, 12, 100),
            (20, 12, 100),  # capped
            (3, 0, 100),    # denominator floored at 1
            (0, 0, 0),
        ],
    )
    def test_values(self, completed, total, expected):
        assert progress_percent(completed, total) == expected


class TestCalculatePlanProgress:
    """Reconciling a plan with the practice log."""

    def test_scenario_c_empty_history(self):
        plan = create_personalized_plan(_prefs())
        result = calculate_plan_progress(plan, [])
        assert result.completed_sessions == 0
        assert result.progress == 0
        assert result.status == "active"

    def test_scenario_d_all_sessions_done(self):
        plan = create_personalized_plan(_prefs())
        assert plan.total_planned_sessions == 12
        result = calculate_plan_progress(plan, _records(12, plan.id))
        assert result.progress == 100
        assert result.status == "completed"

    def test_only_linked_records_count(self):
        plan = create_personalized_plan(_prefs())
        history = _records(3, plan.id) + _records(4, "plan-other", start=10) + _records(2, None, start=20)
        result = calculate_plan_progress(plan, history)
        assert result.completed_sessions == 3
        assert result.progress == 25

    def test_completion_threshold(self):
        """19/20 = 95% completes; 18/20 = 90% does not."""
        plan = create_personalized_plan(_prefs(frequency=5))
        assert plan.total_planned_sessions == 20
        assert calculate_plan_progress(plan, _records(19, plan.id)).status == "completed"
        assert calculate_plan_progress(plan, _records(18, plan.id)).status == "active"

    def test_just_below_threshold(self):
        """26/28 = 92.9% → 93, still active; 27/28 = 96.4% → completed."""
        plan = create_personalized_plan(_prefs(frequency=7))
        low = calculate_plan_progress(plan, _records(26, plan.id))
        assert (low.progress, low.status) == (93, "active")
        high = calculate_plan_progress(plan, _records(27, plan.id))
        assert (high.progress, high.status) == (96, "completed")

    def test_ninety_four_percent_is_active(self):
        """47/50 rounds to exactly 94, one point under the threshold."""
        plan = _plan_with_active_days(50)
        result = calculate_plan_progress(plan, _records(47, plan.id))
        assert (result.total_planned_sessions, result.progress, result.status) == (50, 94, "active")
        result = calculate_plan_progress(plan, _records(48, plan.id))
        assert (result.progress, result.status) == (96, "completed")

    @pytest.mark.parametrize(
        "completed, status",
        [(94, "active"), (95, "completed"), (100, "completed")],
    )
    def test_threshold_out_of_one_hundred(self, completed, status):
        assert resolve_status("active", progress_percent(completed, 100)) == status

    def test_archived_is_preserved(self):
        plan = create_personalized_plan(_prefs())
        plan.status = "archived"
        result = calculate_plan_progress(plan, _records(12, plan.id))
        assert result.progress == 100
        assert result.status == "archived"

    def test_completed_reverts_when_history_shrinks(self):
        plan = create_personalized_plan(_prefs())
        done = calculate_plan_progress(plan, _records(12, plan.id))
        assert calculate_plan_progress(done, _records(2, plan.id)).status == "active"

    def test_total_is_recounted(self):
        """A stale stored total is ignored."""
        plan = create_personalized_plan(_prefs())
        plan.total_planned_sessions = 999
        result = calculate_plan_progress(plan, _records(6, plan.id))
        assert result.total_planned_sessions == 12
        assert result.progress == 50

    def test_legacy_plan_passes_through(self):
        plan = create_personalized_plan(_prefs())
        plan.weeks = None
        result = calculate_plan_progress(plan, _records(5, plan.id))
        assert result is plan

    def test_pure_function(self):
        """Same inputs → same output, and the input plan is untouched."""
        plan = create_personalized_plan(_prefs())
        snapshot = copy.deepcopy(plan)
        history = _records(4, plan.id)
        first = calculate_plan_progress(plan, history)
        second = calculate_plan_progress(plan, history)
        assert first == second
        assert plan == snapshot

    def test_monotonic(self):
        plan = create_personalized_plan(_prefs())
        previous = calculate_plan_progress(plan, [])
        for n in range(1, 16):
            current = calculate_plan_progress(plan, _records(n, plan.id))
            assert current.completed_sessions >= previous.completed_sessions
            assert current.progress >= previous.progress
            assert 0 <= current.progress <= 100
            if current.progress == 100:
                assert current.completed_sessions >= current.total_planned_sessions
            previous = current


# ===========================================================================
# 2. Evolution
# ===========================================================================

class TestEvolvePreferences:
    """Single-step progression rule."""

    def test_beginner_levels_up(self):
        new, reason = evolve_preferences(_prefs(level="Beginner", goal="Strength"))
        assert (new.level, new.goal) == ("Intermediate", "Strength")
        assert "mastered the basics" in reason

    def test_intermediate_levels_up(self):
        new, reason = evolve_preferences(_prefs(level="Intermediate", goal="Flexibility"))
        assert (new.level, new.goal) == ("Advanced", "Flexibility")
        assert "push limits" in reason

    @pytest.mark.parametrize(
        "goal, expected",
        [
            ("Strength", "Flexibility"),
            ("Flexibility", "Strength"),
            ("Relaxation", "Relaxation"),
            ("PainRelief", "Relaxation"),
        ],
    )
    def test_advanced_rotates_goal(self, goal, expected):
        new, reason = evolve_preferences(_prefs(level="Advanced", goal=goal))
        assert new.level == "Advanced"
        assert new.goal == expected
        assert reason.startswith("Balance is key")

    def test_other_fields_carried_over(self):
        prefs = _prefs(age=60, weight=70, frequency=4, discomforts=["Knees"], start_date="2026-01-05")
        new, _ = evolve_preferences(prefs)
        assert new.age == 60
        assert new.weight == 70
        assert new.frequency == 4
        assert new.discomforts == ["Knees"]
        assert new.start_date == "2026-01-05"
        assert prefs.level == "Beginner"


class TestCreateEvolutionPlan:
    """Next-cycle plan."""

    def test_beginner_plan(self):
        prefs = _prefs(level="Beginner", goal="Strength")
        current = create_personalized_plan(prefs)
        evolved = create_evolution_plan(current, prefs)
        assert evolved.level == "Intermediate"
        assert evolved.goal == "Strength"
        assert evolved.name == "Evolution: Strength Intermediate"
        assert current.name in evolved.description
        assert evolved.reasoning[0] == "You mastered the basics, intensifying."
        assert evolved.id != current.id

    def test_advanced_strength_rotates(self):
        prefs = _prefs(level="Advanced", goal="Strength")
        evolved = create_evolution_plan(create_personalized_plan(prefs), prefs)
        assert evolved.goal == "Flexibility"
        assert evolved.level == "Advanced"
        assert evolved.name == "Evolution: Flexibility Advanced"
        assert "Flexibility" in evolved.reasoning[0]

    def test_fresh_tracking(self):
        prefs = _prefs()
        evolved = create_evolution_plan(create_personalized_plan(prefs), prefs, rng=random.Random(1))
        assert evolved.status == "active"
        assert evolved.progress == 0
        assert evolved.completed_sessions == 0
        assert len(evolved.weeks) == 4
        assert evolved.schedule is evolved.weeks[0]
        assert evolved.total_planned_sessions == 12

    def test_reasoning_keeps_synthesized_sentences(self):
        prefs = _prefs(discomforts=["Knees"])
        evolved = create_evolution_plan(create_personalized_plan(prefs), prefs)
        assert any(s.startswith("For your knees") for s in evolved.reasoning[1:])


# ===========================================================================
# 3. Difficulty feedback
# ===========================================================================

class TestAdjustLevelForDifficulty:
    """One post-practice rating moves the level at most one step."""

    @pytest.mark.parametrize(
        "level, difficulty, expected",
        [
            ("Advanced", "hard", "Intermediate"),
            ("Intermediate", "hard", "Beginner"),
            ("Beginner", "easy", "Intermediate"),
            ("Intermediate", "easy", "Advanced"),
        ],
    )
    def test_level_moves(self, level, difficulty, expected):
        prefs = _prefs(level=level, discomforts=["Knees"], age=60)
        new, message = adjust_level_for_difficulty(prefs, difficulty)
        assert new.level == expected
        assert expected in message
        assert (new.goal, new.discomforts, new.age) == ("Relaxation", ["Knees"], 60)
        assert prefs.level == level

    @pytest.mark.parametrize(
        "level, difficulty",
        [
            ("Beginner", "hard"),
            ("Advanced", "easy"),
            ("Intermediate", "ok"),
            ("Intermediate", None),
        ],
    )
    def test_level_unchanged(self, level, difficulty):
        prefs = _prefs(level=level)
        new, message = adjust_level_for_difficulty(prefs, difficulty)
        assert new is prefs
        assert message is None


class TestPracticeTotals:
    def test_empty(self):
        assert practice_totals([]) == (0, 0)

    def test_counts_every_session(self):
        history = _records(3, "plan-a") + _records(2, None, start=10)
        assert practice_totals(history) == (5, 75)
