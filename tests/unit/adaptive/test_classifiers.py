"""
Unit tests for the rule classifiers.

Each classifier is exercised at and around its thresholds; payload
numbers follow half-up rounding.
"""

import datetime

import pytest

from app.adaptive.classifiers import (
    acwr_suggestion,
    build_readiness_rationale,
    compliance_suggestions,
    exercise_progression_suggestions,
    progression_step,
    progressive_overload_suggestions,
    readiness_suggestions,
    rpe_overreach_streak,
    rpe_overreach_suggestion,
    sort_suggestions,
)
from app.schemas.suggestion import (
    CheckIn,
    IncreaseVolume,
    IncreaseWeight,
    InsertDeload,
    ReduceSession,
    ReduceVolume,
    SimplifyProgram,
    Suggestion,
    SwapToRecovery,
)
from app.schemas.training import PrescribedExercise
from fakes import make_assignments, make_outcome, make_readiness, make_session

TODAY = datetime.date(2026, 3, 2)


# ======================================================================
# Helpers
# ======================================================================


def _make_prescribed(weight: float = 100.0, reps: str = "5", exercise_id: int = 1,
                     name: str = "Back Squat") -> PrescribedExercise:
    return PrescribedExercise(id=exercise_id, name=name, sets=3, reps=reps, weight_kg=weight)


def _make_completion(rpe: float, weight: float = 100.0, reps: str = "5", prescribed_weight: float = 100.0):
    prescribed = _make_prescribed(weight=prescribed_weight)
    return make_session(1, datetime.datetime(2026, 3, 1), results=[
        make_outcome(sets=3, reps=reps, weight=weight, rpe=rpe, prescribed=prescribed),
    ])


def _make_rpe_history(*rpes, target=7.0):
    """Completions newest first, one day apart."""
    start = datetime.datetime(2026, 3, 1)
    return [
        make_session(i + 1, start - datetime.timedelta(days=i), rpe=rpe, target_rpe=target)
        for i, rpe in enumerate(rpes)
    ]


def _make_suggestion(priority: str, title: str = "") -> Suggestion:
    return Suggestion(
        type="compliance_alert",
        priority=priority,
        title=title or priority,
        description="",
        rationale="",
        recommendation=CheckIn(compliance_rate=60, sessions_missed=1),
        confidence=70,
        context_type="athlete",
        context_id=1,
    )


# ======================================================================
# Progressive overload
# ======================================================================


class TestProgressiveOverload:

    def test_easy_session_suggests_increase(self):
        (s,) = progressive_overload_suggestions([_make_completion(rpe=7.0)])
        assert s.type == "progressive_overload"
        assert s.priority == "low"
        assert s.confidence == 70
        assert isinstance(s.recommendation, IncreaseWeight)
        assert s.recommendation.current_weight == 100.0
        assert s.recommendation.suggested_weight == 102.5
        assert s.context_type == "exercise"
        assert "Consider +2.5kg (3%)" in s.description

    def test_very_easy_session_has_high_confidence(self):
        (s,) = progressive_overload_suggestions([_make_completion(rpe=6.0)])
        assert s.confidence == 85

    def test_increase_rounded_to_one_decimal(self):
        (s,) = progressive_overload_suggestions([_make_completion(rpe=7.0, weight=62.0, prescribed_weight=62.0)])
        # 62 * 0.025 = 1.55 -> 1.6
        assert s.recommendation.suggested_weight == 63.6

    @pytest.mark.parametrize("rpe,weight,reps", [
        (8.0, 100.0, "5"),   # too hard
        (None, 100.0, "5"),  # no RPE reported
        (7.0, 95.0, "5"),    # under prescribed load
        (7.0, 100.0, "4"),   # under prescribed reps
    ])
    def test_no_suggestion(self, rpe, weight, reps):
        assert progressive_overload_suggestions([_make_completion(rpe=rpe, weight=weight, reps=reps)]) == []

    def test_result_without_prescription_is_ignored(self):
        session = make_session(1, datetime.datetime(2026, 3, 1), results=[make_outcome(rpe=6.0)])
        assert progressive_overload_suggestions([session]) == []


class TestExerciseProgression:

    @pytest.mark.parametrize("weight,step", [(20.0, 1.25), (40.0, 1.25), (40.5, 2.5), (100.0, 2.5)])
    def test_step(self, weight, step):
        assert progression_step(weight) == step

    def test_suggests_fixed_step(self):
        exercise = _make_prescribed(weight=60.0)
        history = {1: [make_outcome(weight=60.0, rpe=6.5)]}
        (s,) = exercise_progression_suggestions([exercise], history)
        assert s.title == "Progress Back Squat"
        assert s.recommendation.suggested_weight == 62.5
        assert s.confidence == 70
        assert s.context_id == 1

    def test_only_most_recent_result_counts(self):
        exercise = _make_prescribed(weight=30.0)
        history = {1: [make_outcome(weight=30.0, rpe=5.0), make_outcome(weight=30.0, rpe=9.0)]}
        (s,) = exercise_progression_suggestions([exercise], history)
        assert s.recommendation.suggested_weight == 31.25
        assert s.confidence == 85

    @pytest.mark.parametrize("last_weight,last_rpe", [(60.0, 8.0), (57.5, 6.0), (60.0, None)])
    def test_no_suggestion(self, last_weight, last_rpe):
        exercise = _make_prescribed(weight=60.0)
        history = {1: [make_outcome(weight=last_weight, rpe=last_rpe)]}
        assert exercise_progression_suggestions([exercise], history) == []

    def test_no_history(self):
        assert exercise_progression_suggestions([_make_prescribed()], {}) == []


# ======================================================================
# Deload
# ======================================================================


class TestRpeOverreach:

    def test_three_session_streak(self):
        completions = _make_rpe_history(9.5, 9.5, 9.5, 6.0)
        assert rpe_overreach_streak(completions) == 3
        s = rpe_overreach_suggestion(completions, plan_id=42)
        assert s.type == "deload_recommended"
        assert s.priority == "high"
        assert s.confidence == 90
        assert s.context_id == 42
        assert isinstance(s.recommendation, InsertDeload)
        assert s.recommendation.volume_reduction_pct == 40
        assert s.description.startswith("3 consecutive sessions exceeded target RPE by 1.5+")

    def test_two_session_streak_lower_confidence(self):
        s = rpe_overreach_suggestion(_make_rpe_history(9.0, 9.0), plan_id=1)
        assert s.confidence == 75

    def test_threshold_is_strict(self):
        assert rpe_overreach_suggestion(_make_rpe_history(8.5, 8.5), plan_id=1) is None

    def test_normal_newest_session_breaks_streak(self):
        assert rpe_overreach_suggestion(_make_rpe_history(6.0, 9.5, 9.5, 9.5), plan_id=1) is None

    def test_missing_rpe_is_skipped(self):
        assert rpe_overreach_streak(_make_rpe_history(9.5, None, 9.5)) == 2

    def test_broken_workout_link_is_skipped(self):
        completions = _make_rpe_history(9.5, 9.5, 9.5)
        completions[1] = completions[1].model_copy(update={"workout_id": None})
        assert rpe_overreach_streak(completions) == 2

    def test_missing_target_uses_default(self):
        assert rpe_overreach_streak(_make_rpe_history(8.6, 8.6, target=None)) == 2

    def test_needs_two_completions(self):
        assert rpe_overreach_suggestion(_make_rpe_history(10.0), plan_id=1) is None


class TestAcwrSuggestion:

    def test_steady_load_no_suggestion(self):
        assert acwr_suggestion([100, 100, 100, 100], plan_id=1) is None

    def test_not_enough_history(self):
        assert acwr_suggestion([0, 0, 100, 400], plan_id=1) is None

    def test_spike(self):
        s = acwr_suggestion([100, 100, 100, 200], plan_id=7)
        assert s.type == "deload_recommended"
        assert s.priority == "high"
        assert s.confidence == 80
        assert isinstance(s.recommendation, ReduceVolume)
        assert s.recommendation.acwr == 1.6
        assert s.recommendation.acute_load == 200
        assert s.recommendation.chronic_avg == 125
        # 1 - 1.3 / 1.6 = 18.75% -> 19
        assert s.recommendation.suggested_reduction_pct == 19
        assert "ACWR is 1.60 (threshold: 1.3)" in s.description

    def test_under_load(self):
        s = acwr_suggestion([100, 100, 100, 50], plan_id=7)
        assert s.type == "volume_check"
        assert s.priority == "low"
        assert s.confidence == 65
        assert isinstance(s.recommendation, IncreaseVolume)
        assert s.recommendation.acwr == 0.57
        assert s.recommendation.suggested_increase_pct == 40

    def test_empty_acute_week_is_not_under_load(self):
        assert acwr_suggestion([100, 100, 100, 100, 0], plan_id=7) is None


# ======================================================================
# Readiness
# ======================================================================


class TestReadiness:

    def test_very_low_swaps_to_recovery(self):
        (s,) = readiness_suggestions(make_readiness(2, TODAY), athlete_id=5)
        assert s.priority == "critical"
        assert s.confidence == 90
        assert s.context_type == "athlete"
        assert s.context_id == 5
        assert isinstance(s.recommendation, SwapToRecovery)
        assert s.recommendation.volume_reduction == 60
        assert s.recommendation.intensity_cap == 50

    def test_low_reduces_session(self):
        (s,) = readiness_suggestions(make_readiness(4, TODAY), athlete_id=5)
        assert s.priority == "medium"
        assert s.confidence == 75
        assert isinstance(s.recommendation, ReduceSession)
        assert s.recommendation.volume_reduction == 25
        assert s.recommendation.intensity_cap == 75

    @pytest.mark.parametrize("score", [3.5, 4])
    def test_low_band_uses_fixed_reduction(self, score):
        (s,) = readiness_suggestions(make_readiness(score, TODAY), athlete_id=5)
        assert s.priority == "medium"
        assert s.recommendation.volume_reduction == 25
        assert s.recommendation.intensity_cap == 75
        assert s.description.endswith("Suggest reducing volume by 25% and capping intensity.")

    @pytest.mark.parametrize("score", [5, 8, 10])
    def test_good_readiness(self, score):
        assert readiness_suggestions(make_readiness(score, TODAY), athlete_id=5) == []

    def test_no_check_in(self):
        assert readiness_suggestions(None, athlete_id=5) == []

    def test_rationale_lists_contributing_factors(self):
        entry = make_readiness(3, TODAY, sleep_quality=2, sleep_hours=5.5, muscle_soreness=4, energy_level=3,
                               stress_level=5)
        assert build_readiness_rationale(entry) == (
            "Overall readiness score: 3/10. Contributing factors: poor sleep quality (2/5), only 5.5h sleep, "
            "high soreness (4/5), high stress (5/5)."
        )

    def test_rationale_without_factors(self):
        assert build_readiness_rationale(make_readiness(4, TODAY)) == (
            "Overall readiness score: 4/10. Athlete self-reported low readiness today."
        )


# ======================================================================
# Compliance
# ======================================================================


class TestCompliance:

    def test_critical(self):
        (s,) = compliance_suggestions(make_assignments(completed=4, skipped=6), athlete_id=1, today=TODAY)
        assert s.priority == "critical"
        assert s.confidence == 85
        assert isinstance(s.recommendation, SimplifyProgram)
        assert s.recommendation.compliance_rate == 40
        assert s.recommendation.sessions_missed == 6
        assert s.recommendation.suggested_sessions_per_week == 3

    def test_warning(self):
        (s,) = compliance_suggestions(make_assignments(completed=6, skipped=4), athlete_id=1, today=TODAY)
        assert s.priority == "medium"
        assert s.confidence == 70
        assert isinstance(s.recommendation, CheckIn)
        assert s.recommendation.compliance_rate == 60

    def test_healthy(self):
        assert compliance_suggestions(make_assignments(completed=8, skipped=2), athlete_id=1, today=TODAY) == []

    def test_too_few_assignments(self):
        assert compliance_suggestions(make_assignments(completed=0, skipped=2), athlete_id=1, today=TODAY) == []

    def test_overdue_pending_counts_as_missed(self):
        assignments = make_assignments(completed=2, skipped=0)
        overdue = assignments[0].model_copy(update={"id": 10, "status": "pending"})
        upcoming = assignments[0].model_copy(update={"id": 11, "status": "pending",
                                                     "assigned_date": TODAY + datetime.timedelta(days=1)})
        (s,) = compliance_suggestions(assignments + [overdue, upcoming], athlete_id=1, today=TODAY)
        # 2 of 4 completed: 50% is a warning, not critical
        assert s.priority == "medium"
        assert s.recommendation.sessions_missed == 1


# ======================================================================
# Ordering
# ======================================================================


class TestSortSuggestions:

    def test_priority_order(self):
        ordered = sort_suggestions([_make_suggestion(p) for p in ["low", "critical", "medium", "high"]])
        assert [s.priority for s in ordered] == ["critical", "high", "medium", "low"]

    def test_stable_within_priority(self):
        ordered = sort_suggestions([
            _make_suggestion("medium", "first"),
            _make_suggestion("critical", "c"),
            _make_suggestion("medium", "second"),
        ])
        assert [s.title for s in ordered] == ["c", "first", "second"]
