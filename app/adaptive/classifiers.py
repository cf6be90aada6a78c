"""
Risk and trend classifiers: rules that turn metrics into suggestions.

Every classifier is a pure function over already-fetched records.  It
returns a (possibly empty) list of :class:`Suggestion`; none of them
touches storage or shared state, so they can run in any order or in
parallel.

Thresholds are fixed, evidence-informed operating points, not runtime
configuration:

    ACWR > 1.3                  → workload spike (injury-risk zone)
    ACWR < 0.8 (acute > 0)      → possible detraining
    session RPE > target + 1.5  → overreaching, on 2+ consecutive sessions
    readiness ≤ 3 / ≤ 4         → very low / low readiness
    compliance < 0.5 / < 0.7    → critical / warning (3+ assignments)

Confidence is an integer heuristic with two tiers per rule, depending on
how strongly the condition was exceeded.  It is not a probability.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable, Mapping, Sequence
from typing import Optional

from app.adaptive.metrics import acwr, parse_reps, round_half_up
from app.schemas.suggestion import (
    PRIORITY_RANK,
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
from app.schemas.training import (
    CompletedSession,
    ExerciseOutcome,
    PrescribedExercise,
    ReadinessEntry,
    ScheduledSession,
)

# ======================================================================
# Thresholds
# ======================================================================

ACWR_HIGH_RISK = 1.3
ACWR_LOW_RISK = 0.8

RPE_OVERREACH_THRESHOLD = 1.5
RPE_OVERREACH_WINDOW = 2
DEFAULT_TARGET_RPE = 7.0

READINESS_LOW_THRESHOLD = 4
READINESS_VERY_LOW = 3

COMPLIANCE_WARNING = 0.7
COMPLIANCE_CRITICAL = 0.5
COMPLIANCE_MIN_ASSIGNMENTS = 3

OVERLOAD_INCREMENT = 0.025
OVERLOAD_MAX_RPE = 7.5
PROGRESSION_MAX_RPE = 7.0
HIGH_CONFIDENCE_RPE = 6.0

# Fixed per-exercise progression steps; lighter lifts get the smaller one.
_LIGHT_LOAD_LIMIT = 40.0
_LIGHT_STEP = 1.25
_HEAVY_STEP = 2.5


# ======================================================================
# Helpers
# ======================================================================


def _pct(value: float) -> int:
    return int(round_half_up(value * 100))


def _fmt(value: float) -> str:
    """Render a number without a trailing ``.0``."""
    return f"{value:g}"


def sort_suggestions(suggestions: Iterable[Suggestion]) -> list[Suggestion]:
    """Stable sort by priority: critical → high → medium → low."""
    return sorted(suggestions, key=lambda s: PRIORITY_RANK[s.priority])


# ======================================================================
# 1. Progressive overload
# ======================================================================


def progressive_overload_suggestions(completions: Sequence[CompletedSession]) -> list[Suggestion]:
    """Suggest a 2.5% load increase where prescribed work was met easily.

    A result qualifies when load and reps met or exceeded the
    prescription at a reported RPE of 7.5 or less.
    """
    suggestions: list[Suggestion] = []

    for completion in completions:
        for result in completion.results:
            exercise = result.prescribed
            if exercise is None:
                continue

            prescribed_weight = exercise.weight_kg or 0.0
            actual_weight = result.weight_used_kg or 0.0
            prescribed_reps = parse_reps(exercise.reps)
            actual_reps = parse_reps(result.reps_completed)
            rpe = result.rpe or 0.0

            if not (actual_weight >= prescribed_weight and actual_reps >= prescribed_reps
                    and 0 < rpe <= OVERLOAD_MAX_RPE):
                continue

            increase = round_half_up(prescribed_weight * OVERLOAD_INCREMENT, 1)
            suggested = round_half_up(prescribed_weight + increase, 1)
            suggestions.append(Suggestion(
                type="progressive_overload",
                priority="low",
                title=f"Increase {exercise.name}",
                description=(f"{exercise.name}: completed at RPE {_fmt(rpe)}. "
                             f"Consider +{_fmt(increase)}kg ({_pct(OVERLOAD_INCREMENT)}%)."),
                rationale=(f"Athlete completed {actual_reps} reps × {_fmt(actual_weight)}kg at RPE {_fmt(rpe)}, "
                           "indicating room for progression."),
                recommendation=IncreaseWeight(
                    exercise_id=result.exercise_id,
                    exercise_name=exercise.name,
                    current_weight=prescribed_weight,
                    suggested_weight=suggested,
                    rpe_basis=rpe,
                ),
                confidence=85 if rpe <= HIGH_CONFIDENCE_RPE else 70,
                context_type="exercise",
                context_id=result.exercise_id,
            ))

    return suggestions


def progression_step(prescribed_weight: float) -> float:
    """Fixed load step for the per-exercise progression check."""
    return _LIGHT_STEP if prescribed_weight <= _LIGHT_LOAD_LIMIT else _HEAVY_STEP


def exercise_progression_suggestions(
    exercises: Sequence[PrescribedExercise],
    recent_results: Mapping[int, Sequence[ExerciseOutcome]],
) -> list[Suggestion]:
    """Per-exercise progression for an upcoming session.

    Args:
        exercises: Prescribed exercises of the session, in order.
        recent_results: Exercise id → previous results, newest first.
    """
    suggestions: list[Suggestion] = []

    for exercise in exercises:
        previous = recent_results.get(exercise.id) or []
        if not previous:
            continue

        last = previous[0]
        last_rpe = last.rpe or 0.0
        last_weight = last.weight_used_kg or 0.0
        prescribed_weight = exercise.weight_kg or 0.0

        if not (0 < last_rpe <= PROGRESSION_MAX_RPE and prescribed_weight > 0
                and last_weight >= prescribed_weight):
            continue

        step = progression_step(prescribed_weight)
        suggested = prescribed_weight + step
        suggestions.append(Suggestion(
            type="progressive_overload",
            priority="low",
            title=f"Progress {exercise.name}",
            description=(f"Last session: {_fmt(last_weight)}kg × RPE {_fmt(last_rpe)}. "
                         f"Suggest {_fmt(suggested)}kg (+{_fmt(step)}kg)."),
            rationale=f"Based on previous performance at RPE {_fmt(last_rpe)}, there is room for progressive overload.",
            recommendation=IncreaseWeight(
                exercise_id=exercise.id,
                exercise_name=exercise.name,
                current_weight=prescribed_weight,
                suggested_weight=suggested,
                rpe_basis=last_rpe,
            ),
            confidence=85 if last_rpe <= HIGH_CONFIDENCE_RPE else 70,
            context_type="exercise",
            context_id=exercise.id,
        ))

    return suggestions


# ======================================================================
# 2. Deload
# ======================================================================


def rpe_overreach_streak(completions: Sequence[CompletedSession]) -> int:
    """Count consecutive overreaching sessions, newest first.

    Sessions without an RPE are ignored; sessions whose workout link is
    broken are skipped without breaking the streak.  The walk stops at
    the first session that did not overreach, so an earlier streak
    behind a normal session is not counted.
    """
    streak = 0
    for completion in completions:
        if completion.overall_rpe is None or completion.workout_id is None:
            continue
        target = completion.target_rpe or DEFAULT_TARGET_RPE
        if completion.overall_rpe > target + RPE_OVERREACH_THRESHOLD:
            streak += 1
        else:
            break
    return streak


def rpe_overreach_suggestion(
    completions: Sequence[CompletedSession],
    plan_id: Optional[int],
) -> Optional[Suggestion]:
    """Deload when recent sessions keep overshooting their target RPE.

    Args:
        completions: Recent completions, newest first.
        plan_id: Plan the suggestion refers to.
    """
    if len(completions) < RPE_OVERREACH_WINDOW:
        return None

    streak = rpe_overreach_streak(completions)
    if streak < RPE_OVERREACH_WINDOW:
        return None

    return Suggestion(
        type="deload_recommended",
        priority="high",
        title="Deload recommended",
        description=(f"{streak} consecutive sessions exceeded target RPE by {_fmt(RPE_OVERREACH_THRESHOLD)}+. "
                     "Consider a deload or reduced volume week."),
        rationale=(f"Sustained overreaching detected. Average session RPE has been "
                   f"{_fmt(RPE_OVERREACH_THRESHOLD)}+ points above prescribed targets for {streak} sessions, "
                   "indicating accumulated fatigue."),
        recommendation=InsertDeload(),
        confidence=90 if streak >= 3 else 75,
        context_type="plan",
        context_id=plan_id,
    )


def acwr_suggestion(weekly: Sequence[float], plan_id: Optional[int]) -> Optional[Suggestion]:
    """Workload spike or under-load from the weekly volume series.

    Args:
        weekly: Weekly volume load, oldest first; the last value is the
            acute week.
        plan_id: Plan the suggestion refers to.
    """
    ratio = acwr(weekly)
    if ratio is None:
        return None

    acute = float(weekly[-1])
    ratio_2dp = round_half_up(ratio, 2)

    if ratio > ACWR_HIGH_RISK:
        chronic = acute / ratio
        return Suggestion(
            type="deload_recommended",
            priority="high",
            title="High workload spike detected",
            description=(f"ACWR is {ratio:.2f} (threshold: {ACWR_HIGH_RISK}). "
                         "This week's load is significantly higher than the 4-week average."),
            rationale=(f"Acute:Chronic Workload Ratio of {ratio:.2f} exceeds the {ACWR_HIGH_RISK} threshold. "
                       f"Research indicates this increases injury risk. Acute load: {int(round_half_up(acute))}kg, "
                       f"Chronic avg: {int(round_half_up(chronic))}kg."),
            recommendation=ReduceVolume(
                acwr=ratio_2dp,
                acute_load=int(round_half_up(acute)),
                chronic_avg=int(round_half_up(chronic)),
                suggested_reduction_pct=_pct(1 - ACWR_HIGH_RISK / ratio),
            ),
            confidence=80,
            context_type="plan",
            context_id=plan_id,
        )

    if ratio < ACWR_LOW_RISK and acute > 0:
        return Suggestion(
            type="volume_check",
            priority="low",
            title="Training volume may be too low",
            description=(f"ACWR is {ratio:.2f} (below {ACWR_LOW_RISK}). "
                         "Current training load may be insufficient for adaptation."),
            rationale=(f"Acute:Chronic Workload Ratio of {ratio:.2f} is below the optimal range. "
                       "This may indicate detraining risk."),
            recommendation=IncreaseVolume(
                acwr=ratio_2dp,
                suggested_increase_pct=_pct(ACWR_LOW_RISK / ratio - 1),
            ),
            confidence=65,
            context_type="plan",
            context_id=plan_id,
        )

    return None


# ======================================================================
# 3. Readiness
# ======================================================================


def build_readiness_rationale(entry: ReadinessEntry) -> str:
    """List the check-in factors that crossed their own thresholds."""
    factors: list[str] = []
    if entry.sleep_quality and entry.sleep_quality <= 2:
        factors.append(f"poor sleep quality ({entry.sleep_quality}/5)")
    if entry.sleep_hours and entry.sleep_hours < 6:
        factors.append(f"only {_fmt(entry.sleep_hours)}h sleep")
    if entry.muscle_soreness and entry.muscle_soreness >= 4:
        factors.append(f"high soreness ({entry.muscle_soreness}/5)")
    if entry.energy_level and entry.energy_level <= 2:
        factors.append(f"low energy ({entry.energy_level}/5)")
    if entry.stress_level and entry.stress_level >= 4:
        factors.append(f"high stress ({entry.stress_level}/5)")

    base = f"Overall readiness score: {_fmt(entry.subjective_score or 0)}/10."
    if factors:
        return f"{base} Contributing factors: {', '.join(factors)}."
    return f"{base} Athlete self-reported low readiness today."


def readiness_suggestions(entry: Optional[ReadinessEntry], athlete_id: int) -> list[Suggestion]:
    """Modify today's session when morning readiness is low."""
    if entry is None or not entry.subjective_score:
        return []

    score = entry.subjective_score

    if score <= READINESS_VERY_LOW:
        return [Suggestion(
            type="readiness_adjustment",
            priority="critical",
            title="Very low readiness — modify session",
            description=(f"Readiness score: {_fmt(score)}/10. "
                         "Consider replacing with recovery/mobility session or rest day."),
            rationale=build_readiness_rationale(entry),
            recommendation=SwapToRecovery(readiness_score=score),
            confidence=90,
            context_type="athlete",
            context_id=athlete_id,
        )]

    if score <= READINESS_LOW_THRESHOLD:
        return [Suggestion(
            type="readiness_adjustment",
            priority="medium",
            title="Low readiness — reduce intensity",
            description=(f"Readiness score: {_fmt(score)}/10. "
                         "Suggest reducing volume by 25% and capping intensity."),
            rationale=build_readiness_rationale(entry),
            recommendation=ReduceSession(
                readiness_score=score,
                volume_reduction=25,
                intensity_cap=75,
            ),
            confidence=75,
            context_type="athlete",
            context_id=athlete_id,
        )]

    return []


# ======================================================================
# 4. Compliance
# ======================================================================


def compliance_suggestions(
    assignments: Sequence[ScheduledSession],
    athlete_id: int,
    today: datetime.date,
) -> list[Suggestion]:
    """Flag athletes who complete too few of their assigned sessions.

    Critical and warning are mutually exclusive; at most one suggestion
    is returned.
    """
    total = len(assignments)
    if total < COMPLIANCE_MIN_ASSIGNMENTS:
        return []

    completed = sum(1 for a in assignments if a.status == "completed")
    skipped = sum(1 for a in assignments if a.status == "skipped")
    past_due = sum(1 for a in assignments if a.status == "pending" and a.assigned_date < today)

    rate = completed / total
    missed = skipped + past_due

    if rate < COMPLIANCE_CRITICAL:
        return [Suggestion(
            type="compliance_alert",
            priority="critical",
            title="Very low compliance",
            description=(f"Only {_pct(rate)}% of sessions completed. {missed} sessions missed/overdue. "
                         "Consider simplifying the program."),
            rationale=(f"Athlete has completed {completed} of {total} assigned sessions ({_pct(rate)}%). "
                       f"{skipped} skipped, {past_due} overdue. "
                       "This suggests the program may be too demanding or not well-suited."),
            recommendation=SimplifyProgram(compliance_rate=_pct(rate), sessions_missed=missed),
            confidence=85,
            context_type="athlete",
            context_id=athlete_id,
        )]

    if rate < COMPLIANCE_WARNING:
        return [Suggestion(
            type="compliance_alert",
            priority="medium",
            title="Low compliance — check in with athlete",
            description=f"{_pct(rate)}% compliance. {missed} sessions missed recently.",
            rationale=(f"Compliance has dropped below {_pct(COMPLIANCE_WARNING)}% threshold. "
                       "A check-in may help identify barriers (schedule, motivation, difficulty)."),
            recommendation=CheckIn(compliance_rate=_pct(rate), sessions_missed=missed),
            confidence=70,
            context_type="athlete",
            context_id=athlete_id,
        )]

    return []
