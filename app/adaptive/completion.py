"""
Post-completion rules: personal best typing and streak transitions.

Pure helpers used by the workout completion pipeline
(:mod:`app.services.completion_service`).  Each pipeline step is
idempotent on its own; these functions only decide *what* to write.
"""

from __future__ import annotations

import datetime
from typing import Optional

from app.adaptive.metrics import parse_reps
from app.schemas.completion import ExerciseResultData, PersonalBestCandidate


def personal_best_candidate(result: ExerciseResultData) -> Optional[PersonalBestCandidate]:
    """Pick the PB type for a result flagged ``is_pb``.

    Priority: weight, then reps, then time, then distance; the first
    with a positive value wins.  Returns ``None`` when nothing qualifies.
    """
    if not result.is_pb:
        return None

    if result.weight_used_kg and result.weight_used_kg > 0:
        return PersonalBestCandidate(exercise_id=result.exercise_id, pb_type="weight", value=result.weight_used_kg)
    if result.reps_completed:
        reps = parse_reps(result.reps_completed)
        if reps > 0:
            return PersonalBestCandidate(exercise_id=result.exercise_id, pb_type="reps", value=reps)
        return None
    if result.duration_seconds and result.duration_seconds > 0:
        return PersonalBestCandidate(exercise_id=result.exercise_id, pb_type="time", value=result.duration_seconds)
    if result.distance_meters and result.distance_meters > 0:
        return PersonalBestCandidate(exercise_id=result.exercise_id, pb_type="distance",
                                     value=result.distance_meters)
    return None


def next_streak(
    current: int,
    longest: int,
    last_workout_date: Optional[datetime.date],
    today: datetime.date,
) -> tuple[int, int]:
    """Streak after training on ``today``.

    Same day: unchanged.  Next day: +1.  Any gap (or no history): 1.

    Returns:
        ``(current_streak, longest_streak)``
    """
    if last_workout_date is None:
        return 1, max(longest, 1)

    gap = (today - last_workout_date).days
    if gap <= 0:
        return current, longest
    if gap == 1:
        new_streak = current + 1
        return new_streak, max(new_streak, longest)
    return 1, max(longest, 1)
