"""
Training data access port.

The adaptive engine never talks to the database directly.  It receives
an object implementing :class:`TrainingDataSource`; the production
implementation lives in :mod:`app.db.datasource`, tests use an in-memory
fake.  Every query returns an ordered, possibly empty, collection of
plain records.  An empty result is valid data, not an error.
"""

from __future__ import annotations

import datetime
from typing import Any, Optional, Protocol

from app.schemas.training import (
    AthleteProfile,
    CompletedSession,
    ExerciseOutcome,
    PrescribedExercise,
    ReadinessEntry,
    ScheduledSession,
)


class TrainingDataSource(Protocol):
    """Read queries (plus the audit append) the adaptive engine needs."""

    def recent_plan_completions(self, plan_id: int, assignment_limit: int = 20,
                                completion_limit: int = 5) -> list[CompletedSession]:
        """Completions of the plan's most recent completed assignments, newest first.

        Results carry their prescribed exercise.
        """
        ...

    def recent_completions(self, athlete_id: Optional[int] = None, limit: int = 10) -> list[CompletedSession]:
        """Most recent completions (optionally one athlete), newest first, with target RPE."""
        ...

    def completions_between(self, start: datetime.datetime, end: datetime.datetime,
                            athlete_id: Optional[int] = None) -> list[CompletedSession]:
        """Completions in ``[start, end]`` with exercise results, oldest first."""
        ...

    def assignments_for(self, plan_id: int, athlete_id: int) -> list[ScheduledSession]:
        """All assignments of a plan for one athlete, by assigned date."""
        ...

    def readiness_on(self, athlete_id: int, day: datetime.date) -> Optional[ReadinessEntry]:
        """The athlete's readiness check-in for ``day``, if any."""
        ...

    def readiness_between(self, athlete_id: int, start: datetime.date,
                          end: datetime.date) -> list[ReadinessEntry]:
        """Readiness check-ins in ``[start, end]``, oldest first."""
        ...

    def workout_exercises(self, workout_id: int) -> list[PrescribedExercise]:
        """Prescribed exercises of a workout, in session order."""
        ...

    def recent_exercise_results(self, exercise_id: int, athlete_id: int, limit: int = 3) -> list[ExerciseOutcome]:
        """The athlete's previous results for one prescribed exercise, newest first."""
        ...

    def athlete_profile(self, athlete_id: int) -> Optional[AthleteProfile]:
        ...

    def has_active_relationship(self, coach_id: int, athlete_id: int) -> bool:
        ...

    def append_suggestion_log(self, entry: dict[str, Any]) -> None:
        """Append one audit record (see :func:`app.adaptive.suggestions.build_log_entry`)."""
        ...
