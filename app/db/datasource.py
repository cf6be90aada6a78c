"""
SQLModel implementation of :class:`~app.adaptive.datasource.TrainingDataSource`.

Each query opens its own :class:`Session` from the injected factory, so
the orchestrator can run classifier fetches on worker threads without
sharing a session.  ORM rows are mapped onto the read-only schemas in
:mod:`app.schemas.training` before leaving this module.
"""

import datetime
from typing import Any, Callable, Optional

from sqlmodel import Session

from app.db.repositories.assignment import WorkoutAssignmentRepository
from app.db.repositories.coaching import CoachingRepository
from app.db.repositories.completion import WorkoutCompletionRepository
from app.db.repositories.readiness import ReadinessLogRepository
from app.db.repositories.suggestion_log import SuggestionLogRepository
from app.db.repositories.workout import WorkoutRepository
from app.models.completion import ExerciseResult, WorkoutCompletion
from app.models.readiness import ReadinessLog
from app.models.suggestion_log import SuggestionLog
from app.models.workout import Exercise
from app.schemas.training import (
    AthleteProfile,
    CompletedSession,
    ExerciseOutcome,
    PrescribedExercise,
    ReadinessEntry,
    ScheduledSession,
)


def _to_prescribed(exercise: Exercise) -> PrescribedExercise:
    return PrescribedExercise(id=exercise.id, name=exercise.name, sets=exercise.sets, reps=exercise.reps,
                              weight_kg=exercise.weight_kg, rpe=exercise.rpe, )


def _to_outcome(result: ExerciseResult, exercise: Optional[Exercise]) -> ExerciseOutcome:
    return ExerciseOutcome(exercise_id=result.exercise_id, exercise_name=exercise.name if exercise else None,
                           sets_completed=result.sets_completed, reps_completed=result.reps_completed,
                           weight_used_kg=result.weight_used_kg, rpe=result.rpe, is_pb=result.is_pb,
                           prescribed=_to_prescribed(exercise) if exercise else None, )


def _to_readiness(entry: ReadinessLog) -> ReadinessEntry:
    return ReadinessEntry(athlete_id=entry.athlete_id, log_date=entry.log_date,
                          subjective_score=entry.subjective_score, sleep_quality=entry.sleep_quality,
                          sleep_hours=entry.sleep_hours, muscle_soreness=entry.muscle_soreness,
                          energy_level=entry.energy_level, stress_level=entry.stress_level, )


def _naive_utc(moment: datetime.datetime) -> datetime.datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(datetime.timezone.utc).replace(tzinfo=None)


class SQLTrainingDataSource:
    """Training data backed by the SQLModel tables."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    # ------------------------------------------------------------------
    # Completions
    # ------------------------------------------------------------------

    def recent_plan_completions(self, plan_id: int, assignment_limit: int = 20,
                                completion_limit: int = 5) -> list[CompletedSession]:
        with self._session_factory() as session:
            assignments = WorkoutAssignmentRepository(session).get_recent_completed_for_plan(plan_id,
                                                                                             assignment_limit)
            completions = WorkoutCompletionRepository(session).get_by_assignments([a.id for a in assignments],
                                                                                  completion_limit)
            return self._assemble(session, completions)

    def recent_completions(self, athlete_id: Optional[int] = None, limit: int = 10) -> list[CompletedSession]:
        with self._session_factory() as session:
            completions = WorkoutCompletionRepository(session).get_recent(athlete_id, limit)
            return self._assemble(session, completions)

    def completions_between(self, start: datetime.datetime, end: datetime.datetime,
                            athlete_id: Optional[int] = None) -> list[CompletedSession]:
        with self._session_factory() as session:
            completions = WorkoutCompletionRepository(session).get_between(_naive_utc(start), _naive_utc(end),
                                                                           athlete_id)
            return self._assemble(session, completions)

    @staticmethod
    def _assemble(session: Session, completions: list[WorkoutCompletion]) -> list[CompletedSession]:
        """Join results, prescriptions and target RPE onto completions (order kept)."""
        if not completions:
            return []

        completion_repo = WorkoutCompletionRepository(session)
        workout_repo = WorkoutRepository(session)

        assignments = WorkoutAssignmentRepository(session).get_by_ids(
            c.assignment_id for c in completions if c.assignment_id is not None
        )
        workout_of = {a_id: a.workout_id for a_id, a in assignments.items()}
        target_rpes = workout_repo.target_rpes(w for w in workout_of.values() if w is not None)

        results = completion_repo.results_by_completion(c.id for c in completions)
        exercises = workout_repo.get_exercises_by_ids(
            r.exercise_id for rs in results.values() for r in rs if r.exercise_id is not None
        )

        sessions: list[CompletedSession] = []
        for c in completions:
            workout_id = workout_of.get(c.assignment_id) if c.assignment_id is not None else None
            sessions.append(CompletedSession(
                id=c.id,
                athlete_id=c.athlete_id,
                assignment_id=c.assignment_id,
                workout_id=workout_id,
                completed_at=c.completed_at,
                overall_rpe=c.overall_rpe,
                target_rpe=target_rpes.get(workout_id) if workout_id is not None else None,
                duration_minutes=c.duration_minutes,
                results=[_to_outcome(r, exercises.get(r.exercise_id)) for r in results.get(c.id, [])],
            ))
        return sessions

    # ------------------------------------------------------------------
    # Assignments, readiness, exercises
    # ------------------------------------------------------------------

    def assignments_for(self, plan_id: int, athlete_id: int) -> list[ScheduledSession]:
        with self._session_factory() as session:
            rows = WorkoutAssignmentRepository(session).get_by_plan_and_athlete(plan_id, athlete_id)
            return [ScheduledSession(id=a.id, athlete_id=a.athlete_id, coach_id=a.coach_id, plan_id=a.plan_id,
                                     workout_id=a.workout_id, assigned_date=a.assigned_date, status=a.status, )
                    for a in rows]

    def readiness_on(self, athlete_id: int, day: datetime.date) -> Optional[ReadinessEntry]:
        with self._session_factory() as session:
            entry = ReadinessLogRepository(session).get_by_athlete_and_date(athlete_id, day)
            return _to_readiness(entry) if entry else None

    def readiness_between(self, athlete_id: int, start: datetime.date,
                          end: datetime.date) -> list[ReadinessEntry]:
        with self._session_factory() as session:
            rows = ReadinessLogRepository(session).get_by_athlete_date_range(athlete_id, start, end)
            return [_to_readiness(r) for r in rows]

    def workout_exercises(self, workout_id: int) -> list[PrescribedExercise]:
        with self._session_factory() as session:
            return [_to_prescribed(e) for e in WorkoutRepository(session).get_exercises(workout_id)]

    def recent_exercise_results(self, exercise_id: int, athlete_id: int, limit: int = 3) -> list[ExerciseOutcome]:
        with self._session_factory() as session:
            exercise = session.get(Exercise, exercise_id)
            rows = WorkoutCompletionRepository(session).recent_results_for_exercise(exercise_id, athlete_id, limit)
            return [_to_outcome(r, exercise) for r in rows]

    # ------------------------------------------------------------------
    # Coaching
    # ------------------------------------------------------------------

    def athlete_profile(self, athlete_id: int) -> Optional[AthleteProfile]:
        with self._session_factory() as session:
            profile = CoachingRepository(session).get_profile(athlete_id)
            if profile is None:
                return None
            return AthleteProfile(athlete_id=profile.athlete_id, display_name=profile.display_name,
                                  competition_level=profile.competition_level,
                                  injury_notes=profile.injury_notes, )

    def has_active_relationship(self, coach_id: int, athlete_id: int) -> bool:
        with self._session_factory() as session:
            return CoachingRepository(session).get_active_link(coach_id, athlete_id) is not None

    def append_suggestion_log(self, entry: dict[str, Any]) -> None:
        with self._session_factory() as session:
            SuggestionLogRepository(session).create(SuggestionLog(**entry))
