"""
Workout completion pipeline.

Completing an assignment runs independent steps in order:

1. record the completion and its exercise results (must succeed),
2. mark the assignment completed,
3. upsert personal bests for results flagged as PBs,
4. update the athlete's training streak.

Steps 2-4 are idempotent and isolated: a failure is logged and reported
in :attr:`CompletionOutcome.failed_steps`, earlier steps are kept.
"""

import datetime
from typing import Optional

from fastapi import HTTPException, status
from loguru import logger
from sqlmodel import Session

from app.adaptive.completion import next_streak, personal_best_candidate
from app.db.repositories.assignment import WorkoutAssignmentRepository
from app.db.repositories.completion import WorkoutCompletionRepository
from app.db.repositories.progress import ProgressRepository
from app.db.repositories.workout import WorkoutRepository
from app.models.assignment import WorkoutAssignment
from app.models.completion import ExerciseResult, WorkoutCompletion
from app.models.progress import UserStreak
from app.schemas.completion import CompletionOutcome, ExerciseResultData, WorkoutCompletionCreate


class WorkoutCompletionService:
    """Service for the post-completion pipeline."""

    def __init__(self, session: Session):
        self.session = session
        self.assignments = WorkoutAssignmentRepository(session)
        self.completions = WorkoutCompletionRepository(session)
        self.workouts = WorkoutRepository(session)
        self.progress = ProgressRepository(session)

    def complete(self, athlete_id: int, assignment_id: int, data: WorkoutCompletionCreate,
                 now: Optional[datetime.datetime] = None, ) -> CompletionOutcome:
        moment = now or datetime.datetime.utcnow()
        assignment = self._get_owned_assignment(athlete_id, assignment_id)

        # 1. Record completion (failure propagates)
        completion = self.record_completion(athlete_id, assignment, data, moment)
        outcome = CompletionOutcome(completion_id=completion.id)

        # 2. Assignment status
        try:
            self.assignments.mark_completed(assignment)
        except Exception:
            self.session.rollback()
            logger.exception(f"[COMPLETION] failed to mark assignment {assignment_id} completed")
            outcome.failed_steps.append("mark_assignment")

        # 3. Personal bests
        try:
            outcome.personal_bests = self.update_personal_bests(athlete_id, data.exercise_results,
                                                                   outcome.completion_id)
        except Exception:
            self.session.rollback()
            logger.exception(f"[COMPLETION] failed to update personal bests for completion {outcome.completion_id}")
            outcome.failed_steps.append("personal_bests")

        # 4. Streak
        try:
            outcome.current_streak = self.update_streak(athlete_id, moment.date()).current_streak
        except Exception:
            self.session.rollback()
            logger.exception(f"[COMPLETION] failed to update streak for athlete {athlete_id}")
            outcome.failed_steps.append("streak")

        logger.info(f"[COMPLETION] assignment={assignment_id} completion={outcome.completion_id} "
                    f"failed_steps={outcome.failed_steps}")
        return outcome

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def record_completion(self, athlete_id: int, assignment: WorkoutAssignment, data: WorkoutCompletionCreate,
                          moment: datetime.datetime, ) -> WorkoutCompletion:
        completion = WorkoutCompletion(assignment_id=assignment.id, athlete_id=athlete_id, completed_at=moment,
                                       overall_rpe=data.overall_rpe, duration_minutes=data.duration_minutes,
                                       athlete_notes=data.athlete_notes,
                                       has_pb=any(r.is_pb for r in data.exercise_results), )
        results = [ExerciseResult(created_at=moment, **r.model_dump()) for r in data.exercise_results]
        return self.completions.create(completion, results)

    def update_personal_bests(self, athlete_id: int, results: list[ExerciseResultData], completion_id: int, ) -> int:
        candidates = [c for c in (personal_best_candidate(r) for r in results) if c is not None]
        if not candidates:
            return 0

        exercises = self.workouts.get_exercises_by_ids(c.exercise_id for c in candidates)
        written = 0
        for c in candidates:
            exercise = exercises.get(c.exercise_id)
            if exercise is None:
                continue
            self.progress.upsert_personal_best(athlete_id, exercise.name, c.pb_type, c.value, completion_id)
            written += 1
        return written

    def update_streak(self, user_id: int, today: datetime.date) -> UserStreak:
        streak = self.progress.get_streak(user_id) or UserStreak(user_id=user_id)
        if streak.last_workout_date == today:
            return streak

        current, longest = next_streak(streak.current_streak, streak.longest_streak, streak.last_workout_date,
                                       today)
        streak.current_streak = current
        streak.longest_streak = longest
        streak.last_workout_date = today
        return self.progress.save_streak(streak)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_owned_assignment(self, athlete_id: int, assignment_id: int) -> WorkoutAssignment:
        assignment = self.assignments.get_by_id(assignment_id)
        if not assignment or assignment.athlete_id != athlete_id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found", )
        return assignment
