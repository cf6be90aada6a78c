"""
Workout completion repository.

Handles database operations for :class:`WorkoutCompletion` and its
:class:`ExerciseResult` rows.  Includes the time-window queries used by
the adaptive engine.
"""

import datetime
from collections import defaultdict
from typing import Iterable, Optional

from sqlmodel import Session, select

from app.models.completion import ExerciseResult, WorkoutCompletion


class WorkoutCompletionRepository:
    """Repository for WorkoutCompletion / ExerciseResult database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, completion: WorkoutCompletion, results: list[ExerciseResult]) -> WorkoutCompletion:
        """Insert a completion and its results in one commit."""
        self.session.add(completion)
        self.session.flush()
        for r in results:
            r.completion_id = completion.id
            self.session.add(r)
        self.session.commit()
        self.session.refresh(completion)
        return completion

    def get_by_id(self, completion_id: int) -> Optional[WorkoutCompletion]:
        return self.session.get(WorkoutCompletion, completion_id)

    def get_recent(self, athlete_id: Optional[int] = None, limit: int = 10) -> list[WorkoutCompletion]:
        statement = select(WorkoutCompletion)
        if athlete_id is not None:
            statement = statement.where(WorkoutCompletion.athlete_id == athlete_id)
        statement = statement.order_by(WorkoutCompletion.completed_at.desc()).limit(limit)
        return list(self.session.exec(statement).all())

    def get_by_assignments(self, assignment_ids: Iterable[int], limit: int = 5) -> list[WorkoutCompletion]:
        ids = list(set(assignment_ids))
        if not ids:
            return []
        statement = (select(WorkoutCompletion)
                     .where(WorkoutCompletion.assignment_id.in_(ids))
                     .order_by(WorkoutCompletion.completed_at.desc())
                     .limit(limit))
        return list(self.session.exec(statement).all())

    def get_between(self, start: datetime.datetime, end: datetime.datetime,
                    athlete_id: Optional[int] = None, ) -> list[WorkoutCompletion]:
        statement = select(WorkoutCompletion).where(WorkoutCompletion.completed_at >= start,
                                                    WorkoutCompletion.completed_at <= end, )
        if athlete_id is not None:
            statement = statement.where(WorkoutCompletion.athlete_id == athlete_id)
        statement = statement.order_by(WorkoutCompletion.completed_at)
        return list(self.session.exec(statement).all())

    # ------------------------------------------------------------------
    # Exercise results
    # ------------------------------------------------------------------

    def results_by_completion(self, completion_ids: Iterable[int]) -> dict[int, list[ExerciseResult]]:
        ids = list(set(completion_ids))
        grouped: dict[int, list[ExerciseResult]] = defaultdict(list)
        if not ids:
            return grouped
        statement = (select(ExerciseResult)
                     .where(ExerciseResult.completion_id.in_(ids))
                     .order_by(ExerciseResult.id))
        for r in self.session.exec(statement).all():
            grouped[r.completion_id].append(r)
        return grouped

    def recent_results_for_exercise(self, exercise_id: int, athlete_id: int, limit: int = 3) -> list[ExerciseResult]:
        statement = (select(ExerciseResult)
                     .join(WorkoutCompletion, ExerciseResult.completion_id == WorkoutCompletion.id)
                     .where(ExerciseResult.exercise_id == exercise_id, WorkoutCompletion.athlete_id == athlete_id, )
                     .order_by(ExerciseResult.created_at.desc(), ExerciseResult.id.desc())
                     .limit(limit))
        return list(self.session.exec(statement).all())
