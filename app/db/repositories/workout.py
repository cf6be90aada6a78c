"""
Workout repository.

Handles database operations for :class:`Workout` and its prescribed
:class:`Exercise` rows.
"""

from typing import Iterable, Optional

from sqlmodel import Session, select

from app.models.workout import Exercise, Workout


class WorkoutRepository:
    """Repository for Workout / Exercise database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, workout_id: int) -> Optional[Workout]:
        return self.session.get(Workout, workout_id)

    def target_rpes(self, workout_ids: Iterable[int]) -> dict[int, Optional[float]]:
        """Map workout id → target RPE."""
        ids = list(set(workout_ids))
        if not ids:
            return {}
        statement = select(Workout.id, Workout.target_rpe).where(Workout.id.in_(ids))
        return {row[0]: row[1] for row in self.session.exec(statement).all()}

    def get_exercises(self, workout_id: int) -> list[Exercise]:
        statement = (select(Exercise).where(Exercise.workout_id == workout_id)
                     .order_by(Exercise.order_index, Exercise.id))
        return list(self.session.exec(statement).all())

    def get_exercises_by_ids(self, exercise_ids: Iterable[int]) -> dict[int, Exercise]:
        ids = list(set(exercise_ids))
        if not ids:
            return {}
        statement = select(Exercise).where(Exercise.id.in_(ids))
        return {e.id: e for e in self.session.exec(statement).all()}
