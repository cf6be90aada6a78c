"""
Workout assignment repository.

Handles database operations for :class:`WorkoutAssignment`.
"""

import datetime
from typing import Iterable, Optional

from sqlmodel import Session, select

from app.models.assignment import WorkoutAssignment


class WorkoutAssignmentRepository:
    """Repository for WorkoutAssignment database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, assignment_id: int) -> Optional[WorkoutAssignment]:
        return self.session.get(WorkoutAssignment, assignment_id)

    def get_by_ids(self, assignment_ids: Iterable[int]) -> dict[int, WorkoutAssignment]:
        ids = list(set(assignment_ids))
        if not ids:
            return {}
        statement = select(WorkoutAssignment).where(WorkoutAssignment.id.in_(ids))
        return {a.id: a for a in self.session.exec(statement).all()}

    def get_recent_completed_for_plan(self, plan_id: int, limit: int = 20) -> list[WorkoutAssignment]:
        statement = (select(WorkoutAssignment)
                     .where(WorkoutAssignment.plan_id == plan_id, WorkoutAssignment.status == "completed", )
                     .order_by(WorkoutAssignment.assigned_date.desc())
                     .limit(limit))
        return list(self.session.exec(statement).all())

    def get_by_plan_and_athlete(self, plan_id: int, athlete_id: int) -> list[WorkoutAssignment]:
        statement = (select(WorkoutAssignment)
                     .where(WorkoutAssignment.plan_id == plan_id, WorkoutAssignment.athlete_id == athlete_id, )
                     .order_by(WorkoutAssignment.assigned_date))
        return list(self.session.exec(statement).all())

    def mark_completed(self, assignment: WorkoutAssignment) -> WorkoutAssignment:
        """Set status to ``completed``.  A no-op if already completed."""
        if assignment.status == "completed":
            return assignment
        assignment.status = "completed"
        assignment.updated_at = datetime.datetime.utcnow()
        self.session.add(assignment)
        self.session.commit()
        self.session.refresh(assignment)
        return assignment
