"""
Workout assignment database model.

An assignment schedules a workout for an athlete on a date.  Its status
moves ``pending`` → ``completed`` | ``skipped`` and drives compliance.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class WorkoutAssignment(SQLModel, table=True):
    """A workout scheduled for an athlete."""

    __tablename__ = "workout_assignments"

    id: Optional[int] = Field(default=None, primary_key=True)
    plan_id: Optional[int] = Field(default=None, index=True)
    workout_id: Optional[int] = Field(default=None, foreign_key="workouts.id", index=True)
    athlete_id: int = Field(nullable=False, index=True)
    coach_id: int = Field(nullable=False, index=True)
    assigned_date: datetime.date = Field(nullable=False, index=True)

    # pending | completed | skipped
    status: str = Field(default="pending", nullable=False, max_length=20)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
