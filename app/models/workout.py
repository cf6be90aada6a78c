"""
Workout and prescribed-exercise database models.

A workout is a coach-authored session template; its exercises carry the
prescription (sets, reps, load, RPE) that results are compared against.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class Workout(SQLModel, table=True):
    """A workout session authored by a coach."""

    __tablename__ = "workouts"

    id: Optional[int] = Field(default=None, primary_key=True)
    coach_id: int = Field(nullable=False, index=True)
    plan_id: Optional[int] = Field(default=None, index=True)
    name: str = Field(nullable=False, max_length=200)

    # Session-level RPE the coach expects (None → engine default of 7)
    target_rpe: Optional[float] = Field(default=None)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)


class Exercise(SQLModel, table=True):
    """A prescribed exercise inside a workout."""

    __tablename__ = "exercises"

    id: Optional[int] = Field(default=None, primary_key=True)
    workout_id: int = Field(foreign_key="workouts.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=200)
    order_index: int = Field(default=0, nullable=False)

    # Prescription
    sets: Optional[int] = Field(default=None)
    reps: Optional[str] = Field(default=None, max_length=50)
    weight_kg: Optional[float] = Field(default=None)
    rpe: Optional[float] = Field(default=None)
    intensity_percent: Optional[float] = Field(default=None)
