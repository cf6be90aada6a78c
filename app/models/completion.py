"""
Workout completion and exercise result database models.

A completion records that an athlete finished an assignment, with the
self-reported session RPE.  Each exercise result stores what was
actually done; reps are free text ("8", "8-10", "AMRAP").
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class WorkoutCompletion(SQLModel, table=True):
    """A completed workout session."""

    __tablename__ = "workout_completions"

    id: Optional[int] = Field(default=None, primary_key=True)
    assignment_id: Optional[int] = Field(default=None, foreign_key="workout_assignments.id", index=True)
    athlete_id: int = Field(nullable=False, index=True)
    completed_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow, index=True)

    overall_rpe: Optional[float] = Field(default=None)
    duration_minutes: Optional[int] = Field(default=None)
    athlete_notes: Optional[str] = Field(default=None, max_length=2000)
    has_pb: bool = Field(default=False, nullable=False)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)


class ExerciseResult(SQLModel, table=True):
    """What the athlete did for one prescribed exercise."""

    __tablename__ = "exercise_results"

    id: Optional[int] = Field(default=None, primary_key=True)
    completion_id: int = Field(foreign_key="workout_completions.id", nullable=False, index=True)
    exercise_id: Optional[int] = Field(default=None, foreign_key="exercises.id", index=True)

    sets_completed: Optional[int] = Field(default=None)
    reps_completed: Optional[str] = Field(default=None, max_length=50)
    weight_used_kg: Optional[float] = Field(default=None)
    duration_seconds: Optional[int] = Field(default=None)
    distance_meters: Optional[float] = Field(default=None)
    rpe: Optional[float] = Field(default=None)
    is_pb: bool = Field(default=False, nullable=False)
    notes: Optional[str] = Field(default=None, max_length=1000)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow, index=True)
