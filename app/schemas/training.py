"""
Training record schemas consumed by the adaptive engine.

These are read-only views over externally persisted rows.  The engine
never mutates them; repositories map ORM rows onto these models so the
aggregator and classifiers stay storage-agnostic.
"""

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

AssignmentStatus = Literal["pending", "completed", "skipped"]


class PrescribedExercise(BaseModel):
    """An exercise as prescribed by the coach inside a workout."""

    id: int
    name: str
    sets: Optional[int] = Field(None, ge=0)
    reps: Optional[str] = Field(None, description="Free text, e.g. '8' or '8-10'")
    weight_kg: Optional[float] = Field(None, ge=0.0)
    rpe: Optional[float] = Field(None, ge=0.0, le=10.0)


class ExerciseOutcome(BaseModel):
    """What the athlete actually did for one exercise of a session."""

    exercise_id: Optional[int] = None
    exercise_name: Optional[str] = None
    sets_completed: Optional[int] = Field(None, ge=0)
    reps_completed: Optional[str] = Field(None, description="Free text, parsed as leading integer")
    weight_used_kg: Optional[float] = Field(None, ge=0.0)
    rpe: Optional[float] = Field(None, ge=0.0, le=10.0)
    is_pb: bool = False
    prescribed: Optional[PrescribedExercise] = None


class CompletedSession(BaseModel):
    """A completed workout with its exercise outcomes."""

    id: int
    athlete_id: int
    assignment_id: Optional[int] = None
    workout_id: Optional[int] = Field(None, description="None when the assignment link is broken")
    completed_at: datetime.datetime
    overall_rpe: Optional[float] = Field(None, ge=0.0, le=10.0)
    target_rpe: Optional[float] = Field(None, ge=0.0, le=10.0)
    duration_minutes: Optional[int] = Field(None, ge=0)
    results: list[ExerciseOutcome] = Field(default_factory=list)


class ScheduledSession(BaseModel):
    """A workout assignment with its lifecycle status."""

    id: int
    athlete_id: int
    coach_id: int
    plan_id: Optional[int] = None
    workout_id: Optional[int] = None
    assigned_date: datetime.date
    status: AssignmentStatus


class ReadinessEntry(BaseModel):
    """Daily self-reported readiness check-in."""

    athlete_id: int
    log_date: datetime.date
    subjective_score: Optional[float] = Field(None, ge=1.0, le=10.0)
    sleep_quality: Optional[int] = Field(None, ge=1, le=5)
    sleep_hours: Optional[float] = Field(None, ge=0.0, le=24.0)
    muscle_soreness: Optional[int] = Field(None, ge=1, le=5)
    energy_level: Optional[int] = Field(None, ge=1, le=5)
    stress_level: Optional[int] = Field(None, ge=1, le=5)


class AthleteProfile(BaseModel):
    """Identity and background used by the history digest."""

    athlete_id: int
    display_name: Optional[str] = None
    competition_level: Optional[str] = None
    injury_notes: Optional[str] = None
