"""
Workout completion schemas.

The completion request mirrors what the athlete logs at the end of a
session.  The outcome reports which post-completion steps failed; a
failed side-effect step never undoes the completion itself.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

PBType = Literal["weight", "reps", "time", "distance"]

CompletionStep = Literal["record_completion", "mark_assignment", "personal_bests", "streak"]


class ExerciseResultData(BaseModel):
    """Logged result for one prescribed exercise."""

    exercise_id: int
    sets_completed: Optional[int] = Field(None, ge=0)
    reps_completed: Optional[str] = Field(None, max_length=50)
    weight_used_kg: Optional[float] = Field(None, ge=0.0)
    duration_seconds: Optional[int] = Field(None, ge=0)
    distance_meters: Optional[float] = Field(None, ge=0.0)
    rpe: Optional[float] = Field(None, ge=0.0, le=10.0)
    is_pb: bool = False
    notes: Optional[str] = Field(None, max_length=1000)


class WorkoutCompletionCreate(BaseModel):
    """Request body for completing an assignment."""

    duration_minutes: Optional[int] = Field(None, ge=0)
    athlete_notes: Optional[str] = Field(None, max_length=2000)
    overall_rpe: Optional[float] = Field(None, ge=0.0, le=10.0)
    exercise_results: list[ExerciseResultData] = Field(default_factory=list)


class PersonalBestCandidate(BaseModel):
    exercise_id: int
    pb_type: PBType
    value: float = Field(..., gt=0)


class CompletionOutcome(BaseModel):
    """Result of the post-completion pipeline."""

    completion_id: int
    personal_bests: int = Field(0, description="Number of PB rows upserted")
    current_streak: Optional[int] = None
    failed_steps: list[CompletionStep] = Field(default_factory=list)
