"""Pydantic schemas for request/response validation."""

from app.schemas.training import (
    AthleteProfile,
    CompletedSession,
    ExerciseOutcome,
    PrescribedExercise,
    ReadinessEntry,
    ScheduledSession,
)
from app.schemas.suggestion import (
    Recommendation,
    Suggestion,
    SuggestionLogRequest,
    SuggestionReport,
)
from app.schemas.history import AthleteHistorySummary, ExerciseFrequency
from app.schemas.readiness import ReadinessCheckIn, ReadinessLogResponse
from app.schemas.completion import (
    CompletionOutcome,
    ExerciseResultData,
    PersonalBestCandidate,
    WorkoutCompletionCreate,
)

__all__ = [
    "AthleteProfile",
    "CompletedSession",
    "ExerciseOutcome",
    "PrescribedExercise",
    "ReadinessEntry",
    "ScheduledSession",
    "Recommendation",
    "Suggestion",
    "SuggestionLogRequest",
    "SuggestionReport",
    "AthleteHistorySummary",
    "ExerciseFrequency",
    "ReadinessCheckIn",
    "ReadinessLogResponse",
    "CompletionOutcome",
    "ExerciseResultData",
    "PersonalBestCandidate",
    "WorkoutCompletionCreate",
]
