"""Database repositories."""

from app.db.repositories.workout import WorkoutRepository
from app.db.repositories.assignment import WorkoutAssignmentRepository
from app.db.repositories.completion import WorkoutCompletionRepository
from app.db.repositories.readiness import ReadinessLogRepository
from app.db.repositories.coaching import CoachingRepository
from app.db.repositories.suggestion_log import SuggestionLogRepository
from app.db.repositories.progress import ProgressRepository

__all__ = [
    "WorkoutRepository",
    "WorkoutAssignmentRepository",
    "WorkoutCompletionRepository",
    "ReadinessLogRepository",
    "CoachingRepository",
    "SuggestionLogRepository",
    "ProgressRepository",
]
