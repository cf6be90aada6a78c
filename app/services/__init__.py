"""Business logic services."""

from app.services.readiness_service import ReadinessService
from app.services.completion_service import WorkoutCompletionService

__all__ = [
    "ReadinessService",
    "WorkoutCompletionService",
]
