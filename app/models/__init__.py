"""SQLModel database models."""

from app.models.workout import Workout, Exercise
from app.models.assignment import WorkoutAssignment
from app.models.completion import WorkoutCompletion, ExerciseResult
from app.models.readiness import ReadinessLog
from app.models.coaching import CoachAthlete, AthleteProfile
from app.models.suggestion_log import SuggestionLog
from app.models.progress import PersonalBest, UserStreak

__all__ = [
    "Workout",
    "Exercise",
    "WorkoutAssignment",
    "WorkoutCompletion",
    "ExerciseResult",
    "ReadinessLog",
    "CoachAthlete",
    "AthleteProfile",
    "SuggestionLog",
    "PersonalBest",
    "UserStreak",
]
