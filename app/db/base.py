"""
Base database configuration.

Import all models here so ``SQLModel.metadata`` knows every table.
"""

from app.models.workout import Workout, Exercise  # noqa: F401
from app.models.assignment import WorkoutAssignment  # noqa: F401
from app.models.completion import WorkoutCompletion, ExerciseResult  # noqa: F401
from app.models.readiness import ReadinessLog  # noqa: F401
from app.models.coaching import CoachAthlete, AthleteProfile  # noqa: F401
from app.models.suggestion_log import SuggestionLog  # noqa: F401
from app.models.progress import PersonalBest, UserStreak  # noqa: F401
