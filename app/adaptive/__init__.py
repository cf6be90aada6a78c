"""Adaptive engine: rule classifiers, suggestion orchestration, history summary."""

from app.adaptive.history import AthleteHistoryService
from app.adaptive.suggestions import AdaptiveSuggestionService

__all__ = ["AdaptiveSuggestionService", "AthleteHistoryService"]
