"""
Shared API dependencies.

Reusable FastAPI dependencies for caller identity and the adaptive
services.  Authentication happens upstream; the gateway forwards the
authenticated user id in the ``X-User-Id`` header.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from app.adaptive.datasource import TrainingDataSource
from app.adaptive.history import AthleteHistoryService
from app.adaptive.suggestions import AdaptiveSuggestionService
from app.db.datasource import SQLTrainingDataSource
from app.db.session import new_session


def get_current_user_id(x_user_id: Optional[int] = Header(None), ) -> int:
    """Extract the caller's user id forwarded by the gateway."""
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing caller identity", )
    return x_user_id


def get_training_data() -> TrainingDataSource:
    return SQLTrainingDataSource(new_session)


def get_suggestion_service(data: TrainingDataSource = Depends(get_training_data), ) -> AdaptiveSuggestionService:
    return AdaptiveSuggestionService(data)


def get_history_service(data: TrainingDataSource = Depends(get_training_data), ) -> AthleteHistoryService:
    return AthleteHistoryService(data)
