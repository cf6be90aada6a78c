"""
Workout completion endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.api.dependencies import get_current_user_id
from app.db.session import get_db
from app.schemas.completion import CompletionOutcome, WorkoutCompletionCreate
from app.services.completion_service import WorkoutCompletionService

router = APIRouter()


@router.post("/assignments/{assignment_id}/complete", summary="Complete a workout assignment.",
             response_model=CompletionOutcome, status_code=status.HTTP_201_CREATED, )
def complete_assignment(assignment_id: int, data: WorkoutCompletionCreate, db: Session = Depends(get_db),
                        athlete_id: int = Depends(get_current_user_id), ):
    return WorkoutCompletionService(db).complete(athlete_id, assignment_id, data)
