"""
Readiness endpoints.

Daily check-in with date-based upsert.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlmodel import Session

from app.api.dependencies import get_current_user_id
from app.db.session import get_db
from app.schemas.readiness import ReadinessCheckIn, ReadinessLogResponse
from app.services.readiness_service import ReadinessService

router = APIRouter()


@router.put("/today", summary="Submit (or overwrite) a daily readiness check-in.",
            response_model=ReadinessLogResponse, )
def submit_readiness(data: ReadinessCheckIn, response: Response, db: Session = Depends(get_db),
                     athlete_id: int = Depends(get_current_user_id), ):
    """Upsert: creates the check-in if it doesn't exist, overwrites it if it does."""
    entry, created = ReadinessService(db).submit(athlete_id, data)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return entry


@router.get("/today", summary="Get today's readiness check-in.", response_model=ReadinessLogResponse, )
def get_today_readiness(db: Session = Depends(get_db), athlete_id: int = Depends(get_current_user_id), ):
    entry = ReadinessService(db).get_today(athlete_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No readiness check-in today", )
    return entry


@router.get("", summary="List recent readiness check-ins.", response_model=list[ReadinessLogResponse], )
def list_readiness(days: int = Query(30, ge=1, le=365, description="Lookback in days"),
                   db: Session = Depends(get_db), athlete_id: int = Depends(get_current_user_id), ):
    return ReadinessService(db).get_history(athlete_id, days)
