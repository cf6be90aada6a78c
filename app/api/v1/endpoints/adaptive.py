"""
Adaptive endpoints: suggestions, audit log and athlete history.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.adaptive.errors import AthleteAccessDenied
from app.adaptive.history import AthleteHistoryService
from app.adaptive.suggestions import AdaptiveSuggestionService
from app.api.dependencies import get_current_user_id, get_history_service, get_suggestion_service
from app.schemas.history import AthleteHistorySummary
from app.schemas.suggestion import Suggestion, SuggestionLogRequest, SuggestionReport

router = APIRouter()


@router.get(
    "/plans/{plan_id}/suggestions",
    summary="Get prioritised suggestions for a plan (optionally one athlete).",
    response_model=SuggestionReport,
)
def get_plan_suggestions(
    plan_id: int,
    athlete_id: Optional[int] = Query(None, description="Restrict per-athlete checks to this athlete"),
    log_shown: bool = Query(False, description="Append shown suggestions to the audit log"),
    coach_id: int = Depends(get_current_user_id),
    service: AdaptiveSuggestionService = Depends(get_suggestion_service),
):
    report = service.evaluate_plan(plan_id, coach_id, athlete_id, log_shown=log_shown)
    if report.denied:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail="No active coach-athlete relationship", )
    return report


@router.get(
    "/workouts/{workout_id}/suggestions",
    summary="Get readiness and progression suggestions for an upcoming session.",
    response_model=list[Suggestion],
)
def get_session_suggestions(
    workout_id: int,
    athlete_id: int = Query(..., description="Athlete about to train"),
    caller_id: int = Depends(get_current_user_id),
    service: AdaptiveSuggestionService = Depends(get_suggestion_service),
):
    try:
        service.require_athlete_access(caller_id, athlete_id)
    except AthleteAccessDenied as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e), )
    return service.get_suggestions_for_session(workout_id, athlete_id)


@router.post(
    "/suggestions/log",
    summary="Record the action taken on a suggestion.",
    status_code=status.HTTP_202_ACCEPTED,
)
def log_suggestion(
    data: SuggestionLogRequest,
    coach_id: int = Depends(get_current_user_id),
    service: AdaptiveSuggestionService = Depends(get_suggestion_service),
):
    service.log_suggestion(coach_id, data.suggestion, data.action_taken, data.coach_notes)
    return {"status": "accepted"}


@router.get(
    "/athletes/{athlete_id}/history",
    summary="Get the training history summary of an athlete.",
    response_model=AthleteHistorySummary,
)
def get_athlete_history(
    athlete_id: int,
    weeks_back: Optional[int] = Query(None, ge=1, le=52, description="Lookback in weeks"),
    coach_id: int = Depends(get_current_user_id),
    service: AthleteHistoryService = Depends(get_history_service),
):
    try:
        return service.get_athlete_summary(athlete_id, coach_id=coach_id, weeks_back=weeks_back)
    except AthleteAccessDenied as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e), )
