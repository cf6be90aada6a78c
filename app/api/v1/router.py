"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import adaptive, readiness, workouts

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    adaptive.router, prefix="/adaptive", tags=["Adaptive suggestions"]
)
api_router.include_router(
    readiness.router, prefix="/readiness", tags=["Readiness check-in"]
)
api_router.include_router(
    workouts.router, prefix="/workouts", tags=["Workout completion"]
)
