"""
Readiness check-in API schemas.

One check-in per athlete per day.  ``subjective_score`` is the composite
1-10 rating; the components use 1-5 scales (sleep quality, soreness,
energy, stress) plus hours slept.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReadinessCheckIn(BaseModel):
    """Daily readiness submission."""

    log_date: Optional[datetime.date] = Field(None, description="Defaults to today")
    subjective_score: float = Field(..., ge=1.0, le=10.0, description="Composite readiness 1-10")
    sleep_quality: Optional[int] = Field(None, ge=1, le=5)
    sleep_hours: Optional[float] = Field(None, ge=0.0, le=24.0)
    muscle_soreness: Optional[int] = Field(None, ge=1, le=5)
    energy_level: Optional[int] = Field(None, ge=1, le=5)
    stress_level: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = Field(None, max_length=1000)


class ReadinessLogResponse(ReadinessCheckIn):
    """Stored readiness check-in."""

    id: int
    athlete_id: int
    log_date: datetime.date
    created_at: datetime.datetime
    updated_at: datetime.datetime
