"""Athlete history summary schemas."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

VolumeTrend = Literal["increasing", "stable", "decreasing"]


class ExerciseFrequency(BaseModel):
    """How often an exercise appears in the analysed window."""

    name: str
    frequency: int = Field(..., ge=1)
    best_load: Optional[float] = Field(None, description="Heaviest load used (None if never loaded)")


class AthleteHistorySummary(BaseModel):
    """Compact training history for downstream text generation.

    ``context_text`` is the flattened digest; every other field is the
    structured form of the same data.
    """

    athlete_id: int
    display_name: str
    level: Optional[str] = None
    weeks_analyzed: int = Field(..., ge=0, description="ISO weeks with at least one session")
    total_volume_load: int = Field(..., ge=0)
    avg_weekly_volume: int = Field(..., ge=0)
    volume_trend: VolumeTrend
    avg_session_rpe: Optional[float] = None
    avg_readiness: Optional[float] = None
    top_exercises: list[ExerciseFrequency] = Field(default_factory=list)
    acwr: Optional[float] = None
    flags: list[str] = Field(default_factory=list)
    context_text: str
