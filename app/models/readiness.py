"""
Readiness check-in database model.

One entry per athlete per day (enforced by unique constraint); a
re-submission for the same day overwrites the existing row.
"""

import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class ReadinessLog(SQLModel, table=True):
    """Daily self-reported readiness."""

    __tablename__ = "readiness_logs"
    __table_args__ = (
        UniqueConstraint("athlete_id", "log_date", name="uq_readiness_athlete_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    athlete_id: int = Field(nullable=False, index=True)
    log_date: datetime.date = Field(nullable=False, index=True)

    # Composite score 1-10
    subjective_score: Optional[float] = Field(default=None)

    # Components (1-5 scales, hours for sleep)
    sleep_quality: Optional[int] = Field(default=None)
    sleep_hours: Optional[float] = Field(default=None)
    muscle_soreness: Optional[int] = Field(default=None)
    energy_level: Optional[int] = Field(default=None)
    stress_level: Optional[int] = Field(default=None)
    notes: Optional[str] = Field(default=None, max_length=1000)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
