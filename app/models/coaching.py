"""
Coach-athlete relationship and athlete profile database models.
"""

import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class CoachAthlete(SQLModel, table=True):
    """Link between a coach and an athlete.

    Only ``active`` links grant the coach access to athlete data.
    """

    __tablename__ = "coach_athletes"
    __table_args__ = (
        UniqueConstraint("coach_id", "athlete_id", name="uq_coach_athlete"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    coach_id: int = Field(nullable=False, index=True)
    athlete_id: int = Field(nullable=False, index=True)

    # pending | active | inactive
    status: str = Field(default="pending", nullable=False, max_length=20)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)


class AthleteProfile(SQLModel, table=True):
    """Athlete background used in the history digest."""

    __tablename__ = "athlete_profiles"

    athlete_id: int = Field(primary_key=True)
    display_name: Optional[str] = Field(default=None, max_length=100)
    competition_level: Optional[str] = Field(default=None, max_length=50)
    injury_notes: Optional[str] = Field(default=None, max_length=2000)
