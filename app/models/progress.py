"""
Personal best and training streak database models.
"""

import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class PersonalBest(SQLModel, table=True):
    """Best value per athlete, exercise and PB type (weight, reps, time, distance)."""

    __tablename__ = "personal_bests"
    __table_args__ = (
        UniqueConstraint("athlete_id", "exercise_name", "pb_type", name="uq_pb_athlete_exercise_type"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    athlete_id: int = Field(nullable=False, index=True)
    exercise_name: str = Field(nullable=False, max_length=200)
    pb_type: str = Field(nullable=False, max_length=20)
    value: float = Field(nullable=False)
    achieved_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    completion_id: Optional[int] = Field(default=None, foreign_key="workout_completions.id")


class UserStreak(SQLModel, table=True):
    """Consecutive training-day streak for a user."""

    __tablename__ = "user_streaks"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, unique=True, index=True)
    current_streak: int = Field(default=0, nullable=False)
    longest_streak: int = Field(default=0, nullable=False)
    last_workout_date: Optional[datetime.date] = Field(default=None)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
