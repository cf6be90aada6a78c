"""
Progress repository.

Personal best upserts and training streak persistence.
"""

import datetime
from typing import Optional

from sqlmodel import Session, select

from app.models.progress import PersonalBest, UserStreak


class ProgressRepository:
    """Repository for PersonalBest / UserStreak database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_personal_best(self, athlete_id: int, exercise_name: str, pb_type: str, ) -> Optional[PersonalBest]:
        statement = select(PersonalBest).where(PersonalBest.athlete_id == athlete_id,
                                               PersonalBest.exercise_name == exercise_name,
                                               PersonalBest.pb_type == pb_type, )
        return self.session.exec(statement).first()

    def upsert_personal_best(self, athlete_id: int, exercise_name: str, pb_type: str, value: float,
                             completion_id: Optional[int] = None, ) -> PersonalBest:
        """Create or overwrite the PB keyed on athlete + exercise + type."""
        entry = self.get_personal_best(athlete_id, exercise_name, pb_type)
        if entry is None:
            entry = PersonalBest(athlete_id=athlete_id, exercise_name=exercise_name, pb_type=pb_type, value=value,
                                 completion_id=completion_id, )
        else:
            entry.value = value
            entry.completion_id = completion_id
            entry.achieved_at = datetime.datetime.utcnow()
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def get_streak(self, user_id: int) -> Optional[UserStreak]:
        statement = select(UserStreak).where(UserStreak.user_id == user_id)
        return self.session.exec(statement).first()

    def save_streak(self, streak: UserStreak) -> UserStreak:
        streak.updated_at = datetime.datetime.utcnow()
        self.session.add(streak)
        self.session.commit()
        self.session.refresh(streak)
        return streak
