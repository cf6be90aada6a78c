"""
Coaching repository.

Relationship checks and athlete profile lookups.
"""

from typing import Optional

from sqlmodel import Session, select

from app.models.coaching import AthleteProfile, CoachAthlete


class CoachingRepository:
    """Repository for CoachAthlete / AthleteProfile database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_active_link(self, coach_id: int, athlete_id: int) -> Optional[CoachAthlete]:
        statement = select(CoachAthlete).where(CoachAthlete.coach_id == coach_id,
                                               CoachAthlete.athlete_id == athlete_id,
                                               CoachAthlete.status == "active", )
        return self.session.exec(statement).first()

    def get_profile(self, athlete_id: int) -> Optional[AthleteProfile]:
        return self.session.get(AthleteProfile, athlete_id)
