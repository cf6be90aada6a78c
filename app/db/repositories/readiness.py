"""
Readiness log repository.

Handles database operations for :class:`ReadinessLog`.
"""

import datetime
from typing import Optional

from sqlmodel import Session, select

from app.models.readiness import ReadinessLog


class ReadinessLogRepository:
    """Repository for ReadinessLog database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: ReadinessLog) -> ReadinessLog:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def get_by_athlete_and_date(self, athlete_id: int, log_date: datetime.date, ) -> Optional[ReadinessLog]:
        """Get the single entry for an athlete on a specific date."""
        statement = select(ReadinessLog).where(ReadinessLog.athlete_id == athlete_id,
                                               ReadinessLog.log_date == log_date, )
        return self.session.exec(statement).first()

    def get_by_athlete_date_range(self, athlete_id: int, start: datetime.date,
                                  end: datetime.date, ) -> list[ReadinessLog]:
        """Get entries for an athlete within a date range (inclusive), oldest first."""
        statement = (select(ReadinessLog)
                     .where(ReadinessLog.athlete_id == athlete_id, ReadinessLog.log_date >= start,
                            ReadinessLog.log_date <= end, )
                     .order_by(ReadinessLog.log_date))
        return list(self.session.exec(statement).all())

    def update(self, entry: ReadinessLog) -> ReadinessLog:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry
