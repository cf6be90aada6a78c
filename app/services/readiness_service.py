"""
Readiness check-in service.

Daily check-ins are upserted on athlete + date: submitting twice on the
same day overwrites the first entry, it never creates a second one.
"""

import datetime
from typing import Optional

from loguru import logger
from sqlmodel import Session

from app.db.repositories.readiness import ReadinessLogRepository
from app.models.readiness import ReadinessLog
from app.schemas.readiness import ReadinessCheckIn, ReadinessLogResponse

_CHECK_IN_FIELDS = ("subjective_score", "sleep_quality", "sleep_hours", "muscle_soreness", "energy_level",
                    "stress_level", "notes",)


class ReadinessService:
    """Service for readiness check-in business logic."""

    def __init__(self, session: Session):
        self.repository = ReadinessLogRepository(session)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def submit(self, athlete_id: int, data: ReadinessCheckIn, ) -> tuple[ReadinessLogResponse, bool]:
        """Create or overwrite the check-in for the given day.

        Returns:
            Tuple of (response, created) where created is True if new entry.
        """
        log_date = data.log_date or datetime.date.today()
        existing = self.repository.get_by_athlete_and_date(athlete_id, log_date)

        if existing:
            for key in _CHECK_IN_FIELDS:
                setattr(existing, key, getattr(data, key))
            existing.updated_at = datetime.datetime.utcnow()
            entry = self.repository.update(existing)
            logger.debug(f"[READINESS] overwrote check-in athlete={athlete_id} date={log_date}")
            return self._to_response(entry), False

        entry = ReadinessLog(athlete_id=athlete_id, log_date=log_date,
                             **{key: getattr(data, key) for key in _CHECK_IN_FIELDS})
        entry = self.repository.create(entry)
        return self._to_response(entry), True

    def get_today(self, athlete_id: int, today: Optional[datetime.date] = None) -> Optional[ReadinessLogResponse]:
        entry = self.repository.get_by_athlete_and_date(athlete_id, today or datetime.date.today())
        return self._to_response(entry) if entry else None

    def get_history(self, athlete_id: int, days: int = 30,
                    today: Optional[datetime.date] = None, ) -> list[ReadinessLogResponse]:
        """Check-ins of the last ``days`` days, most recent first."""
        end = today or datetime.date.today()
        start = end - datetime.timedelta(days=days)
        entries = self.repository.get_by_athlete_date_range(athlete_id, start, end)
        return [self._to_response(e) for e in reversed(entries)]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _to_response(entry: ReadinessLog) -> ReadinessLogResponse:
        return ReadinessLogResponse(id=entry.id, athlete_id=entry.athlete_id, log_date=entry.log_date,
                                    subjective_score=entry.subjective_score, sleep_quality=entry.sleep_quality,
                                    sleep_hours=entry.sleep_hours, muscle_soreness=entry.muscle_soreness,
                                    energy_level=entry.energy_level, stress_level=entry.stress_level,
                                    notes=entry.notes, created_at=entry.created_at, updated_at=entry.updated_at, )
