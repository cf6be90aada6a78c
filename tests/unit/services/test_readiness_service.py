"""
Tests for the readiness check-in service (date-keyed upsert).
"""

import datetime

from sqlmodel import select

from app.models.readiness import ReadinessLog
from app.schemas.readiness import ReadinessCheckIn
from app.services.readiness_service import ReadinessService

DAY = datetime.date(2026, 3, 2)


class TestSubmit:

    def test_first_submission_creates(self, session):
        entry, created = ReadinessService(session).submit(1, ReadinessCheckIn(log_date=DAY, subjective_score=6))
        assert created is True
        assert entry.log_date == DAY
        assert entry.subjective_score == 6

    def test_resubmission_overwrites(self, session):
        service = ReadinessService(session)
        first, _ = service.submit(1, ReadinessCheckIn(log_date=DAY, subjective_score=6, muscle_soreness=4,
                                                      notes="tight hamstrings"))
        second, created = service.submit(1, ReadinessCheckIn(log_date=DAY, subjective_score=8))

        assert created is False
        assert second.id == first.id
        assert second.subjective_score == 8
        assert second.muscle_soreness is None
        assert second.notes is None
        assert len(session.exec(select(ReadinessLog)).all()) == 1

    def test_same_payload_twice_is_idempotent(self, session):
        service = ReadinessService(session)
        data = ReadinessCheckIn(log_date=DAY, subjective_score=5, sleep_hours=7.5)
        service.submit(1, data)
        service.submit(1, data)
        (row,) = session.exec(select(ReadinessLog)).all()
        assert (row.subjective_score, row.sleep_hours) == (5, 7.5)

    def test_athletes_are_independent(self, session):
        service = ReadinessService(session)
        service.submit(1, ReadinessCheckIn(log_date=DAY, subjective_score=5))
        _, created = service.submit(2, ReadinessCheckIn(log_date=DAY, subjective_score=5))
        assert created is True


class TestQueries:

    def test_get_today(self, session):
        service = ReadinessService(session)
        assert service.get_today(1, DAY) is None
        service.submit(1, ReadinessCheckIn(log_date=DAY, subjective_score=4))
        assert service.get_today(1, DAY).subjective_score == 4

    def test_history_most_recent_first(self, session):
        service = ReadinessService(session)
        for offset, score in [(10, 5), (1, 7), (40, 3)]:
            service.submit(1, ReadinessCheckIn(log_date=DAY - datetime.timedelta(days=offset), subjective_score=score))
        history = service.get_history(1, days=30, today=DAY)
        assert [h.subjective_score for h in history] == [7, 5]
