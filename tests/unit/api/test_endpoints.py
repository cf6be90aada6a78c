"""
HTTP tests for the v1 API.

The database dependency is bound to the in-memory test engine and the
adaptive services read from :class:`FakeTrainingData`.
"""

import datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from app.api.dependencies import get_training_data
from app.db.session import get_db
from app.main import app
from app.models.assignment import WorkoutAssignment
from fakes import FakeTrainingData, make_assignments, make_readiness

COACH_ID = 100
ATHLETE_ID = 1
PLAN_ID = 1


@pytest.fixture
def data():
    return FakeTrainingData(
        assignments=make_assignments(completed=4, skipped=6, plan_id=PLAN_ID),
        readiness=[make_readiness(2, datetime.date.today())],
        links={(COACH_ID, ATHLETE_ID)},
    )


@pytest.fixture
def client(engine, data):
    def _override_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_training_data] = lambda: data
    yield TestClient(app)
    app.dependency_overrides.clear()


def _as(user_id: int) -> dict:
    return {"X-User-Id": str(user_id)}


class TestHealth:

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


class TestAdaptive:

    def test_missing_identity(self, client):
        assert client.get(f"/api/v1/adaptive/plans/{PLAN_ID}/suggestions").status_code == 401

    def test_plan_suggestions(self, client):
        response = client.get(f"/api/v1/adaptive/plans/{PLAN_ID}/suggestions", params={"athlete_id": ATHLETE_ID},
                              headers=_as(COACH_ID))
        assert response.status_code == 200
        body = response.json()
        assert [s["priority"] for s in body["suggestions"]] == ["critical", "critical"]
        assert {s["recommendation"]["action"] for s in body["suggestions"]} == {"simplify_program",
                                                                               "swap_to_recovery"}
        assert body["denied"] is False

    def test_plan_suggestions_forbidden(self, client):
        response = client.get(f"/api/v1/adaptive/plans/{PLAN_ID}/suggestions", params={"athlete_id": ATHLETE_ID},
                              headers=_as(999))
        assert response.status_code == 403

    def test_session_suggestions(self, client):
        response = client.get("/api/v1/adaptive/workouts/5/suggestions", params={"athlete_id": ATHLETE_ID},
                              headers=_as(COACH_ID))
        assert response.status_code == 200
        assert [s["type"] for s in response.json()] == ["readiness_adjustment"]

    def test_session_suggestions_for_own_athlete_record(self, client):
        response = client.get("/api/v1/adaptive/workouts/5/suggestions", params={"athlete_id": ATHLETE_ID},
                              headers=_as(ATHLETE_ID))
        assert response.status_code == 200

    def test_session_suggestions_forbidden(self, client):
        response = client.get("/api/v1/adaptive/workouts/5/suggestions", params={"athlete_id": ATHLETE_ID},
                              headers=_as(999))
        assert response.status_code == 403

    def test_log_suggestion(self, client, data):
        suggestion = client.get("/api/v1/adaptive/workouts/5/suggestions", params={"athlete_id": ATHLETE_ID},
                                headers=_as(COACH_ID)).json()[0]
        response = client.post("/api/v1/adaptive/suggestions/log", headers=_as(COACH_ID),
                               json={"suggestion": suggestion, "action_taken": "accepted"})
        assert response.status_code == 202
        (entry,) = data.logged
        assert entry["coach_id"] == COACH_ID
        assert entry["action_taken"] == "accepted"

    def test_history(self, client):
        response = client.get(f"/api/v1/adaptive/athletes/{ATHLETE_ID}/history", headers=_as(COACH_ID))
        assert response.status_code == 200
        assert response.json()["context_text"].startswith("Athlete: Athlete")

    def test_history_forbidden(self, client):
        response = client.get(f"/api/v1/adaptive/athletes/{ATHLETE_ID}/history", headers=_as(999))
        assert response.status_code == 403


class TestReadiness:

    def test_upsert_status_codes(self, client):
        first = client.put("/api/v1/readiness/today", headers=_as(ATHLETE_ID), json={"subjective_score": 6})
        second = client.put("/api/v1/readiness/today", headers=_as(ATHLETE_ID), json={"subjective_score": 8})
        assert (first.status_code, second.status_code) == (201, 200)
        assert second.json()["id"] == first.json()["id"]

    def test_today(self, client):
        assert client.get("/api/v1/readiness/today", headers=_as(ATHLETE_ID)).status_code == 404
        client.put("/api/v1/readiness/today", headers=_as(ATHLETE_ID), json={"subjective_score": 6})
        response = client.get("/api/v1/readiness/today", headers=_as(ATHLETE_ID))
        assert response.json()["subjective_score"] == 6

    def test_validation(self, client):
        response = client.put("/api/v1/readiness/today", headers=_as(ATHLETE_ID), json={"subjective_score": 11})
        assert response.status_code == 422

    def test_history(self, client):
        client.put("/api/v1/readiness/today", headers=_as(ATHLETE_ID), json={"subjective_score": 6})
        response = client.get("/api/v1/readiness", headers=_as(ATHLETE_ID), params={"days": 7})
        assert len(response.json()) == 1


class TestWorkouts:

    def test_complete_assignment(self, client, engine):
        with Session(engine) as session:
            assignment = WorkoutAssignment(plan_id=PLAN_ID, workout_id=None, athlete_id=ATHLETE_ID,
                                           coach_id=COACH_ID, assigned_date=datetime.date.today())
            session.add(assignment)
            session.commit()
            assignment_id = assignment.id

        response = client.post(f"/api/v1/workouts/assignments/{assignment_id}/complete", headers=_as(ATHLETE_ID),
                               json={"overall_rpe": 7, "exercise_results": []})
        assert response.status_code == 201
        body = response.json()
        assert body["failed_steps"] == []
        assert body["current_streak"] == 1

    def test_complete_unknown_assignment(self, client):
        response = client.post("/api/v1/workouts/assignments/999/complete", headers=_as(ATHLETE_ID), json={})
        assert response.status_code == 404
