from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from studyflow.core.config import settings
from studyflow.db.deps import get_db
from studyflow.db.models.routine import Routine
from studyflow.db.models.user import User
from studyflow.main import app


@pytest.fixture()
def client(session_factory, monkeypatch):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(settings, "debug", True)
    with TestClient(app) as test_client:
        yield test_client, session_factory
    app.dependency_overrides.clear()


def _seed_orphan(session_factory, age_hours: int):
    with session_factory() as db:
        user_id = uuid4()
        db.add(User(id=user_id))
        db.flush()
        routine = Routine(
            user_id=user_id,
            wake_up_time="05:30",
            study_methods=["Mind maps"],
            daily_tasks=["Essay"],
            priorities=["Portuguese"],
            rest_time="21:30",
            created_at=datetime.now(timezone.utc) - timedelta(hours=age_hours),
        )
        db.add(routine)
        db.commit()
        return routine.id


def test_jobs_config_reports_sweep_settings(client, monkeypatch) -> None:
    test_client, _ = client
    monkeypatch.setattr(settings, "orphan_grace_hours", 12)

    response = test_client.get("/jobs")

    assert response.status_code == 200
    data = response.json()
    assert data["orphan_sweep"]["grace_hours"] == 12
    assert data["request_id"]


def test_run_now_forbidden_outside_debug(client, monkeypatch) -> None:
    test_client, _ = client
    monkeypatch.setattr(settings, "debug", False)

    response = test_client.post("/jobs/run-now", json={"job": "orphan_sweep"})

    assert response.status_code == 403


def test_run_now_dry_run_then_sweep(client) -> None:
    test_client, session_factory = client
    routine_id = _seed_orphan(session_factory, age_hours=72)

    dry = test_client.post("/jobs/run-now", json={"job": "orphan_sweep", "dry_run": True, "grace_hours": 24})
    assert dry.status_code == 200
    assert dry.json()["routines_scanned"] == 1
    assert dry.json()["routines_deleted"] == 0

    real = test_client.post("/jobs/run-now", json={"job": "orphan_sweep", "grace_hours": 24})
    assert real.status_code == 200
    assert real.json()["deleted_ids"] == [str(routine_id)]


def test_run_now_rejects_unknown_job(client) -> None:
    test_client, _ = client

    response = test_client.post("/jobs/run-now", json={"job": "weekly_plan"})

    assert response.status_code == 422
