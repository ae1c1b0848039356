from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from studyflow.main import app
from studyflow.services.routine_analyzer import (
    FALLBACK_FEEDBACK,
    FALLBACK_MOTIVATION,
    RoutineAnalyzer,
    get_routine_analyzer,
)


@pytest.fixture()
def client():
    app.dependency_overrides[get_routine_analyzer] = lambda: RoutineAnalyzer(None)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_motivation_without_key_uses_fallback(client) -> None:
    response = client.post("/insights/motivation", json={"progress": 55, "streak": 4})

    assert response.status_code == 200
    assert response.json() == {"message": FALLBACK_MOTIVATION}


def test_performance_without_key_uses_fallback(client) -> None:
    response = client.post(
        "/insights/performance",
        json={"hours_studied": 3, "tasks_completed": 5, "motivation_score": 80},
    )

    assert response.status_code == 200
    assert response.json()["message"] == FALLBACK_FEEDBACK


def test_motivation_validates_range(client) -> None:
    response = client.post("/insights/motivation", json={"progress": 140, "streak": 1})

    assert response.status_code == 422
