import pytest
from rest_framework.test import APIClient

from apps.persona import views
from apps.persona.sessions import session_registry


@pytest.fixture
def scheduled(monkeypatch):
    sessions = []

    async def fake_start_priming(session):
        sessions.append(session)

    monkeypatch.setattr(views, "start_priming", fake_start_priming)
    return sessions


@pytest.fixture
def client():
    return APIClient()


def test_upload_creates_session_and_schedules_priming(client, scheduled):
    response = client.post(
        "/api/upload/",
        {"transcriptText": "[1] Anju: hi", "personaName": "Anju"},
        format="json"
    )

    assert response.status_code == 200
    session_id = response.json()["sessionId"]
    session = session_registry.get(session_id)
    assert session is not None
    assert session.persona_name == "Anju"
    assert session.processing is True
    assert scheduled == [session]


@pytest.mark.parametrize("payload", [
    {"personaName": "Anju"},
    {"transcriptText": "[1] Anju: hi"},
    {"transcriptText": "", "personaName": "Anju"},
    {"transcriptText": "[1] Anju: hi", "personaName": "   "},
])
def test_upload_rejects_missing_fields(client, scheduled, payload):
    response = client.post("/api/upload/", payload, format="json")

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert len(session_registry) == 0
    assert scheduled == []


def test_upload_rejects_malformed_json(client, scheduled):
    response = client.post("/api/upload/", "{not json", content_type="application/json")

    assert response.status_code == 400
    assert len(session_registry) == 0


def test_health_reports_session_count(client, scheduled):
    session_registry.create("[1] Anju: hi", "Anju")

    response = client.get("/api/health/")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "sessions": 1}
