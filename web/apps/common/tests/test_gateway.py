"""Gateway plumbing: welcome route, health check, request ids, body limit."""

import pytest


def test_welcome(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "message" in r.json()


@pytest.mark.django_db
def test_health_reports_database(client):
    r = client.get("/health/")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["components"]["db"]["ok"] is True


def test_request_id_is_echoed(client):
    r = client.get("/", HTTP_X_REQUEST_ID="abc-123")
    assert r["X-Request-ID"] == "abc-123"


def test_request_id_is_generated_when_missing(client):
    r = client.get("/")
    assert r["X-Request-ID"]


def test_oversized_api_body_is_rejected(client, monkeypatch):
    monkeypatch.setattr("gateway.middleware.MAX_API_BYTES", 10)
    r = client.post("/api/auth/login", data={"email": "a" * 50}, content_type="application/json")
    assert r.status_code == 413
    assert r.json()["detail"] == "PAYLOAD_TOO_LARGE"
