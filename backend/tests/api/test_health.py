"""Tests for the health endpoints and application-level plumbing."""

from fastapi.testclient import TestClient

from src.main import create_application


def test_health_reports_database(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["environment"] == "test"


def test_api_health_alias(client):
    assert client.get("/api/health").json()["status"] == "healthy"


def test_liveness(client):
    assert client.get("/health/live").json()["status"] == "alive"


def test_response_time_header(client):
    resp = client.get("/health/live")

    assert resp.headers["X-Response-Time"].endswith("ms")


def test_root_lists_app_name(client):
    body = client.get("/").json()

    assert body["name"] == "OnScript Analytics"
    assert body["status"] == "running"


def test_unhandled_value_error_maps_to_error_body():
    app = create_application()

    @app.get("/boom")
    async def boom():
        raise ValueError("campaign id is malformed")

    resp = TestClient(app).get("/boom")

    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "error": "validation_error",
        "message": "campaign id is malformed",
    }
