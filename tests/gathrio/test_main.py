from datetime import datetime

from fastapi.testclient import TestClient

from gathrio.main import app

client = TestClient(app)


def test_health_endpoint():
    """Test that the /api/health endpoint returns the correct response."""
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"

    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "gathrio_api"
    datetime.fromisoformat(data["timestamp"])


def test_cors_allows_frontend_origin():
    """Test that the configured frontend origin may send credentials."""
    response = client.options(
        "/api/auth/login",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert response.headers["access-control-allow-credentials"] == "true"
