from fastapi import APIRouter
from fastapi.testclient import TestClient

from dynform.main import app


def test_health_ok():
    """Test health check endpoint"""
    client = TestClient(app)
    r = client.get("/api/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["uptime"] >= 0
    assert "timestamp" in data


def test_root_endpoint():
    """Test root endpoint"""
    client = TestClient(app)
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Dynamic Form Service"
    assert data["status"] == "ok"
    assert data["health"] == "/api/health"


def test_unexpected_error_returns_500():
    router = APIRouter()

    @router.get("/api/_boom")
    def boom():
        raise RuntimeError("kaboom")

    app.include_router(router)
    try:
        client = TestClient(app, raise_server_exceptions=False)
        r = client.get("/api/_boom")
        assert r.status_code == 500
        assert r.json() == {"message": "Internal server error"}
    finally:
        app.router.routes[:] = [rt for rt in app.router.routes if getattr(rt, "path", None) != "/api/_boom"]
