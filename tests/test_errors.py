from fastapi.testclient import TestClient

from taskboard.main import app
from taskboard.store_db import get_db


def test_unexpected_error_returns_generic_500(client):
    def broken_db():
        raise RuntimeError("database exploded: secret connection details")
        yield  # pragma: no cover

    app.dependency_overrides[get_db] = broken_db
    with TestClient(app, raise_server_exceptions=False) as c:
        r = c.post("/api/auth/login", json={"email": "ada@example.com", "password": "secret1"})

    assert r.status_code == 500
    assert r.json() == {"success": False, "message": "Server Error"}
    assert "secret" not in r.text


def test_request_id_is_echoed(client):
    r = client.get("/api/health", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"

    r2 = client.get("/api/health")
    assert r2.headers["X-Request-ID"]


def test_security_headers(client):
    r = client.get("/api/health")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"


def test_non_integer_task_id_is_a_validation_error(client):
    from conftest import auth_headers, signup

    headers = auth_headers(signup(client)["token"])
    r = client.get("/api/tasks/not-a-number", headers=headers)
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "task_id"
