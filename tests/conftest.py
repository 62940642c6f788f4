# tests/conftest.py
# PURPOSE: create a TestClient and override DB dependency to use a temp SQLite file.

# Ensure project root is on sys.path so `import taskboard` works when running pytest.
import sys, os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Keep the app's own engine off disk; every test gets its own database below.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_AUTO_CREATE", "false")

import tempfile
from typing import Dict

import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from taskboard.db import Base, make_engine  # DB metadata + engine factory
from taskboard.main import app  # FastAPI app
from taskboard.rate_limit import limiter
from taskboard.store_db import get_db  # original dependency to override


@pytest.fixture()
def session_factory():
    # 1) Create a temporary SQLite file (so data is isolated per test)
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    engine = make_engine(f"sqlite:///{tmp.name}")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # 2) Create tables for tests
    Base.metadata.create_all(bind=engine)

    yield TestingSessionLocal

    # 3) Cleanup: drop tables, dispose engine, delete temp file
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    os.unlink(tmp.name)


@pytest.fixture()
def client(session_factory):
    # Override the app's get_db dependency to use the temp database
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # Rate limit counters are process-wide; start every test from zero
    limiter.reset()

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


# --- Helpers shared by API tests ---


def signup(client, name: str = "Ada", email: str = "ada@example.com", password: str = "secret1") -> Dict:
    """Sign up a user and return the response JSON (token + user)."""
    r = client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})
    assert r.status_code == 201, r.text
    return r.json()


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user_a(client) -> Dict[str, str]:
    """Auth headers for a first user."""
    return auth_headers(signup(client, "Alice", "alice@example.com")["token"])


@pytest.fixture()
def user_b(client) -> Dict[str, str]:
    """Auth headers for a second, unrelated user."""
    return auth_headers(signup(client, "Bob", "bob@example.com")["token"])


def create_task(client, headers: Dict[str, str], title: str, **fields) -> Dict:
    """Create a task and return the task JSON."""
    r = client.post("/api/tasks", json={"title": title, **fields}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["task"]
