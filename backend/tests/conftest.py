import os

# Use in-memory sqlite for tests; must be set before app.* is imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "warning")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.db import Base, SessionLocal, engine  # noqa: E402
from app.core.geometry import Point  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(client, username: str) -> dict:
    r = client.post("/users/", json={"username": username})
    assert r.status_code == 201, r.text
    return {"X-User-Id": str(r.json()["id"])}


@pytest.fixture
def users(client):
    """Request headers for three unrelated users."""
    return {name: make_user(client, name) for name in ("alice", "bob", "carol")}


class FakeProvider:
    """Routing provider returning a straight 3-point line per leg."""

    def __init__(self, error: Exception | None = None, steps: int = 2):
        self.error = error
        self.steps = steps
        self.calls = []

    def route_leg(self, start: Point, end: Point, profile: str) -> list[Point]:
        self.calls.append((start, end, profile))
        if self.error is not None:
            raise self.error
        return [
            Point(
                lat=start.lat + (end.lat - start.lat) * k / self.steps,
                lng=start.lng + (end.lng - start.lng) * k / self.steps,
            )
            for k in range(self.steps + 1)
        ]


@pytest.fixture
def fake_provider():
    return FakeProvider()
