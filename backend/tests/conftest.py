"""Pytest fixtures."""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from safecircle.core.config import settings
from safecircle.db.base import Base
from safecircle.db.session import get_db
from safecircle.main import app
import safecircle.models  # noqa: F401 - register for create_all

TEST_DATABASE_URL = "sqlite:///./test.db"
PASSWORD = "secret123"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def setup_db():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(setup_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def session_factory(setup_db):
    """Open extra sessions, e.g. to stand in for concurrent requests."""
    return TestingSessionLocal


@pytest.fixture
def client(setup_db):
    """Test client with overridden DB."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_email(monkeypatch):
    monkeypatch.setattr(settings, "admin_emails", ["root@test.com"])
    return "root@test.com"


@pytest.fixture
def make_user(client):
    """Register and log in a user; returns id, token and auth headers."""

    def _make(username: str, name: str | None = None, email: str | None = None) -> dict:
        email = email or f"{username.replace('.', '_')}@test.com"
        payload = {"email": email, "password": PASSWORD, "username": username}
        if name is not None:
            payload["name"] = name
        r = client.post("/auth/register", json=payload)
        assert r.status_code == 201, r.text
        token = client.post("/auth/login", json={"email": email, "password": PASSWORD}).json()["access_token"]
        return {
            "id": r.json()["id"],
            "email": email,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make


@pytest.fixture
def befriend(client):
    """Make two users friends through the request/accept flow."""

    def _befriend(a: dict, b: dict) -> None:
        r = client.post("/friends/requests", headers=a["headers"], json={"to_user_id": b["id"]})
        assert r.status_code == 201, r.text
        r = client.post(f"/friends/requests/{r.json()['id']}/accept", headers=b["headers"])
        assert r.status_code == 200, r.text

    return _befriend
