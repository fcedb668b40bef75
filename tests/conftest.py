import uuid
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from teamtasks.config import Settings
from teamtasks.main import create_app
from teamtasks.store import EntityStore

TEST_SECRET = "test-secret-key"
PASSWORD = "correct_horse_battery_staple"


@pytest.fixture
def settings():
    # cheap bcrypt rounds keep the suite fast; the default cost is covered in test_credentials
    return Settings(secret_key=TEST_SECRET, database_url="sqlite://", bcrypt_rounds=4)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app, client):
    session = app.state.database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return EntityStore(db)


def signup_and_login(client, email=None, password=PASSWORD, name="Test User"):
    email = email or f"user_{uuid.uuid4().hex[:8]}@example.com"
    r = client.post("/auth/signup", json={"name": name, "email": email, "password": password})
    assert r.status_code == 201, r.text
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


@pytest.fixture
def auth_headers(client):
    return {"Authorization": f"Bearer {signup_and_login(client)}"}


@pytest.fixture
def owner(store):
    return store.users.insert({"name": "Owner", "email": "owner@example.com", "password": "x"})


@pytest.fixture
def make_task(store, owner):
    """Insert a task directly, backdating its timestamps by ``age_days``."""

    def _make(project, team, *, age_days=0, duration=1, status="To Do", name=None, updated_days_ago=None):
        now = datetime.now(UTC)
        created = now - timedelta(days=age_days)
        updated = now - timedelta(days=updated_days_ago) if updated_days_ago is not None else created
        return store.tasks.insert({
            "name": name or f"task {uuid.uuid4().hex[:6]}",
            "project_id": project.id,
            "team_id": team.id,
            "owners": [owner.id],
            "time_to_complete": duration,
            "status": status,
            "created_at": created,
            "updated_at": updated,
        })

    return _make
