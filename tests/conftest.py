"""
Shared pytest fixtures for the EventBoard API tests.

Every test runs against its own SQLite file under ``tmp_path``: the
``settings.database_url`` attribute is pointed at it and the
migrations are applied before the test starts.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from eventboard_api.app.core.config import settings
from eventboard_api.app.core.db import init_db
from eventboard_api.app.main import app


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Provide a fresh, migrated database for each test."""
    db_path = tmp_path / "eventboard-test.db"
    monkeypatch.setattr(settings, "database_url", str(db_path))
    init_db()
    return db_path


@pytest.fixture
def client():
    """TestClient with the application's startup hooks run."""
    with TestClient(app) as test_client:
        yield test_client


def future_date(days: int = 30) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


@pytest.fixture
def register_user(client):
    """Factory registering a user and returning its bearer headers."""

    def _register(name="Alice Example", email="alice@example.com", password="secret123"):
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest.fixture
def auth_headers(register_user):
    return register_user()


@pytest.fixture
def other_headers(register_user):
    return register_user(name="Bob Example", email="bob@example.com")


@pytest.fixture
def event_payload():
    """Factory for a valid event creation body (camelCase, as clients send it)."""

    def _payload(**overrides):
        payload = {
            "title": "Python Meetup",
            "description": "An evening of lightning talks about Python.",
            "date": future_date(),
            "time": "18:30",
            "location": "Community Hall, Berlin",
            "category": "Networking",
            "maxAttendees": 3,
            "price": 0,
            "tags": ["python", "talks"],
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def create_event(client, auth_headers, event_payload):
    """Factory creating an event as ``auth_headers``' user and returning its JSON."""

    def _create(headers=None, **overrides):
        response = client.post(
            "/api/events",
            json=event_payload(**overrides),
            headers=headers or auth_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["event"]

    return _create
