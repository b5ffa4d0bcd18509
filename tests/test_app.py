"""
Tests for application‑level behaviour: the root route, the error
envelope for unknown routes and unhandled errors, and migrations.
"""

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from eventboard_api.app.core.db import get_connection, init_db
from eventboard_api.app.main import app
from eventboard_api.app.services.event_service import EventService


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Event Management Server is running!"}


def test_unknown_route(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route not found"}


def test_unhandled_error_returns_generic_500():
    with patch.object(EventService, "list_events", new_callable=AsyncMock) as mock_list:
        mock_list.side_effect = RuntimeError("database exploded")
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/events")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Something went wrong!"}


def test_malformed_json_body(client, auth_headers):
    response = client.post(
        "/api/events",
        content="{not json",
        headers={**auth_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_init_db_is_idempotent(database):
    init_db()
    init_db()

    conn = get_connection()
    try:
        versions = [row["version"] for row in conn.execute("SELECT version FROM migrations ORDER BY version")]
        tables = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
    finally:
        conn.close()

    assert versions == [1, 2, 3]
    assert {"users", "events", "event_attendees"} <= tables
