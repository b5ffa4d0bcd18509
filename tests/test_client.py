"""
Tests for the requests‑based EventBoard client, using a mocked session.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from eventboard_client import EventBoardClient


def make_response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    response.url = "http://testserver/api"
    response._content = json.dumps(body).encode("utf-8") if body is not None else b""
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(session):
    return EventBoardClient(base_url="http://testserver/", session=session)


def test_login_stores_token(api, session):
    session.request.return_value = make_response(200, {"success": True, "token": "abc.def.ghi"})

    data, error = api.login("alice@example.com", "secret123")

    assert error is None
    assert data["token"] == "abc.def.ghi"
    assert api.token == "abc.def.ghi"
    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "POST"
    assert kwargs["url"] == "http://testserver/api/auth/login"
    assert kwargs["json"] == {"email": "alice@example.com", "password": "secret123"}

    session.request.return_value = make_response(200, {"success": True, "events": []})
    api.my_events()

    kwargs = session.request.call_args.kwargs
    assert kwargs["url"] == "http://testserver/api/events/user/my-events"
    assert kwargs["headers"]["Authorization"] == "Bearer abc.def.ghi"


def test_list_events_sends_only_set_filters(api, session):
    session.request.return_value = make_response(
        200, {"success": True, "events": [], "pagination": {"current": 2, "pages": 0, "total": 0}}
    )

    data, error = api.list_events(search="jazz", page=2)

    assert error is None
    assert data["pagination"]["current"] == 2
    kwargs = session.request.call_args.kwargs
    assert kwargs["params"] == {"search": "jazz", "page": 2}
    assert "Authorization" not in kwargs["headers"]


def test_event_paths(api, session):
    session.request.return_value = make_response(200, {"success": True})

    api.get_event(7)
    assert session.request.call_args.kwargs["url"].endswith("/api/events/7")

    api.update_event(7, {"title": "New title"})
    assert session.request.call_args.kwargs["method"] == "PUT"

    api.attend_event(7)
    assert session.request.call_args.kwargs["url"].endswith("/api/events/7/attend")

    api.leave_event(7)
    assert session.request.call_args.kwargs["method"] == "DELETE"


def test_validation_error_is_reported(api, session):
    errors = [{"field": "date", "message": "Event date must be in the future", "location": "body"}]
    session.request.return_value = make_response(
        400, {"success": False, "message": "Validation failed", "errors": errors}
    )

    data, error = api.create_event({"title": "Past"})

    assert data is None
    assert error == {"status_code": 400, "message": "Validation failed", "errors": errors}


def test_not_found_error(api, session):
    session.request.return_value = make_response(404, {"success": False, "message": "Event not found"})

    data, error = api.delete_event(99)

    assert data is None
    assert error == {"status_code": 404, "message": "Event not found"}


def test_connection_error(api, session):
    session.request.side_effect = requests.ConnectionError("connection refused")

    data, error = api.me()

    assert data is None
    assert error["status_code"] is None
    assert "connection refused" in error["message"]
