"""
Tests for password resets through ``UserService.set_password``.
"""

import asyncio

from eventboard_api.app.services.user_service import UserService


def test_set_password_for_existing_user(client, register_user):
    register_user(email="alice@example.com", password="secret123")

    assert asyncio.run(UserService.set_password("Alice@Example.com", "changed456")) is True

    old = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    new = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "changed456"})

    assert old.status_code == 401
    assert new.status_code == 200
    assert new.json()["user"]["email"] == "alice@example.com"


def test_set_password_for_unknown_email():
    assert asyncio.run(UserService.set_password("nobody@example.com", "changed456")) is False
