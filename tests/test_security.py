"""
Unit tests for token and password primitives.
"""

import time

from eventboard_api.app.core import security
from eventboard_api.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestAccessTokens:

    def test_round_trip(self):
        token = create_access_token({"sub": "alice@example.com"})

        payload = decode_access_token(token)

        assert payload["sub"] == "alice@example.com"
        assert payload["exp"] > int(time.time())

    def test_custom_lifetime(self):
        token = create_access_token({"sub": "alice@example.com"}, expires_delta=60)

        payload = decode_access_token(token)

        assert payload["exp"] <= int(time.time()) + 60

    def test_expired_token(self):
        token = create_access_token({"sub": "alice@example.com"}, expires_delta=-10)

        assert decode_access_token(token) is None

    def test_tampered_payload(self):
        header, _, signature = create_access_token({"sub": "alice@example.com"}).split(".")
        forged_payload = create_access_token({"sub": "mallory@example.com"}).split(".")[1]

        assert decode_access_token(f"{header}.{forged_payload}.{signature}") is None

    def test_wrong_secret(self, monkeypatch):
        token = create_access_token({"sub": "alice@example.com"})
        monkeypatch.setattr(security.settings, "secret_key", "another-secret")

        assert decode_access_token(token) is None

    def test_malformed_tokens(self):
        for token in ("", "abc", "a.b", "a.b.c.d", "!!!.@@@.###"):
            assert decode_access_token(token) is None, token


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("secret123")

        assert "$" in hashed
        assert "secret123" not in hashed
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("secret123") != hash_password("secret123")

    def test_verify_malformed_hash(self):
        for stored in (None, "", "no-separator", "zz$zz"):
            assert not verify_password("secret123", stored), stored
