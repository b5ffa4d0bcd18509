"""
Tests for the authentication endpoints: register, login and /me.
"""


class TestRegister:
    """POST /api/auth/register"""

    def test_register_success(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "  Alice Example ", "email": "Alice@Example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "User registered successfully"
        assert data["token"].count(".") == 2
        assert data["user"]["name"] == "Alice Example"
        assert data["user"]["email"] == "alice@example.com"
        assert isinstance(data["user"]["id"], int)
        assert "password" not in data["user"]

    def test_register_duplicate_email(self, client, register_user):
        register_user(email="alice@example.com")

        response = client.post(
            "/api/auth/register",
            json={"name": "Someone Else", "email": "ALICE@example.com", "password": "another1"},
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "User already exists with this email",
        }

    def test_register_validation_errors(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "A", "email": "not-an-email", "password": "123"},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "Validation failed"
        fields = {error["field"] for error in data["errors"]}
        assert fields == {"name", "email", "password"}
        messages = {error["field"]: error["message"] for error in data["errors"]}
        assert messages["name"] == "Name must be between 2 and 50 characters"
        assert messages["password"] == "Password must be at least 6 characters long"
        assert all(error["location"] == "body" for error in data["errors"])

    def test_register_missing_body(self, client):
        response = client.post("/api/auth/register", json={})

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"name", "email", "password"}


class TestLogin:
    """POST /api/auth/login"""

    def test_login_success(self, client, register_user):
        register_user(email="alice@example.com", password="secret123")

        response = client.post(
            "/api/auth/login",
            json={"email": "ALICE@example.com", "password": "secret123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Login successful"
        assert data["user"]["email"] == "alice@example.com"

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.status_code == 200

    def test_login_wrong_password(self, client, register_user):
        register_user(email="alice@example.com", password="secret123")

        response = client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}

    def test_login_unknown_email(self, client):
        response = client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "secret123"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"


class TestMe:
    """GET /api/auth/me"""

    def test_me_returns_current_user(self, client, auth_headers):
        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["name"] == "Alice Example"
        assert data["user"]["createdAt"] is not None

    def test_me_without_token(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authenticated"}
        assert response.headers["www-authenticate"] == "Bearer"

    def test_me_with_invalid_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    def test_me_with_token_for_unknown_user(self, client):
        from eventboard_api.app.core.security import create_access_token

        token = create_access_token({"sub": "ghost@example.com"})
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "User no longer exists"
