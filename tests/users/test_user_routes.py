"""
User Service route Tests
"""

from fastapi.testclient import TestClient

from shared.utils.security import generate_token, get_security_utils
from services.user_service.main import app

PASSWORD = "secret123"
# Valid address, longer than the 100 character email column
LONG_EMAIL = "a" * 60 + "@" + "b" * 40 + ".example.com"


def register(client, username="alice", email="alice@example.com", **extra):
    payload = {
        "username": username,
        "email": email,
        "password": PASSWORD,
        "confirm_password": PASSWORD,
        **extra,
    }
    return client.post("/api/v1/auth/register", json=payload)


class TestAuthRoutes:
    def test_register(self):
        with TestClient(app) as client:
            response = register(client, nickname="Alice")

            assert response.status_code == 201
            body = response.json()
            assert body["code"] == 200
            assert body["data"]["username"] == "alice"
            assert body["data"]["nickname"] == "Alice"
            assert "password_hash" not in body["data"]

    def test_register_duplicate_username(self):
        with TestClient(app) as client:
            register(client)
            response = register(client, email="other@example.com")

            assert response.status_code == 409
            assert response.json()["code"] == 20211

    def test_register_duplicate_email(self):
        with TestClient(app) as client:
            register(client)
            response = register(client, username="alice2")

            assert response.status_code == 409
            assert response.json()["code"] == 20212

    def test_register_invalid_username(self):
        with TestClient(app) as client:
            response = register(client, username="no spaces!")

            assert response.status_code == 400
            body = response.json()
            assert body["code"] == 20001
            assert "username" in body["data"]

    def test_login(self):
        with TestClient(app) as client:
            register(client)
            response = client.post("/api/v1/auth/login", json={"login_id": "alice", "password": PASSWORD})

            assert response.status_code == 200
            data = response.json()["data"]
            assert data["token"]
            assert data["refresh_token"]
            assert data["token_type"] == "Bearer"
            assert data["user_info"]["username"] == "alice"

    def test_register_email_too_long(self):
        with TestClient(app) as client:
            response = register(client, email=LONG_EMAIL)

            assert response.status_code == 400
            body = response.json()
            assert body["code"] == 20001
            assert "email" in body["data"]

    def test_login_with_long_email(self):
        email = "a" * 50 + "@example.com"

        with TestClient(app) as client:
            register(client, email=email)
            response = client.post("/api/v1/auth/login", json={"login_id": email, "password": PASSWORD})

            assert response.status_code == 200
            assert response.json()["data"]["user_info"]["email"] == email

    def test_login_wrong_password(self):
        with TestClient(app) as client:
            register(client)
            response = client.post("/api/v1/auth/login", json={"login_id": "alice", "password": "wrong123"})

            assert response.status_code == 401
            assert response.json()["code"] == 20222

    def test_refresh(self):
        with TestClient(app) as client:
            register(client)
            login = client.post("/api/v1/auth/login", json={"login_id": "alice", "password": PASSWORD})
            refresh_token = login.json()["data"]["refresh_token"]

            response = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})

            assert response.status_code == 200
            assert response.json()["data"]["user_info"]["username"] == "alice"

    def test_check_username_and_email(self):
        with TestClient(app) as client:
            register(client)

            assert client.get("/api/v1/auth/check-username/alice").json()["data"] is False
            assert client.get("/api/v1/auth/check-username/bob").json()["data"] is True
            assert client.get("/api/v1/auth/check-email/alice@example.com").json()["data"] is False
            assert client.get("/api/v1/auth/check-email/bob@example.com").json()["data"] is True

    def test_validate_user(self):
        with TestClient(app) as client:
            user_id = register(client).json()["data"]["id"]

            assert client.get(f"/api/v1/auth/validate-user/{user_id}/alice").json()["data"] is True
            assert client.get(f"/api/v1/auth/validate-user/{user_id}/bob").json()["data"] is False


class TestUserRoutes:
    def test_profile_requires_identity(self):
        with TestClient(app) as client:
            response = client.get("/api/v1/users/profile")

            assert response.status_code == 401
            assert response.json()["code"] == 20101

    def test_profile_rejects_non_numeric_identity(self):
        with TestClient(app) as client:
            response = client.get("/api/v1/users/profile", headers={"X-User-Id": "abc"})

            assert response.status_code == 401

    def test_profile_via_gateway_header(self, user_headers):
        with TestClient(app) as client:
            user_id = register(client).json()["data"]["id"]

            for path in ("/api/v1/users/profile", "/api/v1/users/me"):
                response = client.get(path, headers=user_headers(user_id, "alice"))
                assert response.status_code == 200
                assert response.json()["data"]["email"] == "alice@example.com"

    def test_profile_via_bearer_token(self):
        with TestClient(app) as client:
            user_id = register(client).json()["data"]["id"]
            token = generate_token(user_id, "alice")

            response = client.get("/api/v1/users/profile", headers={"Authorization": f"Bearer {token}"})

            assert response.status_code == 200
            assert response.json()["data"]["id"] == user_id

    def test_profile_rejects_refresh_token(self):
        with TestClient(app) as client:
            user_id = register(client).json()["data"]["id"]
            refresh_token = get_security_utils().generate_refresh_token(user_id, "alice")

            response = client.get("/api/v1/users/profile", headers={"Authorization": f"Bearer {refresh_token}"})

            assert response.status_code == 401
            assert response.json()["code"] == 20101

    def test_update_profile_email_too_long(self, user_headers):
        with TestClient(app) as client:
            user_id = register(client).json()["data"]["id"]

            response = client.put(
                "/api/v1/users/profile", json={"email": LONG_EMAIL}, headers=user_headers(user_id)
            )

            assert response.status_code == 400
            body = response.json()
            assert body["code"] == 20001
            assert "email" in body["data"]

    def test_update_profile(self, user_headers):
        with TestClient(app) as client:
            user_id = register(client).json()["data"]["id"]

            response = client.put(
                "/api/v1/users/profile",
                json={"nickname": "  Ally  ", "avatar_url": " https://cdn.example.com/a.png "},
                headers=user_headers(user_id),
            )

            assert response.status_code == 200
            data = response.json()["data"]
            assert data["nickname"] == "Ally"
            assert data["avatar_url"] == "https://cdn.example.com/a.png"

    def test_update_profile_blank_nickname_ignored(self, user_headers):
        with TestClient(app) as client:
            user_id = register(client, nickname="Alice").json()["data"]["id"]

            response = client.put("/api/v1/users/me", json={"nickname": "   "}, headers=user_headers(user_id))

            assert response.status_code == 200
            assert response.json()["data"]["nickname"] == "Alice"

    def test_update_profile_email_in_use(self, user_headers):
        with TestClient(app) as client:
            user_id = register(client).json()["data"]["id"]
            register(client, username="bob", email="bob@example.com")

            response = client.put(
                "/api/v1/users/profile", json={"email": "bob@example.com"}, headers=user_headers(user_id)
            )

            assert response.status_code == 409
            assert response.json()["code"] == 20232

    def test_validate_lookups(self):
        with TestClient(app) as client:
            user_id = register(client).json()["data"]["id"]

            found = client.get(f"/api/v1/users/validate/{user_id}").json()["data"]
            assert found == {"user_id": user_id, "username": "alice", "email": "alice@example.com", "exists": True}

            missing = client.get("/api/v1/users/validate/9999").json()["data"]
            assert missing["exists"] is False

            by_name = client.get("/api/v1/users/validate-username/alice").json()["data"]
            assert by_name["user_id"] == user_id


class TestHealthRoutes:
    def test_health(self):
        with TestClient(app) as client:
            response = client.get("/health")

            assert response.status_code == 200
            assert response.json()["data"]["status"] == "healthy"

    def test_database_health(self):
        with TestClient(app) as client:
            response = client.get("/health/database")

            assert response.status_code == 200
            assert response.json()["data"]["database"] == "healthy"
