"""
Component tests for the account API and the access-token gate.
"""
from datetime import timedelta
from types import SimpleNamespace

from fastapi.testclient import TestClient

from common.security import TokenService
from modules.user.service import UserService
from conftest import API, DEFAULT_PASSWORD, make_settings


class TestRegister:

    def test_register_returns_public_fields(self, client: TestClient):
        response = client.post(
            f"{API}/users/register",
            json={"name": "Ali", "email": "Ali@ParuShop.io", "password": "secret-pass", "phoneNumber": "0912"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        user = body["data"]
        assert user["email"] == "ali@parushop.io"
        assert user["phoneNumber"] == "0912"
        assert "password" not in user
        assert "passwordHash" not in user
        assert "refreshToken" not in user

    def test_duplicate_email(self, client: TestClient, register_user):
        register_user()

        response = client.post(
            f"{API}/users/register",
            json={"name": "Other", "email": "ALI@parushop.io", "password": "another-pass"},
        )

        assert response.status_code == 409
        assert response.json()["message"] == "User with this email already exists"

    def test_short_password(self, client: TestClient):
        response = client.post(
            f"{API}/users/register",
            json={"name": "Ali", "email": "ali@parushop.io", "password": "123"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"]


class TestLogin:

    def test_login_sets_cookies_and_returns_tokens(self, client: TestClient, register_user):
        register_user()

        response = client.post(f"{API}/users/login", json={"email": "ali@parushop.io", "password": DEFAULT_PASSWORD})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["accessToken"] and data["refreshToken"]
        assert data["user"]["email"] == "ali@parushop.io"
        assert response.cookies.get("accessToken") == data["accessToken"]
        assert response.cookies.get("refreshToken") == data["refreshToken"]

    def test_wrong_password_and_unknown_email_look_the_same(self, client: TestClient, register_user):
        register_user()

        wrong = client.post(f"{API}/users/login", json={"email": "ali@parushop.io", "password": "nope-nope"})
        unknown = client.post(f"{API}/users/login", json={"email": "ghost@parushop.io", "password": "nope-nope"})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json()["message"] == unknown.json()["message"] == "Invalid email or password"


class TestAccessGate:

    def test_bearer_header_accepted(self, client: TestClient, register_user, login):
        register_user()
        tokens = login()
        client.cookies.clear()

        response = client.get(f"{API}/users/profile", headers={"Authorization": f"Bearer {tokens['accessToken']}"})

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "ali@parushop.io"

    def test_garbage_token(self, client: TestClient):
        response = client.get(f"{API}/users/profile", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid Access Token"

    def test_refresh_token_is_not_an_access_token(self, client: TestClient, register_user, login):
        register_user()
        tokens = login()
        client.cookies.clear()

        response = client.get(f"{API}/users/profile", headers={"Authorization": f"Bearer {tokens['refreshToken']}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid Access Token"

    def test_expired_token_same_message_via_header_and_cookie(self, client: TestClient, register_user):
        user = register_user()
        expired = TokenService(make_settings(access_token_expiry=timedelta(seconds=-10)))
        token = expired.issue_access_token(SimpleNamespace(id=user["id"], email=user["email"], name=user["name"]))

        via_header = client.get(f"{API}/users/profile", headers={"Authorization": f"Bearer {token}"})
        client.cookies.set("accessToken", token)
        via_cookie = client.get(f"{API}/users/profile")

        assert via_header.status_code == via_cookie.status_code == 401
        assert via_header.json()["message"] == via_cookie.json()["message"] == "Invalid Access Token"

    def test_token_for_deleted_user(self, client: TestClient):
        tokens = TokenService(make_settings())
        token = tokens.issue_access_token(SimpleNamespace(id=4242, email="gone@parushop.io", name="Gone"))

        response = client.get(f"{API}/users/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid Access Token"


class TestRefreshAndLogout:

    def test_refresh_rotates_and_old_token_is_rejected(self, client: TestClient, register_user, login):
        register_user()
        first = login()
        client.cookies.clear()

        rotated = client.post(f"{API}/users/refresh-token", json={"refreshToken": first["refreshToken"]})
        assert rotated.status_code == 200
        second = rotated.json()["data"]
        assert second["refreshToken"] != first["refreshToken"]
        client.cookies.clear()

        replay = client.post(f"{API}/users/refresh-token", json={"refreshToken": first["refreshToken"]})
        assert replay.status_code == 401
        assert replay.json()["message"] == "Refresh token is expired or used"

    def test_refresh_from_cookie(self, client: TestClient, register_user, login):
        register_user()
        login()

        response = client.post(f"{API}/users/refresh-token")

        assert response.status_code == 200
        assert response.json()["message"] == "Access token refreshed"

    def test_refresh_without_token(self, client: TestClient):
        response = client.post(f"{API}/users/refresh-token")

        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized request"

    def test_refresh_with_garbage(self, client: TestClient):
        response = client.post(f"{API}/users/refresh-token", json={"refreshToken": "garbage"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid refresh token"

    def test_logout_revokes_refresh_token(self, client: TestClient, register_user, login):
        register_user()
        tokens = login()

        response = client.post(f"{API}/users/logout")
        assert response.status_code == 200
        assert response.json()["message"] == "User logged out"
        client.cookies.clear()

        replay = client.post(f"{API}/users/refresh-token", json={"refreshToken": tokens["refreshToken"]})
        assert replay.status_code == 401
        assert replay.json()["message"] == "Refresh token is expired or used"

    def test_logout_requires_login(self, client: TestClient):
        assert client.post(f"{API}/users/logout").status_code == 401


class TestProfile:

    def test_update_profile(self, auth_client: TestClient):
        response = auth_client.patch(f"{API}/users/update-profile", json={"name": "Ali Reza", "phoneNumber": "0935"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Ali Reza"
        assert data["phoneNumber"] == "0935"

    def test_update_profile_requires_a_field(self, auth_client: TestClient):
        response = auth_client.patch(f"{API}/users/update-profile", json={})

        assert response.status_code == 400
        assert response.json()["message"] == "At least one field is required"

    def test_update_profile_email_taken(self, auth_client: TestClient, register_user):
        register_user(email="taken@parushop.io")

        response = auth_client.patch(f"{API}/users/update-profile", json={"email": "taken@parushop.io"})

        assert response.status_code == 409

    def test_update_profile_email_race(self, auth_client: TestClient, register_user, monkeypatch):
        """The uniqueness pre-check passed, but another account took the email before the write."""
        register_user(email="taken@parushop.io")
        monkeypatch.setattr(UserService, "email_taken_by_other", lambda self, db, email, user_id: False)

        response = auth_client.patch(f"{API}/users/update-profile", json={"email": "taken@parushop.io"})

        assert response.status_code == 409
        assert response.json()["message"] == "User with this email already exists"
