"""Tests for auth endpoints: register, login, refresh, profile and bearer handling."""

from datetime import timedelta

from httpx import AsyncClient

from rolegate.api.v1.dependencies import AuthSecurity
from rolegate.domain.value_objects import TokenClaims
from rolegate.infrastructure.security.jwt import create_access_token
from tests.fakes import STRONG_PASSWORD, InMemoryStore


async def _register(client: AsyncClient, email: str = "new@example.com") -> dict:
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": STRONG_PASSWORD, "first_name": "New"},
    )
    assert response.status_code == 201
    return response.json()


async def test_register_returns_user_and_tokens(client: AsyncClient) -> None:
    data = await _register(client)
    assert data["user"]["email"] == "new@example.com"
    assert [r["name"] for r in data["user"]["roles"]] == ["user"]
    assert "users:read" in data["user"]["permissions"]
    assert data["tokens"]["token_type"] == "bearer"
    assert data["tokens"]["access_token"] != data["tokens"]["refresh_token"]


async def test_register_duplicate_email_is_409(client: AsyncClient) -> None:
    await _register(client)
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "new@example.com", "password": STRONG_PASSWORD},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "USER_ALREADY_EXISTS"


async def test_register_weak_password_lists_rules(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "weak@example.com", "password": "alllowercase"},
    )
    assert response.status_code == 400
    errors = response.json()["details"]["errors"]
    assert "Password must contain at least one uppercase letter" in errors
    assert "Password must contain at least one number" in errors


async def test_register_invalid_body_is_422(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/register", json={"email": "not-an-email", "password": "x"}
    )
    assert response.status_code == 422


async def test_login_and_profile(client: AsyncClient) -> None:
    await _register(client)
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "new@example.com", "password": STRONG_PASSWORD},
    )
    assert response.status_code == 200
    token = response.json()["tokens"]["access_token"]

    profile = await client.get(
        "/api/v1/auth/profile", headers={"Authorization": f"Bearer {token}"}
    )
    assert profile.status_code == 200
    assert profile.json()["email"] == "new@example.com"


async def test_login_wrong_password_is_401(client: AsyncClient) -> None:
    await _register(client)
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "new@example.com", "password": "Wr0ng@Pass"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"
    assert response.headers["www-authenticate"] == "Bearer"


async def test_login_deactivated_is_401(
    client: AsyncClient, store: InMemoryStore, security: AuthSecurity
) -> None:
    store.add_user("off@example.com", security.hash_password(STRONG_PASSWORD), is_active=False)
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "off@example.com", "password": STRONG_PASSWORD},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Account is deactivated"


async def test_profile_without_token_is_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/profile")
    assert response.status_code == 401
    assert response.json()["message"] == "No token provided"


async def test_profile_with_expired_token_is_401(client: AsyncClient) -> None:
    claims = TokenClaims.build("user_1", "a@example.com", ["user"], [])
    token = create_access_token(claims, expires_delta=timedelta(seconds=-1))
    response = await client.get(
        "/api/v1/auth/profile", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Token expired"


async def test_profile_with_refresh_token_is_401(client: AsyncClient) -> None:
    data = await _register(client)
    response = await client.get(
        "/api/v1/auth/profile",
        headers={"Authorization": f"Bearer {data['tokens']['refresh_token']}"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


async def test_refresh_token(client: AsyncClient) -> None:
    data = await _register(client)
    response = await client.post(
        "/api/v1/auth/refresh-token",
        json={"refresh_token": data["tokens"]["refresh_token"]},
    )
    assert response.status_code == 200
    assert response.json()["user"]["id"] == data["user"]["id"]


async def test_refresh_with_garbage_is_401(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/refresh-token", json={"refresh_token": "garbage"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid refresh token"


async def test_update_profile(client: AsyncClient) -> None:
    data = await _register(client)
    headers = {"Authorization": f"Bearer {data['tokens']['access_token']}"}
    response = await client.patch(
        "/api/v1/auth/profile",
        json={"last_name": "Lovelace", "avatar_url": "https://example.com/a.png"},
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["last_name"] == "Lovelace"
    assert body["first_name"] == "New"
    assert body["avatar_url"] == "https://example.com/a.png"


async def test_change_password_then_login_with_new(client: AsyncClient) -> None:
    data = await _register(client)
    headers = {"Authorization": f"Bearer {data['tokens']['access_token']}"}
    response = await client.post(
        "/api/v1/auth/change-password",
        json={"current_password": STRONG_PASSWORD, "new_password": "N3w@Passw"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Password changed successfully"}

    login = await client.post(
        "/api/v1/auth/login", json={"email": "new@example.com", "password": "N3w@Passw"}
    )
    assert login.status_code == 200


async def test_change_password_wrong_current(client: AsyncClient) -> None:
    data = await _register(client)
    response = await client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "Wr0ng@Pass", "new_password": "N3w@Passw"},
        headers={"Authorization": f"Bearer {data['tokens']['access_token']}"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid current password"


async def test_logout(client: AsyncClient, bearer) -> None:
    response = await client.post("/api/v1/auth/logout", headers=bearer())
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}
