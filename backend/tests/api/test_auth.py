"""Authentication endpoint tests."""

import pytest
from httpx import AsyncClient

from greenlife.models import User
from greenlife.services.auth import verify_token
from tests.conftest import TEST_PASSWORD, AuthenticatedClient


@pytest.mark.asyncio
async def test_register_creates_user_account(client: AsyncClient):
    """Registration creates a USER and returns a token for it."""
    response = await client.post(
        "/api/auth/register",
        json={"username": "Grace", "email": "Grace@Example.com", "password": "s3cure-pass"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["email"] == "grace@example.com"
    assert data["user"]["role"] == "USER"
    assert "password_hash" not in data["user"]
    assert verify_token(data["token"]).email == "grace@example.com"


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, user: User):
    response = await client.post(
        "/api/auth/register",
        json={"username": "Again", "email": user.email, "password": "s3cure-pass"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


@pytest.mark.asyncio
async def test_register_validation(client: AsyncClient):
    response = await client.post(
        "/api/auth/register",
        json={"username": "G", "email": "not-an-email", "password": "short"},
    )
    assert response.status_code == 422
    data = response.json()
    assert data["detail"] == "Validation failed"
    fields = {error["field"] for error in data["errors"]}
    assert {"username", "email", "password"} <= fields


@pytest.mark.asyncio
async def test_login_sets_cookie(client: AsyncClient, user: User):
    response = await client.post(
        "/api/auth/login",
        json={"email": user.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    data = response.json()
    assert verify_token(data["token"]).id == user.id

    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith(f"token={data['token']}")
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, user: User):
    response = await client.post(
        "/api/auth/login",
        json={"email": user.email, "password": "wrong-password"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient):
    response = await client.post(
        "/api/auth/login",
        json={"email": "nobody@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_rate_limited(client: AsyncClient):
    for _ in range(10):
        await client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": TEST_PASSWORD},
        )

    response = await client.post(
        "/api/auth/login",
        json={"email": "nobody@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 429
    assert "Retry-After" in response.headers


@pytest.mark.asyncio
async def test_check_with_token(authenticated_client: AuthenticatedClient, user: User):
    response = await authenticated_client.get("/api/auth/check")
    assert response.status_code == 200
    data = response.json()
    assert data["authenticated"] is True
    assert data["user"] == {"id": user.id, "email": user.email, "role": "USER"}


@pytest.mark.asyncio
async def test_check_without_token(client: AsyncClient):
    response = await client.get("/api/auth/check")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_check_with_cookie(client: AsyncClient, user_token: str):
    client.cookies.set("token", user_token)
    response = await client.get("/api/auth/check")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_get_current_user(authenticated_client: AuthenticatedClient, user: User):
    response = await authenticated_client.get("/api/auth/me")
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == user.email
    assert data["username"] == "Test User"
    assert data["role"] == "USER"


@pytest.mark.asyncio
async def test_get_current_user_unauthenticated(client: AsyncClient):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient):
    response = await client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.headers["set-cookie"].startswith('token=""')
