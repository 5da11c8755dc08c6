"""
Tests for identity endpoints: sign up, sign in, social sign-in, profiles and tokens.
"""

import base64
import json
import time
from datetime import timedelta

import jwt
import pytest
from httpx import AsyncClient

from eventhub.core.security import create_access_token, verify_access_token
from eventhub.models.keys import user_key


@pytest.mark.asyncio
async def test_signup(client: AsyncClient):
    """Successful sign-up returns the user and a usable token."""
    response = await client.post("/api/v1/auth/signup", json={
        "email": "new@example.com",
        "password": "securepassword123",
        "first_name": "New",
        "last_name": "Person",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "new@example.com"
    assert data["user"]["first_name"] == "New"
    assert data["user"]["is_admin"] is False
    assert "password_hash" not in data["user"]  # Never expose password hash
    assert verify_access_token(data["token"]) == data["user"]["id"]


@pytest.mark.asyncio
async def test_signup_duplicate_email(client: AsyncClient, store, test_user):
    """Duplicate email is a 400 and leaves the original account untouched."""
    original_hash = (await store.get(user_key(test_user.id)))["password_hash"]

    response = await client.post("/api/v1/auth/signup", json={
        "email": "test@example.com",
        "password": "anotherpassword",
    })
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert (await store.get(user_key(test_user.id)))["password_hash"] == original_hash

    # The original password still works
    response = await client.post("/api/v1/auth/signin", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"email": "someone@example.com"},
    {"password": "securepassword123"},
    {"email": "", "password": "securepassword123"},
])
async def test_signup_missing_fields(client: AsyncClient, payload):
    response = await client.post("/api/v1/auth/signup", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Email and password are required"


@pytest.mark.asyncio
async def test_signin_success(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/signin", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == test_user.id
    assert data["token_type"] == "bearer"
    assert verify_access_token(data["token"]) == test_user.id


@pytest.mark.asyncio
async def test_signin_wrong_password(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/signin", json={
        "email": "test@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401
    assert response.json() == {"error": "unauthenticated", "detail": "Invalid credentials"}


@pytest.mark.asyncio
async def test_signin_email_is_case_sensitive(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/signin", json={
        "email": "TEST@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_signin_nonexistent_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/signin", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_signin_missing_fields(client: AsyncClient):
    response = await client.post("/api/v1/auth/signin", json={"email": "test@example.com"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_social_signin_creates_account_once(client: AsyncClient, store):
    first = await client.post("/api/v1/auth/social", json={"provider": "github"})
    assert first.status_code == 200
    second = await client.post("/api/v1/auth/social", json={"provider": "github"})
    assert second.status_code == 200

    assert first.json()["user"]["id"] == second.json()["user"]["id"]
    assert first.json()["user"]["email"] == "dev.user@github.com"

    # Social accounts have no password to sign in with
    response = await client.post("/api/v1/auth/signin", json={
        "email": "dev.user@github.com",
        "password": "",
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_social_signin_unknown_provider(client: AsyncClient):
    response = await client.post("/api/v1/auth/social", json={"provider": "myspace"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_profile_read_and_update(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/users/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["user"]["first_name"] == "Test"

    response = await client.put(
        "/api/v1/users/me",
        json={"first_name": "Renamed"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["first_name"] == "Renamed"
    assert user["last_name"] == "User"  # Omitted field keeps its value


@pytest.mark.asyncio
async def test_missing_authorization_header(client: AsyncClient):
    response = await client.get("/api/v1/users/me")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_non_bearer_scheme_rejected(client: AsyncClient, test_user):
    token = create_access_token(test_user.id)
    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Basic {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_rejected(client: AsyncClient, test_user):
    token = create_access_token(test_user.id, expires_delta=timedelta(seconds=-10))
    assert verify_access_token(token) is None

    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unsigned_token_rejected(client: AsyncClient, admin_user):
    """A base64 JSON blob naming another user is not accepted."""
    forged = base64.b64encode(json.dumps({
        "userId": admin_user.id,
        "exp": int(time.time() * 1000) + 3_600_000,
    }).encode()).decode()

    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_signed_with_other_key_rejected(client: AsyncClient, admin_user):
    forged = jwt.encode(
        {"sub": admin_user.id, "exp": int(time.time()) + 3600},
        "not-the-server-key-but-long-enough-for-hs256",
        algorithm="HS256",
    )
    assert verify_access_token(forged) is None

    response = await client.get("/api/v1/admin/stats", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401
