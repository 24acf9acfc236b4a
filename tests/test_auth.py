"""Tests for registration, login, tokens and profiles."""

import pytest
from httpx import AsyncClient

from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
)

REGISTRATION = {
    "email": "Dana.Vet@Example.com",
    "password": "correct-horse-battery",
    "role": "veterinarian",
    "first_name": "Dana",
    "last_name": "Scully",
    "specialization": "Exotic animals",
    "license_number": "VET-0042",
}


def test_token_types_are_not_interchangeable() -> None:
    """An access token is not accepted as a refresh token and vice versa."""
    access = create_access_token({"sub": "abc"})
    refresh = create_refresh_token({"sub": "abc"})

    assert decode_access_token(access)["sub"] == "abc"
    assert decode_refresh_token(refresh)["sub"] == "abc"
    assert decode_refresh_token(access) is None
    assert decode_access_token(refresh) is None
    assert decode_access_token("garbage") is None


@pytest.mark.asyncio
async def test_register_login_refresh(client: AsyncClient) -> None:
    """A new account can log in and refresh its tokens."""
    response = await client.post("/api/v1/auth/register", json=REGISTRATION)
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "dana.vet@example.com"
    assert data["user"]["role"] == "veterinarian"
    assert "hashed_password" not in data["user"]

    response = await client.post("/api/v1/auth/register", json=REGISTRATION)
    assert response.status_code == 409
    assert response.json()["code"] == "Conflict"

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "dana.vet@example.com", "password": "wrong-password"},
    )
    assert response.status_code == 401
    assert response.json()["code"] == "NotAuthenticated"

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "dana.vet@example.com", "password": REGISTRATION["password"]},
    )
    assert response.status_code == 200
    tokens = response.json()
    assert tokens["user"]["last_login_at"] is not None

    response = await client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    assert response.status_code == 200
    refreshed = response.json()

    response = await client.get(
        "/api/v1/users/me",
        headers={"Authorization": f"Bearer {refreshed['access_token']}"},
    )
    assert response.status_code == 200
    assert response.json()["first_name"] == "Dana"

    response = await client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_register_validation(client: AsyncClient) -> None:
    """Unknown roles and short passwords are rejected."""
    response = await client.post("/api/v1/auth/register", json={**REGISTRATION, "role": "admin"})
    assert response.status_code == 422

    response = await client.post(
        "/api/v1/auth/register", json={**REGISTRATION, "password": "short"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_profile_update_and_vet_directory(
    client: AsyncClient, owner, vet, headers_for
) -> None:
    """Users edit their own profile; veterinarians are listed for everyone."""
    response = await client.put(
        "/api/v1/users/me",
        json={"phone": "+15550100", "address": "1 Kennel Road"},
        headers=headers_for(owner),
    )
    assert response.status_code == 200
    assert response.json()["address"] == "1 Kennel Road"
    assert response.json()["role"] == "pet_owner"

    response = await client.get("/api/v1/users/veterinarians", headers=headers_for(owner))
    assert response.status_code == 200
    assert [v["id"] for v in response.json()] == [str(vet["id"])]
