"""Tests for pet endpoints."""

import pytest
from httpx import AsyncClient

PET = {"name": "Biscuit", "species": "cat", "breed": "Siamese", "age": 2, "weight": 4.2}


@pytest.mark.asyncio
async def test_pet_crud(client: AsyncClient, owner, headers_for) -> None:
    """Owners add, read, update and delete their pets."""
    headers = headers_for(owner)

    response = await client.post("/api/v1/pets/", json=PET, headers=headers)
    assert response.status_code == 201
    pet_id = response.json()["id"]
    assert response.json()["owner_id"] == str(owner["id"])

    response = await client.get("/api/v1/pets/", headers=headers)
    assert [p["name"] for p in response.json()] == ["Biscuit"]

    response = await client.put(
        f"/api/v1/pets/{pet_id}", json={"age": 3, "medical_history": "Neutered"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["age"] == 3
    assert response.json()["name"] == "Biscuit"

    response = await client.delete(f"/api/v1/pets/{pet_id}", headers=headers)
    assert response.status_code == 204

    response = await client.get(f"/api/v1/pets/{pet_id}", headers=headers)
    assert response.status_code == 404
    assert response.json()["code"] == "NotFound"


@pytest.mark.asyncio
async def test_pets_are_private(client: AsyncClient, pet, other_owner, headers_for) -> None:
    """Other users cannot read or change someone's pet."""
    headers = headers_for(other_owner)

    response = await client.get(f"/api/v1/pets/{pet['id']}", headers=headers)
    assert response.status_code == 403

    response = await client.delete(f"/api/v1/pets/{pet['id']}", headers=headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_pet_with_history_cannot_be_deleted(
    client: AsyncClient, owner, pet, slots, booking_payload, headers_for
) -> None:
    """Pets referenced by appointments are kept."""
    response = await client.post(
        "/api/v1/appointments/", json=booking_payload, headers=headers_for(owner)
    )
    assert response.status_code == 201

    response = await client.delete(f"/api/v1/pets/{pet['id']}", headers=headers_for(owner))
    assert response.status_code == 409
    assert response.json()["code"] == "Conflict"
