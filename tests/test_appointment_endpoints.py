"""Tests for appointment and schedule endpoints."""

import pytest
from httpx import AsyncClient

from app.api.v1.endpoints.appointments import get_booking_service
from app.dependencies import DatabaseSession
from app.main import app
from app.services.booking_service import BookingService
from app.services.payment_service import PaymentGateway

SLOT_DATE = "2024-06-01"


def declining_booking_service(db: DatabaseSession) -> BookingService:
    """Booking orchestrator whose processor declines every charge."""
    return BookingService(db, payment_gateway=PaymentGateway(db, success_rate=0.0))


@pytest.mark.asyncio
async def test_publish_and_browse_slots(client: AsyncClient, vet, owner, headers_for) -> None:
    """Vets publish slots; anyone signed in can browse them."""
    response = await client.put(
        "/api/v1/schedule/slots",
        json={
            "date": SLOT_DATE,
            "slots": [
                {"start_time": "09:00", "end_time": "09:30"},
                {"start_time": "09:30", "end_time": "10:00"},
            ],
        },
        headers=headers_for(vet),
    )
    assert response.status_code == 200
    assert [s["start_time"] for s in response.json()] == ["09:00", "09:30"]

    response = await client.get(
        f"/api/v1/schedule/veterinarians/{vet['id']}/available",
        params={"date": SLOT_DATE},
        headers=headers_for(owner),
    )
    assert response.status_code == 200
    assert len(response.json()) == 2

    response = await client.get(
        f"/api/v1/schedule/veterinarians/{vet['id']}",
        params={"start_date": SLOT_DATE, "end_date": "2024-06-07"},
        headers=headers_for(owner),
    )
    assert response.status_code == 200
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_publish_slots_validation_and_roles(
    client: AsyncClient, vet, owner, headers_for
) -> None:
    """Owners cannot publish; malformed windows are 422."""
    body = {"date": SLOT_DATE, "slots": [{"start_time": "09:00", "end_time": "09:30"}]}

    response = await client.put("/api/v1/schedule/slots", json=body, headers=headers_for(owner))
    assert response.status_code == 403
    assert response.json()["code"] == "Unauthorized"

    response = await client.put(
        "/api/v1/schedule/slots",
        json={"date": SLOT_DATE, "slots": [{"start_time": "10:00", "end_time": "09:00"}]},
        headers=headers_for(vet),
    )
    assert response.status_code == 422
    assert response.json()["code"] == "ValidationError"


@pytest.mark.asyncio
async def test_generate_default_slots_endpoint(client: AsyncClient, vet, headers_for) -> None:
    """The default working day can be published in one call."""
    response = await client.post(
        "/api/v1/schedule/slots/default",
        json={"date": SLOT_DATE},
        headers=headers_for(vet),
    )
    assert response.status_code == 201
    assert len(response.json()) == 16


@pytest.mark.asyncio
async def test_impossible_dates_in_query_are_422(
    client: AsyncClient, owner, vet, headers_for
) -> None:
    """Well-shaped but impossible calendar dates are validation errors."""
    response = await client.get(
        "/api/v1/appointments/",
        params={"from_date": "2024-13-45"},
        headers=headers_for(owner),
    )
    assert response.status_code == 422
    assert response.json()["code"] == "ValidationError"

    response = await client.get(
        "/api/v1/appointments/veterinarian",
        params={"to_date": "2024-02-30"},
        headers=headers_for(vet),
    )
    assert response.status_code == 422

    response = await client.get(
        f"/api/v1/schedule/veterinarians/{vet['id']}/available",
        params={"date": "2024-6-1"},
        headers=headers_for(owner),
    )
    assert response.status_code == 422

    response = await client.get(
        f"/api/v1/schedule/veterinarians/{vet['id']}",
        params={"start_date": "2024-06-01", "end_date": "2024-06-31"},
        headers=headers_for(owner),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_requires_authentication(client: AsyncClient) -> None:
    """Missing or bad tokens are 401 NotAuthenticated."""
    response = await client.get("/api/v1/appointments/")
    assert response.status_code == 401
    assert response.json()["code"] == "NotAuthenticated"

    response = await client.get(
        "/api/v1/appointments/",
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_booking_lifecycle_over_http(
    client: AsyncClient,
    owner,
    other_owner,
    vet,
    pet,
    other_pet,
    slots,
    booking_payload,
    headers_for,
) -> None:
    """Book, conflict, pay, confirm, complete and refuse a late cancel."""
    response = await client.post(
        "/api/v1/appointments/", json=booking_payload, headers=headers_for(owner)
    )
    assert response.status_code == 201
    appointment = response.json()
    assert appointment["status"] == "pending"
    assert appointment["deposit_paid"] is False
    assert appointment["end_time"] == "09:30"

    conflict = await client.post(
        "/api/v1/appointments/",
        json={**booking_payload, "pet_id": str(other_pet["id"])},
        headers=headers_for(other_owner),
    )
    assert conflict.status_code == 409
    assert conflict.json()["code"] == "SlotUnavailable"

    appointment_id = appointment["id"]

    response = await client.post(
        f"/api/v1/appointments/{appointment_id}/confirm", headers=headers_for(vet)
    )
    assert response.status_code == 409
    assert response.json()["code"] == "DepositRequired"

    response = await client.post(
        f"/api/v1/appointments/{appointment_id}/pay",
        json={"payment_method": "card"},
        headers=headers_for(owner),
    )
    assert response.status_code == 200
    assert response.json()["appointment"]["deposit_paid"] is True

    response = await client.post(
        f"/api/v1/appointments/{appointment_id}/confirm", headers=headers_for(owner)
    )
    assert response.status_code == 403

    response = await client.post(
        f"/api/v1/appointments/{appointment_id}/confirm", headers=headers_for(vet)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"

    response = await client.post(
        f"/api/v1/appointments/{appointment_id}/complete",
        json={"notes": "healthy"},
        headers=headers_for(vet),
    )
    assert response.status_code == 200
    assert response.json()["veterinarian_notes"] == "healthy"

    response = await client.post(
        f"/api/v1/appointments/{appointment_id}/cancel", headers=headers_for(owner)
    )
    assert response.status_code == 409
    assert response.json()["code"] == "InvalidTransition"

    response = await client.get(
        f"/api/v1/appointments/{appointment_id}/payments", headers=headers_for(owner)
    )
    assert response.status_code == 200
    assert [p["status"] for p in response.json()] == ["completed"]


@pytest.mark.asyncio
async def test_book_and_pay_endpoint(
    client: AsyncClient, owner, vet, pet, slots, booking_payload, headers_for
) -> None:
    """book-and-pay returns the paid appointment and the payment reference."""
    response = await client.post(
        "/api/v1/appointments/book-and-pay",
        json={**booking_payload, "payment_method": "card"},
        headers=headers_for(owner),
    )
    assert response.status_code == 201
    data = response.json()
    assert data["appointment"]["deposit_paid"] is True
    assert data["payment"]["payment_id"].startswith("pay_")


@pytest.mark.asyncio
async def test_book_and_pay_declined(
    client: AsyncClient, owner, vet, pet, slots, booking_payload, headers_for
) -> None:
    """A declined charge is 402 and points at the appointment to retry."""
    app.dependency_overrides[get_booking_service] = declining_booking_service
    try:
        response = await client.post(
            "/api/v1/appointments/book-and-pay",
            json=booking_payload,
            headers=headers_for(owner),
        )
    finally:
        del app.dependency_overrides[get_booking_service]

    assert response.status_code == 402
    body = response.json()
    assert body["code"] == "PaymentDeclined"
    appointment_id = body["details"]["appointment_id"]

    response = await client.get(
        f"/api/v1/appointments/{appointment_id}", headers=headers_for(owner)
    )
    assert response.json()["status"] == "pending"
    assert response.json()["deposit_paid"] is False

    response = await client.post(
        f"/api/v1/appointments/{appointment_id}/pay", headers=headers_for(owner)
    )
    assert response.status_code == 200

    response = await client.get(
        f"/api/v1/appointments/{appointment_id}/payments", headers=headers_for(owner)
    )
    assert sorted(p["status"] for p in response.json()) == ["completed", "failed"]


@pytest.mark.asyncio
async def test_lists_and_access(
    client: AsyncClient, owner, other_owner, vet, pet, slots, booking_payload, headers_for
) -> None:
    """Owners and vets list their own appointments; strangers are refused."""
    created = await client.post(
        "/api/v1/appointments/", json=booking_payload, headers=headers_for(owner)
    )
    appointment_id = created.json()["id"]

    response = await client.get("/api/v1/appointments/", headers=headers_for(owner))
    assert response.json()["total"] == 1

    response = await client.get(
        "/api/v1/appointments/veterinarian",
        params={"status": "pending"},
        headers=headers_for(vet),
    )
    assert response.json()["total"] == 1

    response = await client.get("/api/v1/appointments/veterinarian", headers=headers_for(owner))
    assert response.status_code == 403

    response = await client.get(
        f"/api/v1/appointments/{appointment_id}", headers=headers_for(other_owner)
    )
    assert response.status_code == 403

    response = await client.post(
        f"/api/v1/appointments/{appointment_id}/cancel", headers=headers_for(vet)
    )
    assert response.status_code == 200
    assert response.json()["cancelled_by"] == str(vet["id"])

