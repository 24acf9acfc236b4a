"""Appointment endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.dependencies import (
    CurrentUser,
    CurrentVeterinarian,
    DatabaseSession,
    OptionalCache,
)
from app.schemas.appointments import (
    AppointmentComplete,
    AppointmentCreate,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatus,
    BookAndPayRequest,
    BookingResponse,
)
from app.schemas.payments import PaymentRecordResponse, PaymentRequest
from app.schemas.slots import DateString
from app.services.appointment_service import AppointmentService
from app.services.booking_service import BookingService
from app.services.payment_service import PaymentGateway

router = APIRouter()


def get_booking_service(db: DatabaseSession, cache: OptionalCache) -> BookingService:
    """Build the booking orchestrator for a request."""
    return BookingService(db, cache_manager=cache)


Booking = Annotated[BookingService, Depends(get_booking_service)]


def _filters(
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    from_date: DateString | None = Query(None, examples=["2024-06-01"]),
    to_date: DateString | None = Query(None, examples=["2024-06-30"]),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> AppointmentFilters:
    return AppointmentFilters(
        status=status_filter,
        from_date=from_date,
        to_date=to_date,
        page=page,
        page_size=page_size,
    )


Filters = Annotated[AppointmentFilters, Depends(_filters)]


@router.post(
    "/",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Appointments"],
    summary="Book an appointment",
)
async def book_appointment(
    data: AppointmentCreate,
    current_user: CurrentUser,
    booking: Booking,
) -> AppointmentResponse:
    """
    Reserve a slot and create a pending appointment without paying.

    Args:
        data: Slot triple, pet and visit details
        current_user: Authenticated pet owner
        booking: Booking orchestrator

    Returns:
        The pending appointment
    """
    return await booking.book(current_user.id, data)


@router.post(
    "/book-and-pay",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Appointments"],
    summary="Book an appointment and pay the deposit",
)
async def book_and_pay(
    data: BookAndPayRequest,
    current_user: CurrentUser,
    booking: Booking,
) -> BookingResponse:
    """
    Reserve a slot, create the appointment and charge its deposit.

    A declined payment answers 402 with the pending appointment's id in
    ``details`` so the deposit can be paid again later.
    """
    return await booking.book_and_pay(current_user.id, data)


@router.get(
    "/",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="List my appointments",
)
async def list_appointments(
    current_user: CurrentUser,
    db: DatabaseSession,
    filters: Filters,
) -> AppointmentListResponse:
    """List appointments booked by the authenticated pet owner."""
    return await AppointmentService(db).list_owner_appointments(current_user.id, filters)


@router.get(
    "/veterinarian",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="List appointments with me as veterinarian",
)
async def list_veterinarian_appointments(
    current_user: CurrentVeterinarian,
    db: DatabaseSession,
    filters: Filters,
) -> AppointmentListResponse:
    """List appointments assigned to the authenticated veterinarian."""
    return await AppointmentService(db).list_veterinarian_appointments(current_user.id, filters)


@router.get(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Get appointment by ID",
)
async def get_appointment(
    appointment_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> AppointmentResponse:
    """
    Get a specific appointment by ID.

    Args:
        appointment_id: Appointment ID
        current_user: Authenticated owner or veterinarian of the appointment
        db: Database session

    Returns:
        Appointment details
    """
    return await AppointmentService(db).get_appointment(appointment_id, current_user.id)


@router.post(
    "/{appointment_id}/pay",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Pay the deposit",
)
async def pay_deposit(
    appointment_id: UUID,
    current_user: CurrentUser,
    booking: Booking,
    data: PaymentRequest | None = None,
) -> BookingResponse:
    """Charge (or retry charging) the deposit of a pending appointment."""
    payment_method = data.payment_method if data else "card"
    return await booking.pay_deposit(appointment_id, current_user.id, payment_method)


@router.post(
    "/{appointment_id}/confirm",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Confirm appointment",
)
async def confirm_appointment(
    appointment_id: UUID,
    current_user: CurrentVeterinarian,
    booking: Booking,
) -> AppointmentResponse:
    """Confirm a pending appointment whose deposit has been paid."""
    return await booking.confirm(appointment_id, current_user.id)


@router.post(
    "/{appointment_id}/cancel",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Cancel appointment",
)
async def cancel_appointment(
    appointment_id: UUID,
    current_user: CurrentUser,
    booking: Booking,
) -> AppointmentResponse:
    """
    Cancel a pending or confirmed appointment.

    Either the pet owner or the veterinarian may cancel. The slot becomes
    bookable again.
    """
    return await booking.cancel(appointment_id, current_user.id)


@router.post(
    "/{appointment_id}/complete",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Complete appointment",
)
async def complete_appointment(
    appointment_id: UUID,
    data: AppointmentComplete,
    current_user: CurrentVeterinarian,
    booking: Booking,
) -> AppointmentResponse:
    """Record treatment notes and close a confirmed appointment."""
    return await booking.complete(appointment_id, current_user.id, data.notes)


@router.get(
    "/{appointment_id}/payments",
    response_model=list[PaymentRecordResponse],
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="List payment attempts",
)
async def list_payments(
    appointment_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> list[PaymentRecordResponse]:
    """List every charge attempt for an appointment, declined ones included."""
    await AppointmentService(db).get_appointment(appointment_id, current_user.id)
    return await PaymentGateway(db).list_payments(appointment_id)
