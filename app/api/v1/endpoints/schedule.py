"""Veterinarian schedule endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, CurrentVeterinarian, DatabaseSession, OptionalCache
from app.schemas.slots import (
    DateString,
    GenerateSlotsRequest,
    PublishSlotsRequest,
    TimeSlotResponse,
)
from app.services.slot_service import SlotService
from app.services.user_service import UserService

router = APIRouter(prefix="/schedule", tags=["Schedule"])


@router.put(
    "/slots",
    response_model=list[TimeSlotResponse],
    status_code=status.HTTP_200_OK,
    summary="Publish slots for a date",
)
async def publish_slots(
    data: PublishSlotsRequest,
    current_user: CurrentVeterinarian,
    cache: OptionalCache,
    db: DatabaseSession,
) -> list[TimeSlotResponse]:
    """
    Replace the caller's unreserved slots for one date.

    Reserved slots stay as they are; requested slots starting at a reserved
    start time are skipped.

    Args:
        data: Date and slot windows
        current_user: Authenticated veterinarian
        cache: Profile cache, if configured
        db: Database session

    Returns:
        The newly created slots
    """
    service = SlotService(db, UserService(cache))
    return await service.publish_slots(current_user.id, data)


@router.post(
    "/slots/default",
    response_model=list[TimeSlotResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Publish the default working day",
)
async def generate_default_slots(
    data: GenerateSlotsRequest,
    current_user: CurrentVeterinarian,
    cache: OptionalCache,
    db: DatabaseSession,
) -> list[TimeSlotResponse]:
    """Publish back-to-back slots covering the configured working day."""
    service = SlotService(db, UserService(cache))
    return await service.generate_default_slots(current_user.id, data.date)


@router.get(
    "/veterinarians/{veterinarian_id}/available",
    response_model=list[TimeSlotResponse],
    summary="List available slots",
)
async def list_available_slots(
    veterinarian_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
    date: DateString = Query(..., description="YYYY-MM-DD"),
) -> list[TimeSlotResponse]:
    """List unreserved slots of a veterinarian on a date."""
    return await SlotService(db).list_available(veterinarian_id, date)


@router.get(
    "/veterinarians/{veterinarian_id}",
    response_model=list[TimeSlotResponse],
    summary="Get schedule for a date range",
)
async def get_schedule(
    veterinarian_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
    start_date: DateString = Query(...),
    end_date: DateString = Query(...),
) -> list[TimeSlotResponse]:
    """List every slot, reserved or not, between two dates inclusive."""
    return await SlotService(db).get_schedule(veterinarian_id, start_date, end_date)
