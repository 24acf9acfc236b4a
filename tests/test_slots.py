"""Tests for the slot store."""

import asyncio

import pytest
from pydantic import ValidationError

from app.core.exceptions import (
    SlotUnavailableException,
    UnauthorizedException,
    ValidationException,
)
from app.schemas.slots import PublishSlotsRequest, SlotWindow
from app.services.slot_service import SlotService, build_default_windows

SLOT_DATE = "2024-06-01"


@pytest.mark.asyncio
async def test_publish_and_list_available(db_session, vet, slots) -> None:
    """Published slots are listed in start order while unreserved."""
    assert [slot.start_time for slot in slots] == ["09:00", "09:30"]

    available = await SlotService(db_session).list_available(vet["id"], SLOT_DATE)
    assert [(s.start_time, s.end_time) for s in available] == [
        ("09:00", "09:30"),
        ("09:30", "10:00"),
    ]
    assert not any(s.is_booked for s in available)


@pytest.mark.asyncio
async def test_publish_requires_veterinarian(db_session, owner) -> None:
    """Pet owners cannot publish slots."""
    with pytest.raises(UnauthorizedException):
        await SlotService(db_session).publish_slots(
            owner["id"],
            PublishSlotsRequest(
                date=SLOT_DATE,
                slots=[SlotWindow(start_time="09:00", end_time="09:30")],
            ),
        )


@pytest.mark.asyncio
async def test_republish_keeps_reserved_slots(db_session, vet, slots) -> None:
    """Republishing replaces only unreserved slots and skips reserved start times."""
    service = SlotService(db_session)
    await service.reserve(vet["id"], SLOT_DATE, "09:00")

    created = await service.publish_slots(
        vet["id"],
        PublishSlotsRequest(
            date=SLOT_DATE,
            slots=[
                SlotWindow(start_time="09:00", end_time="09:30"),
                SlotWindow(start_time="11:00", end_time="11:30"),
            ],
        ),
    )
    assert [s.start_time for s in created] == ["11:00"]

    schedule = await service.get_schedule(vet["id"], SLOT_DATE, SLOT_DATE)
    assert [(s.start_time, s.is_booked) for s in schedule] == [
        ("09:00", True),
        ("11:00", False),
    ]


def test_publish_request_rejects_bad_windows() -> None:
    """Duplicate starts and inverted ranges are validation errors."""
    with pytest.raises(ValidationError):
        SlotWindow(start_time="10:00", end_time="09:30")

    with pytest.raises(ValidationError):
        SlotWindow(start_time="9:00", end_time="09:30")

    with pytest.raises(ValidationError):
        PublishSlotsRequest(
            date=SLOT_DATE,
            slots=[
                SlotWindow(start_time="09:00", end_time="09:30"),
                SlotWindow(start_time="09:00", end_time="10:00"),
            ],
        )

    with pytest.raises(ValidationError):
        PublishSlotsRequest(date="2024-13-01", slots=[])

    with pytest.raises(ValidationError):
        PublishSlotsRequest(date="2024-6-1", slots=[])


@pytest.mark.asyncio
async def test_reserve_flips_slot_once(db_session, vet, slots) -> None:
    """A slot can be reserved once; the second attempt is SlotUnavailable."""
    service = SlotService(db_session)

    reserved = await service.reserve(vet["id"], SLOT_DATE, "09:00")
    assert reserved.is_booked is True
    assert reserved.end_time == "09:30"

    with pytest.raises(SlotUnavailableException):
        await service.reserve(vet["id"], SLOT_DATE, "09:00")

    available = await service.list_available(vet["id"], SLOT_DATE)
    assert [s.start_time for s in available] == ["09:30"]


@pytest.mark.asyncio
async def test_reserve_unknown_slot(db_session, vet, slots) -> None:
    """Reserving a slot that was never published is SlotUnavailable."""
    with pytest.raises(SlotUnavailableException):
        await SlotService(db_session).reserve(vet["id"], SLOT_DATE, "15:00")


@pytest.mark.asyncio
async def test_concurrent_reserves_have_one_winner(session_factory, vet, slots) -> None:
    """Of many concurrent reservations for one slot exactly one succeeds."""
    attempts = 8

    async def attempt():
        async with session_factory() as session:
            return await SlotService(session).reserve(vet["id"], SLOT_DATE, "09:00")

    results = await asyncio.gather(*(attempt() for _ in range(attempts)), return_exceptions=True)

    winners = [r for r in results if not isinstance(r, Exception)]
    losers = [r for r in results if isinstance(r, Exception)]
    assert len(winners) == 1
    assert len(losers) == attempts - 1
    assert all(isinstance(e, SlotUnavailableException) for e in losers)


@pytest.mark.asyncio
async def test_release_is_idempotent(db_session, vet, slots) -> None:
    """Releasing a free or missing slot is a no-op and touches nothing else."""
    service = SlotService(db_session)
    await service.reserve(vet["id"], SLOT_DATE, "09:30")

    assert await service.release(vet["id"], SLOT_DATE, "09:00") is False
    assert await service.release(vet["id"], SLOT_DATE, "18:00") is False

    schedule = await service.get_schedule(vet["id"], SLOT_DATE, SLOT_DATE)
    assert {s.start_time: s.is_booked for s in schedule} == {"09:00": False, "09:30": True}

    assert await service.release(vet["id"], SLOT_DATE, "09:30") is True
    assert await service.release(vet["id"], SLOT_DATE, "09:30") is False
    reserved = await service.reserve(vet["id"], SLOT_DATE, "09:30")
    assert reserved.is_booked is True


@pytest.mark.asyncio
async def test_schedule_range_validation(db_session, vet) -> None:
    """An inverted date range is rejected."""
    with pytest.raises(ValidationException):
        await SlotService(db_session).get_schedule(vet["id"], "2024-06-02", "2024-06-01")


def test_build_default_windows() -> None:
    """The default day is back-to-back slots ending at the closing hour."""
    windows = build_default_windows(start_hour=9, end_hour=11, slot_minutes=30)
    assert [(w.start_time, w.end_time) for w in windows] == [
        ("09:00", "09:30"),
        ("09:30", "10:00"),
        ("10:00", "10:30"),
        ("10:30", "11:00"),
    ]

    assert len(build_default_windows(start_hour=9, end_hour=17, slot_minutes=45)) == 10


@pytest.mark.asyncio
async def test_generate_default_slots(db_session, vet) -> None:
    """Default generation publishes the configured working day."""
    created = await SlotService(db_session).generate_default_slots(vet["id"], "2024-06-03")
    assert created[0].start_time == "09:00"
    assert created[-1].end_time == "17:00"
    assert len(created) == 16
