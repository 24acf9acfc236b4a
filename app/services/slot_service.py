"""Slot store: published veterinarian capacity and its reservation."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import structlog
from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    ConflictException,
    SlotUnavailableException,
    ValidationException,
)
from app.models.time_slots import time_slots
from app.schemas.slots import TIME_FORMAT, PublishSlotsRequest, SlotWindow, TimeSlotResponse
from app.services.user_service import UserService

logger = structlog.get_logger(__name__)


def build_default_windows(
    start_hour: int | None = None,
    end_hour: int | None = None,
    slot_minutes: int | None = None,
) -> list[SlotWindow]:
    """
    Build back-to-back slots covering a working day.

    Args:
        start_hour: First slot start hour (defaults to settings)
        end_hour: Hour at which the last slot must end (defaults to settings)
        slot_minutes: Slot length in minutes (defaults to settings)

    Returns:
        Ordered slot windows, e.g. 09:00-09:30 ... 16:30-17:00
    """
    start_hour = settings.schedule_day_start_hour if start_hour is None else start_hour
    end_hour = settings.schedule_day_end_hour if end_hour is None else end_hour
    slot_minutes = slot_minutes or settings.schedule_slot_minutes

    day = datetime(2000, 1, 1)
    cursor = day.replace(hour=start_hour)
    day_end = day.replace(hour=end_hour)
    step = timedelta(minutes=slot_minutes)

    windows = []
    while cursor + step <= day_end:
        windows.append(
            SlotWindow(
                start_time=cursor.strftime(TIME_FORMAT),
                end_time=(cursor + step).strftime(TIME_FORMAT),
            )
        )
        cursor += step
    return windows


class SlotService:
    """
    Service owning bookable time slots.

    Reservation is keyed by the natural (veterinarian, date, start time)
    triple and performed as one conditional UPDATE, so the database decides
    the single winner among concurrent bookers.
    """

    def __init__(self, db: AsyncSession, user_service: UserService | None = None):
        """Initialize service with database session and profile lookup."""
        self.db = db
        self.users = user_service or UserService()

    @staticmethod
    def _slot_key(veterinarian_id: UUID, date: str, start_time: str) -> list:
        return [
            time_slots.c.veterinarian_id == veterinarian_id,
            time_slots.c.date == date,
            time_slots.c.start_time == start_time,
        ]

    async def publish_slots(
        self,
        veterinarian_id: UUID,
        data: PublishSlotsRequest,
    ) -> list[TimeSlotResponse]:
        """
        Replace the caller's unreserved slots for one date.

        Reserved slots are kept. A requested slot whose start time matches a
        reserved slot is skipped, since that triple is already taken.

        Args:
            veterinarian_id: Caller, must have a veterinarian profile
            data: Date and slot windows

        Returns:
            The newly created slots, ordered by start time

        Raises:
            UnauthorizedException: If the caller is not a veterinarian
            ConflictException: If a concurrent publish for the same date won
        """
        await self.users.require_veterinarian(self.db, veterinarian_id)

        same_day = and_(
            time_slots.c.veterinarian_id == veterinarian_id,
            time_slots.c.date == data.date,
        )

        try:
            await self.db.execute(
                delete(time_slots).where(same_day, time_slots.c.is_booked.is_(False))
            )

            result = await self.db.execute(
                select(time_slots.c.start_time).where(same_day, time_slots.c.is_booked.is_(True))
            )
            reserved_starts = set(result.scalars().all())

            rows = [
                {
                    "id": uuid4(),
                    "veterinarian_id": veterinarian_id,
                    "date": data.date,
                    "start_time": window.start_time,
                    "end_time": window.end_time,
                    "is_booked": False,
                }
                for window in data.slots
                if window.start_time not in reserved_starts
            ]
            if rows:
                await self.db.execute(insert(time_slots), rows)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Slots for this date were changed concurrently, try again")

        logger.info(
            "slots_published",
            veterinarian_id=str(veterinarian_id),
            date=data.date,
            created=len(rows),
            skipped_reserved=len(data.slots) - len(rows),
        )

        if not rows:
            return []

        result = await self.db.execute(
            select(time_slots)
            .where(time_slots.c.id.in_([row["id"] for row in rows]))
            .order_by(time_slots.c.start_time)
        )
        return [TimeSlotResponse.model_validate(dict(row)) for row in result.mappings()]

    async def generate_default_slots(
        self,
        veterinarian_id: UUID,
        date: str,
    ) -> list[TimeSlotResponse]:
        """Publish the configured default working day for a date."""
        return await self.publish_slots(
            veterinarian_id,
            PublishSlotsRequest(date=date, slots=build_default_windows()),
        )

    async def list_available(self, veterinarian_id: UUID, date: str) -> list[TimeSlotResponse]:
        """List unreserved slots for a veterinarian on a date."""
        stmt = (
            select(time_slots)
            .where(
                time_slots.c.veterinarian_id == veterinarian_id,
                time_slots.c.date == date,
                time_slots.c.is_booked.is_(False),
            )
            .order_by(time_slots.c.start_time)
        )
        result = await self.db.execute(stmt)
        return [TimeSlotResponse.model_validate(dict(row)) for row in result.mappings()]

    async def get_schedule(
        self,
        veterinarian_id: UUID,
        start_date: str,
        end_date: str,
    ) -> list[TimeSlotResponse]:
        """List every slot, reserved or not, in an inclusive date range."""
        if end_date < start_date:
            raise ValidationException("end_date must not be before start_date")

        stmt = (
            select(time_slots)
            .where(
                time_slots.c.veterinarian_id == veterinarian_id,
                time_slots.c.date >= start_date,
                time_slots.c.date <= end_date,
            )
            .order_by(time_slots.c.date, time_slots.c.start_time)
        )
        result = await self.db.execute(stmt)
        return [TimeSlotResponse.model_validate(dict(row)) for row in result.mappings()]

    async def reserve(
        self,
        veterinarian_id: UUID,
        date: str,
        start_time: str,
    ) -> TimeSlotResponse:
        """
        Atomically flip the matching unreserved slot to reserved.

        Returns:
            The reserved slot

        Raises:
            SlotUnavailableException: If no unreserved slot matches the triple
        """
        stmt = (
            update(time_slots)
            .where(
                *self._slot_key(veterinarian_id, date, start_time),
                time_slots.c.is_booked.is_(False),
            )
            .values(is_booked=True, updated_at=datetime.now(UTC))
            .returning(time_slots)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().first()

        if row is None:
            await self.db.rollback()
            logger.info(
                "slot_reservation_lost",
                veterinarian_id=str(veterinarian_id),
                date=date,
                start_time=start_time,
            )
            raise SlotUnavailableException()

        slot = TimeSlotResponse.model_validate(dict(row))
        await self.db.commit()

        logger.info(
            "slot_reserved",
            slot_id=str(slot.id),
            veterinarian_id=str(veterinarian_id),
            date=date,
            start_time=start_time,
        )
        return slot

    async def release(
        self,
        veterinarian_id: UUID,
        date: str,
        start_time: str,
        commit: bool = True,
    ) -> bool:
        """
        Flip the matching slot back to unreserved.

        Missing or already free slots are a no-op so cancellation never fails
        on a slot that has gone away.

        Args:
            veterinarian_id: Slot owner
            date: Slot date
            start_time: Slot start time
            commit: Commit immediately; pass False to join the caller's transaction

        Returns:
            True if a slot was released
        """
        stmt = (
            update(time_slots)
            .where(
                *self._slot_key(veterinarian_id, date, start_time),
                time_slots.c.is_booked.is_(True),
            )
            .values(is_booked=False, updated_at=datetime.now(UTC))
            .returning(time_slots.c.id)
        )
        result = await self.db.execute(stmt)
        released = result.first() is not None

        if commit:
            await self.db.commit()

        logger.info(
            "slot_released" if released else "slot_release_noop",
            veterinarian_id=str(veterinarian_id),
            date=date,
            start_time=start_time,
        )
        return released
