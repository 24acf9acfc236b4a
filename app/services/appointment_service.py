"""Appointment ledger: records and the status state machine."""

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from app.core.exceptions import (
    DepositRequiredException,
    InvalidTransitionException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from app.models.appointments import appointments
from app.schemas.appointments import (
    TERMINAL_STATUSES,
    AppointmentCreate,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentTransition,
)
from app.schemas.notifications import NotificationEvent, NotificationType
from app.schemas.slots import TimeSlotResponse
from app.services.slot_service import SlotService

logger = structlog.get_logger(__name__)


class AppointmentService:
    """
    Service for managing appointments.

    Every status change is a compare-and-set on the status the caller
    observed, so of two racing transitions on one appointment exactly one
    applies. Transitions return the notices they produce instead of writing
    them, leaving delivery to the caller once the change is committed.
    """

    def __init__(self, db: AsyncSession, slot_service: SlotService | None = None):
        """Initialize service with database session and slot store."""
        self.db = db
        self.slots = slot_service or SlotService(db)

    async def _load(self, appointment_id: UUID) -> AppointmentResponse:
        result = await self.db.execute(
            select(appointments).where(appointments.c.id == appointment_id)
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Appointment not found")
        return AppointmentResponse.model_validate(dict(row))

    async def _compare_and_set(
        self,
        current: AppointmentResponse,
        values: dict[str, Any],
        extra_conditions: Sequence[ColumnElement[bool]] = (),
    ) -> AppointmentResponse:
        """
        Apply an update only if the row still has the observed status.

        Does not commit.

        Raises:
            InvalidTransitionException: If another transition got there first
        """
        now = datetime.now(UTC)
        stmt = (
            update(appointments)
            .where(
                appointments.c.id == current.id,
                appointments.c.status == current.status.value,
                *extra_conditions,
            )
            .values(updated_at=now, **values)
            .returning(appointments)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().first()

        if row is None:
            await self.db.rollback()
            logger.info(
                "appointment_transition_lost",
                appointment_id=str(current.id),
                observed_status=current.status.value,
            )
            raise InvalidTransitionException(
                f"Appointment is no longer {current.status.value}; reload and try again"
            )

        return AppointmentResponse.model_validate(dict(row))

    async def create_appointment(
        self,
        pet_owner_id: UUID,
        slot: TimeSlotResponse,
        data: AppointmentCreate,
        deposit_amount: float,
    ) -> AppointmentTransition:
        """
        Record a pending appointment for an already reserved slot.

        Args:
            pet_owner_id: Owner of ``data.pet_id``, verified by the caller
            slot: The slot returned by ``SlotService.reserve``
            data: Booking details
            deposit_amount: Deposit due before confirmation

        Returns:
            The created appointment and a notice for the veterinarian
        """
        values = {
            "pet_owner_id": pet_owner_id,
            "veterinarian_id": slot.veterinarian_id,
            "pet_id": data.pet_id,
            "date": slot.date,
            "start_time": slot.start_time,
            "end_time": slot.end_time,
            "appointment_type": data.appointment_type.value,
            "severity": data.severity.value,
            "notes": data.notes,
            "status": AppointmentStatus.PENDING.value,
            "deposit_amount": deposit_amount,
            "deposit_paid": False,
        }

        result = await self.db.execute(
            insert(appointments).values(**values).returning(appointments)
        )
        await self.db.commit()

        appointment = AppointmentResponse.model_validate(dict(result.mappings().one()))
        logger.info(
            "appointment_created",
            appointment_id=str(appointment.id),
            veterinarian_id=str(appointment.veterinarian_id),
            date=appointment.date,
            start_time=appointment.start_time,
        )

        event = NotificationEvent(
            recipient_id=appointment.veterinarian_id,
            title="New Appointment Request",
            message=(
                f"New appointment request for {appointment.date} at {appointment.start_time}"
            ),
            notification_type=NotificationType.APPOINTMENT_BOOKED,
            appointment_id=appointment.id,
        )
        return AppointmentTransition(appointment=appointment, events=[event])

    async def get_appointment(
        self,
        appointment_id: UUID,
        requester_id: UUID,
    ) -> AppointmentResponse:
        """
        Get appointment by ID.

        Raises:
            NotFoundException: If appointment not found
            UnauthorizedException: If the requester is neither the owner nor the vet
        """
        appointment = await self._load(appointment_id)
        if requester_id not in (appointment.pet_owner_id, appointment.veterinarian_id):
            raise UnauthorizedException("Access denied to this appointment")
        return appointment

    async def _list(
        self,
        owner_condition: ColumnElement[bool],
        filters: AppointmentFilters,
    ) -> AppointmentListResponse:
        conditions = [owner_condition]

        if filters.status:
            conditions.append(appointments.c.status == filters.status.value)

        if filters.from_date:
            conditions.append(appointments.c.date >= filters.from_date)

        if filters.to_date:
            conditions.append(appointments.c.date <= filters.to_date)

        count_stmt = select(func.count()).select_from(appointments).where(and_(*conditions))
        total = (await self.db.execute(count_stmt)).scalar() or 0

        offset = (filters.page - 1) * filters.page_size
        stmt = (
            select(appointments)
            .where(and_(*conditions))
            .order_by(
                appointments.c.date.desc(),
                appointments.c.start_time.desc(),
                appointments.c.created_at.desc(),
            )
            .limit(filters.page_size)
            .offset(offset)
        )
        result = await self.db.execute(stmt)

        return AppointmentListResponse(
            total=total,
            page=filters.page,
            page_size=filters.page_size,
            items=[AppointmentResponse.model_validate(dict(row)) for row in result.mappings()],
        )

    async def list_owner_appointments(
        self,
        pet_owner_id: UUID,
        filters: AppointmentFilters,
    ) -> AppointmentListResponse:
        """List a pet owner's appointments, newest slot first."""
        return await self._list(appointments.c.pet_owner_id == pet_owner_id, filters)

    async def list_veterinarian_appointments(
        self,
        veterinarian_id: UUID,
        filters: AppointmentFilters,
    ) -> AppointmentListResponse:
        """List a veterinarian's appointments, newest slot first."""
        return await self._list(appointments.c.veterinarian_id == veterinarian_id, filters)

    @staticmethod
    def require_payable(appointment: AppointmentResponse, requester_id: UUID) -> None:
        """
        Check that the requester may pay the appointment's deposit now.

        Raises:
            UnauthorizedException: If the requester is not the pet owner
            InvalidTransitionException: If not pending or already paid
        """
        if appointment.pet_owner_id != requester_id:
            raise UnauthorizedException("Only the pet owner can pay the deposit")
        if appointment.status != AppointmentStatus.PENDING:
            raise InvalidTransitionException(
                f"Cannot pay the deposit of a {appointment.status.value} appointment"
            )
        if appointment.deposit_paid:
            raise InvalidTransitionException("Deposit has already been paid")

    async def record_deposit(
        self,
        appointment_id: UUID,
        requester_id: UUID,
        payment_id: str,
    ) -> AppointmentTransition:
        """
        Mark the deposit as paid. Status stays pending.

        Raises:
            UnauthorizedException: If the requester is not the pet owner
            InvalidTransitionException: If not pending or already paid
        """
        appointment = await self._load(appointment_id)
        self.require_payable(appointment, requester_id)

        updated = await self._compare_and_set(
            appointment,
            {"deposit_paid": True, "payment_id": payment_id},
            extra_conditions=[appointments.c.deposit_paid.is_(False)],
        )
        await self.db.commit()

        logger.info("deposit_recorded", appointment_id=str(appointment_id), payment_id=payment_id)

        event = NotificationEvent(
            recipient_id=updated.veterinarian_id,
            title="Payment Received",
            message=f"Deposit payment received for appointment on {updated.date}",
            notification_type=NotificationType.PAYMENT_RECEIVED,
            appointment_id=updated.id,
        )
        return AppointmentTransition(appointment=updated, events=[event])

    async def confirm_appointment(
        self,
        appointment_id: UUID,
        requester_id: UUID,
    ) -> AppointmentTransition:
        """
        Move a paid pending appointment to confirmed.

        Raises:
            UnauthorizedException: If the requester is not the appointment's vet
            InvalidTransitionException: If the appointment is not pending
            DepositRequiredException: If the deposit has not been paid
        """
        appointment = await self._load(appointment_id)

        if appointment.veterinarian_id != requester_id:
            raise UnauthorizedException("Only the appointment's veterinarian can confirm it")
        if appointment.status != AppointmentStatus.PENDING:
            raise InvalidTransitionException(
                f"Cannot confirm a {appointment.status.value} appointment"
            )
        if not appointment.deposit_paid:
            raise DepositRequiredException()

        updated = await self._compare_and_set(
            appointment,
            {
                "status": AppointmentStatus.CONFIRMED.value,
                "confirmed_at": datetime.now(UTC),
            },
            extra_conditions=[appointments.c.deposit_paid.is_(True)],
        )
        await self.db.commit()

        logger.info("appointment_confirmed", appointment_id=str(appointment_id))

        event = NotificationEvent(
            recipient_id=updated.pet_owner_id,
            title="Appointment Confirmed",
            message=(
                f"Your appointment for {updated.date} at {updated.start_time} has been confirmed"
            ),
            notification_type=NotificationType.APPOINTMENT_CONFIRMED,
            appointment_id=updated.id,
        )
        return AppointmentTransition(appointment=updated, events=[event])

    async def cancel_appointment(
        self,
        appointment_id: UUID,
        requester_id: UUID,
    ) -> AppointmentTransition:
        """
        Cancel a pending or confirmed appointment and free its slot.

        The status change and the slot release commit together. Deposit
        state does not matter.

        Raises:
            UnauthorizedException: If the requester is neither owner nor vet
            InvalidTransitionException: If the appointment is already terminal
        """
        appointment = await self._load(appointment_id)

        if requester_id not in (appointment.pet_owner_id, appointment.veterinarian_id):
            raise UnauthorizedException("Only the pet owner or veterinarian can cancel")
        if appointment.status in TERMINAL_STATUSES:
            raise InvalidTransitionException(
                f"Cannot cancel a {appointment.status.value} appointment"
            )

        updated = await self._compare_and_set(
            appointment,
            {
                "status": AppointmentStatus.CANCELLED.value,
                "cancelled_at": datetime.now(UTC),
                "cancelled_by": requester_id,
            },
        )
        try:
            await self.slots.release(
                updated.veterinarian_id,
                updated.date,
                updated.start_time,
                commit=False,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "appointment_cancelled",
            appointment_id=str(appointment_id),
            cancelled_by=str(requester_id),
            previous_status=appointment.status.value,
        )

        recipient_id = (
            updated.veterinarian_id
            if requester_id == updated.pet_owner_id
            else updated.pet_owner_id
        )
        event = NotificationEvent(
            recipient_id=recipient_id,
            title="Appointment Cancelled",
            message=f"Appointment for {updated.date} at {updated.start_time} has been cancelled",
            notification_type=NotificationType.APPOINTMENT_CANCELLED,
            appointment_id=updated.id,
        )
        return AppointmentTransition(appointment=updated, events=[event])

    async def complete_appointment(
        self,
        appointment_id: UUID,
        requester_id: UUID,
        notes: str,
    ) -> AppointmentTransition:
        """
        Record treatment notes and close a confirmed appointment.

        Completion produces no notification.

        Raises:
            UnauthorizedException: If the requester is not the appointment's vet
            InvalidTransitionException: If the appointment is not confirmed
            ValidationException: If the notes are blank
        """
        appointment = await self._load(appointment_id)

        if appointment.veterinarian_id != requester_id:
            raise UnauthorizedException("Only the appointment's veterinarian can complete it")
        if appointment.status != AppointmentStatus.CONFIRMED:
            raise InvalidTransitionException(
                f"Cannot complete a {appointment.status.value} appointment"
            )

        treatment_notes = notes.strip()
        if not treatment_notes:
            raise ValidationException("Treatment notes are required to complete an appointment")

        updated = await self._compare_and_set(
            appointment,
            {
                "status": AppointmentStatus.COMPLETED.value,
                "veterinarian_notes": treatment_notes,
                "completed_at": datetime.now(UTC),
            },
        )
        await self.db.commit()

        logger.info("appointment_completed", appointment_id=str(appointment_id))
        return AppointmentTransition(appointment=updated, events=[])
