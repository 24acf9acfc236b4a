"""Booking orchestration across slots, appointments, payments and notifications."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import InvalidTransitionException, PaymentDeclinedException
from app.core.redis_client import CacheManager
from app.schemas.appointments import (
    APPOINTMENT_PRICES,
    AppointmentCreate,
    AppointmentResponse,
    AppointmentType,
    BookAndPayRequest,
    BookingResponse,
)
from app.schemas.notifications import NotificationEvent
from app.schemas.payments import PaymentResult
from app.services.appointment_service import AppointmentService
from app.services.notification_service import NotificationService
from app.services.payment_service import PaymentGateway
from app.services.pet_service import PetService
from app.services.slot_service import SlotService
from app.services.user_service import UserService

logger = structlog.get_logger(__name__)


def default_deposit_for(appointment_type: AppointmentType | str) -> float:
    """
    Deposit owed when the client does not name one.

    A configured share of the type's list price, rounded half up to whole
    currency units. Unknown types fall back to the configured flat amount.
    """
    try:
        price = APPOINTMENT_PRICES[AppointmentType(appointment_type)]
    except ValueError:
        return settings.default_deposit_amount

    deposit = Decimal(str(price)) * Decimal(str(settings.deposit_rate))
    return float(deposit.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class BookingService:
    """
    Coordinates the booking flows.

    Each step commits on its own. When a later step fails, earlier steps are
    either compensated (slot release after a failed create) or deliberately
    left in place (a declined payment leaves a pending, unpaid appointment
    the owner can pay again). Notices are delivered only after the
    transition producing them has committed.
    """

    def __init__(
        self,
        db: AsyncSession,
        payment_gateway: PaymentGateway | None = None,
        cache_manager: CacheManager | None = None,
    ):
        """Initialize the orchestrator and the stores it drives."""
        self.db = db
        self.users = UserService(cache_manager)
        self.slots = SlotService(db, self.users)
        self.appointments = AppointmentService(db, self.slots)
        self.pets = PetService(db)
        self.payments = payment_gateway or PaymentGateway(db)
        self.notifications = NotificationService(db)

    async def _dispatch(self, events: Iterable[NotificationEvent]) -> None:
        events = list(events)
        if not events:
            return
        try:
            await self.notifications.dispatch(events)
        except Exception as e:
            await self.db.rollback()
            logger.warning(
                "notification_dispatch_failed",
                error=str(e),
                recipients=[str(event.recipient_id) for event in events],
            )

    async def book(self, owner_id: UUID, data: AppointmentCreate) -> AppointmentResponse:
        """
        Reserve a slot and record a pending appointment for it.

        Raises:
            NotFoundException: If the pet does not exist
            UnauthorizedException: If the caller does not own the pet
            SlotUnavailableException: If the slot is taken or missing
        """
        await self.pets.get_owned_pet(data.pet_id, owner_id)

        deposit_amount = (
            data.deposit_amount
            if data.deposit_amount is not None
            else default_deposit_for(data.appointment_type)
        )

        slot = await self.slots.reserve(data.veterinarian_id, data.date, data.start_time)

        try:
            transition = await self.appointments.create_appointment(
                owner_id, slot, data, deposit_amount
            )
        except Exception as e:
            await self.db.rollback()
            logger.warning(
                "compensating_slot_release",
                slot_id=str(slot.id),
                error=str(e),
            )
            await self.slots.release(slot.veterinarian_id, slot.date, slot.start_time)
            raise

        await self._dispatch(transition.events)
        return transition.appointment

    async def book_and_pay(self, owner_id: UUID, data: BookAndPayRequest) -> BookingResponse:
        """
        Book an appointment and charge its deposit.

        A declined charge keeps the pending appointment and its slot; the
        raised error carries the appointment id for a later retry.

        Raises:
            SlotUnavailableException: If the slot is taken or missing
            PaymentDeclinedException: If the processor declined the charge
        """
        appointment = await self.book(owner_id, data)
        payment = await self._collect_deposit(appointment, data.payment_method)
        updated = await self.appointments.get_appointment(appointment.id, owner_id)
        return BookingResponse(appointment=updated, payment=payment)

    async def pay_deposit(
        self,
        appointment_id: UUID,
        owner_id: UUID,
        payment_method: str = "card",
    ) -> BookingResponse:
        """
        Charge the deposit of an existing pending, unpaid appointment.

        Raises:
            UnauthorizedException: If the caller is not the pet owner
            InvalidTransitionException: If not pending or already paid
            PaymentDeclinedException: If the processor declined the charge
        """
        appointment = await self.appointments.get_appointment(appointment_id, owner_id)
        self.appointments.require_payable(appointment, owner_id)

        payment = await self._collect_deposit(appointment, payment_method)
        updated = await self.appointments.get_appointment(appointment_id, owner_id)
        return BookingResponse(appointment=updated, payment=payment)

    async def _collect_deposit(
        self,
        appointment: AppointmentResponse,
        payment_method: str,
    ) -> PaymentResult:
        # No transaction may stay open across the processor delay
        await self.db.commit()

        try:
            payment = await self.payments.charge(
                appointment.id,
                appointment.pet_owner_id,
                appointment.deposit_amount,
                payment_method,
            )
        except PaymentDeclinedException as e:
            e.details = {**(e.details or {}), "appointment_id": str(appointment.id)}
            raise

        try:
            transition = await self.appointments.record_deposit(
                appointment.id, appointment.pet_owner_id, payment.payment_id
            )
        except InvalidTransitionException as e:
            # The appointment changed while the charge was in flight
            logger.warning(
                "payment_orphaned",
                appointment_id=str(appointment.id),
                payment_id=payment.payment_id,
                payment_record_id=str(payment.payment_record_id),
                reason=e.message,
            )
            e.details = {
                **(e.details or {}),
                "appointment_id": str(appointment.id),
                "payment_id": payment.payment_id,
                "payment_record_id": str(payment.payment_record_id),
            }
            raise
        await self._dispatch(transition.events)
        return payment

    async def confirm(self, appointment_id: UUID, veterinarian_id: UUID) -> AppointmentResponse:
        """Confirm a paid pending appointment and notify the owner."""
        transition = await self.appointments.confirm_appointment(appointment_id, veterinarian_id)
        await self._dispatch(transition.events)
        return transition.appointment

    async def cancel(self, appointment_id: UUID, requester_id: UUID) -> AppointmentResponse:
        """Cancel an appointment, free its slot and notify the other party."""
        transition = await self.appointments.cancel_appointment(appointment_id, requester_id)
        await self._dispatch(transition.events)
        return transition.appointment

    async def complete(
        self,
        appointment_id: UUID,
        veterinarian_id: UUID,
        notes: str,
    ) -> AppointmentResponse:
        """Complete a confirmed appointment with treatment notes."""
        transition = await self.appointments.complete_appointment(
            appointment_id, veterinarian_id, notes
        )
        await self._dispatch(transition.events)
        return transition.appointment
