"""Simulated payment processor and its audit trail."""

import asyncio
import random
import string
import time
from uuid import UUID

import structlog
from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import PaymentDeclinedException
from app.models.payments import payments
from app.schemas.payments import PaymentRecordResponse, PaymentResult, PaymentStatus

logger = structlog.get_logger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


class PaymentGateway:
    """
    Charges deposits against a simulated processor.

    The processor waits ``delay_seconds`` and then approves with probability
    ``success_rate``. Every attempt leaves a payments row, approved or not.
    """

    def __init__(
        self,
        db: AsyncSession,
        delay_seconds: float | None = None,
        success_rate: float | None = None,
        rng: random.Random | None = None,
    ):
        """Initialize gateway; unset knobs fall back to settings."""
        self.db = db
        self.delay_seconds = (
            settings.payment_processing_delay_seconds if delay_seconds is None else delay_seconds
        )
        self.success_rate = (
            settings.payment_success_rate if success_rate is None else success_rate
        )
        self.rng = rng or random.Random()

    def _provider_payment_id(self) -> str:
        suffix = "".join(self.rng.choice(_ID_ALPHABET) for _ in range(9))
        return f"pay_{int(time.time() * 1000)}_{suffix}"

    async def _record(
        self,
        appointment_id: UUID,
        payer_id: UUID,
        amount: float,
        payment_method: str,
        status: PaymentStatus,
        provider_payment_id: str | None = None,
        failure_reason: str | None = None,
    ) -> UUID:
        stmt = (
            insert(payments)
            .values(
                appointment_id=appointment_id,
                user_id=payer_id,
                amount=amount,
                payment_method=payment_method,
                provider_payment_id=provider_payment_id,
                status=status.value,
                failure_reason=failure_reason,
            )
            .returning(payments.c.id)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.scalar_one()

    async def charge(
        self,
        appointment_id: UUID,
        payer_id: UUID,
        amount: float,
        payment_method: str = "card",
    ) -> PaymentResult:
        """
        Charge a deposit.

        No database transaction is held while the processor is working.

        Args:
            appointment_id: Appointment the deposit belongs to
            payer_id: Paying user
            amount: Amount to charge
            payment_method: Free-form method label, e.g. "card"

        Returns:
            Provider payment id and the audit record id

        Raises:
            PaymentDeclinedException: If the processor declined the charge
        """
        await asyncio.sleep(self.delay_seconds)
        approved = self.rng.random() < self.success_rate

        if not approved:
            record_id = await self._record(
                appointment_id,
                payer_id,
                amount,
                payment_method,
                PaymentStatus.FAILED,
                failure_reason="Declined by processor",
            )
            logger.warning(
                "payment_declined",
                appointment_id=str(appointment_id),
                payment_record_id=str(record_id),
                amount=amount,
            )
            raise PaymentDeclinedException(
                details={
                    "appointment_id": str(appointment_id),
                    "payment_record_id": str(record_id),
                }
            )

        provider_payment_id = self._provider_payment_id()
        record_id = await self._record(
            appointment_id,
            payer_id,
            amount,
            payment_method,
            PaymentStatus.COMPLETED,
            provider_payment_id=provider_payment_id,
        )
        logger.info(
            "payment_completed",
            appointment_id=str(appointment_id),
            payment_id=provider_payment_id,
            amount=amount,
        )
        return PaymentResult(payment_id=provider_payment_id, payment_record_id=record_id)

    async def list_payments(self, appointment_id: UUID) -> list[PaymentRecordResponse]:
        """List charge attempts for an appointment, oldest first."""
        stmt = (
            select(payments)
            .where(payments.c.appointment_id == appointment_id)
            .order_by(payments.c.transaction_date, payments.c.id)
        )
        result = await self.db.execute(stmt)
        return [PaymentRecordResponse.model_validate(dict(row)) for row in result.mappings()]
