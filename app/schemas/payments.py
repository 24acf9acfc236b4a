"""Payment schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class PaymentStatus(str, Enum):
    """Payment record status enumeration."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentRequest(BaseModel):
    """Schema for paying (or retrying) an appointment deposit."""

    payment_method: str = Field(default="card", min_length=1, max_length=30)


class PaymentResult(BaseModel):
    """Outcome of a successful charge."""

    payment_id: str
    payment_record_id: UUID


class PaymentRecordResponse(BaseModel):
    """Schema for a payment audit record."""

    id: UUID
    appointment_id: UUID
    user_id: UUID
    amount: float
    payment_method: str
    provider_payment_id: str | None = None
    status: PaymentStatus
    failure_reason: str | None = None
    transaction_date: datetime

    model_config = {"from_attributes": True}
