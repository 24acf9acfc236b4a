"""Appointment schemas for request/response validation."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.schemas.notifications import NotificationEvent
from app.schemas.payments import PaymentResult
from app.schemas.slots import DateString, TimeString


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AppointmentType(str, Enum):
    """Appointment type enumeration."""

    REGULAR_CHECKUP = "regular_checkup"
    VACCINATION = "vaccination"
    EMERGENCY = "emergency"
    SURGERY = "surgery"
    DENTAL = "dental"
    GROOMING = "grooming"


class Severity(str, Enum):
    """Severity enumeration."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EMERGENCY = "emergency"


# List prices used to derive the default deposit
APPOINTMENT_PRICES: dict[AppointmentType, float] = {
    AppointmentType.REGULAR_CHECKUP: 25,
    AppointmentType.VACCINATION: 30,
    AppointmentType.EMERGENCY: 75,
    AppointmentType.SURGERY: 50,
    AppointmentType.DENTAL: 40,
    AppointmentType.GROOMING: 20,
}

TERMINAL_STATUSES = frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED})


class AppointmentCreate(BaseModel):
    """Schema for booking an appointment against a published slot."""

    veterinarian_id: UUID
    pet_id: UUID
    date: DateString = Field(..., examples=["2024-06-01"])
    start_time: TimeString = Field(..., examples=["09:00"])
    end_time: TimeString | None = Field(
        None,
        description="Informational; the reserved slot's end time is stored",
    )
    appointment_type: AppointmentType
    severity: Severity
    notes: str | None = Field(None, max_length=1000)
    deposit_amount: float | None = Field(
        None,
        ge=0,
        description="Defaults to a share of the appointment type's list price",
    )

    @field_validator("notes")
    @classmethod
    def normalize_notes(cls, v: str | None) -> str | None:
        """Treat blank notes as absent."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None


class BookAndPayRequest(AppointmentCreate):
    """Schema for booking an appointment and paying its deposit in one call."""

    payment_method: str = Field(default="card", min_length=1, max_length=30)


class AppointmentComplete(BaseModel):
    """Schema for completing an appointment with treatment notes."""

    notes: str = Field(..., max_length=5000)


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: UUID
    pet_owner_id: UUID
    veterinarian_id: UUID
    pet_id: UUID
    date: str
    start_time: str
    end_time: str
    appointment_type: AppointmentType
    severity: Severity
    status: AppointmentStatus
    notes: str | None = None
    deposit_amount: float
    deposit_paid: bool
    payment_id: str | None = None
    veterinarian_notes: str | None = None
    created_at: datetime
    updated_at: datetime
    confirmed_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancelled_by: UUID | None = None

    model_config = {"from_attributes": True}


class AppointmentListResponse(BaseModel):
    """Schema for paginated appointment list response."""

    total: int
    page: int
    page_size: int
    items: list[AppointmentResponse]


class AppointmentFilters(BaseModel):
    """Schema for appointment filtering."""

    status: AppointmentStatus | None = None
    from_date: DateString | None = None
    to_date: DateString | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class AppointmentTransition(BaseModel):
    """Result of a ledger transition: new state plus notices to deliver."""

    appointment: AppointmentResponse
    events: list[NotificationEvent] = Field(default_factory=list)


class BookingResponse(BaseModel):
    """Schema for a booking that went through the deposit payment step."""

    appointment: AppointmentResponse
    payment: PaymentResult
