"""In-app notification schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    """Notification type enumeration."""

    APPOINTMENT_BOOKED = "appointment_booked"
    APPOINTMENT_CONFIRMED = "appointment_confirmed"
    APPOINTMENT_CANCELLED = "appointment_cancelled"
    PAYMENT_RECEIVED = "payment_received"


class NotificationEvent(BaseModel):
    """A notice produced by a state transition, waiting to be dispatched."""

    recipient_id: UUID
    title: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1, max_length=500)
    notification_type: NotificationType
    appointment_id: UUID | None = None


class NotificationResponse(BaseModel):
    """Schema for notification response."""

    id: UUID
    user_id: UUID
    title: str
    message: str
    notification_type: NotificationType
    is_read: bool
    appointment_id: UUID | None = None
    created_at: datetime
    read_at: datetime | None = None

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    """Schema for paginated notification list."""

    total: int
    page: int
    page_size: int
    items: list[NotificationResponse]


class UnreadCountResponse(BaseModel):
    """Schema for unread notification count."""

    unread_count: int


class MarkAllReadResponse(BaseModel):
    """Schema for bulk mark-as-read result."""

    updated: int
