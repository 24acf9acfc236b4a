"""Time slot schemas for request/response validation."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field, field_validator, model_validator

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def validate_date_string(value: str) -> str:
    """Ensure a value is a YYYY-MM-DD calendar date."""
    try:
        parsed = datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        raise ValueError("Date must be in YYYY-MM-DD format")
    if parsed.strftime(DATE_FORMAT) != value:
        raise ValueError("Date must be in YYYY-MM-DD format")
    return value


def validate_time_string(value: str) -> str:
    """Ensure a value is a zero-padded HH:MM time."""
    try:
        parsed = datetime.strptime(value, TIME_FORMAT)
    except ValueError:
        raise ValueError("Time must be in HH:MM format")
    # strptime accepts "9:00"; string comparison needs "09:00"
    if parsed.strftime(TIME_FORMAT) != value:
        raise ValueError("Time must be in HH:MM format")
    return value


DateString = Annotated[str, AfterValidator(validate_date_string)]
TimeString = Annotated[str, AfterValidator(validate_time_string)]


class SlotWindow(BaseModel):
    """Start/end pair for a single slot."""

    start_time: TimeString = Field(..., examples=["09:00"])
    end_time: TimeString = Field(..., examples=["09:30"])

    @model_validator(mode="after")
    def validate_range(self) -> "SlotWindow":
        """Validate end time is after start time."""
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class PublishSlotsRequest(BaseModel):
    """Schema for replacing a veterinarian's open slots on one date."""

    date: DateString = Field(..., examples=["2024-06-01"])
    slots: list[SlotWindow] = Field(default_factory=list, max_length=96)

    @field_validator("slots")
    @classmethod
    def validate_unique_starts(cls, v: list[SlotWindow]) -> list[SlotWindow]:
        """Reject duplicate start times within one request."""
        starts = [slot.start_time for slot in v]
        if len(starts) != len(set(starts)):
            raise ValueError("Slot start times must be unique")
        return v


class GenerateSlotsRequest(BaseModel):
    """Schema for generating the default working-day slots."""

    date: DateString = Field(..., examples=["2024-06-01"])


class TimeSlotResponse(BaseModel):
    """Schema for time slot response."""

    id: UUID
    veterinarian_id: UUID
    date: str
    start_time: str
    end_time: str
    is_booked: bool

    model_config = {"from_attributes": True}
