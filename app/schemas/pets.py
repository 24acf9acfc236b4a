"""Pet schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class PetBase(BaseModel):
    """Base pet schema with common fields."""

    name: str = Field(..., min_length=1, max_length=100)
    species: str = Field(..., min_length=1, max_length=50, examples=["dog"])
    breed: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., ge=0, le=100)
    weight: float | None = Field(None, gt=0)
    medical_history: str | None = Field(None, max_length=5000)


class PetCreate(PetBase):
    """Schema for registering a pet."""


class PetUpdate(BaseModel):
    """Schema for updating a pet."""

    name: str | None = Field(None, min_length=1, max_length=100)
    species: str | None = Field(None, min_length=1, max_length=50)
    breed: str | None = Field(None, min_length=1, max_length=100)
    age: int | None = Field(None, ge=0, le=100)
    weight: float | None = Field(None, gt=0)
    medical_history: str | None = Field(None, max_length=5000)


class PetResponse(PetBase):
    """Schema for pet response."""

    id: UUID
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
