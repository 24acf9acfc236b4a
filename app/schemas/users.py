"""User schemas for request/response validation."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """User role enumeration."""

    PET_OWNER = "pet_owner"
    VETERINARIAN = "veterinarian"


class UserBase(BaseModel):
    """Base user schema with common profile fields."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=20)
    specialization: str | None = Field(None, max_length=200)
    license_number: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=500)


class UserCreate(UserBase):
    """Schema for creating a new user with profile."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    role: UserRole


class UserUpdate(BaseModel):
    """Schema for updating user profile."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=20)
    specialization: str | None = Field(None, max_length=200)
    license_number: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=500)


class UserResponse(UserBase):
    """User schema for API responses."""

    id: UUID
    email: EmailStr
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime
    last_login_at: datetime | None = None

    model_config = {"from_attributes": True}


class VeterinarianResponse(BaseModel):
    """Public veterinarian profile schema."""

    id: UUID
    email: EmailStr
    first_name: str
    last_name: str
    specialization: str | None = None
    phone: str | None = None

    model_config = {"from_attributes": True}
