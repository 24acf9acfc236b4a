"""User endpoints."""

from fastapi import APIRouter

from app.dependencies import CurrentUser, DatabaseSession, OptionalCache
from app.schemas.users import UserResponse, UserUpdate, VeterinarianResponse
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(current_user: CurrentUser) -> UserResponse:
    """Get current user's profile."""
    return current_user


@router.put("/me", response_model=UserResponse)
async def update_current_user_profile(
    user_data: UserUpdate,
    current_user: CurrentUser,
    cache: OptionalCache,
    db: DatabaseSession,
) -> UserResponse:
    """Update current user's profile."""
    return await UserService(cache).update_user(db, current_user.id, user_data)


@router.get("/veterinarians", response_model=list[VeterinarianResponse])
async def list_veterinarians(
    current_user: CurrentUser,
    db: DatabaseSession,
) -> list[VeterinarianResponse]:
    """List active veterinarians."""
    return await UserService().list_veterinarians(db)
