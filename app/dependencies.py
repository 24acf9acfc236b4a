"""FastAPI dependencies."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotAuthenticatedException, UnauthorizedException
from app.core.redis_client import CacheManager, get_cache_manager
from app.core.security import decode_access_token
from app.database import get_db
from app.schemas.users import UserResponse, UserRole
from app.services.user_service import UserService

# Missing credentials are reported as NotAuthenticated (401), not FastAPI's 403
security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> UUID:
    """
    Extract and validate user ID from JWT token.

    Args:
        credentials: Bearer token credentials

    Returns:
        User ID from token

    Raises:
        NotAuthenticatedException: If the token is missing, invalid or expired
    """
    if credentials is None:
        raise NotAuthenticatedException()

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise NotAuthenticatedException("Could not validate credentials")

    user_id_str = payload.get("sub")
    if user_id_str is None or not isinstance(user_id_str, str):
        raise NotAuthenticatedException("Could not validate credentials")

    try:
        return UUID(user_id_str)
    except ValueError:
        raise NotAuthenticatedException("Invalid user ID format")


async def get_current_user(
    user_id: Annotated[UUID, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[CacheManager | None, Depends(get_cache_manager)],
) -> UserResponse:
    """
    Get current user from database.

    Raises:
        NotAuthenticatedException: If the user no longer exists
        UnauthorizedException: If the account is deactivated
    """
    user = await UserService(cache).get_user_by_id(db, user_id)

    if not user:
        raise NotAuthenticatedException("User not found")

    if not user.is_active:
        raise UnauthorizedException("User account is deactivated")

    return user


async def get_current_veterinarian(
    user: Annotated[UserResponse, Depends(get_current_user)],
) -> UserResponse:
    """Require the caller to hold the veterinarian role."""
    if user.role != UserRole.VETERINARIAN:
        raise UnauthorizedException("Only veterinarians can perform this action")
    return user


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[UserResponse, Depends(get_current_user)]
CurrentVeterinarian = Annotated[UserResponse, Depends(get_current_veterinarian)]
OptionalCache = Annotated[CacheManager | None, Depends(get_cache_manager)]
