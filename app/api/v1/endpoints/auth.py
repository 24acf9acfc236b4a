"""Authentication endpoints."""

from fastapi import APIRouter, status

from app.dependencies import DatabaseSession, OptionalCache
from app.schemas.auth import LoginRequest, LoginResponse, Token, TokenRefresh
from app.schemas.users import UserCreate
from app.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Authentication"],
    summary="Register a pet owner or veterinarian",
)
async def register(
    user_data: UserCreate,
    db: DatabaseSession,
    cache: OptionalCache,
) -> LoginResponse:
    """
    Create an account with its profile and return JWT tokens.

    Args:
        user_data: Credentials, role and profile fields
        db: Database session
        cache: Profile cache, if configured

    Returns:
        Access token, refresh token and the created profile
    """
    return await AuthService(cache).register(db, user_data)


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    tags=["Authentication"],
    summary="E-mail and password login",
)
async def login(
    credentials: LoginRequest,
    db: DatabaseSession,
    cache: OptionalCache,
) -> LoginResponse:
    """Verify credentials and return JWT tokens."""
    return await AuthService(cache).login(db, credentials.email, credentials.password)


@router.post(
    "/refresh",
    response_model=Token,
    status_code=status.HTTP_200_OK,
    tags=["Authentication"],
    summary="Refresh access token",
)
async def refresh_token(request: TokenRefresh) -> Token:
    """
    Exchange a refresh token for a new token pair.

    Args:
        request: Refresh token

    Returns:
        New access and refresh tokens
    """
    return AuthService().refresh_access_token(request.refresh_token)
