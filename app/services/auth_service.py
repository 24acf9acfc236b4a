"""Authentication service: password login and JWT issuance."""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotAuthenticatedException
from app.core.redis_client import CacheManager
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    verify_password,
)
from app.schemas.auth import LoginResponse, Token
from app.schemas.users import UserCreate
from app.services.user_service import UserService

logger = structlog.get_logger(__name__)


class AuthService:
    """Authentication service for registration, login and token refresh."""

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize auth service with optional cache manager."""
        self.users = UserService(cache_manager)

    async def register(self, db: AsyncSession, user_data: UserCreate) -> LoginResponse:
        """
        Register a new user and log them in.

        Args:
            db: Database session
            user_data: Credentials and profile

        Returns:
            Token pair and the created profile
        """
        user = await self.users.create_user(db, user_data)
        tokens = self.create_tokens(str(user.id))
        return LoginResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user=user,
        )

    async def login(self, db: AsyncSession, email: str, password: str) -> LoginResponse:
        """
        Verify credentials and issue tokens.

        Raises:
            NotAuthenticatedException: If the credentials do not match an active user
        """
        row = await self.users.get_user_by_email(db, email)
        if row is None or not verify_password(password, row["hashed_password"]):
            logger.info("login_failed", email=email)
            raise NotAuthenticatedException("Invalid email or password")

        if not row["is_active"]:
            raise NotAuthenticatedException("User account is deactivated")

        await self.users.update_last_login(db, row["id"])
        user = await self.users.get_user_by_id(db, row["id"])
        if user is None:
            raise NotAuthenticatedException("Invalid email or password")

        tokens = self.create_tokens(str(user.id))
        return LoginResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user=user,
        )

    def create_tokens(self, user_id: str) -> Token:
        """
        Create access and refresh tokens for a user.

        Args:
            user_id: User identifier (internal UUID)

        Returns:
            Token pair (access and refresh)
        """
        return Token(
            access_token=create_access_token(data={"sub": user_id}),
            refresh_token=create_refresh_token(data={"sub": user_id}),
        )

    def refresh_access_token(self, refresh_token: str) -> Token:
        """
        Create a new token pair from a refresh token.

        Raises:
            NotAuthenticatedException: If refresh token is invalid
        """
        payload = decode_refresh_token(refresh_token)
        if payload is None:
            raise NotAuthenticatedException("Invalid refresh token")

        user_id = payload.get("sub")
        try:
            UUID(str(user_id))
        except ValueError:
            raise NotAuthenticatedException("Invalid refresh token")

        return self.create_tokens(str(user_id))
