"""User profile service: the role lookup used to authorize veterinarian actions."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictException, NotFoundException, UnauthorizedException
from app.core.redis_client import CacheManager
from app.core.security import get_password_hash
from app.models.users import users
from app.schemas.users import (
    UserCreate,
    UserResponse,
    UserRole,
    UserUpdate,
    VeterinarianResponse,
)

logger = structlog.get_logger(__name__)


class UserService:
    """Service for user profile operations."""

    # Cache TTL in seconds (30 minutes for user profiles)
    USER_CACHE_TTL = 1800

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager

    @staticmethod
    def _get_user_cache_key(user_id: UUID) -> str:
        """Generate cache key for user."""
        return f"user:{user_id}"

    def _invalidate(self, user_id: UUID) -> None:
        if self.cache:
            self.cache.delete(self._get_user_cache_key(user_id))

    async def create_user(self, db: AsyncSession, user_data: UserCreate) -> UserResponse:
        """
        Create a new user together with their profile.

        Raises:
            ConflictException: If the e-mail is already registered
        """
        query = (
            users.insert()
            .values(
                email=user_data.email.lower(),
                hashed_password=get_password_hash(user_data.password),
                role=user_data.role.value,
                first_name=user_data.first_name,
                last_name=user_data.last_name,
                phone=user_data.phone,
                specialization=user_data.specialization,
                license_number=user_data.license_number,
                address=user_data.address,
            )
            .returning(users)
        )

        try:
            result = await db.execute(query)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictException("Email is already registered")

        user = UserResponse.model_validate(dict(result.mappings().one()))
        logger.info("user_registered", user_id=str(user.id), role=user.role.value)
        return user

    async def get_user_by_id(self, db: AsyncSession, user_id: UUID) -> UserResponse | None:
        """Get user profile by ID with caching."""
        if self.cache:
            cached_user = self.cache.get_json(self._get_user_cache_key(user_id))
            if cached_user:
                return UserResponse.model_validate(cached_user)

        query = select(users).where(users.c.id == user_id)
        result = await db.execute(query)
        row = result.mappings().first()

        if not row:
            return None

        user = UserResponse.model_validate(dict(row))

        if self.cache:
            self.cache.set_json(
                self._get_user_cache_key(user_id),
                user.model_dump(mode="json"),
                ttl=self.USER_CACHE_TTL,
            )

        return user

    async def get_user_by_email(self, db: AsyncSession, email: str) -> dict | None:
        """Get the raw user row (including the password hash) by e-mail."""
        query = select(users).where(users.c.email == email.lower())
        result = await db.execute(query)
        user = result.mappings().first()
        return dict(user) if user else None

    async def update_user(
        self, db: AsyncSession, user_id: UUID, user_data: UserUpdate
    ) -> UserResponse:
        """Update profile fields; the role is fixed at registration."""
        update_data = user_data.model_dump(exclude_unset=True)
        if not update_data:
            user = await self.get_user_by_id(db, user_id)
            if user is None:
                raise NotFoundException("User not found")
            return user

        update_data["updated_at"] = datetime.now(UTC)

        query = update(users).where(users.c.id == user_id).values(**update_data).returning(users)
        result = await db.execute(query)
        await db.commit()
        row = result.mappings().first()

        if not row:
            raise NotFoundException("User not found")

        self._invalidate(user_id)
        return UserResponse.model_validate(dict(row))

    async def update_last_login(self, db: AsyncSession, user_id: UUID) -> None:
        """Update user's last login timestamp."""
        query = update(users).where(users.c.id == user_id).values(last_login_at=datetime.now(UTC))
        await db.execute(query)
        await db.commit()
        self._invalidate(user_id)

    async def list_veterinarians(self, db: AsyncSession) -> list[VeterinarianResponse]:
        """List active veterinarians ordered by name."""
        query = (
            select(users)
            .where(
                users.c.role == UserRole.VETERINARIAN.value,
                users.c.is_active.is_(True),
            )
            .order_by(users.c.last_name, users.c.first_name)
        )
        result = await db.execute(query)
        return [VeterinarianResponse.model_validate(dict(row)) for row in result.mappings()]

    async def require_veterinarian(self, db: AsyncSession, user_id: UUID) -> UserResponse:
        """
        Return the caller's profile if they are a veterinarian.

        Raises:
            UnauthorizedException: If the caller has no veterinarian profile
        """
        user = await self.get_user_by_id(db, user_id)
        if user is None or user.role != UserRole.VETERINARIAN:
            raise UnauthorizedException("Only veterinarians can perform this action")
        return user
