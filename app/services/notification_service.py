"""Notification sink: in-app notices about appointment activity."""

from collections.abc import Iterable
from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import desc, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException, UnauthorizedException
from app.models.notifications import notifications
from app.schemas.notifications import (
    NotificationEvent,
    NotificationListResponse,
    NotificationResponse,
)

logger = structlog.get_logger(__name__)


class NotificationService:
    """Service for storing and reading in-app notifications."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def notify(self, event: NotificationEvent) -> NotificationResponse:
        """Store a single notice for its recipient."""
        created = await self.dispatch([event])
        return created[0]

    async def dispatch(self, events: Iterable[NotificationEvent]) -> list[NotificationResponse]:
        """
        Store a batch of notices in one transaction.

        Args:
            events: Notices produced by committed transitions

        Returns:
            The stored notifications, in input order
        """
        created = []
        for event in events:
            stmt = (
                insert(notifications)
                .values(
                    user_id=event.recipient_id,
                    title=event.title,
                    message=event.message,
                    notification_type=event.notification_type.value,
                    appointment_id=event.appointment_id,
                    is_read=False,
                )
                .returning(notifications)
            )
            result = await self.db.execute(stmt)
            created.append(NotificationResponse.model_validate(dict(result.mappings().one())))

        if not created:
            return created

        await self.db.commit()
        for notification in created:
            logger.info(
                "notification_stored",
                notification_id=str(notification.id),
                user_id=str(notification.user_id),
                notification_type=notification.notification_type.value,
            )
        return created

    async def list_notifications(
        self,
        user_id: UUID,
        page: int = 1,
        page_size: int = 50,
        unread_only: bool = False,
    ) -> NotificationListResponse:
        """List a user's notifications, newest first."""
        conditions = [notifications.c.user_id == user_id]
        if unread_only:
            conditions.append(notifications.c.is_read.is_(False))

        count_query = select(func.count()).select_from(notifications).where(*conditions)
        total = (await self.db.execute(count_query)).scalar() or 0

        query = (
            select(notifications)
            .where(*conditions)
            .order_by(desc(notifications.c.created_at), desc(notifications.c.id))
            .limit(page_size)
            .offset((page - 1) * page_size)
        )
        result = await self.db.execute(query)

        return NotificationListResponse(
            total=total,
            page=page,
            page_size=page_size,
            items=[NotificationResponse.model_validate(dict(row)) for row in result.mappings()],
        )

    async def unread_count(self, user_id: UUID) -> int:
        """Count a user's unread notifications."""
        query = (
            select(func.count())
            .select_from(notifications)
            .where(notifications.c.user_id == user_id, notifications.c.is_read.is_(False))
        )
        return (await self.db.execute(query)).scalar() or 0

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> NotificationResponse:
        """
        Mark one notification as read.

        Raises:
            NotFoundException: If the notification does not exist
            UnauthorizedException: If it belongs to someone else
        """
        result = await self.db.execute(
            select(notifications).where(notifications.c.id == notification_id)
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Notification not found")
        if row["user_id"] != user_id:
            raise UnauthorizedException("Access denied to this notification")
        if row["is_read"]:
            return NotificationResponse.model_validate(dict(row))

        result = await self.db.execute(
            update(notifications)
            .where(notifications.c.id == notification_id)
            .values(is_read=True, read_at=datetime.now(UTC))
            .returning(notifications)
        )
        await self.db.commit()
        return NotificationResponse.model_validate(dict(result.mappings().one()))

    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark every unread notification of a user as read; returns how many changed."""
        result = await self.db.execute(
            update(notifications)
            .where(notifications.c.user_id == user_id, notifications.c.is_read.is_(False))
            .values(is_read=True, read_at=datetime.now(UTC))
            .returning(notifications.c.id)
        )
        updated = len(result.all())
        await self.db.commit()
        return updated
