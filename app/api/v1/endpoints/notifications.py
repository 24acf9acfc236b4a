"""In-app notification endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.notifications import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "/",
    response_model=NotificationListResponse,
    status_code=status.HTTP_200_OK,
    summary="List my notifications",
)
async def list_notifications(
    current_user: CurrentUser,
    db: DatabaseSession,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    unread_only: bool = Query(False, description="Only unread notifications"),
) -> NotificationListResponse:
    """
    Get the authenticated user's notifications, newest first.

    Args:
        current_user: Authenticated user
        db: Database session
        page: Page number
        page_size: Items per page
        unread_only: Skip notifications already read

    Returns:
        Paginated notifications
    """
    return await NotificationService(db).list_notifications(
        current_user.id,
        page=page,
        page_size=page_size,
        unread_only=unread_only,
    )


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    status_code=status.HTTP_200_OK,
    summary="Count unread notifications",
)
async def unread_count(current_user: CurrentUser, db: DatabaseSession) -> UnreadCountResponse:
    """Get the number of unread notifications."""
    count = await NotificationService(db).unread_count(current_user.id)
    return UnreadCountResponse(unread_count=count)


@router.patch(
    "/read-all",
    response_model=MarkAllReadResponse,
    status_code=status.HTTP_200_OK,
    summary="Mark all notifications as read",
)
async def mark_all_read(current_user: CurrentUser, db: DatabaseSession) -> MarkAllReadResponse:
    """Mark every unread notification of the caller as read."""
    updated = await NotificationService(db).mark_all_read(current_user.id)
    return MarkAllReadResponse(updated=updated)


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    status_code=status.HTTP_200_OK,
    summary="Mark notification as read",
)
async def mark_notification_read(
    notification_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> NotificationResponse:
    """
    Mark a notification as read.

    Raises:
        NotFoundException: If the notification does not exist
        UnauthorizedException: If it belongs to another user
    """
    return await NotificationService(db).mark_read(notification_id, current_user.id)
