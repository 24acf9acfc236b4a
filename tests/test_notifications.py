"""Tests for in-app notifications."""

import pytest
from httpx import AsyncClient

from app.core.exceptions import NotFoundException, UnauthorizedException
from app.schemas.notifications import NotificationEvent, NotificationType
from app.services.notification_service import NotificationService


def _event(recipient_id, title="Appointment Confirmed") -> NotificationEvent:
    return NotificationEvent(
        recipient_id=recipient_id,
        title=title,
        message="Your appointment for 2024-06-01 at 09:00 has been confirmed",
        notification_type=NotificationType.APPOINTMENT_CONFIRMED,
    )


@pytest.mark.asyncio
async def test_dispatch_and_read_flow(db_session, owner) -> None:
    """Stored notices start unread and can be marked read one by one or all at once."""
    service = NotificationService(db_session)

    created = await service.dispatch([_event(owner["id"], "First"), _event(owner["id"], "Second")])
    assert [n.title for n in created] == ["First", "Second"]
    assert all(not n.is_read for n in created)
    assert await service.unread_count(owner["id"]) == 2

    read = await service.mark_read(created[0].id, owner["id"])
    assert read.is_read is True
    assert read.read_at is not None
    assert await service.unread_count(owner["id"]) == 1

    again = await service.mark_read(created[0].id, owner["id"])
    assert again.read_at == read.read_at

    assert await service.mark_all_read(owner["id"]) == 1
    assert await service.unread_count(owner["id"]) == 0
    assert await service.mark_all_read(owner["id"]) == 0


@pytest.mark.asyncio
async def test_mark_read_guards(db_session, owner, other_owner) -> None:
    """Only the recipient can mark a notice read."""
    service = NotificationService(db_session)
    notification = await service.notify(_event(owner["id"]))

    with pytest.raises(UnauthorizedException):
        await service.mark_read(notification.id, other_owner["id"])

    with pytest.raises(NotFoundException):
        await service.mark_read(owner["id"], owner["id"])


@pytest.mark.asyncio
async def test_list_is_scoped_and_paginated(db_session, owner, other_owner) -> None:
    """Users see only their own notices."""
    service = NotificationService(db_session)
    await service.dispatch([_event(owner["id"], f"Notice {i}") for i in range(3)])
    await service.notify(_event(other_owner["id"]))

    page = await service.list_notifications(owner["id"], page=1, page_size=2)
    assert page.total == 3
    assert len(page.items) == 2
    assert all(n.user_id == owner["id"] for n in page.items)

    await service.mark_read(page.items[0].id, owner["id"])
    unread = await service.list_notifications(owner["id"], unread_only=True)
    assert unread.total == 2


@pytest.mark.asyncio
async def test_dispatch_nothing(db_session) -> None:
    """An empty batch stores nothing."""
    assert await NotificationService(db_session).dispatch([]) == []


@pytest.mark.asyncio
async def test_notification_endpoints(
    client: AsyncClient, db_session, owner, other_owner, headers_for
) -> None:
    """List, count and mark notifications over HTTP."""
    service = NotificationService(db_session)
    notification = await service.notify(_event(owner["id"]))
    await service.notify(_event(owner["id"], "Another"))

    response = await client.get("/api/v1/notifications/", headers=headers_for(owner))
    assert response.status_code == 200
    assert response.json()["total"] == 2

    response = await client.get("/api/v1/notifications/unread-count", headers=headers_for(owner))
    assert response.json() == {"unread_count": 2}

    response = await client.patch(
        f"/api/v1/notifications/{notification.id}/read",
        headers=headers_for(other_owner),
    )
    assert response.status_code == 403
    assert response.json()["code"] == "Unauthorized"

    response = await client.patch(
        f"/api/v1/notifications/{notification.id}/read",
        headers=headers_for(owner),
    )
    assert response.status_code == 200
    assert response.json()["is_read"] is True

    response = await client.patch("/api/v1/notifications/read-all", headers=headers_for(owner))
    assert response.json() == {"updated": 1}
