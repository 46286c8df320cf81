"""Notification API endpoints: 3 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.database import get_session
from sfdsa.notifications.schemas import NotificationListResponse, NotificationResponse
from sfdsa.notifications.service import (
    get_notifications,
    get_unread_count,
    mark_all_as_read,
    mark_as_read,
)

router = APIRouter(prefix="/api", tags=["Notifications"])


@router.get("/notifications", response_model=NotificationListResponse)
async def list_notifications(
    user_id: str = Query(..., alias="userId", min_length=1),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100, alias="perPage"),
    unread_only: bool = Query(False, alias="unreadOnly"),
    db: AsyncSession = Depends(get_session),
):
    """List a user's notifications (paginated)."""
    notifications, total = await get_notifications(db, user_id, page, per_page, unread_only)
    unread = await get_unread_count(db, user_id)
    return NotificationListResponse(
        notifications=[
            NotificationResponse(
                id=str(n.id),
                type=n.type,
                title=n.title,
                message=n.message,
                timestamp=n.created_at,
                read=n.read,
                action_url=n.action_url,
                metadata=n.notification_metadata or {},
            )
            for n in notifications
        ],
        total=total,
        unread_count=unread,
        page=page,
        per_page=per_page,
    )


@router.post("/notifications/read-all")
async def mark_all_read(
    user_id: str = Query(..., alias="userId", min_length=1),
    db: AsyncSession = Depends(get_session),
):
    """Mark all of a user's notifications as read."""
    count = await mark_all_as_read(db, user_id)
    await db.commit()
    return {"success": True, "message": f"Marked {count} notifications as read"}


@router.post("/notifications/{notification_id}/read")
async def mark_notification_read(
    notification_id: int,
    user_id: str = Query(..., alias="userId", min_length=1),
    db: AsyncSession = Depends(get_session),
):
    """Mark a notification as read."""
    found = await mark_as_read(db, user_id, notification_id)
    if not found:
        raise HTTPException(status_code=404, detail="Notification not found")
    await db.commit()
    return {"success": True, "message": "Notification marked as read"}
