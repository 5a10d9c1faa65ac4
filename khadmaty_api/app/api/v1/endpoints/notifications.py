"""Notification endpoints for API v1."""

from typing import List

from fastapi import APIRouter, Depends, Path

from khadmaty_api.app.core.security import get_current_user
from khadmaty_api.app.schemas.notification import NotificationRead, UnreadCount
from khadmaty_api.app.services.notification_service import NotificationService


router = APIRouter()


@router.get("/", response_model=List[NotificationRead])
async def list_notifications(
    unread_only: bool = False,
    current_user: dict = Depends(get_current_user),
) -> List[NotificationRead]:
    return await NotificationService.list_notifications(current_user["user_id"], unread_only)


@router.get("/unread-count", response_model=UnreadCount)
async def unread_count(current_user: dict = Depends(get_current_user)) -> UnreadCount:
    return UnreadCount(count=await NotificationService.unread_count(current_user["user_id"]))


@router.post("/read-all", response_model=UnreadCount)
async def mark_all_read(current_user: dict = Depends(get_current_user)) -> UnreadCount:
    """Mark every notification as read; returns the remaining unread count (zero)."""
    await NotificationService.mark_all_read(current_user["user_id"])
    return UnreadCount(count=0)


@router.post("/{notification_id}/read", response_model=NotificationRead)
async def mark_read(
    notification_id: int = Path(..., description="ID of the notification"),
    current_user: dict = Depends(get_current_user),
) -> NotificationRead:
    return await NotificationService.mark_read(notification_id, current_user["user_id"])
