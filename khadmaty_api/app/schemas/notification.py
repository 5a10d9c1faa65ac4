"""Pydantic models for in-app notifications."""

from typing import Optional

from pydantic import BaseModel


class NotificationRead(BaseModel):
    id: int
    booking_id: Optional[int] = None
    kind: str
    title: str
    body: str
    is_read: bool
    created_at: str


class UnreadCount(BaseModel):
    count: int
