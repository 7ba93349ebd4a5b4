"""Notification API payload schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from models import NotificationType


class NotificationSender(BaseModel):
    id: str
    username: str
    name: str
    avatar_key: str | None = None


class NotificationFeedItem(BaseModel):
    id: str
    type: NotificationType
    sender: NotificationSender
    message: str
    href: str
    post_id: str | None = None
    seen: bool
    created_at: datetime | None


class NotificationFeedResponse(BaseModel):
    notifications: list[NotificationFeedItem]
    unseen_count: int


class MarkSeenResponse(BaseModel):
    updated_count: int
