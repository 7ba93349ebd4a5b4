"""Notification domain services."""

from .events import (
    add_notification,
    count_notifications,
    count_unseen_notifications,
    delete_notifications,
    mark_all_notifications_seen,
    mark_notification_seen,
    trigger_notification,
)
from .feed import NOTIFICATION_MESSAGES, load_notification_feed, render_notification_message
from .schemas import (
    MarkSeenResponse,
    NotificationFeedItem,
    NotificationFeedResponse,
    NotificationSender,
)

__all__ = [
    "MarkSeenResponse",
    "NotificationFeedItem",
    "NotificationFeedResponse",
    "NotificationSender",
    "NOTIFICATION_MESSAGES",
    "add_notification",
    "count_notifications",
    "count_unseen_notifications",
    "delete_notifications",
    "load_notification_feed",
    "mark_all_notifications_seen",
    "mark_notification_seen",
    "render_notification_message",
    "trigger_notification",
]
