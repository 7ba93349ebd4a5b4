"""SQLModel models package."""

from .follow_request import FollowRequest, FollowRequestStatus
from .friendship import Friendship
from .notification import (
    FOLLOW_NOTIFICATION_TYPES,
    POST_NOTIFICATION_TYPES,
    Notification,
    NotificationType,
)
from .user import User

__all__ = [
    "User",
    "FollowRequest",
    "FollowRequestStatus",
    "Friendship",
    "Notification",
    "NotificationType",
    "FOLLOW_NOTIFICATION_TYPES",
    "POST_NOTIFICATION_TYPES",
]
