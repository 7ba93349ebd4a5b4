"""Read-side assembly of a recipient's notification feed."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import quote

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Notification, NotificationType, POST_NOTIFICATION_TYPES, User

from .common import desc, eq, in_
from .events import count_unseen_notifications
from .schemas import NotificationFeedItem, NotificationFeedResponse, NotificationSender

NOTIFICATION_MESSAGES: dict[NotificationType, str] = {
    NotificationType.FOLLOW_REQUEST: "sent you a follow request",
    NotificationType.FRIEND_ACCEPTED: "accepted your follow request",
    NotificationType.FOLLOW_BACK: "is now following you, follow them back?",
    NotificationType.FOLLOWED_YOU_BACK: "followed you back",
    NotificationType.LIKE: "liked your post",
    NotificationType.COMMENT: "commented on your post",
    NotificationType.MENTION: "mentioned you in a post",
}


def render_notification_message(notification_type: NotificationType) -> str:
    return NOTIFICATION_MESSAGES.get(notification_type, "sent you a notification")


def _build_href(notification: Notification, sender: User) -> str:
    if notification.type in POST_NOTIFICATION_TYPES and notification.post_id:
        return f"/posts/{quote(notification.post_id)}"
    return f"/users/{quote(sender.username)}"


def _build_feed_item(notification: Notification, sender: User) -> NotificationFeedItem:
    return NotificationFeedItem(
        id=notification.id,
        type=notification.type,
        sender=NotificationSender(
            id=sender.id,
            username=sender.username,
            name=sender.name or sender.username,
            avatar_key=sender.avatar_key,
        ),
        message=render_notification_message(notification.type),
        href=_build_href(notification, sender),
        post_id=notification.post_id,
        seen=notification.seen,
        created_at=notification.created_at,
    )


async def load_notification_feed(
    session: AsyncSession,
    recipient_id: str,
    *,
    types: Iterable[NotificationType] | None = None,
    limit: int,
    offset: int = 0,
) -> NotificationFeedResponse:
    """Return the recipient's events, newest first, with sender display attributes.

    Events whose sender no longer exists in the user directory are dropped by
    the join.
    """
    stmt = (
        select(Notification, User)
        .join(User, eq(User.id, Notification.sender_id))
        .where(eq(Notification.recipient_id, recipient_id))
    )
    if types is not None:
        type_filter = list(dict.fromkeys(types))
        if not type_filter:
            return NotificationFeedResponse(
                notifications=[],
                unseen_count=await count_unseen_notifications(
                    session, recipient_id=recipient_id
                ),
            )
        stmt = stmt.where(in_(Notification.type, type_filter))

    result = await session.execute(
        stmt.order_by(
            desc(Notification.created_at),
            desc(Notification.id),
        )
        .offset(offset)
        .limit(limit)
    )
    items = [_build_feed_item(notification, sender) for notification, sender in result.all()]
    unseen_count = await count_unseen_notifications(session, recipient_id=recipient_id)
    return NotificationFeedResponse(notifications=items, unseen_count=unseen_count)
