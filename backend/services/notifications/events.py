"""Notification event persistence operations."""

from __future__ import annotations

import logging
from typing import Any, cast

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from models import (
    FOLLOW_NOTIFICATION_TYPES,
    POST_NOTIFICATION_TYPES,
    Notification,
    NotificationType,
)

from .common import eq

logger = logging.getLogger(__name__)


async def add_notification(
    session: AsyncSession,
    *,
    recipient_id: str,
    sender_id: str,
    type: NotificationType,
    post_id: str | None = None,
) -> Notification:
    notification = Notification(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=type,
        post_id=post_id,
        seen=False,
    )
    session.add(notification)
    await session.flush()
    return notification


async def delete_notifications(
    session: AsyncSession,
    *,
    recipient_id: str,
    sender_id: str,
    type: NotificationType,
) -> int:
    delete_result = await session.execute(
        delete(Notification).where(
            eq(Notification.recipient_id, recipient_id),
            eq(Notification.sender_id, sender_id),
            eq(Notification.type, type),
        )
    )
    return int(cast(Any, delete_result).rowcount or 0)


async def count_notifications(
    session: AsyncSession,
    *,
    recipient_id: str,
    sender_id: str | None = None,
    type: NotificationType | None = None,
) -> int:
    stmt = select(func.count()).select_from(Notification).where(
        eq(Notification.recipient_id, recipient_id)
    )
    if sender_id is not None:
        stmt = stmt.where(eq(Notification.sender_id, sender_id))
    if type is not None:
        stmt = stmt.where(eq(Notification.type, type))
    result = await session.execute(stmt)
    return int(result.scalar_one())


async def count_unseen_notifications(
    session: AsyncSession,
    *,
    recipient_id: str,
) -> int:
    result = await session.execute(
        select(func.count())
        .select_from(Notification)
        .where(
            eq(Notification.recipient_id, recipient_id),
            cast(ColumnElement[bool], Notification.seen).is_(False),
        )
    )
    return int(result.scalar_one())


async def mark_notification_seen(
    session: AsyncSession,
    *,
    recipient_id: str,
    notification_id: str,
) -> bool:
    """Flag a single event as seen. Returns False when the recipient has no such event."""
    update_result = await session.execute(
        update(Notification)
        .where(
            eq(Notification.id, notification_id),
            eq(Notification.recipient_id, recipient_id),
        )
        .values(seen=True)
    )
    await session.commit()
    return int(cast(Any, update_result).rowcount or 0) > 0


async def mark_all_notifications_seen(
    session: AsyncSession,
    *,
    recipient_id: str,
) -> int:
    update_result = await session.execute(
        update(Notification)
        .where(
            eq(Notification.recipient_id, recipient_id),
            cast(ColumnElement[bool], Notification.seen).is_(False),
        )
        .values(seen=True)
    )
    await session.commit()
    return int(cast(Any, update_result).rowcount or 0)


async def trigger_notification(
    session: AsyncSession,
    *,
    recipient_id: str,
    sender_id: str,
    type: NotificationType,
    post_id: str | None = None,
) -> bool:
    """Record a post-related event (like, comment, mention) raised by another feature.

    Failures are logged and reported as ``False`` so the calling feature can
    carry on without the notification.
    """
    if type in FOLLOW_NOTIFICATION_TYPES:
        raise ValueError(f"{type.value} notifications are emitted by the follow workflow")
    if type in POST_NOTIFICATION_TYPES and post_id is None:
        raise ValueError(f"{type.value} notifications require a post_id")
    if recipient_id == sender_id:
        return False

    try:
        await add_notification(
            session,
            recipient_id=recipient_id,
            sender_id=sender_id,
            type=type,
            post_id=post_id,
        )
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.warning(
            "Failed to record notification",
            extra={
                "recipient_id": recipient_id,
                "sender_id": sender_id,
                "notification_type": type.value,
            },
            exc_info=exc,
        )
        return False
    return True
