"""Retention pruning for seen notification events."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, cast

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from models import Notification, NotificationType

from .common import desc, eq

PRUNE_BATCH_SIZE = 500
logger = logging.getLogger(__name__)


async def _delete_seen_notifications_batch(
    session: AsyncSession,
    *,
    older_than: datetime,
    batch_size: int,
) -> int:
    notification_id_column = cast(ColumnElement[str], Notification.id)
    created_at_column = cast(ColumnElement[datetime], Notification.created_at)
    stale_ids_subquery = (
        select(notification_id_column)
        .where(
            cast(ColumnElement[bool], Notification.seen).is_(True),
            created_at_column < older_than,
            # A live follow_request event mirrors a pending request; keep it.
            ~eq(Notification.type, NotificationType.FOLLOW_REQUEST),
        )
        .order_by(desc(created_at_column))
        .limit(batch_size)
        .subquery("stale_seen_notifications")
    )
    delete_result = await session.execute(
        delete(Notification).where(
            notification_id_column.in_(select(stale_ids_subquery.c.id))
        )
    )
    deleted_rows = int(cast(Any, delete_result).rowcount or 0)
    if deleted_rows > 0:
        await session.commit()
    return deleted_rows


async def prune_seen_notifications(
    session: AsyncSession,
    *,
    older_than: datetime,
    batch_size: int = PRUNE_BATCH_SIZE,
    max_deleted: int | None = None,
) -> int:
    """Delete seen events created before ``older_than``, in batches."""
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")
    if max_deleted is not None and max_deleted < 0:
        raise ValueError("max_deleted must be non-negative")
    if max_deleted == 0:
        return 0

    total_deleted = 0
    while True:
        effective_batch_size = batch_size
        if max_deleted is not None:
            remaining_delete_budget = max_deleted - total_deleted
            if remaining_delete_budget <= 0:
                break
            effective_batch_size = min(effective_batch_size, remaining_delete_budget)

        deleted_rows = await _delete_seen_notifications_batch(
            session,
            older_than=older_than,
            batch_size=effective_batch_size,
        )
        if deleted_rows <= 0:
            break
        total_deleted += deleted_rows

    if total_deleted:
        logger.info(
            "Pruned seen notifications",
            extra={"pruned_rows": total_deleted, "older_than": older_than.isoformat()},
        )
    return total_deleted
