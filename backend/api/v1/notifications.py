"""Notification feed endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db
from core import settings
from models import NotificationType, User
from services.notifications import (
    MarkSeenResponse,
    NotificationFeedResponse,
    load_notification_feed,
    mark_all_notifications_seen,
    mark_notification_seen,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationFeedResponse)
async def read_notification_feed(
    notification_type: Annotated[list[NotificationType] | None, Query(alias="type")] = None,
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationFeedResponse:
    resolved_limit = limit or settings.notification_feed_default_limit
    if resolved_limit > settings.notification_feed_max_limit:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"limit must be at most {settings.notification_feed_max_limit}",
        )
    return await load_notification_feed(
        session,
        current_user.id,
        types=notification_type or None,
        limit=resolved_limit,
        offset=offset,
    )


@router.post("/seen", response_model=MarkSeenResponse)
async def mark_feed_seen(
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MarkSeenResponse:
    updated_count = await mark_all_notifications_seen(
        session,
        recipient_id=current_user.id,
    )
    return MarkSeenResponse(updated_count=updated_count)


@router.post("/{notification_id}/seen", response_model=MarkSeenResponse)
async def mark_single_notification_seen(
    notification_id: str,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MarkSeenResponse:
    updated = await mark_notification_seen(
        session,
        recipient_id=current_user.id,
        notification_id=notification_id,
    )
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )
    return MarkSeenResponse(updated_count=1)
