"""Follow request workflow.

Each public operation runs as one unit of work on the caller's session:
every store write is flushed into the same transaction and committed once at
the end, so a failure in any step leaves the three collections (requests,
edges, notifications) untouched. Domain and store failures are reported as
``FollowActionResult(success=False, ...)`` and never raised to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError, NotFoundError, SocialGraphError, StoreError, ValidationError
from db.errors import is_unique_violation
from models import NotificationType
from services.notifications.events import add_notification, delete_notifications
from services.users import require_user

from .edges import add_edge, delete_edges, has_edge_between, is_following
from .requests import (
    add_pending_request,
    delete_requests,
    find_pending_request,
    has_pending_request_between,
    resolve_request,
)
from .schemas import FollowActionResult, RemovalScope

logger = logging.getLogger(__name__)

ALREADY_FOLLOWING = "Already following"
REQUEST_ALREADY_PENDING = "Follow request already pending"
REMOVAL_SCOPES: frozenset[str] = frozenset({"requested", "following"})


def _require_ids(**ids: str | None) -> None:
    for label, value in ids.items():
        if value is None or not str(value).strip():
            raise ValidationError(f"{label} is required")


def _require_distinct(user_id: str, other_user_id: str, *, detail: str) -> None:
    if user_id == other_user_id:
        raise ValidationError(detail)


async def _run_operation(
    session: AsyncSession,
    operation: str,
    steps: Callable[[], Awaitable[FollowActionResult]],
    **log_context: Any,
) -> FollowActionResult:
    extra = {"operation": operation, **log_context}
    try:
        result = await steps()
    except SocialGraphError as exc:
        await session.rollback()
        logger.info("Follow operation refused", extra={**extra, "reason": exc.message})
        return FollowActionResult(success=False, message=exc.message)
    except SQLAlchemyError as exc:
        await session.rollback()
        store_error = StoreError()
        logger.warning("Follow operation failed in store", extra=extra, exc_info=exc)
        return FollowActionResult(success=False, message=store_error.message)

    logger.info("Follow operation completed", extra={**extra, "detail": result.message})
    return result


async def send_follow_request(
    session: AsyncSession,
    *,
    requester_id: str,
    target_id: str,
) -> FollowActionResult:
    """Create a pending request from ``requester_id`` to ``target_id``.

    Refused when an edge or a pending request already exists between the two
    users in either direction. The pending-pair unique index closes the race
    between two identical concurrent calls.
    """

    async def steps() -> FollowActionResult:
        _require_ids(requester_id=requester_id, target_id=target_id)
        _require_distinct(requester_id, target_id, detail="You cannot follow yourself")
        await require_user(session, requester_id)
        await require_user(session, target_id)

        # Either direction counts here even though edges are directional.
        if await has_edge_between(session, user_id=requester_id, other_user_id=target_id):
            raise ConflictError(ALREADY_FOLLOWING)
        if await has_pending_request_between(
            session,
            user_id=requester_id,
            other_user_id=target_id,
        ):
            raise ConflictError(REQUEST_ALREADY_PENDING)

        try:
            await add_pending_request(
                session,
                requester_id=requester_id,
                target_id=target_id,
            )
            # No pending request exists, so any follow_request event for the pair is stale.
            await delete_notifications(
                session,
                recipient_id=target_id,
                sender_id=requester_id,
                type=NotificationType.FOLLOW_REQUEST,
            )
            await add_notification(
                session,
                recipient_id=target_id,
                sender_id=requester_id,
                type=NotificationType.FOLLOW_REQUEST,
            )
            await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            if is_unique_violation(exc):
                raise ConflictError(REQUEST_ALREADY_PENDING) from exc
            raise
        return FollowActionResult(success=True, message="Follow request sent")

    return await _run_operation(
        session,
        "send_follow_request",
        steps,
        requester_id=requester_id,
        target_id=target_id,
    )


async def _accept_pending(
    session: AsyncSession,
    *,
    target_id: str,
    requester_id: str,
) -> None:
    follow_request = await find_pending_request(
        session,
        requester_id=requester_id,
        target_id=target_id,
    )
    if follow_request is None:
        raise NotFoundError()

    await resolve_request(session, follow_request, outcome="accept")
    if not await is_following(session, user_id=requester_id, friend_id=target_id):
        await add_edge(session, user_id=requester_id, friend_id=target_id)
    target_follows_requester = await is_following(
        session,
        user_id=target_id,
        friend_id=requester_id,
    )
    await delete_notifications(
        session,
        recipient_id=target_id,
        sender_id=requester_id,
        type=NotificationType.FOLLOW_REQUEST,
    )
    await add_notification(
        session,
        recipient_id=requester_id,
        sender_id=target_id,
        type=NotificationType.FRIEND_ACCEPTED,
    )
    if not target_follows_requester:
        await delete_notifications(
            session,
            recipient_id=target_id,
            sender_id=requester_id,
            type=NotificationType.FOLLOW_BACK,
        )
        await add_notification(
            session,
            recipient_id=target_id,
            sender_id=requester_id,
            type=NotificationType.FOLLOW_BACK,
        )
    await session.commit()


async def accept_follow_request(
    session: AsyncSession,
    *,
    target_id: str,
    requester_id: str,
) -> FollowActionResult:
    """Accept ``requester_id``'s pending request; the requester now follows the target.

    Steps, in order: resolve and delete the request, add the
    requester->target edge, look up the reverse edge, drop the follow_request
    event, notify the requester (friend_accepted) and, when the target does
    not follow the requester yet, suggest a follow back to the target.
    When a concurrent follow commits the same edge first, the request is
    accepted around the existing edge.
    """

    async def steps() -> FollowActionResult:
        _require_ids(target_id=target_id, requester_id=requester_id)
        _require_distinct(
            target_id,
            requester_id,
            detail="Cannot accept your own follow request",
        )
        try:
            await _accept_pending(session, target_id=target_id, requester_id=requester_id)
        except IntegrityError as exc:
            await session.rollback()
            if not is_unique_violation(exc):
                raise
            if not await is_following(session, user_id=requester_id, friend_id=target_id):
                raise ConflictError(ALREADY_FOLLOWING) from exc
            # A concurrent follow committed the edge first; accept around it.
            try:
                await _accept_pending(session, target_id=target_id, requester_id=requester_id)
            except IntegrityError as retry_exc:
                await session.rollback()
                if is_unique_violation(retry_exc):
                    raise ConflictError(ALREADY_FOLLOWING) from retry_exc
                raise
        return FollowActionResult(success=True, message="Follow request accepted")

    return await _run_operation(
        session,
        "accept_follow_request",
        steps,
        requester_id=requester_id,
        target_id=target_id,
    )


async def reject_follow_request(
    session: AsyncSession,
    *,
    target_id: str,
    requester_id: str,
) -> FollowActionResult:
    async def steps() -> FollowActionResult:
        _require_ids(target_id=target_id, requester_id=requester_id)
        follow_request = await find_pending_request(
            session,
            requester_id=requester_id,
            target_id=target_id,
        )
        if follow_request is None:
            raise NotFoundError()

        await resolve_request(session, follow_request, outcome="reject")
        await delete_notifications(
            session,
            recipient_id=target_id,
            sender_id=requester_id,
            type=NotificationType.FOLLOW_REQUEST,
        )
        await session.commit()
        return FollowActionResult(success=True, message="Follow request rejected")

    return await _run_operation(
        session,
        "reject_follow_request",
        steps,
        requester_id=requester_id,
        target_id=target_id,
    )


async def follow_back(
    session: AsyncSession,
    *,
    user_id: str,
    follower_id: str,
) -> FollowActionResult:
    """Make ``user_id`` follow ``follower_id``. Safe to retry."""

    async def steps() -> FollowActionResult:
        _require_ids(user_id=user_id, follower_id=follower_id)
        _require_distinct(user_id, follower_id, detail="You cannot follow yourself")
        if await is_following(session, user_id=user_id, friend_id=follower_id):
            return FollowActionResult(success=True, message=ALREADY_FOLLOWING)
        await require_user(session, user_id)
        await require_user(session, follower_id)

        try:
            await add_edge(session, user_id=user_id, friend_id=follower_id)
            await delete_notifications(
                session,
                recipient_id=user_id,
                sender_id=follower_id,
                type=NotificationType.FOLLOW_BACK,
            )
            await add_notification(
                session,
                recipient_id=follower_id,
                sender_id=user_id,
                type=NotificationType.FOLLOWED_YOU_BACK,
            )
            await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            if is_unique_violation(exc):
                # A concurrent follow_back committed the same edge first.
                return FollowActionResult(success=True, message=ALREADY_FOLLOWING)
            raise
        return FollowActionResult(success=True, message="Followed back")

    return await _run_operation(
        session,
        "follow_back",
        steps,
        user_id=user_id,
        follower_id=follower_id,
    )


async def follow_public_account(
    session: AsyncSession,
    *,
    follower_id: str,
    followee_id: str,
) -> FollowActionResult:
    """Direct follow path for public accounts: edge only, no request.

    The caller decides that the target is public before taking this path.
    """

    async def steps() -> FollowActionResult:
        _require_ids(follower_id=follower_id, followee_id=followee_id)
        _require_distinct(follower_id, followee_id, detail="You cannot follow yourself")
        if await is_following(session, user_id=follower_id, friend_id=followee_id):
            return FollowActionResult(success=True, message=ALREADY_FOLLOWING)
        await require_user(session, follower_id)
        await require_user(session, followee_id)

        try:
            # A request left over from when the account was private is moot now.
            if await delete_requests(
                session,
                requester_id=follower_id,
                target_id=followee_id,
            ):
                await delete_notifications(
                    session,
                    recipient_id=followee_id,
                    sender_id=follower_id,
                    type=NotificationType.FOLLOW_REQUEST,
                )
            await add_edge(session, user_id=follower_id, friend_id=followee_id)
            await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            if is_unique_violation(exc):
                return FollowActionResult(success=True, message=ALREADY_FOLLOWING)
            raise
        return FollowActionResult(success=True, message="Followed")

    return await _run_operation(
        session,
        "follow_public_account",
        steps,
        follower_id=follower_id,
        followee_id=followee_id,
    )


async def remove_follow_request(
    session: AsyncSession,
    *,
    requester_id: str,
    target_id: str,
    scope: RemovalScope | None = None,
) -> FollowActionResult:
    """Cancel ``requester_id``'s request to, and/or unfollow, ``target_id``.

    ``scope="requested"`` removes pending requests, ``scope="following"``
    removes the edge, and no scope removes both. No notification is emitted;
    the follow_request event of a cancelled request is cleaned up.
    """

    async def steps() -> FollowActionResult:
        _require_ids(requester_id=requester_id, target_id=target_id)
        if scope is not None and scope not in REMOVAL_SCOPES:
            raise ValidationError(f"Unknown scope: {scope}")

        removed_requests = 0
        removed_edges = 0
        if scope in (None, "requested"):
            removed_requests = await delete_requests(
                session,
                requester_id=requester_id,
                target_id=target_id,
            )
            await delete_notifications(
                session,
                recipient_id=target_id,
                sender_id=requester_id,
                type=NotificationType.FOLLOW_REQUEST,
            )
        if scope in (None, "following"):
            removed_edges = await delete_edges(
                session,
                user_id=requester_id,
                friend_id=target_id,
            )
        await session.commit()

        if removed_edges:
            return FollowActionResult(success=True, message="Unfollowed")
        if removed_requests:
            return FollowActionResult(success=True, message="Follow request cancelled")
        return FollowActionResult(success=True, message="Not following")

    return await _run_operation(
        session,
        "remove_follow_request",
        steps,
        requester_id=requester_id,
        target_id=target_id,
        scope=scope,
    )
