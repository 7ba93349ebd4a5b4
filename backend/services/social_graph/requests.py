"""Follow request persistence operations."""

from __future__ import annotations

from typing import Any, Literal, cast

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from core.errors import NotFoundError
from models import FollowRequest, FollowRequestStatus, User


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def _desc(column: Any) -> Any:
    return cast(Any, column).desc()


def _pending_pair_filter(requester_id: str, target_id: str) -> ColumnElement[bool]:
    return and_(
        _eq(FollowRequest.requester_id, requester_id),
        _eq(FollowRequest.target_id, target_id),
        _eq(FollowRequest.status, FollowRequestStatus.PENDING),
    )


async def find_pending_request(
    session: AsyncSession,
    *,
    requester_id: str,
    target_id: str,
) -> FollowRequest | None:
    result = await session.execute(
        select(FollowRequest).where(_pending_pair_filter(requester_id, target_id))
    )
    return result.scalar_one_or_none()


async def is_follow_request_pending(
    session: AsyncSession,
    *,
    requester_id: str,
    target_id: str,
) -> bool:
    return (
        await find_pending_request(
            session,
            requester_id=requester_id,
            target_id=target_id,
        )
        is not None
    )


async def has_pending_request_between(
    session: AsyncSession,
    *,
    user_id: str,
    other_user_id: str,
) -> bool:
    """Return True when either user has a pending request toward the other."""
    result = await session.execute(
        select(FollowRequest.id)
        .where(
            or_(
                _pending_pair_filter(user_id, other_user_id),
                _pending_pair_filter(other_user_id, user_id),
            )
        )
        .limit(1)
    )
    return result.first() is not None


async def add_pending_request(
    session: AsyncSession,
    *,
    requester_id: str,
    target_id: str,
) -> FollowRequest:
    follow_request = FollowRequest(
        requester_id=requester_id,
        target_id=target_id,
        status=FollowRequestStatus.PENDING,
    )
    session.add(follow_request)
    await session.flush()
    return follow_request


async def resolve_request(
    session: AsyncSession,
    follow_request: FollowRequest,
    *,
    outcome: Literal["accept", "reject"],
) -> FollowRequestStatus:
    """Move a pending request to its terminal status and delete it.

    The delete is conditional on the row still being pending, so when two
    callers race to resolve the same request only one of them wins and the
    other gets ``NotFoundError``.
    """
    current_status = FollowRequestStatus(follow_request.status)
    if outcome == "accept":
        resolved_status = current_status.accept()
    else:
        resolved_status = current_status.reject()

    delete_result = await session.execute(
        delete(FollowRequest).where(
            _eq(FollowRequest.id, follow_request.id),
            _eq(FollowRequest.status, FollowRequestStatus.PENDING),
        )
    )
    if int(cast(Any, delete_result).rowcount or 0) == 0:
        raise NotFoundError()
    return resolved_status


async def delete_requests(
    session: AsyncSession,
    *,
    requester_id: str,
    target_id: str,
) -> int:
    delete_result = await session.execute(
        delete(FollowRequest).where(
            _eq(FollowRequest.requester_id, requester_id),
            _eq(FollowRequest.target_id, target_id),
        )
    )
    return int(cast(Any, delete_result).rowcount or 0)


async def list_incoming_requests(
    session: AsyncSession,
    *,
    target_id: str,
    limit: int,
    offset: int = 0,
) -> list[tuple[FollowRequest, User]]:
    result = await session.execute(
        select(FollowRequest, User)
        .join(User, _eq(User.id, FollowRequest.requester_id))
        .where(
            _eq(FollowRequest.target_id, target_id),
            _eq(FollowRequest.status, FollowRequestStatus.PENDING),
        )
        .order_by(
            _desc(FollowRequest.created_at),
            _desc(FollowRequest.id),
        )
        .offset(offset)
        .limit(limit)
    )
    return [(follow_request, requester) for follow_request, requester in result.all()]
