"""Read-only follow relationship queries."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from models import User

from .edges import count_followers, count_following, is_following
from .requests import is_follow_request_pending
from .schemas import FollowState, FollowStatusResponse


async def get_follow_state(
    session: AsyncSession,
    *,
    viewer_id: str,
    target_id: str,
) -> FollowState:
    if viewer_id == target_id:
        return "none"
    if await is_following(session, user_id=viewer_id, friend_id=target_id):
        return "following"
    if await is_follow_request_pending(
        session,
        requester_id=viewer_id,
        target_id=target_id,
    ):
        return "requested"
    return "none"


async def get_follow_status(
    session: AsyncSession,
    *,
    viewer_id: str,
    target: User,
) -> FollowStatusResponse:
    state = await get_follow_state(session, viewer_id=viewer_id, target_id=target.id)
    follows_you = viewer_id != target.id and await is_following(
        session,
        user_id=target.id,
        friend_id=viewer_id,
    )
    return FollowStatusResponse(
        state=state,
        follows_you=follows_you,
        is_private=target.is_private,
        followers_count=await count_followers(session, user_id=target.id),
        following_count=await count_following(session, user_id=target.id),
    )
