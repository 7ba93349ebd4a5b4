"""Follow relationship endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db
from models import User
from services.social_graph import (
    FollowActionResult,
    FollowRequestItem,
    FollowState,
    FollowStatusResponse,
    RemovalScope,
    UserSummary,
    accept_follow_request,
    follow_back,
    follow_public_account,
    get_follow_state,
    get_follow_status,
    list_followers,
    list_following,
    list_incoming_requests,
    reject_follow_request,
    remove_follow_request,
    send_follow_request,
)
from services.users import get_user

from .pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, set_next_offset_header

router = APIRouter(tags=["follows"])


class FollowMutationResponse(FollowActionResult):
    state: FollowState


async def _require_target_user(session: AsyncSession, user_id: str) -> User:
    target_user = await get_user(session, user_id)
    if target_user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return target_user


async def _with_state(
    session: AsyncSession,
    result: FollowActionResult,
    *,
    viewer_id: str,
    target_id: str,
) -> FollowMutationResponse:
    state = await get_follow_state(session, viewer_id=viewer_id, target_id=target_id)
    return FollowMutationResponse(
        success=result.success,
        message=result.message,
        state=state,
    )


@router.post("/users/{user_id}/follow", response_model=FollowMutationResponse)
async def follow_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowMutationResponse:
    target_user = await _require_target_user(session, user_id)
    # A failed workflow rolls the session back and expires loaded rows.
    viewer_id = current_user.id
    target_id = target_user.id

    if target_user.is_private:
        result = await send_follow_request(
            session,
            requester_id=viewer_id,
            target_id=target_id,
        )
    else:
        result = await follow_public_account(
            session,
            follower_id=viewer_id,
            followee_id=target_id,
        )
    return await _with_state(session, result, viewer_id=viewer_id, target_id=target_id)


@router.delete("/users/{user_id}/follow", response_model=FollowMutationResponse)
async def unfollow_user(
    user_id: str,
    scope: Annotated[RemovalScope | None, Query()] = None,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowMutationResponse:
    target_user = await _require_target_user(session, user_id)
    viewer_id = current_user.id
    target_id = target_user.id
    result = await remove_follow_request(
        session,
        requester_id=viewer_id,
        target_id=target_id,
        scope=scope,
    )
    return await _with_state(session, result, viewer_id=viewer_id, target_id=target_id)


@router.post("/users/{user_id}/follow-back", response_model=FollowMutationResponse)
async def follow_user_back(
    user_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowMutationResponse:
    follower = await _require_target_user(session, user_id)
    viewer_id = current_user.id
    follower_id = follower.id
    result = await follow_back(
        session,
        user_id=viewer_id,
        follower_id=follower_id,
    )
    return await _with_state(session, result, viewer_id=viewer_id, target_id=follower_id)


@router.get("/users/{user_id}/follow-status", response_model=FollowStatusResponse)
async def read_follow_status(
    user_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowStatusResponse:
    target_user = await _require_target_user(session, user_id)
    return await get_follow_status(session, viewer_id=current_user.id, target=target_user)


@router.get("/users/{user_id}/followers", response_model=list[UserSummary])
async def read_followers(
    user_id: str,
    response: Response,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    offset: Annotated[int, Query(ge=0)] = 0,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[UserSummary]:
    target_user = await _require_target_user(session, user_id)
    followers = await list_followers(
        session,
        user_id=target_user.id,
        limit=limit + 1,
        offset=offset,
    )
    has_more = len(followers) > limit
    set_next_offset_header(response, offset=offset, limit=limit, has_more=has_more)
    return [UserSummary.model_validate(user) for user in followers[:limit]]


@router.get("/users/{user_id}/following", response_model=list[UserSummary])
async def read_following(
    user_id: str,
    response: Response,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    offset: Annotated[int, Query(ge=0)] = 0,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[UserSummary]:
    target_user = await _require_target_user(session, user_id)
    following = await list_following(
        session,
        user_id=target_user.id,
        limit=limit + 1,
        offset=offset,
    )
    has_more = len(following) > limit
    set_next_offset_header(response, offset=offset, limit=limit, has_more=has_more)
    return [UserSummary.model_validate(user) for user in following[:limit]]


@router.get("/me/follow-requests", response_model=list[FollowRequestItem])
async def read_incoming_follow_requests(
    response: Response,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    offset: Annotated[int, Query(ge=0)] = 0,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[FollowRequestItem]:
    rows = await list_incoming_requests(
        session,
        target_id=current_user.id,
        limit=limit + 1,
        offset=offset,
    )
    has_more = len(rows) > limit
    set_next_offset_header(response, offset=offset, limit=limit, has_more=has_more)
    return [
        FollowRequestItem(
            id=follow_request.id,
            requester=UserSummary.model_validate(requester),
            created_at=follow_request.created_at,
        )
        for follow_request, requester in rows[:limit]
    ]


@router.post(
    "/me/follow-requests/{requester_id}/accept",
    response_model=FollowActionResult,
)
async def accept_incoming_follow_request(
    requester_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowActionResult:
    return await accept_follow_request(
        session,
        target_id=current_user.id,
        requester_id=requester_id,
    )


@router.post(
    "/me/follow-requests/{requester_id}/reject",
    response_model=FollowActionResult,
)
async def reject_incoming_follow_request(
    requester_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowActionResult:
    return await reject_follow_request(
        session,
        target_id=current_user.id,
        requester_id=requester_id,
    )
