"""Friendship edge persistence operations.

An edge ``(user_id, friend_id)`` means ``user_id`` follows ``friend_id``.
"""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from models import Friendship, User


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def _desc(column: Any) -> Any:
    return cast(Any, column).desc()


def _edge_filter(user_id: str, friend_id: str) -> ColumnElement[bool]:
    return and_(
        _eq(Friendship.user_id, user_id),
        _eq(Friendship.friend_id, friend_id),
    )


async def is_following(
    session: AsyncSession,
    *,
    user_id: str,
    friend_id: str,
) -> bool:
    result = await session.execute(
        select(Friendship).where(_edge_filter(user_id, friend_id))
    )
    return result.scalar_one_or_none() is not None


async def has_edge_between(
    session: AsyncSession,
    *,
    user_id: str,
    other_user_id: str,
) -> bool:
    """Return True when an edge exists in either direction."""
    result = await session.execute(
        select(Friendship.user_id)
        .where(
            or_(
                _edge_filter(user_id, other_user_id),
                _edge_filter(other_user_id, user_id),
            )
        )
        .limit(1)
    )
    return result.first() is not None


async def add_edge(
    session: AsyncSession,
    *,
    user_id: str,
    friend_id: str,
) -> Friendship:
    friendship = Friendship(user_id=user_id, friend_id=friend_id)
    session.add(friendship)
    await session.flush()
    return friendship


async def delete_edges(
    session: AsyncSession,
    *,
    user_id: str,
    friend_id: str,
) -> int:
    delete_result = await session.execute(
        delete(Friendship).where(_edge_filter(user_id, friend_id))
    )
    return int(cast(Any, delete_result).rowcount or 0)


async def count_followers(session: AsyncSession, *, user_id: str) -> int:
    result = await session.execute(
        select(func.count()).select_from(Friendship).where(_eq(Friendship.friend_id, user_id))
    )
    return int(result.scalar_one())


async def count_following(session: AsyncSession, *, user_id: str) -> int:
    result = await session.execute(
        select(func.count()).select_from(Friendship).where(_eq(Friendship.user_id, user_id))
    )
    return int(result.scalar_one())


async def list_followers(
    session: AsyncSession,
    *,
    user_id: str,
    limit: int,
    offset: int = 0,
) -> list[User]:
    result = await session.execute(
        select(User)
        .join(Friendship, _eq(Friendship.user_id, User.id))
        .where(_eq(Friendship.friend_id, user_id))
        .order_by(_desc(Friendship.created_at), User.username)
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())


async def list_following(
    session: AsyncSession,
    *,
    user_id: str,
    limit: int,
    offset: int = 0,
) -> list[User]:
    result = await session.execute(
        select(User)
        .join(Friendship, _eq(Friendship.friend_id, User.id))
        .where(_eq(Friendship.user_id, user_id))
        .order_by(_desc(Friendship.created_at), User.username)
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())
