"""Database seed script for local development.

Usage:
    python scripts/seed.py

Creates a handful of public and private demo accounts, follows between the
public ones, and pending follow requests toward the private ones so the
notification feed has something to show.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from db.session import AsyncSessionMaker  # noqa: E402
from models import User  # noqa: E402
from services.social_graph import (  # noqa: E402
    follow_public_account,
    send_follow_request,
)
from services.users import get_user_by_username  # noqa: E402


@dataclass(frozen=True)
class SeedUser:
    username: str
    name: str
    is_private: bool = False


BASE_USERS: Sequence[SeedUser] = [
    SeedUser(username="demo_alex", name="Alex Demo"),
    SeedUser(username="demo_bella", name="Bella Demo", is_private=True),
    SeedUser(username="demo_cara", name="Cara Demo"),
    SeedUser(username="demo_dan", name="Dan Demo", is_private=True),
    SeedUser(username="demo_ella", name="Ella Demo"),
]


def _build_seed_follows(users: Sequence[SeedUser]) -> list[tuple[str, str]]:
    """Each user reaches for the next two accounts in the list."""
    if len(users) < 2:
        return []

    relationships: set[tuple[str, str]] = set()
    total_users = len(users)
    for index, follower in enumerate(users):
        for step in (1, 2):
            followee = users[(index + step) % total_users]
            if followee.username != follower.username:
                relationships.add((follower.username, followee.username))
    return sorted(relationships)


async def get_or_create_user(session, payload: SeedUser) -> User:
    user = await get_user_by_username(session, payload.username)
    if user:
        return user

    user = User(
        username=payload.username,
        name=payload.name,
        is_private=payload.is_private,
    )
    session.add(user)
    await session.flush()
    return user


async def seed() -> None:
    async with AsyncSessionMaker() as session:
        users: dict[str, tuple[str, bool]] = {}
        for payload in BASE_USERS:
            user = await get_or_create_user(session, payload)
            users[payload.username] = (user.id, payload.is_private)
        await session.commit()

        follows = 0
        requests = 0
        for follower_username, followee_username in _build_seed_follows(BASE_USERS):
            follower_id, _follower_private = users[follower_username]
            followee_id, followee_private = users[followee_username]
            if followee_private:
                result = await send_follow_request(
                    session,
                    requester_id=follower_id,
                    target_id=followee_id,
                )
                requests += int(result.success)
            else:
                result = await follow_public_account(
                    session,
                    follower_id=follower_id,
                    followee_id=followee_id,
                )
                follows += int(result.success)

    print("Seed data inserted.")
    print("   Users:", ", ".join(user.username for user in BASE_USERS))
    print("   Follows:", follows)
    print("   Pending follow requests:", requests)


if __name__ == "__main__":
    asyncio.run(seed())
