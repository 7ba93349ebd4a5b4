"""Tests for the notification feed, seen flags and external triggers."""

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import USER_ID_HEADER
from models import Notification, NotificationType
from services.notifications import (
    events,
    load_notification_feed,
    render_notification_message,
    trigger_notification,
)


def auth_headers(user) -> dict[str, str]:
    return {USER_ID_HEADER: user.id}


async def _insert_notification(
    session: AsyncSession,
    *,
    recipient_id: str,
    sender_id: str,
    type: NotificationType,
    created_at: datetime,
    post_id: str | None = None,
    seen: bool = False,
) -> str:
    notification = Notification(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=type,
        post_id=post_id,
        seen=seen,
        created_at=created_at,
    )
    session.add(notification)
    await session.commit()
    return notification.id


@pytest.mark.asyncio
async def test_notification_feed_requires_auth(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/v1/notifications")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_follow_request_shows_up_in_target_feed(
    async_client: AsyncClient, make_user
) -> None:
    alice = await make_user("alice", name="Alice Liddell")
    bob = await make_user("bob", is_private=True)
    await async_client.post(f"/api/v1/users/{bob.id}/follow", headers=auth_headers(alice))

    response = await async_client.get("/api/v1/notifications", headers=auth_headers(bob))

    assert response.status_code == 200
    body = response.json()
    assert body["unseen_count"] == 1
    assert len(body["notifications"]) == 1
    item = body["notifications"][0]
    assert item["type"] == "follow_request"
    assert item["message"] == "sent you a follow request"
    assert item["href"] == f"/users/{alice.username}"
    assert item["seen"] is False
    assert item["sender"] == {
        "id": alice.id,
        "username": alice.username,
        "name": "Alice Liddell",
        "avatar_key": None,
    }


@pytest.mark.asyncio
async def test_feed_is_newest_first_and_filters_by_type(
    async_client: AsyncClient, db_session: AsyncSession, make_user
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    now = datetime.now(timezone.utc)
    like_id = await _insert_notification(
        db_session,
        recipient_id=bob.id,
        sender_id=alice.id,
        type=NotificationType.LIKE,
        post_id="post-1",
        created_at=now - timedelta(minutes=10),
    )
    follow_back_id = await _insert_notification(
        db_session,
        recipient_id=bob.id,
        sender_id=alice.id,
        type=NotificationType.FOLLOW_BACK,
        created_at=now - timedelta(minutes=5),
    )
    comment_id = await _insert_notification(
        db_session,
        recipient_id=bob.id,
        sender_id=alice.id,
        type=NotificationType.COMMENT,
        post_id="post-2",
        created_at=now - timedelta(minutes=1),
    )

    response = await async_client.get("/api/v1/notifications", headers=auth_headers(bob))
    assert [item["id"] for item in response.json()["notifications"]] == [
        comment_id,
        follow_back_id,
        like_id,
    ]

    filtered = await async_client.get(
        "/api/v1/notifications",
        params=[("type", "like"), ("type", "comment")],
        headers=auth_headers(bob),
    )
    items = filtered.json()["notifications"]
    assert [item["id"] for item in items] == [comment_id, like_id]
    assert items[0]["href"] == "/posts/post-2"
    assert items[0]["post_id"] == "post-2"
    assert filtered.json()["unseen_count"] == 3

    paged = await async_client.get(
        "/api/v1/notifications",
        params={"limit": 1, "offset": 1},
        headers=auth_headers(bob),
    )
    assert [item["id"] for item in paged.json()["notifications"]] == [follow_back_id]


@pytest.mark.asyncio
async def test_feed_limit_is_bounded(async_client: AsyncClient, make_user) -> None:
    bob = await make_user("bob")

    response = await async_client.get(
        "/api/v1/notifications",
        params={"limit": 1000},
        headers=auth_headers(bob),
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_mark_single_notification_seen(
    async_client: AsyncClient, db_session: AsyncSession, make_user
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    now = datetime.now(timezone.utc)
    first_id = await _insert_notification(
        db_session,
        recipient_id=bob.id,
        sender_id=alice.id,
        type=NotificationType.LIKE,
        post_id="post-1",
        created_at=now - timedelta(minutes=2),
    )
    second_id = await _insert_notification(
        db_session,
        recipient_id=bob.id,
        sender_id=alice.id,
        type=NotificationType.MENTION,
        post_id="post-2",
        created_at=now - timedelta(minutes=1),
    )

    foreign = await async_client.post(
        f"/api/v1/notifications/{first_id}/seen",
        headers=auth_headers(alice),
    )
    assert foreign.status_code == 404

    response = await async_client.post(
        f"/api/v1/notifications/{first_id}/seen",
        headers=auth_headers(bob),
    )
    assert response.status_code == 200
    assert response.json() == {"updated_count": 1}

    result = await db_session.execute(
        select(Notification.id, Notification.seen).where(Notification.recipient_id == bob.id)
    )
    assert dict(result.all()) == {first_id: True, second_id: False}


@pytest.mark.asyncio
async def test_mark_all_notifications_seen(
    async_client: AsyncClient, db_session: AsyncSession, make_user
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    now = datetime.now(timezone.utc)
    for offset_minutes, notification_type in enumerate(
        [NotificationType.FRIEND_ACCEPTED, NotificationType.FOLLOWED_YOU_BACK]
    ):
        await _insert_notification(
            db_session,
            recipient_id=bob.id,
            sender_id=alice.id,
            type=notification_type,
            created_at=now - timedelta(minutes=offset_minutes),
        )
    await _insert_notification(
        db_session,
        recipient_id=alice.id,
        sender_id=bob.id,
        type=NotificationType.FOLLOWED_YOU_BACK,
        created_at=now,
    )

    response = await async_client.post("/api/v1/notifications/seen", headers=auth_headers(bob))
    assert response.json() == {"updated_count": 2}

    feed = await async_client.get("/api/v1/notifications", headers=auth_headers(bob))
    assert feed.json()["unseen_count"] == 0
    assert all(item["seen"] for item in feed.json()["notifications"])

    other_feed = await async_client.get("/api/v1/notifications", headers=auth_headers(alice))
    assert other_feed.json()["unseen_count"] == 1


@pytest.mark.asyncio
async def test_trigger_notification_records_post_event(
    db_session: AsyncSession, make_user
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")

    created = await trigger_notification(
        db_session,
        recipient_id=bob.id,
        sender_id=alice.id,
        type=NotificationType.LIKE,
        post_id="post-9",
    )

    assert created is True
    feed = await load_notification_feed(db_session, bob.id, limit=10)
    assert len(feed.notifications) == 1
    assert feed.notifications[0].href == "/posts/post-9"
    assert feed.notifications[0].message == "liked your post"


@pytest.mark.asyncio
async def test_trigger_notification_skips_self_events(
    db_session: AsyncSession, make_user
) -> None:
    alice = await make_user("alice")

    created = await trigger_notification(
        db_session,
        recipient_id=alice.id,
        sender_id=alice.id,
        type=NotificationType.COMMENT,
        post_id="post-1",
    )

    assert created is False
    feed = await load_notification_feed(db_session, alice.id, limit=10)
    assert feed.notifications == []


@pytest.mark.asyncio
async def test_trigger_notification_requires_post_for_post_types(
    db_session: AsyncSession, make_user
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")

    with pytest.raises(ValueError):
        await trigger_notification(
            db_session,
            recipient_id=bob.id,
            sender_id=alice.id,
            type=NotificationType.MENTION,
        )


@pytest.mark.asyncio
async def test_trigger_notification_reports_store_failure(
    db_session: AsyncSession, make_user, monkeypatch
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")

    async def failing_add_notification(*args: Any, **kwargs: Any) -> None:
        raise OperationalError("INSERT INTO notifications", {}, Exception("database is locked"))

    monkeypatch.setattr(events, "add_notification", failing_add_notification)

    created = await trigger_notification(
        db_session,
        recipient_id=bob.id,
        sender_id=alice.id,
        type=NotificationType.LIKE,
        post_id="post-1",
    )

    assert created is False
    monkeypatch.undo()
    feed = await load_notification_feed(db_session, bob.id, limit=10)
    assert feed.notifications == []


def test_every_notification_type_has_a_message() -> None:
    for notification_type in NotificationType:
        assert render_notification_message(notification_type) != "sent you a notification"


@pytest.mark.asyncio
async def test_trigger_notification_refuses_follow_types(
    db_session: AsyncSession, make_user
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")

    with pytest.raises(ValueError, match="follow workflow"):
        await trigger_notification(
            db_session,
            recipient_id=bob.id,
            sender_id=alice.id,
            type=NotificationType.FOLLOW_REQUEST,
        )
