"""Recipient-addressed notification event model."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, func, text
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from core.time import utcnow

LIVE_FOLLOW_REQUEST_PREDICATE = text("type = 'follow_request'")


class NotificationType(str, Enum):
    FOLLOW_REQUEST = "follow_request"
    FRIEND_ACCEPTED = "friend_accepted"
    FOLLOW_BACK = "follow_back"
    FOLLOWED_YOU_BACK = "followed_you_back"
    LIKE = "like"
    COMMENT = "comment"
    MENTION = "mention"


FOLLOW_NOTIFICATION_TYPES = frozenset(
    {
        NotificationType.FOLLOW_REQUEST,
        NotificationType.FRIEND_ACCEPTED,
        NotificationType.FOLLOW_BACK,
        NotificationType.FOLLOWED_YOU_BACK,
    }
)
POST_NOTIFICATION_TYPES = frozenset(
    {
        NotificationType.LIKE,
        NotificationType.COMMENT,
        NotificationType.MENTION,
    }
)


class Notification(SQLModel, table=True):
    """Event shown in a recipient's notification feed."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index(
            "ux_notifications_live_follow_request",
            "recipient_id",
            "sender_id",
            unique=True,
            sqlite_where=LIVE_FOLLOW_REQUEST_PREDICATE,
            postgresql_where=LIVE_FOLLOW_REQUEST_PREDICATE,
        ),
        Index(
            "ix_notifications_recipient_created_at",
            "recipient_id",
            "created_at",
        ),
        Index(
            "ix_notifications_recipient_sender_type",
            "recipient_id",
            "sender_id",
            "type",
        ),
    )

    id: str = Field(default_factory=lambda: str(uuid4()), sa_column=Column(String(36), primary_key=True))
    recipient_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        )
    )
    sender_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        )
    )
    type: NotificationType = Field(
        sa_column=Column(
            SAEnum(
                NotificationType,
                native_enum=False,
                length=32,
                values_callable=lambda types: [item.value for item in types],
            ),
            nullable=False,
        )
    )
    # Posts live in an external service; no foreign key.
    post_id: str | None = Field(
        default=None, sa_column=Column(String(64), nullable=True)
    )
    seen: bool = Field(
        default=False,
        sa_column=Column(
            Boolean,
            nullable=False,
            server_default=text("false"),
        ),
    )
    created_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
        )
    )
