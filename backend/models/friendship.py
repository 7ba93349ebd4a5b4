"""Directed follow edge model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, func
from sqlmodel import Field, SQLModel

from core.time import utcnow


class Friendship(SQLModel, table=True):
    """``user_id`` follows ``friend_id``. No reciprocal edge is implied."""

    __tablename__ = "friendships"
    __table_args__ = (
        Index("ix_friendships_friend_id_created_at", "friend_id", "created_at"),
    )

    user_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    friend_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    created_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
        )
    )
