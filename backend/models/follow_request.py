"""Follow request model and its status state machine."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, func, text
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from core.errors import InvalidTransitionError
from core.time import utcnow

PENDING_STATUS_PREDICATE = text("status = 'pending'")


class FollowRequestStatus(str, Enum):
    """Closed set of request states.

    ``PENDING`` is the only non-terminal state. Transitions are exposed as
    methods so a terminal status can never be moved back to pending.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not FollowRequestStatus.PENDING

    def accept(self) -> FollowRequestStatus:
        return self._resolve(FollowRequestStatus.ACCEPTED)

    def reject(self) -> FollowRequestStatus:
        return self._resolve(FollowRequestStatus.REJECTED)

    def _resolve(self, outcome: FollowRequestStatus) -> FollowRequestStatus:
        if self.is_terminal:
            raise InvalidTransitionError(
                f"Cannot move follow request from {self.value} to {outcome.value}"
            )
        return outcome


class FollowRequest(SQLModel, table=True):
    """A requester's pending ask to follow a target account."""

    __tablename__ = "follow_requests"
    __table_args__ = (
        Index(
            "ux_follow_requests_pending_pair",
            "requester_id",
            "target_id",
            unique=True,
            sqlite_where=PENDING_STATUS_PREDICATE,
            postgresql_where=PENDING_STATUS_PREDICATE,
        ),
        Index(
            "ix_follow_requests_target_created_at",
            "target_id",
            "created_at",
        ),
    )

    id: str = Field(default_factory=lambda: str(uuid4()), sa_column=Column(String(36), primary_key=True))
    requester_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        )
    )
    target_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        )
    )
    status: FollowRequestStatus = Field(
        default=FollowRequestStatus.PENDING,
        sa_column=Column(
            SAEnum(
                FollowRequestStatus,
                native_enum=False,
                length=16,
                values_callable=lambda statuses: [status.value for status in statuses],
            ),
            nullable=False,
            server_default=FollowRequestStatus.PENDING.value,
        ),
    )
    created_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True),
            default=utcnow,
            server_default=func.now(),
            nullable=False,
        )
    )
