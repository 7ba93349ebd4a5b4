"""Follow workflow result and API payload schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

FollowState = Literal["none", "requested", "following"]
RemovalScope = Literal["requested", "following"]


class FollowActionResult(BaseModel):
    """Outcome of a workflow operation; failures carry a human-readable message."""

    success: bool
    message: str | None = None


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    name: str | None = None
    avatar_key: str | None = None
    is_private: bool = False


class FollowStatusResponse(BaseModel):
    state: FollowState
    follows_you: bool = False
    is_private: bool = False
    followers_count: int = 0
    following_count: int = 0


class FollowRequestItem(BaseModel):
    id: str
    requester: UserSummary
    created_at: datetime | None
