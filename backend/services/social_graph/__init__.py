"""Follow relationship workflow and stores."""

from .edges import (
    add_edge,
    count_followers,
    count_following,
    delete_edges,
    has_edge_between,
    is_following,
    list_followers,
    list_following,
)
from .queries import get_follow_state, get_follow_status
from .requests import (
    add_pending_request,
    delete_requests,
    find_pending_request,
    has_pending_request_between,
    is_follow_request_pending,
    list_incoming_requests,
    resolve_request,
)
from .schemas import (
    FollowActionResult,
    FollowRequestItem,
    FollowState,
    FollowStatusResponse,
    RemovalScope,
    UserSummary,
)
from .workflow import (
    accept_follow_request,
    follow_back,
    follow_public_account,
    reject_follow_request,
    remove_follow_request,
    send_follow_request,
)

__all__ = [
    "FollowActionResult",
    "FollowRequestItem",
    "FollowState",
    "FollowStatusResponse",
    "RemovalScope",
    "UserSummary",
    "accept_follow_request",
    "add_edge",
    "add_pending_request",
    "count_followers",
    "count_following",
    "delete_edges",
    "delete_requests",
    "find_pending_request",
    "follow_back",
    "follow_public_account",
    "get_follow_state",
    "get_follow_status",
    "has_edge_between",
    "has_pending_request_between",
    "is_follow_request_pending",
    "is_following",
    "list_followers",
    "list_following",
    "list_incoming_requests",
    "reject_follow_request",
    "remove_follow_request",
    "resolve_request",
    "send_follow_request",
]
