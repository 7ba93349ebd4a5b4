"""Domain error taxonomy for the follow workflow."""

from __future__ import annotations


class SocialGraphError(Exception):
    """Base class for follow-workflow failures.

    The message is human readable and is what callers eventually see.
    """

    default_message = "Follow operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(SocialGraphError):
    default_message = "Invalid follow request"


class InvalidTransitionError(ValidationError):
    default_message = "Follow request is no longer pending"


class ConflictError(SocialGraphError):
    default_message = "Follow relationship already exists"


class NotFoundError(SocialGraphError):
    default_message = "Follow request not found"


class StoreError(SocialGraphError):
    default_message = "Could not update follow relationship, please try again"


__all__ = [
    "SocialGraphError",
    "ValidationError",
    "InvalidTransitionError",
    "ConflictError",
    "NotFoundError",
    "StoreError",
]
