"""Tests for the follow request status state machine."""

import pytest

from core.errors import InvalidTransitionError, ValidationError
from models import FollowRequestStatus


def test_pending_accepts_and_rejects() -> None:
    assert FollowRequestStatus.PENDING.accept() is FollowRequestStatus.ACCEPTED
    assert FollowRequestStatus.PENDING.reject() is FollowRequestStatus.REJECTED


@pytest.mark.parametrize(
    "terminal_status",
    [FollowRequestStatus.ACCEPTED, FollowRequestStatus.REJECTED],
)
def test_terminal_status_cannot_transition(terminal_status: FollowRequestStatus) -> None:
    assert terminal_status.is_terminal
    with pytest.raises(InvalidTransitionError):
        terminal_status.accept()
    with pytest.raises(InvalidTransitionError):
        terminal_status.reject()


def test_invalid_transition_is_a_validation_error() -> None:
    with pytest.raises(ValidationError) as exc_info:
        FollowRequestStatus.ACCEPTED.reject()
    assert "accepted" in exc_info.value.message


def test_status_values_round_trip_from_storage() -> None:
    assert FollowRequestStatus("pending") is FollowRequestStatus.PENDING
    assert not FollowRequestStatus.PENDING.is_terminal
