"""Tests for IntegrityError classification."""

from sqlalchemy.exc import IntegrityError

from db.errors import is_unique_violation


class _DriverError(Exception):
    def __init__(self, message: str, sqlstate: str | None = None) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


def test_unique_violation_detected_from_sqlstate() -> None:
    error = IntegrityError("INSERT", {}, _DriverError("constraint failed", sqlstate="23505"))
    assert is_unique_violation(error) is True


def test_unique_violation_detected_from_sqlite_message() -> None:
    error = IntegrityError(
        "INSERT",
        {},
        _DriverError("UNIQUE constraint failed: friendships.user_id, friendships.friend_id"),
    )
    assert is_unique_violation(error) is True


def test_foreign_key_violation_is_not_unique() -> None:
    error = IntegrityError(
        "INSERT",
        {},
        _DriverError("FOREIGN KEY constraint failed", sqlstate="23503"),
    )
    assert is_unique_violation(error) is False
