"""Integration tests for user lookup collaborators against SQLite."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from errchain.core.chain import find
from errchain.core.chain import matches
from errchain.core.errors import DatabaseError
from errchain.core.errors import PlainError
from errchain.core.errors import ValidationError
from errchain.core.errors import WrappedError
from errchain.core.result import Err
from errchain.core.result import Ok
from errchain.core.sentinels import ERR_INVALID_USER_ID
from errchain.core.sentinels import ERR_USER_NOT_FOUND
from errchain.db.repository.users import create_user
from errchain.services import users as users_service
from errchain.services.users import get_user
from errchain.services.users import process_user


@pytest.fixture
def ada_id(session: Session) -> int:
    user = create_user(session, name="Ada", email="ada@example.com")
    session.commit()
    return user.id


def test_get_user_returns_name(session: Session, ada_id: int) -> None:
    assert get_user(session, ada_id) == Ok("Ada")


@pytest.mark.parametrize("user_id", [0, -1])
def test_invalid_ids_are_database_errors(session: Session, user_id: int) -> None:
    result = get_user(session, user_id)

    assert isinstance(result, Err)
    assert isinstance(result.error, DatabaseError)
    assert result.error.operation == "SELECT"
    assert result.error.table == "users"
    assert result.error.cause is ERR_INVALID_USER_ID
    assert str(result.error) == "database error during SELECT on table users: invalid user ID"


def test_missing_user_carries_not_found_sentinel(session: Session) -> None:
    result = get_user(session, 999)

    assert isinstance(result, Err)
    assert matches(result.error, ERR_USER_NOT_FOUND)


def test_store_failures_become_database_errors(
    session: Session,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    def broken_lookup(_: Session, __: int) -> None:
        raise OperationalError("SELECT users", {}, Exception("database is locked"))

    monkeypatch.setattr(users_service, "get_user_by_id", broken_lookup)

    result = get_user(session, 1)

    assert isinstance(result, Err)
    assert isinstance(result.error, DatabaseError)
    assert isinstance(result.error.cause, PlainError)
    assert "database is locked" in str(result.error)
    assert "User lookup failed for user_id=1" in caplog.text


def test_process_user_success(session: Session, ada_id: int) -> None:
    assert process_user(session, ada_id, "25") == Ok("User: Ada, Age: 25")


def test_process_user_wraps_lookup_failure(session: Session) -> None:
    result = process_user(session, 999, "25")

    assert isinstance(result, Err)
    assert isinstance(result.error, WrappedError)
    assert str(result.error) == (
        "failed to get user: database error during SELECT on table users: user not found"
    )
    assert find(result.error, DatabaseError) is result.error.cause
    assert matches(result.error, ERR_USER_NOT_FOUND)


def test_process_user_wraps_age_failure(session: Session, ada_id: int) -> None:
    result = process_user(session, ada_id, "-10")

    assert isinstance(result, Err)
    assert str(result.error).startswith("failed to process age: age validation failed: ")
    validation = find(result.error, ValidationError)
    assert validation is not None
    assert validation.message == "cannot be negative"
