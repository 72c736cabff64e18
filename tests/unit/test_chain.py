"""Unit tests for identity and variant traversal of error chains."""

from __future__ import annotations

import logging

import pytest

from errchain.core.chain import api_error_code
from errchain.core.chain import find
from errchain.core.chain import is_database_error
from errchain.core.chain import is_validation_error
from errchain.core.chain import iter_chain
from errchain.core.chain import matches
from errchain.core.chain import root_cause
from errchain.core.chain import unwrap
from errchain.core.errors import APIError
from errchain.core.errors import ChainError
from errchain.core.errors import DatabaseError
from errchain.core.errors import PlainError
from errchain.core.errors import ValidationError
from errchain.core.errors import WrappedError
from errchain.core.errors import wrap
from errchain.core.sentinels import ERR_NOT_FOUND


def _wrap_n_times(depth: int, err: ChainError) -> ChainError:
    for level in range(depth):
        err = wrap(f"layer {level}", err)
    return err


@pytest.mark.parametrize("depth", [0, 1, 2, 10])
def test_sentinel_is_found_at_any_wrap_depth(depth: int) -> None:
    assert matches(_wrap_n_times(depth, ERR_NOT_FOUND), ERR_NOT_FOUND)


def test_identical_text_is_not_an_identity_match() -> None:
    first = PlainError(message="not found")
    second = PlainError(message="not found")

    assert not matches(first, second)
    assert not matches(wrap("lookup failed", first), ERR_NOT_FOUND)


def test_matches_through_database_errors() -> None:
    err = wrap("failed to get user", DatabaseError(operation="SELECT", table="users", cause=ERR_NOT_FOUND))

    assert matches(err, ERR_NOT_FOUND)


def test_find_returns_closest_to_root_match() -> None:
    inner = ValidationError(field="age", message="cannot be negative")
    err = wrap("request failed", wrap("age validation failed", inner))
    nested = WrappedError(context="top", cause=DatabaseError(operation="INSERT", table="users", cause=inner))

    assert find(err, ValidationError) is inner
    assert find(nested, DatabaseError) is nested.cause
    assert find(nested, WrappedError) is nested


def test_find_prefers_the_outermost_of_several_matches() -> None:
    inner = wrap("inner", PlainError(message="root"))
    outer = wrap("outer", inner)

    assert find(outer, WrappedError) is outer


def test_find_returns_none_without_a_matching_variant() -> None:
    err = wrap("context", PlainError(message="boom"))

    assert find(err, ValidationError) is None
    assert find(err, APIError) is None


def test_find_rejects_non_variant_types() -> None:
    with pytest.raises(TypeError):
        find(PlainError(message="boom"), ValueError)


def test_unwrap_and_root_cause() -> None:
    root = PlainError(message="boom")
    middle = wrap("middle", root)
    top = wrap("top", middle)

    assert unwrap(top) is middle
    assert unwrap(root) is None
    assert root_cause(top) is root
    assert list(iter_chain(top)) == [top, middle, root]


def test_depth_guard_stops_traversal_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    target = PlainError(message="deep")
    err = _wrap_n_times(10, target)

    with caplog.at_level(logging.WARNING, logger="errchain.core.chain"):
        found = matches(err, target, max_depth=5)

    assert not found
    assert len(list(iter_chain(err, max_depth=5))) == 5
    assert "traversal stopped" in caplog.text


def test_depth_guard_defaults_to_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from errchain.core.config import get_settings

    monkeypatch.setenv("ERRCHAIN_MAX_CHAIN_DEPTH", "3")
    get_settings.cache_clear()
    target = PlainError(message="deep")

    assert matches(_wrap_n_times(2, target), target)
    assert not matches(_wrap_n_times(3, target), target)


def test_category_helpers() -> None:
    api_failure = wrap("calling partner", APIError(code=408, message="Request Timeout"))
    db_failure = DatabaseError(operation="SELECT", table="users", cause=PlainError(message="locked"))
    validation = wrap("age validation failed", ValidationError(field="age", message="cannot be negative"))

    assert api_error_code(api_failure) == 408
    assert api_error_code(db_failure) is None
    assert is_database_error(db_failure)
    assert not is_database_error(validation)
    assert is_validation_error(validation)
    assert not is_validation_error(api_failure)
