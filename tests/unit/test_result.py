"""Unit tests for result values."""

from __future__ import annotations

import pytest

from errchain.core.errors import PlainError
from errchain.core.result import Err
from errchain.core.result import Ok


def test_ok_and_err_hold_their_payloads() -> None:
    err = PlainError(message="boom")

    assert Ok(3).value == 3
    assert Err(err).error is err


def test_err_only_wraps_error_values() -> None:
    with pytest.raises(TypeError):
        Err("boom")  # type: ignore[arg-type]
