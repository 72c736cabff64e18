"""Arithmetic and sequence collaborators returning results instead of raising."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from errchain.core.result import Err
from errchain.core.result import Ok
from errchain.core.result import Result
from errchain.core.sentinels import ERR_DIVISION_BY_ZERO
from errchain.core.sentinels import ERR_INDEX_OUT_OF_RANGE

T = TypeVar("T")


def divide(a: float, b: float) -> Result[float]:
    """Divide ``a`` by ``b``; a zero divisor yields the division-by-zero sentinel."""
    if b == 0:
        return Err(ERR_DIVISION_BY_ZERO)
    return Ok(a / b)


def element_at(items: Sequence[T], index: int) -> Result[T]:
    """Return ``items[index]`` without negative indexing from the end."""
    if index < 0 or index >= len(items):
        return Err(ERR_INDEX_OUT_OF_RANGE)
    return Ok(items[index])
