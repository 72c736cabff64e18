"""Traversal and inspection of wrapped error chains."""

from __future__ import annotations

from collections.abc import Iterator
import logging
from typing import TypeVar

from errchain.core.config import get_settings
from errchain.core.errors import APIError
from errchain.core.errors import ChainError
from errchain.core.errors import DatabaseError
from errchain.core.errors import ERROR_TYPES
from errchain.core.errors import ValidationError

logger = logging.getLogger(__name__)

V = TypeVar("V")


def iter_chain(err: ChainError, *, max_depth: int | None = None) -> Iterator[ChainError]:
    """Yield ``err`` followed by each cause, visiting at most ``max_depth`` nodes."""
    limit = get_settings().max_chain_depth if max_depth is None else max_depth
    if limit <= 0:
        raise ValueError("max_depth must be positive")

    node: ChainError | None = err
    visited = 0
    while node is not None:
        if visited >= limit:
            logger.warning("Error chain exceeded %d links; traversal stopped", limit)
            return
        yield node
        visited += 1
        node = node.cause


def matches(err: ChainError, target: ChainError, *, max_depth: int | None = None) -> bool:
    """Return whether ``target`` itself (not an equal-looking copy) is in the chain."""
    return any(node is target for node in iter_chain(err, max_depth=max_depth))


def find(err: ChainError, variant: type[V], *, max_depth: int | None = None) -> V | None:
    """Return the closest-to-root node whose variant is exactly ``variant``."""
    if variant not in ERROR_TYPES:
        raise TypeError(f"{variant!r} is not an error variant")
    for node in iter_chain(err, max_depth=max_depth):
        if type(node) is variant:
            return node
    return None


def unwrap(err: ChainError) -> ChainError | None:
    """Return the direct cause of ``err``, or ``None`` for leaf variants."""
    return err.cause


def root_cause(err: ChainError, *, max_depth: int | None = None) -> ChainError:
    """Return the deepest node reachable within the traversal guard."""
    last = err
    for node in iter_chain(err, max_depth=max_depth):
        last = node
    return last


def is_validation_error(err: ChainError) -> bool:
    return find(err, ValidationError) is not None


def is_database_error(err: ChainError) -> bool:
    return find(err, DatabaseError) is not None


def api_error_code(err: ChainError) -> int | None:
    """Return the code of the closest APIError in the chain, if any."""
    api_error = find(err, APIError)
    if api_error is None:
        return None
    return api_error.code
