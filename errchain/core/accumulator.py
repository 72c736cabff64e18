"""Collector for independent failures reported together."""

from __future__ import annotations

from collections.abc import Iterator

from errchain.core.errors import ChainError
from errchain.core.errors import is_error


class ErrorList:
    """Ordered collection of independent failures.

    Use it when several fields are checked and every failure should be
    reported instead of stopping at the first one. Insertion order is kept
    and nothing is deduplicated; an empty list means success.

    Not safe for concurrent ``add`` calls. Callers that share one instance
    across threads must hold their own lock.
    """

    def __init__(self) -> None:
        self._errors: list[ChainError] = []

    def add(self, err: ChainError) -> None:
        """Append ``err`` unconditionally."""
        if not is_error(err):
            raise TypeError(f"ErrorList only accepts error values, got {type(err).__name__}")
        self._errors.append(err)

    def is_empty(self) -> bool:
        return not self._errors

    def to_list(self) -> list[ChainError]:
        """Return a copy of the collected errors in insertion order."""
        return list(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[ChainError]:
        return iter(list(self._errors))

    def __repr__(self) -> str:
        return f"ErrorList({self._errors!r})"
