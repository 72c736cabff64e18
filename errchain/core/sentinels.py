"""Process-wide sentinel errors compared by identity."""

from __future__ import annotations

from collections.abc import Iterator
from types import MappingProxyType

from errchain.core.errors import PlainError


class SentinelRegistry:
    """Append-only registry of named sentinel errors.

    Each ``define`` call creates a fresh ``PlainError``. Two sentinels with the
    same message are still distinct, and membership checks use identity.
    """

    def __init__(self) -> None:
        self._by_name: dict[str, PlainError] = {}

    def define(self, name: str, message: str) -> PlainError:
        """Create and register a sentinel under ``name``."""
        if not name:
            raise ValueError("sentinel name is required")
        if name in self._by_name:
            raise ValueError(f"sentinel {name!r} is already defined")
        sentinel = PlainError(message=message)
        self._by_name[name] = sentinel
        return sentinel

    def get(self, name: str) -> PlainError:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"unknown sentinel {name!r}") from None

    def names(self) -> list[str]:
        return list(self._by_name)

    def as_mapping(self) -> MappingProxyType[str, PlainError]:
        return MappingProxyType(self._by_name)

    def __contains__(self, err: object) -> bool:
        return any(err is sentinel for sentinel in self._by_name.values())

    def __iter__(self) -> Iterator[PlainError]:
        return iter(list(self._by_name.values()))

    def __len__(self) -> int:
        return len(self._by_name)


sentinels = SentinelRegistry()

ERR_NOT_FOUND = sentinels.define("not_found", "not found")
ERR_DIVISION_BY_ZERO = sentinels.define("division_by_zero", "division by zero")
ERR_INVALID_USER_ID = sentinels.define("invalid_user_id", "invalid user ID")
ERR_USER_NOT_FOUND = sentinels.define("user_not_found", "user not found")
ERR_INDEX_OUT_OF_RANGE = sentinels.define("index_out_of_range", "index out of bounds")

NOT_FOUND_SENTINELS: tuple[PlainError, ...] = (ERR_NOT_FOUND, ERR_USER_NOT_FOUND)
