"""Result values returned by collaborators instead of raising."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic
from typing import TypeVar
from typing import Union

from errchain.core.errors import ChainError
from errchain.core.errors import is_error

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: ChainError

    def __post_init__(self) -> None:
        if not is_error(self.error):
            raise TypeError(f"Err only wraps error values, got {type(self.error).__name__}")


Result = Union[Ok[T], Err]
