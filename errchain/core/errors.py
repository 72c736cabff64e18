"""Error value variants and the wrapping constructor.

Errors are immutable values rather than raised exceptions: collaborators
return them inside ``Err`` and callers inspect them with ``errchain.core.chain``.
The variant set is closed; ``ERROR_TYPES`` lists every member and
``ChainError`` is the matching union.

Equality is identity. Two values with identical fields are still different
errors, which is what sentinel comparison relies on.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import ClassVar
from typing import Union

from pydantic import ValidationError as PydanticValidationError

from errchain.schemas.error import DetailValue
from errchain.schemas.error import details_adapter


def _require_error(value: object, *, owner: str) -> None:
    if not isinstance(value, ERROR_TYPES):
        raise TypeError(f"{owner} cause must be an error value, got {type(value).__name__}")


@dataclass(frozen=True, eq=False)
class ValidationError:
    """Input validation failure for a single field."""

    kind: ClassVar[str] = "validation"

    field: str
    message: str

    @property
    def cause(self) -> None:
        return None

    def headline(self) -> str:
        return f"validation error in field '{self.field}': {self.message}"

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, eq=False)
class DatabaseError:
    """Failure of an operation against a table, carrying the store's own failure."""

    kind: ClassVar[str] = "database"

    operation: str
    table: str
    cause: ChainError = field(repr=False)

    def __post_init__(self) -> None:
        _require_error(self.cause, owner="DatabaseError")

    def headline(self) -> str:
        return f"database error during {self.operation} on table {self.table}"

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, eq=False)
class APIError:
    """Remote-service failure with a numeric code and structured details.

    ``details`` keeps insertion order and only accepts ``str``, ``int``,
    ``float`` and ``bool`` values. It is exposed as a read-only mapping.
    """

    kind: ClassVar[str] = "api"

    code: int
    message: str
    details: Mapping[str, DetailValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.code, bool) or not isinstance(self.code, int):
            raise TypeError("APIError code must be an int")
        try:
            validated = details_adapter.validate_python(dict(self.details))
        except PydanticValidationError as exc:
            raise ValueError(f"APIError details must map str to str, int, float or bool: {exc}") from exc
        object.__setattr__(self, "details", MappingProxyType(validated))

    @property
    def cause(self) -> None:
        return None

    def headline(self) -> str:
        return f"API error {self.code}: {self.message}"

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, eq=False)
class WrappedError:
    """Human-readable context around a causing error."""

    kind: ClassVar[str] = "wrapped"

    context: str
    cause: ChainError = field(repr=False)

    def __post_init__(self) -> None:
        if not self.context:
            raise ValueError("WrappedError context is required")
        _require_error(self.cause, owner="WrappedError")

    def headline(self) -> str:
        return self.context

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, eq=False)
class PlainError:
    """Terminal failure described only by its message."""

    kind: ClassVar[str] = "plain"

    message: str

    def __post_init__(self) -> None:
        if not self.message:
            raise ValueError("PlainError message is required")

    @property
    def cause(self) -> None:
        return None

    def headline(self) -> str:
        return self.message

    def __str__(self) -> str:
        return render(self)


ChainError = Union[ValidationError, DatabaseError, APIError, WrappedError, PlainError]

ERROR_TYPES: tuple[type, ...] = (ValidationError, DatabaseError, APIError, WrappedError, PlainError)


def is_error(value: object) -> bool:
    """Return whether ``value`` belongs to the closed variant set."""
    return isinstance(value, ERROR_TYPES)


def wrap(context: str, cause: ChainError) -> WrappedError:
    """Return a new error adding ``context`` in front of ``cause``."""
    return WrappedError(context=context, cause=cause)


def render(err: ChainError) -> str:
    """Render the full message of ``err``, including every cause down to the root.

    The chain is walked iteratively so arbitrarily deep wrapping never loses
    the innermost text.
    """
    parts: list[str] = []
    node: ChainError | None = err
    while node is not None:
        parts.append(node.headline())
        node = node.cause
    return ": ".join(parts)
