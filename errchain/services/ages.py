"""Age parsing and validation collaborators."""

from __future__ import annotations

import re

from errchain.core.config import get_settings
from errchain.core.errors import PlainError
from errchain.core.errors import ValidationError
from errchain.core.errors import wrap
from errchain.core.result import Err
from errchain.core.result import Ok
from errchain.core.result import Result

# Optional sign and ASCII digits only; int() alone would also accept
# whitespace, underscores and non-ASCII digits.
AGE_PATTERN = re.compile(r"[+-]?[0-9]+")


def validate_age(age: int, *, max_age: int | None = None) -> ValidationError | None:
    """Return a validation failure when ``age`` is out of range."""
    limit = get_settings().max_age if max_age is None else max_age
    if age < 0:
        return ValidationError(field="age", message="cannot be negative")
    if age > limit:
        return ValidationError(field="age", message=f"cannot be greater than {limit}")
    return None


def parse_age(text: str) -> Result[int]:
    """Parse a decimal integer age."""
    if AGE_PATTERN.fullmatch(text) is None:
        return Err(PlainError(message=f'parsing "{text}": invalid syntax'))
    try:
        value = int(text)
    except ValueError:
        # Above the interpreter's integer string conversion limit.
        return Err(PlainError(message=f'parsing "{text}": value out of range'))
    return Ok(value)


def parse_and_validate_age(text: str, *, max_age: int | None = None) -> Result[int]:
    """Parse ``text`` and check its range, wrapping whichever step failed."""
    parsed = parse_age(text)
    if isinstance(parsed, Err):
        return Err(wrap(f"failed to parse age '{text}'", parsed.error))

    problem = validate_age(parsed.value, max_age=max_age)
    if problem is not None:
        return Err(wrap("age validation failed", problem))

    return parsed
