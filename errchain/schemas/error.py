"""Error envelope schemas and value kinds shared by the error model and API handlers."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel
from pydantic import StrictBool
from pydantic import StrictFloat
from pydantic import StrictInt
from pydantic import StrictStr
from pydantic import TypeAdapter

# StrictBool comes first so True is never coerced into an int.
DetailValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]

details_adapter: TypeAdapter[dict[str, DetailValue]] = TypeAdapter(dict[str, DetailValue])


class ErrorDetail(BaseModel):
    """Single field-level validation or domain issue detail."""

    field: str
    issue: str


class ChainLink(BaseModel):
    """One node of a rendered error chain, closest-to-root first."""

    kind: str
    message: str
    attributes: dict[str, DetailValue] = {}
    details: dict[str, DetailValue] | None = None


class ErrorObject(BaseModel):
    """Canonical error payload object."""

    code: str
    message: str
    details: list[ErrorDetail] | None = None
    chain: list[ChainLink] | None = None


class ErrorResponse(BaseModel):
    """Top-level API error response envelope."""

    error: ErrorObject
