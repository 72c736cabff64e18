"""Error envelope rendering and exception handler registration."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any
from typing import TypeVar

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from errchain.core.chain import find
from errchain.core.chain import iter_chain
from errchain.core.chain import matches
from errchain.core.errors import APIError
from errchain.core.errors import ChainError
from errchain.core.errors import DatabaseError
from errchain.core.errors import ValidationError
from errchain.core.result import Err
from errchain.core.result import Result
from errchain.core.sentinels import NOT_FOUND_SENTINELS
from errchain.schemas.error import ChainLink
from errchain.schemas.error import DetailValue
from errchain.schemas.error import ErrorDetail
from errchain.schemas.error import ErrorObject
from errchain.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FailureResponse(Exception):
    """Raised by routes to hand one or more error values to the envelope handler.

    ``accumulated`` marks errors collected from independent checks; they are
    always rendered as a validation error list, however many there are.
    """

    def __init__(
        self,
        *errors: ChainError,
        message: str | None = None,
        accumulated: bool = False,
    ) -> None:
        if not errors:
            raise ValueError("FailureResponse needs at least one error")
        super().__init__(message or str(errors[0]))
        self.errors = errors
        self.message = message
        self.accumulated = accumulated


def raise_for_result(result: Result[T]) -> T:
    """Return the value of an ``Ok`` or raise ``FailureResponse`` for an ``Err``."""
    if isinstance(result, Err):
        raise FailureResponse(result.error)
    return result.value


def _build_error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: Sequence[ErrorDetail] | None = None,
    chain: Sequence[ChainLink] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(
        error=ErrorObject(
            code=code,
            message=message,
            details=list(details) if details else None,
            chain=list(chain) if chain else None,
        )
    )
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


def _http_error_code(status_code: int) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        return "not_found"
    if status_code == status.HTTP_400_BAD_REQUEST:
        return "validation_error"
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return "method_not_allowed"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "internal_error"
    return "bad_request"


def classify(err: ChainError) -> tuple[int, str]:
    """Map an error chain to an HTTP status code and envelope code."""
    if any(matches(err, sentinel) for sentinel in NOT_FOUND_SENTINELS):
        return status.HTTP_404_NOT_FOUND, "not_found"

    api_error = find(err, APIError)
    if api_error is not None:
        if api_error.code == status.HTTP_408_REQUEST_TIMEOUT:
            return status.HTTP_504_GATEWAY_TIMEOUT, "upstream_timeout"
        return status.HTTP_502_BAD_GATEWAY, "upstream_error"

    if find(err, DatabaseError) is not None:
        return status.HTTP_500_INTERNAL_SERVER_ERROR, "database_error"
    if find(err, ValidationError) is not None:
        return status.HTTP_400_BAD_REQUEST, "validation_error"
    return status.HTTP_400_BAD_REQUEST, "bad_request"


def _attributes(node: ChainError) -> dict[str, DetailValue]:
    if isinstance(node, ValidationError):
        return {"field": node.field, "message": node.message}
    if isinstance(node, DatabaseError):
        return {"operation": node.operation, "table": node.table}
    if isinstance(node, APIError):
        return {"code": node.code, "message": node.message}
    return {}


def describe_chain(err: ChainError) -> list[ChainLink]:
    """Render every node of ``err`` as a serializable link."""
    links: list[ChainLink] = []
    for node in iter_chain(err):
        links.append(
            ChainLink(
                kind=node.kind,
                message=str(node),
                attributes=_attributes(node),
                details=dict(node.details) if isinstance(node, APIError) and node.details else None,
            )
        )
    return links


def detail_for(err: ChainError) -> ErrorDetail:
    """Summarize one failure as a field/issue pair."""
    validation = find(err, ValidationError)
    field = validation.field if validation is not None else "request"
    return ErrorDetail(field=field, issue=str(err))


def to_error_object(err: ChainError) -> ErrorObject:
    """Build the envelope payload for a single error value."""
    _, code = classify(err)
    details = [detail_for(err)] if find(err, ValidationError) is not None else None
    return ErrorObject(code=code, message=str(err), details=details, chain=describe_chain(err))


async def failure_response_handler(_: Request, exc: FailureResponse) -> JSONResponse:
    """Render returned error values in the shared envelope."""
    if len(exc.errors) == 1 and not exc.accumulated:
        err = exc.errors[0]
        status_code, code = classify(err)
        payload = to_error_object(err)
        return _build_error_response(
            status_code=status_code,
            code=code,
            message=exc.message or payload.message,
            details=payload.details,
            chain=payload.chain,
        )

    return _build_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        code="validation_error",
        message=exc.message or f"{len(exc.errors)} validation errors",
        details=[detail_for(err) for err in exc.errors],
    )


def _validation_details(exc: RequestValidationError) -> list[ErrorDetail]:
    details: list[ErrorDetail] = []
    for issue in exc.errors():
        location = issue.get("loc", ())
        field = _format_location(location)
        message = str(issue.get("msg", "Invalid value"))
        details.append(ErrorDetail(field=field, issue=message))
    return details


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    prefixes = {"body", "query", "path", "header", "cookie"}
    filtered = [str(part) for part in location if part not in prefixes]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI validation errors to the envelope."""
    return _build_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        code="validation_error",
        message="Request validation failed",
        details=_validation_details(exc),
    )


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize HTTP exceptions to the envelope."""
    message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Request failed"
    return _build_error_response(
        status_code=exc.status_code,
        code=_http_error_code(exc.status_code),
        message=message,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping response shape stable."""
    logger.error("Unhandled error for %s %s", request.method, request.url.path, exc_info=exc)
    return _build_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="internal_error",
        message="Internal server error",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all envelope handlers to a FastAPI app instance."""
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(FailureResponse, failure_response_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
