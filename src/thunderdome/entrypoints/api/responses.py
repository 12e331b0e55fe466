"""JSON response envelope and exception handlers.

Every API response, success or failure, uses the same envelope::

    {"success": true, "error": "", "data": ..., "meta": {}}
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from thunderdome.core.exceptions import (
    ECONFLICT,
    EINTERNAL,
    EINVALID,
    ENOTFOUND,
    EUNAUTHORIZED,
    ThunderdomeError,
)

logger = structlog.get_logger()

DataT = TypeVar("DataT")

INTERNAL_ERROR_MESSAGE = "Internal Error"

# Status used when a ThunderdomeError escapes a route without an explicit one
STATUS_BY_CODE = {
    EINVALID: status.HTTP_400_BAD_REQUEST,
    EUNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ENOTFOUND: status.HTTP_404_NOT_FOUND,
    ECONFLICT: status.HTTP_409_CONFLICT,
    EINTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class Envelope(BaseModel, Generic[DataT]):
    """Standard JSON response body."""

    success: bool = True
    error: str = ""
    data: DataT | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


def error_message(error: Exception | str) -> str:
    """Return the client-safe message for an error."""
    if isinstance(error, ThunderdomeError):
        return error.message
    if isinstance(error, str):
        return error
    return INTERNAL_ERROR_MESSAGE


class ApiFailure(HTTPException):
    """An HTTP failure with an explicit status and its underlying error."""

    def __init__(
        self,
        status_code: int,
        error: Exception | str,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize ApiFailure.

        Args:
            status_code: HTTP status to respond with.
            error: Underlying error; only its client-safe message is sent.
            headers: Optional response headers.
        """
        super().__init__(status_code=status_code, detail=error_message(error), headers=headers)
        self.error = error


@contextmanager
def failure_on_error(status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> Iterator[None]:
    """Re-raise ThunderdomeError as an ApiFailure with the given status.

    Usage:
        with failure_on_error():
            department = await repo.get_department(department_id)
    """
    try:
        yield
    except ThunderdomeError as e:
        raise ApiFailure(status_code, e) from e


def status_for_error(
    error: ThunderdomeError, default: int = status.HTTP_500_INTERNAL_SERVER_ERROR
) -> int:
    """Return 400 for invalid-input errors and ``default`` for everything else."""
    if error.code == EINVALID:
        return status.HTTP_400_BAD_REQUEST
    return default


def failure_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Build an error envelope response."""
    body = Envelope[Any](success=False, error=message, data={})
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render HTTP exceptions (including ApiFailure) as error envelopes."""
    assert isinstance(exc, StarletteHTTPException)
    if isinstance(exc, ApiFailure) and exc.status_code >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            status_code=exc.status_code,
            error=repr(exc.error),
        )
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return failure_response(exc.status_code, message, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render request validation errors as 400 error envelopes."""
    assert isinstance(exc, RequestValidationError)
    logger.warning("invalid_request", path=request.url.path, errors=jsonable_encoder(exc.errors()))
    return failure_response(status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST")


async def thunderdome_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render uncaught ThunderdomeErrors using their error code."""
    assert isinstance(exc, ThunderdomeError)
    status_code = STATUS_BY_CODE[exc.code]
    if status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=repr(exc))
    return failure_response(status_code, exc.message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope exception handlers on an app."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ThunderdomeError, thunderdome_exception_handler)
