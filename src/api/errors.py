"""Exception handlers that translate service errors to HTTP responses."""
from collections.abc import Awaitable, Callable
from typing import cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.domain.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DependencyUnavailableError,
    InternalError,
    ListingServiceError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

HttpExceptionHandler = Callable[[Request, Exception], Response | Awaitable[Response]]

STATUS_BY_ERROR: dict[type[ListingServiceError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    DependencyUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: ListingServiceError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]  # type: ignore[index]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(exc: ListingServiceError) -> dict[str, object]:
    return {"success": False, "error": exc.code, "message": exc.message}


def _handle_service_error(request: Request, exc: ListingServiceError) -> Response:
    status_code = status_for(exc)
    log = logger.warning if status_code < 500 else logger.error
    log(
        "request_failed",
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        error=exc.code,
        message=exc.message,
    )
    return JSONResponse(status_code=status_code, content=error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach one handler per error base class to the FastAPI app."""
    handler = cast(HttpExceptionHandler, _handle_service_error)
    for error_type in (ListingServiceError, *STATUS_BY_ERROR):
        app.add_exception_handler(error_type, handler)
