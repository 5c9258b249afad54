"""Exception handlers for the FastAPI application."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.domain.errors import CalorieTrackerError

_logger = logging.getLogger(__name__)


def error_response(
    message: str, status_code: int, details: dict[str, object] | None = None
) -> JSONResponse:
    """Build the standard error body."""
    body: dict[str, object] = {"message": message, "status_code": status_code}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content={"error": body})


async def tracker_error_handler(
    request: Request, exc: CalorieTrackerError
) -> JSONResponse:
    """Render domain errors with their status code."""
    _logger.warning(
        "%s: %s [%s %s]",
        type(exc).__name__,
        exc.message,
        request.method,
        request.url.path,
    )
    return error_response(exc.message, exc.status_code, exc.details)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and hide their internals from clients."""
    _logger.error(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return error_response(
        "An internal server error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the handlers to an app."""
    app.add_exception_handler(CalorieTrackerError, tracker_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
