"""
Custom exception handlers for FastAPI.

Domain errors keep the response shapes of the issue API: plain text for
update/delete failures, a field error list for rejected creates.

Security:
- Request IDs are logged server-side for tracing but NOT exposed in bodies
- Generic error messages for unexpected 500 errors
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

import structlog

from issue_tracker.exceptions import IssueTrackerError, MissingFieldsError
from issue_tracker.logging import get_logger

logger = get_logger("backend.errors")


def _get_request_id() -> str:
    """
    Get the current request ID from context.

    Used for server-side logging only - NOT exposed to clients.
    """
    return structlog.contextvars.get_contextvars().get("request_id", "-")


def _response_payload(detail: str, status_code: int) -> dict:
    return {
        "detail": detail,
        "status_code": status_code,
    }


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(IssueTrackerError)
    async def issue_tracker_error_handler(request: Request, exc: IssueTrackerError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "issue_tracker_error",
            error_type=type(exc).__name__,
            message=exc.message,
            status_code=exc.status_code,
            request_id=_get_request_id(),
        )
        if isinstance(exc, MissingFieldsError):
            return JSONResponse(status_code=exc.status_code, content={"error": exc.errors})
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            request_id=_get_request_id(),
        )
        if exc.status_code == 404:
            return PlainTextResponse("Not Found", status_code=404)
        return JSONResponse(
            status_code=exc.status_code,
            content=_response_payload(str(exc.detail), exc.status_code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc):
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=422,
            content={
                **_response_payload("Validation error", 422),
                "errors": jsonable_errors(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        # Log full details server-side (including request_id for tracing)
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=500,
            content=_response_payload("Internal server error", 500),
        )


def jsonable_errors(errors: list) -> list:
    """Drop non-serializable context (exception objects) from pydantic errors."""
    return [{key: value for key, value in error.items() if key not in ("ctx", "input", "url")} for error in errors]
