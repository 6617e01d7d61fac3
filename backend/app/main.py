"""
FastAPI application entry point.

Uses structured logging from issue_tracker.logging. The database manager is
started in the lifespan and shared by all requests through app.state.
"""

from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from issue_tracker import __version__
from issue_tracker.db import DatabaseManager, db
from issue_tracker.logging import RequestLoggingMiddleware, configure_logging, get_logger

from .config import Settings, get_settings
from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .middleware.security import SecurityHeadersMiddleware
from .routers import issues as issues_router

logger = get_logger("api")


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to limit request body size."""

    def __init__(self, app, max_size_mb: int = 10):
        super().__init__(app)
        self.max_size = max_size_mb * 1024 * 1024  # Convert to bytes
        self.max_size_mb = max_size_mb

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Check Content-Length header if present
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                if int(content_length) > self.max_size:
                    return JSONResponse(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        content={
                            "error": "Request too large",
                            "detail": f"Maximum request size is {self.max_size_mb}MB",
                        },
                    )
            except ValueError:
                pass

        return await call_next(request)


def create_app(settings: Settings | None = None, database: DatabaseManager | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Defaults to the cached environment settings.
        database: Defaults to the process-wide manager. It is initialized in
            the lifespan and reset on shutdown.
    """
    settings = settings or get_settings()
    database = database or db

    configure_logging(level=settings.effective_log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("app_startup", app_name=settings.app_name)
        database.initialize(settings.database_url, timeout_seconds=settings.backend_timeout_seconds)
        database.create_all_tables()
        try:
            yield
        finally:
            database.reset()
            logger.info("app_shutdown")

    app = FastAPI(
        title=settings.app_name,
        description="RESTful API to manage and maintain lists of bugs and feature requests.",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(RequestSizeLimitMiddleware, max_size_mb=settings.max_request_size_mb)

    docs_paths = tuple(path for path in (app.docs_url, app.redoc_url, app.openapi_url) if path)
    app.add_middleware(
        SecurityHeadersMiddleware,
        is_production=settings.is_production,
        docs_paths=docs_paths,
    )

    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Outermost, so every log entry of the request carries its id
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    def health_check():
        """
        Health check endpoint (liveness probe).

        Returns minimal information to avoid exposing infrastructure details.
        """
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    def readiness_check():
        """
        Readiness check endpoint.

        Returns 200 when the storage backend answers, 503 otherwise.
        """
        db_health = database.health_check()
        checks = {"database": db_health["healthy"]}

        if not db_health["healthy"]:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": checks},
            )

        return {"status": "ready", "checks": checks, "pool": database.get_pool_status()}

    app.include_router(issues_router.router, prefix=settings.api_prefix)

    return app


app = create_app()
