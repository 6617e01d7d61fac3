"""
Structured logging for the Issue Tracker.

Every entry is a structlog event dict. Request-scoped values (request_id,
project, operation) live in contextvars so that log calls deep in the
service and repository layers carry them without passing them around.

Output is a console line in development and one JSON object per line
elsewhere.
"""

import logging
import sys
import time
from collections.abc import Callable, MutableMapping
from functools import lru_cache, wraps
from typing import Any, TypeVar

import structlog
from structlog.types import EventDict, Processor

F = TypeVar("F", bound=Callable[..., Any])

SERVICE_NAME = "issue_tracker"


def _add_service_name(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _renderer(json_logs: bool) -> list[Processor]:
    if json_logs:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=False, exception_formatter=structlog.dev.plain_traceback)]


def _json_logs_default() -> bool:
    from .config import get_settings

    settings = get_settings()
    return not (settings.debug or settings.env.lower() == "development")


@lru_cache(maxsize=1)
def configure_logging(level: str = "INFO", json_logs: bool | None = None) -> None:
    """
    Configure structlog on top of the stdlib root logger. Runs once per process.

    Args:
        level: Root log level name.
        json_logs: Force the JSON renderer on or off. Defaults to JSON outside
            development.
    """
    if json_logs is None:
        json_logs = _json_logs_default()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            _add_service_name,
            *_renderer(json_logs),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


# =============================================================================
# Request-scoped context
# =============================================================================


def bind_context(**values: Any) -> None:
    structlog.contextvars.bind_contextvars(**values)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """
    Bind values for the duration of a block, restoring what was there before.

    Usage:
        with LogContext(project="apitest", operation="update"):
            logger.info("issue_updated")  # carries project and operation
    """

    def __init__(self, **values: Any):
        self.values = values
        self._previous: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        current = structlog.contextvars.get_contextvars()
        self._previous = {key: current[key] for key in self.values if key in current}
        bind_context(**self.values)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        unbind_context(*self.values)
        if self._previous:
            bind_context(**self._previous)
        return False


def log_timing(operation: str) -> Callable[[F], F]:
    """Log the wall time of each call at debug level, whether it returns or raises."""

    def decorator(func: F) -> F:
        logger = get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            outcome = "ok"
            try:
                return func(*args, **kwargs)
            except Exception as e:
                outcome = type(e).__name__
                raise
            finally:
                logger.debug(
                    "operation_timed",
                    operation=operation,
                    outcome=outcome,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )

        return wrapper  # type: ignore[return-value]

    return decorator


# =============================================================================
# ASGI
# =============================================================================


class RequestLoggingMiddleware:
    """
    Log one request_complete event per HTTP request.

    Runs inside RequestIDMiddleware, so the request_id is already bound.
    4xx responses log at warning and 5xx at error.
    """

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            if status_code >= 500:
                log = self.logger.error
            elif status_code >= 400:
                log = self.logger.warning
            else:
                log = self.logger.info
            log(
                "request_complete",
                method=scope.get("method", ""),
                path=scope.get("path", ""),
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
    "log_timing",
    "RequestLoggingMiddleware",
]
