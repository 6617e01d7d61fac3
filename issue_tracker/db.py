"""
Database Management Layer.

Provides a DatabaseManager that owns the storage backend for the process:
- Connection pooling (QueuePool, or StaticPool for in-memory SQLite)
- Session management with context managers
- Auto-commit/rollback behavior
- Backend-call timeout applied at the driver and pool level

Usage:
    from issue_tracker.db import db

    db.initialize()
    with db.session() as session:
        issue = session.query(Issue).first()
"""

import math
import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from .config import get_settings
from .logging import get_logger

logger = get_logger("database")


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


def _connect_args(url: str, timeout_seconds: float) -> dict[str, Any]:
    """Driver arguments that bound how long one backend call may block."""
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        # check_same_thread: sessions are used from FastAPI's threadpool
        return {"check_same_thread": False, "timeout": timeout_seconds}
    if backend == "postgresql":
        return {
            "connect_timeout": max(1, math.ceil(timeout_seconds)),
            "options": f"-c statement_timeout={int(timeout_seconds * 1000)}",
        }
    return {}


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


class DatabaseManager:
    """
    Database manager with connection pooling and health checks.

    One instance is created per application and shared by every request.
    The engine is built in initialize() and disposed in reset().
    """

    def __init__(self):
        self._initialized = False
        self.engine = None
        self.SessionLocal = None

    def initialize(self, database_url: str | None = None, timeout_seconds: float | None = None) -> None:
        """
        Initialize database connection. Call once at app startup.

        Args:
            database_url: Optional override. Uses settings.database_url if not provided.
            timeout_seconds: Optional override for settings.backend_timeout_seconds.
        """
        if self._initialized:
            return

        settings = get_settings()
        url = database_url or settings.database_url
        timeout = timeout_seconds or settings.backend_timeout_seconds

        if _is_memory_sqlite(url):
            # Every connection to ":memory:" is a separate database
            pool_class: type[StaticPool | QueuePool] = StaticPool
            pool_config = {}
        else:
            pool_class = QueuePool
            pool_config = {
                "pool_size": settings.db_pool_size,
                "max_overflow": settings.db_max_overflow,
                "pool_pre_ping": settings.db_pool_pre_ping,
                "pool_timeout": timeout,
            }

        self.engine = create_engine(
            url,
            poolclass=pool_class,
            connect_args=_connect_args(url, timeout),
            echo=False,
            **pool_config,
        )

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )

        self._initialized = True
        logger.info("database_initialized", backend=self.engine.url.get_backend_name())

    def create_all_tables(self) -> None:
        """Create all tables defined by models."""
        self._ensure_initialized()
        # Models must be imported so they register on Base.metadata
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions with auto-commit/rollback.

        Usage:
            with db.session() as session:
                issue = session.query(Issue).first()
        """
        self._ensure_initialized()
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @property
    def is_initialized(self) -> bool:
        """Check if database manager is initialized."""
        return self._initialized

    def health_check(self) -> dict:
        """
        Perform database health check.

        Returns:
            dict with 'healthy' (bool), 'latency_ms' (float), and 'error' (str or None)
        """
        if not self._initialized:
            return {"healthy": False, "latency_ms": 0, "error": "Database not initialized"}

        start = time.perf_counter()
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            latency = (time.perf_counter() - start) * 1000
            return {"healthy": True, "latency_ms": round(latency, 2), "error": None}
        except Exception as e:
            latency = (time.perf_counter() - start) * 1000
            logger.warning("database_health_check_failed", error=str(e))
            return {"healthy": False, "latency_ms": round(latency, 2), "error": str(e)}

    def get_pool_status(self) -> dict:
        """
        Get connection pool status.

        Returns:
            dict with pool statistics, or a note for in-memory SQLite's single connection
        """
        if not self._initialized:
            return {}

        pool = self.engine.pool
        if isinstance(pool, StaticPool):
            return {"type": "StaticPool", "note": "Single connection (in-memory SQLite)"}

        if isinstance(pool, QueuePool):
            return {
                "type": "QueuePool",
                "size": pool.size(),
                "checked_in": pool.checkedin(),
                "checked_out": pool.checkedout(),
                "overflow": pool.overflow(),
            }

        return {"type": type(pool).__name__}

    def reset(self) -> None:
        """Dispose the engine and return to the uninitialized state."""
        if self.engine is not None:
            self.engine.dispose()
            logger.info("database_disposed")
        self.engine = None
        self.SessionLocal = None
        self._initialized = False

    def _ensure_initialized(self) -> None:
        """Raise error if not initialized."""
        if not self._initialized:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")


# Default process-wide manager
db = DatabaseManager()


__all__ = ["Base", "DatabaseManager", "db"]
