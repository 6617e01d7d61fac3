"""
Application configuration using Pydantic settings.

Usage:
    from issue_tracker.config import get_settings
    settings = get_settings()
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and .env file.

    The storage backend is selected by DATABASE_URL. Any SQLAlchemy URL works;
    SQLite is the default for local development.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # App settings
    app_name: str = "Issue Tracker"
    api_prefix: str = "/api"
    debug: bool = Field(default=False, validation_alias="DEBUG")
    env: str = Field(default="development", validation_alias="ENV")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Database
    database_url: str = Field(default="sqlite:///issue_tracker.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")

    # Upper bound for a single backend round-trip (pool checkout, lock wait, statement)
    backend_timeout_seconds: float = Field(default=5.0, validation_alias="BACKEND_TIMEOUT_SECONDS")

    # Comma-separated project names; empty accepts any project
    allowed_projects: str = Field(default="", validation_alias="ALLOWED_PROJECTS")

    # HTTP
    cors_allowed_origins: str = Field(default="*", validation_alias="CORS_ALLOWED_ORIGINS")
    max_request_size_mb: int = Field(default=10, validation_alias="MAX_REQUEST_SIZE_MB")

    @field_validator("backend_timeout_seconds")
    @classmethod
    def validate_backend_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("BACKEND_TIMEOUT_SECONDS must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown LOG_LEVEL '{v}'")
        return level

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "prod")

    @property
    def effective_log_level(self) -> str:
        """DEBUG wins over LOG_LEVEL when debug mode is on."""
        return "DEBUG" if self.debug else self.log_level

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    @property
    def allowed_projects_set(self) -> frozenset[str]:
        """Parse the project allow-list. Empty means unrestricted."""
        return frozenset(p.strip() for p in self.allowed_projects.split(",") if p.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
