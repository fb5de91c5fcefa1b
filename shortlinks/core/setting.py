"""
Service configuration.

Every value comes from the environment (or a .env file), names are
case-insensitive. DATABASE_URL selects the backend: SQLite out of the box,
PostgreSQL with postgresql+asyncpg://... and the "postgres" extra.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]


class EnvSettingsOptions(Enum):
    """Deployment environments."""
    production = "production"
    staging = "staging"
    development = "dev"


class Settings(BaseSettings):
    """Settings for the short link service."""
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    ENV_SETTING: EnvSettingsOptions = Field(
        default=EnvSettingsOptions.development,
        description="Deployment environment"
    )
    APP_VERSION: str = Field(
        default="1.0",
        description="Version reported by the health check"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR)"
    )

    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./shortlinks.db",
        description="SQLAlchemy async connection URL"
    )
    DATABASE_ECHO: bool = Field(
        default=False,
        description="Log every SQL statement (debugging only)"
    )
    CREATE_TABLES_ON_STARTUP: bool = Field(
        default=True,
        description="Create missing tables on startup (disable when Alembic owns the schema)"
    )

    BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Public origin prepended to codes in short_url"
    )

    CODE_GENERATION_ATTEMPTS: int = Field(
        default=5,
        ge=1,
        description="How many random codes to try before reporting a conflict"
    )
    RESERVED_CODES: list[str] = Field(
        default=["api", "code", "docs", "healthz", "redoc"],
        description="Path segments owned by the router, never usable as codes"
    )


settings = Settings()
