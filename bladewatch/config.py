"""
Bladewatch Configuration Module
===============================

Centralized configuration management using Pydantic Settings.

Loads configuration from:
    1. Environment variables
    2. .env file (if present)
    3. Default values

Usage:
    from bladewatch.config import settings

    print(settings.postgres_async_dsn)
    print(settings.sse_heartbeat_interval)

Author: Bladewatch Team
Version: 1.0.0
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Naming convention: UPPER_SNAKE_CASE in env, lower_snake_case in code.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # =========================================================================
    # Application Settings
    # =========================================================================

    app_name: str = Field(default="Bladewatch", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # =========================================================================
    # API Server
    # =========================================================================

    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=4000, description="API server port")
    cors_allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    # =========================================================================
    # PostgreSQL
    # =========================================================================

    postgres_host: str = Field(default="localhost", description="PostgreSQL host")
    postgres_port: int = Field(default=5432, description="PostgreSQL port")
    postgres_db: str = Field(default="bladewatch", description="PostgreSQL database")
    postgres_user: str = Field(default="bladewatch", description="PostgreSQL user")
    postgres_password: str = Field(
        default="bladewatch_change_me",
        description="PostgreSQL password"
    )
    database_url: Optional[str] = Field(
        default=None,
        description="Full async SQLAlchemy URL, overrides the postgres_* settings"
    )

    @property
    def postgres_dsn(self) -> str:
        """Get PostgreSQL connection string."""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def postgres_async_dsn(self) -> str:
        """Get async PostgreSQL connection string for asyncpg."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # =========================================================================
    # Notifications
    # =========================================================================

    notification_send_timeout: float = Field(
        default=2.0,
        gt=0.0,
        description="Per-observer write timeout during broadcast (seconds)"
    )
    sse_heartbeat_interval: float = Field(
        default=25.0,
        gt=0.0,
        description="Interval between SSE keep-alive pings (seconds)"
    )
    sse_queue_size: int = Field(
        default=100,
        ge=1,
        description="Buffered frames per SSE observer before it is dropped"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        Settings instance
    """
    return Settings()


# Convenience alias
settings = get_settings()
