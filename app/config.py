"""Application configuration via pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Booking Service"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    workers: int = 4

    # Database
    postgres_host: str = "postgres"
    postgres_port: int = 5432
    postgres_user: str = "booking"
    postgres_password: str = Field(default="booking123")
    postgres_db: str = "bookingdb"
    db_pool_size: int = 10
    db_max_overflow: int = 5
    database_url_override: Optional[str] = None  # e.g. sqlite+aiosqlite for local runs

    @computed_field
    @property
    def database_url(self) -> str:
        """Async database connection URL."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field
    @property
    def sync_database_url(self) -> str:
        """Sync PostgreSQL connection URL for Alembic."""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Sibling services
    identity_service_url: str = "http://user-service:5003"
    notification_service_url: str = "http://notification-service:5002"
    notification_created_path: str = "/notify/reserva"
    notification_cancelled_path: str = "/notify/cancelacion"
    http_timeout_seconds: float = 5.0

    # Booking rules
    booking_retention_cap: int = Field(default=5, ge=0)
    upcoming_limit: int = Field(default=5, ge=1)
    display_timezone: str = "America/Guayaquil"

    # Background dispatch
    dispatch_drain_timeout_seconds: float = 10.0

    # CORS
    cors_origins: List[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
