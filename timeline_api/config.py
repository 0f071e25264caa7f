"""
Application configuration using Pydantic Settings.
Manages all environment variables and settings.
"""
import os
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./timeline_api.db"


class Environment(str, Enum):
    """Application environment modes."""
    DEV = "DEV"
    PRODUCTION = "PRODUCTION"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment only, no .env file
    model_config = SettingsConfigDict(env_file=None, case_sensitive=False)

    environment: Environment = Field(
        default=Environment.DEV,
        description="Application environment: DEV or PRODUCTION"
    )

    # Application
    app_name: str = Field(default="Timeline API")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    @model_validator(mode='after')
    def set_debug_from_environment(self):
        """Set debug mode based on environment if DEBUG is not set explicitly."""
        if 'DEBUG' not in os.environ:
            self.debug = self.environment == Environment.DEV
        return self

    @property
    def is_dev(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEV

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    # Database
    database_url: str = Field(default=DEFAULT_DATABASE_URL)
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)
    db_pool_timeout: int = Field(default=30)
    db_pool_recycle: int = Field(default=1800)

    @field_validator("database_url", mode="before")
    @classmethod
    def coerce_empty_database_url(cls, v: str) -> str:
        if not v or not str(v).strip():
            return DEFAULT_DATABASE_URL
        return v

    # JWT
    jwt_secret_key: str = Field(default="jwt-secret-change-in-production")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=30)

    # Public sharing
    public_base_url: str = Field(
        default="",
        description="Origin used to build public share URLs. Empty means the request base URL."
    )
    share_token_bytes: int = Field(
        default=32,
        ge=16,
        description="Random bytes per share token (16 bytes = 128 bits minimum)"
    )

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True)
    rate_limit_public_per_minute: int = Field(default=30)

    # Logging
    log_dir: str = Field(
        default="/var/log/timeline-api",
        description="Directory for NDJSON log files. Empty disables file logging."
    )
    instance_ip: str = Field(default="", description="Instance identifier for logs (auto-detected if empty)")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Using lru_cache to avoid re-reading the environment on every request.
    """
    return Settings()
