"""
Application settings with validation using pydantic-settings.

Settings are built once by the app factory and passed down explicitly;
nothing in the package reads a module-level settings instance.
"""
from typing import Optional
from urllib.parse import quote_plus
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gigaeats.app.core import constants


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database configuration
    DATABASE_URL: Optional[str] = Field(default=None, description="Full SQLAlchemy URL, overrides DB_* fields")
    DB_USER: str = Field(default="postgres", description="PostgreSQL username")
    DB_PASSWORD: str = Field(default="", description="PostgreSQL password")
    DB_NAME: str = Field(default="gigaeats", description="PostgreSQL database name")
    DB_HOST: str = Field(default="localhost", description="PostgreSQL host")
    DB_PORT: str = Field(default="5432", description="PostgreSQL port")
    DB_POOL_SIZE: int = Field(default=10, description="Database connection pool size")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Database max overflow connections")
    DB_POOL_RECYCLE: int = Field(default=3600, description="Database connection recycle time (seconds)")

    # Redis configuration
    REDIS_HOST: str = Field(default="localhost", description="Redis host")
    REDIS_PORT: int = Field(default=6379, description="Redis port")
    REDIS_DB: int = Field(default=0, description="Redis database number")

    # Environment
    ENVIRONMENT: str = Field(default="production", description="Environment: development or production")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Order history
    TIMEZONE: str = Field(default="Asia/Kuala_Lumpur", description="Zone used to decide what 'today' is")
    MISSING_TIMESTAMP_POLICY: str = Field(
        default="skip",
        description="What to do with orders lacking the anchor timestamp: skip or raise",
    )
    HISTORY_DEFAULT_LIMIT: int = Field(default=constants.HISTORY_DEFAULT_LIMIT, description="Default page size for order history")
    HISTORY_MAX_LIMIT: int = Field(default=constants.HISTORY_MAX_LIMIT, description="Largest page size a caller may request")
    FILTER_PREFERENCE_TTL: int = Field(
        default=30 * 24 * 3600,
        description="How long saved history filters live in Redis (seconds)",
    )

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        if v not in ("development", "production"):
            raise ValueError("ENVIRONMENT must be 'development' or 'production'")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown TIMEZONE '{v}'")
        return v

    @field_validator("MISSING_TIMESTAMP_POLICY")
    @classmethod
    def validate_missing_timestamp_policy(cls, v: str) -> str:
        v = v.lower()
        if v not in ("skip", "raise"):
            raise ValueError("MISSING_TIMESTAMP_POLICY must be 'skip' or 'raise'")
        return v

    @property
    def db_url(self) -> str:
        """Get database URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = quote_plus(self.DB_PASSWORD)
        return f"postgresql+asyncpg://{self.DB_USER}:{password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT == "production"

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.TIMEZONE)


def get_settings() -> Settings:
    """Build settings from the environment."""
    return Settings()
