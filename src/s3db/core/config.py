"""Configuration management for S3DB.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is only read where a
backend is built or logging is configured; databases, collections and records
receive their backend explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Store configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="S3DB_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "s3db"
    environment: Literal["development", "production", "testing"] = "development"

    # Storage Settings
    storage_backend: Literal["file", "s3"] = "file"
    storage_path: str = Field(
        default="s3db_data",
        description="Root directory for the file backend",
    )

    # Object Storage Settings
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_access_key_id: str | None = None
    s3_secret_access_key: str | None = None
    s3_endpoint_url: str | None = None
    s3_prefix: str = ""

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("storage_path")
    @classmethod
    def strip_storage_path(cls, v: str) -> str:
        """Strip surrounding whitespace from the storage path."""
        return v.strip()

    @field_validator("s3_prefix")
    @classmethod
    def normalize_s3_prefix(cls, v: str) -> str:
        """Drop leading and trailing slashes from the key prefix."""
        return v.strip().strip("/")

    @model_validator(mode="after")
    def validate_s3_bucket(self) -> "Settings":
        """Require a bucket when the object storage backend is selected."""
        if self.storage_backend == "s3" and not self.s3_bucket:
            raise ValueError("storage_backend 's3' requires s3_bucket to be set")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
