"""
Centralized configuration using Pydantic Settings

This module provides validated configuration for the screener using
environment variables and .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class JQuantsSettings(BaseSettings):
    """J-Quants API configuration"""

    model_config = SettingsConfigDict(env_prefix="JQUANTS_", env_file=".env", extra="ignore")

    email: Optional[str] = Field(default=None, description="J-Quants account e-mail")
    password: Optional[str] = Field(default=None, description="J-Quants account password")
    base_url: str = Field(
        default="https://api.jquants.com/v1", description="J-Quants API base URL"
    )
    timeout: int = Field(default=30, description="API request timeout (seconds)")

    # Fan-out: codes fetched concurrently per batch
    batch_size: int = Field(default=10, description="Company codes per fetch batch")

    @field_validator("batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        """Batch size must be a positive integer"""
        if v < 1:
            raise ValueError("batch_size must be >= 1")
        return v

    @property
    def has_credentials(self) -> bool:
        """True when both e-mail and password are configured"""
        return bool(self.email and self.password)


class CacheSettings(BaseSettings):
    """Snapshot cache configuration"""

    model_config = SettingsConfigDict(env_prefix="CACHE_", env_file=".env", extra="ignore")

    directory: Path = Field(default=Path(".cache"), description="Snapshot storage root")


class LoggingSettings(BaseSettings):
    """Logging configuration"""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="console", description="Log format (json or console)")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate format is one of allowed values"""
        allowed = ["json", "console"]
        if v.lower() not in allowed:
            raise ValueError(f"Log format must be one of: {', '.join(allowed)}")
        return v.lower()


class Settings(BaseSettings):
    """Main application settings"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    service_name: str = Field(default="stock-checker", description="Service name")

    # Sub-configurations
    jquants: JQuantsSettings = Field(default_factory=JQuantsSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and reused across the application.

    Returns:
        Settings: Application settings

    Example:
        from stock_checker import get_settings

        settings = get_settings()
        cache_root = settings.cache.directory
    """
    return Settings()
