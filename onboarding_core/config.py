"""
Centralized configuration management for the onboarding core.

This module provides a unified configuration system with support for:
- Environment variables
- Runtime configuration
- Validation using Pydantic
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .constants import EnvironmentVariable, LogLevel, Timeouts


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class DatabaseSettings(BaseModel):
    """Database connection configuration."""

    connection_string: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.DATABASE_URL.value, "sqlite:///./onboarding.db"
        ),
        description="Database connection string",
    )
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.LOG_LEVEL.value, LogLevel.INFO.value),
        description="Logging level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class DispatcherConfig(BaseModel):
    """Configuration for the outbound callback dispatcher."""

    timeout: float = Field(
        default_factory=lambda: float(
            os.getenv(EnvironmentVariable.CALLBACK_TIMEOUT.value, str(Timeouts.CALLBACK_REQUEST))
        ),
        gt=0,
        description="Request timeout in seconds",
    )
    verify_ssl: bool = Field(
        default_factory=lambda: _env_flag(EnvironmentVariable.CALLBACK_VERIFY_SSL.value, "true"),
        description="Verify TLS certificates of callback endpoints",
    )


class RegistryConfig(BaseModel):
    """Configuration for the category registry."""

    preserve_ids: bool = Field(
        default_factory=lambda: _env_flag(EnvironmentVariable.REGISTRY_PRESERVE_IDS.value, "true"),
        description="Keep ids of unchanged entries when the entry list is resubmitted",
    )


class SecurityConfig(BaseModel):
    """Security-related configuration."""

    encryption_key: Optional[str] = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.ENCRYPTION_KEY.value),
        description="Symmetric key used for pgcrypto encryption of stored secrets",
    )


class AppConfig(BaseModel):
    """Main application configuration."""

    environment: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.APP_ENV.value, "development"),
        description="Application environment",
    )
    debug: bool = Field(
        default_factory=lambda: _env_flag(EnvironmentVariable.DEBUG.value, "false"),
        description="Debug mode",
    )

    # Sub-configurations
    database: DatabaseSettings = Field(
        default_factory=DatabaseSettings, description="Database configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    dispatcher: DispatcherConfig = Field(
        default_factory=DispatcherConfig, description="Callback dispatcher configuration"
    )
    registry: RegistryConfig = Field(
        default_factory=RegistryConfig, description="Registry configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
