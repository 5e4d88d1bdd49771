"""Environment-based configuration using pydantic-settings.

Provides type-safe defaults for the execution pipeline. Nothing in the
invocation contract requires an environment variable; settings only seed
defaults (context environment flag, retry backoff, cache TTL, logging).

Example:
    >>> from aui.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.base_delay_ms
    1000.0

    # Or with environment variables:
    # AUI_RETRY_BASE_DELAY_MS=250
    # AUI_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeFloat, PositiveFloat, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RuntimeSettings(BaseSettings):
    """Execution environment defaults."""

    model_config = SettingsConfigDict(env_prefix="AUI_RUNTIME_", extra="ignore")

    is_server: bool = Field(default=True, description="Environment flag for new contexts")


class ExecutorSettings(BaseSettings):
    """Executor defaults."""

    model_config = SettingsConfigDict(env_prefix="AUI_EXECUTOR_", extra="ignore")

    default_timeout_ms: PositiveFloat | None = Field(default=None, description="Timeout for tools without their own")
    log_execution: bool = True


class RetrySettings(BaseSettings):
    """Default retry backoff configuration."""

    model_config = SettingsConfigDict(env_prefix="AUI_RETRY_", extra="ignore")

    base_delay_ms: NonNegativeFloat = Field(default=1000.0, description="Delay before the first retry")
    max_delay_ms: NonNegativeFloat = Field(default=30000.0, description="Upper bound for any single delay")
    multiplier: PositiveFloat = Field(default=2.0, description="Exponential growth factor")
    jitter: bool = False
    strategy: Literal["exponential", "constant"] = "exponential"


class CacheSettings(BaseSettings):
    """Context cache configuration."""

    model_config = SettingsConfigDict(env_prefix="AUI_CACHE_", extra="ignore")

    ttl: PositiveFloat | None = Field(default=None, description="Entry TTL in seconds (None = no expiry)")
    max_entries: PositiveInt = Field(default=1000, description="Max entries per context cache")


class HttpSettings(BaseSettings):
    """Default fetch capability configuration."""

    model_config = SettingsConfigDict(env_prefix="AUI_HTTP_", extra="ignore")

    timeout: PositiveFloat = Field(default=30.0, description="Request timeout in seconds")
    follow_redirects: bool = True
    user_agent: str = "aui-fetch/0.1"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="AUI_LOG_", extra="ignore")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "text"] = "text"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class AUISettings(BaseSettings):
    """Root settings.

    Loads configuration from environment variables with AUI_ prefix.

    Example environment variables:
        AUI_RUNTIME_IS_SERVER=false
        AUI_EXECUTOR_DEFAULT_TIMEOUT_MS=30000
        AUI_RETRY_BASE_DELAY_MS=500
        AUI_CACHE_TTL=300
        AUI_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="AUI_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    executor: ExecutorSettings = Field(default_factory=ExecutorSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> AUISettings:
    """Get the process-wide settings instance (cached)."""
    return AUISettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
