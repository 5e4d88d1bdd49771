"""Configuration management using pydantic-settings."""

from .settings import (
    AUISettings,
    CacheSettings,
    ExecutorSettings,
    HttpSettings,
    LoggingSettings,
    RetrySettings,
    RuntimeSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "AUISettings",
    "CacheSettings",
    "ExecutorSettings",
    "HttpSettings",
    "LoggingSettings",
    "RetrySettings",
    "RuntimeSettings",
    "clear_settings_cache",
    "get_settings",
]
