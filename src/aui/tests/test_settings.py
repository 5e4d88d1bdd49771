"""Tests for environment-driven settings and logging configuration."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator

import orjson
import pytest

from aui import (
    RetryPolicy,
    ToolExecutor,
    ToolRegistry,
    clear_settings_cache,
    configure_logging,
    get_settings,
    tool,
)


def test_defaults() -> None:
    settings = get_settings()
    assert settings.runtime.is_server is True
    assert settings.retry.base_delay_ms == 1000
    assert settings.retry.multiplier == 2.0
    assert settings.executor.default_timeout_ms is None
    assert settings.cache.ttl is None
    assert settings.logging.format == "text"


def test_cached_until_cleared(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("AUI_RETRY_BASE_DELAY_MS", "250")
    assert get_settings() is first
    clear_settings_cache()
    assert get_settings().retry.base_delay_ms == 250


def test_retry_strategy_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUI_RETRY_STRATEGY", "constant")
    monkeypatch.setenv("AUI_RETRY_BASE_DELAY_MS", "300")
    clear_settings_cache()
    policy = RetryPolicy.from_settings(3)
    assert [policy.get_delay(i) for i in range(2)] == pytest.approx([0.3, 0.3])


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUI_EXECUTOR_DEFAULT_TIMEOUT_MS", "1500")
    monkeypatch.setenv("AUI_CACHE_MAX_ENTRIES", "10")
    monkeypatch.setenv("AUI_LOG_LEVEL", "debug")
    clear_settings_cache()
    settings = get_settings()
    assert settings.executor.default_timeout_ms == 1500
    assert settings.cache.max_entries == 10
    assert settings.logging.level == "DEBUG"
    assert ToolExecutor().default_timeout_ms == 1500


@pytest.fixture
def aui_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger("aui")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_configure_logging_json(aui_logger: logging.Logger) -> None:
    stream = io.StringIO()
    configure_logging("INFO", "json", stream=stream)
    logging.getLogger("aui.executor").info("hello")
    record = orjson.loads(stream.getvalue().splitlines()[-1])
    assert record["level"] == "INFO"
    assert record["logger"] == "aui.executor"
    assert record["message"] == "hello"


def test_configure_logging_replaces_handler(aui_logger: logging.Logger) -> None:
    configure_logging("INFO", "text", stream=io.StringIO())
    handler = configure_logging("DEBUG", "text", stream=io.StringIO())
    ours = [h for h in aui_logger.handlers if getattr(h, "_aui_handler", False)]
    assert ours == [handler]
    assert aui_logger.level == logging.DEBUG


def test_configure_logging_rejects_format(aui_logger: logging.Logger) -> None:
    with pytest.raises(ValueError):
        configure_logging("INFO", "xml")  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_executor_logs_tool_name(aui_logger: logging.Logger, registry: ToolRegistry) -> None:
    stream = io.StringIO()
    configure_logging("INFO", "json", stream=stream)
    tool("add").execute(lambda i, c: 1).register(registry)
    await ToolExecutor(registry, log_execution=True).execute("add")
    records = [orjson.loads(line) for line in stream.getvalue().splitlines()]
    assert any(r["message"] == "[add] Executing (server)" for r in records)
