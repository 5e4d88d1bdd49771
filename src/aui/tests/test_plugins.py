"""Tests for bundled middleware: logging, rate limiting, audit."""

from __future__ import annotations

import logging

import pytest

from aui import (
    AuditMiddleware,
    ErrorCode,
    Identity,
    LoggingMiddleware,
    MiddlewareError,
    RateLimitExceeded,
    RateLimitMiddleware,
    ToolCall,
    ToolExecutor,
    ToolRegistry,
    create_context,
    tool,
)

from .conftest import AddInput


@pytest.mark.asyncio
async def test_logging_middleware(registry: ToolRegistry, caplog: pytest.LogCaptureFixture) -> None:
    tool("add").input(AddInput).execute(lambda inp, ctx: inp.a + inp.b).middleware(LoggingMiddleware()).register(registry)
    ctx = create_context()
    with caplog.at_level(logging.INFO, logger="aui.middleware"):
        assert await ToolExecutor(registry).execute("add", {"a": 1, "b": 1}, ctx) == 2
    assert "add" in caplog.text
    assert ctx["duration_ms"] >= 0


@pytest.mark.asyncio
async def test_rate_limit_per_tool(registry: ToolRegistry) -> None:
    limiter = RateLimitMiddleware(max_calls=2, window_seconds=60)
    tool("a").execute(lambda i, c: "a").register(registry)
    tool("b").execute(lambda i, c: "b").register(registry)
    executor = ToolExecutor(registry, middleware=[limiter])

    assert await executor.execute("a") == "a"
    assert await executor.execute("a") == "a"
    with pytest.raises(MiddlewareError) as exc:
        await executor.execute("a")
    assert isinstance(exc.value.cause, RateLimitExceeded)
    assert await executor.execute("b") == "b"

    limiter.reset()
    assert await executor.execute("a") == "a"


@pytest.mark.asyncio
async def test_rate_limit_global(registry: ToolRegistry) -> None:
    tool("a").execute(lambda i, c: "a").register(registry)
    tool("b").execute(lambda i, c: "b").register(registry)
    executor = ToolExecutor(registry, middleware=[RateLimitMiddleware(max_calls=1, per_tool=False)])
    await executor.execute("a")
    result = await executor.execute_call(ToolCall(tool_name="b"))
    assert result.error.code == ErrorCode.MIDDLEWARE_ERROR


@pytest.mark.asyncio
async def test_audit_records_success_and_failure(registry: ToolRegistry) -> None:
    audit = AuditMiddleware(max_entries=10)

    def fail(inp, ctx):
        raise RuntimeError("denied")

    tool("ok").execute(lambda i, c: "done").register(registry)
    tool("bad").execute(fail).register(registry)
    executor = ToolExecutor(registry, middleware=[audit])
    ctx = create_context(identity={"user": "u1"})

    await executor.execute("ok", None, ctx)
    await executor.execute_call(ToolCall(tool_name="bad"), ctx)

    ok, bad = audit.entries()
    assert (ok.tool_name, ok.output, ok.ok) == ("ok", "done", True)
    assert ok.identity == Identity(user="u1")
    assert bad.tool_name == "bad" and not bad.ok
    assert "denied" in bad.error
    assert audit.entries("bad") == [bad]
    audit.clear()
    assert audit.entries() == []


@pytest.mark.asyncio
async def test_audit_bounded(registry: ToolRegistry) -> None:
    audit = AuditMiddleware(max_entries=2)
    tool("t").execute(lambda i, c: 1).middleware(audit).register(registry)
    executor = ToolExecutor(registry)
    for _ in range(5):
        await executor.execute("t")
    assert len(audit.entries()) == 2
