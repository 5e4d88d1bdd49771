"""Tests for middleware composition, short-circuiting and error attribution."""

from __future__ import annotations

from typing import Any

import pytest

from aui import (
    HandlerError,
    InputValidationError,
    MiddlewareError,
    NotFoundError,
    adapt_handler,
    compose,
    create_context,
    current_tool,
)


def recorder(log: list[str], label: str):
    async def mw(input: Any, ctx: Any, next: Any) -> Any:
        log.append(f"{label}-before")
        out = await next()
        log.append(f"{label}-after")
        return out
    mw.__name__ = label
    return mw


def recording_handler(log: list[str], value: Any = "done"):
    async def handler(input: Any, ctx: Any) -> Any:
        log.append("handler")
        return value
    return handler


@pytest.mark.asyncio
@pytest.mark.parametrize("n", [0, 1, 3, 5])
async def test_onion_order(n: int) -> None:
    log: list[str] = []
    chain = compose([recorder(log, f"mw{i}") for i in range(1, n + 1)], recording_handler(log))
    assert await chain(None, create_context()) == "done"
    expected = [f"mw{i}-before" for i in range(1, n + 1)] + ["handler"] + [f"mw{i}-after" for i in range(n, 0, -1)]
    assert log == expected


@pytest.mark.asyncio
async def test_transform_input_and_output() -> None:
    async def add_one(input: int, ctx: Any, next: Any) -> int:
        return await next(input + 1)

    async def times_ten(input: int, ctx: Any, next: Any) -> int:
        return (await next()) * 10

    chain = compose([add_one, times_ten], adapt_handler(lambda i, c: i))
    assert await chain(1, create_context()) == 20


@pytest.mark.asyncio
async def test_short_circuit_skips_inner() -> None:
    log: list[str] = []

    async def cached(input: Any, ctx: Any, next: Any) -> str:
        log.append("cached")
        return "from-cache"

    chain = compose([recorder(log, "outer"), cached, recorder(log, "inner")], recording_handler(log))
    assert await chain(None, create_context()) == "from-cache"
    assert log == ["outer-before", "cached", "outer-after"]


@pytest.mark.asyncio
async def test_handler_exception_becomes_handler_error() -> None:
    async def boom(input: Any, ctx: Any) -> Any:
        raise KeyError("missing")

    chain = compose([recorder([], "passthrough")], boom, tool_name="t")
    with pytest.raises(HandlerError) as exc:
        await chain(None, create_context())
    assert isinstance(exc.value.cause, KeyError)
    assert exc.value.__cause__ is exc.value.cause
    assert exc.value.tool_name == "t"


@pytest.mark.asyncio
async def test_pipeline_error_from_handler_is_wrapped() -> None:
    async def nested(input: Any, ctx: Any) -> Any:
        raise NotFoundError("other-tool")

    chain = compose([], nested, tool_name="t")
    with pytest.raises(HandlerError) as exc:
        await chain(None, create_context())
    assert exc.value.tool_name == "t"
    assert isinstance(exc.value.cause, NotFoundError)


@pytest.mark.asyncio
async def test_pipeline_error_from_middleware_is_wrapped() -> None:
    async def gate(input: Any, ctx: Any, next: Any) -> Any:
        raise InputValidationError("upstream rejected", tool_name="other-tool")

    chain = compose([gate], adapt_handler(lambda i, c: 1), tool_name="t")
    with pytest.raises(MiddlewareError) as exc:
        await chain(None, create_context())
    assert exc.value.tool_name == "t"


@pytest.mark.asyncio
async def test_middleware_own_failure_is_middleware_error() -> None:
    log: list[str] = []

    async def broken(input: Any, ctx: Any, next: Any) -> Any:
        raise RuntimeError("bad config")

    chain = compose([broken], recording_handler(log), tool_name="t")
    with pytest.raises(MiddlewareError) as exc:
        await chain(None, create_context())
    assert exc.value.middleware == "broken"
    assert log == []


@pytest.mark.asyncio
async def test_middleware_failing_after_next() -> None:
    async def post_fail(input: Any, ctx: Any, next: Any) -> Any:
        await next()
        raise ValueError("post-processing")

    chain = compose([post_fail], adapt_handler(lambda i, c: 1))
    with pytest.raises(MiddlewareError):
        await chain(None, create_context())


@pytest.mark.asyncio
async def test_reraised_downstream_error_keeps_classification() -> None:
    seen: list[BaseException] = []

    async def observer(input: Any, ctx: Any, next: Any) -> Any:
        try:
            return await next()
        except Exception as e:
            seen.append(e)
            raise

    async def boom(input: Any, ctx: Any) -> Any:
        raise RuntimeError("handler")

    chain = compose([observer], boom)
    with pytest.raises(HandlerError):
        await chain(None, create_context())
    assert isinstance(seen[0], HandlerError)


@pytest.mark.asyncio
async def test_middleware_can_replace_error() -> None:
    async def fallback(input: Any, ctx: Any, next: Any) -> Any:
        try:
            return await next()
        except HandlerError:
            return "fallback"

    async def boom(input: Any, ctx: Any) -> Any:
        raise RuntimeError("down")

    assert await compose([fallback], boom)(None, create_context()) == "fallback"


def test_current_tool_outside_execution() -> None:
    assert current_tool() is None
