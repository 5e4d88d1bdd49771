"""Batch execution of tool calls.

Every call goes through the executor's result-wrapped path, so one failure
never aborts the others. Results come back in request order whatever the
completion order. Fan-out is unbounded unless `concurrency` is given.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aui.foundation.core import ExecutionContext, ToolCall, ToolResult
    from aui.runtime.executor import ToolExecutor


async def batch_execute(
    executor: ToolExecutor,
    calls: Sequence[ToolCall | Mapping[str, Any]],
    *,
    ctx: ExecutionContext | None = None,
    context_factory: Callable[[], ExecutionContext] | None = None,
    concurrency: int | None = None,
) -> list[ToolResult]:
    """Execute `calls` concurrently through `executor`.

    Args:
        executor: Executor whose registry and policies apply
        calls: ToolCall instances or wire-shaped mappings
        ctx: Context shared by every call (its cache included); a fresh
            context per call if None
        context_factory: Builds the context for each call when `ctx` is None
        concurrency: Max calls in flight (None = unbounded)

    Example:
        >>> results = await batch_execute(executor, [
        ...     ToolCall(tool_name="add", input={"a": 1, "b": 2}),
        ...     {"id": "2", "toolName": "missing", "input": {}},
        ... ])
        >>> [r.ok for r in results]
        [True, False]
    """
    if not calls:
        return []
    if ctx is not None and context_factory is not None:
        raise ValueError("pass either ctx or context_factory, not both")
    if concurrency is not None and concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    sem = asyncio.Semaphore(concurrency) if concurrency else None

    def context_for_call() -> ExecutionContext | None:
        if ctx is not None or context_factory is None:
            return ctx
        return context_factory()

    async def run_one(call: ToolCall | Mapping[str, Any]) -> ToolResult:
        if sem is None:
            return await executor.execute_call(call, context_for_call())
        async with sem:
            return await executor.execute_call(call, context_for_call())

    tasks = [asyncio.create_task(run_one(c)) for c in calls]
    try:
        return list(await asyncio.gather(*tasks))
    except asyncio.CancelledError:
        for t in tasks:
            t.cancel()
        raise
