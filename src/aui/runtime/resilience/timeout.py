"""Deadline enforcement for one invocation attempt.

`execute_with_timeout` wraps the attempt in `asyncio.wait_for`. On expiry
the awaiting task is cancelled, so an async handler stops at its next
`await`. A synchronous handler runs in a worker thread (see
`adapt_handler`); the thread cannot be interrupted, so it finishes in the
background and its late result is discarded. Async handlers needing cleanup
should handle `asyncio.CancelledError`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from aui.foundation.errors import AUIError, ToolTimeoutError

T = TypeVar("T")


async def execute_with_timeout(
    operation: Callable[[], Awaitable[T]],
    timeout_ms: float | None,
    tool_name: str,
) -> T:
    """Run `operation`, failing with ToolTimeoutError after `timeout_ms` (None = no limit)."""
    if timeout_ms is None:
        return await operation()
    try:
        return await asyncio.wait_for(operation(), timeout=timeout_ms / 1000)
    except TimeoutError as e:
        if isinstance(e, AUIError):
            raise
        raise ToolTimeoutError(tool_name, timeout_ms) from None
