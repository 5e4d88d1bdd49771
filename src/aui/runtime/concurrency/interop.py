"""Sync/async interoperability.

`run_sync` drives a coroutine to completion from synchronous code:
    - No running loop → asyncio.run()
    - Inside a running loop (Jupyter, an async web framework) → a helper
      thread with its own event loop, since the current loop cannot be
      re-entered

Example:
    >>> result = run_sync(executor.execute("add", {"a": 5, "b": 3}))
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Coroutine
from typing import TypeVar

T = TypeVar("T")


def run_sync(coro: Coroutine[object, object, T]) -> T:
    """Run async coroutine from synchronous context."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    return _run_in_thread_loop(coro)


def _run_in_thread_loop(coro: Coroutine[object, object, T]) -> T:
    """Run coroutine in a new thread with its own event loop."""
    result: T | None = None
    error: BaseException | None = None

    def runner() -> None:
        nonlocal result, error
        try:
            result = asyncio.run(coro)
        except BaseException as e:
            error = e

    thread = threading.Thread(target=runner, name="aui-run-sync", daemon=True)
    thread.start()
    thread.join()

    if error is not None:
        raise error
    return result  # type: ignore[return-value]
