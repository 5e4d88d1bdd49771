"""Logging middleware for tool execution."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..middleware import Next, current_tool

if TYPE_CHECKING:
    from aui.foundation.core import ExecutionContext

logger = logging.getLogger("aui.middleware")


@dataclass(slots=True)
class LoggingMiddleware:
    """Log tool execution with timing and outcome.

    Logs at INFO level for successful calls, with traceback on exceptions.
    Duration is stored in the context extensions as 'duration_ms'.

    Args:
        log: Logger instance to use (defaults to aui.middleware)
        log_input: Whether to include input in log (default False for privacy)

    Example:
        >>> ToolExecutor(middleware=[LoggingMiddleware(log_input=True)])
    """

    log: logging.Logger = field(default_factory=lambda: logger)
    log_input: bool = False

    async def __call__(self, input: Any, ctx: ExecutionContext, next: Next) -> Any:
        name = current_tool() or "?"
        start = time.perf_counter()

        input_str = f" input={input!r}" if self.log_input else ""
        self.log.info(f"[{name}] Starting{input_str}")

        try:
            output = await next()
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            ctx["duration_ms"] = duration_ms
            self.log.exception(f"[{name}] EXCEPTION ({duration_ms:.1f}ms): {e}")
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        ctx["duration_ms"] = duration_ms
        self.log.info(f"[{name}] OK ({duration_ms:.1f}ms)")
        return output
