"""Rate limiting middleware for tool execution."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..middleware import Next, current_tool

if TYPE_CHECKING:
    from aui.foundation.core import ExecutionContext


class RateLimitExceeded(RuntimeError):
    """Raised when a sliding window is full."""


@dataclass
class RateLimitMiddleware:
    """Sliding-window rate limiter, per tool or global.

    Raises RateLimitExceeded (surfaced as MiddlewareError) when the window is
    full. The handler does not run for rejected calls.

    Args:
        max_calls: Maximum calls per window
        window_seconds: Time window in seconds
        per_tool: Apply limits per-tool (True) or globally (False)

    Example:
        >>> builder.middleware(RateLimitMiddleware(max_calls=10, window_seconds=60))
    """

    max_calls: int = 10
    window_seconds: float = 60.0
    per_tool: bool = True
    _timestamps: dict[str, deque[float]] = field(default_factory=dict, repr=False)

    def _check_limit(self, key: str) -> bool:
        """Check and update rate limit. Returns True if allowed."""
        now = time.monotonic()
        bucket = self._timestamps.setdefault(key, deque())

        cutoff = now - self.window_seconds
        while bucket and bucket[0] <= cutoff:
            bucket.popleft()

        if len(bucket) >= self.max_calls:
            return False

        bucket.append(now)
        return True

    def reset(self) -> None:
        self._timestamps.clear()

    async def __call__(self, input: Any, ctx: ExecutionContext, next: Next) -> Any:
        name = current_tool() or "?"
        key = name if self.per_tool else "_global_"

        if not self._check_limit(key):
            raise RateLimitExceeded(
                f"Rate limit exceeded for '{name}': {self.max_calls} calls per {self.window_seconds}s"
            )

        return await next()
