"""Retry policy for tool execution.

Retries the whole middleware+handler invocation on failures that happen
after the chain started (HandlerError, MiddlewareError, ToolTimeoutError).
Validation, resolution and access errors are never retried. Retried
handlers must be idempotent.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Annotated, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from aui.foundation.config import get_settings
from aui.foundation.errors import RETRYABLE_ERRORS

from .backoff import Backoff, ConstantBackoff, ExponentialBackoff

if TYPE_CHECKING:
    from aui.foundation.config import RetrySettings

logger = logging.getLogger("aui.retry")

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """Configurable retry policy.

    Attributes:
        max_attempts: Total attempts including the first (1 = no retry)
        backoff: Backoff strategy for delay calculation
        retry_on: Exception types that trigger a retry

    Example:
        >>> policy = RetryPolicy(max_attempts=3, backoff=ExponentialBackoff(base=0.5))
        >>> await execute_with_retry(lambda: call_api(), policy, "weather")
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    max_attempts: Annotated[int, Field(ge=1, le=20)] = 3
    backoff: Backoff = Field(default_factory=ExponentialBackoff, repr=False)
    retry_on: tuple[type[BaseException], ...] = RETRYABLE_ERRORS

    @classmethod
    def from_settings(cls, attempts: int, delay_ms: float | None = None, settings: RetrySettings | None = None) -> RetryPolicy:
        """Policy from settings; `delay_ms` overrides the base delay.

        `strategy="constant"` waits the base delay before every retry instead
        of growing it.
        """
        cfg = settings or get_settings().retry
        base_ms = cfg.base_delay_ms if delay_ms is None else delay_ms
        backoff: Backoff
        if cfg.strategy == "constant":
            backoff = ConstantBackoff(min(base_ms, cfg.max_delay_ms) / 1000)
        else:
            backoff = ExponentialBackoff(
                base=base_ms / 1000, max_delay=cfg.max_delay_ms / 1000,
                multiplier=cfg.multiplier, jitter=cfg.jitter,
            )
        return cls(max_attempts=attempts, backoff=backoff)

    def should_retry(self, exc: BaseException, attempt: int) -> bool:
        """Whether to try again after `exc` on 0-indexed `attempt`."""
        return attempt + 1 < self.max_attempts and isinstance(exc, self.retry_on)

    def get_delay(self, attempt: int) -> float:
        return self.backoff.delay(attempt)


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    tool_name: str,
) -> T:
    """Run `operation`, retrying per policy with backoff sleeps in between.

    The last failure propagates unchanged once attempts are exhausted or the
    error is not retryable.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as e:
            if not policy.should_retry(e, attempt):
                raise
            delay = policy.get_delay(attempt)
            logger.warning(
                f"[{tool_name}] Attempt {attempt + 1}/{policy.max_attempts} failed: {e}. "
                f"Retrying in {delay:.2f}s"
            )
            await asyncio.sleep(delay)
            attempt += 1
