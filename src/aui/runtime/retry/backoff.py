"""Backoff strategies for retry policies.

Provides pluggable delay calculation for retry attempts:
- ExponentialBackoff: Exponential growth with optional jitter (default: plain doubling)
- ConstantBackoff: Fixed delay
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation.

    Attempt numbers are 0-indexed (delay before the first retry = attempt 0).
    """

    def delay(self, attempt: int) -> float:
        """Delay in seconds before the retry following failed `attempt`."""
        ...


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff with optional jitter.

    Delay = min(base * (multiplier ^ attempt), max_delay) * jitter

    Attributes:
        base: Initial delay in seconds (default: 1.0)
        max_delay: Maximum delay cap in seconds (default: 30.0)
        multiplier: Exponential growth factor (default: 2.0)
        jitter: Randomize 0.5-1.5x (default: False)
    """

    base: float = 1.0
    max_delay: float = 30.0
    multiplier: float = 2.0
    jitter: bool = False

    def delay(self, attempt: int) -> float:
        d = min(self.base * (self.multiplier ** attempt), self.max_delay)
        return d * (0.5 + random.random()) if self.jitter else d


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between retries.

    Attributes:
        delay_seconds: Fixed delay in seconds (default: 1.0)
    """

    delay_seconds: float = 1.0

    def delay(self, attempt: int) -> float:
        return self.delay_seconds
