"""Retry policies and backoff strategies."""

from .backoff import Backoff, ConstantBackoff, ExponentialBackoff
from .policy import RetryPolicy, execute_with_retry

__all__ = ["Backoff", "ConstantBackoff", "ExponentialBackoff", "RetryPolicy", "execute_with_retry"]
