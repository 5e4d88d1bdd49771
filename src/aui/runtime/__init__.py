"""Runtime - Execution machinery for aui.

Contains: middleware, retry, timeouts, executor, batch, sync bridge, logging setup.
"""

from __future__ import annotations

__all__ = [
    # Middleware
    "Middleware", "Next", "compose", "current_tool",
    "LoggingMiddleware", "RateLimitMiddleware", "AuditMiddleware",
    # Retry / resilience
    "RetryPolicy", "ExponentialBackoff", "ConstantBackoff", "execute_with_retry", "execute_with_timeout",
    # Execution
    "ToolExecutor", "get_executor", "set_executor", "reset_executor", "execute", "execute_call", "execute_batch",
    "batch_execute", "run_sync",
    # Observability
    "configure_logging",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("Middleware", "Next", "compose", "current_tool",
                "LoggingMiddleware", "RateLimitMiddleware", "AuditMiddleware"):
        from . import middleware
        return getattr(middleware, name)

    if name in ("RetryPolicy", "ExponentialBackoff", "ConstantBackoff", "execute_with_retry"):
        from . import retry
        return getattr(retry, name)

    if name == "execute_with_timeout":
        from .resilience import execute_with_timeout
        return execute_with_timeout

    if name in ("ToolExecutor", "get_executor", "set_executor", "reset_executor",
                "execute", "execute_call", "execute_batch"):
        from . import executor
        return getattr(executor, name)

    if name == "batch_execute":
        from .batch import batch_execute
        return batch_execute

    if name == "run_sync":
        from .concurrency import run_sync
        return run_sync

    if name == "configure_logging":
        from .observability import configure_logging
        return configure_logging

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
