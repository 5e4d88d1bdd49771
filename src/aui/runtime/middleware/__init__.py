"""Middleware system for tool execution hooks.

Provides composable pre/post execution hooks for cross-cutting concerns.
Tool middleware is attached with `ToolBuilder.middleware()`; executor-wide
middleware with `ToolExecutor(middleware=[...])` and wraps outside it.

Example:
    >>> from aui.runtime.middleware import LoggingMiddleware, RateLimitMiddleware
    >>> executor = ToolExecutor(middleware=[LoggingMiddleware()])
    >>> tool("search").middleware(RateLimitMiddleware(max_calls=5)).execute(search).register()
"""

from .middleware import Chain, Middleware, Next, compose, current_tool
from .plugins import (
    AuditEntry,
    AuditMiddleware,
    LoggingMiddleware,
    RateLimitExceeded,
    RateLimitMiddleware,
)

__all__ = [
    # Core
    "Middleware",
    "Next",
    "Chain",
    "compose",
    "current_tool",
    # Plugins
    "AuditEntry",
    "AuditMiddleware",
    "LoggingMiddleware",
    "RateLimitExceeded",
    "RateLimitMiddleware",
]
