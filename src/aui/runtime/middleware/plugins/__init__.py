"""Built-in middleware plugins for common cross-cutting concerns."""

from .audit import AuditEntry, AuditMiddleware
from .logging import LoggingMiddleware
from .rate_limit import RateLimitExceeded, RateLimitMiddleware

__all__ = [
    "AuditEntry",
    "AuditMiddleware",
    "LoggingMiddleware",
    "RateLimitExceeded",
    "RateLimitMiddleware",
]
