"""Error codes, structured diagnostics and the exception taxonomy."""

from .errors import (
    RETRYABLE_ERRORS,
    AccessDeniedError,
    AUIError,
    BuildError,
    ErrorCode,
    FieldError,
    HandlerError,
    InputValidationError,
    MiddlewareError,
    NameConflictError,
    NotFoundError,
    ServerOnlyViolation,
    ToolError,
    ToolTimeoutError,
)

__all__ = [
    "ErrorCode", "FieldError", "ToolError",
    "AUIError", "InputValidationError", "BuildError", "NameConflictError", "NotFoundError",
    "ServerOnlyViolation", "AccessDeniedError", "HandlerError", "MiddlewareError", "ToolTimeoutError",
    "RETRYABLE_ERRORS",
]
