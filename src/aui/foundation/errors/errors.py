"""Standardized error handling for tools.

Provides error codes, the structured `ToolError` diagnostic carried by
result-wrapped calls, and the exception taxonomy raised by the direct API.
Uses Pydantic for validation and serialization of diagnostics.
"""

from __future__ import annotations

import traceback
from enum import StrEnum
from typing import Annotated, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ErrorCode(StrEnum):
    """Machine-readable failure classification."""
    INVALID_INPUT = "INVALID_INPUT"
    BUILD_ERROR = "BUILD_ERROR"
    NAME_CONFLICT = "NAME_CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    SERVER_ONLY = "SERVER_ONLY"
    ACCESS_DENIED = "ACCESS_DENIED"
    HANDLER_ERROR = "HANDLER_ERROR"
    TIMEOUT = "TIMEOUT"
    MIDDLEWARE_ERROR = "MIDDLEWARE_ERROR"
    UNKNOWN = "UNKNOWN"


class FieldError(BaseModel):
    """One rejected field in an input payload."""

    model_config = ConfigDict(frozen=True)

    loc: str = Field(default="", description="Dotted path to the field ('' = whole input)")
    message: str
    type: str = "value_error"

    def __str__(self) -> str:
        return f"{self.loc}: {self.message}" if self.loc else self.message


class ToolError(BaseModel):
    """Structured error response for tool failures.

    Attributes:
        tool_name: Name of the tool that failed
        message: Human-readable error message
        code: Machine-readable error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        details: Optional detailed information (e.g., stack trace)
        field_errors: Per-field diagnostics for rejected input
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "title": "Tool Error",
            "examples": [{
                "tool_name": "weather",
                "message": "Handler failed: upstream returned 503",
                "code": "HANDLER_ERROR",
                "recoverable": True,
            }],
        },
    )

    tool_name: str = Field(default="", description="Name of the tool that produced the error")
    message: Annotated[str, Field(min_length=1)]
    code: ErrorCode = ErrorCode.UNKNOWN
    recoverable: bool = False
    details: str | None = Field(default=None, repr=False)
    field_errors: tuple[FieldError, ...] = ()

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: object) -> object:
        """Accept Exception objects and never allow an empty message."""
        if isinstance(v, Exception):
            v = str(v).strip() or type(v).__name__
        if isinstance(v, str):
            v = v.strip()
        return v or "Unknown error"

    @classmethod
    def from_exception(
        cls,
        tool_name: str,
        exc: BaseException,
        *,
        include_trace: bool = False,
    ) -> Self:
        """Create from an arbitrary exception; AUIError keeps its own code."""
        if isinstance(exc, AUIError):
            return exc.to_error() if exc.tool_name else exc.to_error().model_copy(update={"tool_name": tool_name})
        return cls(
            tool_name=tool_name,
            message=str(exc).strip() or type(exc).__name__,
            code=ErrorCode.UNKNOWN,
            details="".join(traceback.format_exception(exc)) if include_trace else None,
        )

    def render(self) -> str:
        """Format error as a single human-readable line."""
        who = f" ({self.tool_name})" if self.tool_name else ""
        fields = f" [{'; '.join(str(f) for f in self.field_errors)}]" if self.field_errors else ""
        return f"{self.code.value}{who}: {self.message}{fields}"

    __str__ = render


# ─────────────────────────────────────────────────────────────────────────────
# Exception taxonomy
# ─────────────────────────────────────────────────────────────────────────────


class AUIError(Exception):
    """Base for every error raised by the tool pipeline."""

    code: ClassVar[ErrorCode] = ErrorCode.UNKNOWN
    recoverable: ClassVar[bool] = False

    def __init__(self, message: str, *, tool_name: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.tool_name = tool_name

    def to_error(self) -> ToolError:
        """Structured diagnostic for result-wrapped surfaces."""
        return ToolError(tool_name=self.tool_name, message=self.message, code=self.code, recoverable=self.recoverable)


class InputValidationError(AUIError, ValueError):
    """Input rejected by the tool's schema."""

    code = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, *, tool_name: str = "", field_errors: tuple[FieldError, ...] = ()) -> None:
        super().__init__(message, tool_name=tool_name)
        self.field_errors = field_errors

    def to_error(self) -> ToolError:
        return ToolError(
            tool_name=self.tool_name, message=self.message, code=self.code,
            recoverable=False, field_errors=self.field_errors,
        )


class BuildError(AUIError):
    """Tool definition incomplete or invalid at seal time."""

    code = ErrorCode.BUILD_ERROR


class NameConflictError(AUIError):
    """A tool with the same name is already registered."""

    code = ErrorCode.NAME_CONFLICT


class NotFoundError(AUIError, LookupError):
    """No tool registered under the requested name."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Tool '{tool_name}' not found", tool_name=tool_name)


class ServerOnlyViolation(AUIError):
    """A server-only tool was invoked from a client context."""

    code = ErrorCode.SERVER_ONLY

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Tool '{tool_name}' is server-only and cannot run in a client context", tool_name=tool_name)


class AccessDeniedError(AUIError):
    """Executor policy refuses to run the tool."""

    code = ErrorCode.ACCESS_DENIED


class HandlerError(AUIError):
    """A tool handler raised; the original exception is kept as `cause`."""

    code = ErrorCode.HANDLER_ERROR
    recoverable = True

    def __init__(self, tool_name: str, cause: BaseException) -> None:
        super().__init__(f"Handler failed: {str(cause) or type(cause).__name__}", tool_name=tool_name)
        self.cause = cause
        self.__cause__ = cause


class MiddlewareError(AUIError):
    """A middleware raised on its own, independent of the handler."""

    code = ErrorCode.MIDDLEWARE_ERROR
    recoverable = True

    def __init__(self, tool_name: str, cause: BaseException, middleware: str = "") -> None:
        where = f" in {middleware}" if middleware else ""
        super().__init__(f"Middleware failed{where}: {str(cause) or type(cause).__name__}", tool_name=tool_name)
        self.cause = cause
        self.middleware = middleware
        self.__cause__ = cause


class ToolTimeoutError(AUIError, TimeoutError):
    """Execution deadline exceeded."""

    code = ErrorCode.TIMEOUT
    recoverable = True

    def __init__(self, tool_name: str, timeout_ms: float) -> None:
        super().__init__(f"Execution timed out after {timeout_ms:g}ms", tool_name=tool_name)
        self.timeout_ms = timeout_ms


# Errors surfaced once the middleware chain has started; everything else
# short-circuits before any handler runs and is never retried.
RETRYABLE_ERRORS: tuple[type[AUIError], ...] = (HandlerError, MiddlewareError, ToolTimeoutError)
