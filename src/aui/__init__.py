"""AUI - Typed tool definitions with validation, middleware and policy execution.

Tools are declared once (name, input schema, server handler, optional client
handler, middleware, metadata) and executed through one pipeline that
validates input, picks the handler for the environment, runs middleware, and
applies cache, retry and timeout policies.

Quick Start:
    >>> from pydantic import BaseModel
    >>> from aui import tool, execute
    >>>
    >>> class AddInput(BaseModel):
    ...     a: float
    ...     b: float
    >>>
    >>> add = (
    ...     tool("add")
    ...     .describe("Add two numbers")
    ...     .input(AddInput)
    ...     .execute(lambda inp, ctx: inp.a + inp.b)
    ...     .register()
    ... )
    >>> await execute("add", {"a": 5, "b": 3})
    8.0

Result-wrapped and batch calls:
    >>> from aui import ToolCall, execute_call, execute_batch
    >>> result = await execute_call(ToolCall(tool_name="add", input={"a": 1}))
    >>> result.error.code
    <ErrorCode.INVALID_INPUT: 'INVALID_INPUT'>

Client/server handlers:
    >>> search = (
    ...     tool("search")
    ...     .input(SearchInput)
    ...     .execute(server_search)
    ...     .client_execute(lambda inp, ctx: ctx.cache.get(inp.query))
    ...     .register()
    ... )
    >>> ctx = create_context(is_server=False)
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import (
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

# Config
from .foundation.config import AUISettings, clear_settings_cache, get_settings

# Schema
from .foundation.schema import EmptyInput, Schema, as_schema

# Core
from .foundation.core import (
    ExecutionContext,
    HandlerShape,
    Identity,
    ToolBuilder,
    ToolCall,
    ToolCapability,
    ToolDefinition,
    ToolMetadata,
    ToolResult,
    adapt_handler,
    ai_tool,
    create_context,
    define_tool,
    define_tools,
    simple_tool,
    tool,
)

# Registry
from .foundation.registry import SearchHit, ToolRegistry, get_registry, reset_registry, set_registry

# Cache / fetch capabilities
from .io.cache import CacheStore, MemoryStore
from .io.http import Fetch, HttpFetch

# Middleware
from .runtime.middleware import (
    AuditMiddleware,
    LoggingMiddleware,
    Middleware,
    Next,
    RateLimitExceeded,
    RateLimitMiddleware,
    compose,
    current_tool,
)

# Retry policies
from .runtime.retry import ConstantBackoff, ExponentialBackoff, RetryPolicy

# Execution
from .runtime.executor import (
    ToolExecutor,
    execute,
    execute_batch,
    execute_call,
    get_executor,
    reset_executor,
    set_executor,
)
from .runtime.concurrency import run_sync
from .runtime.observability import configure_logging

# Wire
from .io.wire import capabilities_payload, handle_batch_request, handle_request

__all__ = [
    "__version__",
    # Errors
    "ErrorCode", "FieldError", "ToolError", "AUIError",
    "InputValidationError", "BuildError", "NameConflictError", "NotFoundError",
    "ServerOnlyViolation", "AccessDeniedError", "HandlerError", "MiddlewareError", "ToolTimeoutError",
    # Config
    "AUISettings", "get_settings", "clear_settings_cache",
    # Schema
    "Schema", "EmptyInput", "as_schema",
    # Core
    "ToolDefinition", "ToolMetadata", "ToolCapability", "ToolBuilder", "tool",
    "HandlerShape", "adapt_handler", "ExecutionContext", "Identity", "create_context",
    "ToolCall", "ToolResult", "define_tool", "simple_tool", "ai_tool", "define_tools",
    # Registry
    "ToolRegistry", "SearchHit", "get_registry", "set_registry", "reset_registry",
    # Capabilities
    "CacheStore", "MemoryStore", "Fetch", "HttpFetch",
    # Middleware
    "Middleware", "Next", "compose", "current_tool",
    "LoggingMiddleware", "RateLimitMiddleware", "RateLimitExceeded", "AuditMiddleware",
    # Retry
    "RetryPolicy", "ExponentialBackoff", "ConstantBackoff",
    # Execution
    "ToolExecutor", "execute", "execute_call", "execute_batch",
    "get_executor", "set_executor", "reset_executor", "run_sync", "configure_logging",
    # Wire
    "handle_request", "handle_batch_request", "capabilities_payload",
]
