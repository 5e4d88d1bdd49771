"""Foundation - Core building blocks for aui.

Contains: errors, config, schema validation, tool definitions, registry.
"""

from __future__ import annotations

__all__ = [
    # Core
    "ToolDefinition", "ToolMetadata", "ToolCapability", "ToolBuilder", "tool",
    "HandlerShape", "adapt_handler", "ExecutionContext", "Identity", "create_context",
    "ToolCall", "ToolResult", "define_tool", "simple_tool", "ai_tool", "define_tools",
    # Errors
    "ErrorCode", "FieldError", "ToolError", "AUIError", "InputValidationError", "BuildError",
    "NameConflictError", "NotFoundError", "ServerOnlyViolation", "AccessDeniedError",
    "HandlerError", "MiddlewareError", "ToolTimeoutError",
    # Schema
    "Schema", "EmptyInput", "as_schema",
    # Registry
    "ToolRegistry", "get_registry", "set_registry", "reset_registry",
    # Config
    "AUISettings", "get_settings", "clear_settings_cache",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("ToolDefinition", "ToolMetadata", "ToolCapability", "ToolBuilder", "tool",
                "HandlerShape", "adapt_handler", "ExecutionContext", "Identity", "create_context",
                "ToolCall", "ToolResult", "define_tool", "simple_tool", "ai_tool", "define_tools"):
        from . import core
        return getattr(core, name)

    if name in ("ErrorCode", "FieldError", "ToolError", "AUIError", "InputValidationError", "BuildError",
                "NameConflictError", "NotFoundError", "ServerOnlyViolation", "AccessDeniedError",
                "HandlerError", "MiddlewareError", "ToolTimeoutError"):
        from . import errors
        return getattr(errors, name)

    if name in ("Schema", "EmptyInput", "as_schema"):
        from . import schema
        return getattr(schema, name)

    if name in ("ToolRegistry", "get_registry", "set_registry", "reset_registry"):
        from . import registry
        return getattr(registry, name)

    if name in ("AUISettings", "get_settings", "clear_settings_cache"):
        from . import config
        return getattr(config, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
