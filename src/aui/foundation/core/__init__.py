"""Tool definitions, builder, execution context and call envelopes."""

from .builder import ToolBuilder, tool
from .calls import ToolCall, ToolResult
from .context import ExecutionContext, Identity, create_context
from .definition import (
    Handler,
    HandlerShape,
    ToolCapability,
    ToolDefinition,
    ToolMetadata,
    adapt_handler,
)
from .factories import ai_tool, define_tool, define_tools, simple_tool

__all__ = [
    "ToolBuilder", "tool",
    "ToolDefinition", "ToolMetadata", "ToolCapability", "Handler", "HandlerShape", "adapt_handler",
    "ExecutionContext", "Identity", "create_context",
    "ToolCall", "ToolResult",
    "define_tool", "simple_tool", "ai_tool", "define_tools",
]
