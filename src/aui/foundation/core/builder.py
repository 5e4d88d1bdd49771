"""Fluent, stepwise assembly of tool definitions.

Each setter records one field and returns the builder. Nothing is checked
until `build()`, which seals an immutable `ToolDefinition` and fails with
`BuildError` when no server handler was given. `register()` builds and adds
the definition to a registry in one step.

Example:
    >>> class AddInput(BaseModel):
    ...     a: float
    ...     b: float
    >>> add = (
    ...     ToolBuilder("add")
    ...     .describe("Add two numbers")
    ...     .input(AddInput)
    ...     .execute(lambda inp: inp.a + inp.b, shape=HandlerShape.INPUT_ONLY)
    ...     .register()
    ... )
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Self

from aui.foundation.errors import BuildError
from aui.foundation.schema import as_schema

from .definition import Handler, HandlerShape, ToolDefinition, ToolMetadata, adapt_handler

if TYPE_CHECKING:
    from aui.foundation.registry import ToolRegistry
    from aui.foundation.schema import Schema
    from aui.runtime.middleware import Middleware


class ToolBuilder:
    """Accumulates definition fields; `build()` seals them."""

    __slots__ = (
        "_name", "_description", "_input", "_output", "_server", "_client",
        "_middleware", "_server_only", "_tags", "_metadata", "_renderer",
    )

    def __init__(self, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise BuildError("Tool name must be a non-empty string")
        self._name = name.strip()
        self._description: str | None = None
        self._input: Schema | None = None
        self._output: Schema | None = None
        self._server: Handler | None = None
        self._client: Handler | None = None
        self._middleware: list[Middleware] = []
        self._server_only = False
        self._tags: set[str] = set()
        self._metadata: dict[str, Any] = {}
        self._renderer: object | None = None

    @property
    def name(self) -> str:
        return self._name

    def describe(self, description: str) -> Self:
        self._description = description
        return self

    def input(self, schema: object) -> Self:
        """Input shape: a BaseModel subclass, any annotation, or a Schema."""
        self._input = as_schema(schema)
        return self

    def output(self, schema: object) -> Self:
        """Output shape (informational only, never enforced)."""
        self._output = as_schema(schema)
        return self

    def execute(self, handler: Callable[..., Any], *, shape: HandlerShape = HandlerShape.INPUT_AND_CONTEXT) -> Self:
        """Set the authoritative server handler."""
        self._server = adapt_handler(handler, shape)
        return self

    def client_execute(self, handler: Callable[..., Any], *, shape: HandlerShape = HandlerShape.INPUT_AND_CONTEXT) -> Self:
        """Set the optional client-side handler (used only in client contexts)."""
        self._client = adapt_handler(handler, shape)
        return self

    def middleware(self, *middleware: Middleware) -> Self:
        """Append middleware; first added wraps outermost."""
        self._middleware.extend(middleware)
        return self

    def tag(self, *tags: str) -> Self:
        self._tags.update(tags)
        return self

    def server_only(self, value: bool = True) -> Self:
        self._server_only = value
        return self

    def metadata(self, **values: Any) -> Self:
        self._metadata.update(values)
        return self

    def retry(self, attempts: int, *, delay_ms: float | None = None) -> Self:
        """Retry handler/middleware failures, `attempts` tries in total."""
        self._metadata["retry"] = attempts
        if delay_ms is not None:
            self._metadata["retry_delay_ms"] = delay_ms
        return self

    def timeout(self, ms: float) -> Self:
        self._metadata["timeout_ms"] = ms
        return self

    def cache(self, enabled: bool = True, *, ttl: float | None = None) -> Self:
        self._metadata["cache"] = enabled
        if ttl is not None:
            self._metadata["cache_ttl"] = ttl
        return self

    def render(self, renderer: object) -> Self:
        """Attach an opaque renderer for UI layers; the pipeline never calls it."""
        self._renderer = renderer
        return self

    def build(self) -> ToolDefinition:
        """Seal the definition. Fails if no server handler was set."""
        if self._server is None:
            raise BuildError(f"{self._name} must have an execute handler", tool_name=self._name)
        try:
            metadata = ToolMetadata.model_validate(self._metadata)
        except ValueError as e:
            raise BuildError(f"{self._name} has invalid metadata: {e}", tool_name=self._name) from e
        return ToolDefinition(
            name=self._name,
            server_handler=self._server,
            input_schema=self._input or as_schema(None),
            output_schema=self._output,
            client_handler=self._client,
            middleware=tuple(self._middleware),
            is_server_only=self._server_only,
            description=self._description,
            tags=frozenset(self._tags),
            metadata=metadata,
            renderer=self._renderer,
        )

    def register(self, registry: ToolRegistry | None = None) -> ToolDefinition:
        """Build and register (default registry when none given)."""
        from aui.foundation.registry import get_registry

        definition = self.build()
        (registry if registry is not None else get_registry()).register(definition)
        return definition

    def __repr__(self) -> str:
        return f"ToolBuilder({self._name!r})"


def tool(name: str) -> ToolBuilder:
    """Start a new tool definition."""
    return ToolBuilder(name)
