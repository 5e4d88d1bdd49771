"""Shortcut constructors over ToolBuilder.

- `define_tool`: decorator turning a function into a registered definition
- `simple_tool`: name + input schema + single-argument handler
- `ai_tool`: tool preconfigured for agentic callers (retry, optional cache/timeout)
- `define_tools`: several tools from a mapping in one call

Example:
    >>> @define_tool("add", input=AddInput, shape=HandlerShape.INPUT_ONLY)
    ... def add(inp: AddInput) -> float:
    ...     return inp.a + inp.b
    >>> add.name
    'add'
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from .builder import ToolBuilder
from .definition import HandlerShape, ToolDefinition

if TYPE_CHECKING:
    from aui.foundation.registry import ToolRegistry
    from aui.runtime.middleware import Middleware

DEFAULT_AI_RETRY = 3


def _configure(
    builder: ToolBuilder,
    *,
    input: object = None,
    description: str | None = None,
    tags: Iterable[str] = (),
    server_only: bool = False,
    middleware: Iterable[Middleware] = (),
    metadata: Mapping[str, Any] | None = None,
) -> ToolBuilder:
    if input is not None:
        builder.input(input)
    if description:
        builder.describe(description)
    if server_only:
        builder.server_only()
    if metadata:
        builder.metadata(**metadata)
    return builder.tag(*tags).middleware(*middleware)


def define_tool(
    name: str | None = None,
    *,
    input: object = None,
    description: str | None = None,
    tags: Iterable[str] = (),
    server_only: bool = False,
    middleware: Iterable[Middleware] = (),
    shape: HandlerShape = HandlerShape.INPUT_AND_CONTEXT,
    client: Callable[..., Any] | None = None,
    client_shape: HandlerShape | None = None,
    metadata: Mapping[str, Any] | None = None,
    registry: ToolRegistry | None = None,
    register: bool = True,
) -> Callable[[Callable[..., Any]], ToolDefinition]:
    """Decorator building a definition around the decorated server handler.

    Name defaults to the function name; description to the first docstring
    line. The definition is registered unless `register=False`.
    """
    def decorator(fn: Callable[..., Any]) -> ToolDefinition:
        doc = (fn.__doc__ or "").strip().splitlines()
        builder = _configure(
            ToolBuilder(name or fn.__name__),
            input=input,
            description=description or (doc[0].strip() if doc else None),
            tags=tags,
            server_only=server_only,
            middleware=middleware,
            metadata=metadata,
        ).execute(fn, shape=shape)
        if client is not None:
            builder.client_execute(client, shape=client_shape or shape)
        return builder.register(registry) if register else builder.build()
    return decorator


def simple_tool(
    name: str,
    input: object,
    handler: Callable[[Any], Any],
    *,
    description: str | None = None,
    registry: ToolRegistry | None = None,
) -> ToolDefinition:
    """Register a tool whose handler takes only the validated input."""
    builder = _configure(ToolBuilder(name), input=input, description=description)
    return builder.execute(handler, shape=HandlerShape.INPUT_ONLY).register(registry)


def ai_tool(
    name: str,
    handler: Callable[..., Any],
    *,
    input: object = None,
    description: str | None = None,
    shape: HandlerShape = HandlerShape.INPUT_AND_CONTEXT,
    retry: int = DEFAULT_AI_RETRY,
    retry_delay_ms: float | None = None,
    timeout_ms: float | None = None,
    cache: bool = False,
    cache_ttl: float | None = None,
    tags: Iterable[str] = (),
    registry: ToolRegistry | None = None,
) -> ToolDefinition:
    """Register a tool tuned for automated callers: retries by default, optional cache and timeout."""
    builder = _configure(ToolBuilder(name), input=input, description=description, tags=tags)
    builder.execute(handler, shape=shape).retry(retry, delay_ms=retry_delay_ms).cache(cache, ttl=cache_ttl)
    if timeout_ms is not None:
        builder.timeout(timeout_ms)
    return builder.metadata(ai_optimized=True).register(registry)


def define_tools(
    definitions: Mapping[str, Mapping[str, Any]],
    *,
    registry: ToolRegistry | None = None,
) -> dict[str, ToolDefinition]:
    """Register several tools from `{name: {"execute": fn, "input": ..., ...}}`.

    Recognized keys: execute (required), input, description, tags, shape,
    client, server_only, middleware, metadata.
    """
    tools: dict[str, ToolDefinition] = {}
    for name, entry in definitions.items():
        options = dict(entry)
        handler = options.pop("execute", None)
        if handler is None:
            ToolBuilder(name).build()  # raises BuildError
        tools[name] = define_tool(name, registry=registry, **options)(handler)
    return tools
