"""Tool definitions: the sealed, immutable description of one tool.

A `ToolDefinition` is produced by `ToolBuilder.build()` and never mutated
afterwards; `replace()` returns a new definition. Handlers are stored in
canonical shape, `async (input, ctx) -> output`, whatever shape they were
registered with (see `adapt_handler`).
"""

from __future__ import annotations

import asyncio
import dataclasses
import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from aui.foundation.schema import EMPTY_SCHEMA, Schema

if TYPE_CHECKING:
    from aui.runtime.middleware import Middleware

    from .context import ExecutionContext

Handler: TypeAlias = "Callable[[Any, ExecutionContext], Awaitable[Any]]"


class HandlerShape(Enum):
    """Declared call shape of a user handler, chosen at registration time."""

    INPUT_AND_CONTEXT = "input_and_context"  # fn(input, ctx)
    INPUT_ONLY = "input_only"                # fn(input)
    NO_ARGS = "no_args"                      # fn()


def adapt_handler(fn: Callable[..., Any], shape: HandlerShape = HandlerShape.INPUT_AND_CONTEXT) -> Handler:
    """Wrap `fn` into the canonical async `(input, ctx)` handler.

    The adapter is picked from the declared `shape`; the signature is never
    inspected. Coroutine functions are awaited on the loop. Anything else runs
    in a worker thread via `asyncio.to_thread` (context variables are copied
    in), so a blocking handler neither stalls the loop nor outlives its
    deadline; an awaitable it returns is then awaited.
    """
    if not callable(fn):
        raise TypeError(f"Handler must be callable, got {type(fn).__name__}")
    is_async = inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(getattr(fn, "__call__", None))

    match shape:
        case HandlerShape.INPUT_AND_CONTEXT:
            def invoke(input: Any, ctx: ExecutionContext) -> Any:
                return fn(input, ctx)
        case HandlerShape.INPUT_ONLY:
            def invoke(input: Any, ctx: ExecutionContext) -> Any:
                return fn(input)
        case HandlerShape.NO_ARGS:
            def invoke(input: Any, ctx: ExecutionContext) -> Any:
                return fn()
        case _:
            raise ValueError(f"Unknown handler shape: {shape!r}")

    async def handler(input: Any, ctx: ExecutionContext) -> Any:
        result = invoke(input, ctx) if is_async else await asyncio.to_thread(invoke, input, ctx)
        return await result if inspect.isawaitable(result) else result

    handler.__name__ = getattr(fn, "__name__", "handler")
    handler.__qualname__ = getattr(fn, "__qualname__", handler.__name__)
    handler.__wrapped__ = fn  # type: ignore[attr-defined]
    return handler


class ToolMetadata(BaseModel):
    """Execution policy and descriptive metadata.

    Attributes:
        retry: Total attempts for handler/middleware failures (>1 enables retry)
        retry_delay_ms: Base backoff delay, doubled each attempt (default: settings)
        timeout_ms: Per-attempt deadline in milliseconds
        cache: Cache successful results in the context cache
        cache_ttl: Cache entry TTL in seconds (default: store default)
        ai_optimized: Tool is tuned for automated/agentic callers

    Unknown keys are accepted and kept, so integrations can attach flags.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    retry: Annotated[int, Field(ge=1, le=20)] | None = None
    retry_delay_ms: Annotated[float, Field(ge=0)] | None = None
    timeout_ms: Annotated[float, Field(gt=0)] | None = None
    cache: bool = False
    cache_ttl: Annotated[float, Field(gt=0)] | None = None
    ai_optimized: bool = False

    def merged(self, **changes: Any) -> ToolMetadata:
        """New metadata with `changes` applied (revalidated)."""
        return type(self).model_validate({**self.model_dump(), **changes})


class ToolCapability(BaseModel):
    """Serializable capability descriptor for remote/UI discovery."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    has_client_handler: bool = Field(alias="hasClientHandler")
    has_server_handler: bool = Field(alias="hasServerHandler")
    has_render: bool = Field(alias="hasRender")
    has_middleware: bool = Field(alias="hasMiddleware")
    is_server_only: bool = Field(default=False, alias="isServerOnly")
    metadata: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """Sealed description of a tool.

    Built with `ToolBuilder`; `server_handler` is always present.
    """

    name: str
    server_handler: Handler
    input_schema: Schema = EMPTY_SCHEMA
    output_schema: Schema | None = None
    client_handler: Handler | None = None
    middleware: tuple[Middleware, ...] = ()
    is_server_only: bool = False
    description: str | None = None
    tags: frozenset[str] = frozenset()
    metadata: ToolMetadata = field(default_factory=ToolMetadata)
    renderer: object | None = None

    @property
    def has_client_handler(self) -> bool:
        return self.client_handler is not None

    def replace(self, **changes: Any) -> ToolDefinition:
        """New definition with `changes` applied; the original is untouched."""
        if "tags" in changes:
            changes["tags"] = frozenset(changes["tags"])
        if "middleware" in changes:
            changes["middleware"] = tuple(changes["middleware"])
        if isinstance(changes.get("metadata"), Mapping):
            changes["metadata"] = ToolMetadata.model_validate(changes["metadata"])
        return dataclasses.replace(self, **changes)

    def describe(self) -> ToolCapability:
        """Capability descriptor for discovery."""
        return ToolCapability(
            name=self.name,
            description=self.description,
            tags=sorted(self.tags),
            has_client_handler=self.client_handler is not None,
            has_server_handler=True,
            has_render=self.renderer is not None,
            has_middleware=bool(self.middleware),
            is_server_only=self.is_server_only,
            metadata=self.metadata.model_dump(exclude_defaults=True),
        )
