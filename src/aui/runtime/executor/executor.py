"""Tool executor: resolution, validation, handler selection and policies.

Per call the executor walks a fixed pipeline:

    resolve → access check → validate → select handler
        → cache lookup → retry(timeout(middleware + handler)) → cache store

Everything before the cache lookup short-circuits: no middleware or handler
runs, and nothing is retried. Two surfaces share the pipeline:

- `execute` / `run` return the output or raise an `AUIError`
- `execute_call` always returns a `ToolResult`

Example:
    >>> executor = ToolExecutor(registry)
    >>> await executor.execute("add", {"a": 5, "b": 3})
    8
    >>> result = await executor.execute_call(ToolCall(tool_name="add", input={"a": 1}))
    >>> result.error.code
    <ErrorCode.INVALID_INPUT: 'INVALID_INPUT'>
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from aui.foundation.config import get_settings
from aui.foundation.core import (
    ExecutionContext,
    Handler,
    ToolCall,
    ToolCapability,
    ToolDefinition,
    ToolResult,
    create_context,
)
from aui.foundation.errors import (
    AccessDeniedError,
    AUIError,
    InputValidationError,
    ServerOnlyViolation,
    ToolError,
)
from aui.foundation.registry import ToolRegistry, get_registry
from aui.foundation.schema import format_validation_error
from aui.io.cache import cache_lookup, make_cache_key
from aui.runtime.batch import batch_execute
from aui.runtime.concurrency import run_sync
from aui.runtime.middleware import compose
from aui.runtime.middleware.middleware import _current_tool
from aui.runtime.resilience import execute_with_timeout
from aui.runtime.retry import RetryPolicy, execute_with_retry

if TYPE_CHECKING:
    from aui.runtime.middleware import Middleware

logger = logging.getLogger("aui.executor")

ToolRef = str | ToolDefinition


def select_handler(definition: ToolDefinition, ctx: ExecutionContext) -> Handler:
    """Pick the handler for the context's environment.

    Client contexts use the client handler when there is one. A server-only
    tool refuses to run in a client context at all.
    """
    if ctx.is_server:
        return definition.server_handler
    if definition.is_server_only:
        raise ServerOnlyViolation(definition.name)
    return definition.client_handler or definition.server_handler


def coerce_call(raw: ToolCall | Mapping[str, Any]) -> ToolCall:
    """Accept a ToolCall or a wire-shaped mapping; bad shapes raise InputValidationError."""
    if isinstance(raw, ToolCall):
        return raw
    try:
        return ToolCall.model_validate(raw)
    except ValidationError as e:
        raise InputValidationError(
            "Malformed tool call", field_errors=format_validation_error(e),
        ) from e


class ToolExecutor:
    """Runs tools from a registry under the executor's policies.

    Args:
        registry: Source of definitions for lookups by name (default registry if None)
        middleware: Executor-level middleware, wrapped outside each tool's own
        allowed_tools: If set, only these names may run
        blocked_tools: Names that may never run (checked before allowed_tools)
        default_timeout_ms: Timeout for tools that set none
        context_defaults: `create_context` keyword overrides for per-call contexts
        log_execution: Log each execution at INFO
    """

    def __init__(
        self,
        registry: ToolRegistry | None = None,
        *,
        middleware: Iterable[Middleware] = (),
        allowed_tools: Iterable[str] | None = None,
        blocked_tools: Iterable[str] | None = None,
        default_timeout_ms: float | None = None,
        context_defaults: Mapping[str, Any] | None = None,
        log_execution: bool | None = None,
    ) -> None:
        cfg = get_settings().executor
        self._registry = registry
        self.middleware: tuple[Middleware, ...] = tuple(middleware)
        self.allowed_tools = frozenset(allowed_tools) if allowed_tools is not None else None
        self.blocked_tools = frozenset(blocked_tools or ())
        self.default_timeout_ms = default_timeout_ms if default_timeout_ms is not None else cfg.default_timeout_ms
        self.context_defaults = dict(context_defaults or {})
        self.log_execution = cfg.log_execution if log_execution is None else log_execution

    @property
    def registry(self) -> ToolRegistry:
        return self._registry if self._registry is not None else get_registry()

    def __repr__(self) -> str:
        return f"ToolExecutor(tools={len(self.registry)}, middleware={len(self.middleware)})"

    # ─────────────────────────────────────────────────────────────────
    # Pipeline steps
    # ─────────────────────────────────────────────────────────────────

    def resolve(self, tool: ToolRef) -> ToolDefinition:
        """Definition by reference, or registry lookup by name (NotFoundError)."""
        return tool if isinstance(tool, ToolDefinition) else self.registry.require(tool)

    def is_allowed(self, name: str) -> bool:
        if name in self.blocked_tools:
            return False
        return self.allowed_tools is None or name in self.allowed_tools

    def _check_access(self, name: str) -> None:
        if name in self.blocked_tools:
            raise AccessDeniedError(f"Tool '{name}' is blocked", tool_name=name)
        if not self.is_allowed(name):
            raise AccessDeniedError(f"Tool '{name}' is not in the allowed list", tool_name=name)

    def context(self, ctx: ExecutionContext | None = None) -> ExecutionContext:
        """The caller's context, or a fresh one built from `context_defaults`."""
        return ctx if ctx is not None else create_context(**self.context_defaults)

    def _timeout_for(self, definition: ToolDefinition) -> float | None:
        return definition.metadata.timeout_ms if definition.metadata.timeout_ms is not None else self.default_timeout_ms

    async def _invoke(self, definition: ToolDefinition, handler: Handler, parsed: Any, ctx: ExecutionContext) -> Any:
        """retry(timeout(middleware + handler)) for one validated call."""
        name, meta = definition.name, definition.metadata
        chain = compose((*self.middleware, *definition.middleware), handler, tool_name=name)
        timeout_ms = self._timeout_for(definition)

        async def attempt() -> Any:
            return await execute_with_timeout(lambda: chain(parsed, ctx), timeout_ms, name)

        token = _current_tool.set(name)
        try:
            if meta.retry and meta.retry > 1:
                policy = RetryPolicy.from_settings(meta.retry, meta.retry_delay_ms)
                return await execute_with_retry(attempt, policy, name)
            return await attempt()
        finally:
            _current_tool.reset(token)

    # ─────────────────────────────────────────────────────────────────
    # Public surface
    # ─────────────────────────────────────────────────────────────────

    async def execute(self, tool: ToolRef, input: Any = None, ctx: ExecutionContext | None = None) -> Any:
        """Run a tool and return its output; failures raise AUIError subclasses."""
        definition = self.resolve(tool)
        name = definition.name
        self._check_access(name)
        ctx = self.context(ctx)
        parsed = definition.input_schema.validate(input, tool_name=name)
        handler = select_handler(definition, ctx)

        meta = definition.metadata
        key = make_cache_key(name, parsed) if meta.cache else None
        if key is not None:
            hit, cached = cache_lookup(ctx.cache, key)
            if hit:
                logger.debug(f"[{name}] Cache hit")
                return cached

        if self.log_execution:
            side = "client" if handler is definition.client_handler else "server"
            logger.info(f"[{name}] Executing ({side})")
        start = time.perf_counter()
        try:
            output = await self._invoke(definition, handler, parsed, ctx)
        except AUIError as e:
            logger.warning(f"[{name}] Failed after {(time.perf_counter() - start) * 1000:.1f}ms: {e}")
            raise

        if key is not None:
            ctx.cache.set(key, output, ttl=meta.cache_ttl)
        logger.debug(f"[{name}] Completed in {(time.perf_counter() - start) * 1000:.1f}ms")
        return output

    run = execute

    async def execute_call(
        self,
        call: ToolCall | Mapping[str, Any],
        ctx: ExecutionContext | None = None,
    ) -> ToolResult:
        """Result-wrapped execution: never raises, the failure lands in `.error`."""
        try:
            call = coerce_call(call)
        except InputValidationError as e:
            raw = call if isinstance(call, Mapping) else {}
            call_id = str(raw.get("id") or uuid.uuid4().hex)
            tool_name = str(raw.get("toolName") or raw.get("tool_name") or "")
            return ToolResult.failure(call_id, tool_name, e.to_error())

        try:
            output = await self.execute(call.tool_name, call.input, ctx)
        except AUIError as e:
            return ToolResult.failure(call.id, call.tool_name, ToolError.from_exception(call.tool_name, e))
        except Exception as e:
            logger.exception(f"[{call.tool_name}] Unexpected executor failure")
            return ToolResult.failure(call.id, call.tool_name, ToolError.from_exception(call.tool_name, e))
        return ToolResult.success(call, output)

    def execute_sync(self, tool: ToolRef, input: Any = None, ctx: ExecutionContext | None = None) -> Any:
        """Blocking `execute` for synchronous callers."""
        return run_sync(self.execute(tool, input, ctx))

    async def execute_batch(
        self,
        calls: Sequence[ToolCall | Mapping[str, Any]],
        *,
        ctx: ExecutionContext | None = None,
        concurrency: int | None = None,
    ) -> list[ToolResult]:
        """Run calls concurrently; results keep the order of `calls`."""
        return await batch_execute(self, calls, ctx=ctx, concurrency=concurrency)

    def validate(self, tool: ToolRef, input: Any = None) -> bool:
        """Whether `input` would pass the tool's schema (False for unknown tools)."""
        try:
            definition = self.resolve(tool)
        except AUIError:
            return False
        return definition.input_schema.is_valid(input)

    def capabilities(self) -> list[ToolCapability]:
        """Descriptors for the tools this executor is allowed to run."""
        return [t.describe() for t in self.registry if self.is_allowed(t.name)]


# ─────────────────────────────────────────────────────────────────────────────
# Default Executor
# ─────────────────────────────────────────────────────────────────────────────

_executor: ToolExecutor | None = None


def get_executor() -> ToolExecutor:
    """Get the default executor (bound to the default registry)."""
    global _executor
    if _executor is None:
        _executor = ToolExecutor()
    return _executor


def set_executor(executor: ToolExecutor) -> None:
    global _executor
    _executor = executor


def reset_executor() -> None:
    """Drop the default executor (useful for testing)."""
    global _executor
    _executor = None


async def execute(tool: ToolRef, input: Any = None, ctx: ExecutionContext | None = None) -> Any:
    """`execute` on the default executor."""
    return await get_executor().execute(tool, input, ctx)


async def execute_call(call: ToolCall | Mapping[str, Any], ctx: ExecutionContext | None = None) -> ToolResult:
    return await get_executor().execute_call(call, ctx)


async def execute_batch(
    calls: Sequence[ToolCall | Mapping[str, Any]],
    *,
    ctx: ExecutionContext | None = None,
    concurrency: int | None = None,
) -> list[ToolResult]:
    return await get_executor().execute_batch(calls, ctx=ctx, concurrency=concurrency)
