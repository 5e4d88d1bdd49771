"""Core middleware types and chain composition.

Middleware follows continuation-passing style: each middleware receives the
validated input, the execution context, and a `next` function that runs the
rest of the chain (inner middleware, then the handler).

    async def timing(input, ctx, next):
        start = time.perf_counter()
        output = await next()          # or await next(transformed_input)
        ctx["duration_ms"] = (time.perf_counter() - start) * 1000
        return output

Composition is onion-style: the first middleware wraps outermost, so with
N middleware the order is mw1-before ... mwN-before, handler,
mwN-after ... mw1-after. A middleware may skip `next` entirely to
short-circuit.

Failure attribution:
- handler raised → HandlerError (original exception kept as cause), even when
  it is an AUIError from a nested tool call
- middleware body raised on its own → MiddlewareError, likewise
- an error coming out of `next` that a middleware re-raises unchanged keeps
  its original classification
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, runtime_checkable

from aui.foundation.errors import HandlerError, MiddlewareError

if TYPE_CHECKING:
    from aui.foundation.core import ExecutionContext, Handler

_UNSET: Any = object()

# Name of the tool currently executing (set by the executor)
_current_tool: ContextVar[str | None] = ContextVar("aui_current_tool", default=None)


def current_tool() -> str | None:
    """Name of the tool whose chain is running in this task, if any."""
    return _current_tool.get()


# Continuation handed to middleware: next() forwards the current input,
# next(value) forwards a replacement.
Next: TypeAlias = Callable[..., Awaitable[Any]]

# Composed chain: (input, ctx) -> output
Chain: TypeAlias = "Callable[[Any, ExecutionContext], Awaitable[Any]]"


@runtime_checkable
class Middleware(Protocol):
    """Protocol for tool middleware.

    Any async callable `(input, ctx, next) -> output` qualifies, plain
    functions included.

    Example:
        >>> async def upper(input, ctx, next):
        ...     return (await next()).upper()
    """

    async def __call__(self, input: Any, ctx: ExecutionContext, next: Next) -> Any:
        """Execute middleware logic.

        Args:
            input: Validated input (possibly transformed by outer middleware)
            ctx: Execution context
            next: Continuation to call downstream chain

        Returns:
            Output (possibly modified)
        """
        ...


def _label(mw: object) -> str:
    return getattr(mw, "__name__", None) or type(mw).__name__


def _wrap_handler(handler: Handler, tool_name: str) -> Chain:
    async def base(input: Any, ctx: ExecutionContext) -> Any:
        try:
            return await handler(input, ctx)
        except Exception as e:
            raise HandlerError(tool_name, e) from e
    return base


def _wrap_middleware(mw: Middleware, inner: Chain, tool_name: str) -> Chain:
    async def wrapped(input: Any, ctx: ExecutionContext) -> Any:
        from_downstream: set[int] = set()

        async def next_(value: Any = _UNSET) -> Any:
            try:
                return await inner(input if value is _UNSET else value, ctx)
            except Exception as e:
                from_downstream.add(id(e))
                raise

        try:
            return await mw(input, ctx, next_)
        except Exception as e:
            if id(e) in from_downstream:
                raise
            raise MiddlewareError(tool_name, e, _label(mw)) from e
    return wrapped


def compose(middleware: Sequence[Middleware], handler: Handler, *, tool_name: str = "") -> Chain:
    """Compose middleware around a handler into one `(input, ctx)` function.

    Args:
        middleware: Ordered middleware (first = outermost)
        handler: Canonical async handler at the center
        tool_name: Name used in HandlerError/MiddlewareError

    Returns:
        Composed async function: (input, ctx) -> output
    """
    chain = _wrap_handler(handler, tool_name)
    for mw in reversed(middleware):
        chain = _wrap_middleware(mw, chain, tool_name)
    return chain
