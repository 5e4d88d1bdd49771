"""Audit middleware: bounded in-memory execution log."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from ..middleware import Next, current_tool

if TYPE_CHECKING:
    from aui.foundation.core import ExecutionContext, Identity


@dataclass(frozen=True, slots=True)
class AuditEntry:
    """One recorded execution."""
    tool_name: str
    timestamp: datetime
    input: Any
    output: Any = None
    error: str | None = None
    identity: Identity | None = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class AuditMiddleware:
    """Record every execution passing through with its outcome and caller identity.

    Keeps the newest `max_entries` records.

    Example:
        >>> audit = AuditMiddleware()
        >>> executor = ToolExecutor(middleware=[audit])
        >>> await executor.execute("db-write", {...})
        >>> audit.entries()[-1].tool_name
        'db-write'
    """

    max_entries: int = 1000
    _log: deque[AuditEntry] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._log = deque(maxlen=self.max_entries)

    async def __call__(self, input: Any, ctx: ExecutionContext, next: Next) -> Any:
        name = current_tool() or "?"
        started, t0 = datetime.now(UTC), time.perf_counter()
        try:
            output = await next()
        except Exception as e:
            self._log.append(AuditEntry(
                name, started, input, error=str(e) or type(e).__name__,
                identity=ctx.identity, duration_ms=(time.perf_counter() - t0) * 1000,
            ))
            raise
        self._log.append(AuditEntry(
            name, started, input, output=output,
            identity=ctx.identity, duration_ms=(time.perf_counter() - t0) * 1000,
        ))
        return output

    def entries(self, tool_name: str | None = None) -> list[AuditEntry]:
        """Recorded entries, oldest first, optionally for one tool."""
        return [e for e in self._log if tool_name is None or e.tool_name == tool_name]

    def clear(self) -> None:
        self._log.clear()
