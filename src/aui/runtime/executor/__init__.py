"""Tool execution: the raising and result-wrapped surfaces plus a default executor."""

from .executor import (
    ToolExecutor,
    coerce_call,
    execute,
    execute_batch,
    execute_call,
    get_executor,
    reset_executor,
    select_handler,
    set_executor,
)

__all__ = [
    "ToolExecutor", "select_handler", "coerce_call",
    "get_executor", "set_executor", "reset_executor",
    "execute", "execute_call", "execute_batch",
]
