"""JSON wire codec for remote tool invocation.

Request and response shapes used by a thin HTTP layer in front of the
executor:

    POST {"toolCall": {"id": "1", "toolName": "add", "input": {"a": 5, "b": 3}}}
      → {"id": "1", "toolName": "add", "output": 8, "error": null}

    POST {"toolCalls": [{...}, {...}]}
      → {"results": [{...}, {...}]}

Handlers here never raise for bad requests; a malformed body yields a
result carrying INVALID_INPUT. Remote calls always run in a server context.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from typing import Any

import orjson

from aui.foundation.core import ExecutionContext, ToolResult, create_context
from aui.foundation.errors import ErrorCode, ToolError
from aui.foundation.registry import ToolRegistry, get_registry
from aui.runtime.batch import batch_execute
from aui.runtime.executor import ToolExecutor, get_executor

Body = bytes | str | Mapping[str, Any]

_OPTS = orjson.OPT_NON_STR_KEYS


class MalformedRequest(ValueError):
    """Request body does not have the expected wire shape."""


def encode(data: Any) -> bytes:
    """orjson encoding; unknown objects fall back to str()."""
    return orjson.dumps(data, default=str, option=_OPTS)


def encode_result(result: ToolResult) -> bytes:
    return encode(result.to_wire())


def _error_result(message: str, *, call_id: str | None = None, tool_name: str = "") -> ToolResult:
    error = ToolError(tool_name=tool_name, message=message, code=ErrorCode.INVALID_INPUT)
    return ToolResult.failure(call_id or uuid.uuid4().hex, tool_name, error)


def _parse(body: Body, key: str) -> Any:
    if isinstance(body, bytes | str):
        try:
            body = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise MalformedRequest(f"Request body is not valid JSON: {e}") from e
    if not isinstance(body, Mapping) or key not in body:
        raise MalformedRequest(f"Request body must be an object with a '{key}' field")
    return body[key]


def _remote_context(executor: ToolExecutor) -> ExecutionContext:
    return create_context(**{**executor.context_defaults, "is_server": True})


async def handle_request(body: Body, executor: ToolExecutor | None = None) -> bytes:
    """Execute `{toolCall: {...}}` and return the ToolResult as JSON bytes."""
    executor = executor or get_executor()
    try:
        call = _parse(body, "toolCall")
    except MalformedRequest as e:
        return encode_result(_error_result(str(e)))
    result = await executor.execute_call(call, _remote_context(executor))
    return encode_result(result)


async def handle_batch_request(
    body: Body,
    executor: ToolExecutor | None = None,
    *,
    concurrency: int | None = None,
) -> bytes:
    """Execute `{toolCalls: [...]}` and return `{results: [...]}` in request order.

    Each call gets its own server context.
    """
    executor = executor or get_executor()
    try:
        calls = _parse(body, "toolCalls")
        if not isinstance(calls, Sequence) or isinstance(calls, str | bytes):
            raise MalformedRequest("'toolCalls' must be an array")
    except MalformedRequest as e:
        return encode({"results": [_error_result(str(e)).to_wire()]})

    results = await batch_execute(
        executor, list(calls), context_factory=lambda: _remote_context(executor), concurrency=concurrency,
    )
    return encode({"results": [r.to_wire() for r in results]})


def capabilities_payload(registry: ToolRegistry | ToolExecutor | None = None) -> bytes:
    """`{"tools": [...]}` discovery document with each tool's input JSON schema."""
    if isinstance(registry, ToolExecutor):
        tools = [registry.registry.require(c.name) for c in registry.capabilities()]
    else:
        tools = (registry or get_registry()).list()
    return encode({
        "tools": [
            {**t.describe().model_dump(by_alias=True), "inputSchema": t.input_schema.json_schema()}
            for t in tools
        ],
    })
