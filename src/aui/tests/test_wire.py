"""Tests for the JSON wire codec."""

from __future__ import annotations

import orjson
import pytest
from pydantic import BaseModel

from aui import ToolExecutor, ToolRegistry, capabilities_payload, handle_batch_request, handle_request, tool

from .conftest import AddInput


class Point(BaseModel):
    x: int
    y: int


@pytest.fixture
def executor(registry: ToolRegistry) -> ToolExecutor:
    tool("add").describe("Add").input(AddInput).execute(lambda inp, ctx: inp.a + inp.b).register(registry)
    tool("point").execute(lambda i, c: Point(x=1, y=2)).register(registry)
    tool("where").execute(lambda i, c: "server").client_execute(lambda i, c: "client").register(registry)
    tool("secret").execute(lambda i, c: "s").server_only().register(registry)
    return ToolExecutor(registry, context_defaults={"is_server": False}, log_execution=False)


@pytest.mark.asyncio
async def test_request_round_trip(executor: ToolExecutor) -> None:
    body = orjson.dumps({"toolCall": {"id": "1", "toolName": "add", "input": {"a": 5, "b": 3}}})
    assert orjson.loads(await handle_request(body, executor)) == {"id": "1", "toolName": "add", "output": 8, "error": None}


@pytest.mark.asyncio
async def test_accepts_str_and_mapping(executor: ToolExecutor) -> None:
    call = {"id": "1", "toolName": "add", "input": {"a": 1, "b": 1}}
    assert orjson.loads(await handle_request({"toolCall": call}, executor))["output"] == 2
    assert orjson.loads(await handle_request(orjson.dumps({"toolCall": call}).decode(), executor))["output"] == 2


@pytest.mark.asyncio
async def test_model_output_serialized(executor: ToolExecutor) -> None:
    out = orjson.loads(await handle_request({"toolCall": {"id": "p", "toolName": "point"}}, executor))
    assert out["output"] == {"x": 1, "y": 2}


@pytest.mark.asyncio
async def test_remote_calls_run_on_server(executor: ToolExecutor) -> None:
    out = orjson.loads(await handle_request({"toolCall": {"id": "w", "toolName": "where"}}, executor))
    assert out["output"] == "server"
    out = orjson.loads(await handle_request({"toolCall": {"id": "s", "toolName": "secret"}}, executor))
    assert out["output"] == "s"


@pytest.mark.asyncio
async def test_error_result(executor: ToolExecutor) -> None:
    out = orjson.loads(await handle_request({"toolCall": {"id": "1", "toolName": "add", "input": {"a": 1}}}, executor))
    assert out["output"] is None
    assert out["error"]["code"] == "INVALID_INPUT"
    assert out["error"]["field_errors"][0]["loc"] == "b"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"{not json", b"[]", b'{"other": 1}', b'{"toolCall": 5}'])
async def test_malformed_bodies(executor: ToolExecutor, body: bytes) -> None:
    out = orjson.loads(await handle_request(body, executor))
    assert out["output"] is None
    assert out["error"]["code"] == "INVALID_INPUT"
    assert out["id"]


@pytest.mark.asyncio
async def test_batch_request(executor: ToolExecutor) -> None:
    body = {"toolCalls": [
        {"id": "1", "toolName": "add", "input": {"a": 1, "b": 2}},
        {"id": "2", "toolName": "missing"},
        "garbage",
    ]}
    results = orjson.loads(await handle_batch_request(body, executor))["results"]
    assert [r["output"] for r in results] == [3, None, None]
    assert results[1]["error"]["code"] == "NOT_FOUND"
    assert results[2]["error"]["code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_batch_request_malformed(executor: ToolExecutor) -> None:
    results = orjson.loads(await handle_batch_request(b'{"toolCalls": "nope"}', executor))["results"]
    assert results[0]["error"]["code"] == "INVALID_INPUT"


def test_capabilities_payload(registry: ToolRegistry, executor: ToolExecutor) -> None:
    tools = orjson.loads(capabilities_payload(registry))["tools"]
    add = tools[0]
    assert [t["name"] for t in tools] == ["add", "point", "where", "secret"]
    assert add["hasServerHandler"] and not add["hasClientHandler"]
    assert set(add["inputSchema"]["required"]) == {"a", "b"}
    assert tools[2]["hasClientHandler"]
    assert tools[3]["isServerOnly"]


def test_capabilities_payload_respects_executor_policy(registry: ToolRegistry, executor: ToolExecutor) -> None:
    limited = ToolExecutor(registry, blocked_tools=["secret"])
    assert [t["name"] for t in orjson.loads(capabilities_payload(limited))["tools"]] == ["add", "point", "where"]
