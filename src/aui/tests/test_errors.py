"""Tests for the structured error diagnostic."""

from __future__ import annotations

import pytest

from aui import ErrorCode, HandlerError, NotFoundError, ToolError


def test_from_plain_exception() -> None:
    err = ToolError.from_exception("t", ValueError("bad value"))
    assert (err.tool_name, err.message, err.code) == ("t", "bad value", ErrorCode.UNKNOWN)
    assert err.details is None


@pytest.mark.parametrize("exc, message", [
    (RuntimeError(""), "RuntimeError"),
    (RuntimeError("   "), "RuntimeError"),
])
def test_blank_exception_message_falls_back_to_type(exc: Exception, message: str) -> None:
    assert ToolError.from_exception("t", exc).message == message


@pytest.mark.parametrize("raw", ["", "  ", "\t\n"])
def test_blank_message_never_rejected(raw: str) -> None:
    assert ToolError(message=raw).message == "Unknown error"


def test_pipeline_error_keeps_code_and_fills_tool_name() -> None:
    err = ToolError.from_exception("outer", HandlerError("", RuntimeError("x")))
    assert err.code == ErrorCode.HANDLER_ERROR
    assert err.recoverable
    assert err.tool_name == "outer"
    assert ToolError.from_exception("outer", NotFoundError("inner")).tool_name == "inner"


def test_render() -> None:
    err = ToolError(tool_name="weather", message="upstream down", code=ErrorCode.HANDLER_ERROR)
    assert err.render() == "HANDLER_ERROR (weather): upstream down"
    assert str(err) == err.render()


def test_include_trace() -> None:
    try:
        raise ValueError("traced")
    except ValueError as e:
        err = ToolError.from_exception("t", e, include_trace=True)
    assert "ValueError: traced" in err.details
