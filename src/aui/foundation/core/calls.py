"""Request/response envelopes for result-wrapped and batch invocation.

Both models accept and emit the camelCase wire names (`toolName`) as well as
the Python field names.
"""

from __future__ import annotations

import uuid
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from aui.foundation.errors import ToolError


class ToolCall(BaseModel):
    """One requested invocation: correlation id, tool name, raw input."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    tool_name: str = Field(alias="toolName", min_length=1)
    input: Any = None


class ToolResult(BaseModel):
    """Outcome of one call. On error `output` is None and `error` is set."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    tool_name: str = Field(alias="toolName")
    output: Any = None
    error: ToolError | None = None

    @model_validator(mode="after")
    def _error_clears_output(self) -> Self:
        if self.error is not None and self.output is not None:
            raise ValueError("a failed result carries no output")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, call: ToolCall, output: Any) -> Self:
        return cls(id=call.id, tool_name=call.tool_name, output=output)

    @classmethod
    def failure(cls, call_id: str, tool_name: str, error: ToolError) -> Self:
        return cls(id=call_id, tool_name=tool_name, output=None, error=error)

    def unwrap(self) -> Any:
        """Return output or raise RuntimeError carrying the rendered error."""
        if self.error is not None:
            raise RuntimeError(self.error.render())
        return self.output

    def to_wire(self) -> dict[str, Any]:
        """Dict using wire field names; outputs stay as the handler returned them."""
        return self.model_dump(by_alias=True, exclude_none=False)
