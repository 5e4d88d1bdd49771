"""Input schema validation backed by Pydantic.

A `Schema` wraps either a `BaseModel` subclass or any annotation Pydantic
can build a `TypeAdapter` for (`int`, `list[str]`, `Literal[...]`,
`TypedDict`, ...). Validation is synchronous and side-effect free: it either
returns the parsed value or raises `InputValidationError` with one
`FieldError` per rejected field.

Example:
    >>> class SearchInput(BaseModel):
    ...     query: str = Field(min_length=1)
    ...     limit: int = Field(default=5, ge=1, le=50)
    >>> schema = as_schema(SearchInput)
    >>> schema.validate({"query": "python"}).limit
    5
"""

from __future__ import annotations

from functools import cached_property
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from aui.foundation.errors import FieldError, InputValidationError


class EmptyInput(BaseModel):
    """Default input schema for tools with no declared input. Extra keys are ignored."""


def format_validation_error(exc: ValidationError) -> tuple[FieldError, ...]:
    """Flatten a Pydantic ValidationError into per-field diagnostics."""
    return tuple(
        FieldError(
            loc=".".join(str(p) for p in err.get("loc", ())),
            message=err.get("msg", "invalid value"),
            type=err.get("type", "value_error"),
        )
        for err in exc.errors(include_url=False)
    )


class Schema:
    """Validator for a declared input (or output) shape."""

    def __init__(self, tp: Any) -> None:
        self._type = tp

    @property
    def type(self) -> Any:
        return self._type

    @cached_property
    def _adapter(self) -> TypeAdapter[Any]:
        return TypeAdapter(self._type)

    @property
    def is_model(self) -> bool:
        return isinstance(self._type, type) and issubclass(self._type, BaseModel)

    def validate(self, raw: object, *, tool_name: str = "") -> Any:
        """Return the parsed input or raise InputValidationError."""
        if raw is None and self.is_model:
            raw = {}
        try:
            if self.is_model:
                return self._type.model_validate(raw)
            return self._adapter.validate_python(raw)
        except ValidationError as e:
            errors = format_validation_error(e)
            summary = "; ".join(str(f) for f in errors)
            who = f" for '{tool_name}'" if tool_name else ""
            raise InputValidationError(
                f"Invalid input{who}: {summary}", tool_name=tool_name, field_errors=errors,
            ) from e

    def is_valid(self, raw: object) -> bool:
        try:
            self.validate(raw)
        except InputValidationError:
            return False
        return True

    def json_schema(self) -> dict[str, Any]:
        """JSON Schema of the declared shape (for discovery payloads)."""
        if self.is_model:
            return self._type.model_json_schema()
        return self._adapter.json_schema()

    def __repr__(self) -> str:
        return f"Schema({getattr(self._type, '__name__', self._type)!r})"


EMPTY_SCHEMA = Schema(EmptyInput)


def as_schema(shape: object) -> Schema:
    """Coerce None, a Schema, a BaseModel subclass, or any annotation into a Schema."""
    if shape is None:
        return EMPTY_SCHEMA
    if isinstance(shape, Schema):
        return shape
    return Schema(shape)
