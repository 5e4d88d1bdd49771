"""Schema validation for tool input."""

from .validator import EMPTY_SCHEMA, EmptyInput, Schema, as_schema, format_validation_error

__all__ = ["Schema", "EmptyInput", "EMPTY_SCHEMA", "as_schema", "format_validation_error"]
