"""Shared fixtures: isolate the default registry, executor and settings per test."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from pydantic import BaseModel

from aui import ToolRegistry, clear_settings_cache, reset_executor, reset_registry


@pytest.fixture(autouse=True)
def clean_globals() -> Iterator[None]:
    """Reset process-wide defaults before and after each test."""
    reset_registry()
    reset_executor()
    clear_settings_cache()
    yield
    reset_registry()
    reset_executor()
    clear_settings_cache()


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry()


class AddInput(BaseModel):
    a: int
    b: int


class SearchInput(BaseModel):
    query: str
