"""Tool registry with discovery helpers and a default instance."""

from .registry import SearchHit, ToolRegistry, get_registry, reset_registry, set_registry

__all__ = ["ToolRegistry", "SearchHit", "get_registry", "set_registry", "reset_registry"]
