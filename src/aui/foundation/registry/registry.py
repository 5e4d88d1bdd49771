"""Name-keyed store of tool definitions.

The registry provides:
- Registration (throws on duplicate names) and lookup by name
- Insertion-ordered listing
- Tag-based filtering and relevance search for discovery
- Capability descriptors for remote/UI consumers

Registries are plain instances passed to whatever needs them. One default
instance exists for ergonomic call sites (`get_registry()`).

The registry is read-mostly after startup and does no locking; a
multi-threaded host that mutates it while other threads read must
synchronize externally.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from aui.foundation.core import ToolCapability, ToolDefinition
from aui.foundation.errors import NameConflictError, NotFoundError

logger = logging.getLogger("aui.registry")

# Relevance weights for search()
_NAME_WEIGHT, _DESCRIPTION_WEIGHT, _TAG_WEIGHT = 10, 5, 3


@dataclass(frozen=True, slots=True)
class SearchHit:
    """A search match with its relevance score."""
    tool: ToolDefinition
    relevance: int


class ToolRegistry:
    """Registry of tool definitions.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(add)
        >>> registry.get("add") is add
        True
        >>> [t.name for t in registry.list()]
        ['add']
    """

    __slots__ = ("_tools", "_tags")

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        self._tags: dict[str, set[str]] = {}

    def register(self, definition: ToolDefinition) -> ToolDefinition:
        """Add a definition. Raises NameConflictError if the name is taken."""
        name = definition.name
        if name in self._tools:
            raise NameConflictError(f"Tool '{name}' already registered. Use remove() first.", tool_name=name)
        self._tools[name] = definition
        for tag in definition.tags:
            self._tags.setdefault(tag, set()).add(name)
        logger.debug(f"Registered tool '{name}'")
        return definition

    def register_all(self, *definitions: ToolDefinition) -> None:
        for definition in definitions:
            self.register(definition)

    def get(self, name: str) -> ToolDefinition | None:
        """Get a definition by name, None if absent."""
        return self._tools.get(name)

    def require(self, name: str) -> ToolDefinition:
        """Get a definition by name, raising NotFoundError if absent."""
        if (definition := self._tools.get(name)) is None:
            raise NotFoundError(name)
        return definition

    def list(self) -> list[ToolDefinition]:
        """All definitions in insertion order."""
        return list(self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools)

    def remove(self, name: str) -> bool:
        """Remove a definition by name. Returns True if it was present."""
        definition = self._tools.pop(name, None)
        if definition is None:
            return False
        for tag in definition.tags:
            if (names := self._tags.get(tag)) is not None:
                names.discard(name)
                if not names:
                    del self._tags[tag]
        logger.debug(f"Removed tool '{name}'")
        return True

    def clear(self) -> None:
        self._tools.clear()
        self._tags.clear()

    def __getitem__(self, name: str) -> ToolDefinition:
        return self.require(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(list(self._tools.values()))

    # ─────────────────────────────────────────────────────────────────
    # Discovery
    # ─────────────────────────────────────────────────────────────────

    def tags(self) -> set[str]:
        return set(self._tags)

    def find_by_tag(self, tag: str) -> list[ToolDefinition]:
        """Definitions carrying `tag`, in insertion order."""
        names = self._tags.get(tag, set())
        return [t for n, t in self._tools.items() if n in names]

    def find_by_tags(self, *tags: str) -> list[ToolDefinition]:
        """Definitions carrying every one of `tags`."""
        if not tags:
            return []
        wanted = set(tags)
        return [t for t in self._tools.values() if wanted <= t.tags]

    def search(self, query: str) -> list[SearchHit]:
        """Rank tools by case-insensitive substring matches on name, description, tags."""
        q = query.lower().strip()
        if not q:
            return []
        hits: list[SearchHit] = []
        for tool in self._tools.values():
            score = _NAME_WEIGHT if q in tool.name.lower() else 0
            if tool.description and q in tool.description.lower():
                score += _DESCRIPTION_WEIGHT
            score += _TAG_WEIGHT * sum(1 for tag in tool.tags if q in tag.lower())
            if score:
                hits.append(SearchHit(tool, score))
        # sorted() is stable, so equal scores keep insertion order
        return sorted(hits, key=lambda h: -h.relevance)

    def capabilities(self) -> list[ToolCapability]:
        """Capability descriptors for all tools, insertion order."""
        return [t.describe() for t in self._tools.values()]

    def describe(self) -> str:
        """Formatted one-line-per-tool listing for prompts."""
        lines = []
        for t in self._tools.values():
            flags = " ".join(f for f, on in [("[server-only]", t.is_server_only), ("[client]", t.has_client_handler)] if on)
            lines.append(f"- {t.name}{' ' + flags if flags else ''}: {t.description or 'No description'}")
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Default Registry
# ─────────────────────────────────────────────────────────────────────────────

_registry: ToolRegistry | None = None


def get_registry() -> ToolRegistry:
    """Get the process-wide default registry (created on first use)."""
    global _registry
    if _registry is None:
        _registry = ToolRegistry()
    return _registry


def set_registry(registry: ToolRegistry) -> None:
    """Replace the default registry."""
    global _registry
    _registry = registry


def reset_registry() -> None:
    """Drop the default registry (useful for testing)."""
    global _registry
    if _registry is not None:
        _registry.clear()
    _registry = None
