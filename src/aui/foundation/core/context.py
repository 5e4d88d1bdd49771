"""Execution context: the capability bag passed into every invocation.

Fixed fields cover what the pipeline itself relies on (`cache`, `fetch`,
`is_server`, `identity`); integration-specific data goes into the typed
`extensions` map, reachable with mapping-style access on the context.

A context is created per call by default. Pass the same context to several
calls to share its cache on purpose; the cache has no ownership, so any
holder may read and write it.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

from aui.foundation.config import get_settings
from aui.io.cache import CacheStore, MemoryStore
from aui.io.http import Fetch, HttpFetch


class Identity(BaseModel):
    """Caller identity (user/session). Extra fields are kept as-is."""

    model_config = ConfigDict(frozen=True, extra="allow")

    user: Any = None
    session: Any = None


def _default_cache() -> CacheStore:
    cfg = get_settings().cache
    return MemoryStore(default_ttl=cfg.ttl, max_entries=cfg.max_entries)


def _default_is_server() -> bool:
    return get_settings().runtime.is_server


@dataclass(slots=True)
class ExecutionContext:
    """Per-call (or deliberately shared) capabilities.

    Example:
        >>> ctx = create_context(is_server=False)
        >>> ctx.cache.set("q", ["cached"])
        >>> ctx["request_id"] = "abc123"
        >>> ctx.get("request_id")
        'abc123'
    """

    cache: CacheStore = field(default_factory=_default_cache)
    fetch: Fetch = field(default_factory=HttpFetch)
    is_server: bool = field(default_factory=_default_is_server)
    identity: Identity | None = None
    extensions: dict[str, object] = field(default_factory=dict)

    def __getitem__(self, key: str) -> object:
        return self.extensions[key]

    def __setitem__(self, key: str, value: object) -> None:
        self.extensions[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self.extensions

    def get(self, key: str, default: object = None) -> object:
        return self.extensions.get(key, default)

    def replace(self, **changes: Any) -> ExecutionContext:
        """Copy with some fields replaced. The cache is shared unless replaced."""
        return dataclasses.replace(self, **changes)


def create_context(
    base: ExecutionContext | None = None,
    *,
    cache: CacheStore | None = None,
    fetch: Fetch | None = None,
    is_server: bool | None = None,
    identity: Identity | dict[str, object] | None = None,
    extensions: dict[str, object] | None = None,
) -> ExecutionContext:
    """Merge defaults (or `base`) with overrides.

    Overrides replace whole fields. `cache` is always a fresh store unless one
    is passed explicitly, even when deriving from `base`; pass
    `cache=base.cache` to share it. `extensions` are merged over the base's.
    """
    if isinstance(identity, dict):
        identity = Identity(**identity)
    if base is None:
        return ExecutionContext(
            cache=cache if cache is not None else _default_cache(),
            fetch=fetch if fetch is not None else HttpFetch(),
            is_server=is_server if is_server is not None else _default_is_server(),
            identity=identity,
            extensions=dict(extensions or {}),
        )
    return ExecutionContext(
        cache=cache if cache is not None else _default_cache(),
        fetch=fetch if fetch is not None else base.fetch,
        is_server=is_server if is_server is not None else base.is_server,
        identity=identity if identity is not None else base.identity,
        extensions={**base.extensions, **(extensions or {})},
    )
