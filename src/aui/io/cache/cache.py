"""Context cache store and result-cache keys.

`ExecutionContext.cache` is a plain key -> value store shared by whoever
holds the context. `MemoryStore` is the default: thread-safe, optional TTL,
bounded with eviction of expired entries first and then the oldest.

Result caching keys are derived from the tool name plus the canonical JSON
of the validated input, so two calls with equal input hit the same entry.
"""

from __future__ import annotations

import hashlib
import threading
import time
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import orjson
from pydantic import BaseModel

_MISSING: Any = object()


@dataclass(slots=True)
class CacheEntry:
    """A cached value with optional expiration."""
    value: object
    stored_at: float
    expires_at: float | None

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and time.time() > self.expires_at


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for context cache stores (enables custom backends)."""

    def get(self, key: str, default: object = None) -> object: ...
    def set(self, key: str, value: object, ttl: float | None = None) -> None: ...
    def delete(self, key: str) -> bool: ...
    def clear(self) -> None: ...
    def __contains__(self, key: object) -> bool: ...


class MemoryStore:
    """Thread-safe in-memory store with optional TTL-based expiration.

    Concurrent writes to one key are last-write-wins; the lock only keeps
    the underlying dict consistent.

    Args:
        default_ttl: Default TTL in seconds for entries (None = never expire)
        max_entries: Maximum number of entries before eviction

    Example:
        >>> store = MemoryStore()
        >>> store.set("q", ["result"])
        >>> store.get("q")
        ['result']
    """

    __slots__ = ("_data", "_default_ttl", "_max_entries", "_lock")

    def __init__(self, default_ttl: float | None = None, max_entries: int = 1000) -> None:
        self._data: dict[str, CacheEntry] = {}
        self._default_ttl = default_ttl
        self._max_entries = max_entries
        self._lock = threading.RLock()

    def get(self, key: str, default: object = None) -> object:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return default
            if entry.expired:
                del self._data[key]
                return default
            return entry.value

    def set(self, key: str, value: object, ttl: float | None = None) -> None:
        ttl = ttl if ttl is not None else self._default_ttl
        now = time.time()
        with self._lock:
            if key not in self._data and len(self._data) >= self._max_entries:
                self._evict_unlocked()
            self._data[key] = CacheEntry(value, now, now + ttl if ttl is not None else None)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: object) -> bool:
        return self.get(key, _MISSING) is not _MISSING  # type: ignore[arg-type]

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def keys(self) -> list[str]:
        with self._lock:
            return [k for k, v in self._data.items() if not v.expired]

    def _evict_unlocked(self) -> None:
        """Remove expired entries, then the oldest quarter if still full. Caller must hold lock."""
        for key in [k for k, v in self._data.items() if v.expired]:
            del self._data[key]
        if len(self._data) >= self._max_entries:
            oldest = sorted(self._data, key=lambda k: self._data[k].stored_at)
            for key in oldest[: max(1, self._max_entries // 4)]:
                del self._data[key]

    def stats(self) -> dict[str, object]:
        """Store statistics for monitoring."""
        with self._lock:
            expired = sum(1 for v in self._data.values() if v.expired)
            return {
                "total_entries": len(self._data),
                "expired_entries": expired,
                "active_entries": len(self._data) - expired,
                "default_ttl": self._default_ttl,
                "max_entries": self._max_entries,
            }


def _jsonable(value: object) -> object:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def make_cache_key(tool_name: str, params: object) -> str:
    """Generate a result-cache key from tool name and validated input."""
    payload = orjson.dumps(_jsonable(params), default=str, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS)
    return f"aui:{tool_name}:{hashlib.sha256(payload).hexdigest()}"


def cache_lookup(store: CacheStore, key: str) -> tuple[bool, object]:
    """Return (hit, value); a stored None still counts as a hit."""
    value = store.get(key, _MISSING)
    return (False, None) if value is _MISSING else (True, value)
