"""Context cache store and result-cache key helpers."""

from .cache import CacheEntry, CacheStore, MemoryStore, cache_lookup, make_cache_key

__all__ = ["CacheEntry", "CacheStore", "MemoryStore", "cache_lookup", "make_cache_key"]
