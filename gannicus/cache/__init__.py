"""
Value cache for LLM-generated field values.

Append-only bags per key for variety, LRU eviction across keys.
"""

from .value_cache import (
    CacheConfig,
    CacheEntry,
    CacheStats,
    ValueCache,
    cache,
    clear_cache,
    get_cache_stats,
    hash_context,
)

__all__ = [
    "CacheConfig",
    "CacheEntry",
    "CacheStats",
    "ValueCache",
    "cache",
    "clear_cache",
    "get_cache_stats",
    "hash_context",
]
