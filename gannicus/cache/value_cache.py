"""
Content-addressed cache for LLM-generated field values.

Each key holds a bounded bag of previously seen outputs rather than a single
value. Lookups sample the bag at random so records sharing a prompt/context
still get varied values. Within a key the oldest write is dropped first
(FIFO); across keys the least recently used key is evicted (LRU).
"""

import hashlib
import json
import logging
import random
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheConfig:
    """Configuration for cache bounds."""
    max_keys: int = 1000
    """Maximum number of distinct keys before LRU eviction."""

    max_values_per_key: int = 10
    """Maximum bag size per key before the oldest value is dropped."""


@dataclass
class CacheEntry:
    """One observed value in a key's bag."""
    value: str
    timestamp: float
    hits: int = 0


@dataclass
class CacheStats:
    """Snapshot of cache usage."""
    keys: int
    total_entries: int
    total_hits: int
    hit_rate: float
    """Approximation: hits / (hits + keys) * 100. Misses are not part of it."""

    misses: int = 0
    lookup_hit_rate: float = 0.0
    """True hits / (hits + misses) * 100 over lookups since the last clear."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keys": self.keys,
            "total_entries": self.total_entries,
            "total_hits": self.total_hits,
            "hit_rate": self.hit_rate,
            "misses": self.misses,
            "lookup_hit_rate": self.lookup_hit_rate,
        }


def hash_context(context: Optional[Mapping[str, Any]]) -> str:
    """Stable hash of a context map; key order does not matter."""
    if not context:
        return "no-context"
    normalized = json.dumps(
        sorted((str(k), v) for k, v in context.items()),
        default=str,
        separators=(",", ":"),
    )
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:16]


class ValueCache:
    """
    Bag-per-key cache with FIFO bags and LRU keys.

    Usage:
        cache = ValueCache(CacheConfig(max_keys=500))
        cache.set("ollama", "qwen2.5:7b", "A name", "Ada Lovelace")
        cache.get("ollama", "qwen2.5:7b", "A name")  # -> "Ada Lovelace"
    """

    def __init__(self, config: Optional[CacheConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or CacheConfig()
        self._rng = rng or random.Random()
        self._store: "OrderedDict[str, List[CacheEntry]]" = OrderedDict()
        self._misses = 0
        self._lookup_hits = 0
        self._lock = threading.Lock()

    def make_key(
        self,
        backend: str,
        model: str,
        prompt: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Compute the cache key for a request."""
        prompt_hash = hashlib.sha256(prompt.encode("utf-8")).hexdigest()[:16]
        return f"{backend}:{model}:{prompt_hash}:{hash_context(context)}"

    def get(
        self,
        backend: str,
        model: str,
        prompt: str,
        context: Optional[Mapping[str, Any]] = None,
        rng: Optional[random.Random] = None,
    ) -> Optional[str]:
        """
        Get a cached value sampled at random from the key's bag.

        Args:
            backend: Backend name
            model: Model identifier
            prompt: Prompt text
            context: Generation context (key order ignored)
            rng: Random source for the pick (defaults to the cache's own)

        Returns:
            A cached value, or None on miss
        """
        key = self.make_key(backend, model, prompt, context)

        with self._lock:
            entries = self._store.get(key)
            if not entries:
                self._misses += 1
                return None

            self._store.move_to_end(key)
            entry = entries[(rng or self._rng).randrange(len(entries))]
            entry.hits += 1
            self._lookup_hits += 1

        logger.debug(f"Cache hit for {key} ({len(entries)} values in bag)")
        return entry.value

    def set(
        self,
        backend: str,
        model: str,
        prompt: str,
        value: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Append a value to the key's bag, evicting per the configured caps."""
        key = self.make_key(backend, model, prompt, context)

        with self._lock:
            entries = self._store.setdefault(key, [])
            entries.append(CacheEntry(value=value, timestamp=time.time()))

            while len(entries) > self.config.max_values_per_key:
                entries.pop(0)

            self._store.move_to_end(key)
            self._evict_keys()

    def _evict_keys(self) -> None:
        while len(self._store) > self.config.max_keys:
            lru_key, _ = self._store.popitem(last=False)
            logger.debug(f"Evicted least recently used cache key {lru_key}")

    def clear(self) -> None:
        """Remove every key and reset lookup counters."""
        with self._lock:
            self._store.clear()
            self._misses = 0
            self._lookup_hits = 0

    def configure(
        self,
        max_keys: Optional[int] = None,
        max_values_per_key: Optional[int] = None,
    ) -> None:
        """Update the caps; existing content is trimmed to the new bounds."""
        with self._lock:
            if max_keys is not None:
                self.config.max_keys = max_keys
            if max_values_per_key is not None:
                self.config.max_values_per_key = max_values_per_key

            for entries in self._store.values():
                del entries[:max(0, len(entries) - self.config.max_values_per_key)]
            self._evict_keys()

    def stats(self) -> CacheStats:
        """Get cache statistics."""
        with self._lock:
            keys = len(self._store)
            total_entries = sum(len(entries) for entries in self._store.values())
            total_hits = sum(e.hits for entries in self._store.values() for e in entries)
            lookups = self._lookup_hits + self._misses

            return CacheStats(
                keys=keys,
                total_entries=total_entries,
                total_hits=total_hits,
                hit_rate=(total_hits / (total_hits + keys)) * 100 if total_hits > 0 else 0.0,
                misses=self._misses,
                lookup_hit_rate=(self._lookup_hits / lookups) * 100 if lookups else 0.0,
            )

    def __len__(self) -> int:
        return len(self._store)


# Shared process-wide instance; pass an explicit ValueCache to isolate runs.
cache = ValueCache()


def clear_cache() -> None:
    """Clear the shared cache."""
    cache.clear()


def get_cache_stats() -> CacheStats:
    """Get statistics for the shared cache."""
    return cache.stats()
