"""
Tests for the bag-per-key value cache.
"""

import random

import pytest

from gannicus.cache import CacheConfig, ValueCache, hash_context


class TestRoundTrip:
    """set followed by get with the same request returns a bag value."""

    def test_hit_returns_written_value(self, value_cache):
        value_cache.set("ollama", "qwen2.5:7b", "A name", "Ada", {"country": "UK"})
        assert value_cache.get("ollama", "qwen2.5:7b", "A name", {"country": "UK"}) == "Ada"

    def test_different_context_misses(self, value_cache):
        value_cache.set("ollama", "qwen2.5:7b", "A name", "Ada", {"country": "UK"})
        assert value_cache.get("ollama", "qwen2.5:7b", "A name", {"country": "FR"}) is None

    def test_different_backend_or_model_misses(self, value_cache):
        value_cache.set("ollama", "qwen2.5:7b", "A name", "Ada")
        assert value_cache.get("vllm", "qwen2.5:7b", "A name") is None
        assert value_cache.get("ollama", "llama3.2:3b", "A name") is None

    def test_context_key_order_ignored(self, value_cache):
        value_cache.set("b", "m", "p", "v", {"a": 1, "b": 2})
        assert value_cache.get("b", "m", "p", {"b": 2, "a": 1}) == "v"
        assert hash_context({"a": 1, "b": 2}) == hash_context({"b": 2, "a": 1})

    def test_get_samples_from_whole_bag(self, value_cache):
        for value in ("x", "y", "z"):
            value_cache.set("b", "m", "p", value)

        rng = random.Random(7)
        seen = {value_cache.get("b", "m", "p", rng=rng) for _ in range(200)}
        assert seen == {"x", "y", "z"}

    def test_seeded_rng_makes_picks_reproducible(self, value_cache):
        for value in ("x", "y", "z"):
            value_cache.set("b", "m", "p", value)

        first = [value_cache.get("b", "m", "p", rng=random.Random(3)) for _ in range(5)]
        second = [value_cache.get("b", "m", "p", rng=random.Random(3)) for _ in range(5)]
        assert first == second


class TestEviction:
    """FIFO within a key, LRU across keys."""

    def test_per_key_cap_drops_oldest(self):
        cache = ValueCache(CacheConfig(max_values_per_key=2))
        for value in ("first", "second", "third"):
            cache.set("b", "m", "p", value)

        assert cache.stats().total_entries == 2
        seen = {cache.get("b", "m", "p") for _ in range(50)}
        assert seen == {"second", "third"}

    def test_key_cap_evicts_least_recently_used(self):
        cache = ValueCache(CacheConfig(max_keys=2))
        cache.set("b", "m", "p1", "v1")
        cache.set("b", "m", "p2", "v2")
        # Touch p1 so p2 becomes least recently used
        assert cache.get("b", "m", "p1") == "v1"
        cache.set("b", "m", "p3", "v3")

        assert len(cache) == 2
        assert cache.get("b", "m", "p2") is None
        assert cache.get("b", "m", "p1") == "v1"
        assert cache.get("b", "m", "p3") == "v3"

    def test_configure_trims_existing_content(self, value_cache):
        for i in range(5):
            value_cache.set("b", "m", f"p{i}", "a")
            value_cache.set("b", "m", f"p{i}", "b")
            value_cache.set("b", "m", f"p{i}", "c")

        value_cache.configure(max_keys=2, max_values_per_key=1)

        stats = value_cache.stats()
        assert stats.keys == 2
        assert stats.total_entries == 2
        assert value_cache.get("b", "m", "p4") == "c"
        assert value_cache.get("b", "m", "p0") is None


class TestStats:

    def test_empty_stats(self):
        stats = ValueCache().stats()
        assert stats.keys == 0
        assert stats.total_entries == 0
        assert stats.hit_rate == 0.0
        assert stats.lookup_hit_rate == 0.0

    def test_hit_rate_approximation_and_true_counters(self, value_cache):
        value_cache.set("b", "m", "p", "v")
        value_cache.get("b", "m", "p")
        value_cache.get("b", "m", "p")
        value_cache.get("b", "m", "other")

        stats = value_cache.stats()
        assert stats.total_hits == 2
        assert stats.hit_rate == pytest.approx(2 / 3 * 100)
        assert stats.misses == 1
        assert stats.lookup_hit_rate == pytest.approx(2 / 3 * 100)
        assert stats.to_dict()["keys"] == 1

    def test_clear_resets_everything(self, value_cache):
        value_cache.set("b", "m", "p", "v")
        value_cache.get("b", "m", "missing")
        value_cache.clear()

        stats = value_cache.stats()
        assert stats.keys == 0
        assert stats.misses == 0
