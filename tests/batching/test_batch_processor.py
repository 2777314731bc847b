"""
Tests for the batch coalescer.
"""

import asyncio

import pytest

from gannicus.batching import BatchConfig, BatchProcessor, generate_with_batching
from gannicus.errors import BackendError


class ShortBatchBackend:
    """generate_batch returns one result too few."""

    name = "short"

    def __init__(self):
        self.individual = 0

    async def generate(self, prompt, context=None):
        self.individual += 1
        return f"single-{self.individual}"

    async def generate_batch(self, prompts, context=None):
        return ["only-one"]


class RaisingBatchBackend(ShortBatchBackend):
    """generate_batch always raises."""

    name = "raising"

    async def generate_batch(self, prompts, context=None):
        raise BackendError("batch endpoint down", backend=self.name)


class FlakyBackend:
    """No batch call; the second request fails."""

    name = "flaky"

    def __init__(self):
        self.calls = 0

    async def generate(self, prompt, context=None):
        self.calls += 1
        if self.calls == 2:
            raise BackendError("boom", backend=self.name)
        return f"ok-{self.calls}"


@pytest.mark.asyncio
async def test_concurrent_adds_flush_before_resolving(batching_backend):
    processor = BatchProcessor(BatchConfig(batch_size=2, flush_interval=10.0))

    results = await asyncio.gather(*(
        processor.add(batching_backend, "A name", {"country": "UK"}, field_name="name")
        for _ in range(5)
    ))
    await processor.flush_all()

    assert len(results) == 5
    assert all(isinstance(r, str) and r for r in results)
    assert processor.stats.flushes >= 1
    assert batching_backend.batch_calls
    assert all(len(batch) <= 2 for batch in batching_backend.batch_calls)
    assert processor.pending == 0


@pytest.mark.asyncio
async def test_timer_flushes_partial_group(backend):
    processor = BatchProcessor(BatchConfig(batch_size=10, flush_interval=0.01))

    result = await processor.add(backend, "A city")

    assert result == "A city#1"
    assert processor.stats.flushes == 1
    assert processor.stats.individual_calls == 1


@pytest.mark.asyncio
async def test_wrong_length_batch_falls_back_to_individual_calls():
    backend = ShortBatchBackend()
    processor = BatchProcessor(BatchConfig(batch_size=3, flush_interval=10.0))

    results = await asyncio.gather(*(processor.add(backend, "p") for _ in range(3)))

    assert sorted(results) == ["single-1", "single-2", "single-3"]
    assert processor.stats.fallbacks == 1
    assert backend.individual == 3


@pytest.mark.asyncio
async def test_failed_batch_call_falls_back_to_individual_calls():
    backend = RaisingBatchBackend()
    processor = BatchProcessor(BatchConfig(batch_size=3, flush_interval=10.0))

    results = await asyncio.gather(*(processor.add(backend, "p") for _ in range(3)))

    assert sorted(results) == ["single-1", "single-2", "single-3"]
    assert processor.stats.batch_calls == 1
    assert processor.stats.fallbacks == 1
    assert processor.stats.individual_calls == 3


@pytest.mark.asyncio
async def test_individual_failure_rejects_only_that_request():
    backend = FlakyBackend()
    processor = BatchProcessor(BatchConfig(batch_size=3, flush_interval=10.0))

    results = await asyncio.gather(
        *(processor.add(backend, "p") for _ in range(3)),
        return_exceptions=True,
    )

    assert results[0] == "ok-1"
    assert isinstance(results[1], BackendError)
    assert results[2] == "ok-3"


@pytest.mark.asyncio
async def test_groups_split_by_context(batching_backend):
    processor = BatchProcessor(BatchConfig(batch_size=2, flush_interval=0.01))

    await asyncio.gather(
        processor.add(batching_backend, "p", {"k": 1}),
        processor.add(batching_backend, "p", {"k": 2}),
    )

    # Different contexts never share a batch call
    assert batching_backend.batch_calls == []
    assert len(batching_backend.calls) == 2


@pytest.mark.asyncio
async def test_flush_all_drains_everything(backend):
    processor = BatchProcessor(BatchConfig(batch_size=100, flush_interval=10.0))

    tasks = [asyncio.ensure_future(processor.add(backend, f"p{i}")) for i in range(4)]
    await asyncio.sleep(0)
    assert processor.pending == 4

    await processor.flush_all()

    assert processor.pending == 0
    assert [t.result() for t in tasks] == ["p0#1", "p1#2", "p2#3", "p3#4"]


def test_batch_key_ignores_context_order():
    assert BatchProcessor.batch_key("p", {"a": 1, "b": 2}) == BatchProcessor.batch_key("p", {"b": 2, "a": 1})
    assert BatchProcessor.batch_key("p") == "p:no-context"


@pytest.mark.asyncio
async def test_generate_without_batching_calls_backend_directly(backend):
    processor = BatchProcessor()

    result = await generate_with_batching(backend, "p", use_batching=False, processor=processor)

    assert result == "p#1"
    assert processor.stats.flushes == 0
