"""
Tests for development fast mode.
"""

import pytest

from gannicus.batching import batch_processor
from gannicus.cache import cache
from gannicus.generator import generate_fast
from gannicus.generator.fast_mode import FAST_BATCH_SIZE, FAST_FLUSH_INTERVAL, clear_cache, get_cache_stats
from gannicus.schema import define_schema, llm, static_value


@pytest.fixture(autouse=True)
def _clean_shared_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.mark.asyncio
async def test_defaults_to_development_model():
    result = await generate_fast(define_schema(status=static_value("ok")), 2)

    assert result.stats.provider == "ollama"
    assert result.stats.model == "llama3.2:3b"
    assert result.data == [{"status": "ok"}, {"status": "ok"}]


@pytest.mark.asyncio
async def test_configures_shared_batch_processor(backend):
    result = await generate_fast(define_schema(name=llm("A name")), 2, provider=backend)

    assert batch_processor.config.batch_size == FAST_BATCH_SIZE
    assert batch_processor.config.flush_interval == FAST_FLUSH_INTERVAL
    assert result.metadata.options["batch_size"] == FAST_BATCH_SIZE
    assert len(result.data) == 2
    assert batch_processor.pending == 0


@pytest.mark.asyncio
async def test_batch_size_override(backend):
    result = await generate_fast(define_schema(name=llm("A name")), 2, provider=backend, batch_size=4)

    assert batch_processor.config.batch_size == 4
    assert result.metadata.options["batch_size"] == 4


@pytest.mark.asyncio
async def test_uses_shared_cache(backend):
    schema = define_schema(name=llm("A name"))

    await generate_fast(schema, 2, provider=backend, use_batching=False)
    second = await generate_fast(schema, 2, provider=backend, use_batching=False)

    assert len(backend.calls) == 2
    assert second.stats.cache_hits == 2
    assert len(cache) == 2
    assert get_cache_stats().keys == 2


@pytest.mark.asyncio
async def test_cache_can_be_disabled(backend):
    schema = define_schema(name=llm("A name"))

    await generate_fast(schema, 1, provider=backend, use_cache=False, use_batching=False)
    await generate_fast(schema, 1, provider=backend, use_cache=False, use_batching=False)

    assert len(backend.calls) == 2
    assert get_cache_stats().keys == 0


@pytest.mark.asyncio
async def test_extra_options_pass_through(backend):
    result = await generate_fast(define_schema(a=static_value(1)), 1, provider=backend, seed=9)
    assert result.metadata.options["seed"] == 9
