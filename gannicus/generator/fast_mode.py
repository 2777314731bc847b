"""
Fast mode for development.

Prioritizes speed over quality: smallest recommended model, small batches
with a short flush interval, and caching on. Semantically the same as
calling generate() with those defaults.
"""

from typing import Any, Optional

from ..batching import batch_processor
from ..cache import CacheStats, clear_cache as _clear_shared_cache, get_cache_stats as _shared_cache_stats
from ..schema import Schema
from ..utils.llm import ProviderConfig, get_model_for_use_case
from .engine import generate
from .options import GenerateOptions
from .result import GenerationResult

FAST_BATCH_SIZE = 10
FAST_FLUSH_INTERVAL = 0.05


async def generate_fast(
    schema: Schema,
    count: int,
    provider: Optional[Any] = None,
    use_cache: bool = True,
    use_batching: bool = True,
    batch_size: Optional[int] = None,
    **kwargs
) -> GenerationResult:
    """
    Generate records with development-friendly defaults.

    Args:
        schema: Field definitions
        count: Number of records
        provider: Backend to use (defaults to Ollama with the development model)
        use_cache: Reuse cached values
        use_batching: Coalesce requests through the shared batch processor
        batch_size: Requests per batch (FAST_BATCH_SIZE if omitted)
        **kwargs: Any other GenerateOptions field (seed, hooks, advanced, ...)

    Returns:
        GenerationResult
    """
    if provider is None:
        provider = ProviderConfig(name="ollama", model=get_model_for_use_case("development"))

    batch_size = batch_size or FAST_BATCH_SIZE
    processor = None
    if use_batching:
        batch_processor.configure(batch_size=batch_size, flush_interval=FAST_FLUSH_INTERVAL)
        processor = batch_processor

    options = GenerateOptions(
        count=count,
        provider=provider,
        batch_size=batch_size if use_batching else None,
        use_cache=use_cache,
        batch_processor=processor,
        **kwargs
    )
    return await generate(schema, options)


def clear_cache() -> None:
    """Clear the development cache."""
    _clear_shared_cache()


def get_cache_stats() -> CacheStats:
    """Statistics for the development cache."""
    return _shared_cache_stats()
