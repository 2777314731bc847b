"""
Request batching for LLM generation.

Coalesces requests sharing a prompt and context to cut backend round-trips.
"""

from .batch_processor import (
    BatchConfig,
    BatchGroup,
    BatchProcessor,
    BatchRequest,
    BatchStats,
    batch_processor,
    flush_batches,
    generate_with_batching,
)

__all__ = [
    "BatchConfig",
    "BatchGroup",
    "BatchProcessor",
    "BatchRequest",
    "BatchStats",
    "batch_processor",
    "flush_batches",
    "generate_with_batching",
]
