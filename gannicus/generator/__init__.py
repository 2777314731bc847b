"""
Record generation: the engine loop, its options and results.
"""

from .engine import Generator, generate, generate_sync, resolve_backend
from .fast_mode import generate_fast
from .options import (
    AdvancedOptions,
    ErrorContext,
    GenerateOptions,
    GenerationHooks,
    Transformations,
    Validations,
)
from .result import GenerationError, GenerationMetadata, GenerationResult, GenerationStats
from .retry import RetryConfig, calculate_delay, with_retry
from .values import RECORD_INDEX_KEY

__all__ = [
    # Engine
    "Generator",
    "generate",
    "generate_sync",
    "generate_fast",
    "resolve_backend",
    # Options
    "AdvancedOptions",
    "ErrorContext",
    "GenerateOptions",
    "GenerationHooks",
    "Transformations",
    "Validations",
    # Results
    "GenerationError",
    "GenerationMetadata",
    "GenerationResult",
    "GenerationStats",
    # Retry
    "RetryConfig",
    "calculate_delay",
    "with_retry",
    "RECORD_INDEX_KEY",
]
