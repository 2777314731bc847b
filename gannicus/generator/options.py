"""
Options for a generation run.

Hooks, transformations and validations are named optional callback slots.
Each callback may be a plain function or a coroutine function.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from ..batching import BatchProcessor
from ..cache import ValueCache
from ..utils.llm import ProviderConfig

MaybeAwaitable = Union[Any, Awaitable[Any]]


@dataclass
class ErrorContext:
    """Where an error happened."""
    record_index: int
    field_name: Optional[str] = None
    record: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GenerationHooks:
    """Lifecycle callbacks."""
    on_start: Optional[Callable[["GenerateOptions"], MaybeAwaitable]] = None
    before_record: Optional[Callable[[int, Any], MaybeAwaitable]] = None
    before_field: Optional[Callable[[str, Any, Any], MaybeAwaitable]] = None
    after_field: Optional[Callable[[str, Any, Any, Any], MaybeAwaitable]] = None
    """(field_name, value, field, context) -> replacement value, or None to keep."""

    after_record: Optional[Callable[[Dict[str, Any], int, Any], MaybeAwaitable]] = None
    """(record, index, context) -> replacement record, or None to keep."""

    on_error: Optional[Callable[[Exception, ErrorContext], MaybeAwaitable]] = None
    on_progress: Optional[Callable[[int, int], MaybeAwaitable]] = None
    on_complete: Optional[Callable[[Any], MaybeAwaitable]] = None


@dataclass
class Transformations:
    """Post-processing of values and records."""
    transform_field: Optional[Callable[[str, Any, Dict[str, Any]], MaybeAwaitable]] = None
    transform_record: Optional[Callable[[Dict[str, Any], int], MaybeAwaitable]] = None
    filter_record: Optional[Callable[[Dict[str, Any], int], MaybeAwaitable]] = None


@dataclass
class Validations:
    """Quality gates; returning False or raising rejects the value/record."""
    validate_field: Optional[Callable[[str, Any, Dict[str, Any]], MaybeAwaitable]] = None
    validate_record: Optional[Callable[[Dict[str, Any], int], MaybeAwaitable]] = None


@dataclass
class AdvancedOptions:
    """Retry, timeout and error policy."""
    max_retries: int = 3
    timeout: Optional[float] = None
    """Per-attempt timeout for backend calls, in seconds."""

    stop_on_error: bool = False
    continue_on_field_error: bool = True
    error_handler: Optional[Callable[[Exception, ErrorContext], MaybeAwaitable]] = None
    """Returns a fallback value for a failed field."""

    retry_delay: float = 0.1
    """Base backoff delay; attempt n waits retry_delay * 2**n."""


@dataclass
class GenerateOptions:
    """Everything a generation run needs besides the schema."""
    count: int
    provider: Union[ProviderConfig, Any]
    """A ProviderConfig, or any object with ``name`` and async ``generate``."""

    seed: Optional[int] = None
    batch_size: Optional[int] = None
    on_progress: Optional[Callable[[int, int], MaybeAwaitable]] = None
    hooks: Optional[GenerationHooks] = None
    transformations: Optional[Transformations] = None
    validations: Optional[Validations] = None
    advanced: Optional[AdvancedOptions] = None
    cache: Optional[ValueCache] = None
    """Cache to use (the shared instance if None)."""

    use_cache: bool = True
    batch_processor: Optional[BatchProcessor] = None
    """Processor to use; batching is on when this or batch_size > 1 is set."""

    def snapshot(self) -> Dict[str, Any]:
        """Serializable summary for result metadata."""
        if isinstance(self.provider, ProviderConfig):
            provider = self.provider.model_dump(exclude={"api_key"})
        else:
            provider = {
                "name": getattr(self.provider, "name", type(self.provider).__name__),
                "model": getattr(self.provider, "model_name", None),
            }

        advanced = self.advanced or AdvancedOptions()
        return {
            "count": self.count,
            "provider": provider,
            "seed": self.seed,
            "batch_size": self.batch_size,
            "use_cache": self.use_cache,
            "max_retries": advanced.max_retries,
            "timeout": advanced.timeout,
            "stop_on_error": advanced.stop_on_error,
            "continue_on_field_error": advanced.continue_on_field_error,
        }
