"""
Bounded retry with exponential backoff for backend calls.

Every external call site in the engine goes through ``with_retry``.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from ..errors import BackendError, ProviderConfigError, SchemaError

T = TypeVar("T")

logger = logging.getLogger(__name__)

NON_RETRYABLE_ERRORS: Tuple[Type[BaseException], ...] = (SchemaError, ProviderConfigError)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_retries: int = 3
    """Retries after the first attempt (total attempts = max_retries + 1)."""

    initial_delay: float = 0.1
    """Delay in seconds before the first retry."""

    exponential_base: float = 2.0
    """Base for exponential backoff calculation."""

    max_delay: float = 30.0
    """Maximum delay between retries."""

    timeout: Optional[float] = None
    """Per-attempt timeout in seconds (None = no timeout)."""


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Delay before retrying after the zero-based ``attempt`` failed."""
    delay = config.initial_delay * (config.exponential_base ** attempt)
    return min(delay, config.max_delay)


async def with_retry(
    attempt_fn: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
    description: str = "backend call",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run ``attempt_fn`` until it succeeds or retries are exhausted.

    Each attempt is raced against ``config.timeout`` when set; a timeout is
    raised as BackendError and retried like any other backend failure.

    Args:
        attempt_fn: Zero-argument coroutine factory, called once per attempt
        config: Retry configuration (uses defaults if None)
        description: Label used in log messages
        sleep: Awaitable sleep, injectable for tests

    Returns:
        The first successful result

    Raises:
        The last error once all attempts fail, or immediately for schema and
        provider-configuration errors.
    """
    config = config or RetryConfig()
    attempts = max(0, config.max_retries) + 1

    for attempt in range(attempts):
        try:
            if config.timeout is not None:
                try:
                    return await asyncio.wait_for(attempt_fn(), timeout=config.timeout)
                except asyncio.TimeoutError as e:
                    raise BackendError(
                        f"{description} timed out after {config.timeout}s"
                    ) from e
            return await attempt_fn()

        except NON_RETRYABLE_ERRORS:
            raise

        except Exception as e:
            if attempt >= attempts - 1:
                logger.error(f"{description} failed after {attempt + 1} attempts: {e}")
                raise

            delay = calculate_delay(attempt, config)
            logger.warning(
                f"{description} failed (attempt {attempt + 1}/{attempts}), "
                f"retrying in {delay:.2f}s: {e}"
            )
            await sleep(delay)

    raise RuntimeError("unreachable")
