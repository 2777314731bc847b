"""
Tests for the bounded-retry combinator.
"""

import asyncio

import pytest

from gannicus.errors import BackendError, ProviderConfigError, SchemaError
from gannicus.generator.retry import RetryConfig, calculate_delay, with_retry


def _recording_sleep():
    delays = []

    async def sleep(delay):
        delays.append(delay)

    return delays, sleep


def _failing(times, error=None):
    """Attempt function that fails ``times`` times, then returns "ok"."""
    state = {"calls": 0}

    async def attempt():
        state["calls"] += 1
        if state["calls"] <= times:
            raise error or BackendError(f"failure {state['calls']}")
        return "ok"

    return state, attempt


def test_delay_doubles_from_initial():
    config = RetryConfig(initial_delay=0.1)
    assert [calculate_delay(n, config) for n in range(4)] == pytest.approx([0.1, 0.2, 0.4, 0.8])


def test_delay_capped():
    config = RetryConfig(initial_delay=1.0, max_delay=3.0)
    assert calculate_delay(10, config) == 3.0


@pytest.mark.asyncio
async def test_succeeds_after_transient_failures():
    delays, sleep = _recording_sleep()
    state, attempt = _failing(2)

    result = await with_retry(attempt, RetryConfig(max_retries=3), sleep=sleep)

    assert result == "ok"
    assert state["calls"] == 3
    assert delays == pytest.approx([0.1, 0.2])


@pytest.mark.asyncio
async def test_exhausted_retries_raise_last_error():
    delays, sleep = _recording_sleep()
    state, attempt = _failing(10)

    with pytest.raises(BackendError, match="failure 3"):
        await with_retry(attempt, RetryConfig(max_retries=2), sleep=sleep)

    assert state["calls"] == 3
    assert len(delays) == 2


@pytest.mark.asyncio
async def test_zero_retries_means_single_attempt():
    _, sleep = _recording_sleep()
    state, attempt = _failing(1)

    with pytest.raises(BackendError):
        await with_retry(attempt, RetryConfig(max_retries=0), sleep=sleep)
    assert state["calls"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [SchemaError("bad"), ProviderConfigError("bad")])
async def test_configuration_errors_not_retried(error):
    _, sleep = _recording_sleep()
    state, attempt = _failing(5, error=error)

    with pytest.raises(type(error)):
        await with_retry(attempt, RetryConfig(max_retries=3), sleep=sleep)
    assert state["calls"] == 1


@pytest.mark.asyncio
async def test_timeout_is_a_retryable_backend_error():
    _, sleep = _recording_sleep()
    state = {"calls": 0}

    async def attempt():
        state["calls"] += 1
        if state["calls"] == 1:
            await asyncio.sleep(1.0)
        return "fast"

    result = await with_retry(attempt, RetryConfig(max_retries=1, timeout=0.01), sleep=sleep)

    assert result == "fast"
    assert state["calls"] == 2


@pytest.mark.asyncio
async def test_timeout_exhausted_raises_backend_error():
    _, sleep = _recording_sleep()

    async def attempt():
        await asyncio.sleep(1.0)

    with pytest.raises(BackendError, match="timed out"):
        await with_retry(attempt, RetryConfig(max_retries=0, timeout=0.01), sleep=sleep)
