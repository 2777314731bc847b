"""
Shared fixtures: in-process backends and isolated caches (no network).
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest

from gannicus.cache import CacheConfig, ValueCache


class EchoBackend:
    """Backend returning "<prompt>#<n>" and recording every call."""

    name = "mock"
    model_name = "echo-1"

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    async def generate(self, prompt: str, context: Optional[Mapping[str, Any]] = None) -> str:
        self.calls.append((prompt, dict(context or {})))
        if self.delay:
            await asyncio.sleep(self.delay)
        return f"{prompt}#{len(self.calls)}"


class BatchingEchoBackend(EchoBackend):
    """EchoBackend with a native batch call."""

    def __init__(self, delay: float = 0.0):
        super().__init__(delay)
        self.batch_calls: List[List[str]] = []

    async def generate_batch(
        self,
        prompts: List[str],
        context: Optional[Mapping[str, Any]] = None,
    ) -> List[str]:
        self.batch_calls.append(list(prompts))
        return [f"{p}#batch{len(self.batch_calls)}-{i}" for i, p in enumerate(prompts)]


@pytest.fixture
def backend() -> EchoBackend:
    return EchoBackend()


@pytest.fixture
def batching_backend() -> BatchingEchoBackend:
    return BatchingEchoBackend()


@pytest.fixture
def value_cache() -> ValueCache:
    return ValueCache(CacheConfig(max_keys=100, max_values_per_key=10))
