"""
Batch processor for LLM generation requests.

Groups concurrent requests sharing the same prompt and context so they can
be sent to the backend together. A group is flushed when it reaches the
batch size, or by a shared timer after a short interval.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set

logger = logging.getLogger(__name__)


@dataclass
class BatchConfig:
    """Configuration for batching."""
    batch_size: int = 10
    """Pending requests in one group that trigger an immediate flush."""

    flush_interval: float = 0.1
    """Seconds before the shared timer flushes every group."""


@dataclass
class BatchRequest:
    """A single pending generation request."""
    prompt: str
    context: Optional[Mapping[str, Any]]
    future: "asyncio.Future[str]"
    field_name: Optional[str] = None


@dataclass
class BatchGroup:
    """Pending requests sharing one (prompt, context) key."""
    prompt: str
    backend: Any
    field_name: Optional[str] = None
    requests: List[BatchRequest] = field(default_factory=list)


@dataclass
class BatchStats:
    """Counters for flush activity."""
    flushes: int = 0
    batch_calls: int = 0
    individual_calls: int = 0
    fallbacks: int = 0


class BatchProcessor:
    """
    Coalesces LLM requests by (prompt, context).

    Requests in a group are logically independent: each resolves its own
    future, and a failed batch call falls back to individual calls so one
    bad request cannot fail the others.

    Usage:
        processor = BatchProcessor(BatchConfig(batch_size=5))
        value = await processor.add(backend, "A company name", {"industry": "AI"})
        await processor.flush_all()
    """

    def __init__(self, config: Optional[BatchConfig] = None):
        self.config = config or BatchConfig()
        self.stats = BatchStats()
        self._groups: Dict[str, BatchGroup] = {}
        self._flush_handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set["asyncio.Task[None]"] = set()

    @staticmethod
    def batch_key(prompt: str, context: Optional[Mapping[str, Any]] = None) -> str:
        """Group key; context key order does not matter."""
        if not context:
            return f"{prompt}:no-context"
        return f"{prompt}:{json.dumps(dict(context), sort_keys=True, default=str)}"

    @property
    def pending(self) -> int:
        """Number of requests waiting in all groups."""
        return sum(len(group.requests) for group in self._groups.values())

    async def add(
        self,
        backend: Any,
        prompt: str,
        context: Optional[Mapping[str, Any]] = None,
        field_name: Optional[str] = None,
    ) -> str:
        """
        Queue a request and wait for its value.

        Args:
            backend: Object with ``generate`` and optionally ``generate_batch``
            prompt: Prompt text
            context: Generation context
            field_name: Schema field the request belongs to

        Returns:
            Generated text
        """
        loop = asyncio.get_running_loop()
        key = self.batch_key(prompt, context)

        group = self._groups.get(key)
        if group is None:
            group = BatchGroup(prompt=prompt, backend=backend, field_name=field_name)
            self._groups[key] = group

        future: "asyncio.Future[str]" = loop.create_future()
        group.requests.append(BatchRequest(
            prompt=prompt,
            context=context,
            future=future,
            field_name=field_name,
        ))

        if len(group.requests) >= self.config.batch_size:
            self._spawn(self.flush(key))
        elif self._flush_handle is None:
            self._flush_handle = loop.call_later(self.config.flush_interval, self._on_timer)

        return await future

    def _spawn(self, coro) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _on_timer(self) -> None:
        self._flush_handle = None
        self._spawn(self.flush_all())

    def _cancel_timer(self) -> None:
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None

    async def flush(self, key: str) -> None:
        """Send up to ``batch_size`` pending requests of one group."""
        group = self._groups.get(key)
        if group is None or not group.requests:
            self._groups.pop(key, None)
            return

        requests = group.requests[:self.config.batch_size]
        del group.requests[:self.config.batch_size]
        if not group.requests:
            del self._groups[key]

        self.stats.flushes += 1
        logger.debug(f"Flushing {len(requests)} request(s) for field {group.field_name!r}")

        backend = group.backend
        generate_batch = getattr(backend, "generate_batch", None)

        if generate_batch is not None and len(requests) > 1:
            try:
                self.stats.batch_calls += 1
                results = await generate_batch(
                    [req.prompt for req in requests],
                    requests[0].context,
                )
                if len(results) != len(requests):
                    raise ValueError(
                        f"Batch call returned {len(results)} results for {len(requests)} prompts"
                    )
            except Exception as e:
                self.stats.fallbacks += 1
                logger.warning(f"Batch call failed, falling back to individual calls: {e}")
                await self._send_individually(backend, requests)
            else:
                for req, result in zip(requests, results):
                    if not req.future.done():
                        req.future.set_result(result or "")
        else:
            await self._send_individually(backend, requests)

    async def _send_individually(self, backend: Any, requests: List[BatchRequest]) -> None:
        for req in requests:
            if req.future.done():
                continue
            self.stats.individual_calls += 1
            try:
                result = await backend.generate(req.prompt, req.context)
            except Exception as e:
                if not req.future.done():
                    req.future.set_exception(e)
            else:
                if not req.future.done():
                    req.future.set_result(result)

    async def flush_all(self) -> None:
        """Cancel the timer and flush every outstanding group until none remain."""
        self._cancel_timer()

        current = asyncio.current_task()
        in_flight = [task for task in self._tasks if task is not current]
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)

        while self._groups:
            await asyncio.gather(*(self.flush(key) for key in list(self._groups)))

    def configure(
        self,
        batch_size: Optional[int] = None,
        flush_interval: Optional[float] = None,
    ) -> None:
        """Update batch size and flush interval."""
        if batch_size is not None:
            self.config.batch_size = batch_size
        if flush_interval is not None:
            self.config.flush_interval = flush_interval


# Shared process-wide instance
batch_processor = BatchProcessor()


async def generate_with_batching(
    backend: Any,
    prompt: str,
    context: Optional[Mapping[str, Any]] = None,
    field_name: Optional[str] = None,
    use_batching: bool = True,
    processor: Optional[BatchProcessor] = None,
) -> str:
    """
    Generate a value, through the batch processor when enabled.

    Args:
        backend: Backend adapter
        prompt: Prompt text
        context: Generation context
        field_name: Schema field name
        use_batching: Route through the processor (False calls the backend directly)
        processor: Processor to use (defaults to the shared one)

    Returns:
        Generated text
    """
    if not use_batching:
        return await backend.generate(prompt, context)
    return await (processor or batch_processor).add(backend, prompt, context, field_name)


async def flush_batches(processor: Optional[BatchProcessor] = None) -> None:
    """Flush all pending batches (call before completion)."""
    await (processor or batch_processor).flush_all()
