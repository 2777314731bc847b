"""
Generation engine: the per-record loop.

Resolves every field of every record in execution-plan order, runs the
hook/transformation/validation pipeline around each value and record, and
collects records, statistics and recovered errors into a GenerationResult.

Usage:
    from gannicus import define_schema, llm, number, GenerateOptions, ProviderConfig
    from gannicus.generator import generate

    schema = define_schema(
        company=llm("A tech company name"),
        employees=number(10, 5000),
    )
    result = await generate(schema, GenerateOptions(
        count=100,
        provider=ProviderConfig(name="ollama", model="qwen2.5:7b"),
        seed=42,
    ))
"""

import asyncio
import inspect
import logging
import random
import time
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from ..batching import BatchConfig, BatchProcessor, flush_batches, generate_with_batching
from ..cache import ValueCache
from ..cache import cache as shared_cache
from ..errors import (
    FieldGenerationError,
    FieldValidationError,
    RecordValidationError,
    SchemaError,
)
from ..schema import (
    DerivedField,
    EnumField,
    Field,
    GenerationContext,
    LLMField,
    NumberField,
    Schema,
    StaticField,
    build_execution_plan,
    validate_schema,
)
from ..utils.cost import estimate_cost
from ..utils.llm import ProviderConfig, create_provider
from .options import AdvancedOptions, ErrorContext, GenerateOptions, GenerationHooks, Transformations, Validations
from .result import GenerationError, GenerationMetadata, GenerationResult, GenerationStats
from .retry import RetryConfig, with_retry
from .values import build_coherence_context, compose_prompt, generate_enum, generate_number

logger = logging.getLogger(__name__)


async def _maybe_await(value: Any) -> Any:
    """Await ``value`` if a callback returned an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


def resolve_backend(provider: Any) -> Any:
    """
    Turn the ``provider`` option into a backend adapter.

    A ProviderConfig goes through the backend factory (configuration errors
    are raised here, before any record is generated); anything else is used
    as-is and must expose ``name`` and an async ``generate``.
    """
    if isinstance(provider, ProviderConfig):
        return create_provider(provider)
    if not callable(getattr(provider, "generate", None)):
        raise TypeError(
            f"provider must be a ProviderConfig or expose generate(), got {type(provider).__name__}"
        )
    return provider


class Generator:
    """
    One generation run over a schema.

    The schema is validated and planned, and the backend resolved, when the
    Generator is constructed, so schema and provider-configuration errors
    surface before any backend call.
    """

    def __init__(self, schema: Schema, options: GenerateOptions):
        if options.count < 0:
            raise ValueError(f"count must be >= 0, got {options.count}")

        validate_schema(schema)
        self.schema = schema
        self.plan = build_execution_plan(schema)
        self.options = options

        self.hooks = options.hooks or GenerationHooks()
        self.transformations = options.transformations or Transformations()
        self.validations = options.validations or Validations()
        self.advanced = options.advanced or AdvancedOptions()

        self.backend = resolve_backend(options.provider)
        self.backend_name = getattr(self.backend, "name", type(self.backend).__name__)
        self.model_name = self._model_name()

        self.rng = random.Random(options.seed)
        # Separate stream for bag picks; number/enum draws never depend on cache state
        self.cache_rng = random.Random(self.rng.random())
        self.cache: ValueCache = options.cache if options.cache is not None else shared_cache
        self.retry_config = RetryConfig(
            max_retries=self.advanced.max_retries,
            initial_delay=self.advanced.retry_delay,
            timeout=self.advanced.timeout,
        )

        self.processor: Optional[BatchProcessor] = options.batch_processor
        if self.processor is None and options.batch_size and options.batch_size > 1:
            self.processor = BatchProcessor(BatchConfig(batch_size=options.batch_size))
        self.use_batching = self.processor is not None

        self.stats = GenerationStats(
            requested_records=options.count,
            provider=self.backend_name,
            model=self.model_name,
        )
        self.errors = []

    def _model_name(self) -> str:
        model = getattr(self.backend, "model_name", None)
        if not model and isinstance(self.options.provider, ProviderConfig):
            model = self.options.provider.model
        return model or "default"

    async def run(self) -> GenerationResult:
        """Generate ``count`` records and return the result."""
        count = self.options.count
        started_at = datetime.now().isoformat()
        start_time = time.perf_counter()
        data = []

        llm_fields = sum(1 for fld in self.schema.values() if isinstance(fld, LLMField))
        logger.info(
            f"Generating {count} records ({len(self.plan)} fields, {llm_fields} LLM) "
            f"with {self.backend_name}/{self.model_name}"
        )

        if self.hooks.on_start:
            await _maybe_await(self.hooks.on_start(self.options))

        try:
            for index in range(count):
                record = await self._generate_record(index)
                if record is not None:
                    data.append(record)
                await self._report_progress(index + 1, count)
        finally:
            if self.use_batching:
                await flush_batches(self.processor)

        self.stats.total_records = len(data)
        self.stats.errors = len(self.errors)
        self.stats.cache_hit_rate = (
            self.stats.cache_hits / self.stats.llm_calls if self.stats.llm_calls > 0 else 0.0
        )
        self.stats.duration_ms = (time.perf_counter() - start_time) * 1000

        result = GenerationResult(
            data=data,
            stats=self.stats,
            metadata=GenerationMetadata(
                schema_fields=list(self.schema.keys()),
                execution_order=list(self.plan.order),
                options=self.options.snapshot(),
                cost_estimate=estimate_cost(self.backend_name, self.model_name, count, llm_fields),
                started_at=started_at,
                completed_at=datetime.now().isoformat(),
            ),
            errors=self.errors,
        )

        logger.info(
            f"Generated {self.stats.total_records}/{count} records in "
            f"{self.stats.duration_ms:.0f}ms ({self.stats.llm_calls} LLM values, "
            f"{self.stats.cache_hits} cache hits, {self.stats.filtered} filtered, "
            f"{self.stats.errors} errors)"
        )

        if self.hooks.on_complete:
            await _maybe_await(self.hooks.on_complete(result))

        return result

    async def _report_progress(self, current: int, total: int) -> None:
        if self.options.on_progress:
            await _maybe_await(self.options.on_progress(current, total))
        if self.hooks.on_progress:
            await _maybe_await(self.hooks.on_progress(current, total))

    # =========================================================================
    # Records
    # =========================================================================

    async def _generate_record(self, index: int) -> Optional[Dict[str, Any]]:
        """Build one record; returns None if it was filtered or failed."""
        ctx = GenerationContext(schema=self.schema, record_index=index)

        try:
            if self.hooks.before_record:
                await _maybe_await(self.hooks.before_record(index, ctx))

            for name in self.plan:
                value, keep = await self._resolve_field(name, ctx)
                if keep:
                    ctx.generated_fields[name] = value

            return await self._finish_record(dict(ctx.generated_fields), index, ctx)

        except Exception as e:
            logger.warning(f"Record {index} failed: {e}")
            await self._record_error(e, ErrorContext(index, record=dict(ctx.generated_fields)))
            if self.advanced.stop_on_error:
                logger.error(f"Stopping run at record {index} (stop_on_error)")
                raise
            return None

    async def _finish_record(
        self,
        record: Dict[str, Any],
        index: int,
        ctx: GenerationContext,
    ) -> Optional[Dict[str, Any]]:
        if self.transformations.transform_record:
            record = await _maybe_await(self.transformations.transform_record(record, index))

        if self.validations.validate_record:
            try:
                valid = await _maybe_await(self.validations.validate_record(record, index))
            except Exception as e:
                error = RecordValidationError(f"Record validation raised: {e}", record_index=index)
                error.__cause__ = e
                await self._record_error(error, ErrorContext(index, record=record))
                valid = False

            if not valid:
                self.stats.filtered += 1
                logger.debug(f"Record {index} rejected by validate_record")
                return None

        if self.transformations.filter_record:
            keep = await _maybe_await(self.transformations.filter_record(record, index))
            if not keep:
                self.stats.filtered += 1
                logger.debug(f"Record {index} dropped by filter_record")
                return None

        if self.hooks.after_record:
            replaced = await _maybe_await(self.hooks.after_record(record, index, ctx))
            if replaced is not None:
                record = replaced

        return record

    # =========================================================================
    # Fields
    # =========================================================================

    async def _resolve_field(self, name: str, ctx: GenerationContext) -> Tuple[Any, bool]:
        """
        Run the field pipeline for one field.

        Returns:
            (value, keep) where keep is False when the field is skipped
            for this record after a recovered error.
        """
        fld = self.schema[name]

        try:
            if self.hooks.before_field:
                await _maybe_await(self.hooks.before_field(name, fld, ctx))

            value = await self._generate_value(name, fld, ctx)

            if self.hooks.after_field:
                replaced = await _maybe_await(self.hooks.after_field(name, value, fld, ctx))
                if replaced is not None:
                    value = replaced

            if self.transformations.transform_field:
                value = await _maybe_await(
                    self.transformations.transform_field(name, value, dict(ctx.generated_fields))
                )

            await self._validate_field(name, value, ctx)
            return value, True

        except FieldValidationError as e:
            return await self._handle_field_error(e, name, ctx, use_handler=False)

        except SchemaError:
            raise

        except Exception as e:
            return await self._handle_field_error(e, name, ctx, use_handler=True)

    async def _validate_field(self, name: str, value: Any, ctx: GenerationContext) -> None:
        if not self.validations.validate_field:
            return

        try:
            valid = await _maybe_await(
                self.validations.validate_field(name, value, dict(ctx.generated_fields))
            )
        except Exception as e:
            raise FieldValidationError(
                f"Validation failed for field \"{name}\": {e}",
                field_name=name,
                record_index=ctx.record_index,
            ) from e

        if not valid:
            raise FieldValidationError(
                f"Validation failed for field \"{name}\"",
                field_name=name,
                record_index=ctx.record_index,
            )

    async def _handle_field_error(
        self,
        error: Exception,
        name: str,
        ctx: GenerationContext,
        use_handler: bool,
    ) -> Tuple[Any, bool]:
        err_ctx = ErrorContext(ctx.record_index, field_name=name, record=dict(ctx.generated_fields))

        if use_handler and self.advanced.error_handler:
            value = await _maybe_await(self.advanced.error_handler(error, err_ctx))
            logger.warning(
                f"Field \"{name}\" failed in record {ctx.record_index}, "
                f"using error_handler value: {error}"
            )
            await self._record_error(error, err_ctx)
            return value, True

        if not self.advanced.continue_on_field_error:
            if isinstance(error, FieldGenerationError):
                raise error
            raise FieldGenerationError(
                f"Field \"{name}\" failed: {error}",
                field_name=name,
                record_index=ctx.record_index,
            ) from error

        logger.warning(f"Skipping field \"{name}\" in record {ctx.record_index}: {error}")
        await self._record_error(error, err_ctx)
        return None, False

    async def _record_error(self, error: Exception, err_ctx: ErrorContext) -> None:
        self.errors.append(GenerationError.from_exception(
            error,
            record_index=err_ctx.record_index,
            field_name=err_ctx.field_name,
        ))
        if self.hooks.on_error:
            await _maybe_await(self.hooks.on_error(error, err_ctx))

    async def _generate_value(self, name: str, fld: Field, ctx: GenerationContext) -> Any:
        if isinstance(fld, StaticField):
            return fld.value
        elif isinstance(fld, NumberField):
            return generate_number(fld, self.rng)
        elif isinstance(fld, EnumField):
            return generate_enum(fld, self.rng)
        elif isinstance(fld, DerivedField):
            return fld.compute(dict(ctx.generated_fields))
        elif isinstance(fld, LLMField):
            return await self._generate_llm_value(name, fld, ctx)
        else:
            raise SchemaError(f"Unknown field type: {type(fld).__name__}", field_name=name)

    async def _generate_llm_value(self, name: str, fld: LLMField, ctx: GenerationContext) -> str:
        prompt = compose_prompt(fld)
        context = build_coherence_context(fld, ctx.generated_fields, ctx.record_index)
        self.stats.llm_calls += 1

        if self.options.use_cache:
            cached = self.cache.get(self.backend_name, self.model_name, prompt, context, rng=self.cache_rng)
            if cached is not None:
                self.stats.cache_hits += 1
                return cached

        self.stats.backend_calls += 1
        value = await with_retry(
            lambda: generate_with_batching(
                self.backend,
                prompt,
                context,
                field_name=name,
                use_batching=self.use_batching,
                processor=self.processor,
            ),
            self.retry_config,
            description=f"Field \"{name}\" (record {ctx.record_index})",
        )

        if self.options.use_cache:
            self.cache.set(self.backend_name, self.model_name, prompt, value, context)

        return value


async def generate(schema: Schema, options: GenerateOptions) -> GenerationResult:
    """
    Generate synthetic records for a schema.

    Args:
        schema: Field definitions (see gannicus.schema)
        options: Run options

    Returns:
        GenerationResult with records, stats, metadata and recovered errors

    Raises:
        SchemaError: Invalid schema (including dependency cycles)
        ProviderConfigError: Unknown backend or missing model
        Exception: The failing record's error when stop_on_error is set
    """
    return await Generator(schema, options).run()


def generate_sync(schema: Schema, options: GenerateOptions) -> GenerationResult:
    """Blocking wrapper around generate() for scripts without an event loop."""
    return asyncio.run(generate(schema, options))
