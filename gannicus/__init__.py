"""
Gannicus: schema-driven synthetic data generation with LLM backends.

Usage:
    from gannicus import define_schema, llm, number, enum_field, derived, generate_sync
    from gannicus import GenerateOptions, ProviderConfig

    schema = define_schema(
        name=llm("A realistic full name"),
        age=number(18, 65),
        plan=enum_field([("free", 70), ("pro", 25), ("enterprise", 5)]),
        bio=llm("A one-sentence professional bio", coherence=["name", "plan"]),
    )
    result = generate_sync(schema, GenerateOptions(
        count=100,
        provider=ProviderConfig(name="ollama", model="qwen2.5:7b"),
        seed=42,
    ))
"""

__version__ = "0.1.0"

from .errors import (
    GannicusError,
    SchemaError,
    CircularDependencyError,
    ProviderConfigError,
    BackendError,
    FieldGenerationError,
    FieldValidationError,
    RecordValidationError,
)
from .schema import (
    define_schema,
    llm,
    static_value,
    number,
    enum_field,
    derived,
    validate_schema,
    build_execution_plan,
    load_schema,
    schema_from_dict,
)
from .cache import ValueCache, CacheConfig, clear_cache, get_cache_stats
from .batching import BatchProcessor, BatchConfig
from .generator import (
    generate,
    generate_sync,
    generate_fast,
    GenerateOptions,
    GenerationHooks,
    Transformations,
    Validations,
    AdvancedOptions,
    ErrorContext,
    GenerationResult,
    GenerationStats,
)
from .utils.llm import ProviderConfig, create_provider, list_models
from .utils.cost import estimate_cost, format_cost_estimate
from .output import export_records
