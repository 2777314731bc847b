"""
Schema definition: field kinds, builders, validation and planning.
"""

from .models import (
    FieldType,
    StaticField,
    NumberField,
    EnumOption,
    EnumField,
    DerivedField,
    LLMField,
    Field,
    Schema,
    GenerationContext,
    field_dependencies,
)
from .builders import (
    llm,
    static_value,
    number,
    enum_field,
    derived,
    define_schema,
)
from .planner import ExecutionPlan, build_execution_plan, find_cycle
from .validation import validate_schema
from .loader import load_schema, schema_from_dict

__all__ = [
    # Models
    "FieldType",
    "StaticField",
    "NumberField",
    "EnumOption",
    "EnumField",
    "DerivedField",
    "LLMField",
    "Field",
    "Schema",
    "GenerationContext",
    "field_dependencies",
    # Builders
    "llm",
    "static_value",
    "number",
    "enum_field",
    "derived",
    "define_schema",
    # Planning / validation
    "ExecutionPlan",
    "build_execution_plan",
    "find_cycle",
    "validate_schema",
    # Files
    "load_schema",
    "schema_from_dict",
]
