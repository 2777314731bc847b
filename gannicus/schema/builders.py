"""
Schema builder API for defining synthetic data schemas.

Usage:
    from gannicus.schema import define_schema, llm, number, enum_field, derived

    schema = define_schema(
        name=llm("A realistic full name"),
        age=number(18, 65),
        plan=enum_field([("free", 70), ("pro", 25), ("enterprise", 5)]),
        email=derived(
            ["name"],
            lambda ctx: ctx["name"].lower().replace(" ", ".") + "@example.com",
        ),
    )
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence

from ..errors import SchemaError
from .models import (
    FIELD_CLASSES,
    DerivedField,
    EnumField,
    EnumOption,
    Field,
    LLMField,
    NumberField,
    Schema,
    StaticField,
)


def llm(
    prompt: str,
    coherence: Optional[Sequence[str]] = None,
    examples: Optional[Sequence[str]] = None,
    description: Optional[str] = None,
) -> LLMField:
    """
    Create an LLM-generated field.

    Args:
        prompt: Free-text description of the desired value
        coherence: Field names whose resolved values are fed in as context
        examples: Example outputs to guide the model
        description: Optional human-readable note

    Returns:
        LLMField
    """
    return LLMField(
        prompt=prompt,
        coherence=tuple(coherence or ()),
        examples=tuple(examples or ()),
        description=description,
    )


def static_value(value: Any, description: Optional[str] = None) -> StaticField:
    """Create a field that always returns ``value``."""
    return StaticField(value=value, description=description)


def number(
    min: float,
    max: float,
    decimals: Optional[int] = None,
    description: Optional[str] = None,
) -> NumberField:
    """Create a number field drawing from [min, max)."""
    return NumberField(min=min, max=max, decimals=decimals, description=description)


def _to_option(raw: Any) -> EnumOption:
    if isinstance(raw, EnumOption):
        return raw
    if isinstance(raw, dict):
        if "value" not in raw:
            raise SchemaError(f"Enum option dict is missing 'value': {raw!r}")
        weight = raw.get("weight")
        return EnumOption(value=raw["value"], weight=1.0 if weight is None else weight)
    if isinstance(raw, tuple):
        if len(raw) != 2:
            raise SchemaError(f"Enum option tuple must be (value, weight): {raw!r}")
        value, weight = raw
        return EnumOption(value=value, weight=1.0 if weight is None else weight)
    return EnumOption(value=raw)


def enum_field(options: Iterable[Any], description: Optional[str] = None) -> EnumField:
    """
    Create an enum field with optional weights.

    Options may be bare values (weight 1), ``(value, weight)`` tuples,
    ``{"value": ..., "weight": ...}`` dicts or EnumOption instances.
    """
    return EnumField(
        options=tuple(_to_option(opt) for opt in options),
        description=description,
    )


def derived(
    depends: Sequence[str],
    compute: Callable[[Dict[str, Any]], Any],
    description: Optional[str] = None,
) -> DerivedField:
    """Create a field computed from other fields."""
    if not callable(compute):
        raise SchemaError("Derived field compute must be callable")
    return DerivedField(depends=tuple(depends), compute=compute, description=description)


def define_schema(fields: Optional[Mapping[str, Field]] = None, **kwargs: Field) -> Schema:
    """
    Define a complete schema.

    Declaration order is preserved and used by the planner for independent
    fields. The returned mapping is read-only.
    """
    combined: Dict[str, Field] = {}
    combined.update(fields or {})
    combined.update(kwargs)

    for name, fld in combined.items():
        if not isinstance(fld, FIELD_CLASSES):
            raise SchemaError(
                f"Field \"{name}\" is not a schema field: {type(fld).__name__}",
                field_name=name,
            )

    return MappingProxyType(combined)
