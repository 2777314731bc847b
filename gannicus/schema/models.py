"""
Data models for schema definition.

A schema is an ordered mapping of field name -> field. Each field is one of
five frozen dataclasses; ``Field`` is their closed union.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple, Union


class FieldType(Enum):
    """Kind of value a field produces."""
    LLM = "llm"
    STATIC = "static"
    NUMBER = "number"
    ENUM = "enum"
    DERIVED = "derived"


@dataclass(frozen=True)
class StaticField:
    """Always returns the same value."""
    value: Any
    description: Optional[str] = None

    field_type: ClassVar[FieldType] = FieldType.STATIC


@dataclass(frozen=True)
class NumberField:
    """Random number in [min, max), rounded to ``decimals`` or floored."""
    min: float
    max: float
    decimals: Optional[int] = None
    description: Optional[str] = None

    field_type: ClassVar[FieldType] = FieldType.NUMBER


@dataclass(frozen=True)
class EnumOption:
    """One enum choice with its relative weight."""
    value: Any
    weight: float = 1.0


@dataclass(frozen=True)
class EnumField:
    """Weighted choice among ordered options."""
    options: Tuple[EnumOption, ...]
    description: Optional[str] = None

    field_type: ClassVar[FieldType] = FieldType.ENUM

    @property
    def total_weight(self) -> float:
        return sum(opt.weight for opt in self.options)


@dataclass(frozen=True)
class DerivedField:
    """
    Value computed from already-resolved fields.

    ``compute`` receives the partially built record. It should only read
    names listed in ``depends``; the engine does not enforce that.
    """
    depends: Tuple[str, ...]
    compute: Callable[[Dict[str, Any]], Any] = field(compare=False)
    description: Optional[str] = None

    field_type: ClassVar[FieldType] = FieldType.DERIVED


@dataclass(frozen=True)
class LLMField:
    """Value produced by the text-generation backend."""
    prompt: str
    coherence: Tuple[str, ...] = ()
    examples: Tuple[str, ...] = ()
    description: Optional[str] = None

    field_type: ClassVar[FieldType] = FieldType.LLM


Field = Union[StaticField, NumberField, EnumField, DerivedField, LLMField]

FIELD_CLASSES = (StaticField, NumberField, EnumField, DerivedField, LLMField)

Schema = Mapping[str, Field]


def field_dependencies(fld: Field) -> Tuple[str, ...]:
    """Names that must be resolved before ``fld`` (depends or coherence edges)."""
    if isinstance(fld, DerivedField):
        return fld.depends
    if isinstance(fld, LLMField):
        return fld.coherence
    return ()


@dataclass
class GenerationContext:
    """Per-record state while its fields are resolved."""
    schema: Schema
    generated_fields: Dict[str, Any] = field(default_factory=dict)
    record_index: int = 0
