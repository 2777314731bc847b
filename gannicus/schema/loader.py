"""
Load schemas from YAML or JSON files.

File layout (``fields`` wrapper optional):

    fields:
      first: {type: static, value: Ada}
      last: {type: static, value: Lovelace}
      age: {type: number, min: 18, max: 65}
      plan:
        type: enum
        options: [free, {value: pro, weight: 25}]
      full_name: {type: derived, depends: [first, last], template: "{first} {last}"}
      bio: {type: llm, prompt: A one-line professional bio, coherence: [full_name]}

Derived fields in files cannot carry code, so they are expressed as a
``str.format`` template over their dependencies.
"""

import json
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field as PydanticField, ValidationError

from ..errors import SchemaError
from .builders import define_schema, derived, enum_field, llm, number, static_value
from .models import Field, Schema


class _FieldSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: Optional[str] = None


class StaticSpec(_FieldSpec):
    type: Literal["static"]
    value: Any = None


class NumberSpec(_FieldSpec):
    type: Literal["number"]
    min: float
    max: float
    decimals: Optional[int] = None


class EnumOptionSpec(BaseModel):
    value: Any
    weight: Optional[float] = None


class EnumSpec(_FieldSpec):
    type: Literal["enum"]
    options: List[Union[EnumOptionSpec, str, int, float, bool]]


class DerivedSpec(_FieldSpec):
    type: Literal["derived"]
    depends: List[str] = PydanticField(default_factory=list)
    template: str


class LLMSpec(_FieldSpec):
    type: Literal["llm"]
    prompt: str
    coherence: List[str] = PydanticField(default_factory=list)
    examples: List[str] = PydanticField(default_factory=list)


FieldSpec = Annotated[
    Union[StaticSpec, NumberSpec, EnumSpec, DerivedSpec, LLMSpec],
    PydanticField(discriminator="type"),
]


class SchemaFile(BaseModel):
    """Top-level schema document."""
    fields: Dict[str, FieldSpec]


def _template_compute(template: str, field_name: str):
    def compute(ctx: Dict[str, Any]) -> str:
        try:
            return template.format(**ctx)
        except KeyError as e:
            raise KeyError(
                f"Template for \"{field_name}\" references unresolved field {e}"
            ) from e

    return compute


def _build_field(name: str, spec: Any) -> Field:
    if isinstance(spec, StaticSpec):
        return static_value(spec.value, description=spec.description)
    if isinstance(spec, NumberSpec):
        return number(spec.min, spec.max, decimals=spec.decimals, description=spec.description)
    if isinstance(spec, EnumSpec):
        options = [
            {"value": opt.value, "weight": opt.weight} if isinstance(opt, EnumOptionSpec) else opt
            for opt in spec.options
        ]
        return enum_field(options, description=spec.description)
    if isinstance(spec, DerivedSpec):
        return derived(
            spec.depends,
            _template_compute(spec.template, name),
            description=spec.description,
        )
    if isinstance(spec, LLMSpec):
        return llm(
            spec.prompt,
            coherence=spec.coherence,
            examples=spec.examples,
            description=spec.description,
        )
    raise SchemaError(f"Unsupported field spec for \"{name}\": {type(spec).__name__}", field_name=name)


def schema_from_dict(data: Dict[str, Any]) -> Schema:
    """
    Build a schema from a plain dict (parsed YAML/JSON).

    Raises:
        SchemaError: If the document does not describe valid fields
    """
    if not isinstance(data, dict):
        raise SchemaError(f"Schema document must be a mapping, got {type(data).__name__}")

    document = data if "fields" in data else {"fields": data}

    try:
        parsed = SchemaFile.model_validate(document)
    except ValidationError as e:
        raise SchemaError(f"Invalid schema document: {e}") from e

    return define_schema({name: _build_field(name, spec) for name, spec in parsed.fields.items()})


def load_schema(path: Union[str, Path]) -> Schema:
    """Load a schema from a ``.yaml``/``.yml`` or ``.json`` file."""
    path = Path(path)
    with open(path) as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    return schema_from_dict(data)
