"""
Schema validation, run once before any record is generated.
"""

import math
from numbers import Real

from ..errors import CircularDependencyError, SchemaError
from .models import DerivedField, EnumField, LLMField, NumberField, Schema
from .planner import find_cycle


def validate_schema(schema: Schema) -> None:
    """
    Validate a schema for common issues.

    Checks references, numeric ranges, enum options and dependency cycles.

    Raises:
        SchemaError: Describing the offending field
        CircularDependencyError: If depends/coherence edges form a cycle
    """
    field_names = set(schema)

    for field_name, fld in schema.items():
        if isinstance(fld, LLMField):
            for dep in fld.coherence:
                if dep not in field_names:
                    raise SchemaError(
                        f"Field \"{field_name}\" declares coherence with non-existent field \"{dep}\"",
                        field_name=field_name,
                    )

        elif isinstance(fld, DerivedField):
            for dep in fld.depends:
                if dep not in field_names:
                    raise SchemaError(
                        f"Derived field \"{field_name}\" depends on non-existent field \"{dep}\"",
                        field_name=field_name,
                    )

        elif isinstance(fld, NumberField):
            _validate_number(field_name, fld)

        elif isinstance(fld, EnumField):
            _validate_enum(field_name, fld)

    cycle = find_cycle(schema)
    if cycle is not None:
        raise CircularDependencyError(cycle)


def _validate_number(field_name: str, fld: NumberField) -> None:
    for label, bound in (("min", fld.min), ("max", fld.max)):
        if not isinstance(bound, Real) or isinstance(bound, bool) or not math.isfinite(bound):
            raise SchemaError(
                f"Number field \"{field_name}\" has non-numeric {label}: {bound!r}",
                field_name=field_name,
            )

    if fld.min >= fld.max:
        raise SchemaError(
            f"Number field \"{field_name}\" has invalid range: min ({fld.min}) >= max ({fld.max})",
            field_name=field_name,
        )

    if fld.decimals is not None and (not isinstance(fld.decimals, int) or fld.decimals < 0):
        raise SchemaError(
            f"Number field \"{field_name}\" has invalid decimals: {fld.decimals!r}",
            field_name=field_name,
        )


def _validate_enum(field_name: str, fld: EnumField) -> None:
    if len(fld.options) == 0:
        raise SchemaError(f"Enum field \"{field_name}\" has no options", field_name=field_name)

    for opt in fld.options:
        if not isinstance(opt.weight, Real) or opt.weight < 0:
            raise SchemaError(
                f"Enum field \"{field_name}\" has invalid weight for {opt.value!r}: {opt.weight!r}",
                field_name=field_name,
            )

    if fld.total_weight <= 0:
        raise SchemaError(
            f"Enum field \"{field_name}\" has zero total weight",
            field_name=field_name,
        )
