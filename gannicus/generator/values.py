"""
Value strategies for the deterministic field kinds and LLM request building.

All randomness comes from the ``random.Random`` passed in, so a seeded run
is reproducible.
"""

import math
import random
from typing import Any, Dict, Mapping, Union

from ..schema.models import EnumField, LLMField, NumberField

RECORD_INDEX_KEY = "__record_index"


def generate_number(fld: NumberField, rng: random.Random) -> Union[int, float]:
    """
    Uniform draw in [min, max), floored to int when ``decimals`` is None.

    With ``decimals`` set the draw is rounded, so ``max`` itself can come out;
    ``decimals=0`` gives an int.
    """
    value = rng.random() * (fld.max - fld.min) + fld.min

    if fld.decimals is not None:
        if fld.decimals == 0:
            return int(round(value))
        return round(value, fld.decimals)

    return math.floor(value)


def generate_enum(fld: EnumField, rng: random.Random) -> Any:
    """Weighted pick using one draw in [0, total_weight) and a cumulative scan."""
    remaining = rng.random() * fld.total_weight

    for opt in fld.options:
        if remaining < opt.weight:
            return opt.value
        remaining -= opt.weight

    # Float rounding can leave a sliver past the last weight
    return next(opt.value for opt in reversed(fld.options) if opt.weight > 0)


def compose_prompt(fld: LLMField) -> str:
    """Field prompt with examples folded in."""
    if not fld.examples:
        return fld.prompt
    examples = ", ".join(fld.examples)
    return f"{fld.prompt}\nExamples: {examples}"


def build_coherence_context(
    fld: LLMField,
    generated_fields: Mapping[str, Any],
    record_index: int,
) -> Dict[str, Any]:
    """
    Context for an LLM request.

    Holds the resolved values of the coherence fields plus a hidden record
    index so identical contexts in different records do not share cache keys.
    """
    context = {
        name: generated_fields[name]
        for name in fld.coherence
        if name in generated_fields
    }
    context[RECORD_INDEX_KEY] = record_index
    return context
