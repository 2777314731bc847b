"""
Tests for the seeded value strategies.
"""

import random
from collections import Counter

from gannicus.generator.values import (
    RECORD_INDEX_KEY,
    build_coherence_context,
    compose_prompt,
    generate_enum,
    generate_number,
)
from gannicus.schema import enum_field, llm, number


def test_integer_numbers_in_half_open_range():
    fld = number(18, 65)
    rng = random.Random(0)
    values = [generate_number(fld, rng) for _ in range(2000)]

    assert all(isinstance(v, int) for v in values)
    assert all(18 <= v < 65 for v in values)
    assert min(values) == 18
    assert max(values) == 64


def test_decimal_numbers_rounded():
    fld = number(0, 1, decimals=2)
    rng = random.Random(1)
    for _ in range(200):
        value = generate_number(fld, rng)
        assert 0 <= value <= 1
        assert round(value, 2) == value


def test_zero_decimals_gives_ints():
    fld = number(0, 10, decimals=0)
    rng = random.Random(5)
    values = [generate_number(fld, rng) for _ in range(100)]

    assert all(type(v) is int for v in values)
    assert all(0 <= v <= 10 for v in values)


def test_enum_frequencies_follow_weights():
    fld = enum_field([("common", 70), ("rare", 25), ("legendary", 5)])
    rng = random.Random(42)
    counts = Counter(generate_enum(fld, rng) for _ in range(2000))

    assert counts["common"] > counts["rare"] > counts["legendary"] > 0


def test_enum_zero_weight_never_chosen():
    fld = enum_field([("never", 0), ("always", 1)])
    rng = random.Random(5)
    assert {generate_enum(fld, rng) for _ in range(500)} == {"always"}


def test_same_seed_same_draws():
    fld = enum_field(["a", "b", "c"])
    first = [generate_enum(fld, random.Random(9)) for _ in range(3)]
    second = [generate_enum(fld, random.Random(9)) for _ in range(3)]
    assert first == second


def test_compose_prompt_with_examples():
    assert compose_prompt(llm("A name")) == "A name"
    assert compose_prompt(llm("A name", examples=["Ada", "Grace"])) == "A name\nExamples: Ada, Grace"


def test_coherence_context_includes_hidden_index():
    fld = llm("A bio", coherence=["name", "role"])
    context = build_coherence_context(fld, {"name": "Ada", "role": "Admin", "age": 30}, 7)

    assert context == {"name": "Ada", "role": "Admin", RECORD_INDEX_KEY: 7}


def test_coherence_context_skips_unresolved_fields():
    fld = llm("A bio", coherence=["name"])
    assert build_coherence_context(fld, {}, 0) == {RECORD_INDEX_KEY: 0}
