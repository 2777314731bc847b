"""
Tests for the dependency planner.
"""

import pytest

from gannicus.errors import CircularDependencyError
from gannicus.schema import build_execution_plan, define_schema, derived, find_cycle, llm, number, static_value
from gannicus.schema.planner import dependency_graph


def test_independent_fields_keep_declaration_order():
    schema = define_schema(
        zeta=static_value(1),
        alpha=number(0, 10),
        mid=llm("Something"),
    )
    assert build_execution_plan(schema).order == ("zeta", "alpha", "mid")


def test_prerequisites_come_first():
    schema = define_schema(
        email=derived(["name"], lambda c: c["name"] + "@example.com"),
        bio=llm("Bio", coherence=["name", "company"]),
        name=llm("A name"),
        company=llm("A company", coherence=["name"]),
    )
    order = list(build_execution_plan(schema))

    assert order == ["name", "email", "company", "bio"]
    for fld, deps in dependency_graph(schema).items():
        for dep in deps:
            assert order.index(dep) < order.index(fld)


def test_plan_is_sized_and_iterable():
    plan = build_execution_plan(define_schema(a=static_value(1), b=static_value(2)))
    assert len(plan) == 2
    assert list(plan) == ["a", "b"]


def test_cycle_raises_with_closing_path():
    schema = define_schema(
        x=static_value(0),
        a=derived(["b"], lambda c: c),
        b=derived(["c"], lambda c: c),
        c=derived(["a"], lambda c: c),
    )
    with pytest.raises(CircularDependencyError) as exc_info:
        build_execution_plan(schema)
    assert exc_info.value.path == ["a", "b", "c", "a"]
    assert find_cycle(schema) == ["a", "b", "c", "a"]


def test_find_cycle_none_for_dag():
    schema = define_schema(a=static_value(1), b=derived(["a"], lambda c: c["a"]))
    assert find_cycle(schema) is None
