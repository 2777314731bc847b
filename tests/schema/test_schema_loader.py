"""
Tests for loading schemas from YAML and JSON files.
"""

import json

import pytest

from gannicus.errors import SchemaError
from gannicus.schema import (
    DerivedField,
    EnumField,
    LLMField,
    NumberField,
    StaticField,
    load_schema,
    schema_from_dict,
)

SCHEMA_YAML = """\
fields:
  first: {type: static, value: Ada}
  last: {type: static, value: Lovelace}
  age: {type: number, min: 18, max: 65}
  plan:
    type: enum
    options: [free, {value: pro, weight: 25}]
  full_name: {type: derived, depends: [first, last], template: "{first} {last}"}
  bio: {type: llm, prompt: A one-line bio, coherence: [full_name], examples: [Engineer]}
"""


def test_load_yaml(tmp_path):
    path = tmp_path / "schema.yaml"
    path.write_text(SCHEMA_YAML)

    schema = load_schema(path)

    assert list(schema) == ["first", "last", "age", "plan", "full_name", "bio"]
    assert isinstance(schema["first"], StaticField)
    assert isinstance(schema["age"], NumberField)
    assert isinstance(schema["plan"], EnumField)
    assert [o.weight for o in schema["plan"].options] == [1.0, 25]
    assert isinstance(schema["full_name"], DerivedField)
    assert schema["full_name"].compute({"first": "Ada", "last": "Lovelace"}) == "Ada Lovelace"
    assert isinstance(schema["bio"], LLMField)
    assert schema["bio"].coherence == ("full_name",)


def test_load_json_without_fields_wrapper(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps({
        "status": {"type": "static", "value": "active"},
        "score": {"type": "number", "min": 0, "max": 1, "decimals": 2},
    }))

    schema = load_schema(path)

    assert schema["status"].value == "active"
    assert schema["score"].decimals == 2


@pytest.mark.parametrize("document", [
    {"a": {"type": "unknown"}},
    {"a": {"type": "number", "min": 0}},
    {"a": {"type": "static", "value": 1, "extra": True}},
    ["not", "a", "mapping"],
])
def test_invalid_documents_raise_schema_error(document):
    with pytest.raises(SchemaError):
        schema_from_dict(document)


def test_template_with_unresolved_field():
    schema = schema_from_dict({"x": {"type": "derived", "depends": [], "template": "{missing}"}})
    with pytest.raises(KeyError, match="missing"):
        schema["x"].compute({})
