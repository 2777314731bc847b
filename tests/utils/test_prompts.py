"""
Tests for prompt construction and response cleanup.
"""

import pytest

from gannicus.utils.llm.prompts import VALUE_INSTRUCTION, build_prompt, extract_value, visible_context


def test_prompt_without_context():
    assert build_prompt("A city") == f"A city\n\n{VALUE_INSTRUCTION}"


def test_prompt_with_context_hides_internal_keys():
    prompt = build_prompt("A bio", {"name": "Ada", "__record_index": 4})

    assert prompt.startswith("Given the following context:\nname: Ada\n\nGenerate: A bio")
    assert "__record_index" not in prompt


def test_only_internal_context_treated_as_empty():
    assert visible_context({"__record_index": 1}) == {}
    assert build_prompt("A city", {"__record_index": 1}) == build_prompt("A city")


@pytest.mark.parametrize("raw,expected", [
    ("Ada Lovelace", "Ada Lovelace"),
    ("  \"Ada Lovelace\"  ", "Ada Lovelace"),
    ("Here is: Acme Corp.", "Acme Corp"),
    ("The answer is 'Paris'", "Paris"),
    ("Result: 42", "42"),
    ("\nLisbon\nLisbon is the capital of Portugal.", "Lisbon"),
    ("", ""),
])
def test_extract_value(raw, expected):
    assert extract_value(raw) == expected
