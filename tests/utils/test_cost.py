"""
Tests for cost estimation.
"""

import pytest

from gannicus.utils.cost import compare_providers, estimate_cost, estimate_tokens, format_cost_estimate
from gannicus.utils.llm import PROVIDER_PRICING


def test_local_backend_is_free():
    estimate = estimate_cost("ollama", "qwen2.5:7b", records=1000, llm_fields=2)

    assert estimate.total_tokens == 1000 * 2 * 50
    assert estimate.cost == 0
    assert estimate.estimated_time > 0
    assert estimate.records_per_second > 0


def test_registered_model_uses_its_output_price():
    estimate = estimate_cost("openai", "gpt-4o", records=1000, llm_fields=1, tokens_per_record=100)
    assert estimate.cost == pytest.approx(100_000 / 1_000_000 * 10.00)


def test_unknown_backend_uses_local_assumptions():
    estimate = estimate_cost("custom", None, records=10, llm_fields=1)
    assert estimate.cost == 0
    assert estimate.model == "default"


def test_no_llm_fields():
    estimate = estimate_cost("ollama", None, records=100, llm_fields=0)
    assert estimate.total_tokens == 0
    assert estimate.records_per_second == 0.0


def test_format_cost_estimate():
    text = format_cost_estimate(estimate_cost("ollama", None, records=1000, llm_fields=1))
    assert text.startswith("1,000 records:")
    assert "$0.00" in text


def test_compare_providers_sorted_by_cost():
    estimates = compare_providers(records=1000, llm_fields=2)

    assert len(estimates) == len(PROVIDER_PRICING)
    costs = [e.cost for e in estimates]
    assert costs == sorted(costs)


def test_estimate_tokens():
    assert estimate_tokens("abcdefgh") == 2
