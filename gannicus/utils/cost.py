"""
Cost estimation for LLM-backed generation runs.

Estimates tokens, price and wall time from per-backend throughput/price
assumptions. Pricing is managed centrally in gannicus/utils/llm/config.py
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .llm.config import PROVIDER_PRICING, Provider, get_model_config, parse_provider

DEFAULT_TOKENS_PER_FIELD = 50


@dataclass
class CostEstimate:
    """Estimated cost and duration for a generation run."""
    provider: str
    model: str
    records: int
    llm_fields: int
    tokens_per_record: int
    total_tokens: int
    cost: float
    estimated_time: float  # seconds
    records_per_second: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def estimate_cost(
    provider: str,
    model: Optional[str],
    records: int,
    llm_fields: int,
    tokens_per_record: int = DEFAULT_TOKENS_PER_FIELD,
) -> CostEstimate:
    """
    Estimate cost for a generation run.

    Args:
        provider: Backend name (unknown names use Ollama's assumptions)
        model: Model name; registered models use their own output price
        records: Number of records
        llm_fields: LLM-generated fields per record
        tokens_per_record: Average tokens per LLM field

    Returns:
        CostEstimate
    """
    backend = parse_provider(provider) or Provider.OLLAMA
    pricing = PROVIDER_PRICING[backend]

    total_tokens = records * llm_fields * tokens_per_record

    model_config = get_model_config(model) if model else None
    price_per_million = (
        model_config.output_price_per_million
        if model_config is not None
        else pricing.cost_per_million_tokens
    )
    cost = (total_tokens / 1_000_000) * price_per_million

    estimated_time = total_tokens / pricing.tokens_per_second
    records_per_second = records / estimated_time if estimated_time > 0 else 0.0

    return CostEstimate(
        provider=provider,
        model=model or "default",
        records=records,
        llm_fields=llm_fields,
        tokens_per_record=tokens_per_record,
        total_tokens=total_tokens,
        cost=cost,
        estimated_time=estimated_time,
        records_per_second=records_per_second,
    )


def format_cost_estimate(estimate: CostEstimate) -> str:
    """Format a cost estimate for display."""
    if estimate.estimated_time < 60:
        time_str = f"{estimate.estimated_time:.1f}s"
    elif estimate.estimated_time < 3600:
        time_str = f"{estimate.estimated_time / 60:.1f}min"
    else:
        time_str = f"{estimate.estimated_time / 3600:.1f}hrs"

    if estimate.cost == 0:
        cost_str = "$0.00"
    elif estimate.cost < 0.01:
        cost_str = "<$0.01"
    else:
        cost_str = f"${estimate.cost:.2f}"

    return (
        f"{estimate.records:,} records: {time_str} | {cost_str} | "
        f"{estimate.records_per_second:.1f} rec/s"
    )


def compare_providers(
    records: int,
    llm_fields: int,
    tokens_per_record: int = DEFAULT_TOKENS_PER_FIELD,
) -> List[CostEstimate]:
    """Compare estimates across every backend, cheapest then fastest first."""
    estimates = [
        estimate_cost(provider.value, None, records, llm_fields, tokens_per_record)
        for provider in PROVIDER_PRICING
    ]
    return sorted(estimates, key=lambda e: (e.cost, e.estimated_time))


def estimate_tokens(text: str) -> int:
    """Rough estimate of tokens (1 token ~ 4 characters)."""
    return len(text) // 4
