from .cost import CostEstimate, estimate_cost, format_cost_estimate, compare_providers

# Multi-provider LLM backends
from .llm import (
    create_provider,
    ProviderConfig,
    Provider,
    list_models,
)
