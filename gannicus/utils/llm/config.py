"""
LLM configuration: providers, model definitions, pricing, and defaults.

Designed to support multiple providers with easy expansion.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class Provider(Enum):
    """Supported LLM backends."""
    OLLAMA = "ollama"
    VLLM = "vllm"
    SGLANG = "sglang"
    MLX = "mlx"
    GROQ = "groq"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


# Servers speaking the OpenAI chat-completions protocol
OPENAI_COMPATIBLE = {
    Provider.OLLAMA,
    Provider.VLLM,
    Provider.SGLANG,
    Provider.MLX,
    Provider.GROQ,
    Provider.OPENAI,
}

# Default endpoints; each can be overridden with <NAME>_BASE_URL
DEFAULT_BASE_URLS: Dict[Provider, str] = {
    Provider.OLLAMA: "http://localhost:11434/v1",
    Provider.VLLM: "http://localhost:8000/v1",
    Provider.SGLANG: "http://localhost:30000/v1",
    Provider.MLX: "http://localhost:8080/v1",
    Provider.GROQ: "https://api.groq.com/openai/v1",
}

# API key environment variables; local servers accept any key
API_KEY_ENV: Dict[Provider, List[str]] = {
    Provider.GROQ: ["GROQ_API_KEY"],
    Provider.OPENAI: ["OPENAI_API_KEY"],
    Provider.ANTHROPIC: ["ANTHROPIC_API_KEY"],
    Provider.GEMINI: ["GEMINI_API_KEY", "GOOGLE_API_KEY"],
}


@dataclass
class ModelConfig:
    """Configuration for a specific model."""
    provider: Provider
    model_id: str
    display_name: str
    input_price_per_million: float
    output_price_per_million: float
    max_tokens: int = 100
    default_temperature: float = 0.7

    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Estimate cost for given token counts."""
        input_cost = (input_tokens / 1_000_000) * self.input_price_per_million
        output_cost = (output_tokens / 1_000_000) * self.output_price_per_million
        return input_cost + output_cost


@dataclass
class ProviderPricing:
    """Throughput and price assumptions for a backend, used in cost estimates."""
    name: str
    tokens_per_second: float
    cost_per_million_tokens: float


# Model registry - add new models here
MODEL_REGISTRY: Dict[str, ModelConfig] = {
    # Local models (Ollama)
    "llama3.2:3b": ModelConfig(
        provider=Provider.OLLAMA,
        model_id="llama3.2:3b",
        display_name="Llama 3.2 3B",
        input_price_per_million=0.0,
        output_price_per_million=0.0,
        default_temperature=0.8,
    ),
    "qwen2.5:7b": ModelConfig(
        provider=Provider.OLLAMA,
        model_id="qwen2.5:7b",
        display_name="Qwen 2.5 7B",
        input_price_per_million=0.0,
        output_price_per_million=0.0,
        default_temperature=0.7,
    ),
    "phi3:mini": ModelConfig(
        provider=Provider.OLLAMA,
        model_id="phi3:mini",
        display_name="Phi-3 Mini",
        input_price_per_million=0.0,
        output_price_per_million=0.0,
    ),

    # Groq
    "llama-3.1-8b-instant": ModelConfig(
        provider=Provider.GROQ,
        model_id="llama-3.1-8b-instant",
        display_name="Llama 3.1 8B Instant (Groq)",
        input_price_per_million=0.05,
        output_price_per_million=0.08,
    ),

    # OpenAI
    "gpt-4o-mini": ModelConfig(
        provider=Provider.OPENAI,
        model_id="gpt-4o-mini",
        display_name="GPT-4o Mini",
        input_price_per_million=0.15,
        output_price_per_million=0.60,
    ),
    "gpt-4o": ModelConfig(
        provider=Provider.OPENAI,
        model_id="gpt-4o",
        display_name="GPT-4o",
        input_price_per_million=2.50,
        output_price_per_million=10.00,
    ),

    # Anthropic
    "claude-3-5-haiku": ModelConfig(
        provider=Provider.ANTHROPIC,
        model_id="claude-3-5-haiku-20241022",
        display_name="Claude 3.5 Haiku",
        input_price_per_million=0.80,
        output_price_per_million=4.00,
    ),
    "claude-3-5-sonnet": ModelConfig(
        provider=Provider.ANTHROPIC,
        model_id="claude-3-5-sonnet-20241022",
        display_name="Claude 3.5 Sonnet",
        input_price_per_million=3.00,
        output_price_per_million=15.00,
    ),

    # Gemini
    "gemini-2.0-flash": ModelConfig(
        provider=Provider.GEMINI,
        model_id="gemini-2.0-flash",
        display_name="Gemini 2.0 Flash",
        input_price_per_million=0.10,
        output_price_per_million=0.40,
    ),
}


# Default models per provider; providers missing here require an explicit model
DEFAULT_MODELS: Dict[Provider, str] = {
    Provider.OLLAMA: "qwen2.5:7b",
    Provider.GROQ: "llama-3.1-8b-instant",
    Provider.OPENAI: "gpt-4o-mini",
    Provider.ANTHROPIC: "claude-3-5-haiku",
    Provider.GEMINI: "gemini-2.0-flash",
}

# Model picks by use case (Ollama)
RECOMMENDED_MODELS: Dict[str, str] = {
    "development": "llama3.2:3b",
    "fastest": "llama3.2:3b",
    "production": "qwen2.5:7b",
    "bestQuality": "qwen2.5:7b",
}

# Throughput/price assumptions per backend
PROVIDER_PRICING: Dict[Provider, ProviderPricing] = {
    Provider.OLLAMA: ProviderPricing("Ollama (Local)", tokens_per_second=40, cost_per_million_tokens=0.0),
    Provider.VLLM: ProviderPricing("vLLM (Self-hosted)", tokens_per_second=400, cost_per_million_tokens=0.0),
    Provider.SGLANG: ProviderPricing("SGLang (Self-hosted)", tokens_per_second=450, cost_per_million_tokens=0.0),
    Provider.MLX: ProviderPricing("MLX (Apple Silicon)", tokens_per_second=60, cost_per_million_tokens=0.0),
    Provider.GROQ: ProviderPricing("Groq", tokens_per_second=500, cost_per_million_tokens=0.27),
    Provider.OPENAI: ProviderPricing("OpenAI", tokens_per_second=100, cost_per_million_tokens=0.60),
    Provider.ANTHROPIC: ProviderPricing("Anthropic", tokens_per_second=80, cost_per_million_tokens=3.00),
    Provider.GEMINI: ProviderPricing("Google Gemini", tokens_per_second=150, cost_per_million_tokens=0.40),
}


def parse_provider(name: str) -> Optional[Provider]:
    """Map a provider name to the enum, or None if unknown."""
    try:
        return Provider(name.lower())
    except ValueError:
        return None


def get_model_config(model_name: str) -> Optional[ModelConfig]:
    """Get configuration for a registered model, or None for unregistered ones."""
    return MODEL_REGISTRY.get(model_name)


def get_default_model(provider: Provider) -> Optional[str]:
    """Get the default model name for a provider (None if it has none)."""
    return DEFAULT_MODELS.get(provider)


def get_model_for_use_case(use_case: str) -> str:
    """Get the recommended model for a use case."""
    if use_case not in RECOMMENDED_MODELS:
        available = ", ".join(sorted(RECOMMENDED_MODELS))
        raise ValueError(f"Unknown use case: {use_case}. Available: {available}")
    return RECOMMENDED_MODELS[use_case]


def get_base_url(provider: Provider, override: Optional[str] = None) -> Optional[str]:
    """Resolve a backend endpoint: explicit override, then environment, then default."""
    if override:
        return override
    return os.getenv(f"{provider.name}_BASE_URL") or DEFAULT_BASE_URLS.get(provider)


def get_api_key(provider: Provider, override: Optional[str] = None) -> Optional[str]:
    """Resolve an API key from the override or the provider's environment variables."""
    if override:
        return override
    for env_var in API_KEY_ENV.get(provider, []):
        value = os.getenv(env_var)
        if value:
            return value
    return None


def list_models(provider: Optional[Provider] = None) -> list:
    """List available models, optionally filtered by provider."""
    models = []
    for name, config in MODEL_REGISTRY.items():
        if provider is None or config.provider == provider:
            models.append({
                "name": name,
                "provider": config.provider.value,
                "display_name": config.display_name,
                "input_price": config.input_price_per_million,
                "output_price": config.output_price_per_million,
            })
    return models
