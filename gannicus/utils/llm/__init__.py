"""
Multi-provider LLM backends for LangChain.

Provides the backend contract used by the generation engine
(``name``, ``generate``, ``generate_batch``) over different inference
servers through LangChain chat models.

Usage:
    from gannicus.utils.llm import ProviderConfig, create_provider

    backend = create_provider(ProviderConfig(name="ollama", model="llama3.2:3b"))
    value = await backend.generate("A tech company name", {"industry": "Fintech"})
    print(value)
    print(f"Tokens: {backend.usage.input_tokens} in, {backend.usage.output_tokens} out")

Available backends:
    Local: ollama, vllm, sglang, mlx (OpenAI-compatible endpoints)
    Hosted: groq, openai, anthropic (requires langchain-anthropic),
            gemini (requires langchain-google-genai)
"""

from .base import (
    BaseLLMProvider,
    Message,
    ProviderConfig,
    TokenUsage,
    create_provider,
)
from .config import (
    Provider,
    ModelConfig,
    ProviderPricing,
    get_model_config,
    get_default_model,
    get_model_for_use_case,
    list_models,
    MODEL_REGISTRY,
    PROVIDER_PRICING,
)
from .prompts import build_prompt, extract_value

__all__ = [
    # Core classes
    "BaseLLMProvider",
    "Message",
    "ProviderConfig",
    "TokenUsage",
    # Factory
    "create_provider",
    # Config
    "Provider",
    "ModelConfig",
    "ProviderPricing",
    "get_model_config",
    "get_default_model",
    "get_model_for_use_case",
    "list_models",
    "MODEL_REGISTRY",
    "PROVIDER_PRICING",
    # Prompts
    "build_prompt",
    "extract_value",
]
