"""
LLM backend implementations.

Each provider module wraps a specific LangChain integration package.
Providers are lazy-loaded to avoid import errors when packages aren't installed.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .openai import (
        OpenAICompatibleProvider,
        OpenAIProvider,
        GroqProvider,
        OllamaProvider,
        VLLMProvider,
        SGLangProvider,
        MLXProvider,
    )
    from .anthropic import AnthropicProvider
    from .gemini import GeminiProvider

__all__ = [
    "OpenAICompatibleProvider",
    "OpenAIProvider",
    "GroqProvider",
    "OllamaProvider",
    "VLLMProvider",
    "SGLangProvider",
    "MLXProvider",
    "AnthropicProvider",
    "GeminiProvider",
]
