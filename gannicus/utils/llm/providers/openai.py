"""
OpenAI and OpenAI-compatible backends.

Ollama, vLLM, SGLang, MLX-LM and Groq all serve the OpenAI chat-completions
protocol, so a single ChatOpenAI-based class covers them with a different
endpoint and key policy each.

Requires: langchain-openai>=0.1.0
Compatible with: langchain-core>=0.2.0
"""

from typing import Any, Dict, Type

from ....errors import ProviderConfigError
from ..base import BaseLLMProvider
from ..config import Provider, get_api_key, get_base_url


class OpenAICompatibleProvider(BaseLLMProvider):
    """
    Backend for any server speaking the OpenAI chat API.

    Environment variables:
        <PROVIDER>_BASE_URL: Endpoint override (e.g. OLLAMA_BASE_URL)
    """

    provider: Provider = Provider.OPENAI
    requires_api_key: bool = False

    @property
    def name(self) -> str:
        return self.provider.value

    def _create_model(self, **kwargs) -> Any:
        """Create the ChatOpenAI model pointed at this backend."""
        try:
            from langchain_openai import ChatOpenAI
        except ImportError:
            raise ImportError(
                "langchain-openai is required for OpenAI-compatible backends. "
                "Install with: pip install langchain-openai>=0.1.0"
            )

        api_key = get_api_key(self.provider, self.api_key)
        if not api_key:
            if self.requires_api_key:
                env_name = f"{self.provider.name}_API_KEY"
                raise ProviderConfigError(
                    f"{env_name} environment variable not set. "
                    "Set it in your .env file or pass api_key in the provider config."
                )
            # Local servers ignore the key but the client insists on one
            api_key = "not-needed"

        model_kwargs = {
            "model": self.model_id,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "api_key": api_key,
            "timeout": kwargs.pop("timeout", 120),
        }
        base_url = get_base_url(self.provider, self.base_url)
        if base_url:
            model_kwargs["base_url"] = base_url
        model_kwargs.update(kwargs)

        return ChatOpenAI(**model_kwargs)


class OpenAIProvider(OpenAICompatibleProvider):
    """
    OpenAI hosted models.

    Environment variables:
        OPENAI_API_KEY: OpenAI API key (required)
    """
    provider = Provider.OPENAI
    requires_api_key = True


class GroqProvider(OpenAICompatibleProvider):
    """
    Groq hosted models.

    Environment variables:
        GROQ_API_KEY: Groq API key (required)
    """
    provider = Provider.GROQ
    requires_api_key = True


class OllamaProvider(OpenAICompatibleProvider):
    """Local Ollama server (zero cost). Default http://localhost:11434/v1."""
    provider = Provider.OLLAMA


class VLLMProvider(OpenAICompatibleProvider):
    """Self-hosted vLLM server. Default http://localhost:8000/v1."""
    provider = Provider.VLLM


class SGLangProvider(OpenAICompatibleProvider):
    """Self-hosted SGLang server. Default http://localhost:30000/v1."""
    provider = Provider.SGLANG


class MLXProvider(OpenAICompatibleProvider):
    """mlx_lm.server on Apple Silicon. Default http://localhost:8080/v1."""
    provider = Provider.MLX


PROVIDER_CLASSES: Dict[Provider, Type[OpenAICompatibleProvider]] = {
    Provider.OPENAI: OpenAIProvider,
    Provider.GROQ: GroqProvider,
    Provider.OLLAMA: OllamaProvider,
    Provider.VLLM: VLLMProvider,
    Provider.SGLANG: SGLangProvider,
    Provider.MLX: MLXProvider,
}
