"""
Anthropic Claude backend.

Requires: langchain-anthropic>=0.1.0
Compatible with: langchain-core>=0.2.0
"""

from typing import Any

from ....errors import ProviderConfigError
from ..base import BaseLLMProvider
from ..config import Provider, get_api_key


class AnthropicProvider(BaseLLMProvider):
    """
    Anthropic Claude backend using LangChain.

    Environment variables:
        ANTHROPIC_API_KEY: Anthropic API key (required)
    """

    name = Provider.ANTHROPIC.value

    def _create_model(self, **kwargs) -> Any:
        """Create the Claude chat model."""
        try:
            from langchain_anthropic import ChatAnthropic
        except ImportError:
            raise ImportError(
                "langchain-anthropic is required for Claude support. "
                "Install with: pip install langchain-anthropic>=0.1.0"
            )

        api_key = get_api_key(Provider.ANTHROPIC, self.api_key)
        if not api_key:
            raise ProviderConfigError(
                "ANTHROPIC_API_KEY environment variable not set. "
                "Set it in your .env file or pass api_key in the provider config."
            )

        model_kwargs = {
            "model": self.model_id,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "api_key": api_key,
        }
        if self.base_url:
            model_kwargs["base_url"] = self.base_url
        model_kwargs.update(kwargs)

        return ChatAnthropic(**model_kwargs)
