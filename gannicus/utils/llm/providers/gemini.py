"""
Google Gemini backend.

Requires: langchain-google-genai>=1.0.0
Compatible with: langchain-core>=0.2.0
"""

from typing import Any

from ....errors import ProviderConfigError
from ..base import BaseLLMProvider
from ..config import Provider, get_api_key


class GeminiProvider(BaseLLMProvider):
    """
    Google Gemini backend using LangChain.

    Environment variables:
        GEMINI_API_KEY: Google AI API key (required)
        GOOGLE_API_KEY: Alternative name for API key
    """

    name = Provider.GEMINI.value

    def _create_model(self, **kwargs) -> Any:
        """Create the Gemini chat model."""
        try:
            from langchain_google_genai import ChatGoogleGenerativeAI
        except ImportError:
            raise ImportError(
                "langchain-google-genai is required for Gemini support. "
                "Install with: pip install langchain-google-genai>=1.0.0"
            )

        api_key = get_api_key(Provider.GEMINI, self.api_key)
        if not api_key:
            raise ProviderConfigError(
                "GEMINI_API_KEY environment variable not set. "
                "Set it in your .env file or pass api_key in the provider config."
            )

        model_kwargs = {
            "model": self.model_id,
            "temperature": self.temperature,
            "max_output_tokens": self.max_tokens,
            "google_api_key": api_key,
            "timeout": kwargs.pop("timeout", 120),  # 120 second timeout to prevent indefinite hangs
        }
        model_kwargs.update(kwargs)

        return ChatGoogleGenerativeAI(**model_kwargs)
