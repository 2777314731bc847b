"""
Base LLM backend providing a unified interface across providers.

Every backend exposes ``name``, ``generate(prompt, context)`` and
``generate_batch(prompts, context)``. Failures of any kind surface as
BackendError; retrying is left to the generation engine.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from ...errors import BackendError, ProviderConfigError
from .config import (
    OPENAI_COMPATIBLE,
    ModelConfig,
    Provider,
    get_default_model,
    get_model_config,
    parse_provider,
)
from .prompts import SYSTEM_PROMPT, build_prompt, extract_value

logger = logging.getLogger(__name__)


class ProviderConfig(BaseModel):
    """Backend selection for a generation run."""
    name: str
    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: int = 100
    options: Dict[str, Any] = Field(default_factory=dict)


@dataclass
class TokenUsage:
    """Running token counts for a backend."""
    input_tokens: int = 0
    output_tokens: int = 0
    calls: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class Message:
    """Simple message container for provider-agnostic use."""
    role: str  # "system", "human", "assistant"
    content: str

    def to_langchain(self):
        """Convert to LangChain message type."""
        from langchain_core.messages import SystemMessage, HumanMessage, AIMessage

        if self.role == "system":
            return SystemMessage(content=self.content)
        elif self.role == "human" or self.role == "user":
            return HumanMessage(content=self.content)
        elif self.role == "assistant" or self.role == "ai":
            return AIMessage(content=self.content)
        else:
            raise ValueError(f"Unknown role: {self.role}")


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM backends.

    Subclasses implement provider-specific model creation. The base class
    handles prompt construction, response cleanup, token accounting and
    error wrapping.
    """

    name: str = "base"

    def __init__(
        self,
        model_name: str,
        temperature: Optional[float] = None,
        max_tokens: int = 100,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize provider.

        Args:
            model_name: Model identifier understood by the backend
            temperature: Sampling temperature (registry default or 0.7 if None)
            max_tokens: Max output tokens per value
            base_url: Endpoint override
            api_key: API key override (environment used otherwise)
            **kwargs: Provider-specific arguments
        """
        self.config: Optional[ModelConfig] = get_model_config(model_name)
        self.model_name = model_name
        self.model_id = self.config.model_id if self.config else model_name
        if temperature is None:
            temperature = self.config.default_temperature if self.config else 0.7
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.base_url = base_url
        self.api_key = api_key
        self.usage = TokenUsage()

        self._model = self._create_model(**kwargs)

    @abstractmethod
    def _create_model(self, **kwargs) -> Any:
        """Create the underlying LangChain chat model. Provider-specific."""
        pass

    def _build_messages(self, prompt: str, context: Optional[Mapping[str, Any]]) -> List[Any]:
        return [
            Message(role="system", content=SYSTEM_PROMPT).to_langchain(),
            Message(role="human", content=build_prompt(prompt, context)).to_langchain(),
        ]

    def _record_usage(self, response: Any) -> None:
        """Accumulate token counts from a response (estimate if unreported)."""
        usage = getattr(response, "usage_metadata", None) or {}
        input_tokens = usage.get("input_tokens", 0)
        output_tokens = usage.get("output_tokens", 0)

        if input_tokens == 0 and output_tokens == 0:
            content = getattr(response, "content", "")
            if isinstance(content, str):
                output_tokens = len(content) // 4

        self.usage.input_tokens += input_tokens
        self.usage.output_tokens += output_tokens
        self.usage.calls += 1

    def _response_text(self, response: Any) -> str:
        content = getattr(response, "content", None)

        # Some providers return a list of content blocks
        if isinstance(content, list):
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )

        if not isinstance(content, str):
            raise BackendError(
                f"Malformed response from {self.name}: {type(response).__name__}",
                backend=self.name,
            )
        return extract_value(content)

    async def generate(self, prompt: str, context: Optional[Mapping[str, Any]] = None) -> str:
        """
        Generate a single value.

        Args:
            prompt: Field prompt
            context: Coherence context (internal ``__`` keys are not sent)

        Returns:
            Cleaned value text

        Raises:
            BackendError: On transport failure or malformed response
        """
        messages = self._build_messages(prompt, context)
        try:
            response = await self._model.ainvoke(messages)
        except Exception as e:
            raise BackendError(f"{self.name} request failed: {e}", backend=self.name) from e

        self._record_usage(response)
        return self._response_text(response)

    async def generate_batch(
        self,
        prompts: List[str],
        context: Optional[Mapping[str, Any]] = None,
    ) -> List[str]:
        """
        Generate one value per prompt, in input order.

        Raises:
            BackendError: If the batch call fails
        """
        message_batches = [self._build_messages(p, context) for p in prompts]
        try:
            responses = await self._model.abatch(message_batches)
        except Exception as e:
            raise BackendError(f"{self.name} batch request failed: {e}", backend=self.name) from e

        results = []
        for response in responses:
            self._record_usage(response)
            results.append(self._response_text(response))
        return results

    def estimate_cost(self) -> float:
        """Cost of the tokens used so far (0 for unregistered models)."""
        if self.config is None:
            return 0.0
        return self.config.estimate_cost(self.usage.input_tokens, self.usage.output_tokens)


def create_provider(config: ProviderConfig) -> BaseLLMProvider:
    """
    Factory function to create the appropriate backend for a config.

    Args:
        config: Provider configuration

    Returns:
        Configured backend instance

    Raises:
        ProviderConfigError: Unknown backend name or missing required model
    """
    provider = parse_provider(config.name)
    if provider is None:
        available = ", ".join(p.value for p in Provider)
        raise ProviderConfigError(f"Unknown provider: {config.name}. Available: {available}")

    model_name = config.model or get_default_model(provider)
    if not model_name:
        raise ProviderConfigError(
            f"Provider \"{provider.value}\" requires a model (set ProviderConfig.model)"
        )

    kwargs = dict(
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        base_url=config.base_url,
        api_key=config.api_key,
        **config.options,
    )
    logger.debug("Creating %s backend for model %s", provider.value, model_name)

    if provider in OPENAI_COMPATIBLE:
        from .providers.openai import PROVIDER_CLASSES
        return PROVIDER_CLASSES[provider](model_name, **kwargs)

    elif provider == Provider.ANTHROPIC:
        from .providers.anthropic import AnthropicProvider
        return AnthropicProvider(model_name, **kwargs)

    elif provider == Provider.GEMINI:
        from .providers.gemini import GeminiProvider
        return GeminiProvider(model_name, **kwargs)

    else:
        raise ProviderConfigError(f"No provider implementation for: {provider.value}")
