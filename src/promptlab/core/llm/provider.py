"""LLM provider protocol: abstract interface for prompt execution calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


class TransientProviderError(Exception):
    """A provider failure worth retrying (rate limit, overload, timeout).

    ``status_code`` carries the HTTP status when the provider reported one.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class ProviderResponse:
    """One completion: text, token counts and wall-clock latency."""

    content: str
    input_tokens: int
    output_tokens: int
    model: str
    latency_ms: float


@runtime_checkable
class LLMProvider(Protocol):
    """Anything that turns a system and user message into a completion."""

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ) -> ProviderResponse: ...


DEFAULT_MODELS: dict[str, str] = {
    "anthropic": "claude-sonnet-4-5-20250929",
    "openai": "gpt-4o",
}


def create_provider(provider_name: str, api_key: str = "", model: str = "") -> LLMProvider:
    """Build the provider registered under ``provider_name``.

    SDK-backed providers are imported here so the SDKs load only when used.
    An empty ``model`` selects the provider's default.

    Raises:
        ValueError: For a name other than anthropic, openai or mock.
    """
    if provider_name == "mock":
        from promptlab.core.llm.providers.mock import MockProvider

        return MockProvider()
    if provider_name == "anthropic":
        from promptlab.core.llm.providers.anthropic import AnthropicProvider

        return AnthropicProvider(api_key=api_key, model=model or DEFAULT_MODELS["anthropic"])
    if provider_name == "openai":
        from promptlab.core.llm.providers.openai import OpenAIProvider

        return OpenAIProvider(api_key=api_key, model=model or DEFAULT_MODELS["openai"])
    raise ValueError(f"Unknown LLM provider: {provider_name!r}")
