"""LLM provider implementations."""

from promptlab.core.llm.providers.anthropic import AnthropicProvider
from promptlab.core.llm.providers.mock import MockProvider
from promptlab.core.llm.providers.openai import OpenAIProvider

__all__ = ["AnthropicProvider", "MockProvider", "OpenAIProvider"]
