"""Tests for the Anthropic and OpenAI provider adapters, with the SDK clients stubbed."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import anthropic
import httpx
import openai
import pytest

from promptlab.core.llm.provider import TransientProviderError
from promptlab.core.llm.providers.anthropic import AnthropicProvider
from promptlab.core.llm.providers.openai import OpenAIProvider


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio required)."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


_REQUEST = httpx.Request("POST", "https://api.example.test/v1")


def _status_error(sdk, status: int):
    return sdk.APIStatusError(
        f"status {status}", response=httpx.Response(status, request=_REQUEST), body=None
    )


class _Endpoint:
    """Stands in for ``messages`` / ``chat.completions`` on an SDK client."""

    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


def _anthropic(endpoint: _Endpoint) -> AnthropicProvider:
    provider = AnthropicProvider(api_key="test-key", model="claude-test")
    provider.client = SimpleNamespace(messages=endpoint)
    return provider


def _openai(endpoint: _Endpoint) -> OpenAIProvider:
    provider = OpenAIProvider(api_key="test-key", model="gpt-test")
    provider.client = SimpleNamespace(chat=SimpleNamespace(completions=endpoint))
    return provider


class TestAnthropicProvider:
    def test_maps_message_response(self):
        endpoint = _Endpoint(
            SimpleNamespace(
                content=[SimpleNamespace(text="Hello there")],
                usage=SimpleNamespace(input_tokens=12, output_tokens=3),
            )
        )
        response = _run(_anthropic(endpoint).generate("system", "user", max_tokens=50))

        assert response.content == "Hello there"
        assert (response.input_tokens, response.output_tokens) == (12, 3)
        assert response.model == "claude-test"
        call = endpoint.calls[0]
        assert call["system"] == "system"
        assert call["messages"] == [{"role": "user", "content": "user"}]
        assert call["max_tokens"] == 50

    def test_retryable_status_becomes_transient(self):
        provider = _anthropic(_Endpoint(error=_status_error(anthropic, 503)))
        with pytest.raises(TransientProviderError) as exc_info:
            _run(provider.generate("system", "user"))
        assert exc_info.value.status_code == 503

    def test_client_error_propagates(self):
        provider = _anthropic(_Endpoint(error=_status_error(anthropic, 400)))
        with pytest.raises(anthropic.APIStatusError):
            _run(provider.generate("system", "user"))

    def test_connection_error_becomes_transient(self):
        error = anthropic.APIConnectionError(request=_REQUEST)
        with pytest.raises(TransientProviderError) as exc_info:
            _run(_anthropic(_Endpoint(error=error)).generate("system", "user"))
        assert exc_info.value.status_code is None


class TestOpenAIProvider:
    def test_maps_chat_completion(self):
        endpoint = _Endpoint(
            SimpleNamespace(
                choices=[SimpleNamespace(message=SimpleNamespace(content="Hi"))],
                usage=SimpleNamespace(prompt_tokens=7, completion_tokens=1),
            )
        )
        response = _run(_openai(endpoint).generate("system", "user", temperature=0.2))

        assert response.content == "Hi"
        assert (response.input_tokens, response.output_tokens) == (7, 1)
        assert endpoint.calls[0]["messages"][0] == {"role": "system", "content": "system"}
        assert endpoint.calls[0]["temperature"] == 0.2

    def test_empty_completion(self):
        endpoint = _Endpoint(SimpleNamespace(choices=[], usage=None))
        response = _run(_openai(endpoint).generate("system", "user"))
        assert response.content == ""
        assert response.input_tokens == 0

    def test_rate_limit_becomes_transient(self):
        provider = _openai(_Endpoint(error=_status_error(openai, 429)))
        with pytest.raises(TransientProviderError) as exc_info:
            _run(provider.generate("system", "user"))
        assert exc_info.value.status_code == 429
