"""Tests for PromptExecutor retry behaviour and the provider factory."""

from __future__ import annotations

import asyncio

import pytest

from promptlab.core.composition.composer import generate_enhanced_prompt
from promptlab.core.composition.models import BasePromptConfig, VSConfig
from promptlab.core.llm.client import PromptExecutor, backoff_delay, is_retryable
from promptlab.core.llm.provider import LLMProvider, TransientProviderError, create_provider
from promptlab.core.llm.providers import MockProvider


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio required)."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class _RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def prompt():
    return generate_enhanced_prompt(
        BasePromptConfig(base_prompt="Name three uses for a paperclip."), VSConfig()
    )


class TestRetryPolicy:
    def test_backoff_delay(self):
        assert backoff_delay(0, 1.0, 30.0, rate_limited=False) == 1.0
        assert backoff_delay(2, 1.0, 30.0, rate_limited=False) == 4.0
        assert backoff_delay(2, 1.0, 30.0, rate_limited=True) == 8.0
        assert backoff_delay(10, 1.0, 30.0, rate_limited=False) == 30.0

    def test_is_retryable(self):
        class _StatusError(Exception):
            status_code = 503

        assert is_retryable(TransientProviderError("busy"))
        assert is_retryable(TransientProviderError("rate limited", 429))
        assert not is_retryable(TransientProviderError("bad request", 400))
        assert is_retryable(_StatusError())
        assert not is_retryable(ValueError("nope"))


class TestExecute:
    def test_success(self, prompt):
        provider = MockProvider(response_content="Bookmark, zipper pull, SIM tool")
        executor = PromptExecutor(provider)
        result = _run(executor.execute(prompt, max_tokens=500))
        assert result.response == "Bookmark, zipper pull, SIM tool"
        assert result.model == "mock"
        assert result.prompt is prompt
        assert result.id
        assert result.tokens_used.total == result.tokens_used.input + result.tokens_used.output
        assert provider.last_system_message == prompt.system_prompt
        assert provider.last_user_message == prompt.final_prompt
        assert provider.last_max_tokens == 500

    def test_model_override(self, prompt):
        result = _run(PromptExecutor(MockProvider()).execute(prompt, model="custom-model"))
        assert result.model == "custom-model"

    def test_retries_transient_errors_then_succeeds(self, prompt):
        sleep = _RecordingSleep()
        provider = MockProvider(
            failures=[TransientProviderError("busy", 503), TransientProviderError("slow down", 429)]
        )
        executor = PromptExecutor(provider, max_attempts=3, base_delay=1.0, sleep=sleep)
        result = _run(executor.execute(prompt))
        assert result.response == "Mock LLM response."
        assert provider.call_count == 3
        assert sleep.delays == [1.0, 4.0]

    def test_exhausted_retries_reraise_last_error(self, prompt):
        sleep = _RecordingSleep()
        provider = MockProvider(
            failures=[
                TransientProviderError("first", 503),
                TransientProviderError("second", 502),
                TransientProviderError("third", 500),
            ]
        )
        executor = PromptExecutor(provider, max_attempts=3, sleep=sleep)
        with pytest.raises(TransientProviderError, match="third"):
            _run(executor.execute(prompt))
        assert provider.call_count == 3
        assert len(sleep.delays) == 2

    @pytest.mark.parametrize("max_attempts", [1, 0])
    def test_single_attempt_raises_the_provider_error(self, prompt, max_attempts):
        sleep = _RecordingSleep()
        error = TransientProviderError("busy", 503)
        provider = MockProvider(failures=[error])
        executor = PromptExecutor(provider, max_attempts=max_attempts, sleep=sleep)
        with pytest.raises(TransientProviderError) as exc_info:
            _run(executor.execute(prompt))
        assert exc_info.value is error
        assert provider.call_count == 1
        assert sleep.delays == []

    def test_non_transient_error_is_not_retried(self, prompt):
        sleep = _RecordingSleep()
        provider = MockProvider(failures=[ValueError("invalid request")])
        executor = PromptExecutor(provider, sleep=sleep)
        with pytest.raises(ValueError, match="invalid request"):
            _run(executor.execute(prompt))
        assert provider.call_count == 1
        assert sleep.delays == []

    def test_delay_is_capped(self, prompt):
        sleep = _RecordingSleep()
        provider = MockProvider(failures=[TransientProviderError("busy", 429)] * 2)
        executor = PromptExecutor(provider, base_delay=10.0, max_delay=15.0, sleep=sleep)
        _run(executor.execute(prompt))
        assert sleep.delays == [15.0, 15.0]


class TestProviderFactory:
    def test_mock(self):
        provider = create_provider("mock")
        assert isinstance(provider, MockProvider)
        assert isinstance(provider, LLMProvider)

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_provider("llama-farm")
