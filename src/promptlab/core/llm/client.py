"""Prompt executor: sends a generated prompt to the configured provider."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable

from promptlab.core.composition.models import ExecutionResult, GeneratedPrompt, TokenUsage
from promptlab.core.llm.provider import (
    RETRYABLE_STATUS_CODES,
    LLMProvider,
    ProviderResponse,
    TransientProviderError,
)

logger = logging.getLogger(__name__)


def is_retryable(exc: BaseException) -> bool:
    """Transient provider errors and exceptions carrying a retryable status."""
    if isinstance(exc, TransientProviderError):
        return exc.status_code is None or exc.status_code in RETRYABLE_STATUS_CODES
    status = getattr(exc, "status_code", None)
    return status in RETRYABLE_STATUS_CODES


def backoff_delay(attempt: int, base_delay: float, max_delay: float, rate_limited: bool) -> float:
    """Exponential backoff for the 0-based ``attempt``; rate limits wait twice as long."""
    multiplier = 2 if rate_limited else 1
    return min(base_delay * (2**attempt) * multiplier, max_delay)


class PromptExecutor:
    """Runs generated prompts against an LLM provider with retry on transient errors."""

    def __init__(
        self,
        provider: LLMProvider,
        *,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        temperature: float = 0.7,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.provider = provider
        self.max_attempts = max(1, max_attempts)
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.temperature = temperature
        self._sleep = sleep

    async def _generate_with_retry(self, prompt: GeneratedPrompt, max_tokens: int) -> ProviderResponse:
        attempt = 0
        while True:
            try:
                return await self.provider.generate(
                    system_message=prompt.system_prompt,
                    user_message=prompt.final_prompt,
                    max_tokens=max_tokens,
                    temperature=self.temperature,
                )
            except Exception as exc:
                if not is_retryable(exc) or attempt >= self.max_attempts - 1:
                    raise
                delay = backoff_delay(
                    attempt,
                    self.base_delay,
                    self.max_delay,
                    rate_limited=getattr(exc, "status_code", None) == 429,
                )
                logger.warning(
                    "Provider call failed (attempt %d/%d): %s; retrying in %.1fs",
                    attempt + 1,
                    self.max_attempts,
                    exc,
                    delay,
                )
            await self._sleep(delay)
            attempt += 1

    async def execute(
        self,
        prompt: GeneratedPrompt,
        *,
        model: str | None = None,
        max_tokens: int = 2000,
    ) -> ExecutionResult:
        """Send ``prompt`` to the provider and wrap the reply as an execution result.

        Raises:
            Exception: The last provider error once retries are exhausted, or
                immediately for non-transient errors.
        """
        response = await self._generate_with_retry(prompt, max_tokens)

        logger.info(
            "Prompt executed: model=%s, tokens=%d+%d, latency=%.0fms",
            response.model,
            response.input_tokens,
            response.output_tokens,
            response.latency_ms,
        )

        return ExecutionResult(
            id=str(uuid.uuid4()),
            prompt=prompt,
            response=response.content,
            model=model or response.model,
            timestamp=datetime.now(timezone.utc).isoformat(),
            tokens_used=TokenUsage(
                input=response.input_tokens,
                output=response.output_tokens,
                total=response.input_tokens + response.output_tokens,
            ),
        )
