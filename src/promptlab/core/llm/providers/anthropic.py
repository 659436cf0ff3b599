"""Anthropic Claude provider."""

from __future__ import annotations

import time

from promptlab.core.llm.provider import (
    RETRYABLE_STATUS_CODES,
    ProviderResponse,
    TransientProviderError,
)


class AnthropicProvider:
    """Claude provider using the Anthropic SDK."""

    def __init__(self, api_key: str, model: str = "claude-sonnet-4-5-20250929") -> None:
        import anthropic

        self._sdk = anthropic
        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ) -> ProviderResponse:
        start = time.monotonic()
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_message,
                messages=[{"role": "user", "content": user_message}],
            )
        except self._sdk.APIStatusError as exc:
            if exc.status_code in RETRYABLE_STATUS_CODES:
                raise TransientProviderError(str(exc), exc.status_code) from exc
            raise
        except self._sdk.APIConnectionError as exc:
            raise TransientProviderError(str(exc)) from exc
        elapsed_ms = (time.monotonic() - start) * 1000

        content = response.content[0].text if response.content else ""
        return ProviderResponse(
            content=content,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=self.model,
            latency_ms=elapsed_ms,
        )
