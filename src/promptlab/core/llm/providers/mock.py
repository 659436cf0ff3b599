"""Mock LLM provider for testing."""

from __future__ import annotations

from promptlab.core.llm.provider import ProviderResponse


class MockProvider:
    """Mock provider for testing: returns a canned response.

    ``failures`` are raised in order, one per call, before the canned response
    is returned. Tests use it to exercise the executor's retry policy.
    """

    def __init__(
        self,
        response_content: str = "Mock LLM response.",
        failures: list[Exception] | None = None,
    ) -> None:
        self.response_content = response_content
        self.failures = list(failures or [])
        self.last_system_message: str = ""
        self.last_user_message: str = ""
        self.last_max_tokens: int = 0
        self.call_count: int = 0

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ) -> ProviderResponse:
        self.last_system_message = system_message
        self.last_user_message = user_message
        self.last_max_tokens = max_tokens
        self.call_count += 1
        if self.failures:
            raise self.failures.pop(0)
        return ProviderResponse(
            content=self.response_content,
            input_tokens=len(system_message.split()) + len(user_message.split()),
            output_tokens=len(self.response_content.split()),
            model="mock",
            latency_ms=0.0,
        )
