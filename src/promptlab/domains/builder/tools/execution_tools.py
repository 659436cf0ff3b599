"""MCP tool for running a composed prompt against the configured model."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

from promptlab.core.composition.parser import parse_vs_response
from promptlab.core.export.serialization import (
    execution_result_to_dict,
    generated_prompt_to_dict,
    vs_response_to_dict,
)
from promptlab.core.presets.registry import PresetNotFoundError
from promptlab.domains.builder.tools.composition_tools import compose_request
from promptlab.domains.builder.tools.payloads import (
    InvalidRequestError,
    error_response,
    parse_prompt_request,
)

if TYPE_CHECKING:
    from promptlab.core.llm.client import PromptExecutor
    from promptlab.core.presets.registry import PresetRegistry
    from promptlab.core.storage.repository import ExecutionHistory
    from promptlab.core.storage.workspace import BuilderWorkspace

logger = logging.getLogger(__name__)


def register_execution_tools(
    mcp: FastMCP,
    executor: PromptExecutor,
    presets: PresetRegistry,
    *,
    default_max_tokens: int = 2000,
    history: ExecutionHistory | None = None,
    workspace: BuilderWorkspace | None = None,
) -> None:
    """Register the prompt execution tool on the MCP server."""

    @mcp.tool
    async def execute_prompt(
        ctx: Context,
        base_config: dict[str, Any],
        vs_enhancement: dict[str, Any] | None = None,
        enhancements: dict[str, Any] | None = None,
        advanced_enhancements: dict[str, Any] | None = None,
        preset_id: str = "",
        session_id: str = "default",
        max_tokens: int = 0,
    ) -> str:
        """Compose a prompt, send it to the model and return the reply.

        When verbalized sampling is enabled the reply is also split into
        scored response records.

        Args:
            base_config: Base prompt configuration.
            vs_enhancement: Verbalized-sampling settings.
            enhancements: Builder enhancements.
            advanced_enhancements: Advanced enhancements.
            preset_id: Use a named preset's advanced enhancements instead.
            session_id: Groups executions in the history.
            max_tokens: Response budget; 0 uses the server default.
        """
        try:
            request = parse_prompt_request(
                base_config, vs_enhancement, enhancements, advanced_enhancements
            )
            composition = compose_request(request, presets, preset_id=preset_id)
        except InvalidRequestError as exc:
            return error_response(str(exc))
        except PresetNotFoundError:
            return error_response(f"Unknown preset: {preset_id}")

        if composition.prompt is None:
            return composition.blocked_response()

        await ctx.info("Executing composed prompt")
        try:
            result = await executor.execute(
                composition.prompt, max_tokens=max_tokens or default_max_tokens
            )
        except Exception as exc:
            logger.exception("Prompt execution failed")
            return error_response(
                f"Prompt execution failed: {exc}",
                error_type=type(exc).__name__,
                generatedPrompt=generated_prompt_to_dict(composition.prompt),
            )

        if history is not None:
            history.append(session_id, result)
        if workspace is not None:
            workspace.track_execution(result)

        payload: dict[str, Any] = {
            "status": "ok",
            "sessionId": session_id,
            "executionResult": execution_result_to_dict(result),
        }
        if request.vs.enabled:
            parsed = parse_vs_response(result.response)
            payload["vsResponses"] = [vs_response_to_dict(r) for r in parsed.responses]
        return json.dumps(payload)
