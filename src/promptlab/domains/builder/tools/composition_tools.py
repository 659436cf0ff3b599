"""MCP tools for composing, validating, parsing and exporting prompts."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP

from promptlab.core.composition.advanced import generate_all_advanced_enhancements
from promptlab.core.composition.composer import generate_enhanced_prompt
from promptlab.core.composition.models import GeneratedPrompt
from promptlab.core.composition.parser import parse_vs_response as parse_vs_text
from promptlab.core.export.codec import EXPORT_FORMATS, ExportError, export_prompt as export_file
from promptlab.core.export.codec import import_template as import_template_json
from promptlab.core.export.serialization import (
    advanced_enhancements_from_dict,
    execution_result_from_dict,
    generated_prompt_to_dict,
    template_to_dict,
    vs_response_to_dict,
)
from promptlab.core.presets.registry import PresetNotFoundError
from promptlab.core.validation.conflicts import (
    EnhancementConflict,
    has_blocking_conflicts,
    validate_enhancement_conflicts,
)
from promptlab.core.validation.validators import (
    ValidationResult,
    validate_complete_prompt_config,
)
from promptlab.domains.builder.tools.payloads import (
    InvalidRequestError,
    PromptRequest,
    conflicts_payload,
    error_response,
    parse_prompt_request,
)

if TYPE_CHECKING:
    from promptlab.core.presets.registry import PresetRegistry
    from promptlab.core.storage.repository import TemplateRepository

logger = logging.getLogger(__name__)


@dataclass
class Composition:
    """Outcome of gating and composing one prompt request.

    ``prompt`` is None when validation errors or blocking conflicts stopped
    composition.
    """

    request: PromptRequest
    validation: ValidationResult
    conflicts: list[EnhancementConflict] = field(default_factory=list)
    prompt: GeneratedPrompt | None = None

    def blocked_response(self) -> str:
        payload = self.validation.to_dict()
        return json.dumps(
            {
                "status": "error",
                "message": "Prompt configuration is invalid.",
                "errors": payload["errors"],
                "warnings": payload["warnings"],
                "conflicts": conflicts_payload(self.conflicts),
            }
        )


def compose_request(
    request: PromptRequest,
    presets: PresetRegistry,
    *,
    preset_id: str = "",
    validate: bool = True,
) -> Composition:
    """Validate, check conflicts, then compose.

    Raises:
        PresetNotFoundError: If ``preset_id`` is not registered.
    """
    if preset_id:
        request.advanced = presets.apply(preset_id)

    validation = (
        validate_complete_prompt_config(
            request.base, request.vs, request.enhancements, request.advanced
        )
        if validate
        else ValidationResult()
    )
    conflicts = validate_enhancement_conflicts(request.advanced) if request.advanced else []
    composition = Composition(request=request, validation=validation, conflicts=conflicts)

    if not validation.is_valid or has_blocking_conflicts(conflicts):
        logger.info(
            "Composition blocked: %d errors, %d conflicts",
            len(validation.errors),
            len(conflicts),
        )
        return composition

    extra = generate_all_advanced_enhancements(request.advanced) if request.advanced else ""
    composition.prompt = generate_enhanced_prompt(
        request.base, request.vs, request.enhancements, extra_instructions=extra
    )
    return composition


def register_composition_tools(
    mcp: FastMCP,
    presets: PresetRegistry,
    repository: TemplateRepository | None = None,
) -> None:
    """Register prompt composition tools on the MCP server."""

    @mcp.tool
    def compose_prompt(
        base_config: dict[str, Any],
        vs_enhancement: dict[str, Any] | None = None,
        enhancements: dict[str, Any] | None = None,
        advanced_enhancements: dict[str, Any] | None = None,
        preset_id: str = "",
        validate: bool = True,
    ) -> str:
        """Compose the final prompt and system prompt from a builder configuration.

        Args:
            base_config: {domain, framework, basePrompt, targetOutcome, frameworkConfig}.
            vs_enhancement: Verbalized-sampling settings (enabled, numberOfResponses, ...).
            enhancements: Builder enhancements (roleEnhancement, formatControl, ...).
            advanced_enhancements: Advanced enhancements rendered after the base prompt.
            preset_id: Use a named preset's advanced enhancements instead.
            validate: Refuse to compose when the configuration has errors.
        """
        try:
            request = parse_prompt_request(
                base_config, vs_enhancement, enhancements, advanced_enhancements
            )
            composition = compose_request(
                request, presets, preset_id=preset_id, validate=validate
            )
        except InvalidRequestError as exc:
            return error_response(str(exc))
        except PresetNotFoundError:
            return error_response(f"Unknown preset: {preset_id}")

        if composition.prompt is None:
            return composition.blocked_response()

        return json.dumps(
            {
                "status": "ok",
                "generatedPrompt": generated_prompt_to_dict(composition.prompt),
                "warnings": composition.validation.to_dict()["warnings"],
                "conflicts": conflicts_payload(composition.conflicts),
            }
        )

    @mcp.tool
    def validate_prompt(
        base_config: dict[str, Any],
        vs_enhancement: dict[str, Any] | None = None,
        enhancements: dict[str, Any] | None = None,
        advanced_enhancements: dict[str, Any] | None = None,
    ) -> str:
        """Validate a builder configuration without composing it.

        Returns isValid plus {field, message, code} errors and warnings.
        """
        try:
            request = parse_prompt_request(
                base_config, vs_enhancement, enhancements, advanced_enhancements
            )
        except InvalidRequestError as exc:
            return error_response(str(exc))
        result = validate_complete_prompt_config(
            request.base, request.vs, request.enhancements, request.advanced
        )
        return json.dumps({"status": "ok", **result.to_dict()})

    @mcp.tool
    def check_enhancement_conflicts(advanced_enhancements: dict[str, Any]) -> str:
        """List contradictory advanced-enhancement combinations.

        Conflicts of type "error" block composition; "warning" is advisory.
        """
        try:
            advanced = advanced_enhancements_from_dict(advanced_enhancements)
        except (TypeError, ValueError, AttributeError) as exc:
            return error_response(str(exc))
        conflicts = validate_enhancement_conflicts(advanced)
        return json.dumps(
            {
                "status": "ok",
                "conflicts": conflicts_payload(conflicts),
                "blocking": has_blocking_conflicts(conflicts),
            }
        )

    @mcp.tool
    def parse_vs_response(raw_text: str) -> str:
        """Split a verbalized-sampling model output into scored response records."""
        parsed = parse_vs_text(raw_text)
        return json.dumps(
            {
                "status": "ok",
                "count": len(parsed.responses),
                "responses": [vs_response_to_dict(r) for r in parsed.responses],
            }
        )

    @mcp.tool
    def export_prompt(
        format: str,
        base_config: dict[str, Any],
        vs_enhancement: dict[str, Any] | None = None,
        enhancements: dict[str, Any] | None = None,
        execution_result: dict[str, Any] | None = None,
    ) -> str:
        """Compose a prompt and render it as json, text, markdown or csv.

        Args:
            format: One of json, text, markdown, csv.
            base_config: Base prompt configuration.
            vs_enhancement: Verbalized-sampling settings.
            enhancements: Builder enhancements.
            execution_result: Required for csv, whose rows are the parsed VS responses.
        """
        if format not in EXPORT_FORMATS:
            return error_response(
                f"Unsupported export format: {format}", supported=list(EXPORT_FORMATS)
            )
        try:
            request = parse_prompt_request(base_config, vs_enhancement, enhancements)
            result = execution_result_from_dict(execution_result) if execution_result else None
        except (InvalidRequestError, TypeError, ValueError) as exc:
            return error_response(str(exc))

        prompt = generate_enhanced_prompt(request.base, request.vs, request.enhancements)
        try:
            exported = export_file(format, prompt, request.base, request.vs, result)
        except ExportError as exc:
            return error_response(str(exc))

        return json.dumps(
            {
                "status": "ok",
                "filename": exported.filename,
                "mimeType": exported.mime_type,
                "content": exported.content,
            }
        )

    @mcp.tool
    def import_template(json_string: str, save: bool = False) -> str:
        """Import an exported template document.

        Args:
            json_string: The template JSON (name, config, vsEnhancement, id, createdAt required).
            save: Also persist the template when storage is enabled.
        """
        template = import_template_json(json_string)
        if template is None:
            return error_response("Invalid template: required fields are missing or malformed.")

        saved = False
        if save and repository is not None:
            repository.save(template)
            saved = True
        return json.dumps({"status": "ok", "saved": saved, "template": template_to_dict(template)})
