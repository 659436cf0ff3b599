"""Export/import codec for prompts, templates and VS responses.

Supported export formats are ``json`` (full configuration), ``text`` (system
prompt and final prompt only), ``markdown`` (formatted with metadata) and
``csv`` (parsed VS responses of an execution). Template import degrades to
``None`` on any malformed input; every other failure is a programmer error and
raises :class:`ExportError`.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Literal

from promptlab.core.composition.models import (
    BasePromptConfig,
    ExecutionResult,
    GeneratedPrompt,
    PromptTemplate,
    VSConfig,
)
from promptlab.core.composition.parser import parse_vs_response
from promptlab.core.export.serialization import (
    base_config_to_dict,
    generated_prompt_to_dict,
    template_from_dict,
    template_to_dict,
    vs_config_to_dict,
)

logger = logging.getLogger(__name__)

ExportFormat = Literal["json", "text", "markdown", "csv"]
EXPORT_FORMATS: tuple[str, ...] = ("json", "text", "markdown", "csv")

CSV_HEADER = "Index,Content,Probability,Rationale,Category"

# Keys a template document must carry to be importable.
REQUIRED_TEMPLATE_KEYS: tuple[str, ...] = ("name", "config", "vsEnhancement", "id", "createdAt")


class ExportError(ValueError):
    """Raised for invalid export requests (unknown format, missing execution result)."""


@dataclass(frozen=True)
class ExportedFile:
    content: str
    filename: str
    mime_type: str


def export_as_json(
    base_config: BasePromptConfig,
    vs: VSConfig,
    generated_prompt: GeneratedPrompt | None = None,
) -> str:
    payload: dict[str, Any] = {
        "baseConfig": base_config_to_dict(base_config),
        "vsEnhancement": vs_config_to_dict(vs),
        "generatedPrompt": (
            generated_prompt_to_dict(generated_prompt) if generated_prompt is not None else None
        ),
    }
    return json.dumps(payload, indent=2)


def export_as_text(generated_prompt: GeneratedPrompt) -> str:
    return f"{generated_prompt.system_prompt}\n\n---\n\n{generated_prompt.final_prompt}"


def _display_timestamp(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return timestamp


def export_as_markdown(
    generated_prompt: GeneratedPrompt,
    base_config: BasePromptConfig,
    vs: VSConfig,
) -> str:
    """Markdown document: metadata, VS settings, fenced prompts, target outcome."""
    meta = generated_prompt.metadata
    lines = [
        "# Generated Prompt\n",
        f"**Generated:** {_display_timestamp(meta.timestamp)}\n",
        f"**Domain:** {meta.domain}",
        f"**Framework:** {meta.framework}",
        f"**VS Enhanced:** {'Yes' if meta.vs_enabled else 'No'}\n",
    ]

    if vs.enabled:
        lines.append("## VS Configuration\n")
        lines.append(f"- **Distribution Type:** {vs.distribution_type}")
        lines.append(f"- **Number of Responses:** {vs.number_of_responses}")
        lines.append(
            f"- **Include Probability Reasoning:** "
            f"{'Yes' if vs.include_probability_reasoning else 'No'}"
        )
        if vs.distribution_type == "rarity_hunt" and vs.probability_threshold:
            lines.append(f"- **Probability Threshold:** {vs.probability_threshold}")
        if vs.distribution_type == "balanced_categories" and vs.dimensions:
            lines.append(f"- **Dimensions:** {', '.join(vs.dimensions)}")
        if vs.anti_typicality_enabled:
            lines.append("- **Anti-Typicality:** Enabled")
        lines.append("")

    lines.extend(["## System Prompt\n", "```", generated_prompt.system_prompt, "```\n"])
    lines.extend(["## User Prompt\n", "```", generated_prompt.final_prompt, "```\n"])

    if base_config.target_outcome:
        lines.extend(["## Target Outcome\n", base_config.target_outcome, ""])

    return "\n".join(lines)


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def export_vs_responses_as_csv(execution_result: ExecutionResult | None) -> str:
    """Parse the execution's response and render one CSV row per VS record.

    Content is always quoted, rationale and category when present.

    Raises:
        ExportError: If no execution result is given.
    """
    if execution_result is None:
        raise ExportError("Execution result required for CSV export")
    parsed = parse_vs_response(execution_result.response)
    rows = [CSV_HEADER]
    for index, response in enumerate(parsed.responses, start=1):
        rows.append(
            ",".join(
                [
                    str(index),
                    _quote(response.content),
                    str(response.probability) if response.probability is not None else "",
                    _quote(response.rationale) if response.rationale else "",
                    _quote(response.category) if response.category else "",
                ]
            )
        )
    return "\n".join(rows)


def template_filename(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "_", name, flags=re.IGNORECASE).lower() + "_template.json"


def export_template(template: PromptTemplate) -> ExportedFile:
    return ExportedFile(
        content=json.dumps(template_to_dict(template), indent=2),
        filename=template_filename(template.name),
        mime_type="application/json",
    )


def import_template(json_string: str) -> PromptTemplate | None:
    """Parse an exported template; ``None`` when the document is malformed."""
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as exc:
        logger.warning("Failed to import template: invalid JSON (%s)", exc)
        return None

    if not isinstance(data, dict) or any(not data.get(key) for key in REQUIRED_TEMPLATE_KEYS):
        logger.warning("Failed to import template: invalid template structure")
        return None

    try:
        return template_from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("Failed to import template: %s", exc)
        return None


def export_prompt(
    format: str,
    generated_prompt: GeneratedPrompt,
    base_config: BasePromptConfig,
    vs: VSConfig,
    execution_result: ExecutionResult | None = None,
    *,
    clock: Callable[[], datetime] | None = None,
) -> ExportedFile:
    """Render the prompt in ``format`` and name the file after today's date.

    Raises:
        ExportError: For an unknown format, or CSV without an execution result.
    """
    today = (clock or (lambda: datetime.now(timezone.utc)))().date().isoformat()

    if format == "json":
        return ExportedFile(
            export_as_json(base_config, vs, generated_prompt),
            f"prompt_{today}.json",
            "application/json",
        )
    if format == "text":
        return ExportedFile(export_as_text(generated_prompt), f"prompt_{today}.txt", "text/plain")
    if format == "markdown":
        return ExportedFile(
            export_as_markdown(generated_prompt, base_config, vs),
            f"prompt_{today}.md",
            "text/markdown",
        )
    if format == "csv":
        return ExportedFile(
            export_vs_responses_as_csv(execution_result),
            f"vs_responses_{today}.csv",
            "text/csv",
        )
    raise ExportError(f"Unsupported export format: {format}")
