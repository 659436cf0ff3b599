"""Request parsing and response shaping shared by the builder tools.

Tool arguments arrive as camelCase dicts in the export wire format; responses
are JSON strings with a ``status`` field.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from promptlab.core.composition.advanced import AdvancedEnhancements
from promptlab.core.composition.enhancements import EnhancementConfig
from promptlab.core.composition.models import BasePromptConfig, VSConfig
from promptlab.core.export.serialization import (
    advanced_enhancements_from_dict,
    base_config_from_dict,
    enhancements_from_dict,
    vs_config_from_dict,
)
from promptlab.core.validation.conflicts import EnhancementConflict
from promptlab.core.validation.validators import ValidationResult


class InvalidRequestError(ValueError):
    """Tool arguments that cannot be turned into a prompt configuration."""


@dataclass
class PromptRequest:
    base: BasePromptConfig
    vs: VSConfig
    enhancements: EnhancementConfig
    advanced: AdvancedEnhancements | None = None


def parse_prompt_request(
    base_config: dict[str, Any],
    vs_enhancement: dict[str, Any] | None = None,
    enhancements: dict[str, Any] | None = None,
    advanced_enhancements: dict[str, Any] | None = None,
) -> PromptRequest:
    """Raises InvalidRequestError for unknown frameworks or malformed records."""
    try:
        return PromptRequest(
            base=base_config_from_dict(base_config or {}),
            vs=vs_config_from_dict(vs_enhancement),
            enhancements=enhancements_from_dict(enhancements),
            advanced=(
                advanced_enhancements_from_dict(advanced_enhancements)
                if advanced_enhancements
                else None
            ),
        )
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidRequestError(str(exc)) from exc


def conflicts_payload(conflicts: list[EnhancementConflict]) -> list[dict[str, Any]]:
    return [
        {"type": c.type, "message": c.message, "suggestion": c.suggestion} for c in conflicts
    ]


def error_response(message: str, **extra: Any) -> str:
    return json.dumps({"status": "error", "message": message, **extra})


def validation_error_response(result: ValidationResult) -> str:
    payload = result.to_dict()
    return json.dumps(
        {
            "status": "error",
            "message": "Prompt configuration is invalid.",
            "errors": payload["errors"],
            "warnings": payload["warnings"],
        }
    )
