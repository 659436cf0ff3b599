"""MCP tools for browsing and applying enhancement presets."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastmcp import FastMCP

from promptlab.core.composition.advanced import generate_all_advanced_enhancements
from promptlab.core.export.serialization import advanced_enhancements_to_dict
from promptlab.core.presets.registry import PresetNotFoundError
from promptlab.core.validation.conflicts import validate_enhancement_conflicts
from promptlab.domains.builder.tools.payloads import conflicts_payload, error_response

if TYPE_CHECKING:
    from promptlab.core.presets.registry import PresetRegistry


def register_preset_tools(mcp: FastMCP, presets: PresetRegistry) -> None:
    """Register preset tools on the MCP server."""

    @mcp.tool
    def list_presets(category: str = "") -> str:
        """List enhancement presets, optionally filtered by category.

        Args:
            category: e.g. Documentation, Content, Business, Education, Development.
        """
        found = presets.find_by_category(category) if category else presets.all()
        return json.dumps(
            {
                "status": "ok",
                "count": len(found),
                "presets": [
                    {
                        "id": p.id,
                        "name": p.name,
                        "description": p.description,
                        "category": p.category,
                        "examplePrompt": p.example_prompt,
                    }
                    for p in found
                ],
            }
        )

    @mcp.tool
    def apply_preset(preset_id: str) -> str:
        """Return a preset's advanced enhancements, rendered instructions and conflicts.

        The enhancements can be edited and passed back to compose_prompt.
        """
        try:
            enhancements = presets.apply(preset_id)
        except PresetNotFoundError:
            return error_response(
                f"Unknown preset: {preset_id}", available=[p.id for p in presets.all()]
            )
        preset = presets.require(preset_id)
        return json.dumps(
            {
                "status": "ok",
                "presetId": preset.id,
                "name": preset.name,
                "examplePrompt": preset.example_prompt,
                "advancedEnhancements": advanced_enhancements_to_dict(enhancements),
                "instructions": generate_all_advanced_enhancements(enhancements),
                "conflicts": conflicts_payload(validate_enhancement_conflicts(enhancements)),
            }
        )
