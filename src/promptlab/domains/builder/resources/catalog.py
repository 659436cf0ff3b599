"""MCP Resources for framework and preset discovery."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastmcp import FastMCP

from promptlab.core.composition.models import DISTRIBUTION_TYPES, FRAMEWORK_NAMES
from promptlab.core.composition.frameworks import framework_config_fields
from promptlab.core.composition.verbalized import COMMON_DIMENSIONS, is_vs_compatible_with_framework
from promptlab.core.llm.system_prompt import DOMAIN_CATEGORIES

if TYPE_CHECKING:
    from promptlab.core.presets.registry import PresetRegistry


def register_catalog_resources(mcp: FastMCP, presets: PresetRegistry) -> None:
    """Register catalog resources on the MCP server."""

    @mcp.resource("catalog://frameworks")
    def framework_catalog_resource() -> str:
        """Discover prompt frameworks, their config fields and VS compatibility."""
        frameworks = []
        for name in FRAMEWORK_NAMES:
            compatibility = is_vs_compatible_with_framework(name)
            frameworks.append(
                {
                    "name": name,
                    "configFields": framework_config_fields(name),
                    "vsCompatible": compatibility.compatible,
                    "vsWarning": compatibility.warning,
                }
            )
        return json.dumps(
            {
                "framework_count": len(frameworks),
                "frameworks": frameworks,
                "domains": list(DOMAIN_CATEGORIES),
                "distributionTypes": list(DISTRIBUTION_TYPES),
                "commonDimensions": list(COMMON_DIMENSIONS),
            },
            indent=2,
        )

    @mcp.resource("catalog://presets")
    def preset_catalog_resource() -> str:
        """Discover the enhancement presets loaded on this server."""
        loaded = presets.all()
        return json.dumps(
            {
                "preset_count": len(loaded),
                "presets": [
                    {
                        "id": p.id,
                        "name": p.name,
                        "description": p.description,
                        "category": p.category,
                        "tags": p.tags,
                    }
                    for p in loaded
                ],
            },
            indent=2,
        )
