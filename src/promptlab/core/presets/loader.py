"""Preset loader: reads YAML preset definitions from disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from promptlab.core.export.serialization import advanced_enhancements_from_dict
from promptlab.core.presets.models import EnhancementPreset
from promptlab.core.presets.registry import PresetRegistry
from promptlab.core.validation.validators import validate_advanced_enhancements

logger = logging.getLogger(__name__)

# Bundled preset definitions live under src/promptlab/domains/builder/presets/
BUNDLED_PRESET_DIR = Path(__file__).resolve().parent.parent.parent / "domains" / "builder" / "presets"


def load_preset_directory(directory: str | Path, registry: PresetRegistry) -> int:
    """Load all YAML preset definitions from a directory (recursively).

    Returns the number of presets loaded.
    Skips files starting with underscore.
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Preset directory does not exist: %s", directory)
        return 0

    count = 0
    for path in sorted(directory.rglob("*.yaml")):
        if path.name.startswith("_"):
            continue
        try:
            preset = load_preset_file(path)
            registry.register(preset)
            count += 1
            logger.info("Loaded preset: %s", preset.id)
        except Exception:
            logger.exception("Failed to load preset from %s", path)
    return count


def load_preset_file(path: Path) -> EnhancementPreset:
    """Parse a YAML file into an EnhancementPreset.

    Raises:
        ValueError: If the preset's enhancements fail validation.
    """
    with open(path, encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f)

    preset = EnhancementPreset(
        id=data["id"],
        name=data["name"],
        description=data["description"].strip(),
        category=data.get("category", "General"),
        enhancements=advanced_enhancements_from_dict(data.get("enhancements", {})),
        example_prompt=data.get("example_prompt", "").strip(),
        tags=data.get("tags", []),
    )

    result = validate_advanced_enhancements(preset.enhancements)
    if not result.is_valid:
        codes = ", ".join(e.code for e in result.errors)
        raise ValueError(f"Preset {preset.id!r} has invalid enhancements: {codes}")
    return preset
