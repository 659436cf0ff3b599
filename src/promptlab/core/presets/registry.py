"""Preset registry: in-memory index for loaded enhancement presets."""

from __future__ import annotations

import copy
import logging

from promptlab.core.composition.advanced import AdvancedEnhancements
from promptlab.core.presets.models import EnhancementPreset

logger = logging.getLogger(__name__)


class PresetNotFoundError(KeyError):
    """Raised when a preset id is not registered."""


class PresetRegistry:
    """In-memory registry of all loaded enhancement presets."""

    def __init__(self) -> None:
        self._presets: dict[str, EnhancementPreset] = {}
        self._by_category: dict[str, list[str]] = {}

    def register(self, preset: EnhancementPreset) -> None:
        """Add a preset to all indexes."""
        if preset.id in self._presets:
            raise ValueError(f"Duplicate preset id registered: {preset.id!r}")
        self._presets[preset.id] = preset
        self._by_category.setdefault(preset.category.lower(), []).append(preset.id)

    def get(self, preset_id: str) -> EnhancementPreset | None:
        return self._presets.get(preset_id)

    def require(self, preset_id: str) -> EnhancementPreset:
        """Look up a preset, raising PresetNotFoundError when absent."""
        preset = self._presets.get(preset_id)
        if preset is None:
            raise PresetNotFoundError(preset_id)
        return preset

    def find_by_category(self, category: str) -> list[EnhancementPreset]:
        ids = self._by_category.get(category.lower(), [])
        return [self._presets[pid] for pid in ids]

    def all(self) -> list[EnhancementPreset]:
        """Return all registered presets in registration order."""
        return list(self._presets.values())

    def apply(self, preset_id: str) -> AdvancedEnhancements:
        """Return a private copy of the preset's enhancements for the caller to edit."""
        return copy.deepcopy(self.require(preset_id).enhancements)
