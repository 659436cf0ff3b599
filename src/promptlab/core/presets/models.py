"""Data models for enhancement presets."""

from __future__ import annotations

from dataclasses import dataclass, field

from promptlab.core.composition.advanced import AdvancedEnhancements


@dataclass
class EnhancementPreset:
    """A named, ready-made bundle of advanced enhancements for a common use case."""

    id: str
    name: str
    description: str
    category: str
    enhancements: AdvancedEnhancements = field(default_factory=AdvancedEnhancements)
    example_prompt: str = ""
    tags: list[str] = field(default_factory=list)
