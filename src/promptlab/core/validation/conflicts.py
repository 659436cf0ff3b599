"""Enhancement conflict table: combinations that contradict each other.

Every rule is checked independently, so one configuration can surface several
conflicts. Errors block composition in interactive flows; warnings are
advisory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal

from promptlab.core.composition.advanced import AdvancedEnhancements

ConflictType = Literal["warning", "error"]


@dataclass(frozen=True)
class EnhancementConflict:
    type: ConflictType
    message: str
    suggestion: str | None = None


@dataclass(frozen=True)
class ConflictRule:
    applies: Callable[[AdvancedEnhancements], bool]
    conflict: EnhancementConflict


def _json_with_character_length(e: AdvancedEnhancements) -> bool:
    fmt = e.format_controller
    length = e.constraints.length
    return (
        fmt.enabled
        and fmt.type == "structured"
        and fmt.structured_format == "json"
        and length.enabled
        and length.unit == "characters"
    )


def _simple_for_experts(e: AdvancedEnhancements) -> bool:
    complexity = e.constraints.complexity
    audience = e.constraints.audience
    return (
        complexity.enabled
        and complexity.level == "simple"
        and audience.enabled
        and "expert" in audience.target.lower()
    )


def _single_turn_show_working(e: AdvancedEnhancements) -> bool:
    return (
        e.conversation.type == "single"
        and e.reasoning.enabled
        and e.reasoning.show_working
    )


def _expert_without_expertise(e: AdvancedEnhancements) -> bool:
    return e.role.enabled and e.role.type == "expert" and not e.role.expertise.strip()


def _persona_without_role(e: AdvancedEnhancements) -> bool:
    return e.role.enabled and e.role.type == "persona" and not e.role.custom_role.strip()


def _custom_format_without_spec(e: AdvancedEnhancements) -> bool:
    fmt = e.format_controller
    return fmt.enabled and fmt.type == "custom" and not fmt.custom_format.strip()


def _inverted_length(e: AdvancedEnhancements) -> bool:
    length = e.constraints.length
    return length.enabled and length.min > 0 and length.max > 0 and length.min > length.max


CONFLICT_RULES: tuple[ConflictRule, ...] = (
    ConflictRule(
        _json_with_character_length,
        EnhancementConflict(
            "warning",
            "JSON format with character-based length constraints may cause issues. "
            "Consider using word-based constraints or adjusting the format.",
            "Switch to word-based length constraints or use a different format type.",
        ),
    ),
    ConflictRule(
        _simple_for_experts,
        EnhancementConflict(
            "warning",
            "Simple complexity level conflicts with expert audience targeting.",
            'Adjust complexity to "moderate" or "advanced" for expert audiences.',
        ),
    ),
    ConflictRule(
        _single_turn_show_working,
        EnhancementConflict(
            "warning",
            'Single-turn conversation flow with "show working" may result in very long responses.',
            "Consider using iterative or multi-step flow for better results.",
        ),
    ),
    ConflictRule(
        _expert_without_expertise,
        EnhancementConflict(
            "error",
            "Expert role type requires an area of expertise to be specified.",
            "Add an expertise field for the expert role.",
        ),
    ),
    ConflictRule(
        _persona_without_role,
        EnhancementConflict(
            "error",
            "Persona role type requires a persona description.",
            "Add a detailed persona description.",
        ),
    ),
    ConflictRule(
        _custom_format_without_spec,
        EnhancementConflict(
            "error",
            "Custom format type requires a format specification.",
            "Provide a detailed format specification.",
        ),
    ),
    ConflictRule(
        _inverted_length,
        EnhancementConflict(
            "error",
            "Minimum length cannot be greater than maximum length.",
            "Adjust the length constraints so minimum is less than maximum.",
        ),
    ),
)


def validate_enhancement_conflicts(enhancements: AdvancedEnhancements) -> list[EnhancementConflict]:
    return [rule.conflict for rule in CONFLICT_RULES if rule.applies(enhancements)]


def has_blocking_conflicts(conflicts: list[EnhancementConflict]) -> bool:
    return any(c.type == "error" for c in conflicts)
