"""Verbalized sampling: ask the model for a distribution of alternative responses."""

from __future__ import annotations

from dataclasses import dataclass

from promptlab.core.composition.models import VSConfig

DEFAULT_RARITY_THRESHOLD = 0.15
RARITY_THRESHOLDS: tuple[float, ...] = (0.15, 0.1, 0.05)

COMMON_DIMENSIONS: tuple[str, ...] = (
    "Audience segments",
    "Strategic approaches",
    "Risk levels",
    "Time horizons",
    "Resource requirements",
    "Technical complexity",
    "Innovation level",
    "Market positioning",
    "Cost structures",
)

SIMPLE_FORMAT = "[Response] (Probability: 0.XX)"
FULL_FORMAT = "[Response] (Probability: 0.XX - Rationale: [explanation])"
RARITY_FULL_FORMAT = "[Response] (Probability: 0.XX - Why rare: [rationale])"
CATEGORY_SIMPLE_FORMAT = "Category: [X] | [Response] (Probability: 0.XX)"
CATEGORY_FULL_FORMAT = "Category: [X] | [Response] (Probability: 0.XX - Category fit: [explanation])"

ANTI_TYPICALITY_INSTRUCTION = (
    "IMPORTANT: Actively avoid typical, first-thought responses. Challenge yourself to "
    "consider perspectives and approaches that would not be immediately obvious."
)


@dataclass(frozen=True)
class FrameworkCompatibility:
    compatible: bool
    warning: str | None = None


VS_FRAMEWORK_COMPATIBILITY: dict[str, FrameworkCompatibility] = {
    "Template/Fill-in": FrameworkCompatibility(
        True, "VS works if template allows multiple outputs"
    ),
    "Constraint-Based": FrameworkCompatibility(
        False, "VS diversity may conflict with strict constraints"
    ),
}


def _broad_spectrum(count: int, include_reasoning: bool) -> str:
    text = (
        f"Generate {count} diverse responses with probability estimates (0.01-0.40). "
        "Include mix from common (0.15+) to rare (0.05-) responses. Ensure each represents "
        "a fundamentally different approach, not variations of the same concept."
    )
    if include_reasoning:
        text += " Include brief rationale for each probability assignment."
    return text


def _rarity_hunt(count: int, threshold: float, include_reasoning: bool) -> str:
    text = (
        f"Generate {count} responses focusing on unconventional approaches "
        f"(probability < {threshold:g}). Skip obvious choices. Focus on options that standard "
        "prompting would miss. Avoid defaulting to stereotypical responses."
    )
    if include_reasoning:
        text += " Explain why each option is rare or unconventional."
    return text


def _balanced_categories(count: int, categories: list[str], include_reasoning: bool) -> str:
    share = 1 / count if count else 0.0
    text = (
        f"Generate {count} responses, one per category with equal probability ({share:.2f}). "
        f"Categories: {', '.join(categories)}. Ensure each response genuinely represents its "
        "assigned category."
    )
    if include_reasoning:
        text += " Explain how each response fits its category."
    return text


def generate_vs_instructions(vs: VSConfig) -> str:
    """Instructions for the selected distribution; empty when VS is disabled."""
    if not vs.enabled:
        return ""

    count = vs.number_of_responses
    reasoning = vs.include_probability_reasoning

    if vs.distribution_type == "rarity_hunt":
        threshold = (
            vs.probability_threshold
            if vs.probability_threshold is not None
            else DEFAULT_RARITY_THRESHOLD
        )
        instruction = _rarity_hunt(count, threshold, reasoning)
    elif vs.distribution_type == "balanced_categories":
        instruction = _balanced_categories(count, vs.all_dimensions(), reasoning)
    elif vs.distribution_type == "broad_spectrum":
        instruction = _broad_spectrum(count, reasoning)
    else:
        instruction = ""

    if vs.anti_typicality_enabled:
        instruction += f"\n\n{ANTI_TYPICALITY_INSTRUCTION}"
    if vs.custom_constraints:
        instruction += f"\n\nAdditional constraints: {vs.custom_constraints}"
    return instruction


def get_vs_format(distribution_type: str, include_reasoning: bool) -> str:
    """The per-line output template the model is asked to fill in."""
    if distribution_type == "broad_spectrum":
        return FULL_FORMAT if include_reasoning else SIMPLE_FORMAT
    if distribution_type == "rarity_hunt":
        return RARITY_FULL_FORMAT if include_reasoning else SIMPLE_FORMAT
    if distribution_type == "balanced_categories":
        return CATEGORY_FULL_FORMAT if include_reasoning else CATEGORY_SIMPLE_FORMAT
    return ""


def build_vs_section(vs: VSConfig) -> str:
    """Instructions plus the required line format, as composed into prompts."""
    if not vs.enabled:
        return ""
    instructions = generate_vs_instructions(vs)
    fmt = get_vs_format(vs.distribution_type, vs.include_probability_reasoning)
    return f"{instructions}\n\nFormat each response as:\n{fmt}"


def is_vs_compatible_with_framework(framework: str | None) -> FrameworkCompatibility:
    if not framework:
        return FrameworkCompatibility(True)
    return VS_FRAMEWORK_COMPATIBILITY.get(framework, FrameworkCompatibility(True))
