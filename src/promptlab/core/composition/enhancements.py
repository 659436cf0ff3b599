"""Builder enhancements: toggleable instruction fragments layered onto a prompt.

Each generator takes one sub-config and returns a single labelled fragment, or
the empty string when the sub-config is disabled. Generators never validate
their input and never depend on time or randomness, so identical configs always
render byte-identical text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ExpertiseLevel = Literal["novice", "intermediate", "expert", "world-class"]
AuthorityLevel = Literal["advisory", "authoritative", "definitive"]
FormatStructure = Literal["bullet-points", "numbered-list", "paragraphs", "json", "table", "custom"]
LengthType = Literal["word-count", "sentence-count", "paragraph-count"]
StyleGuide = Literal["formal", "conversational", "technical", "creative", "academic"]
ReasoningStyle = Literal["logical", "creative", "analytical", "practical"]
FlowType = Literal["single", "iterative", "multi-step", "collaborative"]

EXPERTISE_PHRASES: dict[str, str] = {
    "novice": "You are learning this field",
    "intermediate": "You have solid experience in this field",
    "expert": "You are a highly experienced professional",
    "world-class": "You are a world-renowned expert and thought leader",
}

AUTHORITY_PHRASES: dict[str, str] = {
    "advisory": "Provide recommendations and suggestions",
    "authoritative": "Make confident assertions based on your expertise",
    "definitive": "You have complete authority to make definitive statements",
}

STRUCTURE_PHRASES: dict[str, str] = {
    "bullet-points": "Format your response as clear bullet points",
    "numbered-list": "Format your response as a numbered list",
    "paragraphs": "Format your response in well-structured paragraphs",
    "json": "Format your response as valid JSON",
    "table": "Format your response as a table",
}
CUSTOM_FORMAT_FALLBACK = "Use the specified custom format"

LENGTH_UNITS: dict[str, str] = {
    "word-count": "words",
    "sentence-count": "sentences",
    "paragraph-count": "paragraphs",
}

STYLE_PHRASES: dict[str, str] = {
    "formal": "Use formal, professional language",
    "conversational": "Use conversational, accessible language",
    "technical": "Use precise technical terminology",
    "creative": "Use engaging, creative language",
    "academic": "Use scholarly, academic tone",
}

REASONING_STYLE_PHRASES: dict[str, str] = {
    "logical": "Use logical, deductive reasoning",
    "creative": "Use creative, divergent thinking",
    "analytical": "Use systematic, analytical thinking",
    "practical": "Focus on practical, actionable reasoning",
}

FLOW_TYPE_PHRASES: dict[str, str] = {
    "iterative": "Treat this as one step in an iterative exchange and build on earlier turns",
    "multi-step": "Work through the task in sequential steps across turns",
    "collaborative": "Approach this as a collaborative dialogue and invite input",
}


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

@dataclass
class RoleEnhancement:
    enabled: bool = False
    expertise_level: ExpertiseLevel = "expert"
    domain_specialty: str = ""
    experience_years: int | None = None
    authority_level: AuthorityLevel = "advisory"
    context_setting: str = ""


@dataclass
class LengthSpec:
    type: LengthType | None = None
    target: int | None = None


@dataclass
class FormatControl:
    enabled: bool = False
    structure: FormatStructure = "paragraphs"
    custom_format: str = ""
    length_spec: LengthSpec = field(default_factory=LengthSpec)
    style_guide: StyleGuide = "formal"


@dataclass
class SmartConstraints:
    enabled: bool = False
    positive_constraints: list[str] = field(default_factory=list)
    negative_constraints: list[str] = field(default_factory=list)
    boundary_conditions: list[str] = field(default_factory=list)
    quality_gates: list[str] = field(default_factory=list)


@dataclass
class ReasoningScaffold:
    enabled: bool = False
    show_work: bool = False
    step_by_step: bool = False
    explore_alternatives: bool = False
    confidence_scoring: bool = False
    reasoning_style: ReasoningStyle = "logical"


@dataclass
class ConversationFlow:
    enabled: bool = False
    context_preservation: bool = False
    follow_up_templates: list[str] = field(default_factory=list)
    clarification_protocols: bool = False
    iteration_improvement: bool = False
    flow_type: FlowType = "single"


@dataclass
class EnhancementConfig:
    """The five independently toggled builder enhancements."""

    role: RoleEnhancement = field(default_factory=RoleEnhancement)
    format_control: FormatControl = field(default_factory=FormatControl)
    smart_constraints: SmartConstraints = field(default_factory=SmartConstraints)
    reasoning: ReasoningScaffold = field(default_factory=ReasoningScaffold)
    conversation: ConversationFlow = field(default_factory=ConversationFlow)


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

def generate_role_enhancement(config: RoleEnhancement) -> str:
    if not config.enabled:
        return ""

    text = f"{EXPERTISE_PHRASES[config.expertise_level]} in {config.domain_specialty}."
    if config.experience_years:
        text += f" You have {config.experience_years} years of hands-on experience."
    if config.context_setting:
        text += f" Context: {config.context_setting}"
    text += f" {AUTHORITY_PHRASES[config.authority_level]}."
    return f"ROLE: {text}"


def generate_format_control(config: FormatControl) -> str:
    if not config.enabled:
        return ""

    if config.structure == "custom":
        text = config.custom_format or CUSTOM_FORMAT_FALLBACK
    else:
        text = STRUCTURE_PHRASES[config.structure]

    spec = config.length_spec
    if spec.type and spec.target:
        text += f". Target length: approximately {spec.target} {LENGTH_UNITS[spec.type]}"

    text += f". {STYLE_PHRASES[config.style_guide]}."
    return f"FORMAT: {text}"


def generate_smart_constraints(config: SmartConstraints) -> str:
    """One ``LABEL: a, b, c`` line per non-empty constraint list."""
    if not config.enabled:
        return ""

    lines: list[str] = []
    for label, items in (
        ("MUST INCLUDE", config.positive_constraints),
        ("MUST AVOID", config.negative_constraints),
        ("BOUNDARIES", config.boundary_conditions),
        ("QUALITY REQUIREMENTS", config.quality_gates),
    ):
        if items:
            lines.append(f"{label}: {', '.join(items)}")
    return "\n".join(lines)


def generate_reasoning_scaffold(config: ReasoningScaffold) -> str:
    if not config.enabled:
        return ""

    parts: list[str] = []
    if config.show_work:
        parts.append("Show your reasoning process clearly")
    if config.step_by_step:
        parts.append("Break down your approach step-by-step")
    if config.explore_alternatives:
        parts.append("Consider alternative approaches and explain why you chose your method")
    if config.confidence_scoring:
        parts.append("Provide confidence scores (0-100%) for your key assertions")
    parts.append(REASONING_STYLE_PHRASES[config.reasoning_style])

    return f"REASONING: {'. '.join(parts)}"


def generate_conversation_flow(config: ConversationFlow) -> str:
    if not config.enabled:
        return ""

    parts: list[str] = []
    if config.flow_type in FLOW_TYPE_PHRASES:
        parts.append(FLOW_TYPE_PHRASES[config.flow_type])
    if config.context_preservation:
        parts.append("Maintain context from previous exchanges")
    if config.follow_up_templates:
        parts.append(
            f"Suggest relevant follow-up questions: {', '.join(config.follow_up_templates)}"
        )
    if config.clarification_protocols:
        parts.append("Ask clarifying questions if the request is ambiguous")
    if config.iteration_improvement:
        parts.append("Offer to refine or improve your response based on feedback")

    if not parts:
        return ""
    return f"CONVERSATION: {'. '.join(parts)}"
