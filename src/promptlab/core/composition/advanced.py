"""Advanced enhancements: the richer, rule-based enhancement variant.

Presets and the conflict validator work on this shape. Unlike the builder
enhancements, these render unlabelled multi-line instruction blocks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

RoleType = Literal["expert", "persona", "perspective", "none"]
FormatType = Literal["structured", "markdown", "list", "table", "code", "custom", "none"]
StructuredFormat = Literal["json", "yaml", "xml"]
LengthUnit = Literal["words", "characters"]
ComplexityLevel = Literal["simple", "moderate", "advanced", "expert"]
ScaffoldType = Literal[
    "analysis", "decision", "problem_solving", "critical_thinking", "creative", "custom", "none"
]
AdvancedFlowType = Literal["single", "iterative", "clarifying", "multi_step", "collaborative"]


@dataclass
class AdvancedRole:
    enabled: bool = False
    type: RoleType = "none"
    expertise: str = ""
    custom_role: str = ""
    perspective: str = ""


@dataclass
class FormatController:
    enabled: bool = False
    type: FormatType = "none"
    structured_format: StructuredFormat | None = None
    custom_format: str = ""
    include_examples: bool = False


@dataclass
class LengthRule:
    enabled: bool = False
    min: int = 0
    max: int = 0
    unit: LengthUnit = "words"


@dataclass
class ToneRule:
    enabled: bool = False
    tones: list[str] = field(default_factory=list)


@dataclass
class AudienceRule:
    enabled: bool = False
    target: str = ""


@dataclass
class ItemsRule:
    enabled: bool = False
    items: list[str] = field(default_factory=list)


@dataclass
class ComplexityRule:
    enabled: bool = False
    level: ComplexityLevel = "moderate"


@dataclass
class ConstraintRules:
    length: LengthRule = field(default_factory=LengthRule)
    tone: ToneRule = field(default_factory=ToneRule)
    audience: AudienceRule = field(default_factory=AudienceRule)
    exclusions: ItemsRule = field(default_factory=ItemsRule)
    requirements: ItemsRule = field(default_factory=ItemsRule)
    complexity: ComplexityRule = field(default_factory=ComplexityRule)


@dataclass
class AdvancedReasoningScaffold:
    enabled: bool = False
    type: ScaffoldType = "none"
    custom_framework: str = ""
    show_working: bool = False


@dataclass
class AdvancedConversationFlow:
    type: AdvancedFlowType = "single"
    context: str = ""
    allow_clarification: bool = False


@dataclass
class AdvancedEnhancements:
    role: AdvancedRole = field(default_factory=AdvancedRole)
    format_controller: FormatController = field(default_factory=FormatController)
    constraints: ConstraintRules = field(default_factory=ConstraintRules)
    reasoning: AdvancedReasoningScaffold = field(default_factory=AdvancedReasoningScaffold)
    conversation: AdvancedConversationFlow = field(default_factory=AdvancedConversationFlow)


COMPLEXITY_PHRASES: dict[str, str] = {
    "simple": "Keep explanations simple and accessible. Minimize jargon.",
    "moderate": "Balance accessibility with appropriate technical detail.",
    "advanced": "Provide in-depth technical analysis and nuanced perspectives.",
    "expert": "Assume deep domain expertise. Use precise terminology and advanced concepts.",
}

# Heading line followed by numbered steps.
SCAFFOLD_STEPS: dict[str, tuple[str, list[str]]] = {
    "analysis": (
        "Use this analytical framework:",
        [
            "Identify key components and variables",
            "Examine relationships and dependencies",
            "Evaluate implications and consequences",
            "Synthesize insights and conclusions",
        ],
    ),
    "decision": (
        "Apply a decision matrix approach:",
        [
            "List all viable options",
            "Define evaluation criteria",
            "Score each option against criteria",
            "Weight factors by importance",
            "Recommend the optimal choice",
        ],
    ),
    "problem_solving": (
        "Follow this problem-solving process:",
        [
            "Define the problem clearly",
            "Analyze root causes",
            "Generate potential solutions",
            "Evaluate feasibility and impact",
            "Recommend and justify the best approach",
        ],
    ),
    "critical_thinking": (
        "Apply critical thinking principles:",
        [
            "Question underlying assumptions",
            "Evaluate evidence quality and sources",
            "Consider alternative perspectives",
            "Identify potential biases",
            "Draw well-reasoned conclusions",
        ],
    ),
    "creative": (
        "Use creative exploration techniques:",
        [
            "Generate diverse possibilities without judgment",
            "Combine ideas in novel ways",
            "Challenge conventional approaches",
            "Explore unexpected connections",
            "Refine and develop the most promising ideas",
        ],
    ),
}


def generate_advanced_role(config: AdvancedRole) -> str:
    if not config.enabled or config.type == "none":
        return ""

    lines: list[str] = []
    if config.type == "expert" and config.expertise:
        lines.append(f"You are an expert in {config.expertise}.")
        lines.append("Draw upon deep domain knowledge and professional experience in your responses.")
    elif config.type == "persona" and config.custom_role:
        lines.append(f"Assume the role of {config.custom_role}.")
        lines.append("Embody this character fully in your tone, perspective, and approach.")
    elif config.type == "perspective" and config.perspective:
        lines.append(f"Approach this from the perspective of {config.perspective}.")
        lines.append("Apply this unique viewpoint throughout your analysis and recommendations.")
    return "\n".join(lines)


def generate_format_controller(config: FormatController) -> str:
    if not config.enabled or config.type == "none":
        return ""

    lines: list[str] = []
    if config.type == "structured":
        fmt = (config.structured_format or "json").upper()
        lines.append(f"Provide your response in {fmt} format.")
        lines.append("Ensure the output is valid and properly formatted.")
        if config.include_examples:
            lines.append("Include example values where appropriate.")
    elif config.type == "markdown":
        lines.append("Format your response using proper Markdown syntax.")
        lines.append("Use headers, lists, code blocks, and emphasis to enhance readability.")
    elif config.type == "list":
        lines.append("Present your response as a clear, organized list.")
        lines.append("Use bullet points or numbering as appropriate for the content.")
    elif config.type == "table":
        lines.append("Organize the information in a table format.")
        lines.append("Include clear column headers and well-structured rows.")
    elif config.type == "code":
        lines.append("Format code examples with proper syntax highlighting.")
        lines.append("Include comments explaining key sections.")
    elif config.type == "custom" and config.custom_format:
        lines.append(f"Follow this format specification:\n{config.custom_format}")
    return "\n".join(lines)


def generate_constraint_rules(config: ConstraintRules) -> str:
    lines: list[str] = []

    length = config.length
    if length.enabled and (length.min > 0 or length.max > 0):
        if length.min > 0 and length.max > 0:
            lines.append(f"Keep your response between {length.min} and {length.max} {length.unit}.")
        elif length.min > 0:
            lines.append(f"Your response should be at least {length.min} {length.unit}.")
        else:
            lines.append(f"Keep your response under {length.max} {length.unit}.")

    if config.tone.enabled and config.tone.tones:
        lines.append(f"Maintain a {', '.join(config.tone.tones)} tone throughout your response.")

    if config.audience.enabled and config.audience.target:
        lines.append(f"Tailor your response for: {config.audience.target}")
        lines.append("Adjust complexity, terminology, and examples accordingly.")

    if config.exclusions.enabled and config.exclusions.items:
        lines.append("\nAvoid the following:")
        lines.extend(f"- {item}" for item in config.exclusions.items)

    if config.requirements.enabled and config.requirements.items:
        lines.append("\nEnsure your response includes:")
        lines.extend(f"- {item}" for item in config.requirements.items)

    if config.complexity.enabled:
        lines.append(COMPLEXITY_PHRASES[config.complexity.level])

    return "\n".join(lines)


def generate_advanced_reasoning(config: AdvancedReasoningScaffold) -> str:
    if not config.enabled or config.type == "none":
        return ""

    lines: list[str] = []
    if config.show_working:
        lines.append("Show your reasoning process step-by-step.")

    if config.type in SCAFFOLD_STEPS:
        heading, steps = SCAFFOLD_STEPS[config.type]
        lines.append(heading)
        lines.extend(f"{i}. {step}" for i, step in enumerate(steps, start=1))

    if config.custom_framework:
        lines.append(f"\nAdditional framework:\n{config.custom_framework}")
    return "\n".join(lines)


def generate_advanced_conversation_flow(config: AdvancedConversationFlow) -> str:
    lines: list[str] = []

    if config.type == "iterative":
        lines.append("This is part of an iterative process. Build upon and refine previous responses.")
        lines.append("Reference earlier context and show progression in your thinking.")
    elif config.type == "clarifying" and config.allow_clarification:
        lines.append(
            "If the request is ambiguous or requires additional information, ask clarifying "
            "questions before providing your main response."
        )
    elif config.type == "multi_step":
        lines.append("Break down your response into clear, sequential steps.")
        lines.append("Each step should build logically on the previous one.")
    elif config.type == "collaborative":
        lines.append("Approach this as a collaborative dialogue.")
        lines.append(
            "Invite feedback, suggest alternatives, and be open to refinement in subsequent turns."
        )

    if config.context:
        lines.append(f"\nConversation context: {config.context}")
    return "\n".join(lines)


def generate_all_advanced_enhancements(enhancements: AdvancedEnhancements) -> str:
    """Render every advanced enhancement, role first and conversation flow last."""
    sections = [
        generate_advanced_role(enhancements.role),
        generate_format_controller(enhancements.format_controller),
        generate_constraint_rules(enhancements.constraints),
        generate_advanced_reasoning(enhancements.reasoning),
        generate_advanced_conversation_flow(enhancements.conversation),
    ]
    return "\n\n".join(s for s in sections if s)
