"""Data models for prompt composition."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

from promptlab.core.composition.enhancements import EnhancementConfig

FrameworkName = Literal[
    "Role-Based",
    "Few-Shot",
    "Chain-of-Thought",
    "Template/Fill-in",
    "Constraint-Based",
    "Iterative/Multi-Turn",
    "Comparative",
    "Generative",
    "Analytical",
    "Transformation",
]
ReasoningStructure = Literal["step-by-step", "pros-cons", "first-principles", "custom"]
AnalysisDepth = Literal["surface", "moderate", "deep"]
DistributionType = Literal["broad_spectrum", "rarity_hunt", "balanced_categories"]

DISTRIBUTION_TYPES: tuple[str, ...] = ("broad_spectrum", "rarity_hunt", "balanced_categories")
REASONING_STRUCTURES: tuple[str, ...] = ("step-by-step", "pros-cons", "first-principles", "custom")


# ---------------------------------------------------------------------------
# Framework configs (one variant per framework)
# ---------------------------------------------------------------------------

@dataclass
class RoleBasedConfig:
    framework: ClassVar[str] = "Role-Based"

    role: str = ""


@dataclass
class FewShotExample:
    input: str = ""
    output: str = ""


@dataclass
class FewShotConfig:
    framework: ClassVar[str] = "Few-Shot"

    examples: list[FewShotExample] = field(default_factory=list)


@dataclass
class ChainOfThoughtConfig:
    framework: ClassVar[str] = "Chain-of-Thought"

    reasoning_structure: ReasoningStructure | None = None
    custom_reasoning_structure: str = ""


@dataclass
class TemplateFillInConfig:
    framework: ClassVar[str] = "Template/Fill-in"

    variables: dict[str, str] = field(default_factory=dict)


@dataclass
class ConstraintBasedConfig:
    framework: ClassVar[str] = "Constraint-Based"

    constraints: list[str] = field(default_factory=list)


@dataclass
class IterativeConfig:
    framework: ClassVar[str] = "Iterative/Multi-Turn"

    conversation_context: str = ""


@dataclass
class ComparativeConfig:
    framework: ClassVar[str] = "Comparative"

    criteria: list[str] = field(default_factory=list)


@dataclass
class GenerativeConfig:
    framework: ClassVar[str] = "Generative"


@dataclass
class AnalyticalConfig:
    framework: ClassVar[str] = "Analytical"

    analysis_depth: AnalysisDepth | None = None


@dataclass
class TransformationConfig:
    framework: ClassVar[str] = "Transformation"

    source_format: str = ""
    target_format: str = ""


FrameworkConfig = (
    RoleBasedConfig
    | FewShotConfig
    | ChainOfThoughtConfig
    | TemplateFillInConfig
    | ConstraintBasedConfig
    | IterativeConfig
    | ComparativeConfig
    | GenerativeConfig
    | AnalyticalConfig
    | TransformationConfig
)

FRAMEWORK_CONFIG_TYPES: dict[str, type] = {
    cls.framework: cls
    for cls in (
        RoleBasedConfig,
        FewShotConfig,
        ChainOfThoughtConfig,
        TemplateFillInConfig,
        ConstraintBasedConfig,
        IterativeConfig,
        ComparativeConfig,
        GenerativeConfig,
        AnalyticalConfig,
        TransformationConfig,
    )
}

FRAMEWORK_NAMES: tuple[str, ...] = tuple(FRAMEWORK_CONFIG_TYPES)


def _str_list(value: Any) -> list[str]:
    if not value:
        return []
    return [str(v) for v in value]


def framework_config_from_dict(framework: str, data: dict[str, Any] | None) -> FrameworkConfig:
    """Build the config variant for ``framework`` from a loose mapping.

    Accepts both snake_case keys and the camelCase keys used by exported
    configuration files.

    Raises:
        ValueError: If ``framework`` is not a known framework name, or a
            field has the wrong JSON type.
    """
    if framework not in FRAMEWORK_CONFIG_TYPES:
        raise ValueError(f"Unknown framework: {framework!r}")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"frameworkConfig must be an object, got {type(data).__name__}")

    def pick(*keys: str, default: Any = None, kind: type = str) -> Any:
        for key in keys:
            value = data.get(key)
            if value in (None, ""):
                continue
            if not isinstance(value, kind):
                raise ValueError(
                    f"frameworkConfig.{key} must be {kind.__name__}, got {type(value).__name__}"
                )
            return value
        return default

    if framework == "Role-Based":
        return RoleBasedConfig(role=pick("role", "roleBasedRole", "roleExpertise", default=""))
    if framework == "Few-Shot":
        raw = pick("examples", "fewShotExamples", default=[], kind=list)
        return FewShotConfig(
            examples=[
                FewShotExample(input=str(ex.get("input", "")), output=str(ex.get("output", "")))
                for ex in raw
                if isinstance(ex, dict)
            ]
        )
    if framework == "Chain-of-Thought":
        return ChainOfThoughtConfig(
            reasoning_structure=pick("reasoning_structure", "reasoningStructure"),
            custom_reasoning_structure=pick(
                "custom_reasoning_structure", "customReasoningStructure", default=""
            ),
        )
    if framework == "Template/Fill-in":
        raw_vars = pick("variables", "templateVariables", default={}, kind=dict)
        return TemplateFillInConfig(variables={str(k): str(v) for k, v in raw_vars.items()})
    if framework == "Constraint-Based":
        return ConstraintBasedConfig(
            constraints=_str_list(pick("constraints", "constraintSpecs", default=[], kind=list))
        )
    if framework == "Iterative/Multi-Turn":
        return IterativeConfig(
            conversation_context=pick("conversation_context", "conversationContext", default="")
        )
    if framework == "Comparative":
        return ComparativeConfig(
            criteria=_str_list(pick("criteria", "comparisonCriteria", default=[], kind=list))
        )
    if framework == "Analytical":
        return AnalyticalConfig(analysis_depth=pick("analysis_depth", "analysisDepth"))
    if framework == "Transformation":
        return TransformationConfig(
            source_format=pick("source_format", "sourceFormat", default=""),
            target_format=pick("target_format", "targetFormat", default=""),
        )
    return GenerativeConfig()


# ---------------------------------------------------------------------------
# Prompt configuration
# ---------------------------------------------------------------------------

@dataclass
class BasePromptConfig:
    """The user's raw intent: base instructions plus an optional framework."""

    base_prompt: str
    domain: str = ""
    target_outcome: str = ""
    framework_config: FrameworkConfig | None = None

    @property
    def framework(self) -> str | None:
        """Framework name derived from the config variant (``None`` = no framework)."""
        if self.framework_config is None:
            return None
        return self.framework_config.framework


@dataclass
class VSConfig:
    """Verbalized-sampling (response distribution) configuration."""

    enabled: bool = False
    number_of_responses: int = 5
    distribution_type: DistributionType = "broad_spectrum"
    probability_threshold: float | None = None
    dimensions: list[str] = field(default_factory=list)
    custom_dimensions: list[str] = field(default_factory=list)
    include_probability_reasoning: bool = False
    anti_typicality_enabled: bool = False
    custom_constraints: str = ""

    def all_dimensions(self) -> list[str]:
        return [*self.dimensions, *self.custom_dimensions]


@dataclass
class PromptConfiguration:
    """Everything the composer needs for one prompt."""

    base: BasePromptConfig
    vs: VSConfig = field(default_factory=VSConfig)
    enhancements: EnhancementConfig = field(default_factory=EnhancementConfig)


# ---------------------------------------------------------------------------
# Composition outputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PromptMetadata:
    domain: str
    framework: str
    vs_enabled: bool
    timestamp: str


@dataclass(frozen=True)
class GeneratedPrompt:
    """The composed prompt sent to the model."""

    system_prompt: str
    final_prompt: str
    metadata: PromptMetadata


@dataclass
class TokenUsage:
    input: int = 0
    output: int = 0
    total: int = 0


@dataclass
class ExecutionResult:
    """One model invocation of a generated prompt."""

    id: str
    prompt: GeneratedPrompt
    response: str
    model: str
    timestamp: str
    tokens_used: TokenUsage | None = None


@dataclass
class PromptTemplate:
    """A named, persisted snapshot of a prompt configuration."""

    id: str
    name: str
    config: BasePromptConfig
    vs_enhancement: VSConfig
    created_at: str
    updated_at: str
    description: str = ""
    enhancements: EnhancementConfig | None = None
    tags: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# VS parsing
# ---------------------------------------------------------------------------

@dataclass
class VSResponse:
    """A single alternative response parsed out of a VS model output."""

    content: str
    probability: float | None = None
    rationale: str | None = None
    category: str | None = None


@dataclass
class VSParseResult:
    responses: list[VSResponse]
    raw_response: str
