"""Prompt configuration validators.

Every validator returns a fresh :class:`ValidationResult`; nothing raises and
nothing mutates its input. ``validate_complete_prompt_config`` concatenates
the results of the individual validators.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from promptlab.core.composition.advanced import AdvancedEnhancements
from promptlab.core.composition.enhancements import EnhancementConfig
from promptlab.core.composition.models import (
    DISTRIBUTION_TYPES,
    BasePromptConfig,
    ChainOfThoughtConfig,
    ConstraintBasedConfig,
    FewShotConfig,
    FrameworkConfig,
    RoleBasedConfig,
    TemplateFillInConfig,
    VSConfig,
)
from promptlab.core.composition.verbalized import is_vs_compatible_with_framework

MIN_PROMPT_LENGTH = 10
MAX_PROMPT_LENGTH = 20_000
MIN_RESPONSES = 1
MAX_RESPONSES = 10

PLACEHOLDER_MARKERS: tuple[str, ...] = ("lorem ipsum", "placeholder", "todo", "fill this in")


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str
    code: str


@dataclass
class ValidationResult:
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error(self, field_name: str, message: str, code: str) -> None:
        self.errors.append(ValidationIssue(field_name, message, code))

    def warn(self, field_name: str, message: str, code: str) -> None:
        self.warnings.append(ValidationIssue(field_name, message, code))

    @classmethod
    def merge(cls, *results: ValidationResult) -> ValidationResult:
        """Concatenate errors and warnings of ``results`` into a new result."""
        merged = cls()
        for result in results:
            merged.errors.extend(result.errors)
            merged.warnings.extend(result.warnings)
        return merged

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "errors": [vars(e) for e in self.errors],
            "warnings": [vars(w) for w in self.warnings],
        }


def _blank(value: str | None) -> bool:
    return not value or not value.strip()


# ---------------------------------------------------------------------------
# Base prompt
# ---------------------------------------------------------------------------

def validate_base_prompt(prompt: str) -> ValidationResult:
    result = ValidationResult()

    if _blank(prompt):
        result.error("basePrompt", "Base prompt cannot be empty", "PROMPT_REQUIRED")
        return result

    if len(prompt.strip()) < MIN_PROMPT_LENGTH:
        result.warn(
            "basePrompt",
            "Prompt is very short. Consider adding more detail for better results.",
            "PROMPT_TOO_SHORT",
        )

    if len(prompt) > MAX_PROMPT_LENGTH:
        result.error(
            "basePrompt",
            f"Prompt exceeds maximum length of {MAX_PROMPT_LENGTH:,} characters",
            "PROMPT_TOO_LONG",
        )

    lowered = prompt.lower()
    if any(marker in lowered for marker in PLACEHOLDER_MARKERS):
        result.warn("basePrompt", "Prompt may contain placeholder text", "PLACEHOLDER_DETECTED")

    return result


# ---------------------------------------------------------------------------
# Framework config
# ---------------------------------------------------------------------------

def _validate_role_based(config: RoleBasedConfig, result: ValidationResult) -> None:
    if _blank(config.role):
        result.error(
            "frameworkConfig.role",
            "Role-based framework requires a role to be specified",
            "ROLE_REQUIRED",
        )


def _validate_few_shot(config: FewShotConfig, result: ValidationResult) -> None:
    if not config.examples:
        result.error(
            "frameworkConfig.examples",
            "Few-shot framework requires at least one example",
            "EXAMPLES_REQUIRED",
        )
        return
    for idx, example in enumerate(config.examples):
        if _blank(example.input):
            result.error(
                f"frameworkConfig.examples[{idx}].input",
                f"Example {idx + 1} is missing input",
                "EXAMPLE_INPUT_REQUIRED",
            )
        if _blank(example.output):
            result.error(
                f"frameworkConfig.examples[{idx}].output",
                f"Example {idx + 1} is missing output",
                "EXAMPLE_OUTPUT_REQUIRED",
            )


def _validate_chain_of_thought(config: ChainOfThoughtConfig, result: ValidationResult) -> None:
    if config.reasoning_structure == "custom" and _blank(config.custom_reasoning_structure):
        result.error(
            "frameworkConfig.customReasoningStructure",
            "Custom reasoning structure requires a description",
            "CUSTOM_REASONING_REQUIRED",
        )


def _validate_template(config: TemplateFillInConfig, result: ValidationResult) -> None:
    if not config.variables:
        result.warn(
            "frameworkConfig.variables",
            "Template framework works best with defined variables",
            "VARIABLES_RECOMMENDED",
        )


def _validate_constraint_based(config: ConstraintBasedConfig, result: ValidationResult) -> None:
    if not [c for c in config.constraints if not _blank(c)]:
        result.error(
            "frameworkConfig.constraints",
            "Constraint-based framework requires at least one constraint",
            "CONSTRAINTS_REQUIRED",
        )


_FRAMEWORK_VALIDATORS = {
    RoleBasedConfig: _validate_role_based,
    FewShotConfig: _validate_few_shot,
    ChainOfThoughtConfig: _validate_chain_of_thought,
    TemplateFillInConfig: _validate_template,
    ConstraintBasedConfig: _validate_constraint_based,
}


def validate_framework_config(config: FrameworkConfig | None) -> ValidationResult:
    """Check the required fields of the selected framework variant."""
    result = ValidationResult()
    if config is None:
        return result
    check = _FRAMEWORK_VALIDATORS.get(type(config))
    if check is not None:
        check(config, result)
    return result


# ---------------------------------------------------------------------------
# Verbalized sampling
# ---------------------------------------------------------------------------

def validate_vs_config(vs: VSConfig, framework: str | None = None) -> ValidationResult:
    result = ValidationResult()
    if not vs.enabled:
        return result

    if not MIN_RESPONSES <= vs.number_of_responses <= MAX_RESPONSES:
        result.error(
            "vsEnhancement.numberOfResponses",
            f"Number of responses must be between {MIN_RESPONSES} and {MAX_RESPONSES}",
            "INVALID_RESPONSE_COUNT",
        )

    if vs.distribution_type not in DISTRIBUTION_TYPES:
        result.error(
            "vsEnhancement.distributionType",
            "Invalid distribution type",
            "INVALID_DISTRIBUTION_TYPE",
        )

    if vs.distribution_type == "balanced_categories" and not vs.all_dimensions():
        result.error(
            "vsEnhancement.dimensions",
            "Balanced categories requires at least one dimension",
            "DIMENSIONS_REQUIRED",
        )

    threshold = vs.probability_threshold
    if vs.distribution_type == "rarity_hunt" and threshold is not None and not 0 <= threshold <= 1:
        result.error(
            "vsEnhancement.probabilityThreshold",
            "Probability threshold must be between 0 and 1",
            "INVALID_THRESHOLD",
        )

    compat = is_vs_compatible_with_framework(framework)
    if not compat.compatible:
        result.warn(
            "vsEnhancement.enabled",
            compat.warning or f"VS is not recommended with the {framework} framework",
            "VS_FRAMEWORK_CONFLICT",
        )

    return result


# ---------------------------------------------------------------------------
# Enhancements
# ---------------------------------------------------------------------------

def validate_enhancement_config(enhancements: EnhancementConfig) -> ValidationResult:
    """Required fields of the builder enhancements."""
    result = ValidationResult()

    if enhancements.role.enabled and _blank(enhancements.role.domain_specialty):
        result.error(
            "enhancements.role.domainSpecialty",
            "Role enhancement requires a domain specialty",
            "ROLE_DOMAIN_REQUIRED",
        )

    fmt = enhancements.format_control
    if fmt.enabled:
        if fmt.structure == "custom" and _blank(fmt.custom_format):
            result.error(
                "enhancements.formatControl.customFormat",
                "Custom format requires format specification",
                "CUSTOM_FORMAT_REQUIRED",
            )
        if fmt.length_spec.target is not None and fmt.length_spec.target < 0:
            result.error(
                "enhancements.formatControl.lengthSpec",
                "Target length cannot be negative",
                "INVALID_LENGTH_TARGET",
            )

    reasoning = enhancements.reasoning
    if reasoning.enabled and not any(
        (
            reasoning.show_work,
            reasoning.step_by_step,
            reasoning.explore_alternatives,
            reasoning.confidence_scoring,
        )
    ):
        result.warn(
            "enhancements.reasoning",
            "Reasoning scaffold is enabled but only the reasoning style is set",
            "NO_REASONING_OPTIONS",
        )

    return result


def validate_advanced_enhancements(enhancements: AdvancedEnhancements) -> ValidationResult:
    result = ValidationResult()

    role = enhancements.role
    if role.enabled:
        if role.type == "expert" and _blank(role.expertise):
            result.error(
                "roleEnhancement.expertise",
                "Expert role requires expertise field",
                "EXPERTISE_REQUIRED",
            )
        if role.type == "persona" and _blank(role.custom_role):
            result.error(
                "roleEnhancement.customRole",
                "Persona role requires custom role description",
                "CUSTOM_ROLE_REQUIRED",
            )
        if role.type == "perspective" and _blank(role.perspective):
            result.error(
                "roleEnhancement.perspective",
                "Perspective role requires perspective description",
                "PERSPECTIVE_REQUIRED",
            )

    fmt = enhancements.format_controller
    if fmt.enabled and fmt.type == "custom" and _blank(fmt.custom_format):
        result.error(
            "formatController.customFormat",
            "Custom format requires format specification",
            "CUSTOM_FORMAT_REQUIRED",
        )

    rules = enhancements.constraints
    if rules.length.enabled:
        if rules.length.min < 0 or rules.length.max < 0:
            result.error(
                "smartConstraints.length",
                "Length constraints cannot be negative",
                "INVALID_LENGTH",
            )
        if rules.length.max > 0 and rules.length.min > rules.length.max:
            result.error(
                "smartConstraints.length",
                "Minimum length cannot exceed maximum length",
                "INVALID_LENGTH_RANGE",
            )

    if rules.tone.enabled and not rules.tone.tones:
        result.warn(
            "smartConstraints.tone",
            "Tone constraint is enabled but no tones selected",
            "NO_TONES_SELECTED",
        )

    if rules.audience.enabled and _blank(rules.audience.target):
        result.warn(
            "smartConstraints.audience",
            "Audience constraint is enabled but no target specified",
            "NO_AUDIENCE_SPECIFIED",
        )

    scaffold = enhancements.reasoning
    if scaffold.enabled and scaffold.type == "custom" and _blank(scaffold.custom_framework):
        result.error(
            "reasoningScaffold.customFramework",
            "Custom reasoning scaffold requires framework description",
            "CUSTOM_FRAMEWORK_REQUIRED",
        )

    return result


def validate_complete_prompt_config(
    base: BasePromptConfig,
    vs: VSConfig,
    enhancements: EnhancementConfig | None = None,
    advanced: AdvancedEnhancements | None = None,
) -> ValidationResult:
    """Run every validator and concatenate the findings."""
    results = [
        validate_base_prompt(base.base_prompt),
        validate_framework_config(base.framework_config),
        validate_vs_config(vs, base.framework),
    ]
    if enhancements is not None:
        results.append(validate_enhancement_config(enhancements))
    if advanced is not None:
        results.append(validate_advanced_enhancements(advanced))
    return ValidationResult.merge(*results)
