"""Framework templates: wrap base instructions in a framework-shaped skeleton."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable

from promptlab.core.composition.models import (
    FRAMEWORK_CONFIG_TYPES,
    AnalyticalConfig,
    ChainOfThoughtConfig,
    ComparativeConfig,
    ConstraintBasedConfig,
    FewShotConfig,
    FrameworkConfig,
    IterativeConfig,
    RoleBasedConfig,
    TemplateFillInConfig,
    TransformationConfig,
    framework_config_from_dict,
)

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "an expert assistant"
DEFAULT_REASONING = "Think through this step-by-step, showing your reasoning process."

REASONING_SKELETONS: dict[str, str] = {
    "step-by-step": DEFAULT_REASONING,
    "pros-cons": "Analyze the pros and cons of different approaches before concluding.",
    "first-principles": (
        "Break this down to first principles and build your reasoning from the ground up."
    ),
}

ANALYSIS_DEPTH_PHRASES: dict[str, str] = {
    "surface": "Keep the analysis at a high level, focusing on the most visible factors.",
    "moderate": "Go beyond the obvious factors without exhaustively covering every detail.",
    "deep": "Go deep: examine second-order effects, edge cases, and underlying causes.",
}

REQUIRED_FIELDS: dict[str, list[str]] = {
    "Role-Based": ["role"],
    "Few-Shot": ["examples"],
    "Chain-of-Thought": ["reasoning_structure", "custom_reasoning_structure"],
    "Template/Fill-in": ["variables"],
    "Constraint-Based": ["constraints"],
}


def _blocks(*parts: str) -> str:
    """Join the non-blank parts with a blank line between them."""
    return "\n\n".join(p for p in parts if p and p.strip())


def _role_based(config: RoleBasedConfig, base_prompt: str, extra: str) -> str:
    role = config.role or DEFAULT_ROLE
    return _blocks(f"You are {role}.", base_prompt, extra)


def _chain_of_thought(config: ChainOfThoughtConfig, base_prompt: str, extra: str) -> str:
    if config.reasoning_structure == "custom" and config.custom_reasoning_structure:
        structure = config.custom_reasoning_structure
    else:
        structure = REASONING_SKELETONS.get(config.reasoning_structure or "", DEFAULT_REASONING)
    return _blocks(base_prompt, structure, extra)


def _few_shot(config: FewShotConfig, base_prompt: str, extra: str) -> str:
    examples_text = "\n\n".join(
        f"Example {i}:\nInput: {ex.input}\nOutput: {ex.output}"
        for i, ex in enumerate(config.examples, start=1)
    )
    return _blocks(
        "Here are examples to guide your response:",
        examples_text,
        f"Now, please respond to the following:\n{base_prompt}",
        extra,
    )


def _template_fill_in(config: TemplateFillInConfig, base_prompt: str, extra: str) -> str:
    prompt = base_prompt
    for name, value in config.variables.items():
        prompt = re.sub(r"\{\{" + re.escape(name) + r"\}\}", lambda _m, v=value: v, prompt)
    return _blocks(prompt, extra)


def _constraint_based(config: ConstraintBasedConfig, base_prompt: str, extra: str) -> str:
    constraints_text = "\n".join(f"{i}. {c}" for i, c in enumerate(config.constraints, start=1))
    return _blocks(base_prompt, f"Please adhere to these constraints:\n{constraints_text}", extra)


def _iterative(config: IterativeConfig, base_prompt: str, extra: str) -> str:
    context = (
        f"Conversation so far: {config.conversation_context}"
        if config.conversation_context
        else ""
    )
    return _blocks(
        base_prompt,
        context,
        "This is part of an iterative conversation. Build upon previous context and be "
        "prepared for follow-up questions.",
        extra,
    )


def _comparative(config: ComparativeConfig, base_prompt: str, extra: str) -> str:
    criteria = (
        f"Compare using these criteria: {', '.join(config.criteria)}." if config.criteria else ""
    )
    return _blocks(
        base_prompt,
        "Please compare and contrast the different options or approaches. Highlight key "
        "differences, trade-offs, and provide a recommendation based on the criteria.",
        criteria,
        extra,
    )


def _generative(_config: FrameworkConfig, base_prompt: str, extra: str) -> str:
    return _blocks(
        base_prompt,
        "Generate creative, original content that goes beyond typical examples.",
        extra,
    )


def _analytical(config: AnalyticalConfig, base_prompt: str, extra: str) -> str:
    return _blocks(
        base_prompt,
        "Provide a thorough analysis by breaking down the components, examining "
        "relationships, and identifying patterns or insights.",
        ANALYSIS_DEPTH_PHRASES.get(config.analysis_depth or "", ""),
        extra,
    )


def _transformation(config: TransformationConfig, base_prompt: str, extra: str) -> str:
    if config.source_format and config.target_format:
        direction = f"Transform from {config.source_format} to {config.target_format}."
    elif config.target_format:
        direction = f"The target format is {config.target_format}."
    else:
        direction = ""
    return _blocks(
        base_prompt,
        "Transform the content according to the specified format, style, or structure "
        "while preserving core meaning.",
        direction,
        extra,
    )


FRAMEWORK_TEMPLATES: dict[str, Callable[[Any, str, str], str]] = {
    "Role-Based": _role_based,
    "Chain-of-Thought": _chain_of_thought,
    "Few-Shot": _few_shot,
    "Template/Fill-in": _template_fill_in,
    "Constraint-Based": _constraint_based,
    "Iterative/Multi-Turn": _iterative,
    "Comparative": _comparative,
    "Generative": _generative,
    "Analytical": _analytical,
    "Transformation": _transformation,
}


def _coerce_config(
    framework: str, config: FrameworkConfig | dict[str, Any] | None
) -> FrameworkConfig:
    expected = FRAMEWORK_CONFIG_TYPES[framework]
    if isinstance(config, expected):
        return config
    if config is None or isinstance(config, dict):
        return framework_config_from_dict(framework, config)
    logger.debug(
        "Config %s does not match framework %s; using defaults",
        type(config).__name__,
        framework,
    )
    return expected()


def generate_framework_prompt(
    framework: str | None,
    framework_config: FrameworkConfig | dict[str, Any] | None,
    base_prompt: str,
    extra: str = "",
) -> str:
    """Wrap ``base_prompt`` in the skeleton of ``framework``.

    With no framework the base prompt is returned unchanged; no default
    framework is ever applied. Unknown framework names fall back to the base
    prompt followed by ``extra``.
    """
    if not framework:
        return base_prompt

    template = FRAMEWORK_TEMPLATES.get(framework)
    if template is None:
        logger.debug("Unknown framework %r; passing base prompt through", framework)
        return _blocks(base_prompt, extra)

    return template(_coerce_config(framework, framework_config), base_prompt, extra)


def framework_config_fields(framework: str) -> list[str]:
    """Config fields a framework reads; empty for frameworks without required fields."""
    return list(REQUIRED_FIELDS.get(framework, []))
