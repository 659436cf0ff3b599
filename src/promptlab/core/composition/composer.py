"""Prompt composer: assembles every enabled section into the final prompt.

Section order is fixed:

1. role enhancement
2. framework-wrapped base prompt
3. smart constraints
4. reasoning scaffold
5. verbalized-sampling instructions and line format
6. format control
7. conversation flow

Blank sections are dropped and the rest are joined with a blank line. The
composer never validates its input; callers run the validators first when they
need a gate.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from promptlab.core.composition.enhancements import (
    EnhancementConfig,
    generate_conversation_flow,
    generate_format_control,
    generate_reasoning_scaffold,
    generate_role_enhancement,
    generate_smart_constraints,
)
from promptlab.core.composition.frameworks import generate_framework_prompt
from promptlab.core.composition.models import (
    BasePromptConfig,
    GeneratedPrompt,
    PromptConfiguration,
    PromptMetadata,
    VSConfig,
)
from promptlab.core.composition.verbalized import build_vs_section
from promptlab.core.llm.system_prompt import build_domain_system_prompt

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = "\n\n"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def compose_sections(
    base: BasePromptConfig,
    vs: VSConfig,
    enhancements: EnhancementConfig | None = None,
    extra_instructions: str = "",
) -> list[str]:
    """Return the non-blank sections in composition order.

    ``extra_instructions`` (rendered advanced enhancements) ride in the
    framework stage, after the framework-wrapped base prompt.
    """
    enhancements = enhancements or EnhancementConfig()

    framework_section = generate_framework_prompt(
        base.framework, base.framework_config, base.base_prompt, extra_instructions
    )
    if not base.framework and extra_instructions.strip():
        framework_section = SECTION_SEPARATOR.join(
            part for part in (framework_section, extra_instructions) if part.strip()
        )

    sections = [
        generate_role_enhancement(enhancements.role),
        framework_section,
        generate_smart_constraints(enhancements.smart_constraints),
        generate_reasoning_scaffold(enhancements.reasoning),
        build_vs_section(vs),
        generate_format_control(enhancements.format_control),
        generate_conversation_flow(enhancements.conversation),
    ]
    return [s for s in sections if s.strip()]


def generate_complete_prompt(config: PromptConfiguration) -> str:
    """Compose the final instruction text for a full prompt configuration."""
    return SECTION_SEPARATOR.join(compose_sections(config.base, config.vs, config.enhancements))


def generate_enhanced_prompt(
    base: BasePromptConfig,
    vs: VSConfig,
    enhancements: EnhancementConfig | None = None,
    *,
    extra_instructions: str = "",
    clock: Callable[[], datetime] | None = None,
) -> GeneratedPrompt:
    """Compose the final prompt, the system prompt and metadata.

    The target outcome, when set, follows every other section. The timestamp
    only ever appears in the metadata.
    """
    sections = compose_sections(base, vs, enhancements, extra_instructions)
    if base.target_outcome:
        sections.append(f"Target outcome: {base.target_outcome}")

    final_prompt = SECTION_SEPARATOR.join(sections).strip()
    timestamp = (clock or _utc_now)().isoformat()

    logger.debug(
        "Composed prompt: framework=%s, vs=%s, sections=%d, chars=%d",
        base.framework or "None",
        vs.enabled,
        len(sections),
        len(final_prompt),
    )

    return GeneratedPrompt(
        system_prompt=build_domain_system_prompt(base.domain),
        final_prompt=final_prompt,
        metadata=PromptMetadata(
            domain=base.domain or "General",
            framework=base.framework or "None",
            vs_enabled=vs.enabled,
            timestamp=timestamp,
        ),
    )
