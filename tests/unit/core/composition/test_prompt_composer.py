"""Tests for the prompt composer: section order, determinism, metadata."""

from __future__ import annotations

from datetime import datetime, timezone

from promptlab.core.composition.composer import (
    compose_sections,
    generate_complete_prompt,
    generate_enhanced_prompt,
)
from promptlab.core.composition.enhancements import EnhancementConfig
from promptlab.core.composition.models import (
    BasePromptConfig,
    ConstraintBasedConfig,
    PromptConfiguration,
    VSConfig,
)
from promptlab.core.llm.system_prompt import DEFAULT_SYSTEM_PROMPT

_NOW = datetime(2026, 3, 1, 9, 30, 0, tzinfo=timezone.utc)


def _clock() -> datetime:
    return _NOW


class TestPassthrough:
    def test_base_prompt_only(self):
        base = BasePromptConfig(base_prompt="Explain recursion to a beginner.")
        prompt = generate_enhanced_prompt(base, VSConfig(), clock=_clock)
        assert prompt.final_prompt == "Explain recursion to a beginner."
        assert prompt.system_prompt == DEFAULT_SYSTEM_PROMPT
        assert prompt.metadata.domain == "General"
        assert prompt.metadata.framework == "None"
        assert prompt.metadata.vs_enabled is False

    def test_disabled_enhancements_contribute_nothing(self, base_config):
        plain = generate_enhanced_prompt(base_config, VSConfig(), clock=_clock)
        with_defaults = generate_enhanced_prompt(
            base_config, VSConfig(), EnhancementConfig(), clock=_clock
        )
        assert plain == with_defaults
        assert plain.final_prompt == base_config.base_prompt

    def test_complete_prompt_matches_enhanced_final_prompt(self, base_config, full_enhancements):
        config = PromptConfiguration(base=base_config, enhancements=full_enhancements)
        enhanced = generate_enhanced_prompt(base_config, VSConfig(), full_enhancements)
        assert generate_complete_prompt(config) == enhanced.final_prompt


class TestDeterminism:
    def test_identical_inputs_give_identical_output(
        self, role_based_config, vs_enabled, full_enhancements
    ):
        first = generate_enhanced_prompt(role_based_config, vs_enabled, full_enhancements, clock=_clock)
        second = generate_enhanced_prompt(role_based_config, vs_enabled, full_enhancements, clock=_clock)
        assert first == second

    def test_timestamp_only_in_metadata(self, role_based_config, vs_enabled):
        prompt = generate_enhanced_prompt(role_based_config, vs_enabled, clock=_clock)
        assert prompt.metadata.timestamp == "2026-03-01T09:30:00+00:00"
        assert "2026-03-01" not in prompt.final_prompt
        assert "2026-03-01" not in prompt.system_prompt


class TestSectionOrder:
    def test_sections_follow_fixed_order(self, role_based_config, vs_enabled, full_enhancements):
        sections = compose_sections(role_based_config, vs_enabled, full_enhancements)
        assert len(sections) == 7
        assert sections[0].startswith("ROLE:")
        assert sections[1].startswith("You are a senior product marketer.")
        assert sections[2].startswith("MUST INCLUDE:")
        assert sections[3].startswith("REASONING:")
        assert sections[4].startswith("Generate 5 diverse responses")
        assert sections[5].startswith("FORMAT:")
        assert sections[6].startswith("CONVERSATION:")

    def test_sections_joined_by_blank_line(self, role_based_config, full_enhancements):
        prompt = generate_enhanced_prompt(role_based_config, VSConfig(), full_enhancements)
        sections = compose_sections(role_based_config, VSConfig(), full_enhancements)
        assert prompt.final_prompt == "\n\n".join(sections)

    def test_target_outcome_is_last(self, full_enhancements):
        base = BasePromptConfig(
            base_prompt="Draft a launch email.", target_outcome="A 20% click-through rate"
        )
        prompt = generate_enhanced_prompt(base, VSConfig(enabled=True), full_enhancements)
        assert prompt.final_prompt.endswith("\n\nTarget outcome: A 20% click-through rate")


class TestExtraInstructions:
    def test_extra_follows_base_without_framework(self):
        base = BasePromptConfig(base_prompt="Write release notes.")
        sections = compose_sections(base, VSConfig(), extra_instructions="Use Markdown.")
        assert sections == ["Write release notes.\n\nUse Markdown."]

    def test_extra_rides_in_framework_stage(self, role_based_config, full_enhancements):
        sections = compose_sections(
            role_based_config, VSConfig(), full_enhancements, extra_instructions="Use Markdown."
        )
        assert sections[1].endswith(f"{role_based_config.base_prompt}\n\nUse Markdown.")

    def test_blank_extra_is_ignored(self, base_config):
        sections = compose_sections(base_config, VSConfig(), extra_instructions="   ")
        assert sections == [base_config.base_prompt]


class TestMetadataAndSystemPrompt:
    def test_domain_system_prompt(self):
        base = BasePromptConfig(base_prompt="Refactor this function.", domain="Code & Development")
        prompt = generate_enhanced_prompt(base, VSConfig())
        assert prompt.system_prompt.startswith("You are an experienced software engineer")
        assert prompt.metadata.domain == "Code & Development"

    def test_unknown_domain_uses_default_system_prompt(self):
        base = BasePromptConfig(base_prompt="Plan my week.", domain="Astrology")
        assert generate_enhanced_prompt(base, VSConfig()).system_prompt == DEFAULT_SYSTEM_PROMPT

    def test_framework_and_vs_in_metadata(self, vs_enabled):
        base = BasePromptConfig(
            base_prompt="List launch risks.",
            framework_config=ConstraintBasedConfig(constraints=["Max 5 items"]),
        )
        prompt = generate_enhanced_prompt(base, vs_enabled)
        assert prompt.metadata.framework == "Constraint-Based"
        assert prompt.metadata.vs_enabled is True
