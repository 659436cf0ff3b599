"""Tests for framework template generation."""

from __future__ import annotations

from promptlab.core.composition.frameworks import (
    DEFAULT_REASONING,
    framework_config_fields,
    generate_framework_prompt,
)
from promptlab.core.composition.models import (
    AnalyticalConfig,
    ChainOfThoughtConfig,
    ComparativeConfig,
    ConstraintBasedConfig,
    FewShotConfig,
    FewShotExample,
    IterativeConfig,
    RoleBasedConfig,
    TemplateFillInConfig,
    TransformationConfig,
)

BASE = "Summarize the quarterly report."


class TestNoFramework:
    def test_base_prompt_passes_through_unchanged(self):
        assert generate_framework_prompt(None, None, BASE) == BASE

    def test_empty_string_framework_is_no_framework(self):
        assert generate_framework_prompt("", None, BASE) == BASE

    def test_unknown_framework_passes_through_with_extra(self):
        assert generate_framework_prompt("Socratic", None, BASE, "EXTRA") == f"{BASE}\n\nEXTRA"


class TestRoleBased:
    def test_role_precedes_base(self):
        text = generate_framework_prompt("Role-Based", RoleBasedConfig(role="a CFO"), BASE)
        assert text == f"You are a CFO.\n\n{BASE}"

    def test_missing_role_uses_default(self):
        text = generate_framework_prompt("Role-Based", RoleBasedConfig(), BASE)
        assert text.startswith("You are an expert assistant.")

    def test_dict_config_with_wire_keys(self):
        text = generate_framework_prompt("Role-Based", {"roleBasedRole": "a chef"}, BASE)
        assert text == f"You are a chef.\n\n{BASE}"

    def test_extra_follows_base(self):
        text = generate_framework_prompt("Role-Based", RoleBasedConfig(role="a CFO"), BASE, "EXTRA")
        assert text == f"You are a CFO.\n\n{BASE}\n\nEXTRA"


class TestChainOfThought:
    def test_default_structure(self):
        text = generate_framework_prompt("Chain-of-Thought", ChainOfThoughtConfig(), BASE)
        assert text == f"{BASE}\n\n{DEFAULT_REASONING}"

    def test_pros_cons(self):
        text = generate_framework_prompt(
            "Chain-of-Thought", ChainOfThoughtConfig(reasoning_structure="pros-cons"), BASE
        )
        assert text.endswith("Analyze the pros and cons of different approaches before concluding.")

    def test_custom_structure(self):
        config = ChainOfThoughtConfig(
            reasoning_structure="custom", custom_reasoning_structure="Use the 5 whys."
        )
        text = generate_framework_prompt("Chain-of-Thought", config, BASE)
        assert text == f"{BASE}\n\nUse the 5 whys."


class TestFewShot:
    def test_examples_are_numbered(self):
        config = FewShotConfig(
            examples=[FewShotExample("cat", "chat"), FewShotExample("dog", "chien")]
        )
        text = generate_framework_prompt("Few-Shot", config, "Translate: bird")
        assert text == (
            "Here are examples to guide your response:\n\n"
            "Example 1:\nInput: cat\nOutput: chat\n\n"
            "Example 2:\nInput: dog\nOutput: chien\n\n"
            "Now, please respond to the following:\nTranslate: bird"
        )


class TestTemplateFillIn:
    def test_variables_are_substituted(self):
        config = TemplateFillInConfig(variables={"name": "Ada", "topic": "compilers"})
        text = generate_framework_prompt(
            "Template/Fill-in", config, "Write to {{name}} about {{topic}}, {{name}}."
        )
        assert text == "Write to Ada about compilers, Ada."

    def test_unknown_placeholders_are_left_alone(self):
        config = TemplateFillInConfig(variables={"name": "Ada"})
        text = generate_framework_prompt("Template/Fill-in", config, "Hi {{name}} from {{city}}")
        assert text == "Hi Ada from {{city}}"

    def test_values_are_inserted_literally(self):
        config = TemplateFillInConfig(variables={"price": r"$5 \1"})
        text = generate_framework_prompt("Template/Fill-in", config, "Costs {{price}}")
        assert text == r"Costs $5 \1"


class TestOtherFrameworks:
    def test_constraints_are_numbered(self):
        config = ConstraintBasedConfig(constraints=["Under 100 words", "No emojis"])
        text = generate_framework_prompt("Constraint-Based", config, BASE)
        assert text == (
            f"{BASE}\n\nPlease adhere to these constraints:\n1. Under 100 words\n2. No emojis"
        )

    def test_iterative_includes_context(self):
        config = IterativeConfig(conversation_context="We chose option B.")
        text = generate_framework_prompt("Iterative/Multi-Turn", config, BASE)
        assert "Conversation so far: We chose option B." in text
        assert "iterative conversation" in text

    def test_comparative_criteria(self):
        config = ComparativeConfig(criteria=["cost", "speed"])
        text = generate_framework_prompt("Comparative", config, BASE)
        assert text.endswith("Compare using these criteria: cost, speed.")

    def test_generative(self):
        text = generate_framework_prompt("Generative", None, BASE)
        assert text.startswith(BASE)
        assert "beyond typical examples" in text

    def test_analytical_depth(self):
        text = generate_framework_prompt("Analytical", AnalyticalConfig(analysis_depth="deep"), BASE)
        assert "second-order effects" in text

    def test_transformation_direction(self):
        config = TransformationConfig(source_format="CSV", target_format="Markdown table")
        text = generate_framework_prompt("Transformation", config, BASE)
        assert text.endswith("Transform from CSV to Markdown table.")

    def test_mismatched_config_falls_back_to_defaults(self):
        text = generate_framework_prompt("Role-Based", ComparativeConfig(criteria=["x"]), BASE)
        assert text == f"You are an expert assistant.\n\n{BASE}"


class TestConfigFields:
    def test_required_fields(self):
        assert framework_config_fields("Few-Shot") == ["examples"]
        assert framework_config_fields("Generative") == []
