"""Tests for the enhancement conflict table."""

from __future__ import annotations

from promptlab.core.composition.advanced import (
    AdvancedConversationFlow,
    AdvancedEnhancements,
    AdvancedReasoningScaffold,
    AdvancedRole,
    AudienceRule,
    ComplexityRule,
    ConstraintRules,
    FormatController,
    LengthRule,
)
from promptlab.core.validation.conflicts import (
    CONFLICT_RULES,
    has_blocking_conflicts,
    validate_enhancement_conflicts,
)


class TestConflictRules:
    def test_defaults_have_no_conflicts(self):
        assert validate_enhancement_conflicts(AdvancedEnhancements()) == []

    def test_rule_table_size(self):
        assert len(CONFLICT_RULES) == 7

    def test_json_with_character_length(self):
        conflicts = validate_enhancement_conflicts(
            AdvancedEnhancements(
                format_controller=FormatController(
                    enabled=True, type="structured", structured_format="json"
                ),
                constraints=ConstraintRules(length=LengthRule(True, 0, 500, "characters")),
            )
        )
        assert len(conflicts) == 1
        assert conflicts[0].type == "warning"
        assert conflicts[0].message.startswith("JSON format with character-based length")
        assert not has_blocking_conflicts(conflicts)

    def test_simple_complexity_for_experts(self):
        conflicts = validate_enhancement_conflicts(
            AdvancedEnhancements(
                constraints=ConstraintRules(
                    audience=AudienceRule(True, "Expert radiologists"),
                    complexity=ComplexityRule(True, "simple"),
                )
            )
        )
        assert [c.type for c in conflicts] == ["warning"]
        assert "expert audience" in conflicts[0].message

    def test_single_turn_with_show_working(self):
        conflicts = validate_enhancement_conflicts(
            AdvancedEnhancements(
                reasoning=AdvancedReasoningScaffold(enabled=True, type="analysis", show_working=True)
            )
        )
        assert len(conflicts) == 1
        assert "Single-turn" in conflicts[0].message

    def test_iterative_flow_avoids_show_working_warning(self):
        conflicts = validate_enhancement_conflicts(
            AdvancedEnhancements(
                reasoning=AdvancedReasoningScaffold(enabled=True, type="analysis", show_working=True),
                conversation=AdvancedConversationFlow(type="iterative"),
            )
        )
        assert conflicts == []

    def test_errors_are_independent_and_blocking(self):
        conflicts = validate_enhancement_conflicts(
            AdvancedEnhancements(
                role=AdvancedRole(enabled=True, type="expert", expertise="  "),
                format_controller=FormatController(enabled=True, type="custom"),
                constraints=ConstraintRules(length=LengthRule(True, 500, 100)),
            )
        )
        assert [c.type for c in conflicts] == ["error", "error", "error"]
        assert all(c.suggestion for c in conflicts)
        assert has_blocking_conflicts(conflicts)

    def test_persona_without_description(self):
        conflicts = validate_enhancement_conflicts(
            AdvancedEnhancements(role=AdvancedRole(enabled=True, type="persona"))
        )
        assert conflicts[0].message == "Persona role type requires a persona description."

    def test_min_equal_to_max_is_fine(self):
        conflicts = validate_enhancement_conflicts(
            AdvancedEnhancements(constraints=ConstraintRules(length=LengthRule(True, 100, 100)))
        )
        assert conflicts == []

    def test_min_below_max_is_fine(self):
        conflicts = validate_enhancement_conflicts(
            AdvancedEnhancements(constraints=ConstraintRules(length=LengthRule(True, 50, 100)))
        )
        assert conflicts == []

    def test_min_above_max_is_an_error(self):
        conflicts = validate_enhancement_conflicts(
            AdvancedEnhancements(constraints=ConstraintRules(length=LengthRule(True, 100, 50)))
        )
        assert [c.type for c in conflicts] == ["error"]
        assert conflicts[0].message == "Minimum length cannot be greater than maximum length."

    def test_business_analysis_preset_warns_only(self, preset_registry):
        conflicts = validate_enhancement_conflicts(preset_registry.apply("business-analysis"))
        assert [c.type for c in conflicts] == ["warning"]
        assert not has_blocking_conflicts(conflicts)
