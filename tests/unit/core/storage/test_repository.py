"""Tests for TemplateRepository and ExecutionHistory with in-memory SQLite."""

from __future__ import annotations

import pytest

from promptlab.core.composition.composer import generate_enhanced_prompt
from promptlab.core.composition.enhancements import EnhancementConfig, RoleEnhancement
from promptlab.core.composition.models import (
    BasePromptConfig,
    ExecutionResult,
    PromptTemplate,
    RoleBasedConfig,
    TokenUsage,
    VSConfig,
)
from promptlab.core.storage.repository import RepositoryError


def _make_template(**overrides) -> PromptTemplate:
    """Create a test template with sensible defaults."""
    defaults = dict(
        id="",
        name="Launch Email",
        description="Announcement email for product launches",
        config=BasePromptConfig(
            base_prompt="Write a launch email for {{product}}.",
            domain="Marketing & Sales",
            framework_config=RoleBasedConfig(role="a lifecycle marketer"),
        ),
        vs_enhancement=VSConfig(enabled=True, number_of_responses=3),
        created_at="",
        updated_at="",
        tags=["email", "launch"],
    )
    defaults.update(overrides)
    return PromptTemplate(**defaults)


def _make_result(result_id: str, model: str = "mock") -> ExecutionResult:
    prompt = generate_enhanced_prompt(BasePromptConfig(base_prompt="Say hello politely."), VSConfig())
    return ExecutionResult(
        id=result_id,
        prompt=prompt,
        response="Hello there!",
        model=model,
        timestamp="2026-03-01T09:30:00+00:00",
        tokens_used=TokenUsage(5, 2, 7),
    )


class TestTemplateSave:
    def test_save_assigns_id_and_timestamps(self, template_repository):
        template = _make_template()
        template_id = template_repository.save(template)
        assert template_id
        assert template.id == template_id
        assert template.created_at
        assert template.updated_at

    def test_get_roundtrip(self, template_repository):
        template = _make_template(
            enhancements=EnhancementConfig(
                role=RoleEnhancement(enabled=True, domain_specialty="email marketing")
            )
        )
        template_id = template_repository.save(template)
        loaded = template_repository.get(template_id)
        assert loaded == template

    def test_get_missing(self, template_repository):
        assert template_repository.get("nope") is None

    def test_save_existing_updates_in_place(self, template_repository):
        template = _make_template()
        template_id = template_repository.save(template)
        created = template.created_at

        template.name = "Launch Email v2"
        template_repository.save(template)

        assert template_repository.count() == 1
        loaded = template_repository.get(template_id)
        assert loaded.name == "Launch Email v2"
        assert loaded.created_at == created

    def test_explicit_id_is_kept(self, template_repository):
        assert template_repository.save(_make_template(id="tpl-42")) == "tpl-42"


class TestTemplateQueries:
    @pytest.fixture
    def populated(self, template_repository):
        template_repository.save(_make_template(id="a", name="Launch Email", updated_at="2026-01-01"))
        template_repository.save(
            _make_template(
                id="b",
                name="Bug Triage",
                description="Classify incoming bug reports",
                config=BasePromptConfig(base_prompt="Triage this bug.", domain="Code & Development"),
                tags=["engineering"],
                updated_at="2026-01-03",
            )
        )
        template_repository.save(
            _make_template(
                id="c",
                name="100% Honest Review",
                description="Candid product review",
                tags=["review_notes"],
                updated_at="2026-01-02",
            )
        )
        return template_repository

    def test_list_all_newest_first(self, populated):
        assert [t.id for t in populated.list_all()] == ["b", "c", "a"]

    def test_list_limit(self, populated):
        assert len(populated.list_all(limit=2)) == 2

    def test_list_by_domain(self, populated):
        assert [t.id for t in populated.list_by_domain("Code & Development")] == ["b"]

    def test_search_name_case_insensitive(self, populated):
        assert [t.id for t in populated.search("LAUNCH")] == ["a"]

    def test_search_description_and_tags(self, populated):
        assert [t.id for t in populated.search("bug reports")] == ["b"]
        assert [t.id for t in populated.search("engineering")] == ["b"]

    def test_search_escapes_wildcards(self, populated):
        assert [t.id for t in populated.search("100%")] == ["c"]
        assert [t.id for t in populated.search("review_")] == ["c"]
        assert populated.search("%%%") == []

    def test_blank_search_lists_everything(self, populated):
        assert len(populated.search("  ")) == 3

    def test_delete(self, populated):
        assert populated.delete("a") is True
        assert populated.delete("a") is False
        assert populated.count() == 2

    def test_corrupt_record_raises(self, populated, prompt_db):
        prompt_db.connection.execute(
            "UPDATE prompt_templates SET template_json = '{}' WHERE id = 'a'"
        )
        with pytest.raises(RepositoryError, match="Corrupt template record a"):
            populated.get("a")


class TestExecutionHistory:
    def test_append_and_list_in_order(self, execution_history):
        execution_history.append("s1", _make_result("r1"))
        execution_history.append("s1", _make_result("r2", model="claude"))
        execution_history.append("s2", _make_result("r3"))

        session = execution_history.list_session("s1")
        assert [r.id for r in session] == ["r1", "r2"]
        assert session[1].model == "claude"
        assert session[0].tokens_used == TokenUsage(5, 2, 7)
        assert session[0].prompt.final_prompt == "Say hello politely."

    def test_count(self, execution_history):
        execution_history.append("s1", _make_result("r1"))
        execution_history.append("s2", _make_result("r2"))
        assert execution_history.count() == 2
        assert execution_history.count("s1") == 1
        assert execution_history.count("missing") == 0

    def test_duplicate_id_rejected(self, execution_history):
        execution_history.append("s1", _make_result("r1"))
        with pytest.raises(RepositoryError, match="already recorded"):
            execution_history.append("s1", _make_result("r1"))
