"""Shared test fixtures for PromptLab tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "mock")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setenv("PRESET_DIR", "")
    monkeypatch.setenv("RETRY_BASE_DELAY", "0")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from promptlab.core.composition.enhancements import (  # noqa: E402
    ConversationFlow,
    EnhancementConfig,
    FormatControl,
    LengthSpec,
    ReasoningScaffold,
    RoleEnhancement,
    SmartConstraints,
)
from promptlab.core.composition.models import (  # noqa: E402
    BasePromptConfig,
    RoleBasedConfig,
    VSConfig,
)
from promptlab.core.presets.loader import BUNDLED_PRESET_DIR, load_preset_directory  # noqa: E402
from promptlab.core.presets.registry import PresetRegistry  # noqa: E402


def make_base_config(**overrides) -> BasePromptConfig:
    """Create a base prompt config with sensible defaults."""
    defaults = dict(
        base_prompt="Write a product announcement for our new analytics dashboard.",
        domain="Marketing & Sales",
        target_outcome="",
        framework_config=None,
    )
    defaults.update(overrides)
    return BasePromptConfig(**defaults)


@pytest.fixture
def full_enhancements() -> EnhancementConfig:
    """Every builder enhancement enabled with non-empty settings."""
    return EnhancementConfig(
        role=RoleEnhancement(
            enabled=True,
            expertise_level="expert",
            domain_specialty="product marketing",
            experience_years=12,
            authority_level="authoritative",
        ),
        format_control=FormatControl(
            enabled=True,
            structure="bullet-points",
            length_spec=LengthSpec(type="word-count", target=200),
            style_guide="conversational",
        ),
        smart_constraints=SmartConstraints(
            enabled=True,
            positive_constraints=["a call to action"],
            negative_constraints=["pricing details"],
        ),
        reasoning=ReasoningScaffold(enabled=True, step_by_step=True, reasoning_style="practical"),
        conversation=ConversationFlow(enabled=True, clarification_protocols=True),
    )


@pytest.fixture
def base_config() -> BasePromptConfig:
    return make_base_config()


@pytest.fixture
def role_based_config() -> BasePromptConfig:
    return make_base_config(framework_config=RoleBasedConfig(role="a senior product marketer"))


@pytest.fixture
def vs_enabled() -> VSConfig:
    return VSConfig(enabled=True, number_of_responses=5, distribution_type="broad_spectrum")


@pytest.fixture
def preset_registry() -> PresetRegistry:
    """Registry loaded with the bundled preset definitions."""
    registry = PresetRegistry()
    load_preset_directory(BUNDLED_PRESET_DIR, registry)
    return registry


# ---------------------------------------------------------------------------
# In-memory storage fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def prompt_db():
    """Create an in-memory PromptDatabase for testing."""
    from promptlab.core.storage.database import PromptDatabase

    db = PromptDatabase(":memory:")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def template_repository(prompt_db):
    """Create a TemplateRepository backed by in-memory SQLite."""
    from promptlab.core.storage.repository import TemplateRepository

    return TemplateRepository(prompt_db)


@pytest.fixture
def execution_history(prompt_db):
    from promptlab.core.storage.repository import ExecutionHistory

    return ExecutionHistory(prompt_db)


@pytest.fixture
def workspace(prompt_db, template_repository):
    """Create a BuilderWorkspace on the SQLite key-value store."""
    from promptlab.core.storage.kv import SQLiteKeyValueStore
    from promptlab.core.storage.workspace import BuilderWorkspace

    return BuilderWorkspace(SQLiteKeyValueStore(prompt_db), template_repository)
