"""PromptLab MCP Server: application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastmcp import FastMCP

from promptlab.core.config.settings import get_settings
from promptlab.core.llm.client import PromptExecutor
from promptlab.core.llm.provider import LLMProvider, create_provider
from promptlab.core.presets.loader import BUNDLED_PRESET_DIR, load_preset_directory
from promptlab.core.presets.registry import PresetRegistry
from promptlab.core.storage.database import DatabaseError, PromptDatabase
from promptlab.core.storage.kv import SQLiteKeyValueStore
from promptlab.core.storage.repository import ExecutionHistory, TemplateRepository
from promptlab.core.storage.workspace import BuilderWorkspace
from promptlab.domains.builder.prompts.builder_prompts import register_builder_prompts
from promptlab.domains.builder.resources.catalog import register_catalog_resources
from promptlab.domains.builder.tools.composition_tools import register_composition_tools
from promptlab.domains.builder.tools.execution_tools import register_execution_tools
from promptlab.domains.builder.tools.preset_tools import register_preset_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "PromptLab"
SERVER_VERSION = "0.1.0"


def create_app(
    *,
    provider_override: LLMProvider | None = None,
    database_override: PromptDatabase | None = None,
    preset_registry_override: PresetRegistry | None = None,
) -> FastMCP:
    """Create and configure the PromptLab MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Loads the enhancement presets
    3. Creates the LLM provider and prompt executor
    4. Initializes storage (templates, execution history, workspace)
    5. Registers all tools, resources, and prompts
    """
    settings = get_settings()

    # --- Server instance ---
    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Prompt composition server. Turns a base prompt, a framework and a set "
            "of enhancements (role, format, constraints, reasoning, conversation "
            "flow, verbalized sampling) into a final prompt and system prompt, "
            "validates configurations, and exports, saves and executes prompts."
        ),
    )

    # --- Presets ---
    if preset_registry_override is not None:
        presets = preset_registry_override
    else:
        presets = PresetRegistry()
        preset_dir = Path(settings.preset_dir).expanduser() if settings.preset_dir else BUNDLED_PRESET_DIR
        preset_count = load_preset_directory(preset_dir, presets)
        logger.info("Loaded %d presets from %s", preset_count, preset_dir)

    # --- LLM provider ---
    if provider_override is not None:
        provider = provider_override
        provider_name = type(provider).__name__
    else:
        if settings.llm_provider == "mock":
            provider_name, api_key, model = "mock", "", ""
        elif settings.llm_provider == "anthropic":
            api_key = settings.anthropic_api_key
            model = settings.anthropic_model
            provider_name = "anthropic" if api_key else "mock"
        elif settings.llm_provider == "openai":
            api_key = settings.openai_api_key
            model = settings.openai_model
            provider_name = "openai" if api_key else "mock"
        else:  # pragma: no cover
            raise ValueError(f"Unknown LLM provider: {settings.llm_provider!r}")

        if provider_name == "mock" and settings.llm_provider != "mock":
            logger.warning(
                "No API key configured for provider '%s'; falling back to mock provider",
                settings.llm_provider,
            )
        provider = create_provider(provider_name=provider_name, api_key=api_key, model=model)

    executor = PromptExecutor(
        provider,
        max_attempts=settings.retry_max_attempts,
        base_delay=settings.retry_base_delay,
        max_delay=settings.retry_max_delay,
        temperature=settings.temperature,
    )

    # --- Storage ---
    repository: TemplateRepository | None = None
    history: ExecutionHistory | None = None
    workspace: BuilderWorkspace | None = None
    database = database_override or PromptDatabase(settings.db_path)
    try:
        database.initialize()
        repository = TemplateRepository(database)
        history = ExecutionHistory(database)
        workspace = BuilderWorkspace(SQLiteKeyValueStore(database), repository)
        logger.info(
            "Prompt storage initialized: %s (schema v%d)",
            settings.db_path if database_override is None else "override",
            database.get_schema_version(),
        )
    except DatabaseError as exc:
        logger.error("Failed to initialize storage: %s", exc)
        logger.warning("Continuing without persistence; templates will not be stored")

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        status = {
            "status": "ok",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "presets_loaded": len(presets.all()),
            "llm_provider": provider_name,
            "storage_enabled": repository is not None,
        }
        if repository is not None:
            status["templates_stored"] = repository.count()
        return status

    register_composition_tools(server, presets, repository)
    register_preset_tools(server, presets)
    register_execution_tools(
        server,
        executor,
        presets,
        default_max_tokens=settings.default_max_tokens,
        history=history,
        workspace=workspace,
    )
    logger.info("Prompt composition tools registered")

    # --- Template library (requires storage) ---
    if repository is not None:
        from promptlab.domains.builder.tools.template_tools import register_template_tools

        register_template_tools(server, repository)
        logger.info("Template library tools registered")

    # --- Register resources ---
    register_catalog_resources(server, presets)

    # --- Register prompts ---
    register_builder_prompts(server)

    return server


# Module-level instance for FastMCP discovery (`fastmcp run src/promptlab/core/server/app.py:mcp`).
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
