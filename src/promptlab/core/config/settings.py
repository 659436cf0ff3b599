"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """PromptLab server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default. Binding elsewhere also requires the explicit guard
    # below since there is no auth layer.
    promptlab_host: str = "127.0.0.1"
    promptlab_port: int = 8010
    promptlab_log_level: str = "info"
    promptlab_allow_insecure_bind: bool = False

    # Prompt execution
    llm_provider: Literal["anthropic", "openai", "mock"] = "anthropic"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    default_max_tokens: int = 2000
    temperature: float = 0.7

    # Retry policy for transient provider failures (seconds)
    retry_max_attempts: int = 3
    retry_base_delay: float = 1.0
    retry_max_delay: float = 30.0

    # Storage
    db_path: str = "~/.promptlab/promptlab.db"

    # Presets (empty = bundled presets)
    preset_dir: str = ""


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
