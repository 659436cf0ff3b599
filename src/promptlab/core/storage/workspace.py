"""Builder workspace: drafts, preferences and usage metrics on a key-value store."""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any

from promptlab.core.composition.models import BasePromptConfig, ExecutionResult, VSConfig
from promptlab.core.export.serialization import (
    base_config_from_dict,
    base_config_to_dict,
    camel_case,
    from_wire,
    template_from_dict,
    template_to_dict,
    to_wire,
    vs_config_from_dict,
    vs_config_to_dict,
)
from promptlab.core.storage.kv import KeyValueStore
from promptlab.core.storage.repository import TemplateRepository

logger = logging.getLogger(__name__)

DRAFT_KEY = "promptBuilder_draft"
PREFERENCES_KEY = "promptBuilder_preferences"
USAGE_KEY = "promptBuilder_usage"


@dataclass
class UserPreferences:
    default_domain: str | None = None
    default_framework: str | None = None
    auto_save_drafts: bool = True
    show_vs_warnings: bool = True


@dataclass
class UsageMetrics:
    total_executions: int = 0
    total_tokens_used: int = 0
    executions_by_model: dict[str, int] = field(default_factory=dict)
    last_execution_date: str | None = None


@dataclass
class DraftConfiguration:
    id: str
    base_config: BasePromptConfig
    vs_enhancement: VSConfig
    saved_at: str


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class BuilderWorkspace:
    """Per-user builder state.

    When a template repository is attached, backups include saved templates.
    """

    def __init__(self, store: KeyValueStore, templates: TemplateRepository | None = None) -> None:
        self._store = store
        self._templates = templates

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    def save_draft(self, base_config: BasePromptConfig, vs: VSConfig) -> DraftConfiguration:
        draft = DraftConfiguration(
            id=str(uuid.uuid4()),
            base_config=base_config,
            vs_enhancement=vs,
            saved_at=_now_iso(),
        )
        self._store.set(
            DRAFT_KEY,
            {
                "id": draft.id,
                "baseConfig": base_config_to_dict(base_config),
                "vsEnhancement": vs_config_to_dict(vs),
                "savedAt": draft.saved_at,
            },
        )
        return draft

    def get_draft(self) -> DraftConfiguration | None:
        data = self._store.get(DRAFT_KEY)
        if not data:
            return None
        try:
            return DraftConfiguration(
                id=data["id"],
                base_config=base_config_from_dict(data["baseConfig"]),
                vs_enhancement=vs_config_from_dict(data.get("vsEnhancement")),
                saved_at=data["savedAt"],
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Discarding unreadable draft: %s", exc)
            return None

    def clear_draft(self) -> None:
        self._store.delete(DRAFT_KEY)

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def get_preferences(self) -> UserPreferences:
        return from_wire(UserPreferences, self._store.get(PREFERENCES_KEY))

    def update_preferences(self, **changes: Any) -> UserPreferences:
        """Merge ``changes`` into the stored preferences.

        Raises:
            ValueError: For an unknown preference name.
        """
        known = {f.name for f in fields(UserPreferences)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown preferences: {', '.join(sorted(unknown))}")
        current = to_wire(self.get_preferences())
        current.update({camel_case(k): v for k, v in changes.items()})
        self._store.set(PREFERENCES_KEY, current)
        return from_wire(UserPreferences, current)

    # ------------------------------------------------------------------
    # Usage metrics
    # ------------------------------------------------------------------

    def get_usage_metrics(self) -> UsageMetrics:
        return from_wire(UsageMetrics, self._store.get(USAGE_KEY))

    def track_execution(self, result: ExecutionResult) -> UsageMetrics:
        metrics = self.get_usage_metrics()
        metrics.total_executions += 1
        metrics.last_execution_date = result.timestamp
        if result.tokens_used:
            metrics.total_tokens_used += result.tokens_used.total
        metrics.executions_by_model[result.model] = metrics.executions_by_model.get(result.model, 0) + 1
        self._store.set(USAGE_KEY, to_wire(metrics))
        return metrics

    def reset_usage_metrics(self) -> None:
        self._store.set(USAGE_KEY, to_wire(UsageMetrics()))

    # ------------------------------------------------------------------
    # Backup
    # ------------------------------------------------------------------

    def export_all(self) -> str:
        templates = (
            [template_to_dict(t) for t in self._templates.list_all(limit=10_000)]
            if self._templates is not None
            else []
        )
        return json.dumps(
            {
                "templates": templates,
                "draft": self._store.get(DRAFT_KEY),
                "preferences": to_wire(self.get_preferences()),
                "usage": to_wire(self.get_usage_metrics()),
                "exportedAt": _now_iso(),
            },
            indent=2,
        )

    def import_all(self, json_string: str) -> bool:
        """Restore a backup written by :meth:`export_all`; False if it is unreadable."""
        try:
            data = json.loads(json_string)
            if not isinstance(data, dict):
                raise ValueError("backup must be a JSON object")
            templates = [template_from_dict(t) for t in data.get("templates") or []]
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Failed to import backup: %s", exc)
            return False

        if templates and self._templates is not None:
            for template in templates:
                self._templates.save(template)
        if data.get("draft"):
            self._store.set(DRAFT_KEY, data["draft"])
        if data.get("preferences"):
            self._store.set(PREFERENCES_KEY, data["preferences"])
        if data.get("usage"):
            self._store.set(USAGE_KEY, data["usage"])
        logger.info("Imported backup (%d templates)", len(templates))
        return True
