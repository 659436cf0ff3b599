"""Template repository and execution history on top of PromptDatabase.

Whole records are stored as camelCase JSON documents, the same shape the
export codec writes. A few columns are denormalized for filtering and search.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone

from promptlab.core.composition.models import ExecutionResult, PromptTemplate
from promptlab.core.export.serialization import (
    execution_result_from_dict,
    execution_result_to_dict,
    template_from_dict,
    template_to_dict,
)
from promptlab.core.storage.database import PromptDatabase

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when repository operations fail."""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _like_pattern(query: str) -> str:
    escaped = query.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class TemplateRepository:
    """CRUD repository for saved prompt templates.

    Usage::

        db = PromptDatabase(":memory:")
        db.initialize()
        repo = TemplateRepository(db)

        template_id = repo.save(template)
        matches = repo.search("onboarding")
    """

    def __init__(self, database: PromptDatabase) -> None:
        self._db = database

    def save(self, template: PromptTemplate) -> str:
        """Insert or update a template.

        An empty ``template.id`` gets a fresh UUID and empty timestamps are
        filled in; ``updated_at`` is always refreshed on update.

        Returns:
            The template ID.
        """
        now = _now_iso()
        if not template.id:
            template.id = str(uuid.uuid4())
        if not template.created_at:
            template.created_at = now
        existing = self.get(template.id)
        if existing is not None or not template.updated_at:
            template.updated_at = now

        conn = self._db.connection
        try:
            conn.execute(
                """INSERT INTO prompt_templates (
                    id, name, description, domain, framework, tags_text,
                    template_json, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    description = excluded.description,
                    domain = excluded.domain,
                    framework = excluded.framework,
                    tags_text = excluded.tags_text,
                    template_json = excluded.template_json,
                    updated_at = excluded.updated_at""",
                (
                    template.id,
                    template.name,
                    template.description,
                    template.config.domain,
                    template.config.framework or "",
                    " ".join(template.tags),
                    json.dumps(template_to_dict(template), separators=(",", ":")),
                    template.created_at,
                    template.updated_at,
                ),
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to save template {template.id}: {exc}") from exc

        logger.info("Saved template %s (%s)", template.id, template.name)
        return template.id

    def _row_to_template(self, row: sqlite3.Row) -> PromptTemplate:
        try:
            return template_from_dict(json.loads(row["template_json"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise RepositoryError(f"Corrupt template record {row['id']}: {exc}") from exc

    def get(self, template_id: str) -> PromptTemplate | None:
        row = self._db.connection.execute(
            "SELECT id, template_json FROM prompt_templates WHERE id = ?", (template_id,)
        ).fetchone()
        return self._row_to_template(row) if row else None

    def list_all(self, *, limit: int = 100) -> list[PromptTemplate]:
        """All templates, most recently updated first."""
        rows = self._db.connection.execute(
            "SELECT id, template_json FROM prompt_templates ORDER BY updated_at DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return [self._row_to_template(row) for row in rows]

    def list_by_domain(self, domain: str, *, limit: int = 100) -> list[PromptTemplate]:
        rows = self._db.connection.execute(
            """SELECT id, template_json FROM prompt_templates WHERE domain = ?
               ORDER BY updated_at DESC LIMIT ?""",
            (domain, limit),
        ).fetchall()
        return [self._row_to_template(row) for row in rows]

    def search(self, query: str, *, limit: int = 50) -> list[PromptTemplate]:
        """Case-insensitive substring match over name, description and tags."""
        if not query.strip():
            return self.list_all(limit=limit)
        pattern = _like_pattern(query.strip())
        rows = self._db.connection.execute(
            """SELECT id, template_json FROM prompt_templates
               WHERE lower(name) LIKE ? ESCAPE '\\'
                  OR lower(description) LIKE ? ESCAPE '\\'
                  OR lower(tags_text) LIKE ? ESCAPE '\\'
               ORDER BY updated_at DESC LIMIT ?""",
            (pattern, pattern, pattern, limit),
        ).fetchall()
        return [self._row_to_template(row) for row in rows]

    def delete(self, template_id: str) -> bool:
        """Returns True if a template was found and deleted."""
        conn = self._db.connection
        cursor = conn.execute("DELETE FROM prompt_templates WHERE id = ?", (template_id,))
        conn.commit()
        if cursor.rowcount:
            logger.info("Deleted template %s", template_id)
        return cursor.rowcount > 0

    def count(self) -> int:
        row = self._db.connection.execute("SELECT COUNT(*) FROM prompt_templates").fetchone()
        return row[0]


class ExecutionHistory:
    """Append-only log of prompt executions, grouped by session."""

    def __init__(self, database: PromptDatabase) -> None:
        self._db = database

    def append(self, session_id: str, result: ExecutionResult) -> None:
        conn = self._db.connection
        try:
            conn.execute(
                """INSERT INTO execution_history
                   (id, session_id, model, timestamp, total_tokens, result_json)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    result.id,
                    session_id,
                    result.model,
                    result.timestamp,
                    result.tokens_used.total if result.tokens_used else None,
                    json.dumps(execution_result_to_dict(result), separators=(",", ":")),
                ),
            )
            conn.commit()
        except sqlite3.IntegrityError as exc:
            raise RepositoryError(f"Execution {result.id} already recorded") from exc
        logger.info("Recorded execution %s (session=%s, model=%s)", result.id, session_id, result.model)

    def list_session(self, session_id: str, *, limit: int = 100) -> list[ExecutionResult]:
        """Executions of one session in the order they were appended."""
        rows = self._db.connection.execute(
            """SELECT result_json FROM execution_history WHERE session_id = ?
               ORDER BY rowid ASC LIMIT ?""",
            (session_id, limit),
        ).fetchall()
        return [execution_result_from_dict(json.loads(row[0])) for row in rows]

    def count(self, session_id: str | None = None) -> int:
        if session_id is None:
            row = self._db.connection.execute("SELECT COUNT(*) FROM execution_history").fetchone()
        else:
            row = self._db.connection.execute(
                "SELECT COUNT(*) FROM execution_history WHERE session_id = ?", (session_id,)
            ).fetchone()
        return row[0]
