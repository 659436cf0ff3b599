"""Key-value stores holding JSON-compatible values."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol, runtime_checkable

from promptlab.core.storage.database import PromptDatabase

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal persistence interface for workspace state."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store; values are JSON round-tripped so callers never share state."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SQLiteKeyValueStore:
    """Store backed by the ``kv_store`` table of a PromptDatabase."""

    def __init__(self, database: PromptDatabase) -> None:
        self._db = database

    def get(self, key: str) -> Any | None:
        row = self._db.connection.execute(
            "SELECT value_json FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable value for key %s", key)
            return None

    def set(self, key: str, value: Any) -> None:
        conn = self._db.connection
        conn.execute(
            """INSERT INTO kv_store (key, value_json, updated_at) VALUES (?, ?, datetime('now'))
               ON CONFLICT(key) DO UPDATE SET
                   value_json = excluded.value_json,
                   updated_at = excluded.updated_at""",
            (key, json.dumps(value)),
        )
        conn.commit()

    def delete(self, key: str) -> None:
        conn = self._db.connection
        conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        conn.commit()
