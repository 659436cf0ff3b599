"""SQLite storage for saved templates, execution history and workspace state."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2

# ---------------------------------------------------------------------------
# Schema DDL
# ---------------------------------------------------------------------------

_SCHEMA_V1 = """
-- Saved prompt templates; the full template document is kept as JSON
CREATE TABLE IF NOT EXISTS prompt_templates (
    id            TEXT PRIMARY KEY,
    name          TEXT NOT NULL,
    description   TEXT NOT NULL DEFAULT '',
    domain        TEXT NOT NULL DEFAULT '',
    framework     TEXT NOT NULL DEFAULT '',
    tags_text     TEXT NOT NULL DEFAULT '',
    template_json TEXT NOT NULL,
    created_at    TEXT NOT NULL,
    updated_at    TEXT NOT NULL
);

-- Append-only execution history, grouped by builder session
CREATE TABLE IF NOT EXISTS execution_history (
    id            TEXT PRIMARY KEY,
    session_id    TEXT NOT NULL,
    model         TEXT NOT NULL,
    timestamp     TEXT NOT NULL,
    total_tokens  INTEGER,
    result_json   TEXT NOT NULL,
    created_at    TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_templates_domain   ON prompt_templates(domain);
CREATE INDEX IF NOT EXISTS idx_templates_updated  ON prompt_templates(updated_at);
CREATE INDEX IF NOT EXISTS idx_history_session    ON execution_history(session_id);
"""

# ---------------------------------------------------------------------------
# V2: key-value table backing the builder workspace
# ---------------------------------------------------------------------------

_SCHEMA_V2 = """
CREATE TABLE IF NOT EXISTS kv_store (
    key        TEXT PRIMARY KEY,
    value_json TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

_MIGRATIONS: tuple[tuple[int, str, str], ...] = (
    (2, _SCHEMA_V2, "kv_store table"),
)


class DatabaseError(Exception):
    """Raised when the prompt database cannot be opened or used."""


class PromptDatabase:
    """Owns the single SQLite connection shared by the repositories.

    ``":memory:"`` gives a throwaway database, which is what the tests use.

    Usage::

        with PromptDatabase("~/.promptlab/promptlab.db") as db:
            TemplateRepository(db).list_all()
    """

    def __init__(self, db_path: str = ":memory:") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """The open connection.

        Raises:
            DatabaseError: Before :meth:`initialize` or after :meth:`close`.
        """
        if self._conn is None:
            raise DatabaseError(f"Prompt database {self._db_path!r} is not open")
        return self._conn

    def initialize(self) -> None:
        """Open the connection and bring the schema up to date.

        Parent directories of a file path are created. Calling it on an open
        database does nothing.
        """
        if self._conn is not None:
            return

        try:
            if self._db_path == ":memory:":
                conn = sqlite3.connect(":memory:")
            else:
                db_file = Path(self._db_path).expanduser()
                db_file.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(str(db_file))
        except (OSError, sqlite3.Error) as exc:
            raise DatabaseError(f"Cannot open database {self._db_path!r}: {exc}") from exc

        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        self._conn = conn
        self._migrate()
        logger.info("Prompt database ready: %s (schema v%d)", self._db_path, SCHEMA_VERSION)

    def _migrate(self) -> None:
        conn = self.connection
        conn.executescript(_SCHEMA_V1)
        current = self.get_schema_version()

        for version, script, label in _MIGRATIONS:
            if current < version:
                conn.executescript(script)
                logger.info("Applied schema migration V%d: %s", version, label)

        if current < SCHEMA_VERSION:
            conn.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
            conn.commit()
            logger.info("Schema version %d -> %d", current, SCHEMA_VERSION)

    def get_schema_version(self) -> int:
        row = self.connection.execute("SELECT MAX(version) FROM schema_version").fetchone()
        return row[0] or 0

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info("Prompt database closed: %s", self._db_path)

    def __enter__(self) -> PromptDatabase:
        self.initialize()
        return self

    def __exit__(self, *args) -> None:
        self.close()
