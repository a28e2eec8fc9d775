"""Schema for the SQLite knowledge store."""

import logging
import sqlite3

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

KNOWLEDGE_TABLE = "v2_knowledge"

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS {KNOWLEDGE_TABLE} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    language TEXT NOT NULL,
    category TEXT NOT NULL,
    title TEXT NOT NULL,
    body TEXT NOT NULL,
    sort INTEGER,
    show INTEGER NOT NULL DEFAULT 0,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL
);

-- Lookup key for upserts; intentionally not UNIQUE
CREATE INDEX IF NOT EXISTS idx_knowledge_key
    ON {KNOWLEDGE_TABLE}(language, title, category);
"""


def init_db(conn: sqlite3.Connection) -> None:
    """Create tables if needed and record the schema version."""
    conn.executescript(SCHEMA)

    cur = conn.execute("SELECT version FROM schema_version LIMIT 1")
    row = cur.fetchone()
    if row is None:
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
    elif row[0] != SCHEMA_VERSION:
        logger.info(f"Updating schema version {row[0]} -> {SCHEMA_VERSION}")
        conn.execute("UPDATE schema_version SET version = ?", (SCHEMA_VERSION,))

    conn.commit()
