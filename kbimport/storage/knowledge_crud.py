"""Knowledge record CRUD operations used by SQLiteKnowledgeStore.

Functions take an open connection and leave commit/rollback to the caller's
context manager.
"""

import logging
import sqlite3
from typing import Callable, List, Optional

from .base import KnowledgeRecord
from .schema import KNOWLEDGE_TABLE

logger = logging.getLogger(__name__)

_COLUMNS = "id, language, title, category, body, show, sort, created_at, updated_at"


def row_to_record(row: sqlite3.Row) -> KnowledgeRecord:
    return KnowledgeRecord(
        id=row["id"],
        language=row["language"],
        title=row["title"],
        category=row["category"],
        body=row["body"],
        show=bool(row["show"]),
        sort=row["sort"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def find_knowledge_id(
    conn: sqlite3.Connection, language: str, title: str, category: str
) -> Optional[int]:
    row = conn.execute(
        f"SELECT id FROM {KNOWLEDGE_TABLE} "
        "WHERE language = ? AND title = ? AND category = ? ORDER BY id LIMIT 1",
        (language, title, category),
    ).fetchone()
    return row["id"] if row else None


def upsert_knowledge(
    conn: sqlite3.Connection,
    record: KnowledgeRecord,
    now_fn: Callable[[], int],
) -> int:
    """Update the first row with the record's key, or insert one.

    Only body, show, sort and updated_at change on update.
    """
    now = now_fn()
    existing_id = find_knowledge_id(conn, record.language, record.title, record.category)

    if existing_id is not None:
        conn.execute(
            f"UPDATE {KNOWLEDGE_TABLE} SET body = ?, show = ?, sort = ?, updated_at = ? "
            "WHERE id = ?",
            (record.body, 1 if record.show else 0, record.sort, now, existing_id),
        )
        record.id = existing_id
        record.updated_at = now
        return existing_id

    cursor = conn.execute(
        f"""
        INSERT INTO {KNOWLEDGE_TABLE}
        (language, title, category, body, show, sort, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
    """,
        (
            record.language,
            record.title,
            record.category,
            record.body,
            1 if record.show else 0,
            record.sort,
            now,
            now,
        ),
    )
    record.id = cursor.lastrowid
    record.created_at = now
    record.updated_at = now
    return record.id


def get_knowledge(
    conn: sqlite3.Connection, language: str, title: str, category: str
) -> Optional[KnowledgeRecord]:
    row = conn.execute(
        f"SELECT {_COLUMNS} FROM {KNOWLEDGE_TABLE} "
        "WHERE language = ? AND title = ? AND category = ? ORDER BY id LIMIT 1",
        (language, title, category),
    ).fetchone()
    return row_to_record(row) if row else None


def list_knowledge(conn: sqlite3.Connection, language: Optional[str] = None) -> List[KnowledgeRecord]:
    if language is None:
        rows = conn.execute(f"SELECT {_COLUMNS} FROM {KNOWLEDGE_TABLE} ORDER BY id").fetchall()
    else:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM {KNOWLEDGE_TABLE} WHERE language = ? ORDER BY id",
            (language,),
        ).fetchall()
    return [row_to_record(row) for row in rows]


def count_with_marker(conn: sqlite3.Connection, marker: str) -> int:
    """Count rows whose body contains ``marker`` (case-sensitive substring)."""
    row = conn.execute(
        f"SELECT COUNT(*) FROM {KNOWLEDGE_TABLE} WHERE instr(body, ?) > 0", (marker,)
    ).fetchone()
    return row[0]


def delete_with_marker(conn: sqlite3.Connection, marker: str) -> int:
    cursor = conn.execute(
        f"DELETE FROM {KNOWLEDGE_TABLE} WHERE instr(body, ?) > 0", (marker,)
    )
    return cursor.rowcount
