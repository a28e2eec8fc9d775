"""SQLite knowledge store for kbimport.

Stands in for the host application's knowledge table. Each operation opens
its own connection, commits on success and rolls back on error.
"""

import contextlib
import logging
import sqlite3
from pathlib import Path
from typing import Callable, List, Optional

from kbimport.errors import StorageError

from . import knowledge_crud
from .base import KnowledgeRecord, epoch_now
from .schema import init_db

logger = logging.getLogger(__name__)


class SQLiteKnowledgeStore:
    """SQLite-backed ``KnowledgeStore``."""

    def __init__(self, db_path: Path, now_fn: Optional[Callable[[], int]] = None):
        self.db_path = Path(db_path).expanduser()
        self._now = now_fn or epoch_now
        self._initialized = False

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        """Create the schema on first use so constructing a store has no side effects."""
        if not self._initialized:
            init_db(conn)
            self._initialized = True

    def _get_conn(self) -> sqlite3.Connection:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create database directory {self.db_path.parent}", e) from e
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextlib.contextmanager
    def _connect(self):
        """Yield a connection; commit on success, roll back on error, always close.

        ``sqlite3.Error`` is re-raised as ``StorageError``.
        """
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open knowledge store {self.db_path}: {e}", e) from e
        try:
            self._ensure_schema(conn)
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            logger.debug(f"Transaction failed, rolling back: {e}")
            conn.rollback()
            raise StorageError(f"Knowledge store operation failed: {e}", e) from e
        except Exception as e:
            logger.debug(f"Transaction failed, rolling back: {e}")
            conn.rollback()
            raise
        finally:
            conn.close()

    def upsert_knowledge(self, record: KnowledgeRecord) -> int:
        with self._connect() as conn:
            return knowledge_crud.upsert_knowledge(conn, record, self._now)

    def get_knowledge(self, language: str, title: str, category: str) -> Optional[KnowledgeRecord]:
        with self._connect() as conn:
            return knowledge_crud.get_knowledge(conn, language, title, category)

    def list_knowledge(self, language: Optional[str] = None) -> List[KnowledgeRecord]:
        with self._connect() as conn:
            return knowledge_crud.list_knowledge(conn, language)

    def count_with_marker(self, marker: str) -> int:
        with self._connect() as conn:
            return knowledge_crud.count_with_marker(conn, marker)

    def delete_with_marker(self, marker: str) -> int:
        with self._connect() as conn:
            deleted = knowledge_crud.delete_with_marker(conn, marker)
        logger.info(f"Deleted {deleted} knowledge records carrying marker")
        return deleted
