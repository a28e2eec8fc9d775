"""Storage protocol and record types for kbimport.

The knowledge store is the host application's table of knowledge
articles. ``SQLiteKnowledgeStore`` is the bundled implementation; anything
satisfying ``KnowledgeStore`` can be passed to the importer instead.
"""

import time
from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable


def epoch_now() -> int:
    """Current time as integer unix seconds (the store's timestamp format)."""
    return int(time.time())


@dataclass
class KnowledgeRecord:
    """One knowledge article.

    Identity for upserts is (language, title, category).
    """

    language: str
    title: str
    category: str
    body: str
    show: bool = True
    sort: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None

    @property
    def key(self) -> tuple:
        return (self.language, self.title, self.category)


@runtime_checkable
class KnowledgeStore(Protocol):
    """Narrow interface the importer needs from the knowledge store."""

    def upsert_knowledge(self, record: KnowledgeRecord) -> int:
        """Update the row matching the record's key or insert a new one. Returns the row id."""
        ...

    def get_knowledge(self, language: str, title: str, category: str) -> Optional[KnowledgeRecord]:
        ...

    def list_knowledge(self, language: Optional[str] = None) -> List[KnowledgeRecord]:
        ...

    def count_with_marker(self, marker: str) -> int:
        ...

    def delete_with_marker(self, marker: str) -> int:
        """Delete every row whose body contains ``marker``. Returns the count."""
        ...
