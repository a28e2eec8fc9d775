"""Storage backends for kbimport."""

from .assets import AssetStorage
from .base import KnowledgeRecord, KnowledgeStore, epoch_now
from .sqlite import SQLiteKnowledgeStore

__all__ = [
    "AssetStorage",
    "KnowledgeRecord",
    "KnowledgeStore",
    "SQLiteKnowledgeStore",
    "epoch_now",
]
