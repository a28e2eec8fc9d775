"""
Pytest fixtures and test configuration for kbimport tests.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import pytest

from kbimport.config import PUBLIC_URL_PREFIX, ImportSettings
from kbimport.core import KnowledgeImporter
from kbimport.storage import AssetStorage, SQLiteKnowledgeStore

# Smallest valid PNG (1x1 transparent pixel)
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5b0000000049454e44ae426082"
)

SCENARIO_SUMMARY = {
    "en": [
        {
            "title": "Setup",
            "subItems": [{"title": "Install", "path": "en/install.md"}],
        }
    ]
}


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point the data directory at a temp dir and clear kbimport env vars."""
    monkeypatch.setenv("KBIMPORT_DATA_DIR", str(tmp_path / "home"))
    for var in (
        "KBIMPORT_DB_PATH",
        "KBIMPORT_STORAGE_DIR",
        "KBIMPORT_DEFAULT_LANGUAGE",
        "KBIMPORT_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)

    yield

    logger = logging.getLogger("kbimport")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings(tmp_path):
    return ImportSettings(db_path=tmp_path / "kb.db", storage_dir=tmp_path / "storage")


@pytest.fixture
def store(settings):
    return SQLiteKnowledgeStore(settings.db_path)


@pytest.fixture
def assets(settings):
    return AssetStorage(settings.public_root, url_prefix=PUBLIC_URL_PREFIX)


@pytest.fixture
def importer(store, assets, settings):
    return KnowledgeImporter(store, assets, settings)


def write_tutorial(
    root: Path,
    summary: Any,
    files: Optional[Dict[str, Any]] = None,
) -> Path:
    """Create a tutorial project under ``root``.

    ``summary`` is written as JSON unless it is already a string. ``files``
    maps root-relative paths to text or bytes.
    """
    root.mkdir(parents=True, exist_ok=True)
    text = summary if isinstance(summary, str) else json.dumps(summary)
    (root / "SUMMARY.md").write_text(text, encoding="utf-8")

    for rel, content in (files or {}).items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def tutorial(tmp_path):
    """The install-guide project: one page referencing one local image."""
    return write_tutorial(
        tmp_path / "ppanel-tutorial",
        SCENARIO_SUMMARY,
        {
            "en/install.md": "# Install\n\n![logo](../img/logo.png)\n",
            "img/logo.png": PNG_BYTES,
        },
    )


@pytest.fixture
def make_tutorial(tmp_path):
    """Factory fixture: ``make_tutorial(summary, files, name=...)``."""

    def _make(summary: Any, files: Optional[Dict[str, Any]] = None, name: str = "tutorial"):
        return write_tutorial(tmp_path / name, summary, files)

    return _make
