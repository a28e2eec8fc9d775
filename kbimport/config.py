"""Configuration for kbimport.

Fixed constants describe the import source and where its assets live on the
host's public disk. Per-installation settings come from environment
variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from kbimport.utils import get_kbimport_home

# Appended to every imported body; rollback deletes records containing it.
SOURCE_TAG = "<!-- source:ppanel-tutorial -->"

# Public disk, relative to the host storage directory.
PUBLIC_DISK = "app/public"

# Managed subtree on the public disk. Removed wholesale on rollback.
MANAGED_SUBDIR = "knowledge/ppanel-tutorial"

# URL prefix under which the public disk is served.
PUBLIC_URL_PREFIX = "/storage"

DEFAULT_SUMMARY_FILENAME = "SUMMARY.md"
DEFAULT_LANGUAGE = "en"
DEFAULT_CATEGORY = "General"
DEFAULT_TITLE = "Untitled"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class ImportSettings:
    """Settings for one import or rollback run."""

    db_path: Path
    storage_dir: Path
    summary_filename: str = DEFAULT_SUMMARY_FILENAME
    default_language: str = DEFAULT_LANGUAGE
    default_category: str = DEFAULT_CATEGORY
    default_title: str = DEFAULT_TITLE
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def public_root(self) -> Path:
        return self.storage_dir / PUBLIC_DISK

    @property
    def managed_dir(self) -> Path:
        """Absolute path of the managed storage subtree."""
        return self.public_root / MANAGED_SUBDIR


def load_settings(home: Optional[Path] = None) -> ImportSettings:
    """Build settings from environment variables.

    Reads KBIMPORT_DB_PATH, KBIMPORT_STORAGE_DIR, KBIMPORT_DEFAULT_LANGUAGE
    and KBIMPORT_LOG_LEVEL. Paths default to locations under the kbimport
    data directory.
    """
    home = home or get_kbimport_home()

    db_env = os.environ.get("KBIMPORT_DB_PATH")
    storage_env = os.environ.get("KBIMPORT_STORAGE_DIR")

    return ImportSettings(
        db_path=Path(db_env).expanduser() if db_env else home / "knowledge.db",
        storage_dir=Path(storage_env).expanduser() if storage_env else home / "storage",
        default_language=os.environ.get("KBIMPORT_DEFAULT_LANGUAGE") or DEFAULT_LANGUAGE,
        log_level=os.environ.get("KBIMPORT_LOG_LEVEL") or DEFAULT_LOG_LEVEL,
    )
