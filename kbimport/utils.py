"""Shared helpers for kbimport."""

import os
from pathlib import Path


def get_kbimport_home() -> Path:
    """Return the kbimport data directory, creating it if needed.

    Resolution order:
    1. KBIMPORT_DATA_DIR environment variable
    2. ~/.kbimport
    """
    env_dir = os.environ.get("KBIMPORT_DATA_DIR")
    home = Path(env_dir).expanduser() if env_dir else Path.home() / ".kbimport"
    home.mkdir(parents=True, exist_ok=True)
    return home
