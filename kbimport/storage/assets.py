"""Public-disk asset storage.

A small stand-in for the host's file storage: files live under ``root`` and
are served at ``url_prefix`` + their path relative to ``root``.
"""

import logging
import shutil
from pathlib import Path

from kbimport.errors import StorageError

logger = logging.getLogger(__name__)


class AssetStorage:
    def __init__(self, root: Path, url_prefix: str = "/storage"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def path(self, rel: str) -> Path:
        """Absolute filesystem path for a disk-relative path."""
        return self.root.joinpath(*[part for part in rel.split("/") if part])

    def url(self, rel: str) -> str:
        """Public URL for a disk-relative path."""
        return f"{self.url_prefix}/{rel.strip('/')}"

    def exists(self, rel: str) -> bool:
        return self.path(rel).exists()

    def ensure_directory(self, rel: str) -> Path:
        directory = self.path(rel)
        if not directory.is_dir():
            try:
                directory.mkdir(mode=0o755, parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create directory {directory}: {e}", e) from e
        return directory

    def copy_file(self, source: Path, rel_dir: str) -> str:
        """Copy ``source`` into ``rel_dir`` keeping its filename.

        An existing file with the same name is overwritten. Returns the
        disk-relative path of the copy.
        """
        directory = self.ensure_directory(rel_dir)
        target = directory / source.name
        try:
            shutil.copyfile(source, target)
        except OSError as e:
            raise StorageError(f"Cannot copy {source} to {target}: {e}", e) from e
        return f"{rel_dir.strip('/')}/{source.name}"

    def delete_directory(self, rel: str) -> bool:
        """Recursively delete a directory. Returns False if it did not exist."""
        directory = self.path(rel)
        if not directory.is_dir():
            return False
        try:
            shutil.rmtree(directory)
        except OSError as e:
            raise StorageError(f"Cannot delete {directory}: {e}", e) from e
        logger.info(f"Deleted directory {directory}")
        return True
