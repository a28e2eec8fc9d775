"""Error types for kbimport.

Configuration and parse errors abort a run before anything is written.
Storage errors are raised per operation; the importer decides whether a
failure skips one item or stops the batch.
"""

from typing import Optional


class KBImportError(Exception):
    """Base exception for all kbimport errors."""

    pass


class ConfigurationError(KBImportError):
    """Invalid import root or missing table of contents."""

    pass


class InvalidRootError(ConfigurationError):
    """The import root was not given or is not a directory."""

    pass


class SummaryNotFoundError(ConfigurationError):
    """The import root has no table-of-contents file."""

    pass


class SummaryParseError(KBImportError):
    """The table of contents could not be read."""

    pass


class StorageError(KBImportError):
    """A knowledge store or asset storage operation failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
