"""Import and rollback commands.

Each handler prints its own messages and returns an exit code; ``main``
passes it to ``sys.exit``.
"""

import sys
from enum import IntEnum
from typing import TYPE_CHECKING

from kbimport.errors import (
    InvalidRootError,
    StorageError,
    SummaryNotFoundError,
    SummaryParseError,
)

if TYPE_CHECKING:
    import argparse

    from kbimport.core import KnowledgeImporter


class ExitCode(IntEnum):
    OK = 0
    FAILURE = 1
    INVALID_PATH = 2
    SUMMARY_MISSING = 3
    PARSE_FAILED = 4


def _error(message: str) -> None:
    print(message, file=sys.stderr)


def cmd_import(args: "argparse.Namespace", importer: "KnowledgeImporter") -> int:
    """Import the tutorial project at ``--path``."""
    path = getattr(args, "path", None)

    try:
        importer.run_import(path)
    except InvalidRootError as e:
        _error(str(e))
        return ExitCode.INVALID_PATH
    except SummaryNotFoundError as e:
        _error(str(e))
        return ExitCode.SUMMARY_MISSING
    except SummaryParseError as e:
        _error(f"Failed to parse {importer.settings.summary_filename}: {e}")
        return ExitCode.PARSE_FAILED
    except StorageError as e:
        _error(f"Import aborted: {e}")
        return ExitCode.FAILURE

    return ExitCode.OK


def cmd_rollback(args: "argparse.Namespace", importer: "KnowledgeImporter") -> int:
    """Remove everything a previous import created."""
    try:
        importer.rollback()
    except StorageError as e:
        _error(f"Rollback failed: {e}")
        return ExitCode.FAILURE
    return ExitCode.OK
