"""
kbimport CLI - Import a tutorial project into the knowledge base.

Usage:
    kbimport --path /path/to/ppanel-tutorial
    kbimport --rollback

Settings come from the environment:
    KBIMPORT_DATA_DIR          data directory (default ~/.kbimport)
    KBIMPORT_DB_PATH           knowledge store database
    KBIMPORT_STORAGE_DIR       host storage directory (images go to app/public/...)
    KBIMPORT_DEFAULT_LANGUAGE  language for outline entries without one (default en)
    KBIMPORT_LOG_LEVEL         log level (default INFO)
"""

import argparse
import logging
import sys
from typing import List, Optional

from kbimport.cli.commands import ExitCode, cmd_import, cmd_rollback
from kbimport.config import load_settings
from kbimport.core import KnowledgeImporter
from kbimport.logging_config import setup_kbimport_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kbimport",
        description="Import or rollback a ppanel-tutorial project in the knowledge base",
    )
    parser.add_argument("--path", help="Path to the ppanel-tutorial project", default=None)
    parser.add_argument(
        "--rollback", action="store_true", help="Rollback imported knowledge"
    )
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the requested command and return its exit code."""
    args = build_parser().parse_args(argv)

    settings = load_settings()
    setup_kbimport_logging(level=settings.log_level)
    importer = KnowledgeImporter.from_settings(settings)

    try:
        if args.rollback:
            return cmd_rollback(args, importer)
        return cmd_import(args, importer)
    except Exception as e:
        logger.error(f"Command failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.FAILURE


def main():
    sys.exit(int(run()))


if __name__ == "__main__":
    main()
