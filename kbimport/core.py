"""Import and rollback of a tutorial project into the knowledge base.

``KnowledgeImporter`` ties the pieces together:

- ``run_import(root)`` validates the project root, parses its table of
  contents and imports every entry.
- ``import_item(...)`` imports one file: read, rewrite images, append the
  provenance marker, upsert.
- ``rollback()`` deletes every record carrying the provenance marker and
  the managed image directory.

Messages meant for the operator go through ``echo`` and ``warn``; both
default to printing.
"""

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from kbimport.config import (
    MANAGED_SUBDIR,
    PUBLIC_URL_PREFIX,
    SOURCE_TAG,
    ImportSettings,
)
from kbimport.errors import (
    InvalidRootError,
    StorageError,
    SummaryNotFoundError,
    SummaryParseError,
)
from kbimport.images import ImageRewriter
from kbimport.logging_config import log_import_event
from kbimport.paths import resolve
from kbimport.storage import (
    AssetStorage,
    KnowledgeRecord,
    KnowledgeStore,
    SQLiteKnowledgeStore,
)
from kbimport.summary import (
    CategoryContainer,
    CategoryLeaf,
    LeafEntry,
    ParsedSummary,
    parse_summary,
)

logger = logging.getLogger(__name__)

STORAGE_LOCATION_MESSAGE = "public/storage/knowledge/ppanel-tutorial"


def _print_warning(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr)


class ItemOutcome(Enum):
    IMPORTED = "imported"
    NO_PATH = "no_path"
    MISSING = "missing"
    FAILED = "failed"


@dataclass
class ImportReport:
    """Result of an import run.

    ``processed`` counts attempted items, including skipped and failed ones.
    """

    processed: int = 0
    imported: int = 0
    skipped: int = 0
    failed: int = 0
    warnings: List[str] = field(default_factory=list)

    def record(self, outcome: ItemOutcome) -> None:
        self.processed += 1
        if outcome is ItemOutcome.IMPORTED:
            self.imported += 1
        elif outcome is ItemOutcome.FAILED:
            self.failed += 1
        else:
            self.skipped += 1


@dataclass
class RollbackReport:
    deleted_records: int = 0
    storage_removed: bool = False


class KnowledgeImporter:
    """Imports a tutorial project into a knowledge store.

    Args:
        store: Knowledge store records are upserted into.
        assets: Public-disk storage for copied images.
        settings: Run settings (defaults, summary filename).
        echo: Receives informational messages.
        warn: Receives warnings (missing files, per-item failures).
    """

    def __init__(
        self,
        store: KnowledgeStore,
        assets: AssetStorage,
        settings: ImportSettings,
        echo: Callable[[str], None] = print,
        warn: Callable[[str], None] = _print_warning,
    ):
        self.store = store
        self.assets = assets
        self.settings = settings
        self.echo = echo
        self.warn = warn
        self.rewriter = ImageRewriter(assets)

    @classmethod
    def from_settings(cls, settings: ImportSettings, **kwargs) -> "KnowledgeImporter":
        store = SQLiteKnowledgeStore(settings.db_path)
        assets = AssetStorage(settings.public_root, url_prefix=PUBLIC_URL_PREFIX)
        return cls(store, assets, settings, **kwargs)

    # === Import ===

    def load_summary(self, root: Optional[Path]) -> ParsedSummary:
        """Validate ``root`` and parse its table of contents.

        Raises:
            InvalidRootError: ``root`` is missing or not a directory.
            SummaryNotFoundError: ``root`` has no table of contents.
            SummaryParseError: The table of contents cannot be read as UTF-8 text.
        """
        if not root or not Path(root).is_dir():
            raise InvalidRootError(
                "Please provide a valid path to the tutorial project using --path"
            )

        summary_file = Path(root) / self.settings.summary_filename
        if not summary_file.is_file():
            raise SummaryNotFoundError(
                f"{self.settings.summary_filename} not found in the provided path"
            )

        try:
            content = summary_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SummaryParseError(str(e)) from e

        parsed = parse_summary(
            content,
            default_language=self.settings.default_language,
            default_category=self.settings.default_category,
            default_title=self.settings.default_title,
        )
        logger.info(f"Parsed {summary_file} as {parsed.format.value}: {parsed.languages}")
        return parsed

    def run_import(self, root: Optional[Path]) -> ImportReport:
        """Import every entry listed in ``root``'s table of contents."""
        parsed = self.load_summary(root)
        root = Path(root)

        self.echo("Starting import...")
        log_import_event("import_started", root=root, format=parsed.format.value)
        report = ImportReport()

        for language, categories in parsed.tree.items():
            for entry in categories:
                if isinstance(entry, CategoryContainer):
                    for item in entry.items:
                        report.record(
                            self._import_guarded(root, language, entry.title, item, report)
                        )
                elif isinstance(entry, CategoryLeaf):
                    report.record(
                        self._import_guarded(root, language, entry.category, entry.entry, report)
                    )

        self.echo(f"Import completed. Total items processed: {report.processed}")
        self.echo(f"Images are stored in: {STORAGE_LOCATION_MESSAGE}")
        log_import_event(
            "import_completed",
            processed=report.processed,
            imported=report.imported,
            skipped=report.skipped,
            failed=report.failed,
        )
        return report

    def _import_guarded(
        self, root: Path, language: str, category: str, item: LeafEntry, report: ImportReport
    ) -> ItemOutcome:
        try:
            outcome = self.import_item(root, language, category, item)
        except (OSError, UnicodeDecodeError, StorageError) as e:
            message = f"Failed to import [{language}] {category} -> {item.title}: {e}"
            logger.warning(message)
            self.warn(message)
            report.warnings.append(message)
            return ItemOutcome.FAILED

        if outcome is ItemOutcome.MISSING:
            report.warnings.append(f"File not found: {resolve(root, item.path)}")
        return outcome

    def import_item(self, root: Path, language: str, category: str, item: LeafEntry) -> ItemOutcome:
        """Import one file as a knowledge record.

        Missing files are skipped with a warning. I/O and storage failures
        propagate to the caller.
        """
        if not item.path:
            logger.debug(f"Entry {item.title!r} has no path, nothing to import")
            return ItemOutcome.NO_PATH

        md_path = resolve(root, item.path)
        if not md_path.is_file():
            message = f"File not found: {md_path}"
            logger.warning(message)
            self.warn(message)
            return ItemOutcome.MISSING

        body = md_path.read_text(encoding="utf-8")
        body = self.rewriter.rewrite(body, md_path.parent, language, category)
        body += "\n\n" + SOURCE_TAG

        self.store.upsert_knowledge(
            KnowledgeRecord(
                language=language,
                title=item.title,
                category=category,
                body=body,
                show=True,
                sort=None,
            )
        )

        self.echo(f"Imported: [{language}] {category} -> {item.title}")
        return ItemOutcome.IMPORTED

    # === Rollback ===

    def rollback(self) -> RollbackReport:
        """Remove all imported records and the managed image directory."""
        self.echo("Starting rollback...")
        report = RollbackReport()

        report.deleted_records = self.store.delete_with_marker(SOURCE_TAG)
        self.echo(f"Deleted {report.deleted_records} records from database.")

        report.storage_removed = self.assets.delete_directory(MANAGED_SUBDIR)
        if report.storage_removed:
            self.echo(f"Deleted images from storage: {STORAGE_LOCATION_MESSAGE}")

        self.echo("Rollback completed.")
        log_import_event(
            "rollback_completed",
            deleted=report.deleted_records,
            storage_removed=report.storage_removed,
        )
        return report
