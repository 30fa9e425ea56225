"""
Command line entry point: translate *_translation tables with DeepL.

Usage:
  machine-translations --from de-DE --to cs-CZ --table product_translation
  machine-translations --to en-GB --yes --no-backup
"""
import argparse
import logging
import sys
from typing import List, Optional, Sequence

from machine_translations.core.config import settings
from machine_translations.core.database import create_db_engine
from machine_translations.core.exceptions import (
    BackupError,
    ConfigurationError,
    SelectionCancelled,
    SetupError,
)
from machine_translations.models.results import SyncReport
from machine_translations.services.backup_service import TableBackuper
from machine_translations.services.locale_service import LocaleService
from machine_translations.services.row_store import RowStore
from machine_translations.services.schema_service import SchemaInspector
from machine_translations.services.table_selector import TableSelector
from machine_translations.services.table_translator import TableTranslator
from machine_translations.services.translation_service import DeeplTranslator, Translator

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="machine-translations",
        description="Translate missing texts of *_translation tables with DeepL.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-t", "--table",
        dest="tables",
        action="append",
        default=[],
        help="Table to translate; repeat or comma-separate for several. "
             "Without this option all *_translation tables are processed after confirmation.",
    )
    parser.add_argument(
        "--from",
        dest="source_locale",
        default=settings.source_locale,
        help="Locale code to translate from.",
    )
    parser.add_argument(
        "--to",
        dest="target_locale",
        default=settings.target_locale,
        help="Locale code to translate to.",
    )
    parser.add_argument(
        "--no-backup",
        action="store_true",
        help="Don't dump tables before modifying them.",
    )
    parser.add_argument(
        "--backup-dir",
        default=settings.backup_dir,
        help="Directory for table dumps.",
    )
    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Process all translation tables without asking.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Translate and log, but write nothing.",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Database URL (defaults to DATABASE_URL).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level.",
    )
    return parser.parse_args(argv)


def split_table_names(values: List[str]) -> List[str]:
    names = []
    for value in values:
        names.extend(name.strip() for name in value.split(",") if name.strip())
    return names


def ask_confirmation(tables: List[str]) -> bool:
    """Ask on the terminal whether to process all enumerated tables."""
    print("\n".join(f"  - {name}" for name in tables))
    try:
        answer = input(f"Proceed with {len(tables)} tables? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def run(args: argparse.Namespace, translator: Optional[Translator] = None) -> SyncReport:
    """
    Run one synchronization.

    Raises:
        SetupError: If the run cannot start; nothing was written
        BackupError: If a table could not be backed up; that table was not modified
    """
    engine = create_db_engine(args.database_url)

    locale_service = LocaleService(engine)
    source = locale_service.resolve_language(args.source_locale)
    target = locale_service.resolve_language(args.target_locale)
    if source.id == target.id:
        raise ConfigurationError(f"Source and target language are the same: {source.code}")
    logger.info(f"Translating {source.name} ({source.code}) --> {target.name} ({target.code})")

    inspector = SchemaInspector(engine)
    confirm = (lambda tables: True) if args.yes else ask_confirmation
    tables = TableSelector(inspector, confirm=confirm).select_tables(split_table_names(args.tables))

    table_translator = TableTranslator(
        inspector,
        RowStore(engine),
        translator or DeeplTranslator(),
        dry_run=args.dry_run,
    )
    # Check every table up front so a bad name fails before anything is written
    schemas = {name: table_translator.validate_table(name) for name in tables}

    backuper = None
    if not args.no_backup and not args.dry_run:
        backuper = TableBackuper(engine.url, args.backup_dir)

    report = SyncReport()
    for table_name in tables:
        backup_file = backuper.backup_table(table_name) if backuper else None
        result = table_translator.translate_table(table_name, source, target, schema=schemas[table_name])
        result.backup_file = str(backup_file) if backup_file else None
        report.add(result)

    return report


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the command."""
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        report = run(args)
    except SelectionCancelled as e:
        logger.warning(f"Aborted: {e}")
        return 0
    except SetupError as e:
        logger.error(f"Setup failed: {e}")
        return 1
    except BackupError as e:
        logger.error(f"Backup failed, stopping before the table is modified: {e}")
        return 1
    except Exception as e:
        logger.error(f"Error during translation: {e}", exc_info=True)
        return 1

    for result in report.tables:
        logger.info(result.summary())
    logger.info(f"Translation completed: {report.writes} rows written, {report.error_count} errors")
    return 0


if __name__ == "__main__":
    sys.exit(main())
