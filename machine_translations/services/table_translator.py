"""
Synchronization of one translation table from a source to a target language.

For every source-language row the text columns that are still missing in the
target-language row are translated one by one and written back, updating the
existing target row or inserting a new one. Existing target text is never
overwritten, so running the sync twice writes nothing the second time.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from sqlalchemy import Enum as SAEnum, String
from sqlalchemy.dialects import mysql
from sqlalchemy.exc import SQLAlchemyError

from machine_translations.core.exceptions import (
    ColumnTranslationError,
    InvalidTableName,
    PersistenceError,
    TranslationError,
)
from machine_translations.models.language import ResolvedLanguage
from machine_translations.models.results import TableResult
from machine_translations.models.schema import ColumnSchema, TableSchema
from machine_translations.services.row_store import LANGUAGE_COLUMN, RowStore
from machine_translations.services.schema_service import SchemaInspector
from machine_translations.services.table_selector import TABLE_SUFFIX_TRANSLATION, is_translation_table
from machine_translations.services.translation_service import Translator
from machine_translations.utils.text_utils import format_reference, format_values, is_empty

logger = logging.getLogger(__name__)

# custom_fields is JSON; MariaDB reflects it as LONGTEXT
EXCLUDED_COLUMN_NAMES = ('id', 'custom_fields')
EXCLUDED_COLUMN_SUFFIXES = ('_id', '_config')


def get_parent_reference_column(table_name: str) -> str:
    """
    Derive the parent reference column of a translation table.

    'state_machine_state_translation' -> 'state_machine_state_id'

    Raises:
        InvalidTableName: If the table name does not end with '_translation'
    """
    if not is_translation_table(table_name):
        raise InvalidTableName(table_name)
    return table_name[:-len(TABLE_SUFFIX_TRANSLATION)] + '_id'


def is_text_column(column: ColumnSchema) -> bool:
    # Enum and SET are String subtypes but hold fixed values
    if not isinstance(column.type, String) or isinstance(column.type, (SAEnum, mysql.SET)):
        return False
    if column.is_json or column.name in EXCLUDED_COLUMN_NAMES:
        return False
    return not column.name.endswith(EXCLUDED_COLUMN_SUFFIXES)


def get_text_columns(schema: TableSchema) -> List[str]:
    """Return the translatable columns of a table in declared order."""
    return [column.name for column in schema.columns if is_text_column(column)]


class TableTranslator:
    """Translates the missing text columns of translation tables."""

    def __init__(
        self,
        inspector: SchemaInspector,
        row_store: RowStore,
        translator: Translator,
        dry_run: bool = False,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.inspector = inspector
        self.row_store = row_store
        self.translator = translator
        self.dry_run = dry_run
        self.now = now

    def validate_table(self, table_name: str) -> TableSchema:
        """
        Read a table's schema and check it has the columns the sync relies on.

        Raises:
            InvalidTableName: If the name or the columns do not fit the convention
        """
        reference_column = get_parent_reference_column(table_name)
        schema = self.inspector.get_table_schema(table_name)
        for required in (LANGUAGE_COLUMN, reference_column):
            if not schema.has_column(required):
                raise InvalidTableName(table_name, f"missing column '{required}'")
        return schema

    def get_destination_rows(self, schema: TableSchema, language_id: Any) -> Dict[Any, Dict[str, Any]]:
        """Map parent reference value -> existing target-language row."""
        reference_column = get_parent_reference_column(schema.name)
        return {
            row[reference_column]: row
            for row in self.row_store.select_rows(schema, language_id)
        }

    def translate_table(
        self,
        table_name: str,
        source: ResolvedLanguage,
        target: ResolvedLanguage,
        schema: Optional[TableSchema] = None,
    ) -> TableResult:
        """
        Translate all missing text columns of one table.

        Args:
            table_name: Translation table to process
            source: Language to read from
            target: Language to write to
            schema: Schema read earlier by validate_table(), if available

        Returns:
            Counters and recovered errors for the table
        """
        logger.info(f"Processing table: {table_name}")
        result = TableResult(table_name=table_name)

        schema = schema or self.validate_table(table_name)
        text_columns = get_text_columns(schema)
        if not text_columns:
            logger.warning(f"{table_name}: no text columns found --> SKIP")
            return result
        logger.info(f"{table_name}: text columns: {', '.join(text_columns)}")

        source_rows = self.row_store.select_rows(schema, source.id)
        dest_rows = self.get_destination_rows(schema, target.id)
        logger.info(f"{table_name}: {len(source_rows)} source rows, {len(dest_rows)} existing target rows")

        reference_column = get_parent_reference_column(table_name)
        for row in source_rows:
            result.rows_total += 1
            dest_row = dest_rows.get(row[reference_column])
            updates = self.translate_row(schema, row, text_columns, dest_row, source, target, result)

            if not updates:
                logger.debug(f"{table_name} [{format_reference(row[reference_column])}]: no updates for row --> SKIP")
                result.rows_skipped += 1
                continue

            self.update_or_insert_translation(schema, row, updates, target, result)

        logger.info(result.summary())
        return result

    def translate_row(
        self,
        schema: TableSchema,
        row: Dict[str, Any],
        text_columns: List[str],
        dest_row: Optional[Dict[str, Any]],
        source: ResolvedLanguage,
        target: ResolvedLanguage,
        result: TableResult,
    ) -> Dict[str, str]:
        """
        Translate the text columns of one source row that the target row lacks.

        A failing column is logged and recorded; the remaining columns are
        still translated.

        Returns:
            The UpdateSet (column -> translated text), possibly empty
        """
        reference = format_reference(row[get_parent_reference_column(schema.name)])
        updates: Dict[str, str] = {}

        for column_name in text_columns:
            original_text = row.get(column_name)
            existing_translation = dest_row.get(column_name) if dest_row else None

            if not is_empty(existing_translation):
                logger.info(
                    f"{schema.name}.{column_name} [{reference}]: translation already exists "
                    f"[{original_text} --> {existing_translation}] >>> SKIP"
                )
                result.columns_already_translated += 1
                continue

            if is_empty(original_text):
                continue

            try:
                translated_text = self.translator.translate(original_text, source.iso_code, target.iso_code)
            except TranslationError as e:
                error = ColumnTranslationError(schema.name, column_name, reference, e)
                logger.error(f"Translation error for {error}")
                result.errors.append(error)
                continue

            updates[column_name] = translated_text
            result.columns_translated += 1
            logger.info(f"> {original_text} [{source.iso_code}] --> {translated_text} [{target.iso_code}]")

        return updates

    def build_update_criteria(self, table_name: str, row: Dict[str, Any], target: ResolvedLanguage) -> Dict[str, Any]:
        reference_column = get_parent_reference_column(table_name)
        return {
            LANGUAGE_COLUMN: target.id,
            reference_column: row[reference_column],
        }

    def update_or_insert_translation(
        self,
        schema: TableSchema,
        row: Dict[str, Any],
        updates: Dict[str, Any],
        target: ResolvedLanguage,
        result: TableResult,
    ) -> None:
        """
        Write an UpdateSet: update the target row, insert one if none exists.

        Failures are logged and recorded on the result; they never raise.
        """
        timestamp = self.now()
        values = dict(updates, updated_at=timestamp)
        criteria = self.build_update_criteria(schema.name, row, target)
        reference = format_reference(criteria[get_parent_reference_column(schema.name)])
        logger.info(f"{schema.name} [{reference}]: updates: {format_values(values)}")

        if self.dry_run:
            logger.info(f"{schema.name} [{reference}]: dry run, nothing written")
            result.rows_skipped += 1
            return

        try:
            num_updated = self.row_store.update(schema, values, criteria)
            if num_updated > 0:
                result.rows_updated += 1
                return

            logger.info(f"{schema.name} [{reference}]: no row updated ... we insert instead")
            new_row = dict(criteria, **values)
            new_row['created_at'] = timestamp
            num_inserted = self.row_store.insert(schema, new_row)
        except SQLAlchemyError as e:
            self._record_persistence_error(result, PersistenceError(schema.name, reference, str(e)))
            return

        if num_inserted == 0:
            self._record_persistence_error(result, PersistenceError(schema.name, reference, "error inserting row"))
            return

        result.rows_inserted += 1

    def _record_persistence_error(self, result: TableResult, error: PersistenceError) -> None:
        logger.error(f"Error writing row: {error}")
        result.rows_failed += 1
        result.errors.append(error)
