"""
Selection of the translation tables to process.
"""
import logging
from typing import Callable, List, Optional, Sequence

from machine_translations.core.exceptions import InvalidSelection, SelectionCancelled
from machine_translations.services.schema_service import SchemaInspector

logger = logging.getLogger(__name__)

TABLE_SUFFIX_TRANSLATION = "_translation"

ConfirmCallback = Callable[[List[str]], bool]


def is_translation_table(table_name: str) -> bool:
    """A translation table is named '<entity>_translation' with a non-empty entity."""
    return len(table_name) > len(TABLE_SUFFIX_TRANSLATION) and table_name.endswith(TABLE_SUFFIX_TRANSLATION)


class TableSelector:
    """Filters or enumerates translation tables."""

    def __init__(self, inspector: SchemaInspector, confirm: Optional[ConfirmCallback] = None):
        """
        Args:
            inspector: Schema inspector used to enumerate tables
            confirm: Called with the full table list when no tables were given
                explicitly; returning False cancels the run. Without a callback
                the full list is never processed.
        """
        self.inspector = inspector
        self.confirm = confirm

    def select_tables(self, tables: Optional[Sequence[str]] = None) -> List[str]:
        """
        Return the tables to process.

        Args:
            tables: Explicit table names. Empty or None enumerates all
                translation tables and asks for confirmation.

        Returns:
            Non-empty list of translation table names

        Raises:
            SelectionCancelled: If the confirmation was declined
            InvalidSelection: If no translation tables are left
        """
        if tables:
            selected = [name for name in tables if is_translation_table(name)]
            dropped = [name for name in tables if not is_translation_table(name)]
            if dropped:
                logger.warning(f"Ignoring tables without '{TABLE_SUFFIX_TRANSLATION}' suffix: {', '.join(dropped)}")
        else:
            selected = [name for name in self.inspector.list_tables() if is_translation_table(name)]
            if selected:
                logger.info(f"Found {len(selected)} translation tables: {', '.join(selected)}")
                if self.confirm is None or not self.confirm(selected):
                    raise SelectionCancelled(f"Processing of {len(selected)} tables was not confirmed")

        if not selected:
            raise InvalidSelection("No translation tables selected")

        return selected
