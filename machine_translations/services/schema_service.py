"""
Schema introspection for translation tables.
"""
import logging
import re
from typing import List, Set
from sqlalchemy import inspect
from sqlalchemy.engine import Engine, Inspector

from machine_translations.models.schema import ColumnSchema, TableSchema

logger = logging.getLogger(__name__)

# MariaDB stores JSON as LONGTEXT guarded by CHECK (json_valid(`column`))
JSON_VALID_RE = re.compile(r"json_valid\s*\(\s*[`\"]?(\w+)[`\"]?\s*\)", re.IGNORECASE)


class SchemaInspector:
    """Reads table names and column metadata from the live database."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def list_tables(self) -> List[str]:
        """Return all table names of the connected schema."""
        # A fresh inspector per call: SQLAlchemy caches reflection results on it
        return inspect(self.engine).get_table_names()

    def get_json_columns(self, inspector: Inspector, table_name: str) -> Set[str]:
        """Names of text columns that a json_valid() check constraint marks as JSON."""
        try:
            constraints = inspector.get_check_constraints(table_name)
        except NotImplementedError:
            return set()
        return {
            match.group(1)
            for constraint in constraints
            for match in JSON_VALID_RE.finditer(constraint.get('sqltext') or '')
        }

    def get_table_schema(self, table_name: str) -> TableSchema:
        """
        Read the columns of a table in declared order.

        Args:
            table_name: Name of the table

        Returns:
            Schema descriptor for the table
        """
        inspector = inspect(self.engine)
        json_columns = self.get_json_columns(inspector, table_name)
        schema = TableSchema(
            name=table_name,
            columns=tuple(
                ColumnSchema(
                    name=col['name'],
                    type=col['type'],
                    nullable=col.get('nullable', True),
                    is_json=col['name'] in json_columns,
                )
                for col in inspector.get_columns(table_name)
            ),
        )
        logger.debug(f"Read schema: {schema}")
        return schema
