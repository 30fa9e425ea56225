"""
Row access for translation tables.

Every write runs in its own session and is committed immediately, so a
failed row never rolls back rows written before it.
"""
import logging
from typing import Any, Dict, List
from sqlalchemy import and_, insert, select, update
from sqlalchemy.engine import Engine
from sqlmodel import Session

from machine_translations.models.schema import TableSchema

logger = logging.getLogger(__name__)

LANGUAGE_COLUMN = "language_id"


class RowStore:
    """Select, update and insert rows of a table described by a TableSchema."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def select_rows(self, schema: TableSchema, language_id: Any) -> List[Dict[str, Any]]:
        """Return all rows of the table for one language as dicts."""
        table = schema.table
        statement = select(table).where(table.c[LANGUAGE_COLUMN] == language_id)
        with Session(self.engine) as session:
            rows = session.execute(statement).mappings().all()
        return [dict(row) for row in rows]

    def update(self, schema: TableSchema, values: Dict[str, Any], criteria: Dict[str, Any]) -> int:
        """
        Update the rows matching all criteria.

        Returns:
            Number of affected rows
        """
        table = schema.table
        statement = (
            update(table)
            .where(and_(*[table.c[name] == value for name, value in criteria.items()]))
            .values(**values)
        )
        with Session(self.engine) as session:
            try:
                affected = session.execute(statement).rowcount
                session.commit()
            except Exception:
                session.rollback()
                raise
        return affected

    def insert(self, schema: TableSchema, values: Dict[str, Any]) -> int:
        """
        Insert one row.

        Returns:
            Number of affected rows
        """
        table = schema.table
        with Session(self.engine) as session:
            try:
                affected = session.execute(insert(table).values(**values)).rowcount
                session.commit()
            except Exception:
                session.rollback()
                raise
        return affected
