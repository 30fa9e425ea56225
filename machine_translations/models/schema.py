"""
Table schema descriptors.

Read once per table by the schema inspector and passed explicitly to the
column classifier, the row store and the upserter.
"""
from dataclasses import dataclass
from functools import cached_property
from typing import Tuple

from sqlalchemy import Column, Table, MetaData
from sqlalchemy.types import TypeEngine


@dataclass(frozen=True)
class ColumnSchema:
    """A column as declared in the database."""
    name: str
    type: TypeEngine
    nullable: bool = True
    # JSON stored in a text type, e.g. MariaDB LONGTEXT with a json_valid() check
    is_json: bool = False


@dataclass(frozen=True)
class TableSchema:
    """A table name and its columns in declared order."""
    name: str
    columns: Tuple[ColumnSchema, ...]

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def has_column(self, name: str) -> bool:
        return any(column.name == name for column in self.columns)

    @cached_property
    def table(self) -> Table:
        """SQLAlchemy Table for query construction, built once per schema."""
        return Table(
            self.name,
            MetaData(),
            *[Column(c.name, c.type) for c in self.columns],
        )

    def __repr__(self) -> str:
        return f"TableSchema(name={self.name!r}, columns={self.column_names!r})"
