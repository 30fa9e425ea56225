"""
Per-table and per-run outcome counters.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from machine_translations.core.exceptions import MachineTranslationsException


@dataclass
class TableResult:
    """Outcome of synchronizing one translation table."""
    table_name: str
    rows_total: int = 0
    rows_skipped: int = 0
    rows_updated: int = 0
    rows_inserted: int = 0
    rows_failed: int = 0
    columns_translated: int = 0
    columns_already_translated: int = 0
    backup_file: Optional[str] = None
    errors: List[MachineTranslationsException] = field(default_factory=list)

    @property
    def writes(self) -> int:
        return self.rows_updated + self.rows_inserted

    def summary(self) -> str:
        return (
            f"{self.table_name}: {self.rows_total} rows, "
            f"{self.rows_updated} updated, {self.rows_inserted} inserted, "
            f"{self.rows_skipped} skipped, {self.rows_failed} failed, "
            f"{self.columns_translated} columns translated, "
            f"{self.columns_already_translated} already translated, "
            f"{len(self.errors)} errors"
        )


@dataclass
class SyncReport:
    """Results of all tables processed in one run."""
    tables: List[TableResult] = field(default_factory=list)

    def add(self, result: TableResult) -> None:
        self.tables.append(result)

    @property
    def writes(self) -> int:
        return sum(t.writes for t in self.tables)

    @property
    def error_count(self) -> int:
        return sum(len(t.errors) for t in self.tables)
