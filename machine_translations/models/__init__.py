"""
Models package - reference tables and schema descriptors.
"""
from machine_translations.models.language import Language, Locale, ResolvedLanguage
from machine_translations.models.schema import ColumnSchema, TableSchema
from machine_translations.models.results import TableResult, SyncReport

__all__ = [
    "Language",
    "Locale",
    "ResolvedLanguage",
    "ColumnSchema",
    "TableSchema",
    "TableResult",
    "SyncReport",
]
