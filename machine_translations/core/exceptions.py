"""
Custom exceptions for the translation tool.

Only ``SetupError`` and ``BackupError`` stop a run. Column and row level
failures are recorded on the table result and processing continues.
"""
from typing import Optional


class MachineTranslationsException(Exception):
    """Base exception for all machine-translations exceptions."""
    pass


class SetupError(MachineTranslationsException):
    """Raised when the run cannot start; nothing has been written yet."""
    pass


class ConfigurationError(SetupError):
    """Raised when a required setting (database URL, API key) is missing."""
    pass


class LanguageNotFoundError(SetupError):
    """Raised when a locale code does not resolve to a language."""

    def __init__(self, locale_code: str):
        self.locale_code = locale_code
        super().__init__(f"Could not find a language for locale '{locale_code}'")


class InvalidTableName(SetupError):
    """Raised when a table does not follow the ``<entity>_translation`` convention."""

    def __init__(self, table_name: str, reason: Optional[str] = None):
        self.table_name = table_name
        super().__init__(
            f"'{table_name}' is not a translation table: {reason or 'expected suffix _translation'}"
        )


class InvalidSelection(SetupError):
    """Raised when no tables are left to process."""
    pass


class SelectionCancelled(InvalidSelection):
    """Raised when the user declines to process the enumerated tables."""
    pass


class TranslationError(MachineTranslationsException):
    """Raised by a translator on transport or API level failure."""
    pass


class ColumnTranslationError(MachineTranslationsException):
    """A translation failure for a single column of a single row."""

    def __init__(self, table_name: str, column_name: str, reference: str, cause: Exception):
        self.table_name = table_name
        self.column_name = column_name
        self.reference = reference
        self.cause = cause
        super().__init__(f"{table_name}.{column_name} [{reference}]: {cause}")


class PersistenceError(MachineTranslationsException):
    """Raised when neither update nor insert wrote the translated row."""

    def __init__(self, table_name: str, reference: str, message: str):
        self.table_name = table_name
        self.reference = reference
        super().__init__(f"{table_name} [{reference}]: {message}")


class BackupError(MachineTranslationsException):
    """Raised when a table backup could not be written."""
    pass
