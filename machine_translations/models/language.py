"""
Language and locale models.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
from sqlalchemy import Column, ForeignKey, LargeBinary
from sqlmodel import SQLModel, Field


class Locale(SQLModel, table=True):
    """Locale table - one row per locale code (e.g. 'de-DE')."""
    __tablename__ = "locale"

    id: bytes = Field(sa_column=Column(LargeBinary(16), primary_key=True))
    code: str = Field(max_length=255)  # e.g., 'de-DE', 'cs-CZ'
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Language(SQLModel, table=True):
    """Language table - stores the shop languages. Never written by this tool."""
    __tablename__ = "language"

    id: bytes = Field(sa_column=Column(LargeBinary(16), primary_key=True))
    name: str = Field(max_length=50)
    # Locale used for translation lookups; points at locale.id
    translation_code_id: Optional[bytes] = Field(
        default=None,
        sa_column=Column(LargeBinary(16), ForeignKey("locale.id"), nullable=True),
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ResolvedLanguage:
    """A language looked up by locale code."""
    id: Any
    code: str
    name: str

    @property
    def iso_code(self) -> str:
        """Two-letter language code, e.g. 'de' for 'de-DE'."""
        return self.code.split("-")[0].split("_")[0].lower()
