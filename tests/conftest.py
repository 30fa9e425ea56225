from datetime import datetime
from typing import Dict, Iterable, Optional

import pytest
from sqlalchemy import create_engine, text
from sqlmodel import Session, SQLModel

from machine_translations.core.exceptions import TranslationError
from machine_translations.models.language import Language, Locale, ResolvedLanguage
from machine_translations.services.row_store import RowStore
from machine_translations.services.schema_service import SchemaInspector
from machine_translations.services.translation_service import Translator

DE_ID = bytes.fromhex("2fbb5fe2e29a4d70aa5854ce7ce3e20b")
EN_ID = bytes.fromhex("9b2f3c1a77d94e4c8a5f0d6e1c2b3a40")
CS_ID = bytes.fromhex("5e7d1b0c4a3f4e2d9c8b7a6f5e4d3c21")

GERMAN = ResolvedLanguage(id=DE_ID, code="de-DE", name="Deutsch")
ENGLISH = ResolvedLanguage(id=EN_ID, code="en-GB", name="English")
CZECH = ResolvedLanguage(id=CS_ID, code="cs-CZ", name="Čeština")

STATE_TABLE = "state_machine_state_translation"
FIXED_NOW = datetime(2024, 9, 1, 12, 0, 0)

STATE_TABLE_DDL = f"""
    CREATE TABLE {STATE_TABLE} (
        id INTEGER PRIMARY KEY,
        state_machine_state_id INTEGER NOT NULL,
        language_id BLOB NOT NULL,
        name VARCHAR(255),
        description TEXT,
        custom_fields JSON,
        created_at DATETIME NOT NULL,
        updated_at DATETIME,
        UNIQUE (state_machine_state_id, language_id)
    )
"""


class DictTranslator(Translator):
    """Translator with fixed answers; unknown texts fail like an API error."""

    def __init__(self, translations: Dict[str, str], failing: Iterable[str] = ()):
        self.translations = translations
        self.failing = set(failing)
        self.calls = []

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.calls.append((text, source_lang, target_lang))
        if text in self.failing or text not in self.translations:
            raise TranslationError(f"HTTP 456: quota exceeded for '{text}'")
        return self.translations[text]


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'shop.db'}")
    SQLModel.metadata.create_all(engine, tables=[Locale.__table__, Language.__table__])

    with Session(engine) as session:
        for language in (GERMAN, ENGLISH, CZECH):
            locale_id = bytes(reversed(language.id))
            session.add(Locale(id=locale_id, code=language.code))
            session.add(Language(id=language.id, name=language.name, translation_code_id=locale_id))
        session.commit()

    with engine.begin() as conn:
        conn.execute(text(STATE_TABLE_DDL))

    yield engine
    engine.dispose()


@pytest.fixture
def inspector(engine):
    return SchemaInspector(engine)


@pytest.fixture
def row_store(engine):
    return RowStore(engine)


def add_state_row(
    engine,
    state_id: int,
    language_id: bytes,
    name: Optional[str],
    description: Optional[str] = None,
) -> None:
    with engine.begin() as conn:
        conn.execute(
            text(
                f"INSERT INTO {STATE_TABLE} (state_machine_state_id, language_id, name, description, created_at) "
                "VALUES (:state_id, :language_id, :name, :description, :created_at)"
            ),
            {
                "state_id": state_id,
                "language_id": language_id,
                "name": name,
                "description": description,
                "created_at": "2024-01-01 00:00:00",
            },
        )


def fetch_state_rows(engine, language_id: bytes) -> Dict[int, dict]:
    with engine.connect() as conn:
        rows = conn.execute(
            text(f"SELECT * FROM {STATE_TABLE} WHERE language_id = :language_id"),
            {"language_id": language_id},
        ).mappings().all()
    return {row["state_machine_state_id"]: dict(row) for row in rows}
