"""
Locale resolution: maps a locale code such as 'de-DE' to the shop's language.
"""
import logging
from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from machine_translations.core.exceptions import LanguageNotFoundError
from machine_translations.models.language import Language, Locale, ResolvedLanguage

logger = logging.getLogger(__name__)


class LocaleService:
    """Looks up languages in the language/locale reference tables."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def resolve_language(self, locale_code: str) -> ResolvedLanguage:
        """
        Resolve a locale code to a language (case-insensitive).

        Several languages can share a locale; the one with the lowest id wins
        and a warning names the others.

        Args:
            locale_code: Locale code, e.g. 'de-DE'

        Returns:
            The resolved language

        Raises:
            LanguageNotFoundError: If no language uses this locale
        """
        code = locale_code.strip()
        statement = (
            select(Language, Locale)
            .join(Locale, Language.translation_code_id == Locale.id)
            .where(func.lower(Locale.code) == code.lower())
            .order_by(Language.id)
        )
        with Session(self.engine) as session:
            results = session.exec(statement).all()

        if not results:
            raise LanguageNotFoundError(locale_code)

        language, locale = results[0]
        if len(results) > 1:
            names = ", ".join(repr(other.name) for other, _ in results)
            logger.warning(
                f"Locale '{locale_code}' is used by {len(results)} languages ({names}); using '{language.name}'"
            )
        resolved = ResolvedLanguage(id=language.id, code=locale.code, name=language.name)
        logger.info(f"Resolved locale '{locale_code}' to language '{resolved.name}'")
        return resolved
