from typing import Optional
from sqlalchemy.engine import Engine
from sqlmodel import create_engine
from machine_translations.core.config import settings
from machine_translations.core.exceptions import ConfigurationError
import logging

logger = logging.getLogger(__name__)


def normalize_database_url(db_url: str) -> str:
    """SQLAlchemy prefers postgresql:// over postgres://."""
    if db_url.startswith("postgres://"):
        return db_url.replace("postgres://", "postgresql://", 1)
    return db_url


def create_db_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create the database engine.

    Args:
        database_url: Connection URL. Falls back to DATABASE_URL from settings.

    Returns:
        SQLAlchemy engine

    Raises:
        ConfigurationError: If no database URL is configured
    """
    db_url = normalize_database_url(database_url or settings.database_url)
    if not db_url:
        raise ConfigurationError("DATABASE_URL environment variable is required")

    logger.info(f"Connecting to database: {db_url[:20]}...")  # Log partial URL only

    return create_engine(
        db_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before using
    )
