from typing import Generator, Optional
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from medassist.config import settings
from medassist.errors import DatabaseNotConfiguredError
from medassist.models.base import Base
from medassist.models import diagnosis, patient  # noqa: F401  (register tables)

logger = logging.getLogger(__name__)

engine: Optional[Engine] = None
SessionLocal: Optional[sessionmaker] = None


def init_db(database_url: Optional[str] = None) -> Optional[Engine]:
    """Create the engine and session factory if a database URL is configured.

    Returns the engine, or None when the application runs without a database.
    """
    global engine, SessionLocal
    url = database_url or settings.DATABASE_URL
    if not url:
        logger.warning("DATABASE_URL not set; running without a database")
        return None

    engine = create_engine(url, pool_pre_ping=True)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    return engine


def get_optional_db() -> Generator[Optional[Session], None, None]:
    """Yield a session, or None when no database is configured."""
    if SessionLocal is None:
        yield None
        return
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    """Yield a session, failing with 503 when no database is configured."""
    if SessionLocal is None:
        raise DatabaseNotConfiguredError()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
