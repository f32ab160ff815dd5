from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from learnix.core.config import settings
from learnix.core.exceptions import DatabaseNotConfigured


def _sqlite_connect_args(url: str) -> dict:
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


def _build_engine(url: Optional[str]) -> Optional[Engine]:
    if not url:
        return None
    return create_engine(url, future=True, echo=False, connect_args=_sqlite_connect_args(url))


engine = _build_engine(settings.database_url)
SessionLocal: Optional[sessionmaker] = (
    sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True) if engine else None
)


def get_db() -> Generator[Optional[Session], None, None]:
    """Yields a session, or None when the local database is disabled."""
    if SessionLocal is None:
        yield None
        return
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def require_db(db: Optional[Session]) -> Session:
    if db is None:
        raise DatabaseNotConfigured()
    return db
