"""
Database session management.

Provides SQLModel engine and session creation.
"""

from typing import Generator

from sqlmodel import Session, create_engine

from app.core.config import settings

DATABASE_URL: str = settings.database_url

_engine_options: dict = {"echo": settings.DEBUG, "pool_pre_ping": True}
if not DATABASE_URL.startswith("sqlite"):
    _engine_options.update(pool_size=5, max_overflow=10)

engine = create_engine(DATABASE_URL, **_engine_options)


def new_session() -> Session:
    """Open a standalone session (caller closes it, e.g. ``with new_session() as s``)."""
    return Session(engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI endpoints to get database session.

    Yields:
        SQLModel Session instance
    """
    with Session(engine) as session:
        yield session
