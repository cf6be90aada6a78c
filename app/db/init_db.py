"""
Database initialization.

Creates all tables.
"""

from loguru import logger
from sqlmodel import SQLModel

import app.db.base  # noqa: F401
from app.db.session import engine


def init_db() -> None:
    """Create all SQLModel tables that do not exist yet."""
    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("Database initialization complete")


if __name__ == "__main__":
    init_db()
