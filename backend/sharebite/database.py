"""
ShareBite Backend — Database Engine & Session Management
==========================================================

What:  Async SQLAlchemy engine, session factory and declarative base.
Why:   Centralizes all database connection logic in one place.
How:   The engine and session factory are created on first use and shared
       by the SQL-backed stores; each store operation opens its own session.
Who:   Used by stores/sql.py, the health route and Alembic.

Lazy creation:
    Nothing here runs at import. create_app() hands the SQL stores a
    session opener, so the engine is built by the first store call; an app
    wired with in-memory stores never builds one.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from sharebite.config import settings

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers models with a single metadata object used by Alembic.
    """
    pass


def get_engine() -> AsyncEngine:
    """Return the process engine, creating it with the configured pool on first call."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
            echo=settings.log_level == "DEBUG",
        )
        logger.info("Database engine created")
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Return the shared session factory.

    expire_on_commit=False: documents are read back from ORM objects after
    commit, outside any open transaction.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _session_factory = None
