"""Database session management.

Provides engine and session factories keyed by database URL, with
SQLite thread-safety settings for FastAPI concurrency.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from videoshelf.db.schema import Base

logger = logging.getLogger(__name__)

# Default database URL
DEFAULT_DATABASE_URL = "sqlite:///data/videoshelf.db"

# Module-level engine cache for connection pooling
_engine_cache: dict[str, Engine] = {}

# Module-level session factory cache
_session_factory_cache: dict[str, sessionmaker] = {}


def get_engine(database_url: str | None = None) -> Engine:
    """Get SQLAlchemy engine for the database.

    Engines are cached by URL so that every request shares one pool.

    For SQLite, sets check_same_thread=False so pooled connections can be
    used from FastAPI's worker threads. Only in-memory databases share a
    single connection (StaticPool); file databases get one connection per
    session so concurrent requests keep separate transactions.

    Args:
        database_url: SQLAlchemy URL. Defaults to a file under data/.

    Returns:
        SQLAlchemy engine instance (cached).
    """
    if database_url is None:
        database_url = DEFAULT_DATABASE_URL

    if database_url in _engine_cache:
        return _engine_cache[database_url]

    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        connect_args = {"check_same_thread": False}
        if not url.database or url.database == ":memory:":
            # The database lives in its one connection
            engine = create_engine(
                database_url,
                echo=False,
                connect_args=connect_args,
                poolclass=StaticPool,
            )
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(database_url, echo=False, connect_args=connect_args)
    else:
        engine = create_engine(database_url, echo=False, pool_pre_ping=True)

    _engine_cache[database_url] = engine
    logger.info(f"Created database engine for {url.render_as_string(hide_password=True)}")

    return engine


def _get_session_factory(database_url: str | None = None) -> sessionmaker:
    """Get cached session factory for the database.

    Args:
        database_url: SQLAlchemy URL.

    Returns:
        Cached sessionmaker instance.
    """
    if database_url is None:
        database_url = DEFAULT_DATABASE_URL

    if database_url in _session_factory_cache:
        return _session_factory_cache[database_url]

    engine = get_engine(database_url)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    _session_factory_cache[database_url] = factory

    return factory


def get_session(database_url: str | None = None) -> Session:
    """Get a database session.

    Note: Caller is responsible for closing the session. For automatic
    resource management, use get_db_session() context manager instead.

    Args:
        database_url: SQLAlchemy URL.

    Returns:
        SQLAlchemy Session instance.
    """
    factory = _get_session_factory(database_url)
    return factory()


@contextmanager
def get_db_session(database_url: str | None = None) -> Generator[Session, None, None]:
    """Context manager for database sessions with automatic cleanup.

    Commits on successful exit, rolls back on exception, and always
    closes the session.

    Args:
        database_url: SQLAlchemy URL.

    Yields:
        SQLAlchemy Session instance.

    Example:
        with get_db_session() as session:
            session.add(record)
            # Auto-commits on exit, rolls back on exception
    """
    session = get_session(database_url)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(database_url: str | None = None) -> None:
    """Initialize database schema.

    Call this once during application startup to create tables.

    Args:
        database_url: SQLAlchemy URL.
    """
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
