"""Database session management.

Provides session factory for SQLite database access with proper
thread-safety for FastAPI concurrency.
"""

from __future__ import annotations

import os
from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from taskmarket.db.schema import Base

DEFAULT_DB_PATH = Path("data/taskmarket.db")

# Module-level caches, keyed by resolved db path
_engine_cache: dict[str, Engine] = {}
_session_factory_cache: dict[str, sessionmaker] = {}


def _resolve_db_path(db_path: Path | None) -> Path:
    if db_path is None:
        db_path = Path(os.environ.get("TASKMARKET_DB_PATH", DEFAULT_DB_PATH))
    return Path(db_path)


def get_engine(db_path: Path | None = None) -> Engine:
    """Get SQLAlchemy engine for the database.

    Engines are cached by resolved db_path. Uses StaticPool and
    check_same_thread=False so one SQLite connection can be shared
    across FastAPI worker threads.

    Args:
        db_path: Path to SQLite database file. Defaults to
            $TASKMARKET_DB_PATH, then data/taskmarket.db.

    Returns:
        SQLAlchemy engine instance (cached).
    """
    db_path = _resolve_db_path(db_path)
    cache_key = str(db_path.resolve())

    if cache_key in _engine_cache:
        return _engine_cache[cache_key]

    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _engine_cache[cache_key] = engine

    return engine


def _get_session_factory(db_path: Path | None = None) -> sessionmaker:
    db_path = _resolve_db_path(db_path)
    cache_key = str(db_path.resolve())

    if cache_key in _session_factory_cache:
        return _session_factory_cache[cache_key]

    factory = sessionmaker(bind=get_engine(db_path))
    _session_factory_cache[cache_key] = factory

    return factory


def get_session(db_path: Path | None = None) -> Session:
    """Get a database session.

    Note: Caller is responsible for closing the session. Request handlers
    get one through taskmarket.api.app.get_db_session.
    """
    factory = _get_session_factory(db_path)
    return factory()


def init_db(db_path: Path | None = None) -> None:
    """Create all tables. Call once during application startup."""
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)
