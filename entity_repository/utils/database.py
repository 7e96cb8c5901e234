"""
Database configuration and session management.

This module provides:
- Database URL resolution from the environment
- Engine creation with pooling suited to SQLite or PostgreSQL
- A session factory and a FastAPI dependency yielding sessions

Repositories only need a ``Session``; hosts that already manage their own
engine can ignore this module.
"""

import os
import logging
from typing import Generator, Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, QueuePool, StaticPool

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

_session_local: Optional[sessionmaker] = None


def _clean_url(db_url: str) -> str:
    # Fix potential newline issues in .env file
    return db_url.split('\n')[0].strip()


def get_database_url() -> str:
    """
    Get database URL based on environment.

    - TESTING=true: in-memory SQLite
    - development (default): DATABASE_URL_DEV, else ``sqlite:///app_dev.db``
    - anything else: DATABASE_URL, else ``sqlite:///app.db``

    Returns:
        str: Database connection URL
    """
    if os.getenv("TESTING", "").lower() == "true":
        logger.info("Using in-memory SQLite database for testing")
        return "sqlite://"

    env = os.getenv("ENVIRONMENT", os.getenv("ENV", "development")).lower()

    if env == "development":
        db_url = os.getenv("DATABASE_URL_DEV")
        if db_url:
            return _clean_url(db_url)
        logger.info("Using default SQLite database for development")
        return "sqlite:///app_dev.db"

    db_url = os.getenv("DATABASE_URL")
    if db_url:
        return _clean_url(db_url)

    logger.warning("No DATABASE_URL found, falling back to SQLite")
    return "sqlite:///app.db"


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Get SQLAlchemy engine with pooling configured per database type.

    Args:
        database_url (str, optional): Database URL. If None, determined from environment.

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    if database_url is None:
        database_url = get_database_url()

    debug_mode = os.getenv("DEBUG", "False").lower() == "true"

    connect_args = {}
    engine_args = {
        "echo": debug_mode,
    }

    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            engine_args["poolclass"] = StaticPool
        else:
            engine_args["poolclass"] = NullPool

    elif database_url.startswith("postgresql"):
        pool_size = int(os.getenv("POOL_SIZE", "5"))
        max_overflow = int(os.getenv("MAX_OVERFLOW", "10"))
        engine_args.update({
            "poolclass": QueuePool,
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": int(os.getenv("POOL_TIMEOUT", "30")),
            "pool_recycle": int(os.getenv("POOL_RECYCLE", "1800")),
            "pool_pre_ping": True,
        })
        logger.info(f"Using QueuePool for PostgreSQL database (size={pool_size}, max_overflow={max_overflow})")

    return create_engine(database_url, connect_args=connect_args, **engine_args)


def get_session_local(engine: Optional[Engine] = None) -> sessionmaker:
    """
    Get a session factory bound to ``engine``.

    Args:
        engine (Engine, optional): SQLAlchemy engine. If None, a new engine is created.

    Returns:
        sessionmaker: Configured session factory
    """
    if engine is None:
        engine = get_engine()

    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a database session.

    Yields:
        Session: SQLAlchemy database session
    """
    global _session_local
    if _session_local is None:
        _session_local = get_session_local()

    db = _session_local()
    try:
        yield db
    finally:
        db.close()
