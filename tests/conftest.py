"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures and configuration for all tests.
"""

import logging
import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add the project root directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from entity_repository import RepositoryRegistry
from entity_repository.utils.config import get_settings
from tests.fixtures.models import Base
from tests.fixtures.repositories import AccountRepository, NoteRepository

# Set testing environment
os.environ["TESTING"] = "true"

SEED_ACCOUNTS = [
    {"name": "carol", "email": "carol@example.com", "status": "active", "score": 30},
    {"name": "alice", "email": "alice@example.com", "status": "active", "score": 10},
    {"name": "bob", "email": "bob@example.com", "status": "inactive", "score": 20},
    {"name": "dave", "email": "dave@example.com", "status": "active", "score": 10},
    {"name": "erin", "email": None, "status": "banned", "score": 0},
]


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def test_db(engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def account_repo(test_db) -> AccountRepository:
    """Account repository bound to the test session."""
    return AccountRepository(test_db)


@pytest.fixture
def seeded(account_repo):
    """Insert the seed accounts and return them keyed by name."""
    return {data["name"]: account_repo.create(data) for data in SEED_ACCOUNTS}


@pytest.fixture
def registry() -> RepositoryRegistry:
    """Registry holding the test repositories."""
    registry = RepositoryRegistry()
    registry.register("Account", AccountRepository)
    registry.register("Note", NoteRepository)
    return registry


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handlers installed by setup_logging() during a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
