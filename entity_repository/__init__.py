"""
Repository pattern for SQLAlchemy models.

Provides a generic repository with CRUD, declarative filtering and ordering,
native SQL and transaction helpers, a registry resolving repositories by
model, FastAPI wiring, and a generator for model-specific repositories.
"""

from entity_repository.exceptions import (
    InvalidColumnError,
    InvalidOrderError,
    ModelNotFoundError,
    RepositoryAlreadyExistsError,
    RepositoryError,
    RepositoryNotFoundError,
    TransactionError,
)
from entity_repository.repositories import (
    EntityManagerInterface,
    EntityRepository,
    Repository,
    RepositoryRegistry,
    default_registry,
    register_repository,
)

__version__ = "0.1.0"

__all__ = [
    'EntityManagerInterface',
    'EntityRepository',
    'InvalidColumnError',
    'InvalidOrderError',
    'ModelNotFoundError',
    'Repository',
    'RepositoryAlreadyExistsError',
    'RepositoryError',
    'RepositoryNotFoundError',
    'RepositoryRegistry',
    'TransactionError',
    'default_registry',
    'register_repository',
]
