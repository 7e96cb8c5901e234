"""
This package contains the repository implementations for database operations.

Repositories provide a clean abstraction layer for database access,
implementing the repository pattern to separate business logic from
data access concerns.
"""

from entity_repository.repositories.base import EntityRepository, Repository
from entity_repository.repositories.interfaces import EntityManagerInterface
from entity_repository.repositories.registry import (
    RepositoryRegistry,
    default_registry,
    register_repository,
)

__all__ = [
    'EntityManagerInterface',
    'EntityRepository',
    'Repository',
    'RepositoryRegistry',
    'default_registry',
    'register_repository',
]
