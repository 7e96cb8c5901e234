"""
FastAPI wiring for repositories.

The entity manager interface is bound to the base ``Repository`` and model
repositories are resolved through the registry, each sharing the request's
database session.

Usage:
    ```python
    from fastapi import Depends, FastAPI
    from entity_repository.providers import repository_dependency

    app = FastAPI()

    @app.get("/users/{user_id}")
    def read_user(user_id: int, users=Depends(repository_dependency(User))):
        return users.get_by_id(user_id)
    ```
"""

from typing import Any, Callable, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from entity_repository.repositories.base import Repository
from entity_repository.repositories.interfaces import EntityManagerInterface
from entity_repository.repositories.registry import RepositoryRegistry, default_registry
from entity_repository.utils.database import get_db


def get_registry() -> RepositoryRegistry:
    """Return the default repository registry."""
    return default_registry


def get_entity_manager(db: Session) -> EntityManagerInterface:
    """Return an entity manager bound to ``db`` but to no model."""
    return Repository(db)


def entity_manager_dependency(session_dependency: Callable[..., Any] = get_db) -> Callable[..., EntityManagerInterface]:
    """
    Build a FastAPI dependency yielding an entity manager.

    Args:
        session_dependency: Dependency providing the Session

    Returns:
        Dependency callable for ``Depends``
    """
    def _entity_manager(db: Session = Depends(session_dependency)) -> EntityManagerInterface:
        return get_entity_manager(db)
    return _entity_manager


def repository_dependency(
    entity: Any,
    session_dependency: Callable[..., Any] = get_db,
    registry: Optional[RepositoryRegistry] = None,
) -> Callable[..., Any]:
    """
    Build a FastAPI dependency yielding the repository registered for ``entity``.

    The registry is consulted per request, so repositories registered after
    the route was declared are still found.

    Args:
        entity: Model class or name
        session_dependency: Dependency providing the Session
        registry: Registry to resolve from, the default registry if omitted

    Returns:
        Dependency callable for ``Depends``
    """
    def _repository(db: Session = Depends(session_dependency)) -> Any:
        return (registry or get_registry()).resolve(entity, db)
    return _repository
