"""
Registry mapping models to repository factories.

Repositories register themselves when their module is imported, usually at
application start through ``autodiscover``. Lookups are plain dictionary
accesses; nothing is resolved by reflection at query time.

A model class is keyed by its dotted path (``app.models.User``), so two
models that share a class name in different modules never collide. A plain
name such as ``"User"`` still resolves when exactly one registration carries
that class name.
"""

import importlib
import logging
import pkgutil
from typing import Any, Callable, Dict, List

from sqlalchemy.orm import Session

from entity_repository.exceptions import RepositoryNotFoundError

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[Session], Any]


def entity_key(entity: Any) -> str:
    """Return the bare model name for a model class, instance or name."""
    if isinstance(entity, str):
        return entity.rsplit(".", 1)[-1]
    if isinstance(entity, type):
        return entity.__name__
    return type(entity).__name__


def qualified_key(entity: Any) -> str:
    """Return the registry key for a model class, instance or name.

    Classes and instances map to ``module.QualName``; names are kept as given.
    """
    if isinstance(entity, str):
        return entity
    cls = entity if isinstance(entity, type) else type(entity)
    return f"{cls.__module__}.{cls.__qualname__}"


class RepositoryRegistry:
    """Registry of repository factories keyed by model path or name."""

    def __init__(self):
        """Initialize an empty registry."""
        self._factories: Dict[str, RepositoryFactory] = {}

    def register(self, entity: Any, factory: RepositoryFactory) -> None:
        """Register a repository factory for an entity.

        Args:
            entity: Model class or model name (e.g. ``User`` or ``"User"``)
            factory: Callable taking a Session and returning a repository,
                usually the repository class itself
        """
        key = qualified_key(entity)
        if key in self._factories and self._factories[key] is not factory:
            logger.warning(f"Replacing repository registered for {key}")
        self._factories[key] = factory
        logger.debug(f"Registered repository for {key}")

    def _matching_keys(self, entity: Any) -> List[str]:
        key = qualified_key(entity)
        if key in self._factories:
            return [key]
        name = entity_key(entity)
        if "." in key:
            # a dotted path only falls back to a registration made by bare name
            return [name] if name in self._factories else []
        return [k for k in self._factories if entity_key(k) == name]

    def register_for(self, entity: Any) -> Callable[[RepositoryFactory], RepositoryFactory]:
        """Class decorator registering a repository for ``entity``.

        Example:
            ```python
            @registry.register_for(User)
            class UserRepository(Repository[User]):
                def __init__(self, db: Session):
                    super().__init__(db, User)
            ```
        """
        def decorator(factory: RepositoryFactory) -> RepositoryFactory:
            self.register(entity, factory)
            return factory
        return decorator

    def unregister(self, entity: Any) -> None:
        """Remove the repositories registered for an entity, if any."""
        for key in self._matching_keys(entity):
            del self._factories[key]

    def is_registered(self, entity: Any) -> bool:
        """Return True if a repository is registered for the entity."""
        return bool(self._matching_keys(entity))

    def registered(self) -> List[str]:
        """Return the registered model paths and names, sorted."""
        return sorted(self._factories)

    def resolve(self, entity: Any, db: Session) -> Any:
        """Instantiate the repository registered for an entity.

        Args:
            entity: Model class, instance or name
            db: Session handed to the repository factory

        Returns:
            The repository instance

        Raises:
            RepositoryNotFoundError: If no repository is registered, or a bare
                name matches repositories of several models
        """
        keys = self._matching_keys(entity)
        name = entity_key(entity)
        if not keys:
            raise RepositoryNotFoundError(
                f"Repository '{name}Repository' for entity '{name}' not found."
            )
        if len(keys) > 1:
            raise RepositoryNotFoundError(
                f"Entity '{name}' is ambiguous, use one of: {', '.join(sorted(keys))}"
            )
        return self._factories[keys[0]](db)

    def autodiscover(self, package: str) -> List[str]:
        """Import every module of ``package`` so decorated repositories register.

        Args:
            package: Dotted package name, e.g. ``"app.repositories"``

        Returns:
            List[str]: Names of the imported modules
        """
        pkg = importlib.import_module(package)
        imported = []
        for module_info in pkgutil.iter_modules(getattr(pkg, "__path__", []), prefix=f"{package}."):
            importlib.import_module(module_info.name)
            imported.append(module_info.name)
        logger.info(f"Discovered {len(imported)} repository modules in {package}")
        return imported

    def clear(self) -> None:
        self._factories.clear()


default_registry = RepositoryRegistry()


def register_repository(entity: Any) -> Callable[[RepositoryFactory], RepositoryFactory]:
    """Register a repository class in the default registry."""
    return default_registry.register_for(entity)
