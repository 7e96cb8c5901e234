"""
Entity manager interface.

This module defines the contract every repository fulfils: CRUD operations,
declarative queries, raw SQL, deferred persistence and transaction control.
Any class implementing this interface must provide concrete implementations
of all of these methods.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from sqlalchemy.orm import Session


class EntityManagerInterface(ABC):
    """Abstract base class for entity managers."""

    @abstractmethod
    def get_repository(self, entity: Any, registry: Any = None) -> Any:
        """Get the repository registered for an entity.

        Args:
            entity: Model class or model name
            registry: Registry to resolve from, the default registry if omitted

        Returns:
            The repository instance, sharing this manager's session
        """
        pass

    @abstractmethod
    def find_one_by(self, criteria: Mapping[str, Any], orders: Any = None) -> Optional[Any]:
        """Find one result according to the given criteria."""
        pass

    @abstractmethod
    def find_all(self) -> List[Any]:
        """Return all records."""
        pass

    @abstractmethod
    def find_by(self, filters: Optional[Mapping[str, Any]] = None, orders: Any = None) -> List[Any]:
        """Return records matching the filters, sorted by the order spec."""
        pass

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[Any]:
        """Return a single record by primary key."""
        pass

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Any:
        """Create a record from the given attributes."""
        pass

    @abstractmethod
    def update(self, id: Any, data: Dict[str, Any]) -> Optional[Any]:
        """Update a record by its primary key."""
        pass

    @abstractmethod
    def delete(self, id: Any) -> None:
        """Delete a record by its primary key."""
        pass

    @abstractmethod
    def native_query(
        self,
        sql: str,
        bindings: Optional[Union[Mapping[str, Any], Sequence[Any]]] = None,
        is_select: bool = True,
    ) -> Union[List[Dict[str, Any]], bool]:
        """Execute a native SQL statement with optional bindings.

        Args:
            sql: The raw SQL statement
            bindings: Named (mapping) or positional (sequence) parameters
            is_select: If True, return the result rows. Otherwise execute
                the statement as a write and return True

        Returns:
            List of row dicts for selects, True for other statements
        """
        pass

    @abstractmethod
    def persist(self, entity: Any) -> None:
        """Stage an entity to be saved on the next flush."""
        pass

    @abstractmethod
    def flush(self) -> None:
        """Save every staged entity."""
        pass

    @abstractmethod
    def get_connection(self) -> Session:
        """Return the underlying database session."""
        pass

    @abstractmethod
    def begin_transaction(self) -> None:
        """Begin a database transaction."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """Commit the database transaction."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Roll back the database transaction."""
        pass
