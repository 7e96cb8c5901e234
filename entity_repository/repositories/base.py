"""
Base repository pattern implementation for database operations.

This module provides a generic repository that can be extended by specific
model repositories. It includes CRUD operations, declarative filtering and
ordering, raw SQL execution, deferred persistence and transaction helpers,
so every model is accessed the same way.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union

from sqlalchemy import inspect
from sqlalchemy.orm import Session
from sqlalchemy.sql import text

from entity_repository.exceptions import RepositoryError, TransactionError
from entity_repository.repositories.criteria import OrderSpec, build_order_by, build_predicates
from entity_repository.repositories.interfaces import EntityManagerInterface
from entity_repository.repositories.registry import RepositoryRegistry, default_registry

# Type variable for the model
T = TypeVar('T')

# Session.info key marking a transaction opened with begin_transaction()
EXPLICIT_TRANSACTION_KEY = "entity_repository.explicit_transaction"

logger = logging.getLogger(__name__)


class EntityRepository(EntityManagerInterface, Generic[T]):
    """
    Generic repository for database operations.

    This class provides common operations for any SQLAlchemy mapped model.
    It can be extended by specific model repositories to add custom queries.

    Writes are committed immediately unless an explicit transaction was
    started with ``begin_transaction()``; in that case they are only flushed
    and the caller decides whether to commit or roll back.

    Attributes:
        db (Session): SQLAlchemy database session
        model (Type[T]): SQLAlchemy model class, None for a bare entity manager
    """

    def __init__(self, db: Session, model: Optional[Type[T]] = None):
        """
        Initialize the repository with a database session and model class.

        Args:
            db (Session): SQLAlchemy database session
            model (Type[T], optional): SQLAlchemy model class
        """
        self.db = db
        self.model = model
        self._pending: List[T] = []

    def get_repository(self, entity: Any, registry: Optional[RepositoryRegistry] = None) -> "EntityRepository":
        """
        Get the repository registered for an entity.

        The resolved repository shares this repository's session, so both
        take part in the same transaction.

        Args:
            entity: Model class or model name
            registry (RepositoryRegistry, optional): Registry to use instead
                of the default one

        Returns:
            EntityRepository: The registered repository instance

        Raises:
            RepositoryNotFoundError: If no repository is registered for the entity

        Example:
            ```python
            user = manager.get_repository(User).get_by_id(user_id)
            ```
        """
        return (registry or default_registry).resolve(entity, self.db)

    def find_all(self) -> List[T]:
        """
        Get all records of the model.

        Returns:
            List[T]: List of model instances in the database's default order
        """
        return self.db.query(self._require_model()).all()

    def find_by(self, filters: Optional[Mapping[str, Any]] = None, orders: Optional[OrderSpec] = None) -> List[T]:
        """
        Find records matching every filter, sorted by the order spec.

        Args:
            filters (Mapping[str, Any], optional): Column name to value. A
                sequence value matches any of its items, other values
                match by equality
            orders (OrderSpec, optional): Column names, (column, direction)
                pairs or a {column: direction} mapping

        Returns:
            List[T]: Matching model instances

        Raises:
            InvalidColumnError: If a key is not a column of the model
            InvalidOrderError: If an order directive is malformed
        """
        model = self._require_model()
        query = self.db.query(model).filter(*build_predicates(model, filters))
        order_by = build_order_by(model, orders)
        if order_by:
            query = query.order_by(*order_by)
        logger.debug(f"find_by on {model.__name__}: filters={filters!r} orders={orders!r}")
        return query.all()

    def find_one_by(self, criteria: Mapping[str, Any], orders: Optional[OrderSpec] = None) -> Optional[T]:
        """
        Find the first record matching every criterion.

        Without ``orders`` the record returned among several matches is
        whichever the database yields first.

        Args:
            criteria (Mapping[str, Any]): Same rules as ``find_by`` filters
            orders (OrderSpec, optional): Sort applied before picking the first row

        Returns:
            Optional[T]: Model instance if found, None otherwise
        """
        model = self._require_model()
        query = self.db.query(model).filter(*build_predicates(model, criteria))
        order_by = build_order_by(model, orders)
        if order_by:
            query = query.order_by(*order_by)
        return query.first()

    def get_by_id(self, id: Any) -> Optional[T]:
        """
        Get a record by primary key.

        Args:
            id (Any): Primary key value

        Returns:
            Optional[T]: Model instance if found, None otherwise
        """
        return self.db.get(self._require_model(), id)

    def create(self, data: Dict[str, Any]) -> T:
        """
        Create a new record.

        Args:
            data (Dict[str, Any]): Dictionary of field values

        Returns:
            T: Created model instance, including store-assigned values
        """
        db_item = self._require_model()(**data)
        self.db.add(db_item)
        self._save()
        self.db.refresh(db_item)
        return db_item

    def update(self, id: Any, data: Dict[str, Any]) -> Optional[T]:
        """
        Update a record by primary key.

        Args:
            id (Any): Primary key value
            data (Dict[str, Any]): Dictionary of field values to update

        Returns:
            Optional[T]: Updated model instance if found, None otherwise
        """
        db_item = self.get_by_id(id)
        if db_item is None:
            return None

        attrs = inspect(self.model).attrs
        for key, value in data.items():
            if key in attrs:
                setattr(db_item, key, value)
            else:
                logger.debug(f"Skipping unknown attribute '{key}' for {self.model.__name__}")
        self._save()
        self.db.refresh(db_item)
        return db_item

    def delete(self, id: Any) -> None:
        """
        Delete a record by primary key.

        Deleting a record that does not exist is a no-op.

        Args:
            id (Any): Primary key value
        """
        db_item = self.get_by_id(id)
        if db_item is not None:
            self.db.delete(db_item)
            self._save()

    def native_query(
        self,
        sql: str,
        bindings: Optional[Union[Mapping[str, Any], Sequence[Any]]] = None,
        is_select: bool = True,
    ) -> Union[List[Dict[str, Any]], bool]:
        """
        Execute a native SQL statement.

        Mapping bindings are passed as named parameters (``:name``). Sequence
        bindings are passed positionally to the DBAPI driver, so the
        placeholders must follow the driver's paramstyle (``?`` for sqlite3,
        ``%s`` for psycopg2). Values are never interpolated into the SQL.

        Args:
            sql (str): The raw SQL statement
            bindings: Named or positional parameters
            is_select (bool): Return rows if True, otherwise execute as a write

        Returns:
            List[Dict[str, Any]] for selects, True for other statements
        """
        if bindings is None or isinstance(bindings, Mapping):
            result = self.db.execute(text(sql), dict(bindings or {}))
        else:
            result = self.db.connection().exec_driver_sql(sql, tuple(bindings))

        if is_select:
            return [dict(row) for row in result.mappings()]

        self._save()
        return True

    def persist(self, entity: T) -> None:
        """
        Stage an entity to be saved by the next ``flush()``.

        Args:
            entity (T): Model instance to save later
        """
        self._pending.append(entity)

    def flush(self) -> None:
        """
        Save every staged entity in the order it was staged.

        Each entity is added and flushed in turn, then the batch is saved
        once. If a save fails the error propagates unchanged, the remaining
        entities are not attempted and the staged list is kept so the caller
        can roll back and retry or call ``clear_pending()``.
        """
        if not self._pending:
            return

        for entity in self._pending:
            self.db.add(entity)
            self.db.flush()
        self._save()

        logger.debug(f"Flushed {len(self._pending)} staged entities")
        self._pending = []

    @property
    def pending(self) -> Tuple[T, ...]:
        """Entities staged for the next flush."""
        return tuple(self._pending)

    def clear_pending(self) -> None:
        """Drop every staged entity without saving it."""
        self._pending = []

    def get_connection(self) -> Session:
        """
        Get the database session backing this repository.

        Returns:
            Session: SQLAlchemy database session
        """
        return self.db

    def in_transaction(self) -> bool:
        """Return True while a transaction started by begin_transaction() is open."""
        return bool(self.db.info.get(EXPLICIT_TRANSACTION_KEY))

    def begin_transaction(self) -> None:
        """
        Begin a database transaction.

        A transaction the session already started on its own (for example by
        an earlier read) is adopted rather than replaced.

        Raises:
            TransactionError: If a transaction is already open; nesting is
                not supported
        """
        if self.in_transaction():
            raise TransactionError("A transaction is already active on this session")
        if not self.db.in_transaction():
            self.db.begin()
        self.db.info[EXPLICIT_TRANSACTION_KEY] = True

    def commit(self) -> None:
        """
        Commit the current database transaction.

        The transaction stops being explicit even when the commit fails, so
        later writes go back to committing on their own.
        """
        try:
            self.db.commit()
        finally:
            self.db.info.pop(EXPLICIT_TRANSACTION_KEY, None)

    def rollback(self) -> None:
        """Roll back the current database transaction."""
        try:
            self.db.rollback()
        finally:
            self.db.info.pop(EXPLICIT_TRANSACTION_KEY, None)

    @contextmanager
    def transaction(self) -> Iterator["EntityRepository[T]"]:
        """
        Run a block inside a transaction.

        Commits when the block succeeds, rolls back and re-raises otherwise.

        Example:
            ```python
            with repo.transaction():
                repo.create({"name": "a"})
                repo.create({"name": "b"})
            ```
        """
        self.begin_transaction()
        try:
            yield self
            self.commit()
        except BaseException:
            self.rollback()
            raise

    def _save(self) -> None:
        """Commit, or only flush while an explicit transaction is open."""
        if self.in_transaction():
            self.db.flush()
        else:
            self.db.commit()

    def _require_model(self) -> Type[T]:
        if self.model is None:
            raise RepositoryError(f"{type(self).__name__} is not bound to a model")
        return self.model


class Repository(EntityRepository[T]):
    """
    Base class for model-specific repositories.

    Generated repositories extend this class and bind their model in the
    constructor; custom queries are added as methods on the subclass.
    """
    pass
