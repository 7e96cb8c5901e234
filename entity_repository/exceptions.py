"""
Custom exceptions for the repository package.

Lookups that find nothing return ``None`` instead of raising. Errors coming
from the database itself (``sqlalchemy.exc.*``) are never wrapped and reach
the caller unchanged.
"""


class RepositoryError(Exception):
    """Base exception for repository-related errors."""
    pass


class RepositoryNotFoundError(RepositoryError, LookupError):
    """Raised when no repository is registered for an entity."""
    pass


class ModelNotFoundError(RepositoryError, LookupError):
    """Raised when the generator cannot import the requested model class."""
    pass


class RepositoryAlreadyExistsError(RepositoryError, FileExistsError):
    """Raised when the generator would overwrite an existing repository module."""
    pass


class InvalidColumnError(RepositoryError, ValueError):
    """Raised when a filter or order key is not a mapped column of the model."""
    pass


class InvalidOrderError(RepositoryError, ValueError):
    """Raised when an order directive cannot be parsed."""
    pass


class TransactionError(RepositoryError):
    """Raised when begin_transaction is called inside an explicit transaction."""
    pass
