"""
Translation of declarative filters and order specs into SQLAlchemy clauses.

A filter is a mapping of column name to value. Scalar values become equality
predicates and sequences become ``IN`` predicates; all keys are AND-ed.

An order spec is either a bare column name, a single ``(column, direction)``
pair, a sequence of bare names and ``(column, direction)`` pairs, or a
mapping of column name to direction.
Precedence follows the order in which directives are listed.
"""

from collections.abc import Mapping as MappingABC, Sequence as SequenceABC
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Type, Union

from sqlalchemy import inspect
from sqlalchemy.orm import ColumnProperty

from entity_repository.exceptions import InvalidColumnError, InvalidOrderError

ASC = "asc"
DESC = "desc"

OrderDirective = Union[str, Tuple[str, str], Sequence[str]]
OrderSpec = Union[str, Mapping[str, str], Sequence[OrderDirective]]


def is_sequence_value(value: Any) -> bool:
    """Return True if a filter value should be matched by membership."""
    if isinstance(value, (str, bytes, bytearray)):
        return False
    if isinstance(value, MappingABC):
        return False
    return isinstance(value, (SequenceABC, set, frozenset))


def get_column(model: Type[Any], name: str):
    """
    Get the mapped column attribute ``name`` of ``model``.

    Only column properties qualify; relationships, hybrid properties and
    plain Python attributes are rejected so the query never silently ignores
    a key.
    """
    mapper = inspect(model)
    prop = mapper.attrs.get(name) if isinstance(name, str) else None
    if not isinstance(prop, ColumnProperty):
        raise InvalidColumnError(
            f"'{name}' is not a column of {model.__name__}"
        )
    return getattr(model, name)


def build_predicates(model: Type[Any], filters: Optional[Mapping[str, Any]]) -> List[Any]:
    """Build one WHERE clause per filter entry."""
    predicates = []
    for key, value in (filters or {}).items():
        column = get_column(model, key)
        if is_sequence_value(value):
            predicates.append(column.in_(list(value)))
        else:
            predicates.append(column == value)
    return predicates


def normalize_direction(direction: Any) -> str:
    """Return ``asc`` or ``desc`` for a user supplied direction."""
    if not isinstance(direction, str) or direction.strip().lower() not in (ASC, DESC):
        raise InvalidOrderError(f"Invalid sort direction: {direction!r}")
    return direction.strip().lower()


def _is_order_pair(orders: Any) -> bool:
    # ("name", "desc") names one column, not the columns "name" and "desc"
    return (
        isinstance(orders, (tuple, list))
        and len(orders) == 2
        and all(isinstance(item, str) for item in orders)
        and orders[1].strip().lower() in (ASC, DESC)
    )


def parse_order_spec(orders: Optional[OrderSpec]) -> List[Tuple[str, str]]:
    """
    Normalize an order spec into a list of ``(column, direction)`` tuples.

    Examples:
        >>> parse_order_spec("name")
        [('name', 'asc')]
        >>> parse_order_spec(["status", ("created_at", "DESC")])
        [('status', 'asc'), ('created_at', 'desc')]
        >>> parse_order_spec(("name", "desc"))
        [('name', 'desc')]
        >>> parse_order_spec({"name": "desc"})
        [('name', 'desc')]
    """
    if not orders:
        return []
    if isinstance(orders, str):
        return [(orders, ASC)]
    if isinstance(orders, MappingABC):
        return [(column, normalize_direction(direction)) for column, direction in orders.items()]
    if _is_order_pair(orders):
        return [(orders[0], normalize_direction(orders[1]))]

    parsed = []
    for directive in orders:
        if isinstance(directive, str):
            parsed.append((directive, ASC))
        elif isinstance(directive, (tuple, list)) and len(directive) == 2:
            column, direction = directive
            if not isinstance(column, str):
                raise InvalidOrderError(f"Invalid order column: {column!r}")
            parsed.append((column, normalize_direction(direction)))
        else:
            raise InvalidOrderError(f"Invalid order directive: {directive!r}")
    return parsed


def build_order_by(model: Type[Any], orders: Optional[OrderSpec]) -> List[Any]:
    """Build ORDER BY clauses for ``orders``."""
    clauses = []
    for column_name, direction in parse_order_spec(orders):
        column = get_column(model, column_name)
        clauses.append(column.desc() if direction == DESC else column.asc())
    return clauses

