"""Store-neutral filter predicates.

Each record store translates these into its own dialect (SQLAlchemy Core for Postgres,
PostgREST query syntax for the data API). `Contains` is a case-insensitive substring match
(ILIKE); `%`, `_` and `*` in the value are literal characters.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Union


@dataclass(frozen=True)
class Contains:
    field: str
    value: str


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class In:
    field: str
    values: tuple[Any, ...]


@dataclass(frozen=True)
class AnyOf:
    """OR combinator."""
    predicates: tuple["Predicate", ...]


@dataclass(frozen=True)
class AllOf:
    """AND combinator."""
    predicates: tuple["Predicate", ...]


Predicate = Union[Contains, Equals, In, AnyOf, AllOf]


def any_of(predicates: Iterable[Predicate]) -> AnyOf:
    return AnyOf(tuple(predicates))


def all_of(predicates: Iterable[Predicate]) -> AllOf:
    return AllOf(tuple(predicates))


def in_(field: str, values: Iterable[Any]) -> In:
    return In(field, tuple(values))


def contains_any_field(fields: Iterable[str], values: Iterable[str]) -> AnyOf:
    """OR of `Contains(field, value)` for every value x field, value-major."""
    fields = tuple(fields)
    return any_of(Contains(f, v) for v in values for f in fields)


def evaluate(predicate: Predicate, row: dict[str, Any]) -> bool:
    """Evaluate a predicate against a plain row dict (used by in-memory stores)."""
    if isinstance(predicate, Contains):
        value = row.get(predicate.field)
        return isinstance(value, str) and predicate.value.lower() in value.lower()
    if isinstance(predicate, Equals):
        return _same(row.get(predicate.field), predicate.value)
    if isinstance(predicate, In):
        value = row.get(predicate.field)
        return any(_same(value, v) for v in predicate.values)
    if isinstance(predicate, AnyOf):
        return any(evaluate(p, row) for p in predicate.predicates)
    if isinstance(predicate, AllOf):
        return all(evaluate(p, row) for p in predicate.predicates)
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def _same(left: Any, right: Any) -> bool:
    # Identifiers may come back as int from SQL and as str from query strings
    if left == right:
        return True
    return left is not None and right is not None and str(left) == str(right)
