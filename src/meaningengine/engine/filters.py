"""Typed filter conditions for catalog entries.

Conditions are small frozen dataclasses tested against one field value.
They are combined per field into an ``EntryQuery`` (logical AND), built
either fluently::

    query = where("year").gte(2019) & where("tags").contains("ai")

or parsed from the operator-mapping form::

    EntryQuery.from_mapping({"year": {"$gte": 2019}, "tags": "ai"})

A field absent from the entry only satisfies the negative conditions
(``NotEqual`` and ``NotIn``). Values that cannot be ordered against the
operand never match a comparison.
"""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from meaningengine.models.records import CatalogEntry
from meaningengine.models.records import is_sequence

EntryPredicate = Callable[[CatalogEntry], bool]

_MISSING: Any = object()


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FilterCondition:
    """Base for single-field conditions."""

    def test(self, value: Any) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Equals(FilterCondition):
    """Equality; a sequence field matches when it contains the operand."""

    operand: Any

    def test(self, value: Any) -> bool:
        if value is _MISSING:
            return False
        if is_sequence(value) and not is_sequence(self.operand):
            return self.operand in value
        return value == self.operand


@dataclass(frozen=True)
class NotEqual(FilterCondition):
    operand: Any

    def test(self, value: Any) -> bool:
        return value is _MISSING or value != self.operand


@dataclass(frozen=True)
class GreaterThan(FilterCondition):
    operand: Any

    def test(self, value: Any) -> bool:
        return _compare(value, lambda v: v > self.operand)


@dataclass(frozen=True)
class GreaterOrEqual(FilterCondition):
    operand: Any

    def test(self, value: Any) -> bool:
        return _compare(value, lambda v: v >= self.operand)


@dataclass(frozen=True)
class LessThan(FilterCondition):
    operand: Any

    def test(self, value: Any) -> bool:
        return _compare(value, lambda v: v < self.operand)


@dataclass(frozen=True)
class LessOrEqual(FilterCondition):
    operand: Any

    def test(self, value: Any) -> bool:
        return _compare(value, lambda v: v <= self.operand)


@dataclass(frozen=True)
class In(FilterCondition):
    operands: tuple[Any, ...]

    def test(self, value: Any) -> bool:
        return value is not _MISSING and value in self.operands


@dataclass(frozen=True)
class NotIn(FilterCondition):
    operands: tuple[Any, ...]

    def test(self, value: Any) -> bool:
        return value is _MISSING or value not in self.operands


@dataclass(frozen=True)
class Contains(FilterCondition):
    """Matches sequence fields holding the operand."""

    operand: Any

    def test(self, value: Any) -> bool:
        return is_sequence(value) and self.operand in value


def _compare(value: Any, comparison: Callable[[Any], Any]) -> bool:
    if value is _MISSING or value is None:
        return False
    try:
        return bool(comparison(value))
    except TypeError:
        return False


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldCondition:
    """A condition bound to the entry field it tests."""

    field: str
    condition: FilterCondition

    def matches(self, entry: Mapping[str, Any]) -> bool:
        value = entry.get(self.field, _MISSING) if isinstance(entry, Mapping) else _MISSING
        return self.condition.test(value)


@dataclass(frozen=True)
class EntryQuery:
    """Conjunction of field conditions; callable as an entry predicate."""

    conditions: tuple[FieldCondition, ...] = ()

    def matches(self, entry: Mapping[str, Any]) -> bool:
        return all(condition.matches(entry) for condition in self.conditions)

    def __call__(self, entry: Mapping[str, Any]) -> bool:
        return self.matches(entry)

    def __and__(self, other: EntryQuery | FieldCondition) -> EntryQuery:
        if isinstance(other, FieldCondition):
            return EntryQuery((*self.conditions, other))
        if isinstance(other, EntryQuery):
            return EntryQuery((*self.conditions, *other.conditions))
        return NotImplemented

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> EntryQuery:
        """Parse ``{field: value | {"$op": operand, ...}}`` into a query.

        Raises ``ValueError`` for unknown ``$`` operators or a non-list
        ``$in``/``$nin`` operand.
        """
        conditions: list[FieldCondition] = []
        for field_name, value in mapping.items():
            if isinstance(value, Mapping) and any(
                isinstance(key, str) and key.startswith("$") for key in value
            ):
                conditions.extend(
                    FieldCondition(field_name, _parse_operator(op, operand))
                    for op, operand in value.items()
                )
            else:
                conditions.append(FieldCondition(field_name, Equals(value)))
        return cls(tuple(conditions))


def _as_operands(op: str, operand: Any) -> tuple[Any, ...]:
    if isinstance(operand, (list, tuple, set, frozenset)):
        return tuple(operand)
    msg = f"Filter operator {op} expects a list, got {type(operand).__name__}"
    raise ValueError(msg)


def _parse_operator(op: str, operand: Any) -> FilterCondition:
    if op == "$in":
        return In(_as_operands(op, operand))
    if op == "$nin":
        return NotIn(_as_operands(op, operand))
    factory = _OPERATORS.get(op)
    if factory is None:
        msg = f"Unknown filter operator: {op}"
        raise ValueError(msg)
    return factory(operand)


_OPERATORS: dict[str, Callable[[Any], FilterCondition]] = {
    "$gt": GreaterThan,
    "$gte": GreaterOrEqual,
    "$lt": LessThan,
    "$lte": LessOrEqual,
    "$ne": NotEqual,
    "$contains": Contains,
}


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class FieldBuilder:
    """Fluent builder returned by :func:`where`."""

    def __init__(self, field: str) -> None:
        self._field = field

    def _query(self, condition: FilterCondition) -> EntryQuery:
        return EntryQuery((FieldCondition(self._field, condition),))

    def eq(self, value: Any) -> EntryQuery:
        return self._query(Equals(value))

    def ne(self, value: Any) -> EntryQuery:
        return self._query(NotEqual(value))

    def gt(self, value: Any) -> EntryQuery:
        return self._query(GreaterThan(value))

    def gte(self, value: Any) -> EntryQuery:
        return self._query(GreaterOrEqual(value))

    def lt(self, value: Any) -> EntryQuery:
        return self._query(LessThan(value))

    def lte(self, value: Any) -> EntryQuery:
        return self._query(LessOrEqual(value))

    def isin(self, values: Iterable[Any]) -> EntryQuery:
        return self._query(In(tuple(values)))

    def notin(self, values: Iterable[Any]) -> EntryQuery:
        return self._query(NotIn(tuple(values)))

    def contains(self, value: Any) -> EntryQuery:
        return self._query(Contains(value))


def where(field: str) -> FieldBuilder:
    return FieldBuilder(field)


def as_predicate(predicate: object) -> EntryPredicate:
    """Normalise a callable, mapping or ``EntryQuery`` to an entry predicate."""
    if callable(predicate):
        return predicate
    if isinstance(predicate, Mapping):
        return EntryQuery.from_mapping(predicate)
    msg = f"Unsupported filter predicate: {type(predicate).__name__}"
    raise TypeError(msg)
