"""
Filter Model

Immutable predicates that the composer turns into WHERE fragments.

A filter comes in one of three shapes:

- ``RootFilter``               constrains the node being returned (``n``)
- ``NestedNodeFilter``         constrains a node reached over a relationship
- ``NestedRelationshipFilter`` constrains the relationship entity itself (``r``)

How the predicate text is rendered is delegated to a ``FilterFunction``
(plain property comparison by default, or a spatial distance check).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator, Protocol


class BooleanOperator(str, Enum):
    """Links a filter to the one before it in a chain."""

    NONE = ""
    AND = "AND"
    OR = "OR"


class ComparisonOperator(str, Enum):
    EQUALS = "="
    NOT_EQUALS = "<>"
    GREATER_THAN = ">"
    GREATER_THAN_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_EQUAL = "<="
    STARTING_WITH = "STARTS WITH"
    ENDING_WITH = "ENDS WITH"
    CONTAINING = "CONTAINS"
    IN = "IN"
    MATCHES = "=~"
    EXISTS = "EXISTS"
    IS_NULL = "IS NULL"
    IS_TRUE = "IS TRUE"

    @property
    def is_unary(self) -> bool:
        """Unary operators take no parameter."""
        return self in (ComparisonOperator.EXISTS, ComparisonOperator.IS_NULL, ComparisonOperator.IS_TRUE)


class RelationshipDirection(str, Enum):
    INCOMING = "INCOMING"
    OUTGOING = "OUTGOING"
    UNDIRECTED = "UNDIRECTED"


def quote_identifier(name: str) -> str:
    """Backtick-quote a label, relationship type, property or parameter name.

    Embedded backticks are doubled so the name can never close the quote.
    """
    escaped = name.replace("`", "``")
    return f"`{escaped}`"


def placeholder(name: str) -> str:
    """Render a named parameter placeholder, e.g. ``{ `name_0` }``."""
    return f"{{ {quote_identifier(name)} }}"


# ─── Filter functions ──────────────────────────────────────


class FilterFunction(Protocol):
    """Renders the predicate body and the parameters it binds."""

    def expression(self, filter: Filter, identifier: str, parameter_name: str) -> str: ...

    def parameters(self, filter: Filter, parameter_name: str) -> dict[str, Any]: ...


class PropertyComparison:
    """``n.`prop` <op> { `param` }`` and the unary variants."""

    def expression(self, filter: Filter, identifier: str, parameter_name: str) -> str:
        prop = f"{identifier}.{quote_identifier(filter.property_name)}"
        match filter.comparison:
            case ComparisonOperator.EXISTS:
                return f"exists({prop}) "
            case ComparisonOperator.IS_NULL:
                return f"{prop} IS NULL "
            case ComparisonOperator.IS_TRUE:
                return f"{prop} = true "
            case operator:
                return f"{prop} {operator.value} {placeholder(parameter_name)} "

    def parameters(self, filter: Filter, parameter_name: str) -> dict[str, Any]:
        if filter.comparison.is_unary:
            return {}
        return {parameter_name: filter.value}


@dataclass(frozen=True)
class DistanceFromPoint:
    """A point and a radius, in the units of the database's distance()."""

    latitude: float
    longitude: float
    distance: float


class DistanceComparison:
    """Compares the distance between the node's point and a fixed point."""

    def expression(self, filter: Filter, identifier: str, parameter_name: str) -> str:
        suffix = parameter_name.rsplit("_", 1)[-1]
        return (
            f"distance(point({identifier}),"
            f"point({{latitude:{placeholder('lat_' + suffix)}, longitude:{placeholder('lon_' + suffix)}}})) "
            f"{filter.comparison.value} {placeholder('distance_' + suffix)} "
        )

    def parameters(self, filter: Filter, parameter_name: str) -> dict[str, Any]:
        point = filter.value
        if not isinstance(point, DistanceFromPoint):
            raise TypeError(
                f"DistanceComparison needs a DistanceFromPoint value, got {type(point).__name__}"
            )
        suffix = parameter_name.rsplit("_", 1)[-1]
        return {
            f"lat_{suffix}": point.latitude,
            f"lon_{suffix}": point.longitude,
            f"distance_{suffix}": point.distance,
        }


PROPERTY_COMPARISON = PropertyComparison()
DISTANCE = DistanceComparison()


# ─── Filter variants ──────────────────────────────────────


@dataclass(frozen=True)
class Filter:
    """Fields common to every filter shape."""

    property_name: str
    value: Any = None
    comparison: ComparisonOperator = ComparisonOperator.EQUALS
    boolean_operator: BooleanOperator = BooleanOperator.NONE
    negated: bool = False
    function: FilterFunction = field(default=PROPERTY_COMPARISON, compare=False)

    @property
    def is_nested(self) -> bool:
        return False

    def parameter_name(self, index: int) -> str:
        """Name of this filter's parameter when it sits at ``index`` in its chain."""
        return f"{self.property_name}_{index}"

    def to_cypher(self, identifier: str, add_where: bool, index: int) -> str:
        """Render ``WHERE``/``AND``/``OR`` plus the predicate for ``identifier``."""
        prefix = "WHERE " if add_where else f"{self.boolean_operator.value} "
        fragment = self.function.expression(self, identifier, self.parameter_name(index))
        if self.negated:
            fragment = f"NOT({fragment.rstrip()}) "
        return prefix + fragment

    def parameters(self, index: int) -> dict[str, Any]:
        return self.function.parameters(self, self.parameter_name(index))


@dataclass(frozen=True)
class RootFilter(Filter):
    """Constrains the node being returned."""


@dataclass(frozen=True, kw_only=True)
class NestedNodeFilter(Filter):
    """Constrains a related node reached from the root over ``relationship_type``."""

    nested_property_name: str
    nested_entity_label: str
    relationship_type: str
    relationship_direction: RelationshipDirection = RelationshipDirection.OUTGOING

    @property
    def is_nested(self) -> bool:
        return True

    def parameter_name(self, index: int) -> str:
        return f"{self.nested_property_name}_{self.property_name}_{index}"


@dataclass(frozen=True, kw_only=True)
class NestedRelationshipFilter(Filter):
    """Constrains an attribute of the relationship entity itself."""

    nested_property_name: str
    relationship_type: str
    relationship_direction: RelationshipDirection = RelationshipDirection.OUTGOING

    @property
    def is_nested(self) -> bool:
        return True

    def parameter_name(self, index: int) -> str:
        return f"{self.nested_property_name}_{self.property_name}_{index}"


class Filters:
    """An ordered, immutable chain of filters."""

    def __init__(self, filters: Iterable[Filter] = ()):
        self._filters: tuple[Filter, ...] = tuple(filters)

    def add(self, filter: Filter) -> Filters:
        """Return a new chain with ``filter`` appended."""
        return Filters(self._filters + (filter,))

    def __iter__(self) -> Iterator[Filter]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __bool__(self) -> bool:
        return bool(self._filters)

    def __getitem__(self, index: int) -> Filter:
        return self._filters[index]

    def __repr__(self) -> str:
        return f"Filters({list(self._filters)!r})"
