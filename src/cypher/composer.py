"""
Filter Composer

Walks an ordered filter chain and groups predicates by the node they
constrain, producing the ``MATCH ...`` prefix of a filtered query plus
its parameter map.

One composition pass owns a ``ClauseArena``; nothing is shared between
calls, so composing from several threads needs no locking.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from src.cypher.filters import (
    BooleanOperator,
    Filter,
    Filters,
    NestedNodeFilter,
    NestedRelationshipFilter,
    RelationshipDirection,
    RootFilter,
    quote_identifier,
)
from src.shared.exceptions import (
    FilterCompositionError,
    MissingOperatorError,
    UnsupportedFilterCombinationError,
)

logger = logging.getLogger("ogm.cypher.composer")

ROOT_IDENTIFIER = "n"
RELATIONSHIP_IDENTIFIER = "r"


@dataclass
class Clause:
    """A single ``MATCH`` fragment and the predicates appended to it."""

    text: str

    @property
    def has_where(self) -> bool:
        return " WHERE " in self.text

    def append(self, fragment: str) -> None:
        self.text += fragment


@dataclass
class ClauseArena:
    """Accumulators for one composition pass.

    ``match_clauses`` is keyed by node label (or by relationship type for a
    relationship-entity clause) and keeps first-seen order.
    ``relationship_clauses`` is keyed by ``(label, relationship_type)``.
    """

    match_clauses: dict[str, Clause] = field(default_factory=dict)
    relationship_clauses: dict[tuple[str, str], Clause] = field(default_factory=dict)
    identifiers: dict[str, str] = field(default_factory=dict)
    parameters: dict[str, Any] = field(default_factory=dict)
    relationship_entity_type: str | None = None

    def match_clause(self, label: str, identifier: str) -> Clause:
        """Fetch the clause for ``label``, creating it on first use."""
        clause = self.match_clauses.get(label)
        if clause is None:
            clause = Clause(f"MATCH ({identifier}:{quote_identifier(label)}) ")
            self.match_clauses[label] = clause
        return clause

    def render(self) -> str:
        """All match clauses in first-seen order, then all relationship clauses."""
        parts = [c.text for c in self.match_clauses.values()]
        parts.extend(c.text for c in self.relationship_clauses.values())
        return "".join(parts)


@dataclass(frozen=True)
class ComposedQuery:
    """The ``MATCH ...`` prefix of a filtered query and its parameters."""

    prefix: str
    parameters: dict[str, Any]


def relationship_clause(
    relationship_type: str,
    direction: RelationshipDirection,
    node_identifier: str,
    bind_relationship: bool = False,
) -> Clause:
    """Build ``MATCH (n)-[:`TYPE`]->(m0) `` for the given direction."""
    variable = RELATIONSHIP_IDENTIFIER if bind_relationship else ""
    left = "<" if direction == RelationshipDirection.INCOMING else ""
    right = ">" if direction == RelationshipDirection.OUTGOING else ""
    return Clause(
        f"MATCH ({ROOT_IDENTIFIER}){left}-[{variable}:{quote_identifier(relationship_type)}]-{right}({node_identifier}) "
    )


def _check_operator(filter: Filter, position: int) -> None:
    if position == 0:
        if filter.boolean_operator != BooleanOperator.NONE:
            raise FilterCompositionError(
                f"The first filter (property '{filter.property_name}') may not specify "
                f"the BooleanOperator {filter.boolean_operator.name}.",
                property_name=filter.property_name,
            )
    elif filter.boolean_operator == BooleanOperator.NONE:
        raise MissingOperatorError(
            f"BooleanOperator missing for filter with property name {filter.property_name}. "
            f"Only the first filter may not specify the BooleanOperator.",
            property_name=filter.property_name,
        )


def _target_clause(
    arena: ClauseArena, root_label: str, filter: Filter, nested_sequence: int
) -> tuple[Clause, str]:
    """Resolve which clause ``filter`` appends to and the identifier it uses."""
    match filter:
        case NestedRelationshipFilter():
            if filter.boolean_operator == BooleanOperator.OR:
                raise UnsupportedFilterCombinationError(
                    "OR is not supported for nested properties on an entity "
                    f"(property '{filter.property_name}')",
                    property_name=filter.property_name,
                )
            if arena.relationship_entity_type is not None:
                raise UnsupportedFilterCombinationError(
                    "Only one relationship entity filter is supported per query "
                    f"(property '{filter.property_name}')",
                    property_name=filter.property_name,
                )
            arena.relationship_entity_type = filter.relationship_type
            clause = relationship_clause(
                filter.relationship_type,
                filter.relationship_direction,
                f"m{nested_sequence}",
                bind_relationship=True,
            )
            arena.match_clauses[filter.relationship_type] = clause
            return clause, RELATIONSHIP_IDENTIFIER

        case NestedNodeFilter():
            if filter.boolean_operator == BooleanOperator.OR:
                raise UnsupportedFilterCombinationError(
                    "OR is not supported for nested properties on an entity "
                    f"(property '{filter.property_name}')",
                    property_name=filter.property_name,
                )
            label = filter.nested_entity_label
            if label == root_label:
                raise UnsupportedFilterCombinationError(
                    f"Nested label '{label}' is the root label; self-referencing nested "
                    f"filters are not supported (property '{filter.property_name}')",
                    property_name=filter.property_name,
                )
            identifier = arena.identifiers.get(label)
            if identifier is None:
                identifier = f"m{nested_sequence}"
                arena.identifiers[label] = identifier
                arena.relationship_clauses[(label, filter.relationship_type)] = relationship_clause(
                    filter.relationship_type, filter.relationship_direction, identifier
                )
            return arena.match_clause(label, identifier), identifier

        case RootFilter():
            return arena.match_clause(root_label, ROOT_IDENTIFIER), ROOT_IDENTIFIER

        case _:
            raise TypeError(f"Unknown filter shape: {type(filter).__name__}")


def compose(root_label: str, filters: Filters) -> ComposedQuery:
    """Compose the match/relationship clauses for ``filters`` on ``root_label``.

    The root node is always matched as ``n``, even when every filter is
    nested. Raises ``FilterCompositionError`` for misplaced boolean operators
    and ``UnsupportedFilterCombinationError`` for shapes the engine cannot
    express; nothing is returned in either case.
    """
    arena = ClauseArena()
    arena.match_clause(root_label, ROOT_IDENTIFIER)

    nested_sequence = 0
    for position, filter in enumerate(filters):
        _check_operator(filter, position)
        clause, identifier = _target_clause(arena, root_label, filter, nested_sequence)
        if filter.is_nested:
            nested_sequence += 1
        clause.append(filter.to_cypher(identifier, not clause.has_where, position))
        arena.parameters.update(filter.parameters(position))

    prefix = arena.render()
    logger.debug("Composed %d filter(s) on %s: %s", len(filters), root_label, prefix)
    return ComposedQuery(prefix=prefix, parameters=arena.parameters)
