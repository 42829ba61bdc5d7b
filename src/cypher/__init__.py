"""Cypher query construction: filters, composition, depth strategies and requests."""

from src.cypher.aggregates import AggregateStatements
from src.cypher.composer import ComposedQuery, compose
from src.cypher.depth_query import VariableDepthQuery, strategy_for_depth
from src.cypher.filters import (
    BooleanOperator,
    ComparisonOperator,
    DistanceComparison,
    DistanceFromPoint,
    Filters,
    NestedNodeFilter,
    NestedRelationshipFilter,
    RelationshipDirection,
    RootFilter,
)
from src.cypher.requests import (
    GraphModelRequest,
    GraphRowListModelRequest,
    ResultShape,
    RowModelRequest,
    Statement,
)
from src.cypher.sort_order import Direction, Pagination, SortOrder

__all__ = [
    "AggregateStatements",
    "BooleanOperator",
    "ComparisonOperator",
    "ComposedQuery",
    "Direction",
    "DistanceComparison",
    "DistanceFromPoint",
    "Filters",
    "GraphModelRequest",
    "GraphRowListModelRequest",
    "NestedNodeFilter",
    "NestedRelationshipFilter",
    "Pagination",
    "RelationshipDirection",
    "ResultShape",
    "RootFilter",
    "RowModelRequest",
    "SortOrder",
    "Statement",
    "VariableDepthQuery",
    "compose",
    "strategy_for_depth",
]
