"""Sort order and pagination fragments appended to the root node match."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.cypher.filters import quote_identifier


class Direction(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class SortClause:
    direction: Direction
    properties: tuple[str, ...]

    def to_cypher(self, identifier: str) -> str:
        suffix = " DESC" if self.direction == Direction.DESC else ""
        return ",".join(f"{identifier}.{quote_identifier(prop)}{suffix}" for prop in self.properties)


class SortOrder:
    """Ordered list of sort clauses, rendered as `` ORDER BY ...``.

    Usage::

        SortOrder().add("name").add("age", direction=Direction.DESC)
    """

    def __init__(self, clauses: tuple[SortClause, ...] = ()):
        self._clauses = clauses

    def add(self, *properties: str, direction: Direction = Direction.ASC) -> "SortOrder":
        if not properties:
            raise ValueError("SortOrder.add() needs at least one property")
        return SortOrder(self._clauses + (SortClause(direction, tuple(properties)),))

    def to_cypher(self, identifier: str = "n") -> str:
        if not self._clauses:
            return ""
        return " ORDER BY " + ",".join(c.to_cypher(identifier) for c in self._clauses)


@dataclass(frozen=True)
class Pagination:
    """Zero-based page of ``size`` root nodes."""

    page: int
    size: int

    def __post_init__(self) -> None:
        if self.page < 0 or self.size <= 0:
            raise ValueError(f"Invalid pagination: page={self.page}, size={self.size}")

    def to_cypher(self) -> str:
        return " SKIP { skip } LIMIT { limit }"

    def parameters(self) -> dict[str, Any]:
        return {"skip": self.page * self.size, "limit": self.size}
