"""
Transactional endpoint response parsing.

Turns the JSON body returned by ``/db/data/transaction`` into one
``QueryResult`` per statement. Rows are zipped with their column names;
graph payloads are kept as the raw ``{"nodes": [...], "relationships": [...]}``
maps for the hydration layer to consume.
"""

from dataclasses import dataclass, field
from typing import Any

from src.shared.exceptions import CypherExecutionError


@dataclass
class QueryResult:
    """Results of a single statement."""

    columns: list[str]
    rows: list[dict[str, Any]] = field(default_factory=list)
    graphs: list[dict[str, Any]] = field(default_factory=list)
    stats: dict[str, Any] | None = None

    def single_value(self) -> Any:
        """First column of the first row, e.g. the value of ``RETURN COUNT(n)``."""
        if not self.rows or not self.columns:
            return None
        return self.rows[0][self.columns[0]]


def raise_for_errors(payload: dict[str, Any]) -> None:
    errors = payload.get("errors") or []
    if errors:
        summary = "; ".join(
            f"{e.get('code', 'UnknownError')}: {e.get('message', '')}" for e in errors
        )
        raise CypherExecutionError(f"Statement execution failed: {summary}", errors=errors)


def parse_response(payload: dict[str, Any]) -> list[QueryResult]:
    """Parse a transactional endpoint body.

    Raises:
        CypherExecutionError: If the body reports any errors.
    """
    raise_for_errors(payload)
    results: list[QueryResult] = []
    for result in payload.get("results", []):
        columns = list(result.get("columns", []))
        parsed = QueryResult(columns=columns, stats=result.get("stats"))
        for datum in result.get("data", []):
            if "row" in datum:
                parsed.rows.append(dict(zip(columns, datum["row"])))
            if "graph" in datum:
                parsed.graphs.append(datum["graph"])
        results.append(parsed)
    return results
