"""Count statements over labels and relationship types."""

from collections.abc import Iterable

from src.cypher.filters import quote_identifier
from src.cypher.requests import RowModelRequest


class AggregateStatements:
    """Builds count-style statements. Stateless; safe to share."""

    def count_nodes_labelled_with(self, labels: Iterable[str]) -> RowModelRequest:
        """Count nodes carrying *all* of ``labels``."""
        cypher_labels = "".join(f":{quote_identifier(label)}" for label in labels)
        return RowModelRequest(statement=f"MATCH (n{cypher_labels}) RETURN COUNT(n)", parameters={})

    def count_edges(self, start_label: str, type: str, end_label: str) -> RowModelRequest:
        """Count ``type`` relationships from ``start_label`` to ``end_label`` nodes."""
        pattern = (
            f"(:{quote_identifier(start_label)})"
            f"-[r:{quote_identifier(type)}]->"
            f"(:{quote_identifier(end_label)})"
        )
        return RowModelRequest(statement=f"MATCH {pattern} RETURN count(r)", parameters={})
