"""
Request Builder

Immutable request objects pairing a statement with its parameters and
the result shape the transactional endpoint should return.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResultShape(str, Enum):
    GRAPH = "graph"
    GRAPH_ROW = "graph_row"
    ROW = "row"


class Statement(BaseModel):
    """A Cypher statement and its named parameters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    statement: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    result_data_contents: tuple[str, ...] = Field(default=("row",), alias="resultDataContents")
    include_stats: bool = Field(default=False, alias="includeStats")

    @field_validator("parameters", mode="before")
    @classmethod
    def _json_ready(cls, value: dict[str, Any] | None) -> dict[str, Any]:
        # sets/tuples of ids must serialise as JSON arrays
        if value is None:
            return {}
        return {
            k: list(v) if isinstance(v, (set, frozenset, tuple)) else v
            for k, v in value.items()
        }

    @property
    def shape(self) -> ResultShape:
        return ResultShape.ROW

    def to_payload(self) -> dict[str, Any]:
        """Render the statement object posted to the transactional endpoint."""
        payload = self.model_dump(by_alias=True)
        payload["resultDataContents"] = list(self.result_data_contents)
        return payload


class GraphModelRequest(Statement):
    """Whole nodes/paths, returned as graph data."""

    result_data_contents: tuple[str, ...] = Field(default=("graph",), alias="resultDataContents")

    @property
    def shape(self) -> ResultShape:
        return ResultShape.GRAPH


class GraphRowListModelRequest(Statement):
    """A path plus an explicit node id per row (filtered traversals)."""

    result_data_contents: tuple[str, ...] = Field(default=("row", "graph"), alias="resultDataContents")

    @property
    def shape(self) -> ResultShape:
        return ResultShape.GRAPH_ROW


class RowModelRequest(Statement):
    """Scalar or tuple rows (counts, projections)."""
