"""
Variable-depth load statements.

Every load entry point first builds a *root match* that binds the nodes to
return as ``n`` (optionally scoped by label, ids or filters), then hands it
to the depth strategy chosen for the requested depth:

==========  ============================================  ================
depth       tail appended to the root match               result shape
==========  ============================================  ================
``< 0``     ``WITH n MATCH p=(n)-[*0..]-(m) RETURN p``    graph
``== 0``    ``RETURN n``                                  graph
``> 0``     ``WITH n MATCH p=(n)-[*0..D]-(m) RETURN p``   graph
==========  ============================================  ================

Filtered traversals additionally return ``ID(n)`` and are row-shaped so the
caller can tell root nodes apart from the rest of each path.

The bounded range is ``[min(0, D) .. max(0, D)]``. Since the strategy is only
chosen for ``D > 0`` the lower bound is always 0, which means paths of length
zero (the root on its own) are returned as well.
"""

from collections.abc import Collection
from dataclasses import dataclass
from typing import Any

from src.cypher.composer import compose
from src.cypher.filters import Filters, quote_identifier
from src.cypher.requests import GraphModelRequest, GraphRowListModelRequest, Statement
from src.cypher.sort_order import Pagination, SortOrder


# ─── Depth strategies ─────────────────────────────────────


@dataclass(frozen=True)
class RootMatch:
    """``MATCH (n...) ...`` binding the nodes to return, with its parameters."""

    text: str
    parameters: dict[str, Any]
    filtered: bool = False


class ZeroDepthStrategy:
    """No traversal: only the root nodes are returned."""

    def build(self, root: RootMatch, paging: str = "") -> Statement:
        if paging:
            return GraphModelRequest(
                statement=f"{root.text}WITH n{paging} RETURN n", parameters=root.parameters
            )
        return GraphModelRequest(statement=f"{root.text}RETURN n", parameters=root.parameters)


class BoundedDepthStrategy:
    """Paths from the root up to ``max_depth`` hops."""

    def __init__(self, depth: int):
        self.max_depth = max(0, depth)
        self.min_depth = min(0, self.max_depth)

    @property
    def pattern(self) -> str:
        return f"p=(n)-[*{self.min_depth}..{self.max_depth}]-(m)"

    def build(self, root: RootMatch, paging: str = "") -> Statement:
        if root.filtered:
            return GraphRowListModelRequest(
                statement=f"{root.text}WITH n{paging} MATCH {self.pattern} RETURN p, ID(n)",
                parameters=root.parameters,
            )
        return GraphModelRequest(
            statement=f"{root.text}WITH n{paging} MATCH {self.pattern} RETURN p",
            parameters=root.parameters,
        )


class UnboundedDepthStrategy(BoundedDepthStrategy):
    """Paths from the root of any length."""

    def __init__(self):
        super().__init__(0)

    @property
    def pattern(self) -> str:
        return "p=(n)-[*0..]-(m)"


def strategy_for_depth(depth: int) -> ZeroDepthStrategy | BoundedDepthStrategy:
    """Pick the statement shape for ``depth`` (negative means unbounded)."""
    if depth < 0:
        return UnboundedDepthStrategy()
    if max(0, depth) > 0:
        return BoundedDepthStrategy(depth)
    return ZeroDepthStrategy()


# ─── Root matches ─────────────────────────────────────────


def _label_pattern(label: str | None) -> str:
    return f"(n:{quote_identifier(label)})" if label else "(n)"


def _root_by_ids(label: str | None, ids: Collection[int]) -> RootMatch:
    if not ids:
        return RootMatch(f"MATCH {_label_pattern(label)} ", {})
    return RootMatch(f"MATCH {_label_pattern(label)} WHERE id(n) in {{ ids }} ", {"ids": list(ids)})


def _paging(sort_order: SortOrder | None, pagination: Pagination | None) -> tuple[str, dict[str, Any]]:
    text = sort_order.to_cypher("n") if sort_order else ""
    parameters: dict[str, Any] = {}
    if pagination:
        text += pagination.to_cypher()
        parameters.update(pagination.parameters())
    return text, parameters


def _build(
    root: RootMatch,
    depth: int,
    sort_order: SortOrder | None = None,
    pagination: Pagination | None = None,
) -> Statement:
    paging, paging_parameters = _paging(sort_order, pagination)
    if paging_parameters:
        root = RootMatch(root.text, {**root.parameters, **paging_parameters}, root.filtered)
    return strategy_for_depth(depth).build(root, paging)


class VariableDepthQuery:
    """Load statements for nodes by id, label or filters, to a given depth."""

    def find_one(self, id: int, depth: int) -> Statement:
        return _build(RootMatch("MATCH (n) WHERE id(n) = { id } ", {"id": id}), depth)

    def find_all_by_ids(self, ids: Collection[int], depth: int) -> Statement:
        return _build(_root_by_ids(None, ids), depth)

    def find_all_by_type(
        self,
        label: str,
        ids: Collection[int],
        depth: int,
        sort_order: SortOrder | None = None,
        pagination: Pagination | None = None,
    ) -> Statement:
        return _build(_root_by_ids(label, ids), depth, sort_order, pagination)

    def find_all(self) -> Statement:
        """Every path of length one in the graph, whatever the depth."""
        return GraphModelRequest(statement="MATCH p=()-->() RETURN p", parameters={})

    def find_by_type(
        self,
        label: str,
        depth: int,
        sort_order: SortOrder | None = None,
        pagination: Pagination | None = None,
    ) -> Statement:
        return _build(_root_by_ids(label, ()), depth, sort_order, pagination)

    def find_by_properties(
        self,
        label: str,
        filters: Filters,
        depth: int,
        sort_order: SortOrder | None = None,
        pagination: Pagination | None = None,
    ) -> Statement:
        composed = compose(label, filters)
        root = RootMatch(composed.prefix, dict(composed.parameters), filtered=True)
        return _build(root, depth, sort_order, pagination)
