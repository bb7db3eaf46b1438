"""In-memory graph built from seed data.

Worlds that ship only a seed (``{"nodes": [...], "edges": [...]}``) get a
``SeedGraph`` satisfying :class:`~meaningengine.contracts.GraphInterface`.
Edges are treated as undirected for neighbour lookups.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from collections.abc import Mapping
from typing import Any

from meaningengine.models.records import GraphEdge
from meaningengine.models.records import GraphNode

logger = logging.getLogger(__name__)


def _endpoint(value: object) -> object:
    if isinstance(value, Mapping):
        return value.get("id")
    return value


class SeedGraph:
    """Read-only graph over seed node and edge records.

    Every accessor returns copies; callers cannot reach the indexed
    records.
    """

    def __init__(
        self,
        nodes: Iterable[GraphNode] = (),
        edges: Iterable[GraphEdge] = (),
    ) -> None:
        self._nodes: list[GraphNode] = [dict(node) for node in nodes]
        self._edges: list[GraphEdge] = [dict(edge) for edge in edges]

        self._nodes_by_id: dict[Any, GraphNode] = {}
        for node in self._nodes:
            self._nodes_by_id[node.get("id")] = node

        # Insertion-ordered neighbour ids; dict keys double as an ordered set
        self._adjacency: dict[Any, dict[Any, None]] = {}
        for edge in self._edges:
            source = _endpoint(edge.get("source"))
            target = _endpoint(edge.get("target"))
            self._adjacency.setdefault(source, {})[target] = None
            self._adjacency.setdefault(target, {})[source] = None

        logger.debug(
            "seed graph built nodes=%d edges=%d", len(self._nodes), len(self._edges)
        )

    @classmethod
    def from_seed(cls, seed: Mapping[str, Any]) -> SeedGraph:
        """Build a graph from a seed mapping; edges may live under ``links``."""
        edges = seed.get("edges") or seed.get("links") or []
        return cls(seed.get("nodes") or [], edges)

    def get_nodes(self) -> list[GraphNode]:
        return [dict(node) for node in self._nodes]

    def get_edges(self) -> list[GraphEdge]:
        return [dict(edge) for edge in self._edges]

    def get_node_by_id(self, node_id: str) -> GraphNode | None:
        node = self._nodes_by_id.get(node_id)
        return dict(node) if node is not None else None

    def get_neighbors(self, node_id: str) -> list[GraphNode]:
        """Return neighbour records, skipping ids with no node record."""
        neighbor_ids = self._adjacency.get(node_id, {})
        return [
            dict(self._nodes_by_id[neighbor_id])
            for neighbor_id in neighbor_ids
            if neighbor_id in self._nodes_by_id
        ]

    def __repr__(self) -> str:
        return f"SeedGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"
