"""Engine <-> world contract.

A world hands the engine its schema and graph, and optionally its seed,
config and catalogs. The engine never reads world files, imports world
code, or knows concrete node types; it only talks to these interfaces.

Conformance is checked separately by the validators in
:mod:`meaningengine.contracts.validators`, so a host may satisfy the
contract with any object shape it likes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from typing import Protocol
from typing import runtime_checkable

from meaningengine.models.records import GraphEdge
from meaningengine.models.records import GraphNode


@runtime_checkable
class GraphInterface(Protocol):
    """Read-only graph capabilities the engine relies on."""

    def get_nodes(self) -> list[GraphNode]:
        """Return every node record."""

    def get_edges(self) -> list[GraphEdge]:
        """Return every edge record."""

    def get_node_by_id(self, node_id: str) -> GraphNode | None:
        """Return the node with *node_id*, or ``None``."""

    def get_neighbors(self, node_id: str) -> list[GraphNode]:
        """Return the nodes adjacent to *node_id* (edges are undirected)."""


class WorldInterface:
    """Base class for worlds.

    ``get_schema`` and ``get_graph`` must be overridden. The remaining
    accessors are optional and default to ``None``.
    """

    def get_schema(self) -> Any:
        """Return a :class:`~meaningengine.schema.Schema` or a raw definition."""
        raise NotImplementedError(
            "WorldInterface.get_schema() must be implemented by the world"
        )

    def get_graph(self) -> GraphInterface:
        raise NotImplementedError(
            "WorldInterface.get_graph() must be implemented by the world"
        )

    def get_seed(self) -> Mapping[str, Any] | None:
        return None

    def get_config(self) -> Mapping[str, Any] | None:
        return None

    def get_catalogs(self) -> Mapping[str, Any] | None:
        """Return catalogs living outside the graph, keyed by catalog id."""
        return None
