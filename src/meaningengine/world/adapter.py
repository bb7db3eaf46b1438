"""World adapter.

Assembles raw world data (schema, optional seed, config and catalogs)
into an object satisfying :class:`~meaningengine.contracts.WorldInterface`.
When no graph is supplied the adapter derives a :class:`SeedGraph` from
the seed's nodes and edges.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from meaningengine.contracts.interfaces import GraphInterface
from meaningengine.contracts.interfaces import WorldInterface
from meaningengine.contracts.validators import WorldValidator
from meaningengine.graph.seed import SeedGraph
from meaningengine.models.records import Catalog
from meaningengine.models.records import SchemaDefinition
from meaningengine.models.records import SeedData
from meaningengine.models.results import ValidationResult
from meaningengine.schema import Schema

logger = logging.getLogger(__name__)


class WorldAdapter(WorldInterface):
    """A world built from plain data."""

    def __init__(
        self,
        schema_data: SchemaDefinition | Schema | None,
        *,
        seed_data: SeedData | None = None,
        config: Mapping[str, Any] | None = None,
        graph: GraphInterface | None = None,
        catalogs: Mapping[str, Catalog] | None = None,
    ) -> None:
        if schema_data is None:
            msg = "WorldAdapter requires schema_data"
            raise ValueError(msg)

        self._schema = Schema(schema_data)
        self._seed = seed_data
        self._config = config
        self._catalogs = catalogs

        if graph is None and seed_data is not None:
            graph = SeedGraph.from_seed(seed_data)
        self._graph = graph

        logger.debug(
            "world %s assembled graph=%s catalogs=%d",
            self._schema.name,
            type(graph).__name__ if graph is not None else None,
            len(catalogs) if catalogs else 0,
        )

    def __repr__(self) -> str:
        return f"WorldAdapter(name={self.name!r}, version={self.version!r})"

    # ------------------------------------------------------------------
    # WorldInterface
    # ------------------------------------------------------------------

    def get_schema(self) -> Schema:
        return self._schema

    def get_graph(self) -> GraphInterface:
        if self._graph is None:
            msg = "WorldAdapter: graph not available. Provide graph or seed_data."
            raise RuntimeError(msg)
        return self._graph

    def get_seed(self) -> SeedData | None:
        return self._seed

    def get_config(self) -> Mapping[str, Any] | None:
        return self._config

    def get_catalogs(self) -> Mapping[str, Catalog] | None:
        return self._catalogs

    # ------------------------------------------------------------------
    # Descriptive fields
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._schema.name

    @property
    def version(self) -> str:
        return self._schema.version

    @property
    def description(self) -> str | None:
        return self._schema.description

    def validate(self) -> ValidationResult:
        return WorldValidator.validate(self)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def from_data(
        cls,
        schema_data: SchemaDefinition,
        seed_data: SeedData | None = None,
        config: Mapping[str, Any] | None = None,
        catalogs: Mapping[str, Catalog] | None = None,
    ) -> WorldAdapter:
        return cls(schema_data, seed_data=seed_data, config=config, catalogs=catalogs)

    @classmethod
    def empty(cls, name: str = "empty-world") -> WorldAdapter:
        """World with no types and an empty seed."""
        return cls(
            {
                "version": "1.0.0",
                "name": name,
                "description": "Empty world",
                "nodeTypes": [],
                "edgeTypes": [],
            },
            seed_data={"nodes": [], "edges": []},
        )

    @classmethod
    def minimal(cls, name: str = "minimal-world") -> WorldAdapter:
        """World with one node type, one edge type and an empty seed."""
        return cls(
            {
                "version": "1.0.0",
                "name": name,
                "description": "Minimal world with one node type and one edge type",
                "nodeTypes": [{"id": "node", "label": "Node"}],
                "edgeTypes": [{"id": "edge", "label": "Edge"}],
            },
            seed_data={"nodes": [], "edges": []},
        )
