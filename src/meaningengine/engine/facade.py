"""Meaning engine facade.

The single entry point hosts use. ``MeaningEngine`` validates a world
once at construction and then answers schema, graph, catalog and operator
queries against it. Catalog-backed queries degrade to empty results when
the world exposes no catalogs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from collections.abc import Mapping
from typing import Any

from meaningengine.catalogs.registry import CatalogRegistry
from meaningengine.config import EngineConfig
from meaningengine.contracts.interfaces import GraphInterface
from meaningengine.contracts.validators import CatalogValidator
from meaningengine.contracts.validators import ContractViolation
from meaningengine.contracts.validators import WorldValidator
from meaningengine.engine.operators import OperatorEngine
from meaningengine.models.records import CatalogEntry
from meaningengine.models.records import GraphNode
from meaningengine.models.results import EngineStats
from meaningengine.models.results import ValidationResult
from meaningengine.schema import Schema

logger = logging.getLogger(__name__)

ENGINE_VERSION = "0.1.0"

_UNSET: Any = object()


class MeaningEngine:
    """Validated, read-only view over one world."""

    def __init__(self, world: Any, *, config: EngineConfig | None = None) -> None:
        if world is None:
            msg = "MeaningEngine requires a world"
            raise ValueError(msg)

        self._config = config or EngineConfig()
        validation = WorldValidator.validate(
            world, check_catalog_refs=self._config.check_catalog_refs
        )
        if not validation.valid:
            msg = f"Invalid world: {', '.join(validation.errors)}"
            raise ContractViolation(msg, validation.errors)
        for warning in validation.warnings:
            logger.debug("world warning: %s", warning)

        self._world = world
        schema = world.get_schema()
        self._schema = schema if isinstance(schema, Schema) else Schema(schema)
        self._graph: GraphInterface = world.get_graph()

        self._catalogs: CatalogRegistry | None = _UNSET
        self._operators: OperatorEngine | None = _UNSET

        logger.debug(
            "engine ready world=%s version=%s nodes=%d edges=%d",
            self._schema.name,
            self._schema.version,
            self.get_node_count(),
            self.get_edge_count(),
        )

    def __repr__(self) -> str:
        return f"MeaningEngine(world={self.world_name!r}, version={ENGINE_VERSION!r})"

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def version(self) -> str:
        return ENGINE_VERSION

    @property
    def world(self) -> Any:
        return self._world

    @property
    def world_name(self) -> str:
        return self._schema.name

    @property
    def world_version(self) -> str:
        return self._schema.version

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def graph(self) -> GraphInterface:
        return self._graph

    # ------------------------------------------------------------------
    # Schema queries
    # ------------------------------------------------------------------

    def is_valid_node_type(self, node_type: str) -> bool:
        return self._schema.is_valid_node_type(node_type)

    def is_valid_edge_type(self, edge_type: str) -> bool:
        return self._schema.is_valid_edge_type(edge_type)

    def validate_node(self, node: Mapping[str, Any] | None) -> ValidationResult:
        return self._schema.validate_node(node)

    def validate_edge(self, edge: Mapping[str, Any] | None) -> ValidationResult:
        """Validate *edge*, resolving endpoint types through the graph."""
        return self._schema.validate_edge(edge, self._node_type)

    def _node_type(self, node_id: str) -> str | None:
        node = self._graph.get_node_by_id(node_id)
        return node.get("type") if node else None

    # ------------------------------------------------------------------
    # Graph queries
    # ------------------------------------------------------------------

    def get_node_count(self) -> int:
        return len(self._graph.get_nodes() or [])

    def get_edge_count(self) -> int:
        return len(self._graph.get_edges() or [])

    def get_node_by_id(self, node_id: str) -> GraphNode | None:
        return self._graph.get_node_by_id(node_id)

    def get_neighbors(self, node_id: str) -> list[GraphNode]:
        return self._graph.get_neighbors(node_id) or []

    # ------------------------------------------------------------------
    # Catalogs and operators
    # ------------------------------------------------------------------

    @property
    def catalogs(self) -> CatalogRegistry | None:
        """Registry over the world's catalogs, built on first access."""
        if self._catalogs is _UNSET:
            self._catalogs = self._build_registry()
        return self._catalogs

    @property
    def operators(self) -> OperatorEngine | None:
        if self._operators is _UNSET:
            registry = self.catalogs
            self._operators = (
                OperatorEngine(self._graph, registry, config=self._config.projection)
                if registry is not None
                else None
            )
        return self._operators

    def has_catalogs(self) -> bool:
        return self.catalogs is not None

    def has_operators(self) -> bool:
        return self.operators is not None

    def _build_registry(self) -> CatalogRegistry | None:
        get_catalogs = getattr(self._world, "get_catalogs", None)
        if not callable(get_catalogs):
            return None
        catalogs = get_catalogs()
        if catalogs is None:
            return None
        if isinstance(catalogs, CatalogRegistry):
            return catalogs
        return CatalogRegistry(catalogs)

    def project(self, node_id: str, catalog_id: str, **options: Any) -> list[CatalogEntry]:
        operators = self.operators
        if operators is None:
            return []
        return operators.project(node_id, catalog_id, **options)

    def filter(self, entries: Iterable[CatalogEntry], predicate: object) -> list[CatalogEntry]:
        operators = self.operators
        if operators is None:
            return []
        return operators.filter(entries, predicate)

    def project_and_filter(
        self,
        node_id: str,
        catalog_id: str,
        predicate: object,
        **options: Any,
    ) -> list[CatalogEntry]:
        operators = self.operators
        if operators is None:
            return []
        return operators.project_and_filter(node_id, catalog_id, predicate, **options)

    def project_multiple(
        self, node_ids: Iterable[str], catalog_id: str, **options: Any
    ) -> list[CatalogEntry]:
        operators = self.operators
        if operators is None:
            return []
        return operators.project_multiple(node_ids, catalog_id, **options)

    def expand(self, node_id: str, depth: int = 1) -> list[str]:
        """Graph traversal; available with or without catalogs."""
        operators = self.operators or OperatorEngine(
            self._graph, CatalogRegistry(), config=self._config.projection
        )
        return operators.expand(node_id, depth)

    def validate_catalog_refs(self) -> ValidationResult:
        return CatalogValidator.validate_catalog_refs(self._graph, self.catalogs)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self) -> EngineStats:
        registry = self.catalogs
        return EngineStats(
            engine_version=ENGINE_VERSION,
            world_name=self.world_name,
            world_version=self.world_version,
            node_types=len(self._schema.get_node_type_ids()),
            edge_types=len(self._schema.get_edge_type_ids()),
            node_count=self.get_node_count(),
            edge_count=self.get_edge_count(),
            has_graph=self._graph is not None,
            has_catalogs=registry is not None,
            catalogs=registry.get_stats() if registry is not None else None,
        )
