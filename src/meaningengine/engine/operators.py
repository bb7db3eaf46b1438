"""Epistemic operators over a graph and its catalogs.

Operators derive ephemeral views of catalog data from graph nodes. They
never mutate the graph or the registry, and every call recomputes its
result, so operators compose freely::

    tools = engine.project("n1", "tools")
    recent = engine.filter(tools, where("year").gte(2019))
    shared = engine.intersect(recent, engine.project("n2", "tools"))
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from time import perf_counter
from typing import Any

from meaningengine.catalogs.registry import CatalogRegistry
from meaningengine.catalogs.registry import TagMode
from meaningengine.config import ProjectionConfig
from meaningengine.contracts.interfaces import GraphInterface
from meaningengine.engine.filters import as_predicate
from meaningengine.models.records import CatalogEntry
from meaningengine.models.records import GraphNode
from meaningengine.models.records import is_sequence
from meaningengine.models.results import OperatorStats
from meaningengine.observability import record_query

logger = logging.getLogger(__name__)


def _endpoint(value: object) -> object:
    if isinstance(value, Mapping):
        return value.get("id")
    return value


def _dedupe(entries: Iterable[CatalogEntry]) -> list[CatalogEntry]:
    seen: set[Any] = set()
    result: list[CatalogEntry] = []
    for entry in entries:
        entry_id = entry.get("id")
        if entry_id in seen:
            continue
        seen.add(entry_id)
        result.append(entry)
    return result


class OperatorEngine:
    """Runs project / filter / expand / intersect / union queries."""

    def __init__(
        self,
        graph: GraphInterface,
        catalog_registry: CatalogRegistry,
        *,
        config: ProjectionConfig | None = None,
    ) -> None:
        if graph is None:
            msg = "OperatorEngine requires a graph"
            raise ValueError(msg)
        if catalog_registry is None:
            msg = "OperatorEngine requires a CatalogRegistry"
            raise ValueError(msg)
        self._graph = graph
        self._catalogs = catalog_registry
        self._config = config or ProjectionConfig()

    @property
    def graph(self) -> GraphInterface:
        return self._graph

    @property
    def catalogs(self) -> CatalogRegistry:
        return self._catalogs

    # ------------------------------------------------------------------
    # Project
    # ------------------------------------------------------------------

    def project(
        self,
        node_id: str,
        catalog_id: str,
        *,
        use_refs: bool | None = None,
        use_tags: bool | None = None,
        tag_mode: TagMode | str | None = None,
    ) -> list[CatalogEntry]:
        """Project a catalog through a graph node.

        Returns the entries the node references in ``catalogRefs`` (in
        reference order) followed by the entries sharing its tags (in
        catalog order), each entry at most once. Options left as ``None``
        fall back to the engine's ``ProjectionConfig``.
        """
        start = perf_counter()
        use_refs = self._config.use_refs if use_refs is None else use_refs
        use_tags = self._config.use_tags if use_tags is None else use_tags
        mode = TagMode(self._config.tag_mode if tag_mode is None else tag_mode)

        result = self._project(node_id, catalog_id, use_refs, use_tags, mode)
        record_query(
            operation="operators.project",
            duration_ms=(perf_counter() - start) * 1000,
            result_count=len(result),
        )
        return result

    def _project(
        self,
        node_id: str,
        catalog_id: str,
        use_refs: bool,
        use_tags: bool,
        mode: TagMode,
    ) -> list[CatalogEntry]:
        node = self._graph.get_node_by_id(node_id)
        if not node or not self._catalogs.has(catalog_id):
            return []

        matched: list[CatalogEntry] = []
        if use_refs:
            refs = node.get("catalogRefs")
            ref_ids = refs.get(catalog_id) if isinstance(refs, Mapping) else None
            if is_sequence(ref_ids):
                matched.extend(self._catalogs.get_entries_by_ids(catalog_id, ref_ids))

        if use_tags:
            node_tags = self.node_tags(node)
            if node_tags:
                matched.extend(self._catalogs.filter_by_tags(catalog_id, node_tags, mode))

        return _dedupe(matched)

    def node_tags(self, node: GraphNode) -> list[str]:
        """Return the node's ``tags`` plus its ``pointerTags`` without prefix."""
        prefix = self._config.pointer_tag_prefix
        tags: list[str] = []
        if is_sequence(node.get("tags")):
            tags.extend(node["tags"])
        if is_sequence(node.get("pointerTags")):
            for tag in node["pointerTags"]:
                if isinstance(tag, str) and prefix and tag.startswith(prefix):
                    tags.append(tag[len(prefix) :])
                else:
                    tags.append(tag)
        return tags

    # ------------------------------------------------------------------
    # Filter
    # ------------------------------------------------------------------

    def filter(self, entries: Iterable[CatalogEntry], predicate: object) -> list[CatalogEntry]:
        """Keep entries satisfying *predicate*, preserving order.

        *predicate* may be a callable, an ``EntryQuery`` or an operator
        mapping such as ``{"year": {"$gte": 2019}}``.
        """
        start = perf_counter()
        test = as_predicate(predicate)
        result = [entry for entry in entries if test(entry)]
        record_query(
            operation="operators.filter",
            duration_ms=(perf_counter() - start) * 1000,
            result_count=len(result),
        )
        return result

    # ------------------------------------------------------------------
    # Expand
    # ------------------------------------------------------------------

    def expand(self, node_id: str, depth: int = 1) -> list[str]:
        """Return node ids within *depth* undirected hops, origin excluded.

        Ids come back in breadth-first order.
        """
        if depth < 1:
            return []
        start = perf_counter()

        adjacency: dict[Any, dict[Any, None]] = {}
        for edge in self._graph.get_edges() or []:
            source = _endpoint(edge.get("source"))
            target = _endpoint(edge.get("target"))
            adjacency.setdefault(source, {})[target] = None
            adjacency.setdefault(target, {})[source] = None

        visited = {node_id}
        reached: list[str] = []
        queue: deque[tuple[Any, int]] = deque([(node_id, 0)])
        while queue:
            current, distance = queue.popleft()
            if distance >= depth:
                continue
            for neighbor in adjacency.get(current, {}):
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                reached.append(neighbor)
                queue.append((neighbor, distance + 1))

        record_query(
            operation="operators.expand",
            duration_ms=(perf_counter() - start) * 1000,
            result_count=len(reached),
        )
        return reached

    # ------------------------------------------------------------------
    # Set operations
    # ------------------------------------------------------------------

    @staticmethod
    def intersect(
        entries_a: Sequence[CatalogEntry], entries_b: Sequence[CatalogEntry]
    ) -> list[CatalogEntry]:
        """Entries of *entries_a* whose id also occurs in *entries_b*."""
        ids_b = {entry.get("id") for entry in entries_b}
        return _dedupe(entry for entry in entries_a if entry.get("id") in ids_b)

    @staticmethod
    def union(
        entries_a: Sequence[CatalogEntry], entries_b: Sequence[CatalogEntry]
    ) -> list[CatalogEntry]:
        """*entries_a* then the unseen entries of *entries_b*, keyed by id."""
        return _dedupe([*entries_a, *entries_b])

    # ------------------------------------------------------------------
    # Compositions
    # ------------------------------------------------------------------

    def project_and_filter(
        self,
        node_id: str,
        catalog_id: str,
        predicate: object,
        **project_options: Any,
    ) -> list[CatalogEntry]:
        projected = self.project(node_id, catalog_id, **project_options)
        return self.filter(projected, predicate)

    def project_multiple(
        self,
        node_ids: Iterable[str],
        catalog_id: str,
        **project_options: Any,
    ) -> list[CatalogEntry]:
        """Union of each node's projection, in the order the nodes are given."""
        result: list[CatalogEntry] = []
        for node_id in node_ids:
            result = self.union(result, self.project(node_id, catalog_id, **project_options))
        return result

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self) -> OperatorStats:
        return OperatorStats(
            graph_nodes=len(self._graph.get_nodes() or []),
            graph_edges=len(self._graph.get_edges() or []),
            catalogs=self._catalogs.get_stats(),
        )
