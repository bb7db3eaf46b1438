"""Shapes of the raw records the engine consumes.

Hosts hand the engine plain ``dict`` data (decoded JSON, database rows,
literals). These ``TypedDict`` declarations document the keys the engine
reads; every other key is opaque and passed through untouched. Keys keep
their wire spelling (``nodeTypes``, ``catalogRefs``, ...).
"""

from __future__ import annotations

from typing import Any
from typing import TypedDict


class NodeTypeDef(TypedDict, total=False):
    """Definition of one node type in a schema."""

    id: str
    label: str
    maxCount: int
    requiredFields: list[str]


class EdgeTypeDef(TypedDict, total=False):
    """Definition of one edge type; empty allow-lists accept any type."""

    id: str
    label: str
    allowedSourceTypes: list[str]
    allowedTargetTypes: list[str]


class Constraints(TypedDict, total=False):
    """Structural constraints a world may declare."""

    requireRootNode: bool
    allowCycles: bool
    maxDepth: int


class SchemaDefinition(TypedDict, total=False):
    """Raw schema definition wrapped by :class:`meaningengine.schema.Schema`."""

    version: str
    name: str
    description: str
    nodeTypes: list[NodeTypeDef]
    edgeTypes: list[EdgeTypeDef]
    constraints: Constraints


class Catalog(TypedDict, total=False):
    """A named collection of entries living outside the graph."""

    id: str
    schema: dict[str, Any]
    entries: list[dict[str, Any]]


class SeedData(TypedDict, total=False):
    """Initial graph content; ``links`` is accepted as an alias of ``edges``."""

    nodes: list[dict[str, Any]]
    edges: list[dict[str, Any]]
    links: list[dict[str, Any]]


# Graph nodes, graph edges and catalog entries are free-form records.
GraphNode = dict[str, Any]
GraphEdge = dict[str, Any]
CatalogEntry = dict[str, Any]


def is_sequence(value: object) -> bool:
    """Return True for list-like record values (lists and tuples, never strings)."""
    return isinstance(value, (list, tuple))
