"""Abstract world schema.

``Schema`` wraps a raw schema definition and answers questions about it:
which node and edge types exist, which edges may join which node types,
and whether a node or edge record satisfies its type definition.

The schema never knows what a concrete type means. A world of characters
and a world of galaxies go through exactly the same code.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from collections.abc import Hashable
from collections.abc import Mapping
from typing import Any

from meaningengine.models.records import Constraints
from meaningengine.models.records import EdgeTypeDef
from meaningengine.models.records import NodeTypeDef
from meaningengine.models.records import SchemaDefinition
from meaningengine.models.records import is_sequence
from meaningengine.models.results import EdgeCheck
from meaningengine.models.results import ValidationResult

NodeTypeLookup = Callable[[str], "str | None"]


def _build_index(definitions: object) -> dict[Hashable, dict[str, Any]]:
    index: dict[Hashable, dict[str, Any]] = {}
    if not is_sequence(definitions):
        return index
    for definition in definitions:
        if not isinstance(definition, Mapping):
            continue
        type_id = definition.get("id")
        if type_id is None or not isinstance(type_id, Hashable):
            continue
        index[type_id] = definition
    return index


def _lookup(index: dict[Hashable, dict[str, Any]], type_id: object) -> dict | None:
    if not isinstance(type_id, Hashable):
        return None
    return index.get(type_id)


class Schema:
    """Indexed, read-only view over a schema definition."""

    def __init__(self, data: SchemaDefinition | Schema | None) -> None:
        if data is None:
            msg = "Schema data is required"
            raise ValueError(msg)
        if isinstance(data, Schema):
            data = data.to_dict()
        if not isinstance(data, Mapping):
            msg = f"Schema data must be a mapping, got {type(data).__name__}"
            raise TypeError(msg)

        self._data: dict[str, Any] = copy.deepcopy(dict(data))
        self._node_type_index = _build_index(self._data.get("nodeTypes"))
        self._edge_type_index = _build_index(self._data.get("edgeTypes"))

    def __repr__(self) -> str:
        return (
            f"Schema(name={self.name!r}, version={self.version!r}, "
            f"node_types={len(self._node_type_index)}, "
            f"edge_types={len(self._edge_type_index)})"
        )

    # -- descriptive fields --

    @property
    def version(self) -> str:
        return self._data.get("version") or "0.0.0"

    @property
    def name(self) -> str:
        return self._data.get("name") or "unnamed"

    @property
    def description(self) -> str | None:
        return self._data.get("description")

    @property
    def node_types(self) -> list[NodeTypeDef]:
        value = self._data.get("nodeTypes")
        return list(value) if is_sequence(value) else (value or [])

    @property
    def edge_types(self) -> list[EdgeTypeDef]:
        value = self._data.get("edgeTypes")
        return list(value) if is_sequence(value) else (value or [])

    @property
    def constraints(self) -> Constraints | None:
        return self._data.get("constraints")

    # ------------------------------------------------------------------
    # Node types
    # ------------------------------------------------------------------

    def is_valid_node_type(self, node_type: object) -> bool:
        return _lookup(self._node_type_index, node_type) is not None

    def get_node_type_definition(self, node_type: object) -> NodeTypeDef | None:
        return _lookup(self._node_type_index, node_type)

    def get_node_type_ids(self) -> list[str]:
        return list(self._node_type_index)

    def is_node_type_limit_reached(self, node_type: object, current_count: int) -> bool:
        """Return True once *current_count* has hit the type's ``maxCount``.

        Unknown types and types without ``maxCount`` never reach a limit.
        The schema only answers the question; callers enforce it.
        """
        definition = self.get_node_type_definition(node_type)
        if definition is None or definition.get("maxCount") is None:
            return False
        return current_count >= definition["maxCount"]

    # ------------------------------------------------------------------
    # Edge types
    # ------------------------------------------------------------------

    def is_valid_edge_type(self, edge_type: object) -> bool:
        return _lookup(self._edge_type_index, edge_type) is not None

    def get_edge_type_definition(self, edge_type: object) -> EdgeTypeDef | None:
        return _lookup(self._edge_type_index, edge_type)

    def get_edge_type_ids(self) -> list[str]:
        return list(self._edge_type_index)

    def is_edge_allowed(
        self, edge_type: str, source_type: str, target_type: str
    ) -> EdgeCheck:
        """Check an edge type against the node types it would connect.

        Empty or absent allow-lists accept any type. The first failing
        constraint (source before target) determines the reason.
        """
        definition = self.get_edge_type_definition(edge_type)
        if definition is None:
            return EdgeCheck(valid=False, reason=f"Unknown edge type: {edge_type}")

        allowed_sources = definition.get("allowedSourceTypes") or []
        if allowed_sources and source_type not in allowed_sources:
            return EdgeCheck(
                valid=False,
                reason=(
                    f'Edge type "{edge_type}" does not allow source type '
                    f'"{source_type}"'
                ),
            )

        allowed_targets = definition.get("allowedTargetTypes") or []
        if allowed_targets and target_type not in allowed_targets:
            return EdgeCheck(
                valid=False,
                reason=(
                    f'Edge type "{edge_type}" does not allow target type '
                    f'"{target_type}"'
                ),
            )

        return EdgeCheck(valid=True)

    # ------------------------------------------------------------------
    # Constraints
    # ------------------------------------------------------------------

    def requires_root_node(self) -> bool:
        return (self.constraints or {}).get("requireRootNode") is True

    def allows_cycles(self) -> bool:
        return (self.constraints or {}).get("allowCycles") is not False

    def get_max_depth(self) -> int | None:
        return (self.constraints or {}).get("maxDepth")

    # ------------------------------------------------------------------
    # Record validation
    # ------------------------------------------------------------------

    def validate_node(self, node: Mapping[str, Any] | None) -> ValidationResult:
        """Validate a node record against its type definition.

        A required field counts as present when the key exists on the node
        itself or inside its nested ``data`` mapping.
        """
        if node is None:
            return ValidationResult.from_messages(["Node is required"])
        if not isinstance(node, Mapping):
            return ValidationResult.from_messages(["Node must be a mapping"])

        errors: list[str] = []
        if not node.get("id"):
            errors.append("Node must have an id")

        node_type = node.get("type")
        if not node_type:
            errors.append("Node must have a type")
        elif not self.is_valid_node_type(node_type):
            errors.append(f'Invalid node type: "{node_type}"')

        definition = self.get_node_type_definition(node_type)
        if definition is not None:
            nested = node.get("data")
            for field in definition.get("requiredFields") or []:
                if field in node:
                    continue
                if isinstance(nested, Mapping) and field in nested:
                    continue
                errors.append(f'Node of type "{node_type}" requires field "{field}"')

        return ValidationResult.from_messages(errors)

    def validate_edge(
        self,
        edge: Mapping[str, Any] | None,
        get_node_type: NodeTypeLookup | None = None,
    ) -> ValidationResult:
        """Validate an edge record.

        With *get_node_type* supplied and both endpoint types resolvable,
        the edge is also checked with :meth:`is_edge_allowed`.
        """
        if edge is None:
            return ValidationResult.from_messages(["Edge is required"])
        if not isinstance(edge, Mapping):
            return ValidationResult.from_messages(["Edge must be a mapping"])

        errors: list[str] = []
        source = edge.get("source")
        target = edge.get("target")
        edge_type = edge.get("type")

        if not source:
            errors.append("Edge must have a source")
        if not target:
            errors.append("Edge must have a target")
        if not edge_type:
            errors.append("Edge must have a type")
        elif not self.is_valid_edge_type(edge_type):
            errors.append(f'Invalid edge type: "{edge_type}"')

        if (
            get_node_type is not None
            and source
            and target
            and self.is_valid_edge_type(edge_type)
        ):
            source_type = get_node_type(source)
            target_type = get_node_type(target)
            if source_type and target_type:
                check = self.is_edge_allowed(edge_type, source_type, target_type)
                if not check.valid:
                    errors.append(check.reason)

        return ValidationResult.from_messages(errors)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> SchemaDefinition:
        """Return a deep copy of the raw definition."""
        return copy.deepcopy(self._data)

    @classmethod
    def from_dict(cls, data: SchemaDefinition) -> Schema:
        return cls(data)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls, name: str = "empty") -> Schema:
        """Schema with no node or edge types."""
        return cls(
            {
                "version": "1.0.0",
                "name": name,
                "nodeTypes": [],
                "edgeTypes": [],
            }
        )

    @classmethod
    def minimal(cls, name: str = "minimal") -> Schema:
        """Schema with one unrestricted node type and one edge type."""
        return cls(
            {
                "version": "1.0.0",
                "name": name,
                "nodeTypes": [{"id": "node", "label": "Node"}],
                "edgeTypes": [{"id": "edge", "label": "Edge"}],
            }
        )
