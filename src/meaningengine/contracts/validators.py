"""Structural validators for schemas, graphs, catalogs and whole worlds.

Every validator is a pure function of its input and returns a
``ValidationResult`` instead of raising, so a host can report every
problem at once. Warnings never make a result invalid.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Hashable
from collections.abc import Mapping
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from meaningengine.models.definitions import CatalogModel
from meaningengine.models.definitions import SchemaModel
from meaningengine.models.records import is_sequence
from meaningengine.models.results import ValidationResult
from meaningengine.schema import Schema

_GRAPH_CAPABILITIES = ("get_nodes", "get_edges", "get_node_by_id", "get_neighbors")
_OPTIONAL_WORLD_ACCESSORS = ("get_seed", "get_config")


class ContractViolation(ValueError):
    """Raised when a construction-time contract check fails.

    ``errors`` carries the individual validator messages.
    """

    def __init__(self, message: str, errors: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.errors = list(errors)


def _schema_fields(schema: object) -> Mapping[str, Any] | None:
    """Expose a ``Schema`` instance through the raw-definition keys."""
    if isinstance(schema, Schema):
        return {
            "version": schema.version,
            "name": schema.name,
            "nodeTypes": schema.node_types,
            "edgeTypes": schema.edge_types,
        }
    if isinstance(schema, Mapping):
        return schema
    return None


def _endpoint_id(value: object) -> object:
    # Layout libraries replace edge endpoints with the node records themselves
    if isinstance(value, Mapping):
        return value.get("id")
    return value


_MAPPING_ERRORS = frozenset({"model_type", "model_attributes_type", "dict_type"})
_LIST_FIELDS = frozenset({"nodeTypes", "edgeTypes", "entries"})
_OPTIONAL_FIELDS = frozenset({"schema"})


def _shape_messages(prefix: str, exc: ValidationError) -> list[str]:
    """Turn pydantic errors into ``prefix.path[i].field must be ...`` messages."""
    messages: list[str] = []
    for error in exc.errors():
        loc = error["loc"]
        path = prefix + "".join(
            f"[{part}]" if isinstance(part, int) else f".{part}" for part in loc
        )
        field = loc[-1] if loc else None
        if error["type"] in _MAPPING_ERRORS:
            expected = "a mapping"
        elif error["type"] == "list_type" or field in _LIST_FIELDS:
            expected = "a list"
        else:
            expected = "a string"
        if field in _OPTIONAL_FIELDS:
            expected += " if provided"
        message = f"{path} must be {expected}"
        if message not in messages:
            messages.append(message)
    return messages


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class SchemaValidator:
    """Checks a schema definition against the schema contract."""

    @staticmethod
    def validate(schema: object) -> ValidationResult:
        if schema is None:
            return ValidationResult.from_messages(["Schema is required"])
        fields = _schema_fields(schema)
        if fields is None:
            return ValidationResult.from_messages(["Schema must be a mapping"])

        try:
            SchemaModel.model_validate(dict(fields))
        except ValidationError as exc:
            return ValidationResult.from_messages(_shape_messages("schema", exc))
        return ValidationResult.from_messages()

    @staticmethod
    def is_valid_node_type(schema: object, node_type: object) -> bool:
        return _declares_type(schema, "nodeTypes", node_type)

    @staticmethod
    def is_valid_edge_type(schema: object, edge_type: object) -> bool:
        return _declares_type(schema, "edgeTypes", edge_type)


def _declares_type(schema: object, key: str, type_id: object) -> bool:
    fields = _schema_fields(schema)
    if fields is None or not is_sequence(fields.get(key)):
        return False
    return any(
        isinstance(definition, Mapping) and definition.get("id") == type_id
        for definition in fields[key]
    )


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------


class GraphValidator:
    """Checks graph capabilities and graph/schema consistency."""

    @staticmethod
    def validate(graph: object) -> ValidationResult:
        """Check that *graph* exposes every query capability.

        Each missing capability is reported on its own.
        """
        if graph is None:
            return ValidationResult.from_messages(["Graph is required"])

        errors = [
            f"graph.{name}() must be callable"
            for name in _GRAPH_CAPABILITIES
            if not callable(getattr(graph, name, None))
        ]
        return ValidationResult.from_messages(errors)

    @staticmethod
    def validate_against_schema(graph: object, schema: object) -> ValidationResult:
        """Cross-check node and edge records against *schema*.

        Reports one error per node or edge with an unknown type, per
        duplicated node id, and per edge endpoint missing from the graph.
        """
        if graph is None or not callable(getattr(graph, "get_nodes", None)):
            return ValidationResult.from_messages(["Invalid graph"])

        nodes = graph.get_nodes() or []
        get_edges = getattr(graph, "get_edges", None)
        edges = (get_edges() or []) if callable(get_edges) else []

        errors: list[str] = []
        node_ids: list[object] = []
        for i, node in enumerate(nodes):
            if not isinstance(node, Mapping):
                errors.append(f"Node {i} must be a mapping")
                continue
            node_id = node.get("id")
            if not isinstance(node_id, Hashable):
                errors.append(f"Node {i} id must be a string")
                continue
            node_ids.append(node_id)
            node_type = node.get("type")
            if not SchemaValidator.is_valid_node_type(schema, node_type):
                errors.append(f'Node "{node_id}" has invalid type "{node_type}"')

        duplicates = [
            node_id
            for node_id, count in Counter(
                node_id for node_id in node_ids if node_id is not None
            ).items()
            if count > 1
        ]
        errors.extend(f'Duplicate node id "{node_id}"' for node_id in duplicates)

        known_ids = set(node_id for node_id in node_ids if node_id is not None)
        for i, edge in enumerate(edges):
            if not isinstance(edge, Mapping):
                errors.append(f"Edge {i} must be a mapping")
                continue
            edge_type = edge.get("type")
            if not SchemaValidator.is_valid_edge_type(schema, edge_type):
                errors.append(f'Edge {i} has invalid type "{edge_type}"')
            for end in ("source", "target"):
                endpoint = _endpoint_id(edge.get(end))
                if endpoint is None:
                    errors.append(f"Edge {i} is missing its {end}")
                elif not isinstance(endpoint, Hashable):
                    errors.append(f"Edge {i} {end} must be a string")
                elif endpoint not in known_ids:
                    errors.append(f'Edge {i} references unknown {end} "{endpoint}"')

        return ValidationResult.from_messages(errors)


# ---------------------------------------------------------------------------
# Catalogs
# ---------------------------------------------------------------------------


class CatalogValidator:
    """Checks catalog sets and the catalog references graph nodes carry."""

    @classmethod
    def validate(cls, catalogs: object) -> ValidationResult:
        """Validate a catalog set keyed by catalog id.

        ``None`` is valid (catalogs are optional). Duplicate entry ids in a
        catalog are a warning; the registry index keeps the last one.
        """
        if catalogs is None:
            return ValidationResult.from_messages()
        if not isinstance(catalogs, Mapping):
            return ValidationResult.from_messages(
                ["Catalogs must be a mapping (registry)"]
            )

        errors: list[str] = []
        warnings: list[str] = []
        for catalog_id, catalog in catalogs.items():
            catalog_errors = cls.validate_catalog(catalog_id, catalog)
            errors.extend(catalog_errors)
            if not catalog_errors:
                warnings.extend(
                    f'catalog[{catalog_id}].entries has duplicate id "{entry_id}" '
                    "(last entry wins)"
                    for entry_id in duplicate_entry_ids(catalog)
                )

        return ValidationResult.from_messages(errors, warnings)

    @staticmethod
    def validate_catalog(catalog_id: str, catalog: object) -> list[str]:
        """Return the errors for a single catalog registered under *catalog_id*."""
        prefix = f"catalog[{catalog_id}]"
        errors: list[str] = []
        try:
            CatalogModel.model_validate(
                dict(catalog) if isinstance(catalog, Mapping) else catalog
            )
        except ValidationError as exc:
            errors.extend(_shape_messages(prefix, exc))

        own_id = catalog.get("id") if isinstance(catalog, Mapping) else None
        if isinstance(own_id, str) and own_id != catalog_id:
            errors.insert(0, f'{prefix}.id must match registry key "{catalog_id}"')
        return errors

    @staticmethod
    def has_catalog(catalogs: object, catalog_id: str) -> bool:
        return isinstance(catalogs, Mapping) and catalog_id in catalogs

    @classmethod
    def has_entry(cls, catalogs: object, catalog_id: str, entry_id: str) -> bool:
        if not cls.has_catalog(catalogs, catalog_id):
            return False
        catalog = catalogs[catalog_id]
        entries = catalog.get("entries") if isinstance(catalog, Mapping) else None
        if not is_sequence(entries):
            return False
        return any(
            isinstance(entry, Mapping) and entry.get("id") == entry_id
            for entry in entries
        )

    @staticmethod
    def validate_catalog_refs(graph: object, catalogs: object) -> ValidationResult:
        """Cross-check node ``catalogRefs`` against a catalog set.

        Unknown catalogs and unknown entries are warnings. A reference list
        that is not a list is an error. Without a graph or catalogs there
        is nothing to check.
        """
        if graph is None or not callable(getattr(graph, "get_nodes", None)):
            return ValidationResult.from_messages()
        if not isinstance(catalogs, Mapping):
            return ValidationResult.from_messages()

        errors: list[str] = []
        warnings: list[str] = []
        known_entries: dict[str, set[object]] = {}

        for node in graph.get_nodes() or []:
            if not isinstance(node, Mapping):
                continue
            refs = node.get("catalogRefs")
            if refs is None:
                continue
            node_id = node.get("id")
            if not isinstance(refs, Mapping):
                errors.append(f'Node "{node_id}" catalogRefs must be a mapping')
                continue

            for catalog_id, entry_ids in refs.items():
                if not is_sequence(entry_ids):
                    errors.append(
                        f'Node "{node_id}" catalogRefs["{catalog_id}"] must be a list'
                    )
                    continue
                if catalog_id not in catalogs:
                    warnings.append(
                        f'Node "{node_id}" references unknown catalog "{catalog_id}"'
                    )
                    continue
                if catalog_id not in known_entries:
                    known_entries[catalog_id] = _entry_ids(catalogs[catalog_id])
                for entry_id in entry_ids:
                    if (
                        not isinstance(entry_id, Hashable)
                        or entry_id not in known_entries[catalog_id]
                    ):
                        warnings.append(
                            f'Node "{node_id}" references unknown entry "{entry_id}" '
                            f'in catalog "{catalog_id}"'
                        )

        return ValidationResult.from_messages(errors, warnings)


def _entry_ids(catalog: object) -> set[object]:
    entries = catalog.get("entries") if isinstance(catalog, Mapping) else None
    if not is_sequence(entries):
        return set()
    return {
        entry.get("id")
        for entry in entries
        if isinstance(entry, Mapping) and isinstance(entry.get("id"), Hashable)
    }


def duplicate_entry_ids(catalog: Mapping[str, Any]) -> list[str]:
    """Return entry ids that occur more than once, in first-seen order."""
    counts = Counter(
        entry.get("id")
        for entry in catalog.get("entries") or []
        if isinstance(entry, Mapping) and isinstance(entry.get("id"), Hashable)
    )
    return [entry_id for entry_id, count in counts.items() if count > 1]


# ---------------------------------------------------------------------------
# World
# ---------------------------------------------------------------------------


class WorldValidator:
    """Runs every contract check against a world."""

    @staticmethod
    def validate(world: object, *, check_catalog_refs: bool = True) -> ValidationResult:
        """Validate a world end to end.

        ``get_schema()``, ``get_graph()`` and ``get_catalogs()`` each run in
        their own failure boundary: an accessor that raises is reported as
        an error naming it, and nothing further is checked against the
        missing piece. Schema/graph consistency is checked only when both
        pieces passed their own validation. Missing optional accessors are
        warnings, and so is every catalog reference problem: references are
        cross-checked only for reporting and never invalidate a world.
        """
        if world is None:
            return ValidationResult.from_messages(["World is required"])

        errors: list[str] = []
        warnings: list[str] = []

        schema_ok = False
        try:
            schema = world.get_schema()
        except Exception as exc:
            errors.append(f"world.get_schema() raised: {exc}")
        else:
            schema_result = SchemaValidator.validate(schema)
            errors.extend(schema_result.errors)
            schema_ok = schema_result.valid

        graph_ok = False
        try:
            graph = world.get_graph()
        except Exception as exc:
            errors.append(f"world.get_graph() raised: {exc}")
        else:
            graph_result = GraphValidator.validate(graph)
            errors.extend(graph_result.errors)
            graph_ok = graph_result.valid

        if schema_ok and graph_ok:
            consistency = GraphValidator.validate_against_schema(graph, schema)
            errors.extend(consistency.errors)

        for accessor in _OPTIONAL_WORLD_ACCESSORS:
            if not callable(getattr(world, accessor, None)):
                warnings.append(f"world.{accessor}() is not implemented (optional)")

        get_catalogs = getattr(world, "get_catalogs", None)
        if not callable(get_catalogs):
            warnings.append("world.get_catalogs() is not implemented (optional)")
            return ValidationResult.from_messages(errors, warnings)

        try:
            catalogs = get_catalogs()
        except Exception as exc:
            errors.append(f"world.get_catalogs() raised: {exc}")
            return ValidationResult.from_messages(errors, warnings)

        if catalogs is not None:
            catalog_result = CatalogValidator.validate(catalogs)
            errors.extend(catalog_result.errors)
            warnings.extend(catalog_result.warnings)
            if catalog_result.valid and graph_ok and check_catalog_refs:
                refs_result = CatalogValidator.validate_catalog_refs(graph, catalogs)
                warnings.extend(refs_result.errors)
                warnings.extend(refs_result.warnings)

        return ValidationResult.from_messages(errors, warnings)
