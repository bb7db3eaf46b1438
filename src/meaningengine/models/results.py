"""Pydantic models for validation outcomes and aggregate statistics.

Validators never raise on bad input; they return a ``ValidationResult`` so
a host can inspect every problem at once. Only ``errors`` decide validity;
``warnings`` are informational.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel
from pydantic import Field

# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ValidationResult(BaseModel):
    """Soft validation outcome shared by every contract validator."""

    valid: bool = Field(
        description="True when no errors were reported.",
    )
    errors: list[str] = Field(
        default_factory=list,
        description="Problems that make the candidate unusable.",
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-fatal observations (optional pieces missing, unknown refs).",
    )

    @classmethod
    def from_messages(
        cls,
        errors: Iterable[str] = (),
        warnings: Iterable[str] = (),
    ) -> ValidationResult:
        """Build a result whose validity follows from *errors* alone."""
        error_list = list(errors)
        return cls(valid=not error_list, errors=error_list, warnings=list(warnings))

    def __bool__(self) -> bool:
        return self.valid


class EdgeCheck(BaseModel):
    """Answer to "may an edge of this type join these node types"."""

    model_config = {"frozen": True}

    valid: bool = Field(
        description="Whether the edge is permitted.",
    )
    reason: str | None = Field(
        default=None,
        description="First failing constraint, when not permitted.",
    )

    def __bool__(self) -> bool:
        return self.valid


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


class CatalogSummary(BaseModel):
    """Per-catalog counters reported by the registry."""

    entry_count: int = Field(
        description="Number of entries in the catalog.",
    )
    has_schema: bool = Field(
        description="Whether the catalog ships an attribute schema.",
    )


class RegistryStats(BaseModel):
    """Aggregate view over every loaded catalog."""

    catalog_count: int = Field(
        default=0,
        description="Number of loaded catalogs.",
    )
    catalogs: dict[str, CatalogSummary] = Field(
        default_factory=dict,
        description="Per-catalog summaries keyed by catalog id.",
    )
    total_entries: int = Field(
        default=0,
        description="Sum of entry counts across catalogs.",
    )


class OperatorStats(BaseModel):
    """Sizes of the graph and registry an operator engine works over."""

    graph_nodes: int = Field(
        description="Number of nodes in the graph.",
    )
    graph_edges: int = Field(
        description="Number of edges in the graph.",
    )
    catalogs: RegistryStats = Field(
        description="Statistics of the attached catalog registry.",
    )


class EngineStats(BaseModel):
    """Aggregate statistics reported by the engine facade."""

    engine_version: str = Field(
        description="Version of the meaning engine.",
    )
    world_name: str = Field(
        description="Name declared by the world schema.",
    )
    world_version: str = Field(
        description="Version declared by the world schema.",
    )
    node_types: int = Field(
        description="Number of node types in the schema.",
    )
    edge_types: int = Field(
        description="Number of edge types in the schema.",
    )
    node_count: int = Field(
        description="Number of nodes in the graph.",
    )
    edge_count: int = Field(
        description="Number of edges in the graph.",
    )
    has_graph: bool = Field(
        description="Whether the world supplied a graph.",
    )
    has_catalogs: bool = Field(
        default=False,
        description="Whether the world exposes catalogs.",
    )
    catalogs: RegistryStats | None = Field(
        default=None,
        description="Catalog statistics, present only when catalogs exist.",
    )
