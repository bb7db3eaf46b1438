"""Pydantic shapes for schema definitions and catalogs.

Only the keys the engine relies on are declared; every other key is kept
as an extra. Validation errors are turned into contract messages by
``meaningengine.contracts.validators``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import Field
from pydantic import StrictStr

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class NodeTypeModel(BaseModel):
    model_config = {"extra": "allow"}

    id: StrictStr = Field(description="Node type identifier.")
    label: StrictStr = Field(description="Human readable name.")


class EdgeTypeModel(BaseModel):
    model_config = {"extra": "allow"}

    id: StrictStr = Field(description="Edge type identifier.")
    label: StrictStr = Field(description="Human readable name.")


class SchemaModel(BaseModel):
    """Required skeleton of a schema definition."""

    model_config = {"extra": "allow", "populate_by_name": True}

    version: StrictStr = Field(description="Schema version string.")
    name: StrictStr = Field(description="World name.")
    node_types: list[NodeTypeModel] = Field(
        alias="nodeTypes",
        description="Declared node types.",
    )
    edge_types: list[EdgeTypeModel] = Field(
        alias="edgeTypes",
        description="Declared edge types.",
    )


# ---------------------------------------------------------------------------
# Catalogs
# ---------------------------------------------------------------------------


class CatalogEntryModel(BaseModel):
    model_config = {"extra": "allow"}

    id: StrictStr = Field(description="Entry identifier, unique within its catalog.")


class CatalogModel(BaseModel):
    """Required skeleton of a catalog."""

    model_config = {"extra": "allow", "populate_by_name": True}

    id: StrictStr = Field(description="Catalog identifier; matches its registry key.")
    entry_schema: dict[str, Any] | None = Field(
        default=None,
        alias="schema",
        description="Optional description of the entry attributes.",
    )
    entries: list[CatalogEntryModel] = Field(
        description="Catalog entries in declaration order.",
    )
