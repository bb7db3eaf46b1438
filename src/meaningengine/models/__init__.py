"""Models domain: raw record shapes, definition models and result/statistics models."""

from __future__ import annotations

from meaningengine.models.definitions import CatalogEntryModel
from meaningengine.models.definitions import CatalogModel
from meaningengine.models.definitions import EdgeTypeModel
from meaningengine.models.definitions import NodeTypeModel
from meaningengine.models.definitions import SchemaModel
from meaningengine.models.records import Catalog
from meaningengine.models.records import CatalogEntry
from meaningengine.models.records import Constraints
from meaningengine.models.records import EdgeTypeDef
from meaningengine.models.records import GraphEdge
from meaningengine.models.records import GraphNode
from meaningengine.models.records import NodeTypeDef
from meaningengine.models.records import SchemaDefinition
from meaningengine.models.records import SeedData
from meaningengine.models.records import is_sequence
from meaningengine.models.results import CatalogSummary
from meaningengine.models.results import EdgeCheck
from meaningengine.models.results import EngineStats
from meaningengine.models.results import OperatorStats
from meaningengine.models.results import RegistryStats
from meaningengine.models.results import ValidationResult

__all__ = [
    # Definitions
    "CatalogEntryModel",
    "CatalogModel",
    "EdgeTypeModel",
    "NodeTypeModel",
    "SchemaModel",
    # Records
    "Catalog",
    "CatalogEntry",
    "Constraints",
    "EdgeTypeDef",
    "GraphEdge",
    "GraphNode",
    "NodeTypeDef",
    "SchemaDefinition",
    "SeedData",
    "is_sequence",
    # Results
    "CatalogSummary",
    "EdgeCheck",
    "EngineStats",
    "OperatorStats",
    "RegistryStats",
    "ValidationResult",
]
