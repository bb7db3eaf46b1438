"""Contracts domain: world/graph interfaces and their validators."""

from meaningengine.contracts.interfaces import GraphInterface
from meaningengine.contracts.interfaces import WorldInterface
from meaningengine.contracts.validators import CatalogValidator
from meaningengine.contracts.validators import ContractViolation
from meaningengine.contracts.validators import GraphValidator
from meaningengine.contracts.validators import SchemaValidator
from meaningengine.contracts.validators import WorldValidator
from meaningengine.contracts.validators import duplicate_entry_ids

__all__ = [
    "CatalogValidator",
    "ContractViolation",
    "GraphInterface",
    "GraphValidator",
    "SchemaValidator",
    "WorldInterface",
    "WorldValidator",
    "duplicate_entry_ids",
]
