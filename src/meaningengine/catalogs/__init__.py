"""Catalogs domain: external reference data attached to graph nodes."""

from meaningengine.catalogs.loader import CatalogLoader
from meaningengine.catalogs.loader import LoadOutcome
from meaningengine.catalogs.loader import is_reserved_key
from meaningengine.catalogs.registry import CatalogRegistry
from meaningengine.catalogs.registry import TagMode

__all__ = [
    "CatalogLoader",
    "CatalogRegistry",
    "LoadOutcome",
    "TagMode",
    "is_reserved_key",
]
