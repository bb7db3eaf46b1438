"""Catalog registry.

Catalogs are external data living outside the graph; nodes point into them
through ``catalogRefs`` or shared tags. The registry owns the loaded
catalogs and a per-catalog ``entry id -> entry`` index.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from meaningengine.contracts.validators import CatalogValidator
from meaningengine.contracts.validators import ContractViolation
from meaningengine.contracts.validators import duplicate_entry_ids
from meaningengine.models.records import Catalog
from meaningengine.models.records import CatalogEntry
from meaningengine.models.records import is_sequence
from meaningengine.models.results import CatalogSummary
from meaningengine.models.results import RegistryStats

logger = logging.getLogger(__name__)

EntryPredicate = Callable[[CatalogEntry], bool]


class TagMode(StrEnum):
    """How a set of requested tags must match an entry's tags."""

    any = "any"
    all = "all"


def attr_matches(entry: Mapping[str, Any], key: str, value: object) -> bool:
    """Match one requested attribute against an entry field.

    A list field matches when it contains *value*; any other field must
    equal *value*. A list on the requested side is compared by equality.
    """
    if key not in entry:
        return False
    field = entry[key]
    if is_sequence(field) and not is_sequence(value):
        return value in field
    return field == value


def tags_match(entry_tags: object, tags: Iterable[str], mode: TagMode) -> bool:
    present = set(entry_tags) if is_sequence(entry_tags) else set()
    if mode is TagMode.all:
        return all(tag in present for tag in tags)
    return any(tag in present for tag in tags)


class CatalogRegistry(Mapping[str, Catalog]):
    """Loads, indexes and serves the catalogs of a world.

    The registry is a read-only mapping of catalog id to catalog. All
    mutation happens in :meth:`load`, :meth:`load_all` and :meth:`clear`;
    queries never modify state.
    """

    def __init__(self, catalogs: Mapping[str, Catalog] | None = None) -> None:
        self._catalogs: dict[str, Catalog] = {}
        self._entry_index: dict[str, dict[str, CatalogEntry]] = {}
        if catalogs:
            self.load_all(catalogs)

    # -- Mapping protocol --

    def __getitem__(self, catalog_id: str) -> Catalog:
        return self._catalogs[catalog_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._catalogs)

    def __len__(self) -> int:
        return len(self._catalogs)

    def __repr__(self) -> str:
        return f"CatalogRegistry(catalogs={list(self._catalogs)!r})"

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_all(self, catalogs: Mapping[str, Catalog]) -> CatalogRegistry:
        """Validate the whole set, then load every catalog.

        Nothing is loaded when any catalog is invalid.
        """
        validation = CatalogValidator.validate(catalogs)
        if not validation.valid:
            msg = f"Invalid catalogs: {', '.join(validation.errors)}"
            raise ContractViolation(msg, validation.errors)

        for catalog_id, catalog in catalogs.items():
            self.load(catalog_id, catalog)
        return self

    def load(self, catalog_id: str, catalog: Catalog) -> CatalogRegistry:
        """Load (or replace) one catalog and rebuild its entry index.

        On validation failure the registry is left untouched.
        """
        errors = CatalogValidator.validate_catalog(catalog_id, catalog)
        if errors:
            msg = f'Invalid catalog "{catalog_id}": {", ".join(errors)}'
            raise ContractViolation(msg, errors)

        duplicates = duplicate_entry_ids(catalog)
        if duplicates:
            logger.debug(
                "catalog %s has duplicate entry ids %s; keeping the last of each",
                catalog_id,
                duplicates,
            )

        # Later entries overwrite earlier ones sharing an id
        index = {entry["id"]: entry for entry in catalog["entries"]}
        self._catalogs[catalog_id] = catalog
        self._entry_index[catalog_id] = index
        logger.debug("loaded catalog %s entries=%d", catalog_id, len(index))
        return self

    def clear(self) -> None:
        self._catalogs.clear()
        self._entry_index.clear()

    @classmethod
    def from_mapping(cls, catalogs: Mapping[str, Catalog]) -> CatalogRegistry:
        return cls(catalogs)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def has(self, catalog_id: str) -> bool:
        return catalog_id in self._catalogs

    def get_catalog_ids(self) -> list[str]:
        return list(self._catalogs)

    def get_entries(self, catalog_id: str) -> list[CatalogEntry]:
        """Return a fresh list of the catalog's entries, in catalog order."""
        catalog = self._catalogs.get(catalog_id)
        if catalog is None:
            return []
        return list(catalog["entries"])

    def get_entry(self, catalog_id: str, entry_id: str) -> CatalogEntry | None:
        index = self._entry_index.get(catalog_id)
        if index is None:
            return None
        return index.get(entry_id)

    def get_entries_by_ids(
        self, catalog_id: str, entry_ids: Iterable[str]
    ) -> list[CatalogEntry]:
        """Return entries in the requested order, skipping unknown ids."""
        index = self._entry_index.get(catalog_id)
        if index is None:
            return []
        return [index[entry_id] for entry_id in entry_ids if entry_id in index]

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def filter(self, catalog_id: str, predicate: EntryPredicate) -> list[CatalogEntry]:
        return [entry for entry in self.get_entries(catalog_id) if predicate(entry)]

    def filter_by_attrs(
        self, catalog_id: str, attrs: Mapping[str, Any]
    ) -> list[CatalogEntry]:
        """Return entries matching every requested attribute."""
        return self.filter(
            catalog_id,
            lambda entry: all(
                attr_matches(entry, key, value) for key, value in attrs.items()
            ),
        )

    def filter_by_tags(
        self,
        catalog_id: str,
        tags: Iterable[str],
        mode: TagMode | str = TagMode.any,
    ) -> list[CatalogEntry]:
        """Return entries whose ``tags`` match *tags*.

        ``mode="any"`` needs one shared tag, ``mode="all"`` needs every
        requested tag. Unknown modes raise ``ValueError``.
        """
        tag_mode = TagMode(mode)
        wanted = list(tags)
        return self.filter(
            catalog_id,
            lambda entry: tags_match(entry.get("tags"), wanted, tag_mode),
        )

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self) -> RegistryStats:
        summaries = {
            catalog_id: CatalogSummary(
                entry_count=len(catalog["entries"]),
                has_schema=bool(catalog.get("schema")),
            )
            for catalog_id, catalog in self._catalogs.items()
        }
        return RegistryStats(
            catalog_count=len(summaries),
            catalogs=summaries,
            total_entries=sum(summary.entry_count for summary in summaries.values()),
        )
