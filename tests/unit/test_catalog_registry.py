"""Unit tests for the catalog registry."""

from __future__ import annotations

import pytest

from meaningengine.catalogs.registry import CatalogRegistry
from meaningengine.catalogs.registry import TagMode
from meaningengine.contracts.validators import ContractViolation


@pytest.fixture()
def registry(catalogs):
    return CatalogRegistry(catalogs)


class TestCatalogRegistryLoading:
    def test_empty_registry(self):
        registry = CatalogRegistry()
        assert len(registry) == 0
        assert registry.get_catalog_ids() == []

    def test_load_all(self, registry):
        assert len(registry) == 2
        assert registry.get_catalog_ids() == ["tools", "models"]
        assert registry.has("tools")
        assert "models" in registry

    def test_load_returns_self(self, tools_catalog):
        registry = CatalogRegistry()
        assert registry.load("tools", tools_catalog) is registry

    def test_invalid_catalog_leaves_registry_untouched(self, registry):
        with pytest.raises(ContractViolation) as excinfo:
            registry.load("tools", {"id": "tools", "entries": "broken"})

        assert "catalog[tools].entries must be a list" in excinfo.value.errors
        assert registry.get_entry("tools", "vscode") is not None

    def test_load_all_loads_nothing_on_failure(self, tools_catalog):
        registry = CatalogRegistry()
        with pytest.raises(ContractViolation, match="Invalid catalogs"):
            registry.load_all({"tools": tools_catalog, "bad": {"id": "other", "entries": []}})
        assert len(registry) == 0

    def test_reload_replaces_index(self, registry):
        registry.load("tools", {"id": "tools", "entries": [{"id": "zed"}]})

        assert registry.get_entry("tools", "vscode") is None
        assert registry.get_entry("tools", "zed") == {"id": "zed"}
        assert len(registry.get_entries("tools")) == 1

    def test_clear(self, registry):
        registry.clear()
        assert len(registry) == 0
        assert registry.get_entry("tools", "vscode") is None

    def test_from_mapping(self, catalogs):
        registry = CatalogRegistry.from_mapping(catalogs)
        assert registry.get_catalog_ids() == ["tools", "models"]

    def test_mapping_protocol(self, registry, catalogs):
        assert registry["tools"] is catalogs["tools"]
        assert registry.get("music") is None
        assert list(registry) == ["tools", "models"]


class TestCatalogRegistryLookup:
    def test_round_trip(self, registry, tools_catalog):
        for entry in tools_catalog["entries"]:
            assert registry.get_entry("tools", entry["id"]) == entry

    def test_get_entries_returns_fresh_list(self, registry):
        entries = registry.get_entries("tools")
        entries.clear()
        assert len(registry.get_entries("tools")) == 4

    def test_unknown_lookups(self, registry):
        assert registry.get_entries("music") == []
        assert registry.get_entry("music", "bach") is None
        assert registry.get_entry("tools", "emacs") is None
        assert registry.get_entries_by_ids("music", ["bach"]) == []

    def test_entries_by_ids_keeps_requested_order(self, registry):
        entries = registry.get_entries_by_ids("tools", ["figma", "emacs", "vscode"])
        assert [entry["id"] for entry in entries] == ["figma", "vscode"]

    def test_duplicate_entry_ids_last_write_wins(self):
        registry = CatalogRegistry(
            {
                "tools": {
                    "id": "tools",
                    "entries": [
                        {"id": "x", "version": 1},
                        {"id": "y"},
                        {"id": "x", "version": 2},
                    ],
                }
            }
        )

        assert registry.get_entry("tools", "x") == {"id": "x", "version": 2}
        assert [entry["id"] for entry in registry.get_entries("tools")] == ["x", "y", "x"]


class TestCatalogRegistryFilters:
    def test_filter_with_predicate(self, registry):
        entries = registry.filter("tools", lambda entry: entry["year"] > 2016)
        assert [entry["id"] for entry in entries] == ["cursor", "copilot"]

    def test_filter_unknown_catalog(self, registry):
        assert registry.filter("music", lambda entry: True) == []

    def test_filter_by_attrs_scalar(self, registry):
        entries = registry.filter_by_attrs("tools", {"year": 2015})
        assert [entry["id"] for entry in entries] == ["vscode"]

    def test_filter_by_attrs_list_field_contains(self, registry):
        entries = registry.filter_by_attrs("tools", {"tags": "ai"})
        assert [entry["id"] for entry in entries] == ["cursor", "copilot"]

    def test_filter_by_attrs_list_value_is_exact(self, registry):
        assert registry.filter_by_attrs("tools", {"tags": ["ai"]}) == [
            registry.get_entry("tools", "copilot")
        ]
        assert registry.filter_by_attrs("tools", {"tags": ["editor"]}) == []

    def test_filter_by_attrs_missing_field(self, registry):
        assert registry.filter_by_attrs("tools", {"license": "mit"}) == []

    def test_filter_by_tags_any(self, registry):
        entries = registry.filter_by_tags("tools", ["free", "design"])
        assert [entry["id"] for entry in entries] == ["vscode", "figma"]

    def test_filter_by_tags_all(self, registry):
        entries = registry.filter_by_tags("tools", ["editor", "ai"], mode="all")
        assert [entry["id"] for entry in entries] == ["cursor"]

    def test_filter_by_tags_accepts_enum(self, registry):
        entries = registry.filter_by_tags("tools", ["ai"], mode=TagMode.all)
        assert [entry["id"] for entry in entries] == ["cursor", "copilot"]

    def test_filter_by_tags_unknown_mode(self, registry):
        with pytest.raises(ValueError):
            registry.filter_by_tags("tools", ["ai"], mode="most")


class TestCatalogRegistryStats:
    def test_stats(self, registry):
        stats = registry.get_stats()
        assert stats.catalog_count == 2
        assert stats.total_entries == 6
        assert stats.catalogs["tools"].entry_count == 4
        assert stats.catalogs["tools"].has_schema is True
        assert stats.catalogs["models"].has_schema is False

    def test_empty_stats(self):
        stats = CatalogRegistry().get_stats()
        assert stats.catalog_count == 0
        assert stats.catalogs == {}
        assert stats.total_entries == 0
