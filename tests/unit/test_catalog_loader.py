"""Unit tests for the catalog loader."""

from __future__ import annotations

import asyncio
import logging

import pytest

from meaningengine.catalogs.loader import CatalogLoader
from meaningengine.catalogs.loader import is_reserved_key
from meaningengine.config import LoaderConfig
from meaningengine.contracts.validators import ContractViolation
from meaningengine.observability import query_metrics_snapshot

AI_CATALOG = {"id": "ai", "entries": [{"id": "gpt", "tags": ["llm"]}]}
TOOLS_CATALOG = {"id": "tools", "entries": [{"id": "vscode", "tags": ["editor"]}]}


def resolver(files):
    def load_file(path):
        return files.get(path)

    return load_file


def async_resolver(files):
    async def load_file_async(path):
        await asyncio.sleep(0)
        return files.get(path)

    return load_file_async


class TestReservedKeys:
    @pytest.mark.parametrize("key", ["$schema", "$id", "version", "description"])
    def test_reserved(self, key):
        assert is_reserved_key(key)

    @pytest.mark.parametrize("key", ["tools", "versions", "schema"])
    def test_not_reserved(self, key):
        assert not is_reserved_key(key)


class TestResolvePath:
    def test_relative_with_dot_prefix(self):
        assert CatalogLoader.resolve_path("./catalogs/tools.json", "base") == (
            "base/catalogs/tools.json"
        )

    def test_relative_without_prefix(self):
        assert CatalogLoader.resolve_path("tools.json", "base") == "base/tools.json"

    def test_single_trailing_separator_removed(self):
        assert CatalogLoader.resolve_path("tools.json", "base/") == "base/tools.json"
        assert CatalogLoader.resolve_path("tools.json", "base\\") == "base/tools.json"

    def test_no_base_returns_cleaned_path(self):
        assert CatalogLoader.resolve_path("./tools.json") == "tools.json"

    @pytest.mark.parametrize("path", ["/data/tools.json", "C:/data/tools.json", "d:\\x.json"])
    @pytest.mark.parametrize("base", ["", "base", "/other/"])
    def test_absolute_paths_are_idempotent(self, path, base):
        resolved = CatalogLoader.resolve_path(path, base)
        assert resolved == path
        assert CatalogLoader.resolve_path(resolved, base) == resolved


class TestCatalogLoader:
    def test_inline_and_path_catalogs(self):
        registry = {
            "$schema": "https://example.org/registry.json",
            "tools": "./catalogs/tools.json",
            "ai": AI_CATALOG,
        }
        loader = CatalogLoader()

        catalogs = loader.load(
            registry,
            load_file=resolver({"base/catalogs/tools.json": TOOLS_CATALOG}),
            base_path="base",
        )

        assert catalogs == {"tools": TOOLS_CATALOG, "ai": AI_CATALOG}

    def test_wrapped_catalogs_key(self):
        registry = {
            "version": "1.0.0",
            "description": "All catalogs",
            "catalogs": {"tools": "tools.json", "ai": AI_CATALOG},
        }

        catalogs = CatalogLoader().load(
            registry, load_file=resolver({"tools.json": TOOLS_CATALOG})
        )

        assert set(catalogs) == {"tools", "ai"}

    def test_empty_wrapped_catalogs_key(self):
        registry = {"version": "1.0.0", "catalogs": {}}

        assert CatalogLoader().load(registry) == {}
        assert CatalogLoader().load_and_validate(registry) == {}

    def test_config_base_path(self):
        loader = CatalogLoader(LoaderConfig(base_path="root"))
        catalogs = loader.load(
            {"tools": "tools.json"},
            load_file=resolver({"root/tools.json": TOOLS_CATALOG}),
        )
        assert catalogs == {"tools": TOOLS_CATALOG}

    def test_without_file_loader_only_inline(self):
        catalogs = CatalogLoader().load({"tools": "tools.json", "ai": AI_CATALOG})
        assert catalogs == {"ai": AI_CATALOG}

    def test_failed_loads_are_skipped(self, caplog):
        def load_file(path):
            if path == "broken.json":
                raise OSError("disk on fire")
            return None

        with caplog.at_level(logging.WARNING, logger="meaningengine.catalogs.loader"):
            catalogs = CatalogLoader().load(
                {"a": "broken.json", "b": "missing.json", "ai": AI_CATALOG},
                load_file=load_file,
            )

        assert catalogs == {"ai": AI_CATALOG}
        assert "disk on fire" in caplog.text

    def test_collect_reports_per_key_outcomes(self):
        outcomes = CatalogLoader().collect(
            {"tools": "tools.json", "ai": AI_CATALOG, "gone": "gone.json"},
            load_file=resolver({"tools.json": TOOLS_CATALOG}),
        )

        assert outcomes["tools"].ok
        assert outcomes["tools"].source == "tools.json"
        assert outcomes["ai"].ok
        assert outcomes["ai"].source == "inline"
        assert not outcomes["gone"].ok
        assert outcomes["gone"].catalog is None
        assert outcomes["gone"].error == "loader returned no catalog"

    def test_non_mapping_registry(self):
        assert CatalogLoader().load(None) == {}
        assert CatalogLoader().load("tools.json") == {}

    def test_records_query_metrics(self):
        CatalogLoader().load({"ai": AI_CATALOG})
        metrics = query_metrics_snapshot()["catalog_loader.load"]
        assert metrics["calls"] == 1
        assert metrics["last_results"] == 1


class TestCatalogLoaderAsync:
    async def test_load_async(self):
        registry = {"$schema": "x", "tools": "./tools.json", "ai": AI_CATALOG}
        catalogs = await CatalogLoader().load_async(
            registry,
            load_file_async=async_resolver({"base/tools.json": TOOLS_CATALOG}),
            base_path="base",
        )
        assert catalogs == {"tools": TOOLS_CATALOG, "ai": AI_CATALOG}

    async def test_one_failure_does_not_cancel_others(self):
        async def load_file_async(path):
            if path == "broken.json":
                raise OSError("unreachable")
            await asyncio.sleep(0.01)
            return TOOLS_CATALOG

        outcomes = await CatalogLoader().collect_async(
            {"broken": "broken.json", "tools": "tools.json"},
            load_file_async=load_file_async,
        )

        assert outcomes["tools"].catalog == TOOLS_CATALOG
        assert outcomes["broken"].error == "loader raised: unreachable"

    async def test_loads_run_concurrently(self):
        in_flight = 0
        peak = 0

        async def load_file_async(path):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return {"id": path.removesuffix(".json"), "entries": []}

        catalogs = await CatalogLoader().load_async(
            {"a": "a.json", "b": "b.json", "c": "c.json"},
            load_file_async=load_file_async,
        )

        assert set(catalogs) == {"a", "b", "c"}
        assert peak == 3

    async def test_without_async_loader_only_inline(self):
        catalogs = await CatalogLoader().load_async({"tools": "tools.json", "ai": AI_CATALOG})
        assert catalogs == {"ai": AI_CATALOG}


class TestLoadAndValidate:
    def test_valid_result(self):
        catalogs = CatalogLoader().load_and_validate({"ai": AI_CATALOG})
        assert catalogs == {"ai": AI_CATALOG}

    def test_invalid_result_raises(self):
        with pytest.raises(ContractViolation) as excinfo:
            CatalogLoader().load_and_validate({"tools": AI_CATALOG})
        assert 'catalog[tools].id must match registry key "tools"' in excinfo.value.errors

    def test_validate_delegates_to_catalog_validator(self):
        assert CatalogLoader.validate({"ai": AI_CATALOG}).valid
        assert not CatalogLoader.validate(["ai"]).valid
