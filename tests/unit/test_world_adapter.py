"""Unit tests for WorldAdapter."""

from __future__ import annotations

import pytest

from meaningengine.contracts.interfaces import WorldInterface
from meaningengine.contracts.validators import WorldValidator
from meaningengine.graph.seed import SeedGraph
from meaningengine.schema import Schema
from meaningengine.world.adapter import WorldAdapter


class TestWorldAdapter:
    def test_requires_schema(self):
        with pytest.raises(ValueError, match="schema_data"):
            WorldAdapter(None)

    def test_builds_schema(self, schema_data):
        world = WorldAdapter(schema_data)
        assert isinstance(world, WorldInterface)
        assert isinstance(world.get_schema(), Schema)
        assert world.name == "test-world"
        assert world.version == "1.0.0"
        assert world.description == "World used by the unit tests"

    def test_graph_from_seed(self, schema_data, seed_data):
        world = WorldAdapter(schema_data, seed_data=seed_data)
        graph = world.get_graph()
        assert isinstance(graph, SeedGraph)
        assert graph.get_node_by_id("vova")["type"] == "character"
        assert world.get_seed() is seed_data

    def test_explicit_graph_wins_over_seed(self, schema_data, seed_data):
        graph = SeedGraph([{"id": "only", "type": "root"}], [])
        world = WorldAdapter(schema_data, seed_data=seed_data, graph=graph)
        assert world.get_graph() is graph

    def test_graph_unavailable(self, schema_data):
        world = WorldAdapter(schema_data)
        with pytest.raises(RuntimeError, match="graph not available"):
            world.get_graph()

    def test_graph_unavailable_is_a_validation_error(self, schema_data):
        result = WorldAdapter(schema_data).validate()
        assert not result.valid
        assert result.errors[0].startswith("world.get_graph() raised:")

    def test_optional_accessors(self, schema_data, seed_data, catalogs):
        world = WorldAdapter(
            schema_data, seed_data=seed_data, config={"theme": "dark"}, catalogs=catalogs
        )
        assert world.get_config() == {"theme": "dark"}
        assert world.get_catalogs() is catalogs

    def test_optional_accessors_default_to_none(self, schema_data, seed_data):
        world = WorldAdapter(schema_data, seed_data=seed_data)
        assert world.get_config() is None
        assert world.get_catalogs() is None

    def test_validate(self, schema_data, seed_data, catalogs):
        world = WorldAdapter(schema_data, seed_data=seed_data, catalogs=catalogs)
        result = world.validate()
        assert result.valid
        assert result.warnings == []

    def test_from_data(self, schema_data, seed_data):
        world = WorldAdapter.from_data(schema_data, seed_data, {"debug": True})
        assert world.get_config() == {"debug": True}
        assert len(world.get_graph().get_nodes()) == 4


class TestWorldFactories:
    def test_empty(self):
        world = WorldAdapter.empty()
        assert world.name == "empty-world"
        assert world.description == "Empty world"
        assert world.get_schema().get_node_type_ids() == []
        assert world.get_graph().get_nodes() == []

    def test_minimal(self):
        world = WorldAdapter.minimal("tiny")
        assert world.name == "tiny"
        assert world.get_schema().get_node_type_ids() == ["node"]
        assert world.get_schema().get_edge_type_ids() == ["edge"]

    @pytest.mark.parametrize("factory", [WorldAdapter.empty, WorldAdapter.minimal])
    def test_factories_are_valid(self, factory):
        result = WorldValidator.validate(factory())
        assert result.valid
        assert result.errors == []
