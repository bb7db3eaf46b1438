"""Unit tests for the seed-derived in-memory graph."""

from __future__ import annotations

from meaningengine.graph.seed import SeedGraph


class TestSeedGraph:
    def test_nodes_and_edges(self, seed_data):
        graph = SeedGraph.from_seed(seed_data)
        assert [node["id"] for node in graph.get_nodes()] == [
            "universe",
            "ai",
            "design",
            "vova",
        ]
        assert len(graph.get_edges()) == 3

    def test_links_alias(self):
        graph = SeedGraph.from_seed(
            {"nodes": [{"id": "a"}, {"id": "b"}], "links": [{"source": "a", "target": "b"}]}
        )
        assert graph.get_neighbors("a") == [{"id": "b"}]

    def test_empty_seed(self):
        graph = SeedGraph.from_seed({})
        assert graph.get_nodes() == []
        assert graph.get_edges() == []
        assert graph.get_node_by_id("a") is None

    def test_lookup(self, seed_data):
        graph = SeedGraph.from_seed(seed_data)
        assert graph.get_node_by_id("ai")["title"] == "AI"
        assert graph.get_node_by_id("ghost") is None

    def test_neighbors_are_undirected(self, seed_data):
        graph = SeedGraph.from_seed(seed_data)
        assert [node["id"] for node in graph.get_neighbors("ai")] == ["universe", "vova"]
        assert [node["id"] for node in graph.get_neighbors("vova")] == ["ai"]
        assert graph.get_neighbors("ghost") == []

    def test_neighbors_skip_dangling_ids(self):
        graph = SeedGraph([{"id": "a"}], [{"source": "a", "target": "ghost"}])
        assert graph.get_neighbors("a") == []

    def test_endpoint_records(self):
        graph = SeedGraph(
            [{"id": "a"}, {"id": "b"}],
            [{"source": {"id": "a"}, "target": {"id": "b"}}],
        )
        assert graph.get_neighbors("b") == [{"id": "a"}]

    def test_defensive_copies(self, seed_data):
        graph = SeedGraph.from_seed(seed_data)

        graph.get_nodes().clear()
        graph.get_edges().clear()
        graph.get_node_by_id("ai")["title"] = "changed"
        graph.get_neighbors("universe")[0]["title"] = "changed"
        seed_data["nodes"].append({"id": "late"})

        assert len(graph.get_nodes()) == 4
        assert len(graph.get_edges()) == 3
        assert graph.get_node_by_id("ai")["title"] == "AI"
        assert graph.get_node_by_id("late") is None
