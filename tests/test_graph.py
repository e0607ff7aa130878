"""Tests for the in-memory site graph."""

import pytest

from sitegraph.exceptions import GraphFinalizedError
from sitegraph.graph import SiteGraph
from sitegraph.models import Link, Page


def page(node_id):
    return Page(id=node_id, url=f"https://example.com/{node_id}", title=node_id, depth=0)


class TestSiteGraph:
    """Test suite for SiteGraph."""

    @pytest.fixture
    def graph(self):
        graph = SiteGraph()
        for node_id in ("a", "b", "c"):
            graph.add_node(node_id, page(node_id))
        graph.add_edge("a", "b")
        graph.add_edge("a", "c")
        return graph

    def test_nodes_in_insertion_order(self, graph):
        assert graph.node_ids() == ["a", "b", "c"]
        assert [p.id for p in graph.all_nodes()] == ["a", "b", "c"]
        assert len(graph) == 3
        assert "b" in graph
        assert "z" not in graph

    def test_duplicate_edge_is_stored_once(self, graph):
        """Adding an existing edge is a no-op that returns False."""
        assert graph.add_edge("a", "b") is False
        assert graph.get_adjacent("a") == ["b", "c"]
        assert graph.edge_count() == 2

    def test_self_loop_allowed(self, graph):
        assert graph.add_edge("b", "b") is True
        assert graph.has_edge("b", "b")

    def test_adjacency_for_unknown_node(self, graph):
        assert graph.get_adjacent("missing") == []
        assert graph.out_degree("missing") == 0

    def test_adjacent_is_a_copy(self, graph):
        graph.get_adjacent("a").append("zzz")
        graph.adjacency()["a"].append("zzz")
        assert graph.get_adjacent("a") == ["b", "c"]

    def test_all_edges(self, graph):
        assert graph.all_edges() == [Link("a", "b"), Link("a", "c")]

    def test_get_node(self, graph):
        assert graph.get_node("a").url == "https://example.com/a"
        assert graph.get_node("missing") is None

    def test_finalize_blocks_mutation(self, graph):
        """A finalized graph rejects nodes and edges."""
        graph.finalize()

        assert graph.finalized
        with pytest.raises(GraphFinalizedError):
            graph.add_node("d", page("d"))
        with pytest.raises(GraphFinalizedError):
            graph.add_edge("b", "c")
        assert graph.get_adjacent("a") == ["b", "c"]

    def test_from_crawl(self):
        """A graph rebuilt from nodes and links is finalized and complete."""
        nodes = [page("x"), page("y")]
        links = [Link("x", "y"), Link("y", "x"), Link("x", "y")]

        graph = SiteGraph.from_crawl(nodes, links)

        assert graph.finalized
        assert graph.node_ids() == ["x", "y"]
        assert graph.all_edges() == [Link("x", "y"), Link("y", "x")]
