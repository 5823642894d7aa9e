"""Unit tests for the graph module."""

import pytest

from meshroute.graph import MeshGraph, build_edges, create_graph, nodes_bordering
from meshroute.models import Edge, Point


def by_center(graph):
    return {(n.x, n.y): n for n in graph.nodes}


class TestBuildEdges:
    """Tests for border-adjacency edges."""

    def test_corner_mesh_edges(self, corner_graph):
        """Edges follow shared borders, never corner contact."""
        nodes = by_center(corner_graph)
        expected = {
            ((550, 150), (550, 450)),
            ((250, 450), (550, 450)),
            ((325, 75), (550, 150)),
            ((325, 225), (550, 150)),
            ((325, 225), (250, 450)),
            ((175, 225), (250, 450)),
            ((325, 75), (325, 225)),
            ((175, 225), (325, 225)),
        }
        assert len(corner_graph.edges) == len(expected)
        for a, b in expected:
            assert corner_graph.has_edge(nodes[a], nodes[b])

    def test_diagonal_quadrants_not_adjacent(self, corner_graph):
        """Quadrants meeting only at the region center are not adjacent."""
        nodes = by_center(corner_graph)
        assert not corner_graph.has_edge(nodes[(550, 150)], nodes[(250, 450)])
        assert not corner_graph.has_edge(nodes[(325, 225)], nodes[(550, 450)])

    def test_no_duplicate_pairs(self, corner_mesh):
        """No unordered pair appears twice."""
        edges = build_edges(corner_mesh)
        keys = [edge.key for edge in edges]
        assert len(keys) == len(set(keys))

    def test_edge_ids(self, corner_mesh):
        edges = build_edges(corner_mesh)
        assert [e.id for e in edges] == [f"edge{i}" for i in range(len(edges))]

    def test_single_node_has_no_edges(self, node_factory):
        assert build_edges([node_factory("A", 0, 0)]) == []

    def test_obstacle_node_skipped(self, node_factory):
        """An obstacle-covered node without target gets no edges."""
        a = node_factory("A", 0, 0)
        b = node_factory("B", 10, 0, contains_obstacle=True)
        assert build_edges([a, b]) == []

    def test_obstacle_target_node_kept(self, node_factory):
        """An obstacle-covered target node is still connected."""
        a = node_factory("A", 0, 0)
        b = node_factory("B", 10, 0, contains_obstacle=True, contains_target=True)
        assert len(build_edges([a, b])) == 1

    def test_nodes_bordering(self, node_factory):
        a = node_factory("A", 0, 0)
        assert nodes_bordering(a, node_factory("B", 10, 0))
        assert not nodes_bordering(a, node_factory("C", 10, 10))


class TestEdge:
    """Tests for Edge helpers."""

    def test_key_is_unordered(self, node_factory):
        a, b = node_factory("A", 0, 0), node_factory("B", 10, 0)
        assert Edge(a, b).key == Edge(b, a).key

    def test_other(self, node_factory):
        a, b, c = (node_factory(n, 0, 0) for n in "ABC")
        edge = Edge(a, b, "edge0")
        assert edge.other(a) == b
        assert edge.other(b) == a
        with pytest.raises(ValueError):
            edge.other(c)


class TestMeshGraph:
    """Tests for the MeshGraph container."""

    def test_adjacency_symmetric(self, corner_graph):
        """Every edge is visible from both endpoints."""
        for edge in corner_graph.edges:
            assert corner_graph.has_edge(edge.from_node, edge.to_node)
            assert corner_graph.has_edge(edge.to_node, edge.from_node)
            assert edge.to_node in corner_graph.get_neighbors(edge.from_node)
            assert edge.from_node in corner_graph.get_neighbors(edge.to_node)

    def test_neighbors(self, line_graph):
        node_c = line_graph.get_node("C")
        assert [n.id for n in line_graph.get_neighbors(node_c)] == ["B", "D"]

    def test_get_node_unknown(self, line_graph):
        with pytest.raises(KeyError):
            line_graph.get_node("missing")

    def test_duplicate_node_rejected(self, node_factory):
        graph = MeshGraph([node_factory("A", 0, 0)])
        with pytest.raises(ValueError):
            graph.add_node(node_factory("A", 50, 50))

    def test_edge_to_unknown_node(self, node_factory):
        a = node_factory("A", 0, 0)
        graph = MeshGraph([a])
        with pytest.raises(KeyError):
            graph.add_edge(Edge(a, node_factory("B", 10, 0)))

    def test_duplicate_edge_ignored(self, node_factory):
        a, b = node_factory("A", 0, 0), node_factory("B", 10, 0)
        graph = MeshGraph([a, b], [Edge(a, b, "edge0"), Edge(b, a, "edge1")])
        assert len(graph.edges) == 1

    def test_are_connected(self, graph_factory, node_factory):
        nodes = [node_factory(n, 10 * i, 0) for i, n in enumerate("ABC")]
        graph = graph_factory(nodes, [("A", "B")])
        assert graph.are_connected(nodes[0], nodes[1])
        assert not graph.are_connected(nodes[0], nodes[2])

    def test_index_of(self, line_graph):
        assert line_graph.index_of(line_graph.get_node("D")) == 3

    def test_copy_is_independent(self, line_graph, node_factory):
        copy = line_graph.copy()
        copy.add_node(node_factory("F", 50, 0))
        assert len(copy) == 6
        assert len(line_graph) == 5
        assert not line_graph.has_node("F")

    def test_create_graph_builds_edges(self, corner_mesh):
        graph = create_graph(corner_mesh)
        assert len(graph) == 6
        assert len(graph.edges) == 8


class TestClosestNode:
    """Tests for nearest-node lookup."""

    def test_closest(self, line_graph):
        assert line_graph.closest_node(Point(21, 3)).id == "C"

    def test_tie_first_wins(self, line_graph):
        """Equidistant nodes resolve to the first in node order."""
        assert line_graph.closest_node(Point(15, 0)).id == "B"

    def test_empty_graph(self):
        assert MeshGraph().closest_node(Point(0, 0)) is None

    def test_max_distance(self, line_graph):
        assert line_graph.closest_node(Point(20, 50), max_distance=10) is None
        assert line_graph.closest_node(Point(20, 5), max_distance=10).id == "C"
