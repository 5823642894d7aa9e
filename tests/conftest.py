"""Pytest configuration and shared fixtures for meshroute tests."""

import pytest

from meshroute import Edge, MeshGraph, Node, Point, Rectangle, build_mesh, create_graph


def make_node(node_id, x, y, capacity=5, size=10, **kwargs):
    """Hand-made square node for solver tests."""
    return Node(id=node_id, x=x, y=y, width=size, height=size, capacity=capacity, **kwargs)


def make_graph(nodes, pairs):
    """MeshGraph from nodes and (id, id) pairs, edges added in pair order."""
    index = {node.id: node for node in nodes}
    edges = [
        Edge(index[a], index[b], f"edge{i}") for i, (a, b) in enumerate(pairs)
    ]
    return MeshGraph(nodes, edges)


@pytest.fixture
def region():
    """Default 600x600 root region centered at (400, 300)."""
    return Rectangle(Point(400, 300), 600, 600)


@pytest.fixture
def corner_obstacle():
    """Small obstacle deep inside the top-left quadrant."""
    return Rectangle(Point(175, 75), 20, 20)


@pytest.fixture
def corner_mesh(region, corner_obstacle):
    """Two-level mesh around the corner obstacle."""
    return build_mesh(region, [corner_obstacle], max_level=2)


@pytest.fixture
def corner_graph(corner_mesh):
    """Graph of the corner mesh."""
    return create_graph(corner_mesh)


@pytest.fixture
def line_graph():
    """Five nodes in a row: A - B - C - D - E."""
    nodes = [make_node(name, 10 * i, 0) for i, name in enumerate("ABCDE")]
    return make_graph(nodes, [("A", "B"), ("B", "C"), ("C", "D"), ("D", "E")])


@pytest.fixture
def bottleneck_graph():
    """
    Two routes forced through X, which only one path may use.

        A       B
          \\   /
            X
          /   \\
        C       D
    """
    nodes = [
        make_node("A", 0, 0),
        make_node("B", 100, 0),
        make_node("C", 0, 100),
        make_node("D", 100, 100),
        make_node("X", 50, 50, capacity=1),
    ]
    return make_graph(nodes, [("A", "X"), ("X", "B"), ("C", "X"), ("X", "D")])


@pytest.fixture
def detour_graph():
    """
    Short route A - X - B with X of capacity 1, and a longer detour
    A - Y1 - Y2 - B.
    """
    nodes = [
        make_node("A", 0, 0),
        make_node("X", 10, 0, capacity=1),
        make_node("B", 20, 0),
        make_node("Y1", 0, 10),
        make_node("Y2", 20, 10),
    ]
    return make_graph(
        nodes, [("A", "X"), ("X", "B"), ("A", "Y1"), ("Y1", "Y2"), ("Y2", "B")]
    )


@pytest.fixture
def node_factory():
    """The make_node helper, for tests that build their own graphs."""
    return make_node


@pytest.fixture
def graph_factory():
    """The make_graph helper, for tests that build their own graphs."""
    return make_graph
