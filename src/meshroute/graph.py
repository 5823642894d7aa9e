"""
Graph module for mesh routing.

Computes border-adjacency edges between mesh nodes and packages nodes and
edges into a MeshGraph backed by a networkx graph keyed by node id.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set

import networkx as nx

from .geometry import euclidean_distance, rects_bordering
from .models import Edge, Node, Point

logger = logging.getLogger(__name__)

# Maximum gap between two borders still considered touching
BORDER_EPSILON = 1.0

# Minimum shared border length for an edge (rejects corner-only contact)
MIN_BORDER_OVERLAP = 1.0


def _is_routable(node: Node) -> bool:
    return node.contains_target or not node.contains_obstacle


def nodes_bordering(
    node1: Node,
    node2: Node,
    epsilon: float = BORDER_EPSILON,
    min_overlap: float = MIN_BORDER_OVERLAP,
) -> bool:
    """Check if two mesh nodes share a border."""
    return rects_bordering(node1.bounds, node2.bounds, epsilon, min_overlap)


def build_edges(
    nodes: Sequence[Node],
    epsilon: float = BORDER_EPSILON,
    min_overlap: float = MIN_BORDER_OVERLAP,
) -> List[Edge]:
    """
    Compute the edge set of a mesh.

    Every unordered pair of nodes is tested for a shared border, so this is
    quadratic in the node count. Pairs where a node is obstacle-covered
    without holding a target are skipped.

    Args:
        nodes: Mesh leaf nodes
        epsilon: Maximum gap between touching borders
        min_overlap: Minimum shared border length

    Returns:
        Edges with ids "edge0", "edge1", ... in discovery order
    """
    edges: List[Edge] = []
    processed: Set[frozenset] = set()

    for i, node1 in enumerate(nodes):
        if not _is_routable(node1):
            continue
        for node2 in nodes[i + 1 :]:
            if not _is_routable(node2) or node1.id == node2.id:
                continue
            key = frozenset((node1.id, node2.id))
            if key in processed:
                continue
            if nodes_bordering(node1, node2, epsilon, min_overlap):
                edges.append(Edge(node1, node2, f"edge{len(edges)}"))
                processed.add(key)

    logger.debug("Built %d edges between %d nodes", len(edges), len(nodes))
    return edges


class MeshGraph:
    """
    Nodes and edges of a mesh, with neighbor and lookup queries.

    Neighbor order follows edge insertion order, so searches over the same
    graph are reproducible.
    """

    def __init__(self, nodes: Iterable[Node] = (), edges: Iterable[Edge] = ()):
        self.nodes: List[Node] = []
        self.edges: List[Edge] = []
        self.graph = nx.Graph()
        self._index: Dict[str, Node] = {}

        for node in nodes:
            self.add_node(node)
        for edge in edges:
            self.add_edge(edge)

    def add_node(self, node: Node) -> None:
        """Add a node. Adding the same id twice is an error."""
        if node.id in self._index:
            raise ValueError(f"Duplicate node id: {node.id}")
        self._index[node.id] = node
        self.nodes.append(node)
        self.graph.add_node(node.id)

    def add_edge(self, edge: Edge) -> None:
        """Add an edge between two known nodes; duplicate pairs are ignored."""
        for endpoint in (edge.from_node, edge.to_node):
            if endpoint.id not in self._index:
                raise KeyError(f"Edge {edge.id} references unknown node {endpoint.id}")
        if self.graph.has_edge(edge.from_node.id, edge.to_node.id):
            return
        self.edges.append(edge)
        self.graph.add_edge(edge.from_node.id, edge.to_node.id, id=edge.id)

    def get_node(self, node_id: str) -> Node:
        """Return the node with the given id (KeyError if unknown)."""
        return self._index[node_id]

    def has_node(self, node_id: str) -> bool:
        return node_id in self._index

    def has_edge(self, node1: Node, node2: Node) -> bool:
        return self.graph.has_edge(node1.id, node2.id)

    def get_neighbors(self, node: Node) -> List[Node]:
        """Get all nodes sharing an edge with ``node``."""
        return [self._index[n] for n in self.graph.neighbors(node.id)]

    def are_connected(self, node1: Node, node2: Node) -> bool:
        """Check if any path joins two nodes, ignoring capacity."""
        return nx.has_path(self.graph, node1.id, node2.id)

    def index_of(self, node: Node) -> int:
        """Position of ``node`` in the node list."""
        for i, candidate in enumerate(self.nodes):
            if candidate.id == node.id:
                return i
        raise KeyError(node.id)

    def closest_node(
        self, point: Point, max_distance: Optional[float] = None
    ) -> Optional[Node]:
        """
        Find the node whose center is closest to ``point``.

        A linear scan; the first node wins on ties.

        Args:
            point: Query point
            max_distance: If given, nodes farther than this are ignored

        Returns:
            The closest node, or None if the graph is empty or no node is
            within ``max_distance``
        """
        closest = None
        min_distance = float("inf")
        for node in self.nodes:
            distance = euclidean_distance(node.center, point)
            if distance < min_distance:
                min_distance = distance
                closest = node

        if closest is not None and max_distance is not None:
            if min_distance > max_distance:
                return None
        return closest

    def copy(self) -> "MeshGraph":
        """Independent copy; nodes and edges are immutable and shared."""
        return MeshGraph(self.nodes, self.edges)

    def __len__(self) -> int:
        return len(self.nodes)


def create_graph(nodes: Sequence[Node], edges: Optional[Sequence[Edge]] = None) -> MeshGraph:
    """
    Create a MeshGraph from nodes, computing edges when none are given.

    Args:
        nodes: Mesh leaf nodes
        edges: Precomputed edges, or None to run build_edges

    Returns:
        MeshGraph object
    """
    if edges is None:
        edges = build_edges(nodes)
    return MeshGraph(nodes, edges)
