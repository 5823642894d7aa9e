"""
Debug utilities for meshroute.

Tools for checking that a built mesh and a routing result are consistent.
Each check returns ``(ok, problems)`` where ``problems`` lists a readable
message per violation, so tests and callers can print what went wrong.

Usage:
    >>> from meshroute.debug import MeshInspector
    >>> inspector = MeshInspector(graph, max_level=6)
    >>> ok, problems = inspector.check_invariants()
    >>> inspector.level_histogram()
    {1: 3, 2: 3}
"""

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .geometry import rects_overlap
from .graph import MeshGraph
from .models import Objective, ObjectiveSolution, SolutionStatus


class MeshInspector:
    """
    Utilities for inspecting a mesh graph.

    Args:
        graph: Mesh graph to inspect
        max_level: Depth bound the mesh was built with
    """

    def __init__(self, graph: MeshGraph, max_level: Optional[int] = None):
        self.graph = graph
        self.max_level = max_level

    def level_histogram(self) -> Dict[int, int]:
        """Count nodes per subdivision level."""
        counts: Dict[int, int] = {}
        for node in self.graph.nodes:
            counts[node.level] = counts.get(node.level, 0) + 1
        return dict(sorted(counts.items()))

    def total_capacity(self) -> int:
        return sum(node.capacity for node in self.graph.nodes)

    def check_invariants(self) -> Tuple[bool, List[str]]:
        """
        Check the structural invariants of the mesh.

        - No node is obstacle-covered without holding a target
        - No node is deeper than max_level
        - No two nodes overlap (leaves only, no ancestor/descendant pairs)
        - No edge joins a node to itself or repeats an unordered pair
        """
        problems: List[str] = []
        nodes = self.graph.nodes

        for node in nodes:
            if node.contains_obstacle and not node.contains_target:
                problems.append(f"Node {node.id} is covered by an obstacle")
            if self.max_level is not None and node.level > self.max_level:
                problems.append(
                    f"Node {node.id} has level {node.level} > {self.max_level}"
                )

        for i, node1 in enumerate(nodes):
            for node2 in nodes[i + 1 :]:
                if rects_overlap(node1.bounds, node2.bounds):
                    problems.append(f"Nodes {node1.id} and {node2.id} overlap")

        seen = set()
        for edge in self.graph.edges:
            if edge.from_node.id == edge.to_node.id:
                problems.append(f"Edge {edge.id} is a self-loop")
            if edge.key in seen:
                problems.append(f"Edge {edge.id} duplicates an existing pair")
            seen.add(edge.key)

        return len(problems) == 0, problems

    def check_paths(
        self,
        solutions: Sequence[ObjectiveSolution],
        objectives: Optional[Sequence[Optional[Objective]]] = None,
    ) -> Tuple[bool, List[str]]:
        """
        Check that every solved path walks along edges of the graph.

        When ``objectives`` is given (same order as ``solutions``), solved
        paths must also start and end at the objective's nodes.
        """
        problems: List[str] = []
        for i, solution in enumerate(solutions):
            path = solution.path
            for a, b in zip(path, path[1:]):
                if not self.graph.has_edge(a, b):
                    problems.append(
                        f"{solution.objective_id}: no edge between {a.id} and {b.id}"
                    )

            if objectives is None or solution.status != SolutionStatus.SOLVED:
                continue
            objective = objectives[i]
            if objective is None or not path:
                problems.append(f"{solution.objective_id}: solved without a path")
                continue
            if path[0].id != objective.start.id:
                problems.append(f"{solution.objective_id}: does not start at start node")
            if path[-1].id != objective.end.id:
                problems.append(f"{solution.objective_id}: does not end at end node")

        return len(problems) == 0, problems

    def check_residual(self, residual: Mapping[str, int]) -> Tuple[bool, List[str]]:
        """Check residual capacities stay within [0, capacity]."""
        problems: List[str] = []
        for node in self.graph.nodes:
            value = residual.get(node.id, node.capacity)
            if value < 0:
                problems.append(f"Node {node.id} has negative residual {value}")
            elif value > node.capacity:
                problems.append(
                    f"Node {node.id} residual {value} exceeds capacity {node.capacity}"
                )
        return len(problems) == 0, problems
