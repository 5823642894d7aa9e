"""
Conversion of routing results into plain data.

Renderers and serializers work with node indices, ids or coordinates
rather than Node objects. These helpers produce those shapes.
"""

from typing import Any, Dict, List, Sequence, Tuple

from .graph import MeshGraph
from .models import Node, ObjectiveSolution


def solutions_to_index_paths(
    graph: MeshGraph, solutions: Sequence[ObjectiveSolution]
) -> List[List[int]]:
    """Each path as positions in ``graph.nodes``."""
    index = {node.id: i for i, node in enumerate(graph.nodes)}
    return [[index[node.id] for node in solution.path] for solution in solutions]


def solutions_to_id_paths(solutions: Sequence[ObjectiveSolution]) -> List[List[str]]:
    """Each path as node ids."""
    return [[node.id for node in solution.path] for solution in solutions]


def solutions_to_point_paths(
    solutions: Sequence[ObjectiveSolution],
) -> List[List[Tuple[float, float]]]:
    """Each path as the (x, y) centers of its nodes."""
    return [[(node.x, node.y) for node in solution.path] for solution in solutions]


def node_usage(solutions: Sequence[ObjectiveSolution]) -> Dict[str, List[str]]:
    """
    Map node id to the ids of the objectives whose path passes through it.

    Nodes no path uses are absent.
    """
    usage: Dict[str, List[str]] = {}
    for solution in solutions:
        for node in solution.path:
            usage.setdefault(node.id, []).append(solution.objective_id)
    return usage


def node_to_dict(node: Node) -> Dict[str, Any]:
    return {
        "id": node.id,
        "x": node.x,
        "y": node.y,
        "width": node.width,
        "height": node.height,
        "level": node.level,
        "capacity": node.capacity,
        "containsObstacle": node.contains_obstacle,
        "containsTarget": node.contains_target,
    }


def result_to_dict(
    graph: MeshGraph,
    solutions: Sequence[ObjectiveSolution],
    attempted: Sequence[Sequence[Node]] = (),
) -> Dict[str, Any]:
    """
    Plain-dict snapshot of a routed mesh.

    Edges and paths refer to nodes by id.

    Args:
        graph: Mesh graph that was routed
        solutions: Solutions to include
        attempted: Optional attempted paths to include

    Returns:
        Dictionary with nodes, edges, solutions and attemptedPaths
    """
    return {
        "nodes": [node_to_dict(node) for node in graph.nodes],
        "edges": [
            {"id": edge.id, "from": edge.from_node.id, "to": edge.to_node.id}
            for edge in graph.edges
        ],
        "solutions": [
            {
                "objectiveId": solution.objective_id,
                "status": solution.status.value,
                "path": [node.id for node in solution.path],
            }
            for solution in solutions
        ],
        "attemptedPaths": [[node.id for node in path] for path in attempted],
    }
