"""
meshroute - Capacity-aware routing on adaptive quadtree meshes

A Python library that decomposes a plane with rectangular obstacles into a
quadtree mesh and routes several point-to-point connections through it,
each path consuming capacity from the cells it crosses.

Example:
    >>> from meshroute import MeshRouter, Point, Rectangle
    >>> router = MeshRouter(max_level=5)
    >>> result = router.route(
    ...     obstacles=[Rectangle(Point(400, 300), 100, 100)],
    ...     connections=[(Point(150, 50), Point(650, 550))],
    ... )
    >>> result.solutions[0].status

Debug Mode Example:
    >>> result = router.route(obstacles, connections, debug=True)
    >>> trace = router.get_trace()
    >>> print(trace.summary())
"""

from .capacity import CapacityLedger, CapacityUnderflowError
from .debug import MeshInspector
from .export import (
    node_usage,
    result_to_dict,
    solutions_to_id_paths,
    solutions_to_index_paths,
    solutions_to_point_paths,
)
from .graph import MeshGraph, build_edges, create_graph, nodes_bordering
from .logging_config import setup_logging
from .mesh import (
    MAX_LEVEL,
    ROOT_REGION,
    MeshBuilder,
    MeshResourceError,
    MeshValidationError,
    build_mesh,
)
from .models import (
    Edge,
    Node,
    Objective,
    ObjectiveSolution,
    Point,
    Rectangle,
    SolutionStatus,
)
from .router import Connection, MeshRouter, RoutingResult
from .solver import (
    IterationCapPolicy,
    MultiObjectiveSolver,
    OrderingPolicy,
    SolveResult,
    solve_multi_objective,
)
from .tracer import PipelineStage, SearchExpansion, SolveTrace

__version__ = "0.1.0"

__all__ = [
    # Main API
    "MeshRouter",
    "Connection",
    "RoutingResult",
    # Models
    "Point",
    "Rectangle",
    "Node",
    "Edge",
    "Objective",
    "ObjectiveSolution",
    "SolutionStatus",
    # Mesh
    "MeshBuilder",
    "build_mesh",
    "MAX_LEVEL",
    "ROOT_REGION",
    "MeshValidationError",
    "MeshResourceError",
    # Graph
    "MeshGraph",
    "build_edges",
    "create_graph",
    "nodes_bordering",
    # Solver
    "MultiObjectiveSolver",
    "solve_multi_objective",
    "SolveResult",
    "OrderingPolicy",
    "IterationCapPolicy",
    "CapacityLedger",
    "CapacityUnderflowError",
    # Export
    "solutions_to_index_paths",
    "solutions_to_id_paths",
    "solutions_to_point_paths",
    "node_usage",
    "result_to_dict",
    # Debug/Tracing
    "SolveTrace",
    "PipelineStage",
    "SearchExpansion",
    "MeshInspector",
    "setup_logging",
]
