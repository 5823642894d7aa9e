"""
Main routing pipeline.

Combines mesh construction, adjacency, objective resolution and solving:
obstacles + point pairs -> mesh nodes -> edges -> objectives -> paths.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Union

from .graph import MeshGraph, build_edges
from .mesh import MAX_LEVEL, MAX_MESH_NODES, ROOT_REGION, MeshBuilder
from .models import Node, Objective, ObjectiveSolution, Point, Rectangle, SolutionStatus
from .solver import (
    DEFAULT_MAX_ITERATIONS,
    IterationCapPolicy,
    MultiObjectiveSolver,
    OrderingPolicy,
)
from .tracer import SolveTrace

logger = logging.getLogger(__name__)


@dataclass
class Connection:
    """A requested connection between two points in the plane."""

    start: Point
    end: Point
    id: str = ""


@dataclass
class RoutingResult:
    """
    Result of the routing pipeline.

    Attributes:
        graph: Mesh graph the objectives were routed on.
        objectives: Resolved objective per connection (None if a point had
            no node).
        solutions: One solution per connection, in input order.
        attempted: Every partial path dequeued by the searches.
        residual: Residual capacity per node id after solving.
    """

    graph: MeshGraph
    objectives: List[Optional[Objective]] = field(default_factory=list)
    solutions: List[ObjectiveSolution] = field(default_factory=list)
    attempted: List[List[Node]] = field(default_factory=list)
    residual: Dict[str, int] = field(default_factory=dict)

    @property
    def paths(self) -> List[List[Node]]:
        return [solution.path for solution in self.solutions]


class MeshRouter:
    """
    Route point-to-point connections around rectangular obstacles.

    Example:
        >>> router = MeshRouter(max_level=5, ordering="shortest_first")
        >>> result = router.route(
        ...     obstacles=[Rectangle(Point(400, 300), 100, 100)],
        ...     connections=[(Point(150, 50), Point(650, 550))],
        ... )
        >>> [s.status for s in result.solutions]
    """

    def __init__(
        self,
        region: Rectangle = ROOT_REGION,
        max_level: int = MAX_LEVEL,
        max_nodes: int = MAX_MESH_NODES,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        ordering: Union[OrderingPolicy, str] = OrderingPolicy.AS_SUPPLIED,
        iteration_cap_policy: Union[IterationCapPolicy, str] = IterationCapPolicy.NO_PATH,
        respect_capacity_in_search: bool = True,
        snap_radius: Optional[float] = None,
    ):
        """
        Initialize the router.

        Args:
            region: Root region of the mesh
            max_level: Deepest subdivision level
            max_nodes: Ceiling on mesh nodes per build
            max_iterations: Frontier dequeues allowed per objective
            ordering: "as_supplied" or "shortest_first"
            iteration_cap_policy: "no_path" or "best_partial"
            respect_capacity_in_search: Skip exhausted nodes while searching
            snap_radius: Farthest a point may be from a node center and still
                resolve to it (None means any distance)
        """
        if snap_radius is not None and snap_radius < 0:
            raise ValueError(f"snap_radius must be >= 0, got {snap_radius}")

        self.region = region
        self.snap_radius = snap_radius
        self.mesh_builder = MeshBuilder(max_level=max_level, max_nodes=max_nodes)
        self.solver = MultiObjectiveSolver(
            max_iterations=max_iterations,
            ordering=ordering,
            iteration_cap_policy=iteration_cap_policy,
            respect_capacity_in_search=respect_capacity_in_search,
        )
        self._trace: Optional[SolveTrace] = None

    def build_graph(
        self,
        obstacles: Sequence[Rectangle] = (),
        targets: Optional[Sequence[Point]] = None,
        trace: Optional[SolveTrace] = None,
    ) -> MeshGraph:
        """
        Build the mesh and its adjacency.

        Args:
            obstacles: Rectangles that block routing
            targets: Points whose enclosing cells must survive
            trace: Optional trace receiving the build stages

        Returns:
            MeshGraph of the leaf nodes and their edges
        """
        nodes = self.mesh_builder.build(self.region, obstacles, targets)
        if trace is not None:
            trace.add_stage(
                "mesh_built",
                {
                    "node_count": len(nodes),
                    "obstacle_count": len(obstacles),
                    "target_count": len(targets) if targets is not None else 0,
                    "max_level": self.mesh_builder.max_level,
                },
            )

        edges = build_edges(nodes)
        if trace is not None:
            trace.add_stage("edges_built", {"edge_count": len(edges)})

        return MeshGraph(nodes, edges)

    def resolve_objectives(
        self, graph: MeshGraph, connections: Sequence[Union[Connection, tuple]]
    ) -> List[Optional[Objective]]:
        """
        Map connection end points to their nearest nodes.

        Args:
            graph: Mesh graph to resolve against
            connections: Connection objects or (start, end) point pairs

        Returns:
            One Objective per connection, or None where either point has no
            node within snap_radius
        """
        objectives: List[Optional[Objective]] = []
        for i, connection in enumerate(_as_connections(connections)):
            objective_id = connection.id or f"objective{i}"
            start = graph.closest_node(connection.start, self.snap_radius)
            end = graph.closest_node(connection.end, self.snap_radius)
            if start is None or end is None:
                logger.warning(
                    "Objective %s: no node near %s",
                    objective_id,
                    connection.start if start is None else connection.end,
                )
                objectives.append(None)
                continue
            objectives.append(Objective(start, end, objective_id))
        return objectives

    def route(
        self,
        obstacles: Sequence[Rectangle],
        connections: Sequence[Union[Connection, tuple]],
        debug: bool = False,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> RoutingResult:
        """
        Run the whole pipeline.

        Every connection end point is used as a mesh target, so its cell
        survives even inside an obstacle.

        Args:
            obstacles: Rectangles that block routing
            connections: Connection objects or (start, end) point pairs
            debug: Record a SolveTrace, available from get_trace()
            should_stop: Checked between objectives for early abort

        Returns:
            RoutingResult with one solution per connection, in input order
        """
        connections = _as_connections(connections)
        trace = SolveTrace() if debug else None
        self._trace = trace

        targets = [p for c in connections for p in (c.start, c.end)]
        graph = self.build_graph(obstacles, targets, trace)

        objectives = self.resolve_objectives(graph, connections)
        if trace is not None:
            trace.add_stage(
                "objectives_resolved",
                {
                    "resolved": sum(1 for o in objectives if o is not None),
                    "unresolved": sum(1 for o in objectives if o is None),
                },
            )

        resolved = [o for o in objectives if o is not None]
        solve_result = self.solver.solve(resolved, graph, should_stop, trace)

        solutions: List[ObjectiveSolution] = []
        solved = iter(solve_result.solutions)
        for i, objective in enumerate(objectives):
            if objective is None:
                solutions.append(
                    ObjectiveSolution(
                        connections[i].id or f"objective{i}",
                        status=SolutionStatus.UNRESOLVED,
                    )
                )
            else:
                solutions.append(next(solved))

        if trace is not None:
            trace.add_stage(
                "objectives_solved",
                {
                    "solved": solve_result.solved_count,
                    "statuses": [s.status.value for s in solutions],
                    "attempted_paths": len(solve_result.attempted),
                },
            )

        return RoutingResult(
            graph=graph,
            objectives=objectives,
            solutions=solutions,
            attempted=solve_result.attempted,
            residual=dict(solve_result.ledger.snapshot()),
        )

    def get_trace(self) -> Optional[SolveTrace]:
        """Trace of the last route(debug=True) call, or None."""
        return self._trace


def _as_connections(connections: Sequence[Union[Connection, tuple]]) -> List[Connection]:
    result = []
    for connection in connections:
        if isinstance(connection, Connection):
            result.append(connection)
        else:
            start, end = connection
            result.append(Connection(start, end))
    return result
