"""
Multi-objective solver for mesh routing.

Routes a list of objectives one after another over a MeshGraph:
- A* search per objective (hop cost, Manhattan heuristic)
- Only nodes with residual capacity are expanded
- Each found path consumes one unit of capacity on every node it uses,
  so later objectives are pushed away from already-used routes
- A fixed iteration cap bounds each search

Objectives are solved greedily in sequence, never jointly. The order in
which they are attempted changes the result and is an explicit policy.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

from .capacity import CapacityLedger
from .geometry import euclidean_distance, manhattan_distance
from .graph import MeshGraph
from .models import Node, Objective, ObjectiveSolution, SolutionStatus
from .tracer import SolveTrace

logger = logging.getLogger(__name__)

# Frontier dequeues allowed per objective before the search gives up
DEFAULT_MAX_ITERATIONS = 10_000


class OrderingPolicy(Enum):
    """Order in which objectives are attempted."""

    AS_SUPPLIED = "as_supplied"
    SHORTEST_FIRST = "shortest_first"  # by start-end Euclidean distance


class IterationCapPolicy(Enum):
    """What a search returns when it hits the iteration cap."""

    NO_PATH = "no_path"
    BEST_PARTIAL = "best_partial"  # path whose head is closest to the goal


@dataclass
class SearchOutcome:
    """Result of a single-objective search."""

    path: List[Node]
    status: SolutionStatus
    iterations: int = 0


@dataclass
class SolveResult:
    """
    Result of a multi-objective solve.

    Attributes:
        solutions: One solution per objective, in input order.
        attempted: Every partial path the searches dequeued, across all
            objectives, in the order they were dequeued.
        ledger: Residual capacity after the last commit.
    """

    solutions: List[ObjectiveSolution] = field(default_factory=list)
    attempted: List[List[Node]] = field(default_factory=list)
    ledger: CapacityLedger = field(default_factory=CapacityLedger)

    @property
    def solved_count(self) -> int:
        return sum(1 for s in self.solutions if s.found)


def heuristic(node: Node, goal: Node) -> float:
    """Manhattan distance between node centers."""
    return manhattan_distance(node.center, goal.center)


def order_objectives(
    objectives: Sequence[Objective], policy: OrderingPolicy
) -> List[int]:
    """
    Return objective indices in the order they should be attempted.

    SHORTEST_FIRST sorts by start-end distance; equal distances keep their
    input order.
    """
    indices = list(range(len(objectives)))
    if policy == OrderingPolicy.SHORTEST_FIRST:
        indices.sort(
            key=lambda i: euclidean_distance(
                objectives[i].start.center, objectives[i].end.center
            )
        )
    return indices


class MultiObjectiveSolver:
    """
    Capacity-aware sequential A* solver.

    Example:
        >>> solver = MultiObjectiveSolver(ordering="shortest_first")
        >>> result = solver.solve(objectives, graph)
        >>> [s.status for s in result.solutions]
    """

    def __init__(
        self,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        ordering: Union[OrderingPolicy, str] = OrderingPolicy.AS_SUPPLIED,
        iteration_cap_policy: Union[IterationCapPolicy, str] = IterationCapPolicy.NO_PATH,
        respect_capacity_in_search: bool = True,
    ):
        """
        Initialize the solver.

        Args:
            max_iterations: Frontier dequeues allowed per objective
            ordering: Objective ordering policy
            iteration_cap_policy: Result returned when the cap is hit
            respect_capacity_in_search: Skip exhausted nodes while searching.
                When False, capacity is only checked when a found path is
                committed, and a path that does not fit is rejected.
        """
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")

        self.max_iterations = max_iterations
        self.ordering = OrderingPolicy(ordering)
        self.iteration_cap_policy = IterationCapPolicy(iteration_cap_policy)
        self.respect_capacity_in_search = respect_capacity_in_search

    def solve(
        self,
        objectives: Sequence[Objective],
        graph: MeshGraph,
        should_stop: Optional[Callable[[], bool]] = None,
        trace: Optional[SolveTrace] = None,
    ) -> SolveResult:
        """
        Route every objective against a fresh capacity ledger.

        Args:
            objectives: Objectives referencing nodes of ``graph``
            graph: Mesh graph to route over
            should_stop: Checked before each objective; when it returns True
                the remaining objectives are marked CANCELLED
            trace: Optional trace that receives every expansion

        Returns:
            SolveResult with one solution per objective, in input order
        """
        ledger = CapacityLedger(graph.nodes)
        result = SolveResult(ledger=ledger)
        solutions: List[Optional[ObjectiveSolution]] = [None] * len(objectives)
        order = order_objectives(objectives, self.ordering)

        for position, index in enumerate(order):
            objective = objectives[index]
            objective_id = objective.id or f"objective{index}"

            if should_stop is not None and should_stop():
                logger.info(
                    "Solve stopped with %d objectives remaining", len(order) - position
                )
                for remaining in order[position:]:
                    solutions[remaining] = ObjectiveSolution(
                        objectives[remaining].id or f"objective{remaining}",
                        status=SolutionStatus.CANCELLED,
                    )
                break

            outcome = self.search(objective, graph, ledger, result.attempted, trace, objective_id)
            path = outcome.path
            status = outcome.status

            if path:
                if not self.respect_capacity_in_search and not ledger.can_commit(path):
                    logger.warning(
                        "Rejected path for %s: exceeds residual capacity", objective_id
                    )
                    path = []
                    status = SolutionStatus.NO_PATH
                else:
                    ledger.commit(path)

            solutions[index] = ObjectiveSolution(
                objective_id, list(path), status, outcome.iterations
            )

        result.solutions = solutions
        logger.info(
            "Solved %d of %d objectives", result.solved_count, len(objectives)
        )
        return result

    def search(
        self,
        objective: Objective,
        graph: MeshGraph,
        ledger: CapacityLedger,
        attempted: Optional[List[List[Node]]] = None,
        trace: Optional[SolveTrace] = None,
        objective_id: Optional[str] = None,
    ) -> SearchOutcome:
        """
        A* search for one objective. Reads the ledger, never writes it.

        Frontier entries are ordered by priority, then by insertion order.

        Args:
            objective: Start and end nodes
            graph: Mesh graph to search
            ledger: Residual capacities to respect
            attempted: If given, receives every dequeued partial path
            trace: If given, receives every expansion
            objective_id: Id used in trace records

        Returns:
            SearchOutcome with the path and its status
        """
        start, goal = objective.start, objective.end
        objective_id = objective_id or objective.id

        if not graph.has_node(start.id) or not graph.has_node(goal.id):
            logger.warning("Objective %s references nodes outside the graph", objective_id)
            return SearchOutcome([], SolutionStatus.NO_PATH)

        if self.respect_capacity_in_search and not ledger.has_capacity(start):
            logger.debug("Objective %s: start node is exhausted", objective_id)
            return SearchOutcome([], SolutionStatus.NO_PATH)

        counter = itertools.count()
        frontier = [(heuristic(start, goal), next(counter), 0, [start])]
        cost_so_far = {start.id: 0}
        best_partial: List[Node] = []
        best_distance = float("inf")
        iterations = 0

        while frontier:
            priority, _, cost, path = heapq.heappop(frontier)
            current = path[-1]

            # Superseded by a cheaper entry for the same node
            if cost > cost_so_far[current.id]:
                continue

            iterations += 1
            if attempted is not None:
                attempted.append(path)
            if trace is not None:
                trace.add_expansion(
                    objective_id, iterations, current.id, cost, priority, len(path)
                )

            if current.id == goal.id:
                logger.debug(
                    "Objective %s: path of %d nodes after %d iterations",
                    objective_id,
                    len(path),
                    iterations,
                )
                return SearchOutcome(path, SolutionStatus.SOLVED, iterations)

            distance = heuristic(current, goal)
            if distance < best_distance:
                best_distance = distance
                best_partial = path

            if iterations > self.max_iterations:
                logger.warning(
                    "Objective %s: iteration cap of %d reached",
                    objective_id,
                    self.max_iterations,
                )
                if self.iteration_cap_policy == IterationCapPolicy.BEST_PARTIAL:
                    return SearchOutcome(best_partial, SolutionStatus.PARTIAL, iterations)
                return SearchOutcome([], SolutionStatus.ITERATION_CAP, iterations)

            for neighbor in graph.get_neighbors(current):
                if self.respect_capacity_in_search and not ledger.has_capacity(neighbor):
                    continue
                new_cost = cost + 1
                if neighbor.id not in cost_so_far or new_cost < cost_so_far[neighbor.id]:
                    cost_so_far[neighbor.id] = new_cost
                    heapq.heappush(
                        frontier,
                        (
                            new_cost + heuristic(neighbor, goal),
                            next(counter),
                            new_cost,
                            path + [neighbor],
                        ),
                    )

        logger.debug("Objective %s: frontier exhausted", objective_id)
        return SearchOutcome([], SolutionStatus.NO_PATH, iterations)


def solve_multi_objective(
    objectives: Sequence[Objective],
    graph: MeshGraph,
    **kwargs,
) -> SolveResult:
    """
    Convenience function to solve objectives with a one-off solver.

    Args:
        objectives: Objectives referencing nodes of ``graph``
        graph: Mesh graph to route over
        **kwargs: Passed to MultiObjectiveSolver

    Returns:
        SolveResult
    """
    return MultiObjectiveSolver(**kwargs).solve(objectives, graph)
