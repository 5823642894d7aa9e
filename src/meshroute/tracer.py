"""
Debug tracing infrastructure for meshroute.

This module provides data structures for capturing detailed traces of a
routing session. When debug mode is enabled, the router records every
stage of the pipeline and every frontier entry the search dequeues.

This is primarily useful for:
1. Understanding why an objective found no path (what was explored)
2. Seeing the intermediate state of the pipeline (mesh size, resolution)
3. Writing targeted tests for search order and tie-breaking

Usage:
    >>> router = MeshRouter(max_level=4)
    >>> result = router.route(obstacles, connections, debug=True)
    >>> trace = router.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("debug_trace.txt")
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class SearchExpansion:
    """
    Record of one frontier entry taken by the search.

    Attributes:
        objective_id: Objective being searched
        iteration: 1-based dequeue counter within that objective
        node_id: Node at the head of the dequeued partial path
        cost: Hops from the start node
        priority: cost + heuristic at enqueue time
        path_length: Nodes in the partial path
    """

    objective_id: str
    iteration: int
    node_id: str
    cost: int
    priority: float
    path_length: int

    def __str__(self) -> str:
        return (
            f"[{self.objective_id} #{self.iteration}] {self.node_id} "
            f"cost={self.cost} priority={self.priority:g} len={self.path_length}"
        )


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    The routing pipeline has these stages:
    1. mesh_built - Leaf nodes produced by the quadtree builder
    2. edges_built - Adjacency computed
    3. objectives_resolved - Points mapped to nodes
    4. objectives_solved - Solver finished

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class SolveTrace:
    """
    Complete trace of a routing session.

    Attributes:
        stages: Pipeline stages with their data
        expansions: Every dequeued frontier entry, across objectives
    """

    stages: List[PipelineStage] = field(default_factory=list)
    expansions: List[SearchExpansion] = field(default_factory=list)

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """Add a pipeline stage snapshot."""
        self.stages.append(PipelineStage(name, data.copy()))

    def add_expansion(
        self,
        objective_id: str,
        iteration: int,
        node_id: str,
        cost: int,
        priority: float,
        path_length: int,
    ) -> None:
        """Record a dequeued frontier entry."""
        self.expansions.append(
            SearchExpansion(objective_id, iteration, node_id, cost, priority, path_length)
        )

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def get_expansions_for(self, objective_id: str) -> List[SearchExpansion]:
        """Get the expansions made while searching one objective."""
        return [e for e in self.expansions if e.objective_id == objective_id]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with the pipeline stages and the number of
        expansions per objective.
        """
        lines = [
            "=" * 60,
            "SOLVE TRACE SUMMARY",
            "=" * 60,
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]
        for stage in self.stages:
            lines.append(f"  - {stage.name}")

        lines.extend(["", f"Total expansions: {len(self.expansions)}", ""])

        counts: Dict[str, int] = {}
        for e in self.expansions:
            counts[e.objective_id] = counts.get(e.objective_id, 0) + 1

        lines.append("Expansions by objective:")
        for objective_id, count in counts.items():
            lines.append(f"  {objective_id}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """Full dump: summary, stage data and every expansion."""
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]

        lines.append("PIPELINE STAGES:")
        lines.append("-" * 40)
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")

        lines.append("EXPANSIONS:")
        lines.append("-" * 40)
        for e in self.expansions:
            lines.append(str(e))

        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
