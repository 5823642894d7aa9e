"""
Data models for mesh routing.

This module contains dataclasses describing the plane geometry (points and
rectangles), the mesh produced by the quadtree builder (nodes and edges),
and the routing problem and its results (objectives and solutions).

Classes:
    Point: A position in plane coordinates.
    Rectangle: An axis-aligned rectangle given by its center and size.
    Node: A leaf cell of the mesh with a routing capacity.
    Edge: Border-adjacency between two nodes.
    Objective: A start-to-end connection to be routed.
    SolutionStatus: Outcome of routing one objective.
    ObjectiveSolution: The path found (or not) for one objective.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List


@dataclass(frozen=True)
class Point:
    """A position in plane coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class Rectangle:
    """
    Axis-aligned rectangle.

    Obstacles and mesh regions are both rectangles. The y axis grows
    downward, so ``top`` is the smaller y coordinate.

    Attributes:
        center: Center point of the rectangle.
        width: Horizontal size.
        height: Vertical size.
    """

    center: Point
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.center.x - self.width / 2

    @property
    def right(self) -> float:
        return self.center.x + self.width / 2

    @property
    def top(self) -> float:
        return self.center.y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.center.y + self.height / 2

    @classmethod
    def from_bounds(
        cls, left: float, top: float, right: float, bottom: float
    ) -> "Rectangle":
        """Create a rectangle from its edge coordinates."""
        return cls(
            Point((left + right) / 2, (top + bottom) / 2),
            right - left,
            bottom - top,
        )


@dataclass(frozen=True)
class Node:
    """
    A leaf cell of the mesh.

    Nodes are created by the mesh builder and never change afterwards.
    ``id`` is the only identity key: two nodes with equal coordinates from
    different builds are different nodes.

    Attributes:
        id: Opaque identity assigned at creation.
        x: X coordinate of the cell center.
        y: Y coordinate of the cell center.
        width: Cell width.
        height: Cell height.
        level: Subdivision depth (0 = root region).
        capacity: Number of paths allowed through this cell.
        contains_obstacle: Cell overlaps at least one obstacle.
        contains_target: Cell contains at least one target point.
    """

    id: str
    x: float
    y: float
    width: float
    height: float
    level: int = 0
    capacity: int = 1
    contains_obstacle: bool = False
    contains_target: bool = False

    @property
    def center(self) -> Point:
        return Point(self.x, self.y)

    @property
    def bounds(self) -> Rectangle:
        return Rectangle(Point(self.x, self.y), self.width, self.height)


@dataclass(frozen=True)
class Edge:
    """Undirected border-adjacency between two nodes."""

    from_node: Node
    to_node: Node
    id: str = ""

    @property
    def key(self) -> FrozenSet[str]:
        """Unordered pair of node ids; equal for (A, B) and (B, A)."""
        return frozenset((self.from_node.id, self.to_node.id))

    def other(self, node: Node) -> Node:
        """Return the endpoint opposite to ``node``."""
        if node.id == self.from_node.id:
            return self.to_node
        if node.id == self.to_node.id:
            return self.from_node
        raise ValueError(f"Node {node.id} is not an endpoint of edge {self.id}")


@dataclass
class Objective:
    """
    A single connection to route.

    Attributes:
        start: Node the path must start at.
        end: Node the path must end at.
        id: Objective identifier, echoed in its solution.
    """

    start: Node
    end: Node
    id: str = ""


class SolutionStatus(Enum):
    """Outcome of routing one objective."""

    SOLVED = "solved"
    NO_PATH = "no_path"
    ITERATION_CAP = "iteration_cap"
    PARTIAL = "partial"
    UNRESOLVED = "unresolved"
    CANCELLED = "cancelled"


@dataclass
class ObjectiveSolution:
    """
    Result for one objective.

    An empty path means no path was found. That is a normal outcome,
    ``status`` says why.

    Attributes:
        objective_id: Id of the objective this solution belongs to.
        path: Ordered nodes from start to end (empty if not found).
        status: Why the path looks the way it does.
        iterations: Frontier dequeues spent on this objective.
    """

    objective_id: str
    path: List[Node] = field(default_factory=list)
    status: SolutionStatus = SolutionStatus.NO_PATH
    iterations: int = 0

    @property
    def found(self) -> bool:
        return self.status == SolutionStatus.SOLVED

    @property
    def degraded(self) -> bool:
        """True when the search was cut short by the iteration cap."""
        return self.status in (SolutionStatus.ITERATION_CAP, SolutionStatus.PARTIAL)
