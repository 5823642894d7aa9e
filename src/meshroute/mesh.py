"""
Mesh construction module.

Builds an adaptive quadtree mesh over a square region:
- Regions overlapping an obstacle or holding a target point are split
  into four quadrants, down to a maximum depth
- Leaves fully decided as obstacle (and holding no target) are dropped
- Every surviving leaf becomes a Node whose capacity shrinks with depth

Open space stays coarse while the mesh gets fine near obstacles and
targets.
"""

import logging
import uuid
from typing import List, Optional, Sequence

from .geometry import point_in_rect, rects_overlap
from .models import Node, Point, Rectangle

logger = logging.getLogger(__name__)

# =============================================================================
# MESH CONFIGURATION
# =============================================================================

# Deepest subdivision level. Cells at this level are never split further.
MAX_LEVEL = 6

# Default root region: a 600x600 square centered in an 800x600 plane
ROOT_REGION = Rectangle(Point(400, 300), 600, 600)

# Hard ceiling on the number of nodes a single build may produce
MAX_MESH_NODES = 50_000

# =============================================================================


class MeshValidationError(ValueError):
    """Raised when the mesh input geometry is degenerate."""

    pass


class MeshResourceError(RuntimeError):
    """Raised when a build would produce more nodes than allowed."""

    pass


def node_capacity(level: int, max_level: int = MAX_LEVEL) -> int:
    """
    Capacity of a cell at the given depth.

    Finer cells get smaller capacity, so tight spaces near obstacles are
    scarce: (max_level - level + 1) ** 2.
    """
    return (max_level - level + 1) ** 2


def new_node_id() -> str:
    return f"node-{uuid.uuid4().hex}"


class MeshBuilder:
    """
    Recursive quadtree mesh builder.

    Example:
        >>> builder = MeshBuilder(max_level=4)
        >>> nodes = builder.build(ROOT_REGION, obstacles=[...])
    """

    def __init__(self, max_level: int = MAX_LEVEL, max_nodes: int = MAX_MESH_NODES):
        """
        Initialize the mesh builder.

        Args:
            max_level: Deepest subdivision level (0 means no subdivision)
            max_nodes: Ceiling on nodes produced by one build
        """
        if max_level < 0:
            raise MeshValidationError(f"max_level must be >= 0, got {max_level}")
        if max_nodes < 1:
            raise MeshValidationError(f"max_nodes must be >= 1, got {max_nodes}")

        self.max_level = max_level
        self.max_nodes = max_nodes
        self._obstacles: List[Rectangle] = []
        self._targets: Optional[List[Point]] = None
        self._emitted = 0

    def build(
        self,
        region: Rectangle,
        obstacles: Sequence[Rectangle] = (),
        targets: Optional[Sequence[Point]] = None,
    ) -> List[Node]:
        """
        Build the leaf nodes covering ``region``.

        Args:
            region: Root region to subdivide
            obstacles: Rectangles that block routing
            targets: Optional points whose enclosing cells must survive even
                when they overlap an obstacle

        Returns:
            Leaf nodes in depth-first quadrant order (top-left, top-right,
            bottom-left, bottom-right)
        """
        _validate_rect(region, "region")
        for i, obstacle in enumerate(obstacles):
            _validate_rect(obstacle, f"obstacle {i}")

        self._obstacles = list(obstacles)
        self._targets = list(targets) if targets is not None else None
        self._emitted = 0

        nodes = self._build_region(region, 0)
        logger.debug(
            "Built mesh: %d nodes from %d obstacles, %s targets (max_level=%d)",
            len(nodes),
            len(self._obstacles),
            len(self._targets) if self._targets is not None else "no",
            self.max_level,
        )
        return nodes

    def _build_region(self, rect: Rectangle, level: int) -> List[Node]:
        has_obstacle = any(rects_overlap(rect, obs) for obs in self._obstacles)
        has_target = self._targets is not None and any(
            point_in_rect(target, rect) for target in self._targets
        )

        if level == self.max_level and has_obstacle and not has_target:
            return []

        if (has_obstacle or has_target) and level < self.max_level:
            children: List[Node] = []
            for quadrant in _quadrants(rect):
                children.extend(self._build_region(quadrant, level + 1))
            return [
                child
                for child in children
                if child.contains_target or not child.contains_obstacle
            ]

        if has_obstacle and not has_target:
            return []

        return [self._emit(rect, level, has_obstacle, has_target)]

    def _emit(
        self, rect: Rectangle, level: int, has_obstacle: bool, has_target: bool
    ) -> Node:
        self._emitted += 1
        if self._emitted > self.max_nodes:
            raise MeshResourceError(
                f"Mesh exceeds {self.max_nodes} nodes; "
                "reduce max_level or the number of obstacles"
            )
        return Node(
            id=new_node_id(),
            x=rect.center.x,
            y=rect.center.y,
            width=rect.width,
            height=rect.height,
            level=level,
            capacity=node_capacity(level, self.max_level),
            contains_obstacle=has_obstacle,
            contains_target=has_target,
        )


def _quadrants(rect: Rectangle) -> List[Rectangle]:
    """Split a rectangle into four equal quadrants."""
    half_w = rect.width / 2
    half_h = rect.height / 2
    cx, cy = rect.center.x, rect.center.y
    return [
        Rectangle(Point(cx - half_w / 2, cy - half_h / 2), half_w, half_h),
        Rectangle(Point(cx + half_w / 2, cy - half_h / 2), half_w, half_h),
        Rectangle(Point(cx - half_w / 2, cy + half_h / 2), half_w, half_h),
        Rectangle(Point(cx + half_w / 2, cy + half_h / 2), half_w, half_h),
    ]


def _validate_rect(rect: Rectangle, label: str) -> None:
    if rect.width <= 0 or rect.height <= 0:
        raise MeshValidationError(
            f"{label} must have positive width and height, "
            f"got {rect.width}x{rect.height}"
        )


def build_mesh(
    region: Rectangle = ROOT_REGION,
    obstacles: Sequence[Rectangle] = (),
    targets: Optional[Sequence[Point]] = None,
    max_level: int = MAX_LEVEL,
    max_nodes: int = MAX_MESH_NODES,
) -> List[Node]:
    """
    Build the leaf nodes of an adaptive quadtree mesh.

    Args:
        region: Root region to subdivide
        obstacles: Rectangles that block routing
        targets: Optional points whose enclosing cells must survive
        max_level: Deepest subdivision level
        max_nodes: Ceiling on nodes produced

    Returns:
        List of leaf Node objects
    """
    builder = MeshBuilder(max_level=max_level, max_nodes=max_nodes)
    return builder.build(region, obstacles, targets)
