"""
Geometry predicates for axis-aligned rectangles.

Pure functions used by the mesh builder (obstacle and target tests) and
by the adjacency builder (border sharing between mesh cells).
"""

from .models import Point, Rectangle


def rects_overlap(rect1: Rectangle, rect2: Rectangle) -> bool:
    """
    Check if two rectangles overlap.

    Rectangles that only touch along an edge or at a corner do not overlap.
    """
    half_widths = rect1.width / 2 + rect2.width / 2
    half_heights = rect1.height / 2 + rect2.height / 2
    return (
        abs(rect1.center.x - rect2.center.x) < half_widths
        and abs(rect1.center.y - rect2.center.y) < half_heights
    )


def point_in_rect(point: Point, rect: Rectangle) -> bool:
    """Check if a point lies inside a rectangle (borders included)."""
    return rect.left <= point.x <= rect.right and rect.top <= point.y <= rect.bottom


def overlap_length(start1: float, end1: float, start2: float, end2: float) -> float:
    """Length of the overlap between two 1-D intervals (0 if disjoint)."""
    return max(0.0, min(end1, end2) - max(start1, start2))


def share_vertical_border(
    rect1: Rectangle, rect2: Rectangle, epsilon: float, min_overlap: float
) -> bool:
    """
    Check if two rectangles sit side by side with a common vertical border.

    The horizontal gap between one's right edge and the other's left edge
    must be below ``epsilon`` and the vertical extents must overlap by at
    least ``min_overlap``.
    """
    touching = (
        abs(rect1.right - rect2.left) < epsilon
        or abs(rect1.left - rect2.right) < epsilon
    )
    if not touching:
        return False
    shared = overlap_length(rect1.top, rect1.bottom, rect2.top, rect2.bottom)
    return shared >= min_overlap


def share_horizontal_border(
    rect1: Rectangle, rect2: Rectangle, epsilon: float, min_overlap: float
) -> bool:
    """Same as share_vertical_border with the axes swapped."""
    touching = (
        abs(rect1.bottom - rect2.top) < epsilon
        or abs(rect1.top - rect2.bottom) < epsilon
    )
    if not touching:
        return False
    shared = overlap_length(rect1.left, rect1.right, rect2.left, rect2.right)
    return shared >= min_overlap


def rects_bordering(
    rect1: Rectangle, rect2: Rectangle, epsilon: float = 1.0, min_overlap: float = 1.0
) -> bool:
    """Check if two rectangles share a vertical or horizontal border."""
    return share_vertical_border(
        rect1, rect2, epsilon, min_overlap
    ) or share_horizontal_border(rect1, rect2, epsilon, min_overlap)


def euclidean_distance(point1: Point, point2: Point) -> float:
    dx = point2.x - point1.x
    dy = point2.y - point1.y
    return (dx * dx + dy * dy) ** 0.5


def manhattan_distance(point1: Point, point2: Point) -> float:
    return abs(point1.x - point2.x) + abs(point1.y - point2.y)
