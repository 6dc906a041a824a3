"""
Rectangle geometry helpers.

Overlap checks back the layout verification pass; the line/rectangle
intersection gives connection endpoints between parent and child
rectangles for the rendering layer.
"""

import logging
import math
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models.geometry import Position, Rectangle
from ..models.layout import PositionedElement

logger = logging.getLogger(__name__)

# Lines closer to axis-aligned than this are treated as vertical/horizontal
AXIS_TOLERANCE = 0.001


def rectangles_overlap(a: Rectangle, b: Rectangle, margin: float = 0.0) -> bool:
    """Strict interior overlap; touching edges do not count.

    Args:
        margin: Shrinks both rectangles before testing to ignore near-misses
    """
    return (
        a.x < b.right - margin
        and a.right - margin > b.x
        and a.y < b.bottom - margin
        and a.bottom - margin > b.y
    )


def find_sibling_overlaps(elements: Sequence[PositionedElement]) -> List[Tuple[str, str]]:
    """Return id pairs of siblings whose rectangles overlap."""
    groups: Dict[Optional[str], List[PositionedElement]] = defaultdict(list)
    known = {e.id for e in elements}
    for element in elements:
        parent = element.parent_id if element.parent_id in known else None
        groups[parent].append(element)

    overlaps: List[Tuple[str, str]] = []
    for siblings in groups.values():
        for i, first in enumerate(siblings):
            for second in siblings[i + 1:]:
                if rectangles_overlap(first.rect, second.rect):
                    overlaps.append((first.id, second.id))
    return overlaps


def compute_bounds(rectangles: Iterable[Rectangle]) -> Optional[Rectangle]:
    """Smallest rectangle containing all inputs, None for no input."""
    rects = list(rectangles)
    if not rects:
        return None
    left = min(r.x for r in rects)
    top = min(r.y for r in rects)
    right = max(r.right for r in rects)
    bottom = max(r.bottom for r in rects)
    return Rectangle(x=left, y=top, width=right - left, height=bottom - top)


def get_intersection(start: Position, end: Position, rect: Rectangle) -> Optional[Position]:
    """
    Point where the line start->end crosses the rectangle boundary.

    Returns the crossing closest to start, or None when the line misses the
    rectangle or any coordinate is not finite.
    """
    values = (start.x, start.y, end.x, end.y, rect.x, rect.y, rect.width, rect.height)
    if not all(math.isfinite(v) for v in values):
        logger.warning(f"Invalid coordinates in get_intersection: {start} -> {end}, {rect}")
        return None

    # Vertical line
    if abs(end.x - start.x) < AXIS_TOLERANCE:
        y = rect.y if start.y < end.y else rect.bottom
        if rect.x <= start.x <= rect.right:
            return Position(x=start.x, y=y)
        return None

    # Horizontal line
    if abs(end.y - start.y) < AXIS_TOLERANCE:
        x = rect.x if start.x < end.x else rect.right
        if rect.y <= start.y <= rect.bottom:
            return Position(x=x, y=start.y)
        return None

    slope = (end.y - start.y) / (end.x - start.x)
    intercept = start.y - slope * start.x

    candidates: List[Position] = []

    for edge_x in (rect.x, rect.right):
        y = slope * edge_x + intercept
        if rect.y <= y <= rect.bottom:
            candidates.append(Position(x=edge_x, y=y))

    for edge_y in (rect.y, rect.bottom):
        x = (edge_y - intercept) / slope
        if rect.x <= x <= rect.right:
            candidates.append(Position(x=x, y=edge_y))

    if not candidates:
        return None

    return min(candidates, key=lambda p: math.hypot(p.x - start.x, p.y - start.y))


def connection_endpoints(
    parent: PositionedElement, child: PositionedElement
) -> Optional[Tuple[Position, Position]]:
    """Boundary points of the center-to-center line between parent and child."""
    parent_center = parent.rect.center
    child_center = child.rect.center
    start = get_intersection(child_center, parent_center, parent.rect)
    end = get_intersection(parent_center, child_center, child.rect)
    if start is None or end is None:
        return None
    return start, end
