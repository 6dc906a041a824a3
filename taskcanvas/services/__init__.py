"""
Services for taskcanvas.

Layout engines, viewport camera, centering, task hierarchy presentation and
the event channel. All services are synchronous.
"""

from .layout_engine import LayoutEngine, ElementArena, validate_layout_options
from .circular_layout import CircularLayoutEngine, calculate_ring_radius
from .viewport_manager import ViewportManager, clamp
from .centering import calculate_center
from .geometry import (
    rectangles_overlap,
    find_sibling_overlaps,
    compute_bounds,
    get_intersection,
    connection_endpoints,
)
from .task_hierarchy import (
    count_descendants,
    compute_visual_states,
    to_layout_elements,
    build_task_rectangles,
)
from .event_channel import EventChannel

__all__ = [
    "LayoutEngine",
    "ElementArena",
    "validate_layout_options",
    "CircularLayoutEngine",
    "calculate_ring_radius",
    "ViewportManager",
    "clamp",
    "calculate_center",
    "rectangles_overlap",
    "find_sibling_overlaps",
    "compute_bounds",
    "get_intersection",
    "connection_endpoints",
    "count_descendants",
    "compute_visual_states",
    "to_layout_elements",
    "build_task_rectangles",
    "EventChannel",
]
