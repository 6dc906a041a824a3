"""
Pydantic models for taskcanvas.

- geometry: Position, Dimensions, Rectangle
- layout: LayoutElement, LayoutOptions, PositionedElement
- viewport: ViewportState, PersistedViewport, transform string grammar
- task: TaskRecord, TaskRectangle, visual states
"""

from .geometry import Position, Dimensions, Rectangle
from .layout import (
    LayoutElement,
    LayoutConstraints,
    LayoutOptions,
    CircularLayoutConfig,
    PositionedElement,
)
from .viewport import (
    ViewportState,
    PersistedViewport,
    CenterTransform,
    format_transform,
    parse_transform,
)
from .task import (
    ElementState,
    TaskRecord,
    TaskText,
    TaskRectangle,
    TaskHierarchyState,
)

__all__ = [
    "Position",
    "Dimensions",
    "Rectangle",
    "LayoutElement",
    "LayoutConstraints",
    "LayoutOptions",
    "CircularLayoutConfig",
    "PositionedElement",
    "ViewportState",
    "PersistedViewport",
    "CenterTransform",
    "format_transform",
    "parse_transform",
    "ElementState",
    "TaskRecord",
    "TaskText",
    "TaskRectangle",
    "TaskHierarchyState",
]
