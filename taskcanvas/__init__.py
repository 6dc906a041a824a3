"""
taskcanvas: hierarchical task layout and viewport restoration.

Lays out a forest of task rectangles on a zoomable canvas and restores the
user's exact prior viewport on reload without a visible camera jump.
"""

__version__ = "1.0.0"

from .canvas import WorkspaceCanvas
from .config import CanvasSettings, load_settings, setup_logging
from .errors import (
    CanvasError,
    LayoutError,
    LayoutCycleError,
    InvalidLayoutOptionsError,
    LayoutValidationError,
    ViewportError,
    InvalidBoundsError,
)

__all__ = [
    "__version__",
    "WorkspaceCanvas",
    "CanvasSettings",
    "load_settings",
    "setup_logging",
    "CanvasError",
    "LayoutError",
    "LayoutCycleError",
    "InvalidLayoutOptionsError",
    "LayoutValidationError",
    "ViewportError",
    "InvalidBoundsError",
]
