"""
Error taxonomy for taskcanvas.

Layout and viewport errors are raised synchronously and must be handled by
the caller. Transform restoration never raises to its consumer; it logs and
reveals the canvas instead.
"""

from typing import Optional, Sequence


class CanvasError(Exception):
    """Base class for all taskcanvas errors."""
    pass


# ============================================================================
# Layout errors
# ============================================================================

class LayoutError(CanvasError):
    """Layout pass failed."""
    pass


class LayoutCycleError(LayoutError):
    """Parent links form a cycle (an element is its own ancestor)."""

    def __init__(self, element_id: str, cycle: Optional[Sequence[str]] = None):
        self.element_id = element_id
        self.cycle = list(cycle or [element_id])
        super().__init__(
            f"Cycle in parent links at element '{element_id}': "
            f"{' -> '.join(self.cycle + [self.cycle[0]])}"
        )


class InvalidLayoutOptionsError(LayoutError):
    """Layout options cannot produce a valid layout."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class LayoutValidationError(LayoutError):
    """Element set is structurally invalid (e.g. duplicate ids)."""
    pass


# ============================================================================
# Viewport errors
# ============================================================================

class ViewportError(CanvasError):
    """Viewport operation failed."""
    pass


class InvalidBoundsError(ViewportError):
    """Viewport bounds must have positive width and height."""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        super().__init__(
            f"Invalid viewport bounds {width}x{height}: width and height must be positive"
        )
