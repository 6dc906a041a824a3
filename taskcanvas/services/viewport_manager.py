"""
Viewport pan/zoom state management.

ViewportManager is the only owner of ViewportState. Every operation is a
synchronous, atomic transition that leaves zoom within [min_zoom, max_zoom]
and position within +/- bounds.
"""

import logging
from typing import Optional

from ..constants import MAX_ZOOM, MIN_ZOOM, ZOOM_STEP
from ..errors import InvalidBoundsError
from ..models.geometry import Dimensions, Position
from ..models.viewport import PersistedViewport, ViewportState

logger = logging.getLogger(__name__)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class ViewportManager:
    """Owns the canvas camera (pan offset, zoom factor, pan bounds)."""

    def __init__(
        self,
        bounds: Dimensions,
        min_zoom: float = MIN_ZOOM,
        max_zoom: float = MAX_ZOOM,
        zoom_step: float = ZOOM_STEP,
    ):
        """
        Initialize viewport manager with identity transform.

        Args:
            bounds: Pan limits; position stays within +/- bounds on each axis
            min_zoom: Lower zoom limit
            max_zoom: Upper zoom limit
            zoom_step: Zoom change per unit of zoom delta

        Raises:
            InvalidBoundsError: bounds are not positive
        """
        if not bounds.is_positive:
            raise InvalidBoundsError(bounds.width, bounds.height)

        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.zoom_step = zoom_step
        self._state = ViewportState(position=Position(), zoom=1.0, bounds=bounds.model_copy())

    def get_state(self) -> ViewportState:
        """Return a copy of the current state."""
        return self._state.model_copy(deep=True)

    @property
    def zoom_level(self) -> float:
        return self._state.zoom

    def _clamp_position(self, x: float, y: float) -> Position:
        bounds = self._state.bounds
        return Position(
            x=clamp(x, -bounds.width, bounds.width),
            y=clamp(y, -bounds.height, bounds.height),
        )

    def pan(self, delta: Position) -> None:
        """Move the camera by delta, clamped to bounds."""
        logger.debug(f"Panning viewport by ({delta.x}, {delta.y})")
        position = self._state.position
        self._state.position = self._clamp_position(position.x + delta.x, position.y + delta.y)

    def zoom(self, delta: float, center: Position) -> None:
        """
        Zoom by delta steps, keeping the screen point center fixed.

        No-op when the clamped zoom equals the current zoom.
        """
        logger.debug(f"Zooming viewport by {delta} around ({center.x}, {center.y})")

        old_zoom = self._state.zoom
        new_zoom = clamp(old_zoom + delta * self.zoom_step, self.min_zoom, self.max_zoom)
        if new_zoom == old_zoom:
            return

        ratio = new_zoom / old_zoom
        position = self._state.position
        self._state.position = self._clamp_position(
            center.x - (center.x - position.x) * ratio,
            center.y - (center.y - position.y) * ratio,
        )
        self._state.zoom = new_zoom

    def reset(self) -> None:
        """Return to origin and zoom 1.0; bounds are preserved."""
        logger.debug("Resetting viewport")
        self._state = ViewportState(position=Position(), zoom=1.0, bounds=self._state.bounds)

    def set_bounds(self, bounds: Dimensions) -> None:
        """
        Replace pan bounds and re-clamp the position.

        Raises:
            InvalidBoundsError: width or height is not positive (state unchanged)
        """
        if not bounds.is_positive:
            logger.error(f"Invalid viewport bounds: {bounds.width}x{bounds.height}")
            raise InvalidBoundsError(bounds.width, bounds.height)

        self._state.bounds = bounds.model_copy()
        position = self._state.position
        self._state.position = self._clamp_position(position.x, position.y)

    def to_persisted(self) -> PersistedViewport:
        """Snapshot the camera in the persisted translate/scale format."""
        position = self._state.position
        return PersistedViewport(translate=Position(x=position.x, y=position.y), scale=self._state.zoom)

    def clamp_persisted(self, snapshot: PersistedViewport) -> PersistedViewport:
        """The camera apply_persisted() would produce for a finite snapshot."""
        position = self._clamp_position(snapshot.translate.x, snapshot.translate.y)
        return PersistedViewport(translate=position, scale=clamp(snapshot.scale, self.min_zoom, self.max_zoom))

    def apply_persisted(self, snapshot: Optional[PersistedViewport]) -> None:
        """Adopt a persisted camera, clamped to the current limits."""
        if snapshot is None or not snapshot.is_finite():
            logger.warning(f"Ignoring unusable viewport snapshot: {snapshot}")
            return

        clamped = self.clamp_persisted(snapshot)
        self._state.zoom = clamped.scale
        self._state.position = clamped.translate
        logger.debug(
            f"Applied persisted viewport: translate=({self._state.position.x}, "
            f"{self._state.position.y}) scale={self._state.zoom}"
        )
