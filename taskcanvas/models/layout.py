"""
Layout input/output models.

LayoutElement is produced by the task repository and never mutated by the
engines. PositionedElement is the engine output, one per input element.
"""

import math
from typing import Optional

from pydantic import Field, field_validator

from ..constants import (
    DEFAULT_MIN_DISTANCE,
    DEFAULT_PADDING,
    DEFAULT_SCREEN_HEIGHT,
    DEFAULT_SCREEN_WIDTH,
)
from .geometry import CanvasModel, Dimensions, Position, Rectangle


class LayoutElement(CanvasModel):
    """Node to be laid out."""

    id: str = Field(..., min_length=1, description="Element identifier")
    dimensions: Dimensions = Field(..., description="Rectangle size")
    parent_id: Optional[str] = Field(default=None, description="Parent element id, None for roots")
    position: Optional[Position] = Field(default=None, description="Ignored by layout engines")

    @field_validator("dimensions")
    @classmethod
    def validate_dimensions(cls, v: Dimensions) -> Dimensions:
        """Reject negative or non-finite sizes."""
        for value in (v.width, v.height):
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"dimensions must be finite and non-negative, got {v.width}x{v.height}")
        return v

    @field_validator("parent_id")
    @classmethod
    def empty_parent_is_root(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class LayoutConstraints(CanvasModel):
    """Geometric constraints applied by the layout engines."""

    equal_distance_to_parent: bool = True
    equal_distance_between_siblings: bool = True
    no_intersection: bool = True
    min_distance: float = DEFAULT_MIN_DISTANCE


class LayoutOptions(CanvasModel):
    """Layout configuration.

    Values are checked by the engines (InvalidLayoutOptionsError) rather
    than here, so bad configuration fails at the layout call site.
    """

    constraints: LayoutConstraints = Field(default_factory=LayoutConstraints)
    padding: float = DEFAULT_PADDING
    screen_bounds: Dimensions = Field(
        default_factory=lambda: Dimensions(width=DEFAULT_SCREEN_WIDTH, height=DEFAULT_SCREEN_HEIGHT)
    )


class CircularLayoutConfig(LayoutOptions):
    """Options for the radial distribution."""

    radius: Optional[float] = Field(default=None, ge=0, description="Root ring radius override, used as given")
    start_angle: float = Field(default=0.0, description="Rotation of the root ring (radians)")


class PositionedElement(LayoutElement):
    """LayoutElement with a computed top-left position."""

    position: Position

    @property
    def rect(self) -> Rectangle:
        return Rectangle.from_parts(self.position, self.dimensions)
