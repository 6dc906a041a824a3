"""
Geometry primitives shared by layout, viewport and rendering models.

Coordinates are canvas pixels as floats; (x, y) is the top-left corner.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CanvasModel(BaseModel):
    """Base model accepting both snake_case and camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Position(CanvasModel):
    """Point on the canvas."""

    x: float = Field(default=0.0, description="X coordinate (pixels)")
    y: float = Field(default=0.0, description="Y coordinate (pixels)")


class Dimensions(CanvasModel):
    """Width/height pair.

    Not constrained here: viewport bounds must be able to carry invalid
    values up to ViewportManager.set_bounds, which rejects them explicitly.
    """

    width: float = Field(..., description="Width (pixels)")
    height: float = Field(..., description="Height (pixels)")

    @property
    def is_positive(self) -> bool:
        return self.width > 0 and self.height > 0


class Rectangle(CanvasModel):
    """Axis-aligned rectangle."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Position:
        return Position(x=self.x + self.width / 2, y=self.y + self.height / 2)

    @classmethod
    def from_parts(cls, position: Position, dimensions: Dimensions) -> "Rectangle":
        return cls(
            x=position.x,
            y=position.y,
            width=dimensions.width,
            height=dimensions.height,
        )
