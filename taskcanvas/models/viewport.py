"""
Viewport models and the transform string grammar.

PersistedViewport is the on-disk contract shared by the centering
calculator, the viewport store and the restoration controller. The
canonical transform string applied to the root drawing group is:

    translate(<x>px, <y>px) scale(<s>)
"""

import math
import re
from typing import Optional

from pydantic import Field

from .geometry import CanvasModel, Dimensions, Position


class ViewportState(CanvasModel):
    """Pan/zoom state owned by ViewportManager."""

    position: Position = Field(default_factory=Position)
    zoom: float = 1.0
    bounds: Dimensions


class PersistedViewport(CanvasModel):
    """Serialized camera: {"translate": {"x", "y"}, "scale"}."""

    translate: Position = Field(default_factory=Position)
    scale: float = 1.0

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.translate.x, self.translate.y, self.scale))

    def matches(self, other: "PersistedViewport", epsilon: float) -> bool:
        """True when x, y and scale each differ by less than epsilon."""
        return (
            abs(self.translate.x - other.translate.x) < epsilon
            and abs(self.translate.y - other.translate.y) < epsilon
            and abs(self.scale - other.scale) < epsilon
        )


class CenterTransform(CanvasModel):
    """Result of centering a target in the viewport."""

    scale: float
    x: float
    y: float

    @property
    def translate(self) -> Position:
        return Position(x=self.x, y=self.y)

    def to_persisted(self) -> PersistedViewport:
        return PersistedViewport(translate=self.translate, scale=self.scale)


# ============================================================================
# Transform string grammar
# ============================================================================

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"

TRANSFORM_PATTERN = re.compile(
    rf"^\s*translate\(\s*(?P<x>{_NUMBER})(?:px)?\s*,\s*(?P<y>{_NUMBER})(?:px)?\s*\)"
    rf"\s*scale\(\s*(?P<scale>{_NUMBER})\s*\)\s*$"
)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_transform(viewport: PersistedViewport) -> str:
    """Render a viewport as the canonical transform string."""
    return (
        f"translate({_format_number(viewport.translate.x)}px, "
        f"{_format_number(viewport.translate.y)}px) "
        f"scale({_format_number(viewport.scale)})"
    )


def parse_transform(transform: Optional[str]) -> Optional[PersistedViewport]:
    """Parse a transform string; None if it does not follow the grammar.

    Accepts the canonical form and the unit-less SVG attribute form
    ``translate(x, y) scale(s)``.
    """
    if not transform:
        return None

    match = TRANSFORM_PATTERN.match(transform)
    if not match:
        return None

    x = float(match.group("x"))
    y = float(match.group("y"))
    scale = float(match.group("scale"))
    if not all(math.isfinite(v) for v in (x, y, scale)):
        return None

    return PersistedViewport(translate=Position(x=x, y=y), scale=scale)
