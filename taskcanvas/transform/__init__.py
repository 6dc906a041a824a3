"""
Transform surface and restoration controller.

The controller keeps the canvas masked until the surface transform matches
the persisted viewport, then fires its ready signal once.
"""

from .surface import TransformSurface, TransformGroup, apply_viewport
from .restoration import (
    RestorationSettings,
    RestorationPhase,
    RestorationOutcome,
    TransformReady,
    TransformRestorationController,
)

__all__ = [
    "TransformSurface",
    "TransformGroup",
    "apply_viewport",
    "RestorationSettings",
    "RestorationPhase",
    "RestorationOutcome",
    "TransformReady",
    "TransformRestorationController",
]
