"""
Centering calculation for the canvas camera.

Computes the translate/scale that puts a target rectangle, anchored at the
world origin, in the middle of the viewport.
"""

import logging
import math
from typing import Optional

from ..constants import DEFAULT_ZOOM_SCALE
from ..models.geometry import Dimensions
from ..models.viewport import CenterTransform

logger = logging.getLogger(__name__)


def _finite_or(value: float, default: float) -> float:
    return value if math.isfinite(value) else default


def calculate_center(
    viewport: Dimensions,
    target: Dimensions,
    scale: Optional[float] = None,
) -> CenterTransform:
    """
    Transform that centers target in viewport.

    Args:
        viewport: Visible area size
        target: Size of the rectangle to center (anchored at 0,0)
        scale: Zoom to apply (default: DEFAULT_ZOOM_SCALE)

    Returns:
        CenterTransform; any non-finite component is replaced by its default
        (scale -> DEFAULT_ZOOM_SCALE, x/y -> 0) so bad input never reaches
        the rendered transform.
    """
    scale = DEFAULT_ZOOM_SCALE if scale is None else scale

    center_x = target.width / 2
    center_y = target.height / 2

    translate_x = viewport.width / 2 - center_x * scale
    translate_y = viewport.height / 2 - center_y * scale

    result = CenterTransform(
        scale=_finite_or(scale, DEFAULT_ZOOM_SCALE),
        x=_finite_or(translate_x, 0.0),
        y=_finite_or(translate_y, 0.0),
    )

    if (result.scale, result.x, result.y) != (scale, translate_x, translate_y):
        logger.warning(
            f"Non-finite centering values replaced: scale={scale}, "
            f"translate=({translate_x}, {translate_y}) -> {result}"
        )
    else:
        logger.debug(
            f"Centering {target.width}x{target.height} in {viewport.width}x{viewport.height}: "
            f"translate=({result.x}, {result.y}) scale={result.scale}"
        )

    return result
