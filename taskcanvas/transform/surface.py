"""
Transform-bearing drawing surface.

The rendering layer exposes the root drawing group through this narrow
interface; the restoration controller reads it and the canvas facade writes
it. get_transform() returns None while the group is not mounted.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

from ..models.viewport import PersistedViewport, format_transform

logger = logging.getLogger(__name__)


@runtime_checkable
class TransformSurface(Protocol):
    """Root drawing group as seen by the viewport layer."""

    def get_transform(self) -> Optional[str]:
        """Current transform attribute, None if the group is absent."""
        ...

    def set_transform(self, transform: str) -> None:
        """Replace the transform attribute."""
        ...


class TransformGroup:
    """In-process transform group holding the attribute string.

    Starts unmounted; the renderer calls mount() once the group exists.
    """

    def __init__(self, transform: Optional[str] = None, mounted: bool = False):
        self.mounted = mounted
        self._transform = transform

    def mount(self, transform: Optional[str] = None) -> None:
        self.mounted = True
        if transform is not None:
            self._transform = transform

    def unmount(self) -> None:
        self.mounted = False

    def get_transform(self) -> Optional[str]:
        if not self.mounted:
            return None
        return self._transform

    def set_transform(self, transform: str) -> None:
        self._transform = transform


def apply_viewport(surface: TransformSurface, viewport: PersistedViewport) -> str:
    """Write viewport to surface in the canonical grammar; returns the string."""
    transform = format_transform(viewport)
    surface.set_transform(transform)
    logger.debug(f"Applied transform: {transform}")
    return transform
