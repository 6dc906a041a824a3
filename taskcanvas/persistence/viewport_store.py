"""
Viewport persistence.

Stores one PersistedViewport per user/project scope as a JSON file:
    <storage_dir>/viewport-state[-user-<id>][-project-<id>].json

The file body is exactly {"translate": {"x": .., "y": ..}, "scale": ..}.
Files older than STATE_EXPIRY_DAYS (by modification time) are treated as
absent and removed on load.
"""

import json
import logging
import math
import re
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..constants import STATE_EXPIRY_DAYS, STORAGE_KEY_BASE, ConfigPaths
from ..models.geometry import Position
from ..models.viewport import PersistedViewport

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def storage_key(user_id: Optional[str] = None, project_id: Optional[str] = None) -> str:
    """Storage key for a user/project scope."""
    key = STORAGE_KEY_BASE
    if user_id:
        key += f"-user-{user_id}"
    if project_id:
        key += f"-project-{project_id}"
    return key


def sanitize_viewport(snapshot: PersistedViewport) -> PersistedViewport:
    """Replace non-finite values (scale -> 1, translate -> 0)."""
    x, y, scale = snapshot.translate.x, snapshot.translate.y, snapshot.scale
    return PersistedViewport(
        translate=Position(
            x=x if math.isfinite(x) else 0.0,
            y=y if math.isfinite(y) else 0.0,
        ),
        scale=scale if math.isfinite(scale) else 1.0,
    )


class ViewportPersistence(ABC):
    """Async storage boundary for the persisted viewport."""

    @abstractmethod
    async def load(self) -> Optional[PersistedViewport]:
        """Saved viewport, or None if absent or unusable. Never raises."""

    @abstractmethod
    async def save(self, snapshot: PersistedViewport) -> None:
        """Persist snapshot, replacing any previous one."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove the saved viewport."""

    @abstractmethod
    async def has_saved(self) -> bool:
        """True if a saved viewport exists."""


class JsonFileViewportStore(ViewportPersistence):
    """
    JSON file backed viewport store.

    Stored in: ~/.local/share/taskcanvas/viewport/<key>.json
    """

    def __init__(
        self,
        user_id: Optional[str] = None,
        project_id: Optional[str] = None,
        storage_dir: Optional[Path] = None,
        expiry_days: int = STATE_EXPIRY_DAYS,
    ):
        """
        Initialize viewport store

        Args:
            user_id: Scope to a user (None for the shared scope)
            project_id: Scope to a project within the user scope
            storage_dir: Directory for viewport files (default: ConfigPaths.VIEWPORT_DIR)
            expiry_days: Age after which a saved viewport is discarded
        """
        self.user_id = user_id
        self.project_id = project_id
        self.storage_dir = storage_dir or ConfigPaths.VIEWPORT_DIR
        self.expiry_days = expiry_days

    @property
    def key(self) -> str:
        return storage_key(self.user_id, self.project_id)

    @property
    def path(self) -> Path:
        return self.storage_dir / f"{_UNSAFE_KEY_CHARS.sub('_', self.key)}.json"

    async def load(self) -> Optional[PersistedViewport]:
        filepath = self.path

        if not filepath.exists():
            logger.debug(f"No saved viewport: {filepath}")
            return None

        try:
            age_days = (time.time() - filepath.stat().st_mtime) / 86400
            if age_days > self.expiry_days:
                logger.info(
                    f"Saved viewport {filepath} is expired ({age_days:.1f} days > {self.expiry_days}), clearing"
                )
                filepath.unlink(missing_ok=True)
                return None

            with open(filepath, "r") as f:
                data = json.load(f)
            snapshot = PersistedViewport.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to load saved viewport {filepath}: {e}")
            return None

        if not snapshot.is_finite():
            logger.warning(f"Saved viewport {filepath} has non-finite values, ignoring")
            return None

        logger.debug(f"Loaded viewport from {filepath}: {snapshot}")
        return snapshot

    async def save(self, snapshot: PersistedViewport) -> None:
        if not snapshot.is_finite():
            logger.warning(f"Repairing non-finite viewport before save: {snapshot}")
            snapshot = sanitize_viewport(snapshot)

        self.storage_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.path

        with open(filepath, "w") as f:
            json.dump(snapshot.model_dump(mode="json"), f, indent=2)

        logger.info(
            f"Saved viewport to {filepath}: translate=({snapshot.translate.x}, "
            f"{snapshot.translate.y}) scale={snapshot.scale}"
        )

    async def clear(self) -> None:
        filepath = self.path
        if filepath.exists():
            filepath.unlink()
            logger.info(f"Cleared saved viewport: {filepath}")

    async def has_saved(self) -> bool:
        return self.path.exists()
