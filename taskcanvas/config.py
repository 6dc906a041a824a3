"""Settings and logging setup for taskcanvas.

Settings resolve in three layers: defaults from constants.py, an optional
JSON settings file (~/.config/taskcanvas/settings.json), then TASKCANVAS_*
environment variables.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, model_validator

from .constants import (
    DEFAULT_SCREEN_HEIGHT,
    DEFAULT_SCREEN_WIDTH,
    DEFAULT_TASK_HEIGHT,
    DEFAULT_TASK_WIDTH,
    DEFAULT_ZOOM_SCALE,
    MAX_ZOOM,
    MIN_ZOOM,
    STATE_EXPIRY_DAYS,
    ZOOM_STEP,
    ConfigPaths,
)
from .models.geometry import Dimensions
from .models.layout import LayoutOptions
from .transform.restoration import RestorationSettings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"


class CanvasSettings(BaseModel):
    """Runtime settings for the canvas."""

    layout: LayoutOptions = Field(default_factory=LayoutOptions)
    task_dimensions: Dimensions = Field(
        default_factory=lambda: Dimensions(width=DEFAULT_TASK_WIDTH, height=DEFAULT_TASK_HEIGHT),
        description="Size used for tasks that carry none",
    )
    pan_bounds: Dimensions = Field(
        default_factory=lambda: Dimensions(width=DEFAULT_SCREEN_WIDTH, height=DEFAULT_SCREEN_HEIGHT),
        description="Camera position limits (+/- on each axis)",
    )
    min_zoom: float = Field(default=MIN_ZOOM, gt=0)
    max_zoom: float = Field(default=MAX_ZOOM, gt=0)
    zoom_step: float = Field(default=ZOOM_STEP, gt=0)
    default_zoom_scale: float = Field(default=DEFAULT_ZOOM_SCALE, gt=0)
    restoration: RestorationSettings = Field(default_factory=RestorationSettings)
    storage_dir: Path = Field(default=ConfigPaths.VIEWPORT_DIR)
    expiry_days: int = Field(default=STATE_EXPIRY_DAYS, gt=0)

    @model_validator(mode="after")
    def validate_zoom_range(self) -> "CanvasSettings":
        if self.min_zoom > self.max_zoom:
            raise ValueError(f"min_zoom ({self.min_zoom}) must not exceed max_zoom ({self.max_zoom})")
        return self

    @classmethod
    def from_environment(cls, base: Optional["CanvasSettings"] = None) -> "CanvasSettings":
        """Apply TASKCANVAS_* environment overrides to base (default settings).

        Unparseable or invalid values are logged and ignored.
        """
        settings = base or cls()

        for env_name, (path, parse) in ENVIRONMENT_OVERRIDES.items():
            raw = os.environ.get(env_name)
            if raw is None:
                continue

            try:
                data = settings.model_dump()
                _set_path(data, path, parse(raw))
                settings = cls.model_validate(data)
            except (ValueError, ValidationError) as e:
                logger.warning(f"Ignoring invalid {env_name}={raw!r}: {e}")
                continue

            logger.debug(f"Applied {env_name}={raw!r}")

        return settings


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _set_path(data: Dict[str, Any], path: Tuple[str, ...], value: Any) -> None:
    target = data
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value


ENVIRONMENT_OVERRIDES: Dict[str, Tuple[Tuple[str, ...], Callable[[str], Any]]] = {
    "TASKCANVAS_STORAGE_DIR": (("storage_dir",), lambda raw: Path(raw).expanduser()),
    "TASKCANVAS_MIN_DISTANCE": (("layout", "constraints", "min_distance"), float),
    "TASKCANVAS_PADDING": (("layout", "padding"), float),
    "TASKCANVAS_MIN_ZOOM": (("min_zoom",), float),
    "TASKCANVAS_MAX_ZOOM": (("max_zoom",), float),
    "TASKCANVAS_ZOOM_STEP": (("zoom_step",), float),
    "TASKCANVAS_RESTORE_TIMEOUT": (("restoration", "hard_timeout"), float),
    "TASKCANVAS_ENFORCE_SNAPSHOT": (("restoration", "enforce_snapshot"), _parse_bool),
    "TASKCANVAS_EXPIRY_DAYS": (("expiry_days",), int),
}


def load_settings(path: Optional[Path] = None, apply_environment: bool = True) -> CanvasSettings:
    """Load settings from a JSON file, then apply environment overrides.

    Args:
        path: Settings file (default: ConfigPaths.SETTINGS_FILE)
        apply_environment: Apply TASKCANVAS_* overrides after the file

    Returns:
        CanvasSettings; defaults if the file is missing or invalid
    """
    path = path or ConfigPaths.SETTINGS_FILE
    settings = CanvasSettings()

    if path.exists():
        try:
            with open(path) as f:
                settings = CanvasSettings.model_validate(json.load(f))
            logger.info(f"Loaded settings from {path}")
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to load settings from {path}, using defaults: {e}")
    else:
        logger.debug(f"No settings file at {path}, using defaults")

    if apply_environment:
        settings = CanvasSettings.from_environment(settings)

    return settings


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger to write to stderr.

    Args:
        level: Log level name (default: TASKCANVAS_LOG_LEVEL or INFO)
    """
    log_level = (level or os.environ.get("TASKCANVAS_LOG_LEVEL", "INFO")).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Replace a handler from an earlier call instead of stacking another
    for existing in list(root_logger.handlers):
        if getattr(existing, "_taskcanvas", False):
            root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler._taskcanvas = True
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)

    logger.debug(f"Logging configured: level={log_level}")
