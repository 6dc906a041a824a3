"""Centralized constants and paths for taskcanvas.

Single source of truth for zoom limits, default layout options, restoration
timings and storage locations. Use these instead of literals scattered
through the services.

Example:
    from taskcanvas.constants import ConfigPaths, MIN_ZOOM

    store_dir = ConfigPaths.VIEWPORT_DIR
"""

from pathlib import Path
from typing import Final


# Zoom
DEFAULT_ZOOM_SCALE: Final[float] = 0.7
MIN_ZOOM: Final[float] = 0.5
MAX_ZOOM: Final[float] = 2.0
ZOOM_STEP: Final[float] = 0.1

# Layout defaults
DEFAULT_MIN_DISTANCE: Final[float] = 100.0
DEFAULT_PADDING: Final[float] = 40.0
DEFAULT_SCREEN_WIDTH: Final[float] = 1200.0
DEFAULT_SCREEN_HEIGHT: Final[float] = 800.0
DEFAULT_TASK_WIDTH: Final[float] = 240.0
DEFAULT_TASK_HEIGHT: Final[float] = 120.0

# Circular distribution
CIRCULAR_MIN_SPACING: Final[float] = 30.0
CIRCULAR_MIN_RADIUS: Final[float] = 300.0

# Transform restoration
RESTORE_SETTLE_DELAY: Final[float] = 0.1  # seconds
RESTORE_POLL_INTERVAL: Final[float] = 0.05  # seconds
RESTORE_MAX_ATTEMPTS: Final[int] = 10
RESTORE_HARD_TIMEOUT: Final[float] = 2.0  # seconds
RESTORE_EPSILON: Final[float] = 0.01

# Viewport persistence
STORAGE_KEY_BASE: Final[str] = "viewport-state"
STATE_EXPIRY_DAYS: Final[int] = 30


class ConfigPaths:
    """Centralized configuration paths.

    All paths are computed once at import time based on the user's home
    directory.
    """

    HOME: Final[Path] = Path.home()
    CONFIG_DIR: Final[Path] = HOME / ".config" / "taskcanvas"
    LOCAL_SHARE_DIR: Final[Path] = HOME / ".local" / "share" / "taskcanvas"

    SETTINGS_FILE: Final[Path] = CONFIG_DIR / "settings.json"
    VIEWPORT_DIR: Final[Path] = LOCAL_SHARE_DIR / "viewport"
