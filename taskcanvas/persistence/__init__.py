"""Viewport persistence."""

from .viewport_store import (
    ViewportPersistence,
    JsonFileViewportStore,
    storage_key,
    sanitize_viewport,
)

__all__ = [
    "ViewportPersistence",
    "JsonFileViewportStore",
    "storage_key",
    "sanitize_viewport",
]
