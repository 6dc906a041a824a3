"""
Workspace canvas facade.

Ties one layout pass, the viewport camera and viewport persistence
together for a single workspace view:

    tasks -> layout_tasks() -> TaskRectangles for the renderer
    center_on() / save_viewport() -> persisted camera
    create_restoration_controller() -> reveal signal on reload
"""

import logging
from typing import Callable, List, Optional, Sequence

from .config import CanvasSettings
from .models.geometry import Dimensions
from .models.task import TaskHierarchyState, TaskRecord, TaskRectangle
from .models.viewport import CenterTransform, PersistedViewport
from .persistence.viewport_store import ViewportPersistence
from .services.centering import calculate_center
from .services.event_channel import EventChannel
from .services.layout_engine import LayoutEngine
from .services.task_hierarchy import (
    build_task_rectangles,
    compute_visual_states,
    to_layout_elements,
)
from .services.viewport_manager import ViewportManager
from .transform.restoration import TransformReady, TransformRestorationController
from .transform.surface import TransformSurface, apply_viewport

logger = logging.getLogger(__name__)


class WorkspaceCanvas:
    """Layout, camera and viewport persistence for one workspace."""

    def __init__(
        self,
        settings: Optional[CanvasSettings] = None,
        store: Optional[ViewportPersistence] = None,
        layout_engine: Optional[LayoutEngine] = None,
    ):
        """
        Initialize workspace canvas.

        Args:
            settings: Canvas settings (default: CanvasSettings())
            store: Viewport persistence; without one nothing is saved or restored
            layout_engine: Layout engine override
        """
        self.settings = settings or CanvasSettings()
        self.store = store
        self.layout_engine = layout_engine or LayoutEngine()
        self.viewport = ViewportManager(
            bounds=self.settings.pan_bounds,
            min_zoom=self.settings.min_zoom,
            max_zoom=self.settings.max_zoom,
            zoom_step=self.settings.zoom_step,
        )
        self.ready_channel: EventChannel[TransformReady] = EventChannel("transform-ready")
        self.hierarchy = TaskHierarchyState()

    def layout_tasks(
        self,
        tasks: Sequence[TaskRecord],
        expanded_task_id: Optional[str] = None,
    ) -> List[TaskRectangle]:
        """
        Run one layout pass and build presentation rectangles.

        Args:
            tasks: Tasks of the current workspace
            expanded_task_id: Task to expand (None keeps the current one,
                "" collapses to show everything)

        Raises:
            LayoutError: see LayoutEngine.layout
        """
        if expanded_task_id is not None:
            self.hierarchy = self.hierarchy.model_copy(update={"expanded_task_id": expanded_task_id})

        elements = to_layout_elements(tasks, self.settings.task_dimensions)
        positioned = self.layout_engine.layout(elements, self.settings.layout)
        states = compute_visual_states(tasks, self.hierarchy)
        rectangles = build_task_rectangles(positioned, tasks, states)

        logger.info(
            f"Laid out {len(rectangles)} task(s)"
            + (f", expanded '{self.hierarchy.expanded_task_id}'" if self.hierarchy.expanded_task_id else "")
        )
        return rectangles

    def center_on(
        self,
        viewport_size: Dimensions,
        target: Dimensions,
        surface: Optional[TransformSurface] = None,
    ) -> CenterTransform:
        """
        Center the camera on a target rectangle anchored at the origin.

        The camera is updated (clamped to its limits) and, when a surface is
        given, the resulting transform is written to it.
        """
        transform = calculate_center(viewport_size, target, self.settings.default_zoom_scale)
        self.viewport.apply_persisted(transform.to_persisted())

        if surface is not None:
            apply_viewport(surface, self.viewport.to_persisted())

        return transform

    async def save_viewport(self) -> Optional[PersistedViewport]:
        """Persist the current camera; returns what was saved (None without a store)."""
        if self.store is None:
            logger.debug("No viewport store configured, not saving")
            return None

        snapshot = self.viewport.to_persisted()
        await self.store.save(snapshot)
        return snapshot

    async def restore_viewport(self, surface: Optional[TransformSurface] = None) -> Optional[PersistedViewport]:
        """Load the persisted camera into the viewport manager (and surface)."""
        if self.store is None:
            return None

        snapshot = await self.store.load()
        if snapshot is None:
            return None

        self.viewport.apply_persisted(snapshot)
        if surface is not None:
            apply_viewport(surface, self.viewport.to_persisted())
        return snapshot

    def create_restoration_controller(
        self,
        surface: TransformSurface,
        on_ready: Callable[[], None],
    ) -> TransformRestorationController:
        """Controller that reveals the canvas once surface matches the saved camera."""

        async def load_snapshot() -> Optional[PersistedViewport]:
            if self.store is None:
                return None
            snapshot = await self.store.load()
            if snapshot is None or not snapshot.is_finite():
                return snapshot
            # The renderer receives the clamped camera, so that is what must match
            return self.viewport.clamp_persisted(snapshot)

        return TransformRestorationController(
            surface=surface,
            load_snapshot=load_snapshot,
            on_ready=on_ready,
            settings=self.settings.restoration,
            ready_channel=self.ready_channel,
        )

    async def sign_out(self) -> None:
        """Reset the camera and discard the persisted viewport."""
        self.viewport.reset()
        self.hierarchy = TaskHierarchyState()
        if self.store is not None:
            await self.store.clear()
        logger.info("Viewport reset on sign-out")
