"""
Transform restoration controller.

Keeps the canvas masked until the transform applied to the drawing surface
matches the persisted viewport, so a reload never shows the camera jumping
from its default to the restored position.

State machine:
    INIT --settle delay--> POLLING --match / fallback / error--> READY
    any non-terminal state --cancel()--> CANCELLED

The hard timeout runs from start(), covering the snapshot read and the
settle delay, so a storage read that never completes still reveals the
canvas. READY is terminal and fires on_ready exactly once. Every failure
inside the controller fails open: the canvas is revealed rather than left
hidden.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel, Field

from ..constants import (
    RESTORE_EPSILON,
    RESTORE_HARD_TIMEOUT,
    RESTORE_MAX_ATTEMPTS,
    RESTORE_POLL_INTERVAL,
    RESTORE_SETTLE_DELAY,
)
from ..models.viewport import PersistedViewport, parse_transform
from ..services.event_channel import EventChannel
from .surface import TransformSurface, apply_viewport

logger = logging.getLogger(__name__)

SnapshotLoader = Callable[[], Awaitable[Optional[PersistedViewport]]]


class RestorationSettings(BaseModel):
    """Timing and tolerance for transform restoration."""

    settle_delay: float = Field(default=RESTORE_SETTLE_DELAY, ge=0, description="Wait before first poll (s)")
    poll_interval: float = Field(default=RESTORE_POLL_INTERVAL, gt=0, description="Delay between polls (s)")
    max_attempts: int = Field(default=RESTORE_MAX_ATTEMPTS, ge=0, description="Failed polls before fallback")
    hard_timeout: float = Field(default=RESTORE_HARD_TIMEOUT, gt=0, description="Wall-clock limit from start (s)")
    epsilon: float = Field(default=RESTORE_EPSILON, gt=0, description="Per-component match tolerance")
    enforce_snapshot: bool = Field(
        default=False, description="Write the persisted transform to the surface on fallback"
    )


class RestorationPhase(str, Enum):
    INIT = "init"
    POLLING = "polling"
    READY = "ready"
    CANCELLED = "cancelled"


class RestorationOutcome(str, Enum):
    """Why the controller reached READY."""

    MATCHED = "matched"
    NO_SNAPSHOT = "no_snapshot"
    FALLBACK_ATTEMPTS = "fallback_attempts"
    FALLBACK_TIMEOUT = "fallback_timeout"
    EXTERNAL = "external"
    ERROR = "error"

    @property
    def is_fallback(self) -> bool:
        return self in (
            RestorationOutcome.FALLBACK_ATTEMPTS,
            RestorationOutcome.FALLBACK_TIMEOUT,
            RestorationOutcome.ERROR,
        )


@dataclass
class TransformReady:
    """Published on the ready channel when the canvas may be revealed."""

    outcome: RestorationOutcome
    attempts: int
    elapsed: float
    transform: Optional[str] = None
    snapshot: Optional[PersistedViewport] = None


class TransformRestorationController:
    """Reconciles the surface transform with the persisted viewport."""

    def __init__(
        self,
        surface: TransformSurface,
        load_snapshot: SnapshotLoader,
        on_ready: Callable[[], None],
        settings: Optional[RestorationSettings] = None,
        ready_channel: Optional[EventChannel[TransformReady]] = None,
    ):
        """
        Initialize restoration controller.

        Args:
            surface: Transform-bearing drawing group
            load_snapshot: Async read of the persisted viewport (None if absent)
            on_ready: Called exactly once when the canvas may be revealed
            settings: Timing/tolerance overrides
            ready_channel: Optional channel receiving a TransformReady event
        """
        self.surface = surface
        self.settings = settings or RestorationSettings()
        self.phase = RestorationPhase.INIT
        self.outcome: Optional[RestorationOutcome] = None
        self.attempts = 0

        self._load_snapshot = load_snapshot
        self._on_ready = on_ready
        self._ready_channel = ready_channel
        self._snapshot: Optional[PersistedViewport] = None

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._started_at = 0.0
        self._load_task: Optional[asyncio.Task] = None
        self._settle_handle: Optional[asyncio.TimerHandle] = None
        self._tick_handle: Optional[asyncio.TimerHandle] = None
        self._deadline_handle: Optional[asyncio.TimerHandle] = None
        self._done = asyncio.Event()

    @property
    def is_ready(self) -> bool:
        return self.phase is RestorationPhase.READY

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin restoration. Must be called from a running event loop."""
        if self.phase is not RestorationPhase.INIT or self._load_task is not None:
            logger.warning(f"Restoration already started (phase={self.phase.value})")
            return

        self._loop = asyncio.get_running_loop()
        self._started_at = self._loop.time()
        logger.info("Starting transform restoration")
        self._deadline_handle = self._loop.call_later(self.settings.hard_timeout, self._on_deadline)
        self._load_task = self._loop.create_task(self._load())

    def cancel(self) -> None:
        """Tear down: clear all pending timers; no callback fires afterwards."""
        if self.phase in (RestorationPhase.READY, RestorationPhase.CANCELLED):
            return

        self._clear_pending()
        previous = self.phase
        self.phase = RestorationPhase.CANCELLED
        self._done.set()
        logger.debug(f"Transform restoration cancelled during {previous.value} after {self.attempts} attempt(s)")

    def notify_restoration_complete(self) -> None:
        """External signal that state restoration finished; reveal now."""
        if self.phase in (RestorationPhase.INIT, RestorationPhase.POLLING):
            logger.info("State restoration completed externally, revealing canvas")
            self._finish(RestorationOutcome.EXTERNAL)

    async def wait_ready(self, timeout: Optional[float] = None) -> Optional[RestorationOutcome]:
        """Wait until READY or CANCELLED; returns the outcome (None if cancelled)."""
        await asyncio.wait_for(self._done.wait(), timeout)
        return self.outcome

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    async def _load(self) -> None:
        try:
            snapshot = await self._load_snapshot()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Failed to read persisted viewport: {e}")
            self._finish(RestorationOutcome.ERROR)
            return

        if self.phase is not RestorationPhase.INIT:
            return

        if snapshot is None:
            logger.info("No persisted viewport, revealing canvas with default transform")
            self._finish(RestorationOutcome.NO_SNAPSHOT)
            return

        if not snapshot.is_finite():
            logger.warning(f"Persisted viewport has non-finite values, ignoring: {snapshot}")
            self._finish(RestorationOutcome.NO_SNAPSHOT)
            return

        self._snapshot = snapshot
        self._settle_handle = self._loop.call_later(self.settings.settle_delay, self._begin_polling)

    def _begin_polling(self) -> None:
        self._settle_handle = None
        if self.phase is not RestorationPhase.INIT:
            return

        self.phase = RestorationPhase.POLLING
        logger.debug(
            f"Polling surface transform for translate=({self._snapshot.translate.x}, "
            f"{self._snapshot.translate.y}) scale={self._snapshot.scale}"
        )
        self._tick()

    def _tick(self) -> None:
        self._tick_handle = None
        if self.phase is not RestorationPhase.POLLING:
            return

        try:
            current = parse_transform(self.surface.get_transform())
            if current is not None and current.matches(self._snapshot, self.settings.epsilon):
                self._finish(RestorationOutcome.MATCHED)
                return
        except Exception as e:
            logger.error(f"Transform verification failed on attempt {self.attempts + 1}: {e}")
            self._finish(RestorationOutcome.ERROR)
            return

        self.attempts += 1
        if self.attempts > self.settings.max_attempts:
            self._finish(RestorationOutcome.FALLBACK_ATTEMPTS)
            return

        logger.debug(
            f"Surface transform not ready (attempt {self.attempts}, "
            f"current={current}), retrying in {self.settings.poll_interval}s"
        )
        self._tick_handle = self._loop.call_later(self.settings.poll_interval, self._tick)

    def _on_deadline(self) -> None:
        self._deadline_handle = None
        if self.phase is RestorationPhase.INIT:
            logger.warning(f"Persisted viewport not ready after {self.settings.hard_timeout}s")
        if self.phase in (RestorationPhase.INIT, RestorationPhase.POLLING):
            self._finish(RestorationOutcome.FALLBACK_TIMEOUT)

    def _finish(self, outcome: RestorationOutcome) -> None:
        if self.phase in (RestorationPhase.READY, RestorationPhase.CANCELLED):
            return

        self._clear_pending()

        if outcome.is_fallback and self.settings.enforce_snapshot and self._snapshot is not None:
            try:
                apply_viewport(self.surface, self._snapshot)
            except Exception as e:
                logger.error(f"Could not apply persisted viewport in fallback: {e}")

        self.phase = RestorationPhase.READY
        self.outcome = outcome
        elapsed = (self._loop.time() - self._started_at) if self._loop else 0.0

        if outcome.is_fallback:
            logger.warning(
                f"Transform restoration fell back ({outcome.value}) after "
                f"{self.attempts} attempt(s), {elapsed * 1000:.0f}ms; revealing canvas"
            )
        else:
            logger.info(
                f"Transform restoration complete ({outcome.value}) after "
                f"{self.attempts} attempt(s), {elapsed * 1000:.0f}ms"
            )

        self._done.set()

        try:
            self._on_ready()
        except Exception as e:
            logger.error(f"on_ready callback failed: {e}", exc_info=True)

        if self._ready_channel is not None:
            transform = None
            try:
                transform = self.surface.get_transform()
            except Exception as e:
                logger.debug(f"Could not read surface transform for ready event: {e}")
            self._ready_channel.publish(
                TransformReady(
                    outcome=outcome,
                    attempts=self.attempts,
                    elapsed=elapsed,
                    transform=transform,
                    snapshot=self._snapshot,
                )
            )

    def _clear_pending(self) -> None:
        for handle in (self._settle_handle, self._tick_handle, self._deadline_handle):
            if handle is not None:
                handle.cancel()
        self._settle_handle = None
        self._tick_handle = None
        self._deadline_handle = None

        task = self._load_task
        if task is not None and not task.done():
            try:
                current = asyncio.current_task()
            except RuntimeError:
                current = None
            if task is not current:
                task.cancel()
