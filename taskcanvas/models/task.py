"""
Task presentation models.

TaskRecord is what the task repository hands us; TaskRectangle is what the
rendering layer paints. Rectangles are rebuilt on every layout pass and
never persisted.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import Field

from .geometry import CanvasModel, Dimensions, Position


class ElementState(str, Enum):
    """Visual state of a task rectangle."""

    ACTIVE = "active"
    SEMI_TRANSPARENT = "semi-transparent"
    HIDDEN = "hidden"


class TaskRecord(CanvasModel):
    """Task metadata supplied by the repository."""

    id: str = Field(..., min_length=1)
    title: str = Field(default="")
    description: Optional[str] = None
    parent_id: Optional[str] = None
    is_project: bool = False
    width: Optional[float] = Field(default=None, gt=0)
    height: Optional[float] = Field(default=None, gt=0)


class TaskText(CanvasModel):
    title: str
    description: Optional[str] = None


class TaskRectangle(CanvasModel):
    """Presentation-ready task node."""

    id: str
    type: Literal["task"] = "task"
    position: Position
    dimensions: Dimensions
    state: ElementState = ElementState.ACTIVE
    text: TaskText
    is_project: bool = False
    children_count: int = Field(default=0, ge=0)
    descendant_count: int = Field(default=0, ge=0)


class TaskHierarchyState(CanvasModel):
    """Which task is expanded and how its relatives are shown."""

    expanded_task_id: str = ""
    parent_state: ElementState = ElementState.SEMI_TRANSPARENT
    sibling_state: ElementState = ElementState.HIDDEN
    child_state: ElementState = ElementState.ACTIVE
