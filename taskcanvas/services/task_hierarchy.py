"""
Task hierarchy presentation.

Turns repository TaskRecords into layout input and, after layout, into
presentation-ready TaskRectangles carrying child counts and the visual state
implied by the currently expanded task:

- expanded task: active
- its parent and every further ancestor: parent_state (semi-transparent)
- siblings: sibling_state (hidden)
- direct children: child_state (active)
- everything else: hidden
"""

import logging
from collections import defaultdict
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..constants import DEFAULT_TASK_HEIGHT, DEFAULT_TASK_WIDTH
from ..models.geometry import Dimensions
from ..models.layout import LayoutElement, PositionedElement
from ..models.task import (
    ElementState,
    TaskHierarchyState,
    TaskRecord,
    TaskRectangle,
    TaskText,
)

logger = logging.getLogger(__name__)


def _children_by_parent(tasks: Sequence[TaskRecord]) -> Dict[Optional[str], List[str]]:
    children: Dict[Optional[str], List[str]] = defaultdict(list)
    for task in tasks:
        children[task.parent_id].append(task.id)
    return children


def count_descendants(tasks: Sequence[TaskRecord]) -> Dict[str, Tuple[int, int]]:
    """
    Count direct children and all descendants for every task.

    Returns:
        {task_id: (children_count, descendant_count)}
    """
    children = _children_by_parent(tasks)
    counts: Dict[str, Tuple[int, int]] = {}

    for task in tasks:
        direct = len(children.get(task.id, []))
        total = 0
        seen = {task.id}
        stack = list(children.get(task.id, []))
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            total += 1
            stack.extend(children.get(current, []))
        counts[task.id] = (direct, total)

    return counts


def compute_visual_states(
    tasks: Sequence[TaskRecord],
    hierarchy: Optional[TaskHierarchyState] = None,
) -> Dict[str, ElementState]:
    """
    Visual state for every task given the expanded task.

    An empty expanded id shows everything; an unknown one is logged and
    treated the same way.
    """
    hierarchy = hierarchy or TaskHierarchyState()
    all_active = {task.id: ElementState.ACTIVE for task in tasks}

    expanded_id = hierarchy.expanded_task_id
    if not expanded_id:
        return all_active

    by_id = {task.id: task for task in tasks}
    expanded = by_id.get(expanded_id)
    if expanded is None:
        logger.warning(f"Expanded task '{expanded_id}' not found among {len(tasks)} tasks, showing all")
        return all_active

    states: Dict[str, ElementState] = {expanded_id: ElementState.ACTIVE}

    # Ancestor chain, guarded against malformed parent links
    visited = {expanded_id}
    parent_id = expanded.parent_id
    while parent_id and parent_id in by_id and parent_id not in visited:
        visited.add(parent_id)
        states[parent_id] = hierarchy.parent_state
        parent_id = by_id[parent_id].parent_id

    for task in tasks:
        if task.id in states:
            continue
        if task.parent_id == expanded_id:
            states[task.id] = hierarchy.child_state
        elif task.parent_id == expanded.parent_id:
            states[task.id] = hierarchy.sibling_state
        else:
            states[task.id] = ElementState.HIDDEN

    logger.debug(
        f"Visual states for '{expanded_id}': "
        f"{sum(1 for s in states.values() if s is ElementState.ACTIVE)} active, "
        f"{sum(1 for s in states.values() if s is ElementState.SEMI_TRANSPARENT)} semi-transparent, "
        f"{sum(1 for s in states.values() if s is ElementState.HIDDEN)} hidden"
    )
    return states


def to_layout_elements(
    tasks: Sequence[TaskRecord],
    default_dimensions: Optional[Dimensions] = None,
) -> List[LayoutElement]:
    """Layout input for tasks; tasks without a size get default_dimensions."""
    default = default_dimensions or Dimensions(width=DEFAULT_TASK_WIDTH, height=DEFAULT_TASK_HEIGHT)
    return [
        LayoutElement(
            id=task.id,
            parent_id=task.parent_id,
            dimensions=Dimensions(
                width=task.width if task.width is not None else default.width,
                height=task.height if task.height is not None else default.height,
            ),
        )
        for task in tasks
    ]


def build_task_rectangles(
    positioned: Sequence[PositionedElement],
    tasks: Sequence[TaskRecord],
    visual_states: Optional[Mapping[str, ElementState]] = None,
) -> List[TaskRectangle]:
    """Join layout output with task metadata, counts and visual states.

    Positioned elements with no matching task are skipped.
    """
    by_id = {task.id: task for task in tasks}
    counts = count_descendants(tasks)
    visual_states = visual_states or {}

    rectangles: List[TaskRectangle] = []
    for element in positioned:
        task = by_id.get(element.id)
        if task is None:
            logger.warning(f"No task record for positioned element '{element.id}', skipping")
            continue

        children_count, descendant_count = counts.get(task.id, (0, 0))
        rectangles.append(
            TaskRectangle(
                id=task.id,
                position=element.position,
                dimensions=element.dimensions,
                state=visual_states.get(task.id, ElementState.ACTIVE),
                text=TaskText(title=task.title, description=task.description),
                is_project=task.is_project,
                children_count=children_count,
                descendant_count=descendant_count,
            )
        )

    return rectangles
