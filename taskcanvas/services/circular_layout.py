"""
Radial distribution of a task forest.

Roots are placed on a ring around the screen center; each node's children
on a ring around that node, rotated to follow the parent's angle. Radii are
derived from chord length so ring members keep a minimum spacing.
"""

import logging
import math
from typing import List, Optional, Sequence

from ..constants import CIRCULAR_MIN_RADIUS, CIRCULAR_MIN_SPACING
from ..models.geometry import Position
from ..models.layout import CircularLayoutConfig, LayoutElement, PositionedElement
from .layout_engine import ArenaNode, ElementArena, validate_layout_options

logger = logging.getLogger(__name__)


def _node_size(node: ArenaNode) -> float:
    return max(node.width, node.height)


def calculate_ring_radius(child_count: int, element_size: float, parent_size: float = 0.0) -> float:
    """
    Radius for a ring of child_count elements of element_size.

    A single child is sized as if it had a sibling so its distance to the
    parent matches a two-child ring.
    """
    if child_count < 1:
        return 0.0

    angle_step = math.pi if child_count == 1 else (2 * math.pi) / child_count
    min_chord = element_size + CIRCULAR_MIN_SPACING
    radius = (min_chord / (2 * math.sin(angle_step / 2))) * 1.2

    # Keep children clear of the parent rectangle
    radius = max(radius, parent_size / 2 + element_size / 2 + CIRCULAR_MIN_SPACING)

    effective_count = max(child_count, 2)
    if effective_count <= 5:
        radius *= 1.3
    if effective_count <= 3:
        radius *= 1.2

    return radius


class CircularLayoutEngine:
    """Deterministic radial layout (no iterative optimisation)."""

    def distribute(
        self, elements: Sequence[LayoutElement], config: CircularLayoutConfig
    ) -> List[PositionedElement]:
        """
        Position elements on concentric rings.

        Args:
            elements: Forest of elements linked by parent_id
            config: Layout options plus optional root radius and start angle

        Returns:
            One PositionedElement per input element, in input order

        Raises:
            InvalidLayoutOptionsError, LayoutValidationError, LayoutCycleError
        """
        validate_layout_options(config)

        if not elements:
            return []

        arena = ElementArena.build(elements)
        positions: List[Optional[Position]] = [None] * len(arena)

        max_size = max(_node_size(node) for node in arena.nodes)
        # An explicit root radius is used as given; computed rings keep the minimum radius
        if config.radius is not None:
            radius = config.radius
        else:
            radius = max(calculate_ring_radius(len(arena.roots), max_size), CIRCULAR_MIN_RADIUS)
        center = Position(x=config.screen_bounds.width / 2, y=config.screen_bounds.height / 2)

        logger.debug(
            f"Circular distribution: {len(arena)} element(s), {len(arena.roots)} root(s), "
            f"root radius {radius:.1f}"
        )

        # Each stack entry is one ring: (members, ring center, radius, base angle)
        stack = [(list(arena.roots), center, radius, config.start_angle)]
        while stack:
            members, ring_center, ring_radius, base_angle = stack.pop()

            angle_step = (2 * math.pi) / len(members)
            # Four children sit on the diagonals
            rotation = math.pi / 4 if len(members) == 4 else 0.0

            for offset, index in enumerate(members):
                node = arena.nodes[index]
                angle = base_angle + rotation + angle_step * offset - math.pi / 2
                node_center = Position(
                    x=ring_center.x + ring_radius * math.cos(angle),
                    y=ring_center.y + ring_radius * math.sin(angle),
                )
                positions[index] = Position(
                    x=node_center.x - node.width / 2,
                    y=node_center.y - node.height / 2,
                )

                if node.children:
                    child_radius = calculate_ring_radius(
                        len(node.children),
                        max(_node_size(arena.nodes[c]) for c in node.children),
                        _node_size(node),
                    )
                    stack.append((list(node.children), node_center, max(child_radius, CIRCULAR_MIN_RADIUS), angle))

        logger.info(f"Circular distribution completed: {len(arena)} element(s) positioned")

        return [
            PositionedElement(
                id=node.element.id,
                dimensions=node.element.dimensions,
                parent_id=node.element.parent_id,
                position=positions[node.index],
            )
            for node in arena.nodes
        ]
