"""
Hierarchical tree layout engine.

Places a forest of LayoutElements so that children sit centered beneath
their parent and sibling subtrees never overlap.

Algorithm phases:
1. Validate options and build a flat arena (list + id->index map)
2. Detect parent cycles in O(n) with a visited-state guard
3. Sizing pass (post-order): compute the horizontal extent each subtree needs
4. Placement pass (pre-order): center every child group under its parent

No-overlap is guaranteed by construction: a child group never spans more
than its parent's slot, and sibling slots are disjoint.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..errors import InvalidLayoutOptionsError, LayoutCycleError, LayoutValidationError
from ..models.geometry import Position
from ..models.layout import LayoutElement, LayoutOptions, PositionedElement
from .geometry import find_sibling_overlaps

logger = logging.getLogger(__name__)


def validate_layout_options(options: LayoutOptions) -> None:
    """Fail fast on options that cannot produce a valid layout.

    Raises:
        InvalidLayoutOptionsError: negative/non-finite min_distance or padding,
            or non-positive screen bounds
    """
    min_distance = options.constraints.min_distance
    if not math.isfinite(min_distance) or min_distance < 0:
        logger.error(f"Invalid layout options: min_distance={min_distance}")
        raise InvalidLayoutOptionsError(
            f"min_distance must be a non-negative number, got {min_distance}",
            field="constraints.min_distance",
        )

    if not math.isfinite(options.padding) or options.padding < 0:
        logger.error(f"Invalid layout options: padding={options.padding}")
        raise InvalidLayoutOptionsError(
            f"padding must be a non-negative number, got {options.padding}",
            field="padding",
        )

    bounds = options.screen_bounds
    if not (bounds.width > 0 and bounds.height > 0):
        logger.error(f"Invalid layout options: screen_bounds={bounds.width}x{bounds.height}")
        raise InvalidLayoutOptionsError(
            f"screen_bounds must be positive, got {bounds.width}x{bounds.height}",
            field="screen_bounds",
        )


# ============================================================================
# Element arena
# ============================================================================

@dataclass
class ArenaNode:
    """Arena slot for one element; relations are indices, never references."""

    index: int
    element: LayoutElement
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)

    @property
    def width(self) -> float:
        return self.element.dimensions.width

    @property
    def height(self) -> float:
        return self.element.dimensions.height


class ElementArena:
    """Flat indexed forest built from a LayoutElement list."""

    def __init__(self, nodes: List[ArenaNode], index_of: Dict[str, int], roots: List[int]):
        self.nodes = nodes
        self.index_of = index_of
        self.roots = roots

    def __len__(self) -> int:
        return len(self.nodes)

    @classmethod
    def build(cls, elements: Sequence[LayoutElement]) -> "ElementArena":
        """Index elements, resolve parent links and reject cycles.

        Raises:
            LayoutValidationError: duplicate element ids
            LayoutCycleError: an element is its own ancestor
        """
        nodes: List[ArenaNode] = []
        index_of: Dict[str, int] = {}

        for element in elements:
            if element.id in index_of:
                logger.error(f"Duplicate layout element id: {element.id}")
                raise LayoutValidationError(f"Duplicate element id: {element.id}")
            index_of[element.id] = len(nodes)
            nodes.append(ArenaNode(index=len(nodes), element=element))

        roots: List[int] = []
        for node in nodes:
            parent_id = node.element.parent_id
            if parent_id is None:
                roots.append(node.index)
                continue

            parent_index = index_of.get(parent_id)
            if parent_index is None:
                logger.warning(
                    f"Element {node.element.id} references unknown parent {parent_id}, "
                    f"treating as root"
                )
                roots.append(node.index)
                continue

            node.parent = parent_index
            nodes[parent_index].children.append(node.index)

        arena = cls(nodes, index_of, roots)
        arena._check_cycles()
        return arena

    def _check_cycles(self) -> None:
        # 0 = unvisited, 1 = on current walk, 2 = known to reach a root
        state = [0] * len(self.nodes)

        for start in range(len(self.nodes)):
            if state[start]:
                continue

            path: List[int] = []
            current: Optional[int] = start
            while current is not None and state[current] == 0:
                state[current] = 1
                path.append(current)
                current = self.nodes[current].parent

            if current is not None and state[current] == 1:
                cycle = path[path.index(current):]
                first = min(cycle)
                pivot = cycle.index(first)
                ordered = cycle[pivot:] + cycle[:pivot]
                ids = [self.nodes[i].element.id for i in ordered]
                logger.error(f"Cycle detected in parent links: {ids}")
                raise LayoutCycleError(ids[0], ids)

            for index in path:
                state[index] = 2

    def preorder(self) -> List[int]:
        """All node indices, parents before children, roots in input order."""
        order: List[int] = []
        stack = list(reversed(self.roots))
        while stack:
            index = stack.pop()
            order.append(index)
            stack.extend(reversed(self.nodes[index].children))
        return order


# ============================================================================
# Layout engine
# ============================================================================

class LayoutEngine:
    """Deterministic constraint-driven tree layout.

    Holds no state between calls; the same elements and options always
    produce the same positions.
    """

    def __init__(self, verify: bool = False):
        """
        Initialize layout engine.

        Args:
            verify: Re-check sibling overlap after placement and log violations
        """
        self.verify = verify

    def layout(
        self,
        elements: Sequence[LayoutElement],
        options: LayoutOptions,
        origin: Optional[Position] = None,
    ) -> List[PositionedElement]:
        """
        Compute a position for every element.

        Args:
            elements: Forest of elements linked by parent_id
            options: Constraints, padding and screen bounds
            origin: Top-center anchor of the forest
                (default: horizontal screen center, padding from the top)

        Returns:
            One PositionedElement per input element, in input order

        Raises:
            InvalidLayoutOptionsError: options are unusable
            LayoutValidationError: duplicate element ids
            LayoutCycleError: parent links form a cycle
        """
        validate_layout_options(options)

        if not elements:
            return []

        arena = ElementArena.build(elements)
        constraints = options.constraints
        padding = options.padding
        min_distance = constraints.min_distance

        equal_siblings = constraints.equal_distance_between_siblings
        sibling_gap = min_distance + padding if equal_siblings else min_distance
        level_step = max(node.height for node in arena.nodes) + min_distance

        def level_gap(node: ArenaNode) -> float:
            # Offset from a node's top edge to its children's top edges
            if constraints.equal_distance_to_parent:
                return level_step
            return node.height + min_distance

        order = arena.preorder()
        count = len(arena)

        # Phase 3: sizing pass (post-order)
        widths = [node.width for node in arena.nodes]
        extent_w = [0.0] * count
        extent_h = [0.0] * count
        spacing_w = [0.0] * count

        for index in reversed(order):
            node = arena.nodes[index]
            own_w = node.width + padding
            own_h = node.height + padding

            if node.children:
                span = self._group_span(node.children, spacing_w, widths, sibling_gap, equal_siblings)
                extent_w[index] = max(own_w, span)
                extent_h[index] = max(own_h, level_gap(node) + max(extent_h[c] for c in node.children))
            else:
                extent_w[index] = own_w
                extent_h[index] = own_h

            # Without no_intersection, siblings are packed by their own size
            # and deeper descendants are allowed to overlap.
            spacing_w[index] = extent_w[index] if constraints.no_intersection else own_w

        # Phase 4: placement pass (pre-order)
        if origin is None:
            origin = Position(x=options.screen_bounds.width / 2, y=padding)

        xs = [0.0] * count
        ys = [0.0] * count

        self._place_group(arena.roots, origin.x, spacing_w, widths, sibling_gap, equal_siblings, xs)
        for root in arena.roots:
            ys[root] = origin.y

        for index in order:
            node = arena.nodes[index]
            if node.children:
                center_x = xs[index] + node.width / 2
                self._place_group(node.children, center_x, spacing_w, widths, sibling_gap, equal_siblings, xs)
                child_y = ys[index] + level_gap(node)
                for child in node.children:
                    ys[child] = child_y

        positioned = [
            PositionedElement(
                id=node.element.id,
                dimensions=node.element.dimensions,
                parent_id=node.element.parent_id,
                position=Position(x=xs[node.index], y=ys[node.index]),
            )
            for node in arena.nodes
        ]

        forest_w = self._group_span(arena.roots, extent_w, widths, sibling_gap, equal_siblings)
        forest_h = max(extent_h[root] for root in arena.roots)
        logger.info(
            f"Laid out {count} element(s) in {len(arena.roots)} tree(s), "
            f"extent {forest_w:.1f}x{forest_h:.1f}"
        )

        if self.verify and constraints.no_intersection:
            overlaps = find_sibling_overlaps(positioned)
            for first, second in overlaps:
                logger.error(f"Sibling overlap after layout: {first} / {second}")

        return positioned

    @staticmethod
    def _sibling_gaps(
        indices: Sequence[int],
        slot_widths: Sequence[float],
        widths: Sequence[float],
        gap: float,
        equal: bool,
    ) -> List[float]:
        """
        Gaps between adjacent sibling rectangles.

        Each rectangle is centered in its slot, so it overhangs by
        (slot - width) / 2 on both sides. Slots are always at least `gap`
        apart. With equal spacing every pair gets the gap the most crowded
        pair needs, so rectangle gaps are identical and slots still clear.
        """
        overhang = [(slot_widths[i] - widths[i]) / 2 for i in indices]
        pair_gaps = [overhang[k] + gap + overhang[k + 1] for k in range(len(indices) - 1)]
        if equal and pair_gaps:
            return [max(pair_gaps)] * len(pair_gaps)
        return pair_gaps

    def _group_span(
        self,
        indices: Sequence[int],
        slot_widths: Sequence[float],
        widths: Sequence[float],
        gap: float,
        equal: bool,
    ) -> float:
        if not indices:
            return 0.0
        first, last = indices[0], indices[-1]
        return (
            (slot_widths[first] - widths[first]) / 2
            + sum(widths[i] for i in indices)
            + sum(self._sibling_gaps(indices, slot_widths, widths, gap, equal))
            + (slot_widths[last] - widths[last]) / 2
        )

    def _place_group(
        self,
        indices: Sequence[int],
        center_x: float,
        slot_widths: Sequence[float],
        widths: Sequence[float],
        gap: float,
        equal: bool,
        xs: List[float],
    ) -> None:
        """Set left edges of sibling rectangles, the group centered on center_x."""
        span = self._group_span(indices, slot_widths, widths, gap, equal)
        gaps = self._sibling_gaps(indices, slot_widths, widths, gap, equal)

        first = indices[0]
        cursor = center_x - span / 2 + (slot_widths[first] - widths[first]) / 2
        for k, index in enumerate(indices):
            xs[index] = cursor
            if k < len(gaps):
                cursor += widths[index] + gaps[k]
