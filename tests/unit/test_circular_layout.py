"""Tests for the radial distribution engine."""

import math

import pytest

from taskcanvas.constants import CIRCULAR_MIN_RADIUS, CIRCULAR_MIN_SPACING
from taskcanvas.errors import InvalidLayoutOptionsError, LayoutCycleError
from taskcanvas.models import CircularLayoutConfig, Dimensions, LayoutElement
from taskcanvas.services.circular_layout import CircularLayoutEngine, calculate_ring_radius


def _element(element_id, parent_id=None, width=100, height=40):
    return LayoutElement(id=element_id, dimensions=Dimensions(width=width, height=height), parent_id=parent_id)


def _center(element):
    return element.rect.center


class TestCalculateRingRadius:

    def test_no_children(self):
        assert calculate_ring_radius(0, 100) == 0.0

    def test_clears_parent(self):
        """Test the ring keeps children clear of the parent rectangle."""
        radius = calculate_ring_radius(2, 50, parent_size=400)
        assert radius >= 400 / 2 + 50 / 2 + CIRCULAR_MIN_SPACING

    def test_single_child_matches_pair(self):
        """Test one child sits as far out as a pair of children would."""
        assert calculate_ring_radius(1, 120, 100) == calculate_ring_radius(2, 120, 100)

    def test_grows_with_many_children(self):
        assert calculate_ring_radius(24, 100) > calculate_ring_radius(8, 100)


class TestCircularLayoutEngine:

    def test_one_output_per_input(self):
        elements = [_element("r"), _element("a", "r"), _element("b", "r"), _element("a1", "a")]
        result = CircularLayoutEngine().distribute(elements, CircularLayoutConfig())

        assert [e.id for e in result] == ["r", "a", "b", "a1"]
        assert all(math.isfinite(e.position.x) and math.isfinite(e.position.y) for e in result)

    def test_single_root_above_screen_center(self):
        """Test a lone root sits on the minimum radius straight above the center."""
        result = CircularLayoutEngine().distribute([_element("r")], CircularLayoutConfig())
        center = _center(result[0])

        assert math.isclose(center.x, 600, abs_tol=1e-9)
        assert math.isclose(center.y, 400 - CIRCULAR_MIN_RADIUS)

    def test_radius_override(self):
        config = CircularLayoutConfig(radius=500)
        center = _center(CircularLayoutEngine().distribute([_element("r")], config)[0])

        assert math.isclose(math.hypot(center.x - 600, center.y - 400), 500)

    def test_small_radius_override_used_as_given(self):
        """Test an explicit radius below the computed minimum is not raised."""
        config = CircularLayoutConfig(radius=120)
        center = _center(CircularLayoutEngine().distribute([_element("r")], config)[0])

        assert math.isclose(math.hypot(center.x - 600, center.y - 400), 120)

    def test_override_applies_to_root_ring_only(self):
        elements = [_element("r")] + [_element(f"k{i}", "r") for i in range(3)]
        placed = {e.id: e for e in CircularLayoutEngine().distribute(elements, CircularLayoutConfig(radius=50))}
        parent = _center(placed["r"])

        for i in range(3):
            child = _center(placed[f"k{i}"])
            assert math.hypot(child.x - parent.x, child.y - parent.y) >= CIRCULAR_MIN_RADIUS

    def test_children_on_ring_around_parent(self):
        """Test children share one distance from their parent's center."""
        elements = [_element("r")] + [_element(f"k{i}", "r") for i in range(6)]
        placed = {e.id: e for e in CircularLayoutEngine().distribute(elements, CircularLayoutConfig())}
        parent = _center(placed["r"])

        distances = [math.hypot(_center(placed[f"k{i}"]).x - parent.x, _center(placed[f"k{i}"]).y - parent.y) for i in range(6)]
        assert all(math.isclose(d, distances[0]) for d in distances)
        assert distances[0] >= CIRCULAR_MIN_RADIUS

    def test_four_children_on_diagonals(self):
        """Test four children are rotated 45 degrees off the axes."""
        elements = [_element("r", width=40, height=40)] + [
            _element(f"k{i}", "r", width=40, height=40) for i in range(4)
        ]
        placed = {e.id: e for e in CircularLayoutEngine().distribute(elements, CircularLayoutConfig())}
        parent = _center(placed["r"])

        for i in range(4):
            child = _center(placed[f"k{i}"])
            assert math.isclose(abs(child.x - parent.x), abs(child.y - parent.y), rel_tol=1e-9)

    def test_empty_input(self):
        assert CircularLayoutEngine().distribute([], CircularLayoutConfig()) == []

    def test_cycle_rejected(self):
        elements = [_element("a", "b"), _element("b", "a")]

        with pytest.raises(LayoutCycleError):
            CircularLayoutEngine().distribute(elements, CircularLayoutConfig())

    def test_invalid_options_rejected(self):
        with pytest.raises(InvalidLayoutOptionsError):
            CircularLayoutEngine().distribute([_element("a")], CircularLayoutConfig(padding=-1))
