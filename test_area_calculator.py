#!/usr/bin/env python3
"""
Area formulas, polygon strategies and pixel geometry
"""

import math
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from calculations.area_calculator import (AreaCalculator, AreaCalculationError, PolygonMethod,
                                          rectangle_area, circle_area, triangle_area, heron_area,
                                          trapezoid_area, trapezoid_defaults, shoelace_scaled_area,
                                          default_polygon_method, adjacent_edge_pairs)
from calculations.geometry import (polygon_area_pixels, polygon_perimeter_pixels, edge_lengths_pixels,
                                   estimate_feet_per_pixel, polygon_centroid)


def test_basic_formulas():
    assert rectangle_area(10, 12) == pytest.approx(120.0)
    assert circle_area(6) == pytest.approx(math.pi * 36)
    assert triangle_area(10, 8) == pytest.approx(40.0)
    assert heron_area(3, 4, 5) == pytest.approx(6.0)
    assert trapezoid_area(4, 6, 5) == pytest.approx(25.0)


@pytest.mark.parametrize("a, b", [(3, 4), (5, 12), (1.5, 2.25), (10, 10), (0.3, 40)])
def test_heron_matches_half_base_height_on_right_triangles(a, b):
    assert heron_area(a, b, math.hypot(a, b)) == pytest.approx(triangle_area(a, b))


@pytest.mark.parametrize("sides", [(1, 2, 3), (1, 1, 5), (10, 2, 3)])
def test_heron_rejects_impossible_triangles(sides):
    with pytest.raises(AreaCalculationError, match="cannot form a triangle"):
        heron_area(*sides)


@pytest.mark.parametrize("value", [0, -4, "abc", None, float('nan')])
def test_non_positive_measurements_rejected(value):
    with pytest.raises(AreaCalculationError):
        rectangle_area(value, 10)


def test_trapezoid_defaults_from_sorted_edges():
    defaults = trapezoid_defaults([10, 4, 5, 6])
    assert defaults == {'top_base_ft': 5.0, 'bottom_base_ft': 10.0, 'height_ft': 4.0}

    with pytest.raises(AreaCalculationError):
        trapezoid_defaults([1, 2, 3])


def test_adjacent_edge_pairs_wrap_around():
    assert adjacent_edge_pairs(4) == [(0, 1), (1, 2), (2, 3), (3, 0)]


def test_shoelace_scaled_by_edge_ratio():
    # 100x100 px square measured as 10 ft sides: 0.1 ft per px
    area = shoelace_scaled_area(10000.0, 400.0, [10, 10, 10, 10])
    assert area == pytest.approx(100.0)

    with pytest.raises(AreaCalculationError):
        shoelace_scaled_area(0.0, 400.0, [10, 10, 10])


def test_default_polygon_method():
    assert default_polygon_method(3) == PolygonMethod.HERON
    assert default_polygon_method(4) is None
    assert default_polygon_method(7) == PolygonMethod.SHOELACE
    with pytest.raises(AreaCalculationError):
        default_polygon_method(2)


class TestAreaCalculator:
    """AreaCalculator.compute dispatch per shape type"""

    def setup_method(self):
        self.calculator = AreaCalculator()

    def test_rect_circle_triangle(self):
        assert self.calculator.compute('rect', {'width_ft': 10, 'height_ft': 12}) == pytest.approx(120)
        assert self.calculator.compute('circle', {'radius_ft': 1}) == pytest.approx(math.pi)
        assert self.calculator.compute('triangle', {'method': 'base_height', 'base_ft': 10,
                                                    'height_ft': 8}) == pytest.approx(40)
        assert self.calculator.compute('triangle', {'method': 'three_sides',
                                                    'sides_ft': [3, 4, 5]}) == pytest.approx(6)

    def test_polygon_methods(self):
        edges = [20, 10, 20, 10]
        compute = self.calculator.compute
        assert compute('polygon', {'edges_ft': [3, 4, 5], 'method': 'heron'}) == pytest.approx(6)
        assert compute('polygon', {'edges_ft': edges, 'method': 'rectangle',
                                   'side_a_ft': 20, 'side_b_ft': 10}) == pytest.approx(200)
        assert compute('polygon', {'edges_ft': edges, 'method': 'trapezoid', 'top_base_ft': 10,
                                   'bottom_base_ft': 20, 'height_ft': 10}) == pytest.approx(150)
        assert compute('polygon', {'edges_ft': edges, 'method': 'irregular',
                                   'area_sq_ft': 175}) == pytest.approx(175)
        assert compute('polygon', {'edges_ft': [5, 5, 10, 10, 10], 'method': 'shoelace',
                                   'pixel_area': 40000.0, 'pixel_perimeter': 800.0}) == pytest.approx(100)

    def test_polygon_method_edge_count_mismatch(self):
        with pytest.raises(AreaCalculationError):
            self.calculator.compute('polygon', {'edges_ft': [3, 4, 5, 6], 'method': 'heron'})
        with pytest.raises(AreaCalculationError):
            self.calculator.compute('polygon', {'edges_ft': [3, 4, 5], 'method': 'rectangle',
                                                'side_a_ft': 3, 'side_b_ft': 4})

    def test_polygon_zero_edge_rejected(self):
        with pytest.raises(AreaCalculationError, match="Side 2"):
            self.calculator.compute('polygon', {'edges_ft': [3, 0, 5], 'method': 'heron'})

    def test_unknown_inputs(self):
        with pytest.raises(AreaCalculationError):
            self.calculator.compute('hexagon', {})
        with pytest.raises(AreaCalculationError):
            self.calculator.compute('polygon', {'edges_ft': [3, 4, 5], 'method': 'guess'})

    def test_describe(self):
        assert self.calculator.describe('rect', {'width_ft': 10, 'height_ft': 12}) == \
            "Width: 10 ft · Height: 12 ft"
        text = self.calculator.describe('polygon', {'edges_ft': [3, 4, 5], 'method': 'heron'})
        assert text == "Sides: 3 ft, 4 ft, 5 ft · Heron's formula"


def test_pixel_geometry():
    square = [(0, 0), (100, 0), (100, 100), (0, 100)]
    assert polygon_area_pixels(square) == pytest.approx(10000)
    # Winding direction does not matter
    assert polygon_area_pixels(list(reversed(square))) == pytest.approx(10000)
    assert polygon_perimeter_pixels(square) == pytest.approx(400)
    assert edge_lengths_pixels(square, closed=False) == pytest.approx([100, 100, 100])
    assert polygon_centroid(square) == pytest.approx((50, 50))
    assert polygon_area_pixels([(0, 0), (1, 1)]) == 0.0


def test_feet_per_pixel_estimate():
    assert estimate_feet_per_pixel([10, 20], [100, 200]) == pytest.approx(0.1)
    assert estimate_feet_per_pixel([], []) == 0.0


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
