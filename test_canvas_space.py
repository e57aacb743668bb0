#!/usr/bin/env python3
"""
Canvas coordinates, shape descriptors, length parsing and the edge scale
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from drawing.canvas_space import (Point, CanvasSize, to_unit, to_pixel, radius_to_unit,
                                  radius_to_pixel, clamp_to_canvas, fit_rect)
from drawing.shapes import (RectShape, CircleShape, TriangleShape, PolygonShape,
                            shape_from_dict, shape_type_label)
from drawing.scale_manager import (ScaleManager, parse_length, parse_area,
                                   LengthParseError)


def test_unit_conversion_and_clamping():
    size = CanvasSize(200, 100)
    assert to_unit((50, 25), size) == Point(0.25, 0.25)
    assert to_unit((250, -5), size) == Point(1.0, 0.0)
    assert to_pixel((0.25, 0.25), size) == Point(50, 25)
    assert to_unit((10, 10), CanvasSize(0, 0)) == Point(0.0, 0.0)
    assert clamp_to_canvas((-3, 140), size) == Point(0.0, 100.0)


def test_radius_uses_shorter_side():
    assert radius_to_unit(50, CanvasSize(200, 100)) == pytest.approx(0.5)
    assert radius_to_pixel(0.5, CanvasSize(400, 300)) == pytest.approx(150)


def test_fit_rect_centres_image():
    wide = fit_rect(200, 100, 400, 400)
    assert (wide.x, wide.y, wide.width, wide.height) == pytest.approx((0, 100, 400, 200))
    tall = fit_rect(100, 200, 400, 400)
    assert (tall.x, tall.y, tall.width, tall.height) == pytest.approx((100, 0, 200, 400))
    assert fit_rect(0, 100, 400, 400).width == 0


def test_shapes_follow_canvas_resize():
    rect = RectShape.from_pixels((100, 50), (300, 150), CanvasSize(400, 200))
    a, b = rect.pixel_points(CanvasSize(800, 400))
    assert (a.x, a.y, b.x, b.y) == pytest.approx((200, 100, 600, 300))

    circle = CircleShape.from_pixels((200, 100), 50, CanvasSize(400, 200))
    # Radius scales with the shorter side, so an aspect change keeps it round
    assert circle.pixel_radius(CanvasSize(800, 300)) == pytest.approx(75)


def test_shape_dict_round_trip():
    size = CanvasSize(100, 100)
    shapes = [
        RectShape.from_pixels((10, 10), (50, 60), size),
        CircleShape.from_pixels((50, 50), 20, size),
        TriangleShape.from_pixels([(0, 0), (50, 0), (25, 40)], size),
        PolygonShape.from_pixels([(0, 0), (50, 0), (50, 50), (0, 50), (0, 25)], size),
    ]
    for shape in shapes:
        assert shape_from_dict(shape.to_dict()) == shape


def test_shape_from_dict_accepts_old_triangle_type():
    data = {'type': 'tri', 'points': [{'x': 0, 'y': 0}, {'x': 1, 'y': 0}, {'x': 0, 'y': 1}]}
    assert isinstance(shape_from_dict(data), TriangleShape)


@pytest.mark.parametrize("data", [
    None,
    {'type': 'hexagon', 'points': []},
    {'type': 'rect', 'points': [{'x': 0, 'y': 0}]},
    {'type': 'circle', 'center': {'x': 0.5}},
    {'type': 'triangle', 'points': [{'x': 0, 'y': 0}, {'x': 1, 'y': 1}]},
    {'type': 'polygon', 'points': ['a', 'b', 'c']},
    {'type': 'rect', 'points': [{'x': 5, 'y': 0.5}, {'x': 0.2, 'y': 0.2}]},
    {'type': 'rect', 'points': [{'x': 0.1, 'y': -3}, {'x': 0.2, 'y': 0.2}]},
    {'type': 'triangle', 'points': [{'x': float('nan'), 'y': 0}, {'x': 1, 'y': 0}, {'x': 0, 'y': 1}]},
    {'type': 'circle', 'center': {'x': 0.5, 'y': 0.5}, 'radius': -0.1},
    {'type': 'circle', 'center': {'x': 0.5, 'y': 0.5}, 'radius': float('inf')},
])
def test_shape_from_dict_rejects_malformed(data):
    with pytest.raises(ValueError):
        shape_from_dict(data)


def test_shape_type_label():
    assert shape_type_label('polygon') == 'Custom Shape'
    assert shape_type_label('rect') == 'Rectangle'


@pytest.mark.parametrize("raw, expected", [
    ("12", 12.0),
    ("12.5", 12.5),
    (10, 10.0),
    ("12'", 12.0),
    ("12 ft", 12.0),
    ("12' 6\"", 12.5),
    ("12'6", 12.5),
    ("6in", 0.5),
    ("6 1/2\"", 6.5 / 12),
])
def test_parse_length(raw, expected):
    assert parse_length(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["", "   ", None, "abc", "0", "-3", "12 6", "nan", "1/0\""])
def test_parse_length_rejects(raw):
    with pytest.raises(LengthParseError):
        parse_length(raw)


def test_parse_area():
    assert parse_area("150 sq ft") == pytest.approx(150)
    assert parse_area(" 42.5 ") == pytest.approx(42.5)
    with pytest.raises(LengthParseError):
        parse_area("0")


def test_scale_manager_edge_calibration():
    scale = ScaleManager()
    assert not scale.is_calibrated
    assert scale.calibrate_from_edges([10, 20], [100, 200])
    assert scale.feet_per_pixel == pytest.approx(0.1)
    assert scale.calculate_distance(0, 0, 30, 40) == pytest.approx(5.0)
    assert not scale.calibrate_from_edges([], [])
    scale.reset()
    assert not scale.is_calibrated


def test_scale_formatting():
    assert ScaleManager.format_distance(12.5) == "12.50 ft"
    assert ScaleManager.format_distance(0.5) == "6.0 in"
    assert ScaleManager.format_area(120) == "120.00 sq ft"


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
