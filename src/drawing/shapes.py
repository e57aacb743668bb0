"""
Shape descriptors - the geometric record of a drawn shape in unit space
"""

import math
from dataclasses import dataclass
from typing import ClassVar, List, Tuple

from drawing.canvas_space import (Point, CanvasSize, to_unit, to_pixel,
                                  radius_to_unit, radius_to_pixel)


def _point_to_dict(p: Point) -> dict:
    return {'x': float(p.x), 'y': float(p.y)}


def _point_from_dict(data) -> Point:
    if not isinstance(data, dict):
        raise ValueError(f"Point must be an object, got {type(data).__name__}")
    x, y = float(data['x']), float(data['y'])
    # Unit space covers the drawing, 0..1 on each axis
    if not (0.0 <= x <= 1.0 and 0.0 <= y <= 1.0):
        raise ValueError(f"Point ({x}, {y}) lies outside the drawing")
    return Point(x, y)


def _radius_from_value(value) -> float:
    radius = float(value)
    if not math.isfinite(radius) or radius < 0:
        raise ValueError(f"Circle radius must be a non-negative number, got {value!r}")
    return radius


@dataclass(frozen=True)
class RectShape:
    """Two opposite corners"""
    shape_type: ClassVar[str] = 'rect'
    corner_a: Point
    corner_b: Point

    @classmethod
    def from_pixels(cls, a, b, canvas_size: CanvasSize):
        return cls(to_unit(a, canvas_size), to_unit(b, canvas_size))

    def pixel_points(self, canvas_size: CanvasSize) -> List[Point]:
        return [to_pixel(self.corner_a, canvas_size), to_pixel(self.corner_b, canvas_size)]

    def to_dict(self) -> dict:
        return {'type': self.shape_type,
                'points': [_point_to_dict(self.corner_a), _point_to_dict(self.corner_b)]}


@dataclass(frozen=True)
class CircleShape:
    """Center point plus radius as a fraction of the canvas' shorter side"""
    shape_type: ClassVar[str] = 'circle'
    center: Point
    radius: float

    @classmethod
    def from_pixels(cls, center, radius_px: float, canvas_size: CanvasSize):
        return cls(to_unit(center, canvas_size), radius_to_unit(radius_px, canvas_size))

    def pixel_points(self, canvas_size: CanvasSize) -> List[Point]:
        return [to_pixel(self.center, canvas_size)]

    def pixel_radius(self, canvas_size: CanvasSize) -> float:
        return radius_to_pixel(self.radius, canvas_size)

    def to_dict(self) -> dict:
        return {'type': self.shape_type, 'center': _point_to_dict(self.center),
                'radius': float(self.radius)}


@dataclass(frozen=True)
class TriangleShape:
    shape_type: ClassVar[str] = 'triangle'
    points: Tuple[Point, Point, Point]

    @classmethod
    def from_pixels(cls, points, canvas_size: CanvasSize):
        if len(points) != 3:
            raise ValueError("A triangle needs exactly 3 points")
        return cls(tuple(to_unit(p, canvas_size) for p in points))

    def pixel_points(self, canvas_size: CanvasSize) -> List[Point]:
        return [to_pixel(p, canvas_size) for p in self.points]

    def to_dict(self) -> dict:
        return {'type': self.shape_type, 'points': [_point_to_dict(p) for p in self.points]}


@dataclass(frozen=True)
class PolygonShape:
    """Custom shape, vertices in drawing order"""
    shape_type: ClassVar[str] = 'polygon'
    points: Tuple[Point, ...]

    @classmethod
    def from_pixels(cls, points, canvas_size: CanvasSize):
        if len(points) < 3:
            raise ValueError("A custom shape needs at least 3 points")
        return cls(tuple(to_unit(p, canvas_size) for p in points))

    def pixel_points(self, canvas_size: CanvasSize) -> List[Point]:
        return [to_pixel(p, canvas_size) for p in self.points]

    def to_dict(self) -> dict:
        return {'type': self.shape_type, 'points': [_point_to_dict(p) for p in self.points]}


SHAPE_TYPES = {
    'rect': RectShape,
    'circle': CircleShape,
    'triangle': TriangleShape,
    'polygon': PolygonShape,
}

# Older saves used 'tri' for triangles
_TYPE_ALIASES = {'tri': 'triangle', 'rectangle': 'rect'}


def shape_from_dict(data: dict):
    """Rebuild a descriptor from its serialized form.

    Raises ValueError for unknown types or malformed points.
    """
    if not isinstance(data, dict):
        raise ValueError("Shape must be an object")
    shape_type = _TYPE_ALIASES.get(data.get('type'), data.get('type'))
    try:
        if shape_type == 'rect':
            a, b = data['points']
            return RectShape(_point_from_dict(a), _point_from_dict(b))
        if shape_type == 'circle':
            return CircleShape(_point_from_dict(data['center']), _radius_from_value(data['radius']))
        if shape_type == 'triangle':
            pts = tuple(_point_from_dict(p) for p in data['points'])
            if len(pts) != 3:
                raise ValueError("A triangle needs exactly 3 points")
            return TriangleShape(pts)
        if shape_type == 'polygon':
            pts = tuple(_point_from_dict(p) for p in data['points'])
            if len(pts) < 3:
                raise ValueError("A custom shape needs at least 3 points")
            return PolygonShape(pts)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed {shape_type} shape: {e}")
    raise ValueError(f"Unknown shape type: {data.get('type')!r}")


def shape_type_label(shape_type: str) -> str:
    return {
        'rect': 'Rectangle',
        'circle': 'Circle',
        'triangle': 'Triangle',
        'polygon': 'Custom Shape',
    }.get(shape_type, shape_type)
