"""
Area Calculator - square footage for captured shapes

Every formula works on real measurements in decimal feet. Pixel geometry is
only consulted by the shoelace polygon strategy, and then only through the
pixel area/perimeter recorded in the measurement when the shape was captured.
"""

import math
from enum import Enum
from typing import Dict, List, Sequence

from calculations.geometry import estimate_feet_per_pixel


class AreaCalculationError(ValueError):
    """Raised when measurements cannot produce an area"""


class TriangleMethod(Enum):
    """How a triangle's real size was entered"""
    BASE_HEIGHT = "base_height"
    THREE_SIDES = "three_sides"


class PolygonMethod(Enum):
    """Area strategy for a custom shape"""
    HERON = "heron"            # exactly three edges
    RECTANGLE = "rectangle"    # four edges, two adjacent sides
    TRAPEZOID = "trapezoid"    # four edges, bases + height
    IRREGULAR = "irregular"    # four edges, total area typed in
    SHOELACE = "shoelace"      # five or more edges, drawn shape scaled by edge ratio


FOUR_EDGE_METHODS = (PolygonMethod.RECTANGLE, PolygonMethod.TRAPEZOID, PolygonMethod.IRREGULAR)


def _positive(value, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise AreaCalculationError(f"{name} must be a number")
    if not math.isfinite(number) or number <= 0:
        raise AreaCalculationError(f"{name} must be greater than zero")
    return number


def rectangle_area(width_ft: float, height_ft: float) -> float:
    return _positive(width_ft, "Width") * _positive(height_ft, "Height")


def circle_area(radius_ft: float) -> float:
    radius = _positive(radius_ft, "Radius")
    return math.pi * radius * radius


def triangle_area(base_ft: float, height_ft: float) -> float:
    return 0.5 * _positive(base_ft, "Base") * _positive(height_ft, "Height")


def heron_area(a: float, b: float, c: float) -> float:
    """Triangle area from three sides.

    Raises AreaCalculationError when the sides violate the triangle inequality.
    """
    a = _positive(a, "Side A")
    b = _positive(b, "Side B")
    c = _positive(c, "Side C")
    s = (a + b + c) / 2.0
    radicand = s * (s - a) * (s - b) * (s - c)
    if radicand <= 0:
        raise AreaCalculationError(
            f"Sides {a:g}, {b:g} and {c:g} ft cannot form a triangle"
        )
    return math.sqrt(radicand)


def trapezoid_area(top_base_ft: float, bottom_base_ft: float, height_ft: float) -> float:
    top = _positive(top_base_ft, "Top base")
    bottom = _positive(bottom_base_ft, "Bottom base")
    height = _positive(height_ft, "Height")
    return ((top + bottom) / 2.0) * height


def trapezoid_defaults(edges_ft: Sequence[float]) -> Dict[str, float]:
    """Prefill values for the trapezoid prompt from the four drawn edges.

    Shortest edge -> height, second shortest -> top base, longest -> bottom base.
    A convenience only; the user confirms or overrides every value.
    """
    ordered = sorted(float(e) for e in edges_ft)
    if len(ordered) < 4:
        raise AreaCalculationError("Trapezoid needs four edges")
    return {
        'top_base_ft': ordered[1],
        'bottom_base_ft': ordered[3],
        'height_ft': ordered[0],
    }


def adjacent_edge_pairs(edge_count: int) -> List[tuple]:
    """Index pairs of adjacent edges around a closed shape: (0, 1), (1, 2), ... (n-1, 0)"""
    return [(i, (i + 1) % edge_count) for i in range(edge_count)]


def shoelace_scaled_area(pixel_area: float, pixel_perimeter: float, edges_ft: Sequence[float]) -> float:
    """Scale a pixel-space shoelace area into square feet.

    feet-per-pixel is estimated as total real edge length over total drawn edge
    length, so the result is only as good as the drawing is to scale.
    """
    if pixel_area is None or pixel_area <= 0:
        raise AreaCalculationError("Drawn shape has no area")
    feet_per_pixel = estimate_feet_per_pixel(edges_ft, [pixel_perimeter])
    if feet_per_pixel <= 0:
        raise AreaCalculationError("Drawn shape has no perimeter")
    return float(pixel_area) * feet_per_pixel * feet_per_pixel


def default_polygon_method(edge_count: int):
    """The strategy a custom shape gets without asking, or None for four edges"""
    if edge_count < 3:
        raise AreaCalculationError("A custom shape needs at least 3 sides")
    if edge_count == 3:
        return PolygonMethod.HERON
    if edge_count == 4:
        return None
    return PolygonMethod.SHOELACE


class AreaCalculator:
    """Computes area in square feet from shape type + real measurement"""

    def compute(self, shape_type: str, measurement: dict) -> float:
        """Area for one captured shape

        Args:
            shape_type: 'rect', 'circle', 'triangle' or 'polygon'
            measurement: real lengths in feet, keyed per shape type

        Returns:
            float: area in square feet, full precision
        """
        if shape_type == 'rect':
            return rectangle_area(measurement.get('width_ft'), measurement.get('height_ft'))
        if shape_type == 'circle':
            return circle_area(measurement.get('radius_ft'))
        if shape_type == 'triangle':
            return self._triangle(measurement)
        if shape_type == 'polygon':
            return self._polygon(measurement)
        raise AreaCalculationError(f"Unknown shape type: {shape_type}")

    def _triangle(self, measurement):
        method = measurement.get('method', TriangleMethod.BASE_HEIGHT.value)
        if method == TriangleMethod.THREE_SIDES.value:
            sides = measurement.get('sides_ft') or []
            if len(sides) != 3:
                raise AreaCalculationError("Three side lengths are required")
            return heron_area(*sides)
        return triangle_area(measurement.get('base_ft'), measurement.get('height_ft'))

    def _polygon(self, measurement):
        edges = list(measurement.get('edges_ft') or [])
        if len(edges) < 3:
            raise AreaCalculationError("A custom shape needs at least 3 sides")
        for i, edge in enumerate(edges):
            _positive(edge, f"Side {i + 1}")

        try:
            method = PolygonMethod(measurement.get('method'))
        except ValueError:
            raise AreaCalculationError(f"Unknown area method: {measurement.get('method')!r}")

        if method == PolygonMethod.HERON:
            if len(edges) != 3:
                raise AreaCalculationError("Heron's formula needs exactly 3 sides")
            return heron_area(*edges)

        if method in FOUR_EDGE_METHODS and len(edges) != 4:
            raise AreaCalculationError(f"The {method.value} method needs exactly 4 sides")

        if method == PolygonMethod.RECTANGLE:
            return rectangle_area(measurement.get('side_a_ft'), measurement.get('side_b_ft'))
        if method == PolygonMethod.TRAPEZOID:
            return trapezoid_area(
                measurement.get('top_base_ft'),
                measurement.get('bottom_base_ft'),
                measurement.get('height_ft'),
            )
        if method == PolygonMethod.IRREGULAR:
            return _positive(measurement.get('area_sq_ft'), "Total area")

        return shoelace_scaled_area(
            measurement.get('pixel_area'),
            measurement.get('pixel_perimeter'),
            edges,
        )

    def describe(self, shape_type: str, measurement: dict) -> str:
        """Short human readable summary of the inputs, shown under each saved area"""
        fmt = _fmt_ft
        if shape_type == 'rect':
            return f"Width: {fmt(measurement['width_ft'])} · Height: {fmt(measurement['height_ft'])}"
        if shape_type == 'circle':
            return f"Radius: {fmt(measurement['radius_ft'])} · Area = πr²"
        if shape_type == 'triangle':
            if measurement.get('method') == TriangleMethod.THREE_SIDES.value:
                sides = ", ".join(fmt(s) for s in measurement['sides_ft'])
                return f"Sides: {sides} · Heron's formula"
            return f"Base: {fmt(measurement['base_ft'])} · Height: {fmt(measurement['height_ft'])} · Area = ½bh"
        if shape_type == 'polygon':
            edges = ", ".join(fmt(e) for e in measurement.get('edges_ft', []))
            method = measurement.get('method')
            suffix = {
                PolygonMethod.HERON.value: "Heron's formula",
                PolygonMethod.RECTANGLE.value: (
                    f"Rectangle {fmt(measurement.get('side_a_ft', 0))} × {fmt(measurement.get('side_b_ft', 0))}"
                ),
                PolygonMethod.TRAPEZOID.value: (
                    f"Trapezoid bases {fmt(measurement.get('top_base_ft', 0))}/"
                    f"{fmt(measurement.get('bottom_base_ft', 0))}, height {fmt(measurement.get('height_ft', 0))}"
                ),
                PolygonMethod.IRREGULAR.value: "Area entered manually",
                PolygonMethod.SHOELACE.value: "Drawn shape scaled by side lengths (approx.)",
            }.get(method, "")
            return f"Sides: {edges} · {suffix}" if suffix else f"Sides: {edges}"
        return ""


def _fmt_ft(value) -> str:
    return f"{float(value):g} ft"
