"""
Area calculation engine and pixel geometry helpers
"""

from .area_calculator import (
    AreaCalculator, AreaCalculationError, TriangleMethod, PolygonMethod,
    rectangle_area, circle_area, triangle_area, heron_area, trapezoid_area,
    trapezoid_defaults, shoelace_scaled_area, default_polygon_method
)
from .geometry import (
    polygon_area_pixels, polygon_perimeter_pixels,
    edge_lengths_pixels, estimate_feet_per_pixel, polygon_centroid
)

__all__ = [
    'AreaCalculator',
    'AreaCalculationError',
    'TriangleMethod',
    'PolygonMethod',
    'rectangle_area',
    'circle_area',
    'triangle_area',
    'heron_area',
    'trapezoid_area',
    'trapezoid_defaults',
    'shoelace_scaled_area',
    'default_polygon_method',
    'polygon_area_pixels',
    'polygon_perimeter_pixels',
    'edge_lengths_pixels',
    'estimate_feet_per_pixel',
    'polygon_centroid',
]
