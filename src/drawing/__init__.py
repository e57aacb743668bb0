"""
Shape capture: canvas coordinates, drawing tools and measurement requests
"""

from .canvas_space import Point, CanvasSize, to_unit, to_pixel, radius_to_unit, radius_to_pixel
from .shapes import RectShape, CircleShape, TriangleShape, PolygonShape, shape_from_dict
from .scale_manager import ScaleManager, parse_length, LengthParseError
from .drawing_tools import DrawingToolManager, ToolType

__all__ = [
    'Point',
    'CanvasSize',
    'to_unit',
    'to_pixel',
    'radius_to_unit',
    'radius_to_pixel',
    'RectShape',
    'CircleShape',
    'TriangleShape',
    'PolygonShape',
    'shape_from_dict',
    'ScaleManager',
    'parse_length',
    'LengthParseError',
    'DrawingToolManager',
    'ToolType',
]
