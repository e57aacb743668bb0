"""
Drawing Tools - Rectangle, circle, triangle and custom-shape capture tools

Tools hold in-progress geometry in canvas pixels. They know nothing about
real measurements; the estimator controller turns a finished tool result
into a shape descriptor and asks for lengths.
"""

from dataclasses import dataclass
from enum import Enum
import math

from drawing.canvas_space import Point


MIN_DRAG_PX = 6            # smaller rectangles/circles are treated as stray clicks
CLOSE_TOLERANCE_PX = 12    # click this close to the first pin closes a custom shape
DUPLICATE_PIN_PX = 3       # repeated clicks on the last pin are ignored


class ToolType(Enum):
    """Available drawing tools"""
    RECTANGLE = "rect"
    CIRCLE = "circle"
    TRIANGLE = "triangle"
    POLYGON = "polygon"


# Input events, in canvas pixels

@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    x: float
    y: float


@dataclass(frozen=True)
class Click:
    x: float
    y: float


@dataclass(frozen=True)
class DoubleClick:
    x: float
    y: float


@dataclass(frozen=True)
class KeyDown:
    key: str   # 'Escape', 'Enter', ...


@dataclass(frozen=True)
class ModeChanged:
    mode: ToolType


def _scale_point(point, sx, sy):
    if point is None:
        return None
    return Point(point.x * sx, point.y * sy)


class DrawingTool:
    """Base class for drawing tools"""

    def __init__(self):
        self.active = False
        self.start_point = None
        self.current_point = None

    def start(self, point):
        """Start tool operation at given point"""
        self.active = True
        self.start_point = Point(*point)
        self.current_point = Point(*point)

    def update(self, point):
        """Update tool operation with current point"""
        if self.active:
            self.current_point = Point(*point)

    def finish(self, point):
        """Finish tool operation; returns the result or None when too small"""
        if not self.active:
            return None
        self.current_point = Point(*point)
        self.active = False
        result = self.get_result()
        self.cancel()
        return result

    def cancel(self):
        """Cancel current tool operation"""
        self.active = False
        self.start_point = None
        self.current_point = None

    def get_result(self):
        """Get the result of the tool operation"""
        return None

    def has_progress(self):
        return self.active

    def rescale(self, sx, sy):
        """Canvas was resized by (sx, sy); keep in-progress points on the image"""
        self.start_point = _scale_point(self.start_point, sx, sy)
        self.current_point = _scale_point(self.current_point, sx, sy)


class RectangleTool(DrawingTool):
    """Drag from one corner to the opposite corner"""

    def get_result(self):
        if not self.start_point or not self.current_point:
            return None
        width = abs(self.current_point.x - self.start_point.x)
        height = abs(self.current_point.y - self.start_point.y)
        # Only return if rectangle has minimum size
        if width < MIN_DRAG_PX or height < MIN_DRAG_PX:
            return None
        return {
            'type': 'rect',
            'points': [self.start_point, self.current_point],
            'width_px': width,
            'height_px': height,
        }


class CircleTool(DrawingTool):
    """Drag from the center out to the radius"""

    @property
    def radius(self):
        if not self.start_point or not self.current_point:
            return 0.0
        return math.hypot(self.current_point.x - self.start_point.x,
                          self.current_point.y - self.start_point.y)

    def get_result(self):
        radius = self.radius
        if radius < MIN_DRAG_PX:
            return None
        return {
            'type': 'circle',
            'center': self.start_point,
            'radius_px': radius,
        }


class TriangleTool(DrawingTool):
    """Three clicks, one per corner"""

    def __init__(self):
        super().__init__()
        self.points = []

    def add_point(self, point):
        """Add a corner; returns the result once the third corner is placed"""
        self.points.append(Point(*point))
        self.active = True
        self.current_point = Point(*point)
        if len(self.points) == 3:
            result = {'type': 'triangle', 'points': list(self.points)}
            self.cancel()
            return result
        return None

    def cancel(self):
        super().cancel()
        self.points = []

    def has_progress(self):
        return bool(self.points)

    def rescale(self, sx, sy):
        super().rescale(sx, sy)
        self.points = [_scale_point(p, sx, sy) for p in self.points]


class PolygonTool(DrawingTool):
    """Tool for drawing custom shapes by placing pins

    Every pin after the first opens an edge whose real length must be
    recorded before the next pin; `edges_ft[i]` is the edge ending at
    `vertices[i + 1]`, and once closed the last entry is the closing edge.
    """

    def __init__(self):
        super().__init__()
        self.vertices = []
        self.edges_ft = []
        self.closed = False

    def add_vertex(self, point):
        """Place a pin; returns False for a repeated click on the last pin"""
        point = Point(*point)
        if self.vertices:
            last = self.vertices[-1]
            if math.hypot(point.x - last.x, point.y - last.y) <= DUPLICATE_PIN_PX:
                return False
        else:
            self.start_point = point
        self.active = True
        self.vertices.append(point)
        self.current_point = point
        return True

    def pop_vertex(self):
        """Remove the most recent pin (its edge length was never recorded)"""
        if self.vertices:
            self.vertices.pop()
        del self.edges_ft[max(0, len(self.vertices) - 1):]
        if not self.vertices:
            self.cancel()

    def record_edge(self, length_ft):
        self.edges_ft.append(float(length_ft))

    def is_near_first(self, point):
        if len(self.vertices) < 3:
            return False
        first = self.vertices[0]
        return math.hypot(point[0] - first.x, point[1] - first.y) <= CLOSE_TOLERANCE_PX

    def can_close(self):
        return len(self.vertices) >= 3 and not self.closed

    def close(self):
        self.closed = True

    def reopen(self):
        """Undo a close whose closing edge was not measured"""
        if self.closed:
            self.closed = False
            del self.edges_ft[len(self.vertices) - 1:]

    def cancel(self):
        super().cancel()
        self.vertices = []
        self.edges_ft = []
        self.closed = False

    def has_progress(self):
        return bool(self.vertices)

    def pixel_edge_lengths(self):
        """Drawn lengths of the measured edges, in the same order as edges_ft"""
        lengths = []
        for i in range(len(self.edges_ft)):
            a = self.vertices[i]
            b = self.vertices[(i + 1) % len(self.vertices)]
            lengths.append(math.hypot(b.x - a.x, b.y - a.y))
        return lengths

    def get_result(self):
        if not self.closed or len(self.vertices) < 3:
            return None
        return {
            'type': 'polygon',
            'points': list(self.vertices),
            'edges_ft': list(self.edges_ft),
        }

    def rescale(self, sx, sy):
        super().rescale(sx, sy)
        self.vertices = [_scale_point(p, sx, sy) for p in self.vertices]


class DrawingToolManager:
    """Manages drawing tools and their state"""

    def __init__(self):
        self.tools = {
            ToolType.RECTANGLE: RectangleTool(),
            ToolType.CIRCLE: CircleTool(),
            ToolType.TRIANGLE: TriangleTool(),
            ToolType.POLYGON: PolygonTool(),
        }
        self.current_tool_type = ToolType.RECTANGLE
        self.current_tool = self.tools[self.current_tool_type]

    def set_tool(self, tool_type):
        """Set the active drawing tool; all in-progress geometry is dropped"""
        tool_type = ToolType(tool_type)
        self.cancel_all()
        self.current_tool_type = tool_type
        self.current_tool = self.tools[tool_type]

    def cancel_all(self):
        for tool in self.tools.values():
            tool.cancel()

    def in_progress_count(self):
        return sum(1 for tool in self.tools.values() if tool.has_progress())

    def rescale(self, sx, sy):
        for tool in self.tools.values():
            tool.rescale(sx, sy)
