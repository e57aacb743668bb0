"""
Render pass - what to paint, as plain primitives in canvas pixels

The plan is rebuilt on every repaint from the ledger, the live tool state and
the canvas size. Nothing here touches Qt; BlueprintCanvas turns the items
into QPainter calls.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from calculations.geometry import polygon_centroid
from drawing.canvas_space import Point, CanvasSize
from drawing.drawing_tools import ToolType
from drawing.shapes import RectShape, CircleShape


COMMITTED = 'committed'   # saved areas, solid green
PREVIEW = 'preview'       # shape being drawn or measured, dashed blue
PIN = 'pin'               # placed corners
HINT = 'hint'             # approximate length next to the cursor

LABEL_OFFSET = (6, 16)


@dataclass
class RenderItem:
    kind: str                                  # rect, circle, polygon, polyline, pin, text
    points: List[Point] = field(default_factory=list)
    radius: float = 0.0
    text: Optional[str] = None
    style: str = COMMITTED
    closed: bool = True


def _label_anchor(shape, canvas_size):
    if isinstance(shape, RectShape):
        a, b = shape.pixel_points(canvas_size)
        anchor = Point(min(a.x, b.x), min(a.y, b.y))
    elif isinstance(shape, CircleShape):
        anchor = shape.pixel_points(canvas_size)[0]
    else:
        # Triangles and custom shapes are labelled near their middle
        anchor = Point(*polygon_centroid(shape.pixel_points(canvas_size)))
    return Point(anchor.x + LABEL_OFFSET[0], anchor.y + LABEL_OFFSET[1])


def shape_items(shape, canvas_size, style):
    """Outline primitives for a saved or pending shape"""
    if isinstance(shape, RectShape):
        return [RenderItem('rect', shape.pixel_points(canvas_size), style=style)]
    if isinstance(shape, CircleShape):
        items = [RenderItem('circle', shape.pixel_points(canvas_size),
                            radius=shape.pixel_radius(canvas_size), style=style)]
        if style == PREVIEW:
            items.append(RenderItem('pin', shape.pixel_points(canvas_size), radius=3, style=PIN))
        return items
    return [RenderItem('polygon', shape.pixel_points(canvas_size), style=style)]


def _tool_items(controller):
    manager = controller.tool_manager
    tool = manager.current_tool
    mode = manager.current_tool_type
    items = []

    if mode == ToolType.RECTANGLE and tool.active:
        items.append(RenderItem('rect', [tool.start_point, tool.current_point], style=PREVIEW))

    elif mode == ToolType.CIRCLE and tool.active:
        items.append(RenderItem('circle', [tool.start_point], radius=tool.radius, style=PREVIEW))
        items.append(RenderItem('pin', [tool.start_point], radius=3, style=PIN))

    elif mode == ToolType.TRIANGLE and tool.points:
        if len(tool.points) >= 2:
            items.append(RenderItem('polyline', list(tool.points), style=PREVIEW, closed=False))
        items.extend(RenderItem('pin', [p], radius=4, style=PIN) for p in tool.points)

    elif mode == ToolType.POLYGON and tool.vertices:
        vertices = list(tool.vertices)
        if len(vertices) >= 2:
            items.append(RenderItem('polyline', vertices, style=PREVIEW, closed=tool.closed))
        # Rubber band from the last pin to the cursor
        if not tool.closed and controller.pending is None and tool.current_point is not None \
                and tool.current_point != vertices[-1]:
            items.append(RenderItem('polyline', [vertices[-1], tool.current_point],
                                    style=PREVIEW, closed=False))
            hint = controller.edge_hint()
            if hint:
                items.append(RenderItem('text', [Point(tool.current_point.x + 10, tool.current_point.y - 10)],
                                        text=hint, style=HINT))
        # Measured side lengths at each side's midpoint
        for i, length in enumerate(tool.edges_ft):
            a = vertices[i]
            b = vertices[(i + 1) % len(vertices)]
            items.append(RenderItem('text', [Point((a.x + b.x) / 2, (a.y + b.y) / 2)],
                                    text=f"{length:g} ft", style=PREVIEW))
        items.extend(RenderItem('pin', [p], radius=4, style=PIN) for p in vertices)

    return items


def build_render_plan(controller, canvas_size=None) -> List[RenderItem]:
    """Primitives for one frame, committed shapes first"""
    canvas_size = CanvasSize(*canvas_size) if canvas_size is not None else controller.canvas_size
    if canvas_size.is_empty:
        return []

    plan = []
    for selection in controller.ledger.selections:
        plan.extend(shape_items(selection.shape, canvas_size, COMMITTED))
        plan.append(RenderItem('text', [_label_anchor(selection.shape, canvas_size)],
                               text=selection.label, style=COMMITTED))

    if controller.pending_shape is not None:
        plan.extend(shape_items(controller.pending_shape, canvas_size, PREVIEW))
    else:
        plan.extend(_tool_items(controller))
    return plan
