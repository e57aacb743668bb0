"""
Estimator Controller - capture state, measurement requests and the ledger

Owns everything the canvas needs to draw and everything a measurement dialog
needs to ask. Input arrives as event objects through handle_event; when a
shape is complete the controller publishes a MeasurementRequest in `pending`
and waits for resolve() or reject(). Per-shape prompt sequences are written
as generators that yield requests and receive validated values.
"""

from calculations.area_calculator import (AreaCalculator, AreaCalculationError, PolygonMethod,
                                          TriangleMethod, default_polygon_method,
                                          heron_area, trapezoid_defaults)
from calculations.geometry import polygon_area_pixels, polygon_perimeter_pixels
from drawing.blueprint_image import blueprint_for_export, decode_data_url, load_image_file, BlueprintImageError
from drawing.canvas_space import CanvasSize, clamp_to_canvas
from drawing.drawing_tools import (DrawingToolManager, ToolType, PointerDown, PointerMove, PointerUp,
                                   Click, DoubleClick, KeyDown, ModeChanged)
from drawing.measurement_requests import (RequestKind, MeasurementError, validate_values,
                                          rect_dimensions_request, circle_radius_request,
                                          triangle_method_request, triangle_base_height_request,
                                          triangle_sides_request, polygon_edge_request,
                                          polygon_method_request, rectangle_sides_request,
                                          trapezoid_request, polygon_area_request, label_request)
from drawing.scale_manager import ScaleManager
from drawing.shapes import RectShape, CircleShape, TriangleShape, PolygonShape
from models.selection_ledger import SelectionLedger, InvalidProjectStateError
from utils.debug_logger import debug_logger


MODE_HELP = {
    ToolType.RECTANGLE: "Rectangle mode: drag to select.",
    ToolType.CIRCLE: "Circle mode: drag from center to radius.",
    ToolType.TRIANGLE: "Triangle mode: click 3 corners.",
    ToolType.POLYGON: ("Custom shape mode: click each corner and enter each side's length. "
                       "Click the first point, press Enter or double-click to finish."),
}

CANCELLED_STATUS = "Cancelled. Not saved."
NEED_BLUEPRINT_STATUS = "Upload a blueprint image first."

_DRAG_MODES = (ToolType.RECTANGLE, ToolType.CIRCLE)


class EstimatorController:
    """Single owner of the estimator's interactive state"""

    def __init__(self, ledger=None, calculator=None, require_blueprint=False):
        self.ledger = ledger if ledger is not None else SelectionLedger()
        self.calculator = calculator or AreaCalculator()
        self.tool_manager = DrawingToolManager()
        self.scale = ScaleManager()
        self.canvas_size = CanvasSize(0.0, 0.0)
        self.require_blueprint = require_blueprint
        self.blueprint = None           # data URL of the loaded image

        self.pending = None             # MeasurementRequest awaiting an answer
        self.pending_shape = None       # finished shape waiting on its measurements
        self._flow = None

        self.status = MODE_HELP[self.mode]
        self._listeners = []

    # --- state -----------------------------------------------------------

    @property
    def mode(self):
        return self.tool_manager.current_tool_type

    def add_listener(self, callback):
        """callback(controller) after every visible state change"""
        self._listeners.append(callback)

    def _notify(self):
        for callback in list(self._listeners):
            callback(self)

    def _set_status(self, text):
        self.status = text
        debug_logger.debug("Controller", f"Status: {text}")

    def _tool(self, tool_type):
        return self.tool_manager.tools[tool_type]

    # --- events ----------------------------------------------------------

    def handle_event(self, event):
        if isinstance(event, ModeChanged):
            self.set_mode(event.mode)
            return
        if isinstance(event, KeyDown):
            self._on_key(event.key)
            return
        if self.pending is not None:
            # Capture input is ignored until the request is answered
            return
        if self.require_blueprint and not self.blueprint:
            if isinstance(event, (PointerDown, Click)):
                self._set_status(NEED_BLUEPRINT_STATUS)
                self._notify()
            return

        point = clamp_to_canvas((event.x, event.y), self.canvas_size)
        if isinstance(event, PointerDown):
            self._on_pointer_down(point)
        elif isinstance(event, PointerMove):
            self._on_pointer_move(point)
        elif isinstance(event, PointerUp):
            self._on_pointer_up(point)
        elif isinstance(event, Click):
            self._on_click(point)
        elif isinstance(event, DoubleClick):
            self._on_double_click()

    def set_mode(self, mode):
        mode = ToolType(mode)
        previous = self.mode
        if self._flow is not None:
            self._drop_flow()
        self.tool_manager.set_tool(mode)
        self.scale.reset()
        self._set_status(MODE_HELP[mode])
        debug_logger.log_transition("Controller", previous.value, mode.value, "mode changed")
        self._notify()

    def _on_key(self, key):
        if key == 'Escape':
            if self.pending is not None:
                self.reject()
            elif self.tool_manager.in_progress_count():
                self.tool_manager.cancel_all()
                self.scale.reset()
                self._set_status(CANCELLED_STATUS)
                self._notify()
        elif key in ('Enter', 'Return'):
            if self.pending is None and self.mode == ToolType.POLYGON:
                self._close_polygon()

    def _on_pointer_down(self, point):
        if self.mode in _DRAG_MODES:
            self.tool_manager.current_tool.start(point)
            self._set_status("Dragging... release to finish selection.")
            self._notify()

    def _on_pointer_move(self, point):
        tool = self.tool_manager.current_tool
        if tool.has_progress():
            tool.update(point)
            self._notify()

    def _on_pointer_up(self, point):
        if self.mode not in _DRAG_MODES:
            return
        tool = self.tool_manager.current_tool
        if not tool.active:
            return
        result = tool.finish(point)
        if result is None:
            if self.mode == ToolType.CIRCLE:
                self._set_status("Circle too small. Drag a bigger circle.")
            else:
                self._set_status("Selection too small. Drag a bigger rectangle.")
            self._notify()
            return

        if result['type'] == 'rect':
            a, b = result['points']
            shape = RectShape.from_pixels(a, b, self.canvas_size)
            self._start_flow(self._rect_flow(shape), shape)
        else:
            shape = CircleShape.from_pixels(result['center'], result['radius_px'], self.canvas_size)
            self._start_flow(self._circle_flow(shape), shape)

    def _on_click(self, point):
        if self.mode == ToolType.TRIANGLE:
            tool = self._tool(ToolType.TRIANGLE)
            result = tool.add_point(point)
            if result is None:
                self._set_status(f"Triangle mode: {len(tool.points)}/3 points set. Click next corner.")
                self._notify()
                return
            shape = TriangleShape.from_pixels(result['points'], self.canvas_size)
            self._start_flow(self._triangle_flow(shape), shape)
        elif self.mode == ToolType.POLYGON:
            tool = self._tool(ToolType.POLYGON)
            if tool.is_near_first(point):
                self._close_polygon()
                return
            if not tool.add_vertex(point):
                return
            count = len(tool.vertices)
            if count == 1:
                self._set_status("Custom shape: first point set. Click the next corner.")
                self._notify()
                return
            self._start_flow(self._polygon_edge_flow(count - 1))

    def _on_double_click(self):
        if self.mode == ToolType.POLYGON:
            self._close_polygon()

    def _close_polygon(self):
        tool = self._tool(ToolType.POLYGON)
        if not tool.can_close():
            return
        tool.close()
        self._start_flow(self._polygon_close_flow())

    # --- measurement requests -------------------------------------------

    def _start_flow(self, flow, shape=None):
        self._flow = flow
        self.pending_shape = shape
        self._advance(None)

    def _advance(self, value):
        try:
            request = self._flow.send(value)
        except StopIteration:
            self._flow = None
            self.pending = None
            self.pending_shape = None
        else:
            self.pending = request
        self._notify()

    def _drop_flow(self):
        flow = self._flow
        self._flow = None
        self.pending = None
        self.pending_shape = None
        if flow is not None:
            flow.close()

    def resolve(self, values):
        """Answer the pending request; returns False when it was re-issued with an error"""
        request = self.pending
        if request is None:
            return False
        try:
            parsed = validate_values(request, values)
        except MeasurementError as e:
            debug_logger.log_validation_result("Controller", request.kind.value, values, False, str(e))
            self.pending = request.with_error(str(e))
            self._notify()
            return False
        debug_logger.log_validation_result("Controller", request.kind.value, values, True)
        self._advance(parsed)
        return True

    def reject(self):
        """Cancel the pending request"""
        request = self.pending
        if request is None:
            return
        if request.kind == RequestKind.LABEL:
            # No label is still a save, under the default name
            self._advance({'label': ''})
            return

        self._drop_flow()
        polygon = self._tool(ToolType.POLYGON)
        if request.kind == RequestKind.POLYGON_EDGE:
            polygon.pop_vertex()
            self._set_status("Side not measured; last point removed.")
        elif request.kind == RequestKind.POLYGON_CLOSING_EDGE:
            polygon.reopen()
            self._set_status("Closing side not measured. Keep adding points or finish again.")
        else:
            self.tool_manager.cancel_all()
            self.scale.reset()
            self._set_status(CANCELLED_STATUS)
        debug_logger.log_transition("Controller", request.kind.value, "idle", "request cancelled")
        self._notify()

    # Prompt sequences. Each yields MeasurementRequests and receives the
    # validated values for the request it yielded.

    def _rect_flow(self, shape):
        values = yield rect_dimensions_request()
        measurement = {'width_ft': values['width_ft'], 'height_ft': values['height_ft']}
        yield from self._finish_flow(shape, measurement)

    def _circle_flow(self, shape):
        values = yield circle_radius_request()
        yield from self._finish_flow(shape, {'radius_ft': values['radius_ft']})

    def _triangle_flow(self, shape):
        choice = yield triangle_method_request()
        if choice['method'] == TriangleMethod.THREE_SIDES.value:
            request = triangle_sides_request()
            while True:
                values = yield request
                sides = [values['side_a_ft'], values['side_b_ft'], values['side_c_ft']]
                try:
                    heron_area(*sides)
                    break
                except AreaCalculationError as e:
                    request = request.with_error(str(e))
            measurement = {'method': TriangleMethod.THREE_SIDES.value, 'sides_ft': sides}
        else:
            values = yield triangle_base_height_request()
            measurement = {
                'method': TriangleMethod.BASE_HEIGHT.value,
                'base_ft': values['base_ft'],
                'height_ft': values['height_ft'],
            }
        yield from self._finish_flow(shape, measurement)

    def _polygon_edge_flow(self, edge_number):
        values = yield polygon_edge_request(edge_number)
        tool = self._tool(ToolType.POLYGON)
        tool.record_edge(values['length_ft'])
        self._recalibrate()
        count = len(tool.vertices)
        status = f"Custom shape: {count} points set. Click the next corner"
        if count >= 3:
            status += ", or click the first point / press Enter to finish"
        self._set_status(status + ".")

    def _polygon_close_flow(self):
        tool = self._tool(ToolType.POLYGON)
        values = yield polygon_edge_request(len(tool.vertices), closing=True)
        tool.record_edge(values['length_ft'])

        result = tool.get_result()
        pixel_points = result['points']
        edges = result['edges_ft']
        shape = PolygonShape.from_pixels(pixel_points, self.canvas_size)
        self.pending_shape = shape
        measurement = {'edges_ft': edges}

        method = default_polygon_method(len(edges))
        if method is None:
            choice = yield polygon_method_request(edges)
            method = PolygonMethod(choice['method'])
            if method == PolygonMethod.RECTANGLE:
                pick = yield rectangle_sides_request(edges)
                i, j = (int(k) - 1 for k in pick['sides'].split('-'))
                measurement.update({'sides': pick['sides'], 'side_a_ft': edges[i], 'side_b_ft': edges[j]})
            elif method == PolygonMethod.TRAPEZOID:
                measurement.update((yield trapezoid_request(trapezoid_defaults(edges))))
            else:
                measurement.update((yield polygon_area_request()))
        elif method == PolygonMethod.SHOELACE:
            # Drawn shape is the only source of proportions past four sides
            measurement['pixel_area'] = polygon_area_pixels(pixel_points)
            measurement['pixel_perimeter'] = polygon_perimeter_pixels(pixel_points)
        measurement['method'] = method.value
        yield from self._finish_flow(shape, measurement)

    def _finish_flow(self, shape, measurement):
        try:
            area = self.calculator.compute(shape.shape_type, measurement)
        except AreaCalculationError as e:
            debug_logger.warning("Controller", "Area calculation failed", {'error': str(e)})
            self.tool_manager.cancel_all()
            self.scale.reset()
            self._set_status(f"{e}. Not saved.")
            return

        default_label = self.ledger.default_label()
        values = yield label_request(default_label)
        label = (values.get('label') or "").strip() or default_label
        details = self.calculator.describe(shape.shape_type, measurement)
        selection = self.ledger.append(shape, measurement, area, label=label, details=details)
        self.tool_manager.cancel_all()
        self.scale.reset()
        self._set_status(f'Saved "{selection.label}" ({area:.2f} sq ft).')

    # --- scale hint ------------------------------------------------------

    def _recalibrate(self):
        tool = self._tool(ToolType.POLYGON)
        if not tool.edges_ft or not self.scale.calibrate_from_edges(tool.edges_ft, tool.pixel_edge_lengths()):
            self.scale.reset()

    def edge_hint(self):
        """Approximate length of the side being drawn, once earlier sides give a scale"""
        tool = self._tool(ToolType.POLYGON)
        if (self.mode != ToolType.POLYGON or self.pending is not None or not tool.vertices
                or tool.current_point is None or not self.scale.is_calibrated):
            return None
        last = tool.vertices[-1]
        length = self.scale.calculate_distance(last.x, last.y, tool.current_point.x, tool.current_point.y)
        if length <= 0:
            return None
        return f"≈ {self.scale.format_distance(length)}"

    # --- canvas ----------------------------------------------------------

    def set_canvas_size(self, width, height):
        new_size = CanvasSize(float(width), float(height))
        old_size = self.canvas_size
        if not old_size.is_empty and not new_size.is_empty and new_size != old_size:
            self.tool_manager.rescale(new_size.width / old_size.width, new_size.height / old_size.height)
            self._recalibrate()
        self.canvas_size = new_size
        self._notify()

    # --- ledger commands -------------------------------------------------

    def undo(self):
        selection = self.ledger.undo()
        if selection is None:
            self._set_status("Nothing to undo.")
        else:
            self._set_status(f'Removed "{selection.label}".')
        self._notify()
        return selection

    def remove_selection(self, selection_id):
        selection = self.ledger.remove_by_id(selection_id)
        if selection is not None:
            self._set_status(f'Removed "{selection.label}".')
            self._notify()
        return selection

    def clear(self):
        self._drop_flow()
        self.tool_manager.cancel_all()
        self.scale.reset()
        self.ledger.clear()
        self._set_status("Cleared all selections.")
        self._notify()

    def snapshot(self):
        return self.ledger.snapshot()

    # --- blueprint and projects ------------------------------------------

    def load_blueprint(self, data_url):
        """Show a new image; selections drawn over the previous one are discarded"""
        decode_data_url(data_url)
        self._drop_flow()
        self.tool_manager.cancel_all()
        self.scale.reset()
        self.blueprint = data_url
        self.ledger.clear()
        self._set_status("Blueprint loaded. " + MODE_HELP[self.mode])
        self._notify()

    def load_blueprint_file(self, path):
        self.load_blueprint(load_image_file(path))

    def export_state(self):
        """Project file for the current estimate, plus a warning if the image was left out"""
        blueprint, warning = blueprint_for_export(self.blueprint)
        return self.ledger.export_state(self.mode.value, blueprint), warning

    def import_state(self, state):
        """Replace the estimate with a saved project

        Raises InvalidProjectStateError without changing anything when the
        project cannot be read. A project saved without its image keeps the
        image currently shown.
        """
        if not isinstance(state, dict):
            raise InvalidProjectStateError("Project data is not an object")
        blueprint = None
        raw_blueprint = state.get('blueprint')
        if isinstance(raw_blueprint, dict) and raw_blueprint.get('dataUrl'):
            blueprint = raw_blueprint['dataUrl']
            try:
                decode_data_url(blueprint)
            except BlueprintImageError as e:
                raise InvalidProjectStateError(str(e))
        try:
            mode = ToolType(state.get('mode') or ToolType.RECTANGLE.value)
        except ValueError:
            mode = ToolType.RECTANGLE

        self.ledger.import_state(state)

        self._drop_flow()
        self.tool_manager.set_tool(mode)
        self.scale.reset()
        if blueprint:
            self.blueprint = blueprint
        self._set_status(f"Project loaded: {self.ledger.count} areas, {self.ledger.total():.2f} sq ft.")
        self._notify()
