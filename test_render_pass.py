#!/usr/bin/env python3
"""
Render plan built from the controller: committed shapes, previews and pins
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from drawing.drawing_tools import ToolType, PointerDown, PointerMove, PointerUp, Click
from drawing.estimator_controller import EstimatorController
from drawing.render_pass import build_render_plan, COMMITTED, PREVIEW, PIN, HINT


@pytest.fixture
def controller():
    controller = EstimatorController()
    controller.set_canvas_size(400, 200)
    return controller


def kinds(plan):
    return [(item.kind, item.style) for item in plan]


def save_rect(controller):
    controller.handle_event(PointerDown(40, 20))
    controller.handle_event(PointerUp(200, 120))
    controller.resolve({'width_ft': "10", 'height_ft': "12"})
    controller.resolve({'label': "Kitchen"})


def test_empty_canvas_has_no_plan():
    assert build_render_plan(EstimatorController()) == []


def test_committed_rect_with_label(controller):
    save_rect(controller)
    plan = build_render_plan(controller)
    assert kinds(plan) == [('rect', COMMITTED), ('text', COMMITTED)]
    assert plan[1].text == "Kitchen"
    assert (plan[1].points[0].x, plan[1].points[0].y) == pytest.approx((46, 36))


def test_committed_shapes_follow_canvas_size(controller):
    save_rect(controller)
    a, b = build_render_plan(controller, (800, 400))[0].points
    assert (a.x, a.y, b.x, b.y) == pytest.approx((80, 40, 400, 240))


def test_pending_shape_drawn_as_preview(controller):
    controller.handle_event(PointerDown(40, 20))
    controller.handle_event(PointerUp(200, 120))
    assert kinds(build_render_plan(controller)) == [('rect', PREVIEW)]


def test_triangle_label_near_middle(controller):
    controller.set_mode(ToolType.TRIANGLE)
    for point in [(10, 10), (100, 10), (55, 100)]:
        controller.handle_event(Click(*point))
    controller.resolve({'method': "base_height"})
    controller.resolve({'base_ft': "10", 'height_ft': "8"})
    controller.resolve({'label': "Nook"})

    plan = build_render_plan(controller)
    assert kinds(plan) == [('polygon', COMMITTED), ('text', COMMITTED)]
    assert (plan[1].points[0].x, plan[1].points[0].y) == pytest.approx((61, 56))


def test_circle_drag_preview(controller):
    controller.set_mode(ToolType.CIRCLE)
    controller.handle_event(PointerDown(100, 100))
    controller.handle_event(PointerMove(130, 140))
    plan = build_render_plan(controller)
    assert kinds(plan) == [('circle', PREVIEW), ('pin', PIN)]
    assert plan[0].radius == pytest.approx(50)


def test_triangle_pins(controller):
    controller.set_mode(ToolType.TRIANGLE)
    controller.handle_event(Click(10, 10))
    controller.handle_event(Click(100, 10))
    assert kinds(build_render_plan(controller)) == [('polyline', PREVIEW), ('pin', PIN), ('pin', PIN)]


def test_custom_shape_sides_and_hint(controller):
    controller.set_mode(ToolType.POLYGON)
    controller.handle_event(Click(100, 100))
    controller.handle_event(Click(200, 100))
    controller.resolve({'length_ft': "10"})

    plan = build_render_plan(controller)
    assert kinds(plan) == [('polyline', PREVIEW), ('text', PREVIEW), ('pin', PIN), ('pin', PIN)]
    assert plan[1].text == "10 ft"
    assert (plan[1].points[0].x, plan[1].points[0].y) == pytest.approx((150, 100))

    controller.handle_event(PointerMove(200, 150))
    plan = build_render_plan(controller)
    hints = [item for item in plan if item.style == HINT]
    assert [item.text for item in hints] == ["≈ 5.00 ft"]
    assert ('polyline', PREVIEW) in kinds(plan)


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
