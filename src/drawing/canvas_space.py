"""
Canvas Space - pixel <-> unit coordinate conversion

Saved shapes live in unit space: each axis is a fraction of the canvas size
at the time of capture. Radii are fractions of min(width, height) so a
resize that changes the aspect ratio keeps circles round.
"""

from typing import NamedTuple


class Point(NamedTuple):
    x: float
    y: float


class CanvasSize(NamedTuple):
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def min_side(self) -> float:
        return min(self.width, self.height)


class FitRect(NamedTuple):
    x: float
    y: float
    width: float
    height: float


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def to_unit(pixel_point, canvas_size: CanvasSize) -> Point:
    """Pixel -> unit, clamped to [0, 1] on both axes"""
    if canvas_size.is_empty:
        return Point(0.0, 0.0)
    return Point(
        _clamp01(pixel_point[0] / canvas_size.width),
        _clamp01(pixel_point[1] / canvas_size.height),
    )


def to_pixel(unit_point, canvas_size: CanvasSize) -> Point:
    """Unit -> pixel. Not clamped; painting clips anything off-canvas."""
    return Point(unit_point[0] * canvas_size.width, unit_point[1] * canvas_size.height)


def radius_to_unit(radius_px: float, canvas_size: CanvasSize) -> float:
    if canvas_size.is_empty:
        return 0.0
    return radius_px / canvas_size.min_side


def radius_to_pixel(radius_unit: float, canvas_size: CanvasSize) -> float:
    return radius_unit * canvas_size.min_side


def clamp_to_canvas(pixel_point, canvas_size: CanvasSize) -> Point:
    """Keep a pointer position inside the canvas rectangle"""
    return Point(
        max(0.0, min(float(canvas_size.width), float(pixel_point[0]))),
        max(0.0, min(float(canvas_size.height), float(pixel_point[1]))),
    )


def fit_rect(image_width: float, image_height: float, box_width: float, box_height: float) -> FitRect:
    """Largest rectangle with the image's aspect ratio centred inside the box"""
    if image_width <= 0 or image_height <= 0 or box_width <= 0 or box_height <= 0:
        return FitRect(0.0, 0.0, 0.0, 0.0)
    image_ratio = image_width / image_height
    box_ratio = box_width / box_height
    if image_ratio > box_ratio:
        width = box_width
        height = width / image_ratio
    else:
        height = box_height
        width = height * image_ratio
    return FitRect((box_width - width) / 2, (box_height - height) / 2, width, height)
