"""
Geometry utilities for drawing tools

Provides polygon area and perimeter calculations in pixel space and the
edge-ratio scale estimate used to turn a drawn polygon into square feet.
"""

from typing import List, Sequence, Tuple

import numpy as np


def _as_array(points: Sequence[Sequence[float]]) -> np.ndarray:
	return np.asarray([(float(p[0]), float(p[1])) for p in points], dtype=float).reshape(-1, 2)


def polygon_area_pixels(points: Sequence[Sequence[float]]) -> float:
	"""Compute the area in pixel^2 using the shoelace formula.
	Returns absolute area.
	"""
	if len(points) < 3:
		return 0.0
	pts = _as_array(points)
	x, y = pts[:, 0], pts[:, 1]
	area2 = np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)
	return float(abs(area2) / 2.0)


def edge_lengths_pixels(points: Sequence[Sequence[float]], closed: bool = True) -> List[float]:
	"""Length of each edge; edge i runs from point i to point i+1.

	With closed=True the last edge returns to the first point.
	"""
	if len(points) < 2:
		return []
	pts = _as_array(points)
	nxt = np.roll(pts, -1, axis=0)
	lengths = np.hypot(nxt[:, 0] - pts[:, 0], nxt[:, 1] - pts[:, 1])
	if not closed:
		lengths = lengths[:-1]
	return [float(v) for v in lengths]


def polygon_perimeter_pixels(points: Sequence[Sequence[float]]) -> float:
	"""Compute polygon perimeter length in pixels."""
	return float(sum(edge_lengths_pixels(points, closed=True)))


def estimate_feet_per_pixel(real_lengths_ft: Sequence[float], pixel_lengths: Sequence[float]) -> float:
	"""Uniform scale estimate: total real length over total drawn length.

	Returns 0.0 when nothing has been drawn.
	"""
	pixel_total = float(sum(pixel_lengths))
	if pixel_total <= 0:
		return 0.0
	return float(sum(real_lengths_ft)) / pixel_total


def polygon_centroid(points: Sequence[Sequence[float]]) -> Tuple[float, float]:
	"""Vertex average, good enough for placing a label."""
	if not points:
		return 0.0, 0.0
	pts = _as_array(points)
	cx, cy = pts.mean(axis=0)
	return float(cx), float(cy)
