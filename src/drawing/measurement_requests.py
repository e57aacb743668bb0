"""
Measurement requests - what the capture state machine needs from the user

A request describes the fields to ask for (units, defaults, choices); the UI,
a CLI or a test answers it with a dict of raw values. Validation turns the raw
values into floats in feet, or raises MeasurementError so the same request
can be shown again with the error attached.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from calculations.area_calculator import adjacent_edge_pairs
from drawing.scale_manager import parse_length, parse_area, LengthParseError


class MeasurementError(ValueError):
    """Raised when a submitted value is missing, non-numeric or not positive"""


class RequestKind(Enum):
    RECT_DIMENSIONS = "rect_dimensions"
    CIRCLE_RADIUS = "circle_radius"
    TRIANGLE_METHOD = "triangle_method"
    TRIANGLE_BASE_HEIGHT = "triangle_base_height"
    TRIANGLE_SIDES = "triangle_sides"
    POLYGON_EDGE = "polygon_edge"
    POLYGON_CLOSING_EDGE = "polygon_closing_edge"
    POLYGON_METHOD = "polygon_method"
    RECTANGLE_SIDES = "rectangle_sides"
    TRAPEZOID_DIMENSIONS = "trapezoid_dimensions"
    POLYGON_AREA = "polygon_area"
    LABEL = "label"


class FieldKind(Enum):
    LENGTH = "length"     # feet, feet+inches accepted
    AREA = "area"         # square feet
    CHOICE = "choice"     # one of the request's choices
    TEXT = "text"         # free text, may be empty


@dataclass(frozen=True)
class MeasurementField:
    name: str
    prompt: str
    kind: FieldKind = FieldKind.LENGTH
    units: str = "ft"
    default: Any = None


@dataclass(frozen=True)
class MeasurementRequest:
    kind: RequestKind
    title: str
    fields: Tuple[MeasurementField, ...]
    choices: Tuple[Tuple[str, str], ...] = ()   # (value, display text)
    error: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict, compare=False)

    def with_error(self, message: str) -> "MeasurementRequest":
        return replace(self, error=message)

    def defaults(self) -> Dict[str, Any]:
        """Raw values a user who accepts every default would submit"""
        return {f.name: f.default for f in self.fields}


def validate_values(request: MeasurementRequest, raw_values: Dict[str, Any]) -> Dict[str, Any]:
    """Convert raw answers into typed values.

    Missing fields fall back to nothing (not the default): the UI prefills
    defaults, so an absent value means the user cleared it.
    """
    raw_values = raw_values or {}
    values = {}
    for f in request.fields:
        raw = raw_values.get(f.name)
        if f.kind == FieldKind.TEXT:
            values[f.name] = str(raw).strip() if raw is not None else ""
            continue
        if f.kind == FieldKind.CHOICE:
            allowed = [value for value, _ in request.choices]
            choice = str(raw).strip().lower() if raw is not None else ""
            if choice not in allowed:
                raise MeasurementError(f"{f.prompt}: choose one of {', '.join(allowed)}")
            values[f.name] = choice
            continue
        try:
            if f.kind == FieldKind.AREA:
                values[f.name] = parse_area(raw)
            else:
                values[f.name] = parse_length(raw)
        except LengthParseError as e:
            raise MeasurementError(f"{f.prompt}: {e}")
    return values


def length_field(name, prompt, default=None):
    return MeasurementField(name=name, prompt=prompt, kind=FieldKind.LENGTH, units="ft", default=default)


def rect_dimensions_request():
    return MeasurementRequest(
        kind=RequestKind.RECT_DIMENSIONS,
        title="Rectangle size",
        fields=(
            length_field('width_ft', "Real width (feet)", "10"),
            length_field('height_ft', "Real height (feet)", "12"),
        ),
    )


def circle_radius_request():
    return MeasurementRequest(
        kind=RequestKind.CIRCLE_RADIUS,
        title="Circle size",
        fields=(length_field('radius_ft', "Real radius (feet)", "6"),),
    )


def triangle_method_request():
    return MeasurementRequest(
        kind=RequestKind.TRIANGLE_METHOD,
        title="Triangle measurements",
        fields=(MeasurementField('method', "Measure by", FieldKind.CHOICE, units="", default="base_height"),),
        choices=(
            ("base_height", "Base and height"),
            ("three_sides", "Three side lengths"),
        ),
    )


def triangle_base_height_request():
    return MeasurementRequest(
        kind=RequestKind.TRIANGLE_BASE_HEIGHT,
        title="Triangle size",
        fields=(
            length_field('base_ft', "Real base (feet)", "10"),
            length_field('height_ft', "Real height (feet)", "8"),
        ),
    )


def triangle_sides_request():
    return MeasurementRequest(
        kind=RequestKind.TRIANGLE_SIDES,
        title="Triangle sides",
        fields=(
            length_field('side_a_ft', "Side A (feet)"),
            length_field('side_b_ft', "Side B (feet)"),
            length_field('side_c_ft', "Side C (feet)"),
        ),
    )


def polygon_edge_request(edge_number, closing=False):
    kind = RequestKind.POLYGON_CLOSING_EDGE if closing else RequestKind.POLYGON_EDGE
    prompt = (f"Closing side {edge_number} back to the first point (feet)" if closing
              else f"Real length of side {edge_number} (feet)")
    return MeasurementRequest(
        kind=kind,
        title="Closing side" if closing else f"Side {edge_number}",
        fields=(length_field('length_ft', prompt),),
        context={'edge_number': edge_number},
    )


def polygon_method_request(edges_ft):
    edges = ", ".join(f"{e:g}" for e in edges_ft)
    return MeasurementRequest(
        kind=RequestKind.POLYGON_METHOD,
        title="4-sided shape",
        fields=(MeasurementField('method', f"Sides: {edges} ft. Treat this shape as",
                                 FieldKind.CHOICE, units="", default="rectangle"),),
        choices=(
            ("rectangle", "Rectangle / square (two adjacent sides)"),
            ("trapezoid", "Trapezoid (two bases and a height)"),
            ("irregular", "Irregular (enter total area)"),
        ),
    )


def rectangle_sides_request(edges_ft):
    pairs = []
    for i, j in adjacent_edge_pairs(len(edges_ft)):
        pairs.append((f"{i + 1}-{j + 1}",
                      f"Sides {i + 1} and {j + 1} ({edges_ft[i]:g} × {edges_ft[j]:g} ft)"))
    return MeasurementRequest(
        kind=RequestKind.RECTANGLE_SIDES,
        title="Rectangle sides",
        fields=(MeasurementField('sides', "Multiply adjacent sides", FieldKind.CHOICE,
                                 units="", default=pairs[0][0]),),
        choices=tuple(pairs),
    )


def trapezoid_request(defaults):
    return MeasurementRequest(
        kind=RequestKind.TRAPEZOID_DIMENSIONS,
        title="Trapezoid",
        fields=(
            length_field('top_base_ft', "Top base (feet)", f"{defaults['top_base_ft']:g}"),
            length_field('bottom_base_ft', "Bottom base (feet)", f"{defaults['bottom_base_ft']:g}"),
            length_field('height_ft', "Perpendicular height (feet)", f"{defaults['height_ft']:g}"),
        ),
    )


def polygon_area_request():
    return MeasurementRequest(
        kind=RequestKind.POLYGON_AREA,
        title="Total area",
        fields=(MeasurementField('area_sq_ft', "Total area (sq ft)", FieldKind.AREA, units="sq ft"),),
    )


def label_request(default_label):
    return MeasurementRequest(
        kind=RequestKind.LABEL,
        title="Area label",
        fields=(MeasurementField('label', "Area label (e.g., Kitchen, Living Room)",
                                 FieldKind.TEXT, units="", default=default_label),),
        context={'default_label': default_label},
    )
