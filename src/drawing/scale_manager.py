"""
Scale Manager - Length parsing, unit formatting and the drawn-edge scale estimate
"""

import math
import re

from calculations.geometry import estimate_feet_per_pixel


class LengthParseError(ValueError):
    """Raised when a typed length cannot be read as a positive number of feet"""


_FEET_INCHES = re.compile(
    r"""^\s*
        (?:(?P<feet>\d+(?:\.\d+)?)\s*(?:'|ft\.?|feet|foot))?
        \s*
        (?:(?P<inches>\d+(?:\.\d+)?(?:\s+\d+/\d+)?|\d+/\d+)\s*(?:"|in\.?|inch|inches))?
        \s*$""",
    re.VERBOSE | re.IGNORECASE,
)


def _parse_inches(inches_str):
    """Parse '6', '6.5', '1/2' or '6 1/2' as inches"""
    inches_str = inches_str.strip()
    total = 0.0
    if ' ' in inches_str:
        whole_part, inches_str = inches_str.split(' ', 1)
        total += float(whole_part)
    if '/' in inches_str:
        numerator, denominator = inches_str.split('/')
        total += float(numerator) / float(denominator)
    else:
        total += float(inches_str)
    return total


def parse_length(raw):
    """Read a length typed by the user and return decimal feet.

    Accepts plain numbers (feet), 12', 12 ft, 12' 6", 12'6, 6in, 6 1/2".
    Raises LengthParseError for anything non-numeric, zero or negative.
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        value = float(raw)
    else:
        text = str(raw if raw is not None else "").strip()
        if not text:
            raise LengthParseError("Enter a length")
        try:
            value = float(text)
        except ValueError:
            value = _parse_feet_inches(text)

    if not math.isfinite(value) or value <= 0:
        raise LengthParseError("Length must be greater than zero")
    return value


def _parse_feet_inches(text):
    # 12'6 is shorthand for 12' 6"
    match = re.match(r"^\s*(\d+(?:\.\d+)?)\s*'\s*(\d+(?:\.\d+)?)\s*$", text)
    if match:
        return float(match.group(1)) + float(match.group(2)) / 12.0

    match = _FEET_INCHES.match(text)
    if not match or (match.group('feet') is None and match.group('inches') is None):
        raise LengthParseError(f"'{text}' is not a length")
    feet = float(match.group('feet')) if match.group('feet') else 0.0
    try:
        inches = _parse_inches(match.group('inches')) if match.group('inches') else 0.0
    except (ValueError, ZeroDivisionError):
        raise LengthParseError(f"'{text}' is not a length")
    return feet + inches / 12.0


def parse_area(raw):
    """Read a typed area in square feet"""
    try:
        value = float(str(raw).strip().lower().replace('sq ft', '').replace('sf', '').strip())
    except ValueError:
        raise LengthParseError(f"'{raw}' is not an area")
    if not math.isfinite(value) or value <= 0:
        raise LengthParseError("Area must be greater than zero")
    return value


class ScaleManager:
    """Tracks an approximate feet-per-pixel scale from measured polygon edges

    Used for on-canvas hints while a custom shape is being drawn; saved areas
    never depend on it.
    """

    def __init__(self):
        self.feet_per_pixel = 0.0
        self.units = "feet"

    @property
    def is_calibrated(self):
        return self.feet_per_pixel > 0

    def calibrate_from_edges(self, real_lengths_ft, pixel_lengths):
        """Set scale from measured edges; returns False when nothing usable was drawn"""
        scale = estimate_feet_per_pixel(real_lengths_ft, pixel_lengths)
        if scale > 0:
            self.feet_per_pixel = scale
            return True
        return False

    def reset(self):
        self.feet_per_pixel = 0.0

    def pixels_to_real(self, pixels):
        """Convert pixels to feet"""
        return pixels * self.feet_per_pixel

    def calculate_distance(self, x1, y1, x2, y2):
        """Calculate real-world distance between two pixel points"""
        return self.pixels_to_real(math.hypot(x2 - x1, y2 - y1))

    @staticmethod
    def format_distance(distance):
        """Format a length in feet, switching to inches under one foot"""
        if distance >= 1:
            return f"{distance:.2f} ft"
        return f"{distance * 12:.1f} in"

    @staticmethod
    def format_area(area):
        """Areas are displayed at two decimals, stored at full precision"""
        return f"{area:.2f} sq ft"
