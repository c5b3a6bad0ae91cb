"""
Measurement engine — normalises user-entered dimensions to feet and square
feet, and validates heights against product bounds.

Bad input never raises: anything non-numeric, zero or negative resolves to 0,
which callers treat as the idle "enter valid dimensions" state.
"""
import math
import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger("quote-engine.measurement")


class LengthUnit(str, Enum):
    MM = "mm"
    CM = "cm"
    INCH = "inch"
    FT = "ft"
    M = "m"
    FT_IN = "ft-in"


# Divisors to feet; metres are the one multiplier
_FEET_DIVISORS = {
    LengthUnit.MM: 304.8,
    LengthUnit.CM: 30.48,
    LengthUnit.INCH: 12.0,
    LengthUnit.FT: 1.0,
}
_METRE_TO_FEET: float = 3.28084

_UNIT_ALIASES = {
    "mm": LengthUnit.MM, "millimeter": LengthUnit.MM, "millimetre": LengthUnit.MM,
    "cm": LengthUnit.CM, "centimeter": LengthUnit.CM, "centimetre": LengthUnit.CM,
    "inch": LengthUnit.INCH, "inches": LengthUnit.INCH, "in": LengthUnit.INCH,
    "ft": LengthUnit.FT, "feet": LengthUnit.FT, "foot": LengthUnit.FT,
    "m": LengthUnit.M, "meter": LengthUnit.M, "metre": LengthUnit.M,
    "ft-in": LengthUnit.FT_IN, "feet-inches": LengthUnit.FT_IN, "ftin": LengthUnit.FT_IN,
}

_FEET_INCHES_RE = re.compile(r"(\d+)[\s'′]*(\d+)?")
_PLAIN_DECIMAL_RE = re.compile(r"(\d*\.\d+)\s*(?:'|′|ft|feet)?", re.IGNORECASE)
_LEADING_NUMBER_RE = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def parse_unit(unit: Any) -> LengthUnit:
    """Map a unit string to LengthUnit; unknown units are read as feet."""
    if isinstance(unit, LengthUnit):
        return unit
    key = str(unit or "").strip().lower()
    resolved = _UNIT_ALIASES.get(key)
    if resolved is None:
        logger.debug(f"Unknown length unit {unit!r}; treating as feet")
        return LengthUnit.FT
    return resolved


def _parse_number(value: Any) -> float:
    """Leading-number parse: '12', '12.5mm' and 12 give a number; '' and 'abc' give 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER_RE.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(1))
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def parse_feet_inches(value: Any) -> float:
    """
    Parse a compound feet-and-inches entry into decimal feet.

    ``6'8``, ``6 8`` and ``6' 8"`` all give 6 + 8/12. A plain decimal such as
    ``6.5`` or ``6.5'`` is read as decimal feet. Anything without digits gives 0.
    """
    if value is None:
        return 0.0
    text = str(value).strip()
    if not text or text.startswith("-"):
        return 0.0
    decimal = _PLAIN_DECIMAL_RE.fullmatch(text)
    if decimal:
        return float(decimal.group(1))

    match = _FEET_INCHES_RE.search(text)
    if match:
        feet = float(match.group(1))
        inches = float(match.group(2)) if match.group(2) else 0.0
        return feet + inches / 12.0
    return _parse_number(text)


def to_linear_units(value: Any, unit: Any = LengthUnit.FT) -> float:
    """Convert one entered length to feet. Invalid or non-positive input gives 0."""
    unit = parse_unit(unit)
    if unit == LengthUnit.FT_IN:
        feet = parse_feet_inches(value)
    else:
        number = _parse_number(value)
        if unit == LengthUnit.M:
            feet = number * _METRE_TO_FEET
        else:
            feet = number / _FEET_DIVISORS[unit]
    if not math.isfinite(feet) or feet <= 0:
        return 0.0
    return feet


def to_area_square_units(width: Any, height: Any, unit: Any = LengthUnit.FT) -> float:
    """Width × height in square feet, or 0 when either side is not a positive length."""
    width_ft = to_linear_units(width, unit)
    height_ft = to_linear_units(height, unit)
    if width_ft <= 0 or height_ft <= 0:
        return 0.0
    return width_ft * height_ft


def l_corner_width(left: Any, right: Any, unit: Any = LengthUnit.FT) -> float:
    """Total run of an L-corner enclosure: both walls converted independently, then summed."""
    return to_linear_units(left, unit) + to_linear_units(right, unit)


def parse_quantity(value: Any) -> int:
    """Whole units ordered; anything unusable means 1."""
    number = _parse_number(value)
    return max(1, int(number) or 1)


# ---------------------------------------------------------------------------
# Measurement records
# ---------------------------------------------------------------------------

@dataclass
class Measurement:
    """Dimensions as the customer typed them."""
    width: Any = None
    height: Any = None
    unit: Any = LengthUnit.FT
    quantity: Any = 1
    right_width: Any = None      # second wall for L-corner showers


@dataclass
class ResolvedSize:
    width_ft: float = 0.0
    height_ft: float = 0.0
    right_width_ft: float = 0.0
    quantity: int = 1

    @property
    def total_width_ft(self) -> float:
        return self.width_ft + self.right_width_ft

    @property
    def area(self) -> float:
        if self.total_width_ft <= 0 or self.height_ft <= 0:
            return 0.0
        return self.total_width_ft * self.height_ft


def resolve_measurement(measurement: Measurement) -> ResolvedSize:
    return ResolvedSize(
        width_ft=to_linear_units(measurement.width, measurement.unit),
        height_ft=to_linear_units(measurement.height, measurement.unit),
        right_width_ft=to_linear_units(measurement.right_width, measurement.unit),
        quantity=parse_quantity(measurement.quantity),
    )


# ---------------------------------------------------------------------------
# Height validation
# ---------------------------------------------------------------------------

class HeightStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    BLOCKED = "blocked"


@dataclass
class HeightCheck:
    status: HeightStatus = HeightStatus.OK
    message: str = ""
    limit_ft: Optional[float] = None

    @property
    def blocked(self) -> bool:
        return self.status == HeightStatus.BLOCKED


def check_height(
    height_ft: float,
    max_height: Optional[float] = None,
    recommended_height: Optional[float] = None,
    option_ceiling: Optional[float] = None,
    option_label: str = "",
) -> HeightCheck:
    """
    Compare a height in feet with the product's bounds.

    Exceeding max_height, or the stricter ceiling tied to a selected option
    (e.g. fluted glass colour), blocks pricing. Exceeding only the
    recommended height is a warning.
    """
    if not height_ft or height_ft <= 0:
        return HeightCheck()

    if max_height and height_ft > max_height:
        return HeightCheck(
            status=HeightStatus.BLOCKED,
            message=f"Maximum height is {max_height:g} ft",
            limit_ft=max_height,
        )
    if option_ceiling and height_ft > option_ceiling:
        label = f"{option_label} " if option_label else ""
        return HeightCheck(
            status=HeightStatus.BLOCKED,
            message=f"{label}glass is limited to {option_ceiling:g} ft height",
            limit_ft=option_ceiling,
        )
    if recommended_height and height_ft > recommended_height:
        return HeightCheck(
            status=HeightStatus.WARNING,
            message=f"Recommended height is {recommended_height:g} ft; maximum is {max_height:g} ft"
            if max_height else f"Recommended height is {recommended_height:g} ft",
            limit_ft=recommended_height,
        )
    return HeightCheck()
