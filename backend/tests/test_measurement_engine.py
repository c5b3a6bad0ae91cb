"""
test_measurement_engine.py — Unit tests for unit conversion, area and height checks.

Tests cover:
  - to_linear_units: every unit, compound feet-inches, invalid input → 0
  - to_area_square_units: unit invariance, monotonicity, zero sides
  - l_corner_width / resolve_measurement: L-corner run summation
  - parse_quantity: whole units, minimum 1
  - check_height: blocked / warning / ok, option ceilings
"""

import pytest

from app.services.measurement_engine import (
    HeightStatus,
    LengthUnit,
    Measurement,
    check_height,
    l_corner_width,
    parse_feet_inches,
    parse_quantity,
    parse_unit,
    resolve_measurement,
    to_area_square_units,
    to_linear_units,
)


# ===========================================================================
# Class 1: Linear conversion
# ===========================================================================

class TestToLinearUnits:

    @pytest.mark.parametrize("value, unit", [
        (3048, "mm"),
        (304.8, "cm"),
        (120, "inch"),
        (10, "ft"),
    ])
    def test_ten_feet_in_each_unit(self, value, unit):
        assert abs(to_linear_units(value, unit) - 10.0) < 1e-9

    def test_metres_use_multiplier(self):
        """3.048 m × 3.28084 = 10.0000003 ft."""
        assert abs(to_linear_units(3.048, "m") - 10.0) < 1e-5

    def test_numeric_string(self):
        assert abs(to_linear_units("1524", LengthUnit.MM) - 5.0) < 1e-9

    def test_leading_number_parse(self):
        """'12.5mm' typed into a mm field reads as 12.5."""
        assert abs(to_linear_units("304.8mm", "mm") - 1.0) < 1e-9

    @pytest.mark.parametrize("value", ["", None, "abc", 0, -5, "-5", float("nan"), float("inf")])
    def test_invalid_input_is_zero(self, value):
        assert to_linear_units(value, "ft") == 0.0

    def test_unknown_unit_read_as_feet(self):
        assert parse_unit("yards") == LengthUnit.FT
        assert to_linear_units(7, "yards") == 7.0

    def test_unit_aliases(self):
        assert parse_unit("Feet") == LengthUnit.FT
        assert parse_unit("millimetre") == LengthUnit.MM
        assert parse_unit("in") == LengthUnit.INCH


class TestFeetInches:

    @pytest.mark.parametrize("text", ["6'8", "6 8", "6' 8\"", "6′8"])
    def test_compound_forms(self, text):
        """6 ft 8 in = 6 + 8/12 = 6.6667 ft."""
        assert abs(parse_feet_inches(text) - (6 + 8 / 12)) < 1e-9

    def test_feet_only(self):
        assert parse_feet_inches("7'") == 7.0

    def test_plain_decimal_is_decimal_feet(self):
        assert parse_feet_inches("6.5") == 6.5

    @pytest.mark.parametrize("text", ["6.5'", "6.5 ft", "6.5ft", "6.5′", "6.5 FT"])
    def test_decimal_with_foot_mark(self, text):
        assert parse_feet_inches(text) == 6.5

    def test_through_to_linear_units(self):
        assert abs(to_linear_units("5'6", "ft-in") - 5.5) < 1e-9

    @pytest.mark.parametrize("text", ["", "abc", "-6'8", None])
    def test_unparseable_is_zero(self, text):
        assert to_linear_units(text, "ft-in") == 0.0


# ===========================================================================
# Class 2: Area
# ===========================================================================

class TestArea:

    def test_simple_area(self):
        assert to_area_square_units(10, 5, "ft") == 50.0

    def test_mm_and_m_agree(self):
        """1524 × 2438.4 mm and 1.524 × 2.4384 m are the same 5 × 8 ft opening."""
        mm_area = to_area_square_units(1524, 2438.4, "mm")
        m_area = to_area_square_units(1.524, 2.4384, "m")
        assert abs(mm_area - 40.0) < 1e-9
        assert abs(mm_area - m_area) < 1e-4

    def test_monotonic_in_width_and_height(self):
        base = to_area_square_units(4, 6, "ft")
        assert to_area_square_units(5, 6, "ft") > base
        assert to_area_square_units(4, 7, "ft") > base

    @pytest.mark.parametrize("width, height", [("", 5), (5, ""), (0, 5), (5, -1), ("abc", 5)])
    def test_invalid_side_gives_zero(self, width, height):
        assert to_area_square_units(width, height, "ft") == 0.0


class TestLCornerAndResolve:

    def test_l_corner_sums_both_walls(self):
        """Left 914.4 mm (3 ft) + right 609.6 mm (2 ft) = 5 ft run."""
        assert abs(l_corner_width(914.4, 609.6, "mm") - 5.0) < 1e-9

    def test_l_corner_missing_right_wall(self):
        assert l_corner_width(3, None, "ft") == 3.0

    def test_resolve_measurement(self):
        size = resolve_measurement(Measurement(width=3, height=7, right_width=2, quantity="2"))
        assert size.total_width_ft == 5.0
        assert size.area == 35.0
        assert size.quantity == 2

    def test_resolve_cleared_width(self):
        size = resolve_measurement(Measurement(width="", height=7))
        assert size.area == 0.0


class TestParseQuantity:

    @pytest.mark.parametrize("value, expected", [
        (3, 3), ("4", 4), (2.7, 2), ("0", 1), ("", 1), (None, 1), ("abc", 1), (-2, 1),
    ])
    def test_quantity(self, value, expected):
        assert parse_quantity(value) == expected


# ===========================================================================
# Class 3: Height validation
# ===========================================================================

class TestCheckHeight:

    def test_within_bounds(self):
        check = check_height(6.0, max_height=8.0, recommended_height=7.0)
        assert check.status == HeightStatus.OK
        assert not check.blocked

    def test_above_recommended_warns(self):
        check = check_height(7.5, max_height=8.0, recommended_height=7.0)
        assert check.status == HeightStatus.WARNING
        assert "Recommended height is 7 ft" in check.message

    def test_above_max_blocks(self):
        check = check_height(10.5, max_height=10.0)
        assert check.blocked
        assert check.message == "Maximum height is 10 ft"
        assert check.limit_ft == 10.0

    def test_option_ceiling_blocks(self):
        check = check_height(9.0, max_height=12.0, option_ceiling=8.0, option_label="Grey fluted")
        assert check.blocked
        assert check.message == "Grey fluted glass is limited to 8 ft height"

    def test_no_bounds_is_ok(self):
        assert check_height(30.0).status == HeightStatus.OK

    def test_zero_height_is_ok(self):
        assert check_height(0.0, max_height=8.0).status == HeightStatus.OK

    def test_exactly_at_max_is_allowed(self):
        assert not check_height(8.0, max_height=8.0).blocked
