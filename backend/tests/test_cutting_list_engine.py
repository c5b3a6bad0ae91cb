"""
test_cutting_list_engine.py — Unit tests for stock-length selection and wastage costing.

Tests cover:
  - plan_cutting: least-wastage choice, tie-break, joining fallback, invalid input
  - CuttingPlan invariants: wastage ≥ 0, material = units × stock length
  - cost_wastage: weight-based aluminium cost, coating cost, extra buffer
  - pieces_for_run: slat count from run width and spacing
"""

import pytest

from app.services.cutting_list_engine import cost_wastage, pieces_for_run, plan_cutting


# ===========================================================================
# Class 1: Stock selection
# ===========================================================================

class TestPlanCutting:

    def test_sixteen_foot_stock_wins_on_wastage(self):
        """
        7 ft pieces × 10 from [12, 16]:
          12 ft → 1 per length, 10 lengths, 120 − 70 = 50 ft waste
          16 ft → 2 per length,  5 lengths,  80 − 70 = 10 ft waste  ← chosen
        """
        plan = plan_cutting(7, 10, [12, 16])
        assert plan.stock_length == 16
        assert plan.pieces_per_stock_unit == 2
        assert plan.stock_units_needed == 5
        assert plan.total_material_used == 80
        assert plan.actual_material_required == 70
        assert abs(plan.wastage_length - 10) < 1e-9
        assert not plan.needs_joining

    def test_all_candidates_reported(self):
        plan = plan_cutting(7, 10, [12, 16])
        by_length = {c.stock_length: c for c in plan.candidates}
        assert set(by_length) == {12.0, 16.0}
        assert by_length[12.0].stock_units_needed == 10
        assert abs(by_length[12.0].wastage_length - 50) < 1e-9

    def test_twelve_foot_stock_wins_when_it_fits_better(self):
        """
        4 ft × 6: 12 ft → 3 per, 2 lengths, 24 − 24 = 0; 16 ft → 4 per, 2 lengths, 32 − 24 = 8.
        """
        plan = plan_cutting(4, 6, [12, 16])
        assert plan.stock_length == 12
        assert plan.wastage_length == 0

    def test_tie_keeps_longer_stock(self):
        """6 ft × 2: 12 ft (1 length) and 6 ft (2 lengths) both waste 0 → longer 12 ft kept."""
        plan = plan_cutting(6, 2, [6, 12])
        assert plan.stock_length == 12
        assert plan.stock_units_needed == 1

    def test_order_of_stock_list_does_not_matter(self):
        assert plan_cutting(7, 10, [16, 12]) == plan_cutting(7, 10, [12, 16])

    def test_exact_fit_despite_float_noise(self):
        """12 / 2.4 is 5 pieces even though 2.4 is not exact in binary."""
        plan = plan_cutting(2.4, 5, [12])
        assert plan.pieces_per_stock_unit == 5
        assert plan.stock_units_needed == 1
        assert plan.wastage_length < 1e-9

    def test_piece_longer_than_every_stock_is_joined(self):
        """
        20 ft × 3 from [12, 16]: nothing fits → join from 16 ft,
        ceil(20/16) = 2 lengths per piece → 6 lengths, 96 − 60 = 36 ft waste.
        """
        plan = plan_cutting(20, 3, [12, 16])
        assert plan.needs_joining
        assert plan.stock_length == 16
        assert plan.stock_units_needed == 6
        assert plan.total_material_used == 96
        assert abs(plan.wastage_length - 36) < 1e-9

    @pytest.mark.parametrize("length, count, stock", [
        (0, 5, [12]),
        (-3, 5, [12]),
        (5, 0, [12]),
        (5, 3, []),
        (5, 3, [0, -12]),
        (float("nan"), 3, [12]),
    ])
    def test_invalid_input_gives_empty_plan(self, length, count, stock):
        plan = plan_cutting(length, count, stock)
        assert plan.is_empty
        assert plan.total_material_used == 0
        assert plan.wastage_length == 0

    @pytest.mark.parametrize("length, count", [(7, 10), (3.5, 13), (5, 6), (11.9, 4), (17, 2)])
    def test_plan_invariants(self, length, count):
        plan = plan_cutting(length, count, [12, 16])
        assert plan.wastage_length >= 0
        assert abs(plan.total_material_used - plan.stock_units_needed * plan.stock_length) < 1e-9
        assert abs(plan.total_material_used - plan.actual_material_required - plan.wastage_length) < 1e-9


# ===========================================================================
# Class 2: Wastage costing
# ===========================================================================

class TestCostWastage:

    def test_weight_and_coating_cost(self):
        """
        10 ft offcut of a 5.5 kg / 12 ft profile:
          weight = 10 × 5.5/12 = 4.5833 kg → × 330 = 1512.50
          coating = 10 × 50 = 500 → total 2012.50
        """
        cost = cost_wastage(10, reference_weight_kg=5.5, aluminium_rate_per_kg=330, coating_rate_per_ft=50)
        assert abs(cost.wastage_weight_kg - 10 * 5.5 / 12) < 1e-9
        assert abs(cost.aluminium_cost - 1512.5) < 1e-6
        assert abs(cost.coating_cost - 500.0) < 1e-9
        assert abs(cost.total - 2012.5) < 1e-6

    def test_extra_buffer_applies_to_length_first(self):
        """
        10% buffer on 10 ft → 11 ft:
          aluminium = 11 × 5.5/12 × 330 = 1663.75, coating = 11 × 50 = 550.
        """
        cost = cost_wastage(10, 5.5, 330, 50, extra_wastage_percent=10)
        assert abs(cost.extra_wastage_length - 1.0) < 1e-9
        assert abs(cost.wastage_length - 11.0) < 1e-9
        assert abs(cost.aluminium_cost - 1663.75) < 1e-6
        assert abs(cost.coating_cost - 550.0) < 1e-9

    def test_no_wastage_costs_nothing(self):
        cost = cost_wastage(0, 5.5, 330, 50, extra_wastage_percent=10)
        assert cost.total == 0

    def test_reference_length_scales_weight(self):
        """Weight quoted per 16 ft: 8 ft offcut of 8 kg/16 ft = 4 kg."""
        cost = cost_wastage(8, 8.0, 100, 0, reference_length_ft=16)
        assert abs(cost.wastage_weight_kg - 4.0) < 1e-9
        assert abs(cost.total - 400.0) < 1e-9


# ===========================================================================
# Class 3: Piece counts
# ===========================================================================

class TestPiecesForRun:

    @pytest.mark.parametrize("run_ft, spacing_in, expected", [
        (10, 12, 10),
        (4, 8, 6),
        (2.5, 6, 5),
        (10.1, 12, 11),
        (1, 8, 2),
    ])
    def test_pieces_rounded_up(self, run_ft, spacing_in, expected):
        assert pieces_for_run(run_ft, spacing_in) == expected

    @pytest.mark.parametrize("run_ft, spacing_in", [(0, 12), (-4, 12), (10, 0)])
    def test_invalid_is_zero(self, run_ft, spacing_in):
        assert pieces_for_run(run_ft, spacing_in) == 0
