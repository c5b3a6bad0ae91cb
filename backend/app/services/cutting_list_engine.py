"""Cutting list engine — stock-length selection and wastage costing for profile runs."""
import math
import logging
from dataclasses import dataclass, field
from typing import Iterable, List

logger = logging.getLogger("quote-engine.cutting")

# Catalog weights are quoted per 12 ft stock length
REFERENCE_STOCK_LENGTH_FT: float = 12.0

# Float noise guard for exact fits such as 12 / 2.4
_FIT_EPSILON: float = 1e-9


@dataclass
class CuttingCandidate:
    stock_length: float
    pieces_per_stock_unit: int
    stock_units_needed: int = 0
    wastage_length: float = 0


@dataclass
class CuttingPlan:
    stock_length: float = 0
    pieces_per_stock_unit: int = 0
    stock_units_needed: int = 0
    total_material_used: float = 0
    actual_material_required: float = 0
    wastage_length: float = 0
    needs_joining: bool = False
    candidates: List[CuttingCandidate] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.stock_units_needed == 0


@dataclass
class WastageCost:
    wastage_length: float = 0          # after any extra-wastage buffer
    extra_wastage_length: float = 0
    wastage_weight_kg: float = 0
    aluminium_cost: float = 0
    coating_cost: float = 0

    @property
    def total(self) -> float:
        return self.aluminium_cost + self.coating_cost


def _positive(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


def _valid_lengths(stock_lengths: Iterable) -> List[float]:
    lengths = set()
    for value in stock_lengths or []:
        try:
            length = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(length) and length > 0:
            lengths.add(length)
    return sorted(lengths, reverse=True)


def plan_cutting(piece_length: float, piece_count: int, stock_lengths: Iterable) -> CuttingPlan:
    """
    Choose the stock length that wastes the least material.

    Every stock length is tried, longest first. For each, pieces per unit is
    floor(stock / piece) and units needed is ceil(count / pieces per unit).
    The lowest wastage wins; on a tie the first evaluated (longer) stock
    length is kept. If no stock length fits a single piece, pieces are joined
    from the longest stock: ceil(piece / stock) units per piece.

    Non-positive length or count, or no usable stock lengths, give an empty plan.
    """
    lengths = _valid_lengths(stock_lengths)
    if not lengths or not _positive(piece_length) or not _positive(piece_count):
        return CuttingPlan()

    required = piece_count * piece_length
    candidates: List[CuttingCandidate] = []
    best = None

    for stock in lengths:
        per_unit = math.floor(stock / piece_length + _FIT_EPSILON)
        if per_unit == 0:
            candidates.append(CuttingCandidate(stock_length=stock, pieces_per_stock_unit=0))
            continue
        units = math.ceil(piece_count / per_unit)
        wastage = max(0.0, units * stock - required)
        candidate = CuttingCandidate(
            stock_length=stock,
            pieces_per_stock_unit=per_unit,
            stock_units_needed=units,
            wastage_length=wastage,
        )
        candidates.append(candidate)
        if best is None or wastage < best.wastage_length:
            best = candidate

    if best is not None:
        return CuttingPlan(
            stock_length=best.stock_length,
            pieces_per_stock_unit=best.pieces_per_stock_unit,
            stock_units_needed=best.stock_units_needed,
            total_material_used=best.stock_units_needed * best.stock_length,
            actual_material_required=required,
            wastage_length=best.wastage_length,
            candidates=candidates,
        )

    longest = lengths[0]
    units = piece_count * math.ceil(piece_length / longest - _FIT_EPSILON)
    total_used = units * longest
    logger.info(
        f"Piece length {piece_length:.2f} ft exceeds every stock length {lengths}; "
        f"joining from {longest:g} ft stock ({units} units)"
    )
    return CuttingPlan(
        stock_length=longest,
        pieces_per_stock_unit=0,
        stock_units_needed=units,
        total_material_used=total_used,
        actual_material_required=required,
        wastage_length=max(0.0, total_used - required),
        needs_joining=True,
        candidates=candidates,
    )


def cost_wastage(
    wastage_length: float,
    reference_weight_kg: float,
    aluminium_rate_per_kg: float,
    coating_rate_per_ft: float,
    extra_wastage_percent: float = 0.0,
    reference_length_ft: float = REFERENCE_STOCK_LENGTH_FT,
) -> WastageCost:
    """
    Cost the offcut material.

    The extra-wastage buffer is added to the length first, so it feeds both
    the weight-based aluminium cost and the per-ft coating cost.
    """
    if not wastage_length or wastage_length <= 0:
        return WastageCost()

    extra = wastage_length * (extra_wastage_percent or 0.0) / 100.0
    length = wastage_length + extra
    weight_per_ft = reference_weight_kg / reference_length_ft if reference_length_ft > 0 else 0.0
    weight = length * weight_per_ft
    return WastageCost(
        wastage_length=length,
        extra_wastage_length=extra,
        wastage_weight_kg=weight,
        aluminium_cost=weight * aluminium_rate_per_kg,
        coating_cost=length * coating_rate_per_ft,
    )


def pieces_for_run(run_width_ft: float, spacing_inches: float) -> int:
    """Slats needed across a run at a fixed centre-to-centre spacing (rounded up)."""
    if not run_width_ft or run_width_ft <= 0 or not spacing_inches or spacing_inches <= 0:
        return 0
    return math.ceil(round(run_width_ft * 12.0 / spacing_inches, 9))
