"""
Cladding Engine — sheet-count and package-rate costing for ACP and HPL
elevation cladding.

Quantities are pooled across all units before sheets are rounded up, so the
figures here are totals for the whole order.
"""

import math
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger("quote-engine.cladding")


# ---------------------------------------------------------------------------
# Defaults (overridden by the product's rate tables)
# ---------------------------------------------------------------------------
_DEFAULT_WASTAGE_PCT: float = 5.0
_DEFAULT_ACP_SHEET_SQFT: float = 48.0          # 4 × 12 ft
_DEFAULT_FR_GRADE_RATE: float = 520.0          # per sqft, FR grade B 4mm plain
_MM_PER_FT: float = 304.8

_DEFAULT_HPL_INSTALLATION: Dict[str, float] = {
    "ceiling": 165.0,    # 16-18" frame gaps
    "facade": 145.0,     # 22-24" frame gaps
}


def _num(value: Any, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def sheet_area_sqft(width_mm: float, height_mm: float) -> float:
    return (width_mm / _MM_PER_FT) * (height_mm / _MM_PER_FT)


class CladdingEngine:
    """
    ACP and HPL cladding calculator.

    ACP is priced on area with wastage at a package rate; sheet count is
    informational. HPL is priced on whole sheets at the brand rate plus an
    installation rate on area with wastage.
    """

    def __init__(self, wastage_pct: Optional[float] = None) -> None:
        self.wastage_pct = _DEFAULT_WASTAGE_PCT if wastage_pct is None else _num(wastage_pct, _DEFAULT_WASTAGE_PCT)

    def _with_wastage(self, area_sqft: float) -> Dict[str, float]:
        wastage_area = area_sqft * (self.wastage_pct / 100.0)
        return {"base_area": area_sqft, "wastage_area": wastage_area, "area_with_wastage": area_sqft + wastage_area}

    # ------------------------------------------------------------------
    # 1. ACP
    # ------------------------------------------------------------------

    def acp_rate(
        self,
        commercial: Optional[Dict[str, Any]],
        project_type: str = "commercial",
        thickness: str = "4mm",
        color_type: str = "plain",
        fr_grade_rate: float = _DEFAULT_FR_GRADE_RATE,
    ) -> float:
        """
        Package rate per sqft.

        FR grade B projects (railways, airports, government) use one flat
        rate; commercial projects look up thickness × colour type.
        """
        if project_type == "fr-grade":
            return fr_grade_rate
        by_thickness = (commercial or {}).get(thickness) or {}
        rate = _num(by_thickness.get(color_type))
        if rate == 0:
            logger.warning(f"No ACP rate for {thickness}/{color_type}")
        return rate

    def acp_estimate(
        self,
        total_area_sqft: float,
        rate_per_sqft: float,
        standard_sheet_sqft: float = _DEFAULT_ACP_SHEET_SQFT,
    ) -> Dict[str, Any]:
        if total_area_sqft <= 0:
            return {"base_area": 0.0, "wastage_area": 0.0, "area_with_wastage": 0.0,
                    "sheets_needed": 0, "rate_per_sqft": rate_per_sqft, "total_cost": 0.0}

        areas = self._with_wastage(total_area_sqft)
        sheet_sqft = standard_sheet_sqft if standard_sheet_sqft > 0 else _DEFAULT_ACP_SHEET_SQFT
        return {
            **areas,
            "sheets_needed": math.ceil(areas["area_with_wastage"] / sheet_sqft),
            "rate_per_sqft": rate_per_sqft,
            "total_cost": areas["area_with_wastage"] * rate_per_sqft,
        }

    # ------------------------------------------------------------------
    # 2. HPL
    # ------------------------------------------------------------------

    def hpl_estimate(
        self,
        total_area_sqft: float,
        brand: Dict[str, Any],
        installation_rate: float,
    ) -> Dict[str, Any]:
        """
        Sheets are rounded up on area with wastage and charged whole; the
        offcut share of that is reported as wastage cost.
        """
        sheet_sqft = sheet_area_sqft(_num(brand.get("sheetWidthMM")), _num(brand.get("sheetHeightMM")))
        rate = _num(brand.get("ratePerSqft"))
        if total_area_sqft <= 0 or sheet_sqft <= 0:
            return {"base_area": 0.0, "wastage_area": 0.0, "area_with_wastage": 0.0,
                    "sheet_area_sqft": sheet_sqft, "sheets_needed": 0, "sheet_cost": 0.0,
                    "wastage_cost": 0.0, "installation_cost": 0.0, "total_cost": 0.0}

        areas = self._with_wastage(total_area_sqft)
        sheets = math.ceil(areas["area_with_wastage"] / sheet_sqft)
        actual_sheet_area = sheets * sheet_sqft
        sheet_cost = actual_sheet_area * rate
        installation_cost = areas["area_with_wastage"] * installation_rate
        return {
            **areas,
            "sheet_area_sqft": sheet_sqft,
            "sheets_needed": sheets,
            "actual_sheet_area": actual_sheet_area,
            "rate_per_sqft": rate,
            "sheet_cost": sheet_cost,
            "wastage_cost": max(0.0, (actual_sheet_area - total_area_sqft) * rate),
            "installation_rate": installation_rate,
            "installation_cost": installation_cost,
            "total_cost": sheet_cost + installation_cost,
        }

    @staticmethod
    def installation_rate(installation: Optional[Dict[str, Any]], installation_type: str) -> float:
        entry = (installation or {}).get(installation_type)
        if isinstance(entry, dict):
            return _num(entry.get("ratePerSqft"), _DEFAULT_HPL_INSTALLATION.get(installation_type, 0.0))
        if entry is not None:
            return _num(entry, 0.0)
        return _DEFAULT_HPL_INSTALLATION.get(installation_type, 0.0)
