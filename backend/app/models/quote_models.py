"""
Request / response payloads for the quote, cutting-plan and lead endpoints.

Range-mode responses never carry the true cost: line items and cladding
package details are only serialised once the session has a captured lead.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from app.services.cutting_list_engine import CuttingPlan
from app.services.measurement_engine import Measurement
from app.services.pricing_engine import OptionSelection, PricingResult
from app.services.quote_policy import DisplayValue

Dimension = Union[float, str, None]


class MeasurementIn(BaseModel):
    """Dimensions as typed; bad values price as zero rather than failing validation."""
    width: Dimension = None
    height: Dimension = None
    unit: str = "ft"
    quantity: Union[int, float, str, None] = 1
    right_width: Dimension = Field(None, description="Second wall for L-corner showers")

    def to_measurement(self) -> Measurement:
        return Measurement(
            width=self.width,
            height=self.height,
            unit=self.unit,
            quantity=self.quantity,
            right_width=self.right_width,
        )


class SelectionIn(BaseModel):
    glass: str = ""
    coating: str = ""
    lock: str = ""
    mesh: bool = False
    grill: bool = False
    color: str = ""
    profile: str = ""
    panel_config: str = ""
    track: str = ""
    door_type: str = "hinged"
    door_count: int = 1
    shower_type: str = "straight"
    hardware_finish: str = "mill-finish"
    glass_type: str = ""
    lock_option: bool = False
    project_type: str = "commercial"
    thickness: str = "4mm"
    color_type: str = "plain"
    brand: str = "fundermax"
    installation_type: str = "ceiling"

    def to_selection(self) -> OptionSelection:
        return OptionSelection(**self.model_dump())


class QuoteRequest(BaseModel):
    measurement: MeasurementIn
    selection: SelectionIn = Field(default_factory=SelectionIn)


class MultiQuoteRequest(BaseModel):
    rows: List[MeasurementIn] = Field(..., min_length=1)
    selection: SelectionIn = Field(default_factory=SelectionIn)


class LeadRequest(BaseModel):
    name: str = ""
    city: str = ""
    mobile: str = ""
    email: str = ""
    measurement: MeasurementIn
    selection: SelectionIn = Field(default_factory=SelectionIn)


class CuttingPlanRequest(BaseModel):
    piece_length: float = Field(..., description="Required piece length in ft")
    piece_count: int
    stock_lengths: List[float] = Field(default_factory=lambda: [12.0, 16.0])
    # Optional wastage costing
    reference_weight_kg: Optional[float] = Field(None, description="kg per 12 ft stock length")
    aluminium_rate_per_kg: float = 0.0
    coating_rate_per_ft: float = 0.0
    extra_wastage_percent: float = 0.0


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class DisplayValueOut(BaseModel):
    mode: str
    low: float
    high: float
    exact: Optional[float] = None

    @classmethod
    def from_display(cls, value: DisplayValue) -> "DisplayValueOut":
        return cls(mode=value.mode.value, low=value.low, high=value.high, exact=value.exact)


class LineItemOut(BaseModel):
    label: str
    amount: float
    rate: Optional[float] = None


class CuttingCandidateOut(BaseModel):
    stock_length: float
    pieces_per_stock_unit: int
    stock_units_needed: int
    wastage_length: float


class CuttingPlanOut(BaseModel):
    stock_length: float
    pieces_per_stock_unit: int
    stock_units_needed: int
    total_material_used: float
    actual_material_required: float
    wastage_length: float
    needs_joining: bool = False
    candidates: List[CuttingCandidateOut] = Field(default_factory=list)
    wastage_cost: Optional[float] = None

    @classmethod
    def from_plan(cls, plan: CuttingPlan, wastage_cost: Optional[float] = None) -> "CuttingPlanOut":
        return cls(
            stock_length=plan.stock_length,
            pieces_per_stock_unit=plan.pieces_per_stock_unit,
            stock_units_needed=plan.stock_units_needed,
            total_material_used=plan.total_material_used,
            actual_material_required=plan.actual_material_required,
            wastage_length=plan.wastage_length,
            needs_joining=plan.needs_joining,
            candidates=[CuttingCandidateOut(**c.__dict__) for c in plan.candidates],
            wastage_cost=wastage_cost,
        )


class QuoteResponse(BaseModel):
    product_id: str
    archetype: str
    mode: str
    per_unit: DisplayValueOut
    total: DisplayValueOut
    area_used: float
    number_of_units: int
    variance: float
    blocked: bool = False
    warnings: List[str] = Field(default_factory=list)
    line_items: Optional[List[LineItemOut]] = None
    cutting_plan: Optional[CuttingPlanOut] = None
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def build(cls, product_id: str, result: PricingResult, per_unit: DisplayValue, total: DisplayValue) -> "QuoteResponse":
        exact = per_unit.exact is not None
        plan = None
        if result.cutting_plan is not None and not result.cutting_plan.is_empty:
            # Offcut cost is part of the price; hide it in range mode
            cost = result.wastage.total if (exact and result.wastage is not None) else None
            plan = CuttingPlanOut.from_plan(result.cutting_plan, cost)
        return cls(
            product_id=product_id,
            archetype=result.archetype,
            mode=per_unit.mode.value,
            per_unit=DisplayValueOut.from_display(per_unit),
            total=DisplayValueOut.from_display(total),
            area_used=result.area_used,
            number_of_units=result.number_of_units,
            variance=result.variance,
            blocked=result.blocked,
            warnings=list(result.warnings),
            line_items=[LineItemOut(**item.__dict__) for item in result.line_items] if exact else None,
            cutting_plan=plan,
            details=dict(result.details) if exact and result.details else None,
        )


class MultiQuoteResponse(BaseModel):
    product_id: str
    mode: str
    rows: List[QuoteResponse]
    total: DisplayValueOut
    total_area: float
    total_units: int


class LeadResponse(BaseModel):
    accepted: bool
    mode: str
    quote: QuoteResponse
    whatsapp_url: str = ""
