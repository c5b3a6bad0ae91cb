"""
PricingEngine — maps a resolved area, quantity and option selection to a
per-unit and total price for one catalog product.

Covers:
  - Framed openings (sliding, casement, entrance doors) with glass-triggered
    hardware upgrades and flat lock surcharges
  - Track-tier sliding windows with bundled base glass
  - Fixed elevations with fluted glass and premium colours
  - Telescopic and folding doors (panel-ratio hardware, profile surcharges)
  - Louvers with stock-length cutting and wastage costing
  - Shower partitions (straight / L-corner, per-door hardware)
  - ACP and HPL cladding sheet costing

Every money-bearing value passes through safe_number(); malformed rates are
logged and counted, then priced as 0. Bad dimensions give an all-zero result.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from app.models.catalog_schema import FlatMesh, ProductConfig, TieredMesh
from app.services import pricing_rules as rules
from app.services.cladding_engine import CladdingEngine
from app.services.cutting_list_engine import (
    CuttingPlan,
    WastageCost,
    cost_wastage,
    pieces_for_run,
    plan_cutting,
)
from app.services.diagnostics import timed, tracker
from app.services.measurement_engine import (
    HeightStatus,
    Measurement,
    ResolvedSize,
    check_height,
    parse_quantity,
    resolve_measurement,
)

logger = logging.getLogger("quote-engine.pricing")

_DEFAULT_STOCK_LENGTHS_FT = [12.0, 16.0]
_MAX_DOORS = 2


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------

def safe_number(value: Any, field_name: str = "value", product_id: str = "") -> float:
    """
    Coerce a rate or intermediate result to a finite float.

    None is an absent optional rate and becomes 0 quietly. NaN, infinities and
    non-numeric values are catalog or input bugs: they become 0 and are logged
    and counted.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if math.isfinite(number):
        return number
    tracker.record_coercion(field_name)
    logger.warning(f"Coerced non-finite {field_name}={value!r} to 0 (product: {product_id or '-'})")
    return 0.0


# ---------------------------------------------------------------------------
# Inputs and outputs
# ---------------------------------------------------------------------------

@dataclass
class OptionSelection:
    """User-chosen options for one pricing pass. Blank means the default."""
    glass: str = ""
    coating: str = ""
    lock: str = ""                        # single | multi | mortice
    mesh: bool = False
    grill: bool = False
    color: str = ""                       # premium colour key, e.g. rose-gold
    profile: str = ""
    panel_config: str = ""                # telescopic panel ratio, e.g. 2+1
    track: str = ""                       # 2track | 3track
    door_type: str = "hinged"             # hinged | sliding
    door_count: int = 1
    shower_type: str = "straight"         # straight | l-corner
    hardware_finish: str = "mill-finish"
    glass_type: str = ""                  # clear | fluted | 8mm-frosted
    lock_option: bool = False             # fold & slide door lock
    project_type: str = "commercial"      # commercial | fr-grade
    thickness: str = "4mm"
    color_type: str = "plain"             # plain | wooden
    brand: str = "fundermax"
    installation_type: str = "ceiling"    # ceiling | facade

    def describe(self) -> Dict[str, Any]:
        """Non-default selections, for quote summaries."""
        defaults = OptionSelection()
        return {
            name: value
            for name, value in self.__dict__.items()
            if value != getattr(defaults, name) and value not in ("", None, False)
        }


@dataclass
class LineItem:
    label: str
    amount: float                     # per unit
    rate: Optional[float] = None      # per-sqft rate when the item scales with area


@dataclass
class RangeView:
    low: float = 0.0
    high: float = 0.0

    @classmethod
    def around(cls, cost: float, variance: float) -> "RangeView":
        return cls(low=cost * (1 - variance), high=cost * (1 + variance))


@dataclass
class PricingResult:
    per_unit_cost: float = 0.0
    total_cost: float = 0.0
    area_used: float = 0.0
    number_of_units: int = 0
    variance: float = rules.DEFAULT_VARIANCE
    archetype: str = rules.STANDARD_WINDOW
    line_items: List[LineItem] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    blocked: bool = False
    cutting_plan: Optional[CuttingPlan] = None
    wastage: Optional[WastageCost] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def per_unit_range(self) -> RangeView:
        return RangeView.around(self.per_unit_cost, self.variance)

    @property
    def total_range(self) -> RangeView:
        return RangeView.around(self.total_cost, self.variance)


@dataclass
class MultiSizeQuote:
    rows: List[PricingResult] = field(default_factory=list)
    total_cost: float = 0.0
    total_area: float = 0.0
    total_units: int = 0
    variance: float = rules.DEFAULT_VARIANCE

    @property
    def total_range(self) -> RangeView:
        return RangeView.around(self.total_cost, self.variance)


# ---------------------------------------------------------------------------
# Evaluation context
# ---------------------------------------------------------------------------

class PricingContext:
    """
    Mutable scratchpad for one pricing pass.

    Strategy functions read rates through it and append per-unit line items;
    lookups of selected keys missing from a table are logged as config gaps.
    """

    def __init__(
        self,
        product: ProductConfig,
        rule: rules.ArchetypeRule,
        area: float,
        quantity: int,
        selection: OptionSelection,
        size: Optional[ResolvedSize],
    ):
        self.product = product
        self.rates = product.rates
        self.rule = rule
        self.area = area
        self.quantity = quantity
        self.selection = selection
        self.size = size
        self.line_items: List[LineItem] = []
        self.warnings: List[str] = []
        self.cutting_plan: Optional[CuttingPlan] = None
        self.wastage: Optional[WastageCost] = None
        self.details: Dict[str, Any] = {}

    # -- reads -------------------------------------------------------------

    def num(self, value: Any, field_name: str, default: float = 0.0) -> float:
        if value is None:
            return default
        return safe_number(value, field_name, self.product.id)

    def lookup(self, table: Optional[Dict[str, Any]], key: str, category: str) -> float:
        """Rate for a selected key; a key the table does not carry prices as 0 and is logged."""
        if not key:
            return 0.0
        if not table or key not in table:
            tracker.record_missing_key(self.product.id, category, key)
            logger.warning(f"No {category} rate for {key!r} on product {self.product.id}; priced as 0")
            return 0.0
        return safe_number(table[key], f"{category}.{key}", self.product.id)

    def feature(self, flag: str) -> bool:
        return self.product.has_feature(flag)

    # -- writes ------------------------------------------------------------

    def per_area(self, label: str, rate: float) -> None:
        if rate:
            self.line_items.append(LineItem(label=label, amount=rate * self.area, rate=rate))

    def flat(self, label: str, amount: float) -> None:
        if amount:
            self.line_items.append(LineItem(label=label, amount=amount))

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    @property
    def per_unit_cost(self) -> float:
        return safe_number(sum(item.amount for item in self.line_items), "per_unit_cost", self.product.id)


# ---------------------------------------------------------------------------
# Shared surcharge helpers
# ---------------------------------------------------------------------------

def _glass_surcharge(ctx: PricingContext) -> bool:
    """
    Add the per-sqft glass upgrade. Returns True when the choice is in the
    family's heavy set (hardware upgrade trigger).
    """
    key = rules.canonical_glass_key(ctx.selection.glass)
    if key and key not in ctx.rule.baseline_glass:
        ctx.per_area(f"Glass ({key})", ctx.lookup(ctx.rates.glass, key, "glass"))
    return key in ctx.rule.heavy_glass


def _coating_surcharge(ctx: PricingContext) -> None:
    key = (ctx.selection.coating or "").strip().lower()
    if key in rules.FREE_COATINGS:
        return
    ctx.per_area(f"Coating ({key})", ctx.lookup(ctx.rates.coating, key, "coating"))


def _mesh_rate(ctx: PricingContext) -> float:
    mesh = ctx.rates.mesh_rate
    tier = ctx.rule.mesh_tier
    if isinstance(mesh, FlatMesh):
        return safe_number(mesh.amount, "mesh", ctx.product.id)
    if isinstance(mesh, TieredMesh):
        if tier and tier in mesh.tiers:
            return safe_number(mesh.tiers[tier], f"mesh.{tier}", ctx.product.id)
        if tier == "security":
            return ctx.rule.extras.get("security_mesh", 0.0)
        # Family tier missing: take the first tier the product carries
        for value in mesh.tiers.values():
            return safe_number(value, "mesh", ctx.product.id)
    if tier == "security":
        return ctx.rule.extras.get("security_mesh", 0.0)
    tracker.record_missing_key(ctx.product.id, "mesh", tier or "flat")
    logger.warning(f"No mesh rate on product {ctx.product.id}; priced as 0")
    return 0.0


def _mesh_surcharge(ctx: PricingContext) -> None:
    if ctx.selection.mesh and ctx.feature("mesh"):
        ctx.per_area("Mesh", _mesh_rate(ctx))


def _grill_surcharge(ctx: PricingContext) -> None:
    if not (ctx.selection.grill and ctx.feature("grill")):
        return
    grill = ctx.rates.grill or {}
    key = "aluminium12mm" if "aluminium12mm" in grill else next(iter(grill), "aluminium12mm")
    ctx.per_area("Grill", ctx.lookup(grill, key, "grill"))


def _premium_color_surcharge(ctx: PricingContext) -> None:
    color = (ctx.selection.color or "").strip().lower()
    if not color or not ctx.feature("premiumColors"):
        return
    table = ctx.rates.premium_colors or {}
    if color in table:
        ctx.per_area(f"Premium colour ({color})", ctx.lookup(table, color, "premiumColors"))


def _profile_surcharge(ctx: PricingContext) -> None:
    profile = ctx.selection.profile
    if not profile or not ctx.feature("profileOptions"):
        return
    ctx.per_area(f"Profile ({profile})", ctx.lookup(ctx.rates.profiles, profile, "profiles"))


def _lock_available(ctx: PricingContext, lock: str) -> bool:
    if ctx.rule.intrinsic_lock:
        return True
    if lock == "multi":
        return ctx.feature("multiPointLock")
    if lock == "mortice":
        return ctx.feature("morticeLock")
    return False


def _lock_rate(ctx: PricingContext, lock: str) -> float:
    key = {"multi": "multiPoint", "mortice": "mortice"}.get(lock)
    if not key:
        return 0.0
    return ctx.lookup(ctx.rates.lock, key, "lock")


def is_l_corner(product: ProductConfig, selection: OptionSelection) -> bool:
    """L-corner layout counts only when the product offers it."""
    return selection.shower_type == "l-corner" and product.has_feature("lCornerSupport")


def _door_count(ctx: PricingContext, single_on_straight: bool = False) -> int:
    try:
        doors = int(ctx.selection.door_count or 1)
    except (TypeError, ValueError):
        doors = 1
    doors = min(max(doors, 1), _MAX_DOORS)
    if single_on_straight and not is_l_corner(ctx.product, ctx.selection):
        return 1
    return doors


# ---------------------------------------------------------------------------
# Strategies (one per archetype)
# ---------------------------------------------------------------------------

def _price_framed_opening(ctx: PricingContext) -> None:
    """
    Sliding windows, casements and entrance doors.

    Heavy glass upgrades the hardware tier regardless of lock choice. An
    explicit multi-point lock also upgrades it, and its flat rate is added
    only when heavy glass has not already triggered the upgrade.
    """
    rates, rule, sel = ctx.rates, ctx.rule, ctx.selection
    ctx.per_area("Base rate", ctx.num(rates.base_rate, "baseRate"))

    heavy = _glass_surcharge(ctx)
    lock = (sel.lock or "").strip().lower()
    lock_ok = _lock_available(ctx, lock)
    lock_rate = _lock_rate(ctx, lock) if lock_ok else 0.0

    hardware = ctx.num(rates.hardware_cost, "hardwareCost", rule.default_hardware)
    has_upgrade_tier = bool(rule.heavy_glass) or rates.hardware_cost_multi_point is not None
    upgraded_by_lock = has_upgrade_tier and lock == "multi" and lock_rate > 0
    if has_upgrade_tier and (heavy or upgraded_by_lock):
        hardware = ctx.num(rates.hardware_cost_multi_point, "hardwareCostMultiPoint", rule.default_multipoint_hardware)
        ctx.flat("Hardware (multi-point tier)", hardware)
    else:
        ctx.flat("Hardware", hardware)

    if rule.coating_option:
        _coating_surcharge(ctx)
    _mesh_surcharge(ctx)
    _grill_surcharge(ctx)
    _premium_color_surcharge(ctx)

    if lock == "multi" and lock_rate and not heavy:
        ctx.flat("Multi-point lock", lock_rate)
    elif lock == "mortice" and lock_rate:
        ctx.flat("Mortice lock", lock_rate)


def _price_track_sliding(ctx: PricingContext) -> None:
    """Track tier raises the base rate itself; the bundled glass is free."""
    rates, sel = ctx.rates, ctx.selection
    base = ctx.num(rates.base_rate, "baseRate")
    track = (sel.track or "").strip().lower()
    if track and ctx.feature("trackSelection"):
        base += ctx.lookup(rates.track_options, track, "trackOptions")
    ctx.per_area(f"Base rate ({track or 'standard'})", base)
    ctx.flat("Hardware", ctx.num(rates.hardware_cost, "hardwareCost", ctx.rule.default_hardware))
    _glass_surcharge(ctx)
    _coating_surcharge(ctx)
    _premium_color_surcharge(ctx)


def _price_elevation(ctx: PricingContext) -> None:
    rates = ctx.rates
    ctx.per_area("Base rate", ctx.num(rates.base_rate, "baseRate"))
    ctx.flat("Hardware", ctx.num(rates.hardware_cost, "hardwareCost"))

    key = rules.canonical_glass_key(ctx.selection.glass)
    fluted = rates.fluted_glass or {}
    if key in fluted:
        if ctx.feature("flutedGlass"):
            ctx.per_area(f"Fluted glass ({key})", ctx.lookup(fluted, key, "flutedGlass"))
        else:
            ctx.warn(f"Fluted glass is not offered for {ctx.product.name or ctx.product.id}")
    else:
        _glass_surcharge(ctx)
    _premium_color_surcharge(ctx)


def _price_telescopic(ctx: PricingContext) -> None:
    rates, sel = ctx.rates, ctx.selection
    ctx.per_area("Base rate", ctx.num(rates.base_rate, "baseRate"))
    _glass_surcharge(ctx)
    _premium_color_surcharge(ctx)
    _profile_surcharge(ctx)

    default_hw = ctx.rule.extras.get("panel_hardware", 0.0)
    panels = rates.panel_config or {}
    ratio = (sel.panel_config or "").strip()
    if ratio and ctx.feature("panelConfig") and ratio in panels:
        hardware = ctx.num(panels[ratio], f"panelConfig.{ratio}", default_hw) or default_hw
        ctx.flat(f"Panel hardware ({ratio})", hardware)
    else:
        ctx.flat("Panel hardware", default_hw)


def _price_folding(ctx: PricingContext) -> None:
    """Per-area only; a lighter glass may carry a negative surcharge."""
    ctx.per_area("Base rate", ctx.num(ctx.rates.base_rate, "baseRate"))
    _glass_surcharge(ctx)
    _profile_surcharge(ctx)
    _premium_color_surcharge(ctx)


def _price_louver(ctx: PricingContext) -> None:
    """
    Area × base rate per unit, plus the cost of offcut material.

    Slats for every unit are cut from one pooled stock order, so the wastage
    cost is shared equally across units.
    """
    rates = ctx.rates
    ctx.per_area("Base rate", ctx.num(rates.base_rate, "baseRate"))

    if not ctx.feature("wastageCalculation"):
        return
    if ctx.size is None or ctx.size.width_ft <= 0 or ctx.size.height_ft <= 0:
        ctx.warn("Width and height are needed to plan louver cutting; wastage not included")
        return

    gap = ctx.num(rates.profile_gap, "profileGap", ctx.rule.extras.get("profile_gap_in", 12.0))
    pieces = pieces_for_run(ctx.size.width_ft, gap)
    stock = rates.profile_lengths or _DEFAULT_STOCK_LENGTHS_FT
    plan = plan_cutting(ctx.size.height_ft, pieces * ctx.quantity, stock)
    if plan.needs_joining:
        ctx.warn(f"Slat length exceeds {plan.stock_length:g} ft stock; slats will be joined")

    wastage = cost_wastage(
        plan.wastage_length,
        reference_weight_kg=ctx.num(rates.profile_weight_12ft, "profileWeight12ft"),
        aluminium_rate_per_kg=ctx.num(rates.aluminium_rate_per_kg, "aluminiumRatePerKg"),
        coating_rate_per_ft=ctx.num(rates.coating_rate_per_ft, "coatingRatePerFt"),
        extra_wastage_percent=ctx.num(rates.extra_wastage_percent, "extraWastagePercent"),
        reference_length_ft=ctx.rule.extras.get("reference_length_ft", 12.0),
    )
    ctx.cutting_plan = plan
    ctx.wastage = wastage
    ctx.details["pieces_per_unit"] = pieces
    ctx.flat("Cutting wastage", wastage.total / ctx.quantity)


def _price_shower_frameless(ctx: PricingContext) -> None:
    rates, sel, extras = ctx.rates, ctx.selection, ctx.rule.extras
    sliding = (sel.door_type or "").strip().lower() == "sliding"
    table = (rates.sliding if sliding else rates.hinged) or {}
    default_glass = extras["sliding_glass"] if sliding else extras["hinged_glass"]
    glass_rate = ctx.num(table.get("glassRate"), "glassRate", default_glass)

    hardware_table = table.get("hardware") or {}
    finish = (sel.hardware_finish or "mill-finish").strip().lower()
    if finish not in hardware_table:
        finish = "mill-finish"
    hardware = ctx.lookup(hardware_table, finish, "hardware")
    doors = _door_count(ctx, single_on_straight=sliding)

    ctx.per_area("Glass (sliding)" if sliding else "Glass (hinged)", glass_rate)
    ctx.flat(f"Hardware ({finish}) × {doors}", hardware * doors)


def _price_shower_openable_profile(ctx: PricingContext) -> None:
    rates, extras = ctx.rates, ctx.rule.extras
    doors = _door_count(ctx)
    ctx.per_area("Glass", ctx.num(rates.glass_rate, "glassRate", extras["glass_rate"]))
    ctx.flat(f"Hardware × {doors}", ctx.num(rates.hardware_per_door, "hardwarePerDoor", extras["hardware_per_door"]) * doors)


def _price_shower_sliding_profile(ctx: PricingContext) -> None:
    rates, sel, extras = ctx.rates, ctx.selection, ctx.rule.extras
    finish = (sel.hardware_finish or "mill-finish").strip().lower()
    glass_rate = ctx.num(rates.base_glass_rate, "baseGlassRate", extras["glass_rate"])
    if finish == "rose-gold":
        glass_rate += ctx.num(rates.rose_gold_extra_per_sqft, "roseGoldExtraPerSqft", extras["rose_gold_extra"])

    sliding_hw = ((rates.hardware or {}).get("sliding")) or {}
    if finish not in sliding_hw:
        finish = "mill-finish"
    dual_ok = ctx.feature("dualDoorLCorner")
    doors = _door_count(ctx, single_on_straight=True) if dual_ok else 1

    ctx.per_area("Glass", glass_rate)
    ctx.flat(f"Sliding hardware ({finish}) × {doors}", ctx.lookup(sliding_hw, finish, "hardware.sliding") * doors)


def _price_shower_fluted_profile(ctx: PricingContext) -> None:
    rates, sel, extras = ctx.rates, ctx.selection, ctx.rule.extras
    rate = ctx.num(rates.base_rate, "baseRate", extras["base_rate"])
    if (sel.glass_type or "").strip().lower() == "fluted":
        rate += ctx.num(rates.fluted_glass_extra, "flutedGlassExtra", extras["fluted_extra"])
    if (sel.profile or "").strip().lower() == "rose-gold":
        rate += ctx.num(rates.rose_gold_extra, "roseGoldExtra", extras["rose_gold_extra"])
    doors = _door_count(ctx)
    ctx.per_area("Glass", rate)
    ctx.flat(f"Hardware × {doors}", ctx.num(rates.hardware_per_door, "hardwarePerDoor", extras["hardware_per_door"]) * doors)


def _price_shower_fold_slide(ctx: PricingContext) -> None:
    rates, sel, extras = ctx.rates, ctx.selection, ctx.rule.extras
    rate = ctx.num(rates.base_rate, "baseRate", extras["base_rate"])
    glass = (sel.glass_type or sel.glass or "").strip().lower()
    if glass == "8mm-frosted":
        rate += ctx.num(rates.frosting_extra, "frostingExtra", extras["frosting_extra"])
    ctx.per_area("Glass", rate)
    ctx.flat("Fold & slide hardware set", ctx.num(rates.hardware_per_set, "hardwarePerSet", extras["hardware_per_set"]))
    if sel.lock_option and ctx.feature("lockOption"):
        ctx.flat("Lock", ctx.num(rates.lock_extra, "lockExtra", extras["lock_extra"]))


def _price_cladding_acp(ctx: PricingContext) -> None:
    rates, sel, extras = ctx.rates, ctx.selection, ctx.rule.extras
    engine = CladdingEngine(wastage_pct=ctx.num(rates.wastage_percent, "wastagePercent", extras["wastage_percent"]))
    project_type = sel.project_type if ctx.feature("frGradeOption") else "commercial"
    fr_rate = extras["fr_grade_rate"]
    fr_table = (rates.fr_grade_b or {}).get("4mm")
    if isinstance(fr_table, dict) and fr_table.get("plain") is not None:
        fr_rate = ctx.num(fr_table.get("plain"), "frGradeB.4mm.plain", fr_rate)
    rate = engine.acp_rate(rates.commercial, project_type, sel.thickness, sel.color_type, fr_rate)
    estimate = engine.acp_estimate(
        ctx.area * ctx.quantity,
        rate,
        ctx.num(rates.standard_sheet_sqft, "standardSheetSqft", extras["standard_sheet_sqft"]),
    )
    ctx.details.update(estimate)
    ctx.flat("ACP package (incl. wastage)", safe_number(estimate["total_cost"], "acp.total_cost") / ctx.quantity)


def _price_cladding_hpl(ctx: PricingContext) -> None:
    rates, sel, extras = ctx.rates, ctx.selection, ctx.rule.extras
    engine = CladdingEngine(wastage_pct=ctx.num(rates.wastage_percent, "wastagePercent", extras["wastage_percent"]))
    brands = rates.brands or {}
    brand_key = sel.brand if sel.brand in brands else next(iter(brands), "")
    if not brand_key:
        tracker.record_missing_key(ctx.product.id, "brands", sel.brand or "-")
        ctx.warn("No HPL brand rates configured")
        return
    install_rate = engine.installation_rate(rates.installation, sel.installation_type)
    estimate = engine.hpl_estimate(ctx.area * ctx.quantity, brands[brand_key], install_rate)
    ctx.details.update(estimate)
    ctx.details["brand"] = brand_key
    per_unit_sheets = safe_number(estimate["sheet_cost"], "hpl.sheet_cost") / ctx.quantity
    per_unit_install = safe_number(estimate["installation_cost"], "hpl.installation_cost") / ctx.quantity
    ctx.flat(f"HPL sheets ({brand_key})", per_unit_sheets)
    ctx.flat(f"Installation ({sel.installation_type})", per_unit_install)


_STRATEGIES: Dict[str, Callable[[PricingContext], None]] = {
    rules.STANDARD_WINDOW: _price_framed_opening,
    rules.CASEMENT: _price_framed_opening,
    rules.ENTRANCE_DOOR: _price_framed_opening,
    rules.TRACK_SLIDING: _price_track_sliding,
    rules.ELEVATION: _price_elevation,
    rules.TELESCOPIC: _price_telescopic,
    rules.FOLDING: _price_folding,
    rules.LOUVER: _price_louver,
    rules.SHOWER_FRAMELESS: _price_shower_frameless,
    rules.SHOWER_OPENABLE_PROFILE: _price_shower_openable_profile,
    rules.SHOWER_SLIDING_PROFILE: _price_shower_sliding_profile,
    rules.SHOWER_FLUTED_PROFILE: _price_shower_fluted_profile,
    rules.SHOWER_FOLD_SLIDE: _price_shower_fold_slide,
    rules.CLADDING_ACP: _price_cladding_acp,
    rules.CLADDING_HPL: _price_cladding_hpl,
}

_L_CORNER_ARCHETYPES = {
    rules.SHOWER_FRAMELESS,
    rules.SHOWER_OPENABLE_PROFILE,
    rules.SHOWER_SLIDING_PROFILE,
    rules.SHOWER_FLUTED_PROFILE,
}


# ---------------------------------------------------------------------------
# Height bounds
# ---------------------------------------------------------------------------

def _fluted_ceiling(product: ProductConfig, selection: OptionSelection) -> Optional[float]:
    key = rules.canonical_glass_key(selection.glass)
    if "fluted" not in key:
        return None
    ceilings = product.rates.fluted_max_heights or {}
    for colour, limit in ceilings.items():
        if colour in key and limit is not None and math.isfinite(limit):
            return limit
    return None


def height_check_for(product: ProductConfig, rule: rules.ArchetypeRule, height_ft: float, selection: OptionSelection):
    max_height = product.max_height or product.rates.max_height or rule.max_height
    recommended = product.standard_height or product.rates.standard_height or rule.recommended_height
    ceiling = _fluted_ceiling(product, selection)
    label = ""
    if ceiling is not None:
        key = rules.canonical_glass_key(selection.glass)
        colour = next((c for c in (product.rates.fluted_max_heights or {}) if c in key), "")
        label = f"{colour.capitalize()} fluted".strip()
    return check_height(height_ft, max_height, recommended, ceiling, label)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class PricingEngine:
    """Stateless evaluator; identical inputs always give identical results."""

    def __init__(self, strategies: Optional[Dict[str, Callable[[PricingContext], None]]] = None):
        self.strategies = dict(_STRATEGIES)
        if strategies:
            self.strategies.update(strategies)

    @timed
    def compute_price(
        self,
        product: ProductConfig,
        area: float,
        quantity: Any,
        selection: Optional[OptionSelection] = None,
        size: Optional[ResolvedSize] = None,
    ) -> PricingResult:
        """
        Price one product.

        area is square feet per unit. size is required for cutting-plan
        families (louvers) and for height validation; other families price
        from area alone.
        """
        selection = selection or OptionSelection()
        archetype = rules.resolve_archetype(product)
        rule = rules.ARCHETYPE_RULES[archetype]
        variance = rules.variance_for(product, rule)
        units = parse_quantity(quantity)
        tracker.record_pricing_pass()

        area = safe_number(area, "area", product.id)
        if area <= 0:
            return PricingResult(variance=variance, archetype=archetype)

        warnings: List[str] = []
        if size is not None and size.height_ft > 0:
            height = height_check_for(product, rule, size.height_ft, selection)
            if height.status == HeightStatus.BLOCKED:
                logger.info(f"Height {size.height_ft:.2f} ft blocked for {product.id}: {height.message}")
                return PricingResult(
                    variance=variance, archetype=archetype, warnings=[height.message], blocked=True,
                )
            if height.status == HeightStatus.WARNING:
                warnings.append(height.message)

        ctx = PricingContext(product, rule, area, units, selection, size)
        self.strategies[archetype](ctx)

        per_unit = ctx.per_unit_cost
        return PricingResult(
            per_unit_cost=per_unit,
            total_cost=per_unit * units,
            area_used=area,
            number_of_units=units,
            variance=variance,
            archetype=archetype,
            line_items=ctx.line_items,
            warnings=warnings + ctx.warnings,
            cutting_plan=ctx.cutting_plan,
            wastage=ctx.wastage,
            details=ctx.details,
        )

    def quote(
        self,
        product: ProductConfig,
        measurement: Measurement,
        selection: Optional[OptionSelection] = None,
    ) -> PricingResult:
        """Resolve raw measurements (units, L-corner walls) and price them."""
        selection = selection or OptionSelection()
        size = resolve_measurement(measurement)
        archetype = rules.resolve_archetype(product)
        if archetype not in _L_CORNER_ARCHETYPES or not is_l_corner(product, selection):
            size.right_width_ft = 0.0
        return self.compute_price(product, size.area, size.quantity, selection, size)

    def compute_multi_size(
        self,
        product: ProductConfig,
        rows: List[Measurement],
        selection: Optional[OptionSelection] = None,
    ) -> MultiSizeQuote:
        """Price several openings with the same options and sum them."""
        results = [self.quote(product, row, selection) for row in rows]
        variance = results[0].variance if results else rules.variance_for(product)
        return MultiSizeQuote(
            rows=results,
            total_cost=sum(r.total_cost for r in results),
            total_area=sum(r.area_used * r.number_of_units for r in results),
            total_units=sum(r.number_of_units for r in results),
            variance=variance,
        )
