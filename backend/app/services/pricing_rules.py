"""
Pricing rule descriptors — one declarative record per product family.

Each archetype names the quirks its strategy function applies: which glass
is bundled into the base rate, which glass triggers the hardware upgrade,
which mesh tier it reads, its range variance and its height bounds.
Import from here rather than hardcoding family constants in the evaluator.
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

from app.models.catalog_schema import ProductConfig

# ── Archetype tags ─────────────────────────────────────────────────────────────
STANDARD_WINDOW = "standard_window"
TRACK_SLIDING = "track_sliding"
CASEMENT = "casement"
ENTRANCE_DOOR = "entrance_door"
ELEVATION = "elevation"
TELESCOPIC = "telescopic"
FOLDING = "folding"
LOUVER = "louver"
SHOWER_FRAMELESS = "shower_frameless"
SHOWER_OPENABLE_PROFILE = "shower_openable_profile"
SHOWER_SLIDING_PROFILE = "shower_sliding_profile"
SHOWER_FLUTED_PROFILE = "shower_fluted_profile"
SHOWER_FOLD_SLIDE = "shower_fold_slide"
CLADDING_ACP = "cladding_acp"
CLADDING_HPL = "cladding_hpl"

# ── Range variance ─────────────────────────────────────────────────────────────
DEFAULT_VARIANCE: float = 0.20
SHOWER_VARIANCE: float = 0.15

# ── Glass canonicalisation ─────────────────────────────────────────────────────
# Several option strings price off the same rate key.
GLASS_KEY_ALIASES: Dict[str, str] = {
    "dgu-20mm": "dgu",
    "safety-13.52mm": "safety",
    "laminated-13.52mm": "laminated",
}

CASEMENT_HEAVY_GLASS: FrozenSet[str] = frozenset({"10mm", "12mm", "dgu", "laminated", "safety"})
ENTRANCE_HEAVY_GLASS: FrozenSet[str] = frozenset({"12mm", "dgu", "safety"})

# Coating choices priced into the base rate
FREE_COATINGS: FrozenSet[str] = frozenset({"", "regular", "texture", "smooth", "standard", "none"})


def canonical_glass_key(option: Optional[str]) -> str:
    key = (option or "").strip().lower()
    return GLASS_KEY_ALIASES.get(key, key)


@dataclass(frozen=True)
class ArchetypeRule:
    name: str
    variance: float = DEFAULT_VARIANCE
    baseline_glass: FrozenSet[str] = frozenset({"6mm"})
    heavy_glass: FrozenSet[str] = frozenset()
    mesh_tier: Optional[str] = None
    default_hardware: float = 0.0
    default_multipoint_hardware: float = 0.0
    recommended_height: Optional[float] = None
    max_height: Optional[float] = None
    # Lock selector offered without a feature flag (base sliding calculator)
    intrinsic_lock: bool = False
    # Paid coating finishes offered (casements ship in one finish)
    coating_option: bool = True
    extras: Dict[str, float] = field(default_factory=dict)


ARCHETYPE_RULES: Dict[str, ArchetypeRule] = {
    STANDARD_WINDOW: ArchetypeRule(
        name=STANDARD_WINDOW,
        mesh_tier="standard",
        default_hardware=2200.0,
        intrinsic_lock=True,
    ),
    TRACK_SLIDING: ArchetypeRule(
        name=TRACK_SLIDING,
        baseline_glass=frozenset({"5mm"}),
        default_hardware=800.0,
        recommended_height=6.0,
        max_height=8.0,
    ),
    CASEMENT: ArchetypeRule(
        name=CASEMENT,
        heavy_glass=CASEMENT_HEAVY_GLASS,
        mesh_tier="openable",
        default_hardware=650.0,
        default_multipoint_hardware=1400.0,
        coating_option=False,
    ),
    ENTRANCE_DOOR: ArchetypeRule(
        name=ENTRANCE_DOOR,
        baseline_glass=frozenset({"8mm"}),
        heavy_glass=ENTRANCE_HEAVY_GLASS,
        mesh_tier="security",
        default_hardware=1800.0,
        default_multipoint_hardware=2200.0,
        max_height=10.0,
        extras={"security_mesh": 280.0},
    ),
    ELEVATION: ArchetypeRule(
        name=ELEVATION,
        baseline_glass=frozenset({"6mm"}),
        max_height=12.0,
    ),
    TELESCOPIC: ArchetypeRule(
        name=TELESCOPIC,
        baseline_glass=frozenset({"8mm-clear"}),
        extras={"panel_hardware": 4500.0},
    ),
    FOLDING: ArchetypeRule(
        name=FOLDING,
        baseline_glass=frozenset({"8mm-clear"}),
    ),
    LOUVER: ArchetypeRule(
        name=LOUVER,
        baseline_glass=frozenset(),
        extras={"profile_gap_in": 12.0, "reference_length_ft": 12.0},
    ),
    SHOWER_FRAMELESS: ArchetypeRule(
        name=SHOWER_FRAMELESS,
        variance=SHOWER_VARIANCE,
        baseline_glass=frozenset(),
        recommended_height=7.0,
        max_height=8.0,
        extras={"hinged_glass": 350.0, "sliding_glass": 450.0},
    ),
    SHOWER_OPENABLE_PROFILE: ArchetypeRule(
        name=SHOWER_OPENABLE_PROFILE,
        variance=SHOWER_VARIANCE,
        baseline_glass=frozenset(),
        recommended_height=7.0,
        max_height=8.0,
        extras={"glass_rate": 650.0, "hardware_per_door": 4500.0},
    ),
    SHOWER_SLIDING_PROFILE: ArchetypeRule(
        name=SHOWER_SLIDING_PROFILE,
        variance=SHOWER_VARIANCE,
        baseline_glass=frozenset(),
        recommended_height=7.0,
        max_height=8.0,
        extras={"glass_rate": 650.0, "rose_gold_extra": 100.0},
    ),
    SHOWER_FLUTED_PROFILE: ArchetypeRule(
        name=SHOWER_FLUTED_PROFILE,
        variance=SHOWER_VARIANCE,
        baseline_glass=frozenset(),
        recommended_height=7.0,
        max_height=8.0,
        extras={"base_rate": 850.0, "fluted_extra": 100.0, "rose_gold_extra": 50.0, "hardware_per_door": 7500.0},
    ),
    SHOWER_FOLD_SLIDE: ArchetypeRule(
        name=SHOWER_FOLD_SLIDE,
        variance=SHOWER_VARIANCE,
        baseline_glass=frozenset(),
        extras={"base_rate": 1250.0, "frosting_extra": 25.0, "hardware_per_set": 9500.0, "lock_extra": 2500.0},
    ),
    CLADDING_ACP: ArchetypeRule(
        name=CLADDING_ACP,
        baseline_glass=frozenset(),
        extras={"wastage_percent": 5.0, "standard_sheet_sqft": 48.0, "fr_grade_rate": 520.0},
    ),
    CLADDING_HPL: ArchetypeRule(
        name=CLADDING_HPL,
        baseline_glass=frozenset(),
        extras={"wastage_percent": 5.0},
    ),
}


# ── Archetype resolution ───────────────────────────────────────────────────────
# Explicit tag on the product wins, then this id registry, then subcategory,
# then category, then the standard window shape.
PRODUCT_ARCHETYPES: Dict[str, str] = {
    "3track-sliding": TRACK_SLIDING,
    "top-hung-casement": CASEMENT,
    "georgian-bar-openable": CASEMENT,
    "french-georgian-bar": ENTRANCE_DOOR,
    "slim-entrance-glass-door": ENTRANCE_DOOR,
    "full-elevation-villa-facade": ELEVATION,
    "telescopic-slim-sliding-door": TELESCOPIC,
    "fold-bifold-aluminium-doors": FOLDING,
    "fold-sliding-window-system": FOLDING,
    "frameless-shower-partition": SHOWER_FRAMELESS,
    "premium-black-profile-shower": SHOWER_OPENABLE_PROFILE,
    "black-profile-shower-partition": SHOWER_SLIDING_PROFILE,
    "slim-gold-profile-fluted-shower": SHOWER_FLUTED_PROFILE,
    "frosted-glass-bathroom-door": SHOWER_FOLD_SLIDE,
    "acp-elevation": CLADDING_ACP,
    "hpl-exterior-cladding": CLADDING_HPL,
}

SUBCATEGORY_ARCHETYPES: Dict[str, str] = {
    "casement": CASEMENT,
    "french-door": ENTRANCE_DOOR,
    "entrance-door": ENTRANCE_DOOR,
    "full-elevation": ELEVATION,
    "telescopic": TELESCOPIC,
    "bifold": FOLDING,
    "fold-sliding": FOLDING,
    "frameless": SHOWER_FRAMELESS,
    "black-profile": SHOWER_OPENABLE_PROFILE,
    "black-profile-sliding": SHOWER_SLIDING_PROFILE,
    "gold-profile": SHOWER_FLUTED_PROFILE,
    "fold-slide-door": SHOWER_FOLD_SLIDE,
    "acp-cladding": CLADDING_ACP,
    "hpl-cladding": CLADDING_HPL,
}

CATEGORY_ARCHETYPES: Dict[str, str] = {
    "metal-louvers": LOUVER,
    "telescope-windows": TELESCOPIC,
    "folding-systems": FOLDING,
}


def resolve_archetype(product: ProductConfig) -> str:
    if product.archetype and product.archetype in ARCHETYPE_RULES:
        return product.archetype
    if product.id in PRODUCT_ARCHETYPES:
        return PRODUCT_ARCHETYPES[product.id]
    if product.has_feature("louverCalculation"):
        return LOUVER
    if product.subcategory in SUBCATEGORY_ARCHETYPES:
        return SUBCATEGORY_ARCHETYPES[product.subcategory]
    return CATEGORY_ARCHETYPES.get(product.category, STANDARD_WINDOW)


def rule_for(product: ProductConfig) -> ArchetypeRule:
    return ARCHETYPE_RULES[resolve_archetype(product)]


def variance_for(product: ProductConfig, rule: Optional[ArchetypeRule] = None) -> float:
    """Per-product priceVariance wins over the family default when it is a usable fraction."""
    rule = rule or rule_for(product)
    override = product.rates.price_variance
    if override is not None and 0 <= override < 1:
        return float(override)
    return rule.variance
