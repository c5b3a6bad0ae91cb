import math
import logging
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationInfo

logger = logging.getLogger("quote-engine.catalog")


def _lenient_number(value: Any) -> Optional[float]:
    """
    Accept anything a hand-edited catalog might carry for a rate.

    Numbers and numeric strings become floats; null stays None; anything else
    becomes NaN so the pricing guards can log it and coerce it to 0 instead
    of the whole catalog failing validation.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


Rate = Annotated[Optional[float], BeforeValidator(_lenient_number)]
RateTable = Dict[str, Rate]


def _lenient_table(value: Any, info: ValidationInfo) -> Optional[dict]:
    """Descriptive text where a category table belongs is dropped, not fatal."""
    if value is None or isinstance(value, dict):
        return value
    logger.warning(f"Ignoring non-table value for {info.field_name}: {value!r}")
    return None


def _lenient_mesh(value: Any, info: ValidationInfo) -> Any:
    if value is None or isinstance(value, dict):
        return value
    number = _lenient_number(value)
    if number is None or math.isnan(number):
        logger.warning(f"Ignoring non-numeric value for {info.field_name}: {value!r}")
        return None
    return number


Table = Annotated[Optional[RateTable], BeforeValidator(_lenient_table)]
DetailTable = Annotated[Optional[Dict[str, Any]], BeforeValidator(_lenient_table)]


class FlatMesh(BaseModel):
    """Legacy mesh rate: one per-sqft amount regardless of mesh tier."""
    kind: Literal["flat"] = "flat"
    amount: float = 0.0


class TieredMesh(BaseModel):
    """Mesh rate keyed by tier: standard (sliding), openable (casement), security (doors)."""
    kind: Literal["tiered"] = "tiered"
    tiers: Dict[str, float] = Field(default_factory=dict)


MeshRate = Annotated[Union[FlatMesh, TieredMesh], Field(discriminator="kind")]


class ProductRates(BaseModel):
    """
    Rate tables for one sellable variant.

    Field aliases follow the camelCase keys of the catalog JSON document.
    Family-specific keys are declared explicitly; anything else the catalog
    carries (marketing copy, sheet sizes, hardware inclusions) is kept as extra.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    # Shared per-sqft base and per-unit hardware
    base_rate: Rate = Field(None, alias="baseRate", description="Base rate per sqft")
    hardware_cost: Rate = Field(None, alias="hardwareCost", description="Flat hardware cost per unit")
    hardware_cost_multi_point: Rate = Field(
        None, alias="hardwareCostMultiPoint", description="Upgraded hardware tier for heavy glass / multi-point lock"
    )
    use_global_rates: bool = Field(False, alias="useGlobalRates")
    price_variance: Rate = Field(None, alias="priceVariance", description="Overrides the family range variance")

    # Surcharge categories
    glass: Table = None
    coating: Table = None
    lock: Table = None
    mesh: Annotated[Optional[Union[float, RateTable]], BeforeValidator(_lenient_mesh)] = Field(
        None, description="Flat number (legacy) or tier table"
    )
    grill: Table = None
    fluted_glass: Table = Field(None, alias="flutedGlass")
    fluted_max_heights: Table = Field(None, alias="flutedMaxHeights")
    premium_colors: Table = Field(None, alias="premiumColors")
    track_options: Table = Field(None, alias="trackOptions")
    panel_config: Table = Field(None, alias="panelConfig")
    profiles: DetailTable = None

    # Louver / profile cutting
    profile_gap: Rate = Field(None, alias="profileGap", description="Centre-to-centre spacing in inches")
    profile_lengths: Optional[List[Rate]] = Field(None, alias="profileLengths", description="Stock lengths in ft")
    profile_weight_12ft: Rate = Field(None, alias="profileWeight12ft", description="kg per 12 ft stock length")
    aluminium_rate_per_kg: Rate = Field(None, alias="aluminiumRatePerKg")
    coating_rate_per_ft: Rate = Field(None, alias="coatingRatePerFt")
    extra_wastage_percent: Rate = Field(None, alias="extraWastagePercent")

    # Shower partitions
    hinged: DetailTable = None
    sliding: DetailTable = None
    glass_rate: Rate = Field(None, alias="glassRate")
    base_glass_rate: Rate = Field(None, alias="baseGlassRate")
    rose_gold_extra_per_sqft: Rate = Field(None, alias="roseGoldExtraPerSqft")
    hardware_per_door: Rate = Field(None, alias="hardwarePerDoor")
    hardware: DetailTable = None
    fluted_glass_extra: Rate = Field(None, alias="flutedGlassExtra")
    rose_gold_extra: Rate = Field(None, alias="roseGoldExtra")
    frosting_extra: Rate = Field(None, alias="frostingExtra")
    hardware_per_set: Rate = Field(None, alias="hardwarePerSet")
    lock_extra: Rate = Field(None, alias="lockExtra")

    # Cladding sheets
    wastage_percent: Rate = Field(None, alias="wastagePercent")
    standard_sheet_sqft: Rate = Field(None, alias="standardSheetSqft")
    commercial: DetailTable = None
    fr_grade_b: DetailTable = Field(None, alias="frGradeB")
    brands: DetailTable = None
    installation: DetailTable = None

    # Bounds some catalogs place inside rates instead of on the product
    max_height: Rate = Field(None, alias="maxHeight")
    standard_height: Rate = Field(None, alias="standardHeight")

    # Populated by the global-rate merge; never read from the catalog document
    mesh_rate: Optional[MeshRate] = Field(None, alias="meshRate")
    mesh_object: Table = Field(None, alias="meshObject")


class ProductConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., description="Stable product id, e.g. 29mm-sliding")
    name: str = Field("", description="Display name")
    slug: str = ""
    category: str = ""
    subcategory: str = ""
    status: str = "active"
    rates: ProductRates = Field(default_factory=ProductRates)
    features: List[str] = Field(default_factory=list)
    max_height: Rate = Field(None, alias="maxHeight", description="Absolute height ceiling in ft")
    standard_height: Rate = Field(None, alias="standardHeight", description="Recommended height in ft")
    description: str = ""
    archetype: Optional[str] = Field(None, description="Pricing family tag; resolved from id when absent")

    def has_feature(self, flag: str) -> bool:
        return flag in self.features

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class CatalogDocument(BaseModel):
    """Bulk catalog payload: {globalRates, products}."""
    model_config = ConfigDict(populate_by_name=True)

    global_rates: Dict[str, Table] = Field(default_factory=dict, alias="globalRates")
    products: List[ProductConfig] = Field(default_factory=list)
