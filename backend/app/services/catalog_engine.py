"""
Catalog engine — loads the product catalog and resolves each product's
effective rate tables against the global defaults.

Catalog source priority: remote URL (httpx) → local JSON file → embedded
fallback data. A failed remote or file load degrades to the fallback data;
it is logged, never raised.
"""
import json
import math
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import ValidationError

from app.config import DEFAULT_CATALOG_TIMEOUT_S, Settings
from app.models.catalog_schema import (
    CatalogDocument,
    FlatMesh,
    ProductConfig,
    TieredMesh,
)
from app.services.fallback_catalog import FALLBACK_CATALOG

logger = logging.getLogger("quote-engine.catalog")

# Global categories that take part in the merge, keyed by catalog name
_MERGE_FIELDS: Dict[str, str] = {
    "glass": "glass",
    "coating": "coating",
    "lock": "lock",
    "mesh": "mesh",
    "grill": "grill",
}


class ProductNotFoundError(LookupError):
    """Requested product id is not in the loaded catalog. No retry is attempted."""

    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class CatalogLoadError(RuntimeError):
    """Remote or file catalog could not be loaded; triggers the embedded fallback."""


# ---------------------------------------------------------------------------
# Merge helpers
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def _is_override(value: Any) -> bool:
    """A product value wins over the global one only when it is a real, non-zero number."""
    return _is_number(value) and value != 0


def merge_rate_table(
    global_table: Dict[str, Any],
    product_table: Optional[Dict[str, Any]],
) -> Dict[str, float]:
    """
    Overlay a product's rate table onto the global one.

    Zero, null and NaN product values mean "use global". Product-only keys
    with no global counterpart are kept as declared.
    """
    merged = {k: v for k, v in global_table.items() if v is not None}
    for key, value in (product_table or {}).items():
        if _is_override(value):
            merged[key] = value
        elif key not in merged and _is_number(value):
            merged[key] = value
    return merged


def _mesh_variant(mesh: Any):
    if mesh is None:
        return None
    if isinstance(mesh, dict):
        return TieredMesh(tiers={k: v for k, v in mesh.items() if _is_number(v)})
    return FlatMesh(amount=mesh if _is_number(mesh) else 0.0)


def resolve_product(product: ProductConfig, global_rates: Dict[str, Dict[str, Any]]) -> ProductConfig:
    """
    Return a copy of *product* with global defaults merged in and the mesh
    rate resolved to a Flat or Tiered variant.

    The loaded catalog record is never mutated.
    """
    resolved = product.model_copy(deep=True)
    rates = resolved.rates

    if rates.use_global_rates and global_rates:
        for category, global_table in global_rates.items():
            field_name = _MERGE_FIELDS.get(category)
            if field_name is None or not global_table:
                continue
            if category == "mesh" and _is_number(rates.mesh):
                # Legacy flat mesh stays as-is; structured tiers ride alongside
                rates.mesh_object = merge_rate_table(global_table, None)
                continue
            own = getattr(rates, field_name)
            setattr(rates, field_name, merge_rate_table(global_table, own if isinstance(own, dict) else None))

    rates.mesh_rate = _mesh_variant(rates.mesh)
    return resolved


def parse_catalog_document(raw: Any) -> CatalogDocument:
    """
    Validate a catalog document record by record.

    A product record that fails validation is logged and skipped; the rest
    of the catalog is kept. Raises CatalogLoadError when the payload is not
    a catalog object or no product survives.
    """
    if not isinstance(raw, dict):
        raise CatalogLoadError(f"catalog document must be an object, got {type(raw).__name__}")

    global_rates = CatalogDocument.model_validate({"globalRates": raw.get("globalRates") or {}}).global_rates
    products: List[ProductConfig] = []
    records = raw.get("products")
    for index, record in enumerate(records if isinstance(records, list) else []):
        try:
            products.append(ProductConfig.model_validate(record))
        except ValidationError as exc:
            product_id = record.get("id", "?") if isinstance(record, dict) else "?"
            logger.warning(f"Skipping catalog product #{index} ({product_id}): {exc.error_count()} validation error(s)")
            logger.debug(f"Validation errors for {product_id}: {exc}")

    if not products:
        raise CatalogLoadError("catalog document has no valid products")
    return CatalogDocument(
        global_rates={k: v for k, v in global_rates.items() if v is not None},
        products=products,
    )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class ProductCatalog:
    """
    Session-scoped configuration store.

    The catalog document is loaded once per instance; resolved products are
    memoized by id after the first merge.
    """

    def __init__(
        self,
        catalog_url: str = "",
        catalog_path: str = "",
        timeout_s: float = DEFAULT_CATALOG_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.catalog_url = catalog_url
        self.catalog_path = catalog_path
        self.timeout_s = timeout_s
        self._transport = transport
        self._products: Optional[List[ProductConfig]] = None
        self._global_rates: Dict[str, Dict[str, Any]] = {}
        self._cache: Dict[str, ProductConfig] = {}
        self.catalog_source: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "ProductCatalog":
        return cls(
            catalog_url=settings.catalog_url,
            catalog_path=settings.catalog_path,
            timeout_s=settings.catalog_timeout_s,
            transport=transport,
        )

    async def _fetch_document(self) -> Tuple[Dict[str, Any], str]:
        if self.catalog_url:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.get(self.catalog_url)
            if not response.is_success:
                raise CatalogLoadError(f"HTTP {response.status_code} from {self.catalog_url}")
            return response.json(), "remote"
        if self.catalog_path:
            with open(self.catalog_path, encoding="utf-8") as fh:
                return json.load(fh), "file"
        raise CatalogLoadError("no catalog source configured")

    async def load_catalog(self) -> Tuple[List[ProductConfig], Dict[str, Dict[str, Any]]]:
        """Load the catalog once; later calls return the loaded data."""
        if self._products is not None:
            return self._products, self._global_rates

        try:
            raw, source = await self._fetch_document()
            document = parse_catalog_document(raw)
        except (CatalogLoadError, httpx.HTTPError, ValidationError, ValueError, OSError) as exc:
            if self.catalog_url or self.catalog_path:
                logger.warning(f"Catalog load failed ({type(exc).__name__}: {exc}); using embedded fallback data")
            else:
                logger.info("No catalog source configured; using embedded fallback data")
            document = CatalogDocument.model_validate(FALLBACK_CATALOG)
            source = "fallback"

        self._products = document.products
        self._global_rates = document.global_rates
        self.catalog_source = source
        logger.info(f"Catalog loaded from {source}: {len(self._products)} products")
        return self._products, self._global_rates

    async def get_product(self, product_id: str) -> ProductConfig:
        """Resolve a product by id, merging global rates on first access."""
        cached = self._cache.get(product_id)
        if cached is not None:
            return cached

        products, global_rates = await self.load_catalog()
        product = next((p for p in products if p.id == product_id), None)
        if product is None:
            logger.error(f"Product not found: {product_id} (catalog source: {self.catalog_source})")
            raise ProductNotFoundError(product_id)

        resolved = resolve_product(product, global_rates)
        self._cache[product_id] = resolved
        return resolved

    async def products_by_category(self, category: str) -> List[ProductConfig]:
        products, _ = await self.load_catalog()
        return [p for p in products if p.category == category and p.is_active]

    async def search_products(self, query: str) -> List[ProductConfig]:
        """Case-insensitive match on name, description or category."""
        products, _ = await self.load_catalog()
        needle = query.lower()
        return [
            p for p in products
            if needle in p.name.lower()
            or needle in (p.description or "").lower()
            or needle in p.category.lower()
        ]

    def clear_cache(self) -> None:
        self._cache.clear()
        self._products = None
        self._global_rates = {}
        self.catalog_source = None
