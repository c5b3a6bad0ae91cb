"""Catalog API routes — list, search and fetch resolved products."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.api.deps import get_catalog, get_product
from app.models.catalog_schema import ProductConfig
from app.services.catalog_engine import ProductCatalog
from app.services.pricing_rules import resolve_archetype, variance_for

router = APIRouter(prefix="/api/products", tags=["Products"])
logger = logging.getLogger("quote-engine.catalog")


class ProductSummary(BaseModel):
    id: str
    name: str = ""
    slug: str = ""
    category: str = ""
    subcategory: str = ""
    archetype: str
    features: List[str] = []
    description: str = ""


def _summary(product: ProductConfig) -> ProductSummary:
    return ProductSummary(
        id=product.id,
        name=product.name,
        slug=product.slug,
        category=product.category,
        subcategory=product.subcategory,
        archetype=resolve_archetype(product),
        features=list(product.features),
        description=product.description,
    )


@router.get("", response_model=List[ProductSummary])
async def list_products(
    category: Optional[str] = Query(None, description="Exact category slug"),
    q: Optional[str] = Query(None, description="Free-text search on name, description and category"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Active catalog products, optionally filtered by category and/or search text."""
    if category:
        products = await catalog.products_by_category(category)
    else:
        products, _ = await catalog.load_catalog()
        products = [p for p in products if p.is_active]
    if q:
        matches = {p.id for p in await catalog.search_products(q)}
        products = [p for p in products if p.id in matches]
    return [_summary(p) for p in products]


@router.get("/{product_id}")
async def get_product_detail(product: ProductConfig = Depends(get_product)):
    """Product with global rates merged in, as the pricing engine sees it."""
    payload = product.model_dump(by_alias=True, exclude_none=True)
    payload["archetype"] = resolve_archetype(product)
    payload["variance"] = variance_for(product)
    return payload
