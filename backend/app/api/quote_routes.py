"""Quote API routes — single and multi-size pricing, direct cutting plans."""
import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_engine, get_product, get_session
from app.models.catalog_schema import ProductConfig
from app.models.quote_models import (
    CuttingPlanOut,
    CuttingPlanRequest,
    DisplayValueOut,
    MultiQuoteRequest,
    MultiQuoteResponse,
    QuoteRequest,
    QuoteResponse,
)
from app.services.cutting_list_engine import REFERENCE_STOCK_LENGTH_FT, cost_wastage, plan_cutting
from app.services.pricing_engine import PricingEngine, PricingResult
from app.services.quote_policy import QuoteSession

router = APIRouter(prefix="/api", tags=["Quotes"])
logger = logging.getLogger("quote-engine.quotes")


def present(session: QuoteSession, product_id: str, result: PricingResult) -> QuoteResponse:
    """Shape a pricing result for the session's current display mode."""
    return QuoteResponse.build(
        product_id,
        result,
        per_unit=session.presented_amount(result.per_unit_cost, result.variance),
        total=session.presented_amount(result.total_cost, result.variance),
    )


@router.post("/quotes/{product_id}", response_model=QuoteResponse, response_model_exclude_none=True)
async def quote_product(
    body: QuoteRequest,
    product: ProductConfig = Depends(get_product),
    engine: PricingEngine = Depends(get_engine),
    session: QuoteSession = Depends(get_session),
):
    """Price one opening; invalid dimensions give a zero quote, never an error."""
    result = engine.quote(product, body.measurement.to_measurement(), body.selection.to_selection())
    session.remember(product.id, result)
    return present(session, product.id, result)


@router.post("/quotes/{product_id}/multi", response_model=MultiQuoteResponse, response_model_exclude_none=True)
async def quote_multi_size(
    body: MultiQuoteRequest,
    product: ProductConfig = Depends(get_product),
    engine: PricingEngine = Depends(get_engine),
    session: QuoteSession = Depends(get_session),
):
    """Price several sizes of the same product with one option set."""
    multi = engine.compute_multi_size(
        product,
        [row.to_measurement() for row in body.rows],
        body.selection.to_selection(),
    )
    return MultiQuoteResponse(
        product_id=product.id,
        mode=session.mode.value,
        rows=[present(session, product.id, row) for row in multi.rows],
        total=DisplayValueOut.from_display(session.presented_amount(multi.total_cost, multi.variance)),
        total_area=multi.total_area,
        total_units=multi.total_units,
    )


@router.post("/cutting-plan", response_model=CuttingPlanOut, response_model_exclude_none=True)
async def cutting_plan(body: CuttingPlanRequest):
    """Pick the stock length with least offcut for a batch of equal pieces."""
    plan = plan_cutting(body.piece_length, body.piece_count, body.stock_lengths)
    wastage_cost = None
    if body.reference_weight_kg is not None:
        wastage = cost_wastage(
            plan.wastage_length,
            reference_weight_kg=body.reference_weight_kg,
            aluminium_rate_per_kg=body.aluminium_rate_per_kg,
            coating_rate_per_ft=body.coating_rate_per_ft,
            extra_wastage_percent=body.extra_wastage_percent,
            reference_length_ft=REFERENCE_STOCK_LENGTH_FT,
        )
        wastage_cost = wastage.total
    return CuttingPlanOut.from_plan(plan, wastage_cost)
