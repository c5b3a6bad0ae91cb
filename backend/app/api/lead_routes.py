"""Lead API routes — capture a lead, unlock exact pricing, queue delivery."""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status

from app.api.deps import (
    SessionRegistry,
    get_engine,
    get_gateway,
    get_product,
    get_session,
    get_sessions,
)
from app.api.quote_routes import present
from app.models.catalog_schema import ProductConfig
from app.models.quote_models import LeadRequest, LeadResponse
from app.services.lead_gateway import LeadSubmissionGateway, build_quote_summary
from app.services.pricing_engine import PricingEngine
from app.services.quote_policy import LeadValidationError, QuoteSession, validate_lead

router = APIRouter(prefix="/api/leads", tags=["Leads"])
logger = logging.getLogger("quote-engine.leads")


@router.post("/{product_id}", response_model=LeadResponse, response_model_exclude_none=True,
             status_code=status.HTTP_202_ACCEPTED)
async def submit_lead(
    body: LeadRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    product: ProductConfig = Depends(get_product),
    engine: PricingEngine = Depends(get_engine),
    gateway: LeadSubmissionGateway = Depends(get_gateway),
    session: QuoteSession = Depends(get_session),
    sessions: SessionRegistry = Depends(get_sessions),
):
    """
    Validate the lead form and switch the session to exact pricing.

    Delivery runs after the response is sent; whether it succeeds has no
    effect on the response or on the session's display mode.
    """
    try:
        lead = validate_lead(body.name, body.city, body.mobile, body.email)
    except LeadValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    session.capture_lead(lead)
    sessions.save(session)

    measurement = body.measurement.to_measurement()
    selection = body.selection.to_selection()
    result = engine.quote(product, measurement, selection)
    session.remember(product.id, result)

    subject, message = build_quote_summary(product, measurement, selection, result, lead)
    accepted = await gateway.submit_lead(
        subject, message, lead, key=session.session_id, schedule=background_tasks.add_task,
    )
    if not accepted:
        logger.info(f"Duplicate lead for {product.id} while previous delivery is in flight",
                    extra={"session_id": session.session_id, "product_id": product.id})

    return LeadResponse(
        accepted=accepted,
        mode=session.mode.value,
        quote=present(session, product.id, result),
        whatsapp_url=request.app.state.delivery_channel.whatsapp_link(message),
    )
