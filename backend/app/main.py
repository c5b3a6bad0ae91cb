"""
Fabrication Quote Engine API v1.0
FastAPI backend serving live price estimates for aluminium windows, doors,
shower partitions, louvers and cladding, with lead capture that unlocks
exact pricing.
"""
import time
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.deps import SessionRegistry
from app.config import SESSION_HEADER, Settings, get_settings
from app.services.catalog_engine import ProductCatalog
from app.services.delivery_channel import HttpLeadDeliveryChannel
from app.services.diagnostics import tracker
from app.services.lead_gateway import LeadSubmissionGateway
from app.services.logging_config import setup_logging
from app.services.middleware import RequestTimingMiddleware
from app.services.pricing_engine import PricingEngine

# Load .env file automatically in dev (no-op if the file is missing)
load_dotenv()

logger = logging.getLogger("quote-engine")

APP_VERSION = "1.0.0"

# Record process start time for uptime calculation
_PROCESS_START = time.monotonic()


def create_app(
    settings: Optional[Settings] = None,
    catalog_transport: Optional[httpx.AsyncBaseTransport] = None,
    delivery_transport: Optional[httpx.AsyncBaseTransport] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build the API. Transports are injectable so tests can stand in for the
    catalog host and the email relays.
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(level=settings.log_level, json_output=settings.json_logs)

    if not settings.catalog_url and not settings.catalog_path:
        logger.info("Optional env var not set: CATALOG_URL / CATALOG_PATH (embedded catalog will be used)")
    if not settings.email_worker_url and not settings.web3forms_access_key:
        logger.warning("MISSING env var: EMAIL_WORKER_URL or WEB3FORMS_ACCESS_KEY; leads will not be delivered")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        catalog = ProductCatalog.from_settings(settings, transport=catalog_transport)
        await catalog.load_catalog()
        channel = HttpLeadDeliveryChannel.from_settings(settings, transport=delivery_transport)

        app.state.settings = settings
        app.state.catalog = catalog
        app.state.pricing_engine = PricingEngine()
        app.state.delivery_channel = channel
        app.state.lead_gateway = LeadSubmissionGateway(channel, resubmit_timeout_s=settings.lead_resubmit_timeout_s)
        app.state.sessions = SessionRegistry(max_sessions=settings.max_sessions)
        yield

    app = FastAPI(
        title="Fabrication Quote Engine API",
        version=APP_VERSION,
        description="Live price estimates for aluminium & glass fabrication products",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Requested-With", SESSION_HEADER],
        expose_headers=[SESSION_HEADER, "X-Request-ID", "X-Process-Time"],
    )
    # Request timing + session id must be outermost so it wraps all other middleware
    app.add_middleware(RequestTimingMiddleware)

    from app.api.catalog_routes import router as catalog_router
    from app.api.quote_routes import router as quote_router
    from app.api.lead_routes import router as lead_router

    app.include_router(catalog_router)
    app.include_router(quote_router)
    app.include_router(lead_router)

    @app.get("/health")
    async def health_check():
        catalog = getattr(app.state, "catalog", None)
        return {
            "status": "active",
            "version": APP_VERSION,
            "catalog_source": catalog.catalog_source if catalog else None,
            "lead_delivery_configured": bool(settings.email_worker_url or settings.web3forms_access_key),
        }

    @app.get("/health/diagnostics")
    async def diagnostics():
        """
        Pricing health counters.

        Non-zero coerced or missing-key counts mean the catalog priced some
        selected option as free; see the WARNING logs for which product.
        """
        return {
            "uptime_seconds": round(time.monotonic() - _PROCESS_START, 1),
            **tracker.snapshot(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
