"""FastAPI dependency injection — catalog, engines and per-visitor quote sessions."""
import logging
from collections import OrderedDict

from fastapi import Depends, HTTPException, Request, status

from app.config import DEFAULT_MAX_SESSIONS, SESSION_HEADER
from app.models.catalog_schema import ProductConfig
from app.services.catalog_engine import ProductCatalog, ProductNotFoundError
from app.services.lead_gateway import LeadSubmissionGateway
from app.services.pricing_engine import PricingEngine
from app.services.quote_policy import QuoteSession

logger = logging.getLogger("quote-engine.api")


class SessionRegistry:
    """
    In-memory QuoteSession store keyed by the X-Session-ID value.

    Range mode needs no server-side state, so only sessions that captured a
    lead are kept. The store is capped; the least recently used session is
    evicted first and that visitor sees range pricing again.
    """

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS):
        self.max_sessions = max(1, max_sessions)
        self._sessions: "OrderedDict[str, QuoteSession]" = OrderedDict()

    def get(self, session_id: str) -> QuoteSession:
        """Stored session for *session_id*, or a fresh unstored one in range mode."""
        session = self._sessions.get(session_id)
        if session is None:
            return QuoteSession(session_id=session_id)
        self._sessions.move_to_end(session_id)
        return session

    def save(self, session: QuoteSession) -> None:
        self._sessions[session.session_id] = session
        self._sessions.move_to_end(session.session_id)
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(f"Session store full; evicted {evicted}")

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


def get_catalog(request: Request) -> ProductCatalog:
    return request.app.state.catalog


def get_engine(request: Request) -> PricingEngine:
    return request.app.state.pricing_engine


def get_gateway(request: Request) -> LeadSubmissionGateway:
    return request.app.state.lead_gateway


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_session(request: Request) -> QuoteSession:
    # Set by RequestTimingMiddleware; the header fallback covers apps built without it
    session_id = getattr(request.state, "session_id", None) or request.headers.get(SESSION_HEADER) or "anonymous"
    return get_sessions(request).get(session_id)


async def get_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)) -> ProductConfig:
    try:
        return await catalog.get_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
